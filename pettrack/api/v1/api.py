from fastapi import APIRouter

from pettrack.api.v1.endpoints import health, history, missing, pets, tracking, users

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(pets.router, prefix="/pets", tags=["pets"])
api_router.include_router(missing.router, prefix="/pets", tags=["missing"])
api_router.include_router(history.router, prefix="/pets", tags=["history"])
api_router.include_router(tracking.router, prefix="/pets", tags=["tracking"])
