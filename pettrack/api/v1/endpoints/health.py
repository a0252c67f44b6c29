from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from pettrack.core.config import settings
from pettrack.db import database
from pettrack.db.database import get_db
from pettrack.schemas.health import HealthCheckResponse
from pettrack.services import location_feed_service
from pettrack.services.tracking_manager import tracking_manager

router = APIRouter()


@router.get("/health")
async def health_check(db: Session = Depends(get_db)) -> HealthCheckResponse:
    """
    Health check endpoint that verifies:
    - Database connectivity
    - Location feed availability

    Returns 200 if all services are healthy, 503 if any service is down.
    """
    database_health = database.health_check(db)
    feed_health = await location_feed_service.location_feed_service.health_check()

    overall_healthy = database_health.healthy and feed_health.healthy

    response = HealthCheckResponse(
        service="pettrack-backend",
        version=settings.VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        healthy=overall_healthy,
        database=database_health,
        location_feed=feed_health,
        active_tracking_sessions=tracking_manager.active_count,
    )

    if overall_healthy:
        return response
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=response.model_dump()
    )
