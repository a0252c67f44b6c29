import logging
from typing import Any, List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pettrack.db.database import get_db
from pettrack.models.user import User
from pettrack.schemas.pet import PetCreate, PetResponse, PetUpdate
from pettrack.services.auth_service import auth_service
from pettrack.services.pet_service import pet_service
from pettrack.services.tracking_manager import tracking_manager

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[PetResponse])
async def get_pets(
    current_user: User = Depends(auth_service.get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """
    Get all pets of the authenticated user, sorted by name.
    """
    return pet_service.get_owner_pets(db, int(current_user.id))


@router.post("", response_model=PetResponse, status_code=201)
async def create_pet(
    pet_in: PetCreate,
    current_user: User = Depends(auth_service.get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """
    Register a new pet for the authenticated user.
    """
    pet = pet_service.create_pet(db, int(current_user.id), pet_in)
    logger.info("Pet %s created for user %s", pet.id, current_user.id)
    return pet


@router.get("/{pet_id}", response_model=PetResponse)
async def get_pet(
    pet_id: int,
    current_user: User = Depends(auth_service.get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """
    Get one pet of the authenticated user.
    """
    return pet_service.get_pet_or_404(db, int(current_user.id), pet_id)


@router.patch("/{pet_id}", response_model=PetResponse)
async def update_pet(
    pet_id: int,
    pet_in: PetUpdate,
    current_user: User = Depends(auth_service.get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """
    Edit the profile of a pet.

    A tracked pet whose device changed is switched over to the new device.
    """
    pet = pet_service.update_pet(db, int(current_user.id), pet_id, pet_in)
    await tracking_manager.retarget(pet_id, pet_service.tracked_entity_id(pet))
    return pet


@router.delete("/{pet_id}", status_code=204)
async def delete_pet(
    pet_id: int,
    current_user: User = Depends(auth_service.get_current_user),
    db: Session = Depends(get_db),
) -> None:
    """
    Delete a pet and its location history, stopping any tracking first.
    """
    pet_service.get_pet_or_404(db, int(current_user.id), pet_id)
    await tracking_manager.stop_tracking(pet_id)
    pet_service.delete_pet(db, int(current_user.id), pet_id)
    logger.info("Pet %s deleted by user %s", pet_id, current_user.id)
