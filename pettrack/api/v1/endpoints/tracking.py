"""
Tracking API Endpoint

Starts, inspects and stops the live location tracking of a pet.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from pettrack.db.database import get_db
from pettrack.models.user import User
from pettrack.schemas.tracking import TrackingStatusResponse
from pettrack.services.auth_service import auth_service
from pettrack.services.pet_service import pet_service
from pettrack.services.tracking_manager import tracking_manager
from pettrack.services.tracking_session import TrackingSession

logger = logging.getLogger(__name__)

router = APIRouter()


def _status_response(session: TrackingSession) -> TrackingStatusResponse:
    return TrackingStatusResponse(
        pet_id=session.pet_id,
        tracked_entity_id=session.tracked_entity_id,
        state=session.state,
        status=session.snapshot(),
    )


@router.post("/{pet_id}/tracking", response_model=TrackingStatusResponse, status_code=202)
async def start_tracking(
    pet_id: int,
    current_user: User = Depends(auth_service.get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """
    Start polling the pet's tracking device.

    Starting a pet that is already tracked returns the running session, unless
    the pet has been given another device since.
    """
    pet = pet_service.get_pet_or_404(db, int(current_user.id), pet_id)
    session = await tracking_manager.start_tracking(pet_id, pet_service.tracked_entity_id(pet))
    logger.info("User %s is tracking pet %s", current_user.id, pet_id)
    return _status_response(session)


@router.get("/{pet_id}/tracking", response_model=TrackingStatusResponse)
async def get_tracking_status(
    pet_id: int,
    current_user: User = Depends(auth_service.get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """
    Get the live position and device status of a tracked pet.
    """
    pet_service.get_pet_or_404(db, int(current_user.id), pet_id)
    session = tracking_manager.get_session(pet_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Pet is not being tracked",
        )
    return _status_response(session)


@router.delete("/{pet_id}/tracking", status_code=204)
async def stop_tracking(
    pet_id: int,
    current_user: User = Depends(auth_service.get_current_user),
    db: Session = Depends(get_db),
) -> None:
    """
    Stop tracking a pet. Stopping an untracked pet succeeds.
    """
    pet_service.get_pet_or_404(db, int(current_user.id), pet_id)
    await tracking_manager.stop_tracking(pet_id)
