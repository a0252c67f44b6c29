"""
Location History API Endpoint

Lists, renders and deletes the persisted location history of a pet.
"""

import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from pettrack.db.database import get_db
from pettrack.models.pet import Pet
from pettrack.models.user import User
from pettrack.schemas.geo import Coordinates
from pettrack.schemas.location_history import HistoryEntry, TrailResponse
from pettrack.services.auth_service import auth_service
from pettrack.services.history_service import StoreError, history_service
from pettrack.services.pet_service import pet_service
from pettrack.services.tracking_manager import tracking_manager
from pettrack.services.viewport_service import viewport_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _store_unavailable(e: StoreError) -> HTTPException:
    logger.error("History store error: %s", str(e))
    return HTTPException(status_code=503, detail="Location history is temporarily unavailable")


def _fallback_center(pet: Pet) -> Coordinates:
    """Center for an empty trail: live position, then last-seen position."""
    session = tracking_manager.get_session(int(pet.id))
    if session is not None:
        reported = session.snapshot().last_reported_coordinate
        if reported is not None:
            return reported
    tracked = pet_service.to_tracked_pet(pet)
    if tracked.last_seen_coordinate is not None:
        return tracked.last_seen_coordinate
    return Coordinates(latitude=0.0, longitude=0.0)


@router.get("/{pet_id}/history", response_model=List[HistoryEntry])
async def get_history(
    pet_id: int,
    current_user: User = Depends(auth_service.get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """
    Get the location history of a pet, newest first.
    """
    pet_service.get_pet_or_404(db, int(current_user.id), pet_id)
    try:
        return history_service.list_all(db, pet_id)
    except StoreError as e:
        raise _store_unavailable(e) from e


@router.get("/{pet_id}/history/trail", response_model=TrailResponse)
async def get_history_trail(
    pet_id: int,
    fallback_latitude: Optional[float] = Query(None, ge=-90.0, le=90.0),
    fallback_longitude: Optional[float] = Query(None, ge=-180.0, le=180.0),
    current_user: User = Depends(auth_service.get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """
    Get the map viewport and ordered trail of a pet's history.

    When the history is empty the viewport is centred on the fallback
    coordinate if given, otherwise on the pet's live or last-seen position.
    """
    pet = pet_service.get_pet_or_404(db, int(current_user.id), pet_id)
    try:
        entries = history_service.list_all(db, pet_id)
    except StoreError as e:
        raise _store_unavailable(e) from e

    if fallback_latitude is not None and fallback_longitude is not None:
        fallback = Coordinates(latitude=fallback_latitude, longitude=fallback_longitude)
    else:
        fallback = _fallback_center(pet)

    return TrailResponse(
        viewport=viewport_service.compute_viewport(entries, fallback),
        trail=viewport_service.ordered_trail(entries),
    )


@router.delete("/{pet_id}/history/{entry_id}", status_code=204)
async def delete_history_entry(
    pet_id: int,
    entry_id: int,
    current_user: User = Depends(auth_service.get_current_user),
    db: Session = Depends(get_db),
) -> None:
    """
    Delete one history entry. Deleting an entry that is already gone succeeds.
    """
    pet_service.get_pet_or_404(db, int(current_user.id), pet_id)
    try:
        history_service.delete_one(db, pet_id, entry_id)
    except StoreError as e:
        raise _store_unavailable(e) from e


@router.delete("/{pet_id}/history", status_code=204)
async def delete_history(
    pet_id: int,
    current_user: User = Depends(auth_service.get_current_user),
    db: Session = Depends(get_db),
) -> None:
    """
    Delete the whole location history of a pet.
    """
    pet_service.get_pet_or_404(db, int(current_user.id), pet_id)
    try:
        history_service.delete_all(db, pet_id)
    except StoreError as e:
        raise _store_unavailable(e) from e
