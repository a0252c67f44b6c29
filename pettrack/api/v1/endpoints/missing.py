"""
Missing Report API Endpoint

Reports a pet missing and clears the report once the pet is found.
"""

import logging
from datetime import timezone
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from pettrack.db.database import get_db
from pettrack.models.user import User
from pettrack.schemas.pet import MissingReportCreate, PetResponse
from pettrack.services.auth_service import auth_service
from pettrack.services.missing_report_service import ValidationError, missing_report_service
from pettrack.services.pet_service import pet_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/{pet_id}/missing", response_model=PetResponse)
async def report_missing(
    pet_id: int,
    report: MissingReportCreate,
    current_user: User = Depends(auth_service.get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """
    Report a pet as missing.

    Args:
        pet_id: Pet to report
        report: Last-seen location, date and additional information
        current_user: Authenticated user (required)
        db: Database session

    Returns:
        The updated pet

    Raises:
        HTTPException: 404 if the pet is not found, 400 if the report is invalid
    """
    pet = pet_service.get_pet_or_404(db, int(current_user.id), pet_id)

    last_seen_at_ms = None
    if report.last_seen_at is not None:
        last_seen_at = report.last_seen_at
        if last_seen_at.tzinfo is None:
            last_seen_at = last_seen_at.replace(tzinfo=timezone.utc)
        last_seen_at_ms = int(last_seen_at.timestamp() * 1000)

    try:
        tracked = missing_report_service.report_missing(
            pet_service.to_tracked_pet(pet),
            report.last_seen_coordinates,
            last_seen_at_ms,
            report.notes,
        )
    except ValidationError as e:
        logger.info("Rejected missing report for pet %s: %s", pet_id, str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    pet = pet_service.save_tracked_pet(db, pet, tracked)
    logger.info("Pet %s reported missing by user %s", pet_id, current_user.id)
    return pet


@router.delete("/{pet_id}/missing", response_model=PetResponse)
async def clear_missing(
    pet_id: int,
    current_user: User = Depends(auth_service.get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """
    Mark a missing pet as found.
    """
    pet = pet_service.get_pet_or_404(db, int(current_user.id), pet_id)

    try:
        tracked = missing_report_service.clear_missing(pet_service.to_tracked_pet(pet))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    pet = pet_service.save_tracked_pet(db, pet, tracked)
    logger.info("Pet %s is no longer missing", pet_id)
    return pet
