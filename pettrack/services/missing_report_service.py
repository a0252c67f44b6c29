"""
Missing report workflow.

Pure transitions of a TrackedPet between "not missing" and "missing".
Persisting the result is up to the caller.
"""

import time
from typing import Optional

from pettrack.schemas.geo import Coordinates
from pettrack.schemas.pet import TrackedPet


class ValidationError(Exception):
    """Raised when a missing report transition fails a precondition."""


class MissingReportService:
    """Service for reporting pets missing and clearing those reports."""

    @staticmethod
    def report_missing(
        pet: TrackedPet,
        last_seen_coordinate: Optional[Coordinates],
        last_seen_at_ms: Optional[int],
        notes: Optional[str],
        now_ms: Optional[int] = None,
    ) -> TrackedPet:
        """
        Mark a pet as missing.

        Args:
            pet: Current record of the pet
            last_seen_coordinate: Where the pet was last seen
            last_seen_at_ms: When the pet was last seen, epoch milliseconds
            notes: Additional information for people looking for the pet
            now_ms: Current time, defaults to the wall clock

        Returns:
            New TrackedPet with `is_missing=True` and the last-seen fields set

        Raises:
            ValidationError: If the pet is already missing or an input is invalid
        """
        if pet.is_missing:
            raise ValidationError(f"{pet.name} is already reported missing")
        if last_seen_coordinate is None:
            raise ValidationError("A last-seen location is required")
        if last_seen_at_ms is None:
            raise ValidationError("A last-seen date is required")

        if now_ms is None:
            now_ms = int(time.time() * 1000)
        if last_seen_at_ms < 0:
            raise ValidationError("The last-seen date is not a valid date")
        if last_seen_at_ms > now_ms:
            raise ValidationError("The last-seen date cannot be in the future")

        cleaned_notes = (notes or "").strip()
        if not cleaned_notes:
            raise ValidationError("Additional information is required")

        return TrackedPet(
            **pet.model_dump(
                exclude={"is_missing", "last_seen_coordinate", "last_seen_at_ms", "missing_notes"}
            ),
            is_missing=True,
            last_seen_coordinate=last_seen_coordinate,
            last_seen_at_ms=last_seen_at_ms,
            missing_notes=cleaned_notes,
        )

    @staticmethod
    def clear_missing(pet: TrackedPet) -> TrackedPet:
        """
        Mark a missing pet as found, clearing every last-seen field.

        Raises:
            ValidationError: If the pet is not missing
        """
        if not pet.is_missing:
            raise ValidationError(f"{pet.name} is not reported missing")

        return TrackedPet(
            id=pet.id,
            name=pet.name,
            profile_image_ref=pet.profile_image_ref,
            is_missing=False,
        )


# Create a singleton instance
missing_report_service = MissingReportService()
