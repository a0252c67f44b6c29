"""
History service: the append-only location log of each pet.

Every entry is its own row, so concurrent appends for one pet never contend
on a shared aggregate.
"""

import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pettrack.models.location_history import LocationHistoryEntry
from pettrack.schemas.geo import Coordinates
from pettrack.schemas.location_history import HistoryEntry, HistoryEntryCreate

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when the history store cannot complete an operation."""


class HistoryService:
    """Service for handling location history operations."""

    @staticmethod
    def append(db: Session, pet_id: int, entry: HistoryEntryCreate) -> HistoryEntry:
        """
        Append one entry to a pet's history.

        Args:
            db: Database session
            pet_id: Pet the entry belongs to
            entry: Coordinate and capture time to persist

        Returns:
            The persisted HistoryEntry

        Raises:
            StoreError: If the insert fails
        """
        row = LocationHistoryEntry(
            pet_id=pet_id,
            latitude=entry.coordinates.latitude,
            longitude=entry.coordinates.longitude,
            captured_at_ms=entry.captured_at_ms,
        )
        try:
            db.add(row)
            db.commit()
            db.refresh(row)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to append history for pet %s: %s", pet_id, str(e))
            raise StoreError(f"Failed to append history entry: {str(e)}") from e

        return HistoryService.to_entry(row)

    @staticmethod
    def list_all(db: Session, pet_id: int) -> List[HistoryEntry]:
        """
        List a pet's history, newest first.

        Ordering comes from the stored capture time, not insertion order.

        Raises:
            StoreError: If the query fails
        """
        try:
            rows = (
                db.query(LocationHistoryEntry)
                .filter(LocationHistoryEntry.pet_id == pet_id)
                .order_by(
                    LocationHistoryEntry.captured_at_ms.desc(),
                    LocationHistoryEntry.id.desc(),
                )
                .all()
            )
        except SQLAlchemyError as e:
            logger.error("Failed to list history for pet %s: %s", pet_id, str(e))
            raise StoreError(f"Failed to list history: {str(e)}") from e

        return [HistoryService.to_entry(row) for row in rows]

    @staticmethod
    def delete_one(db: Session, pet_id: int, entry_id: int) -> None:
        """
        Delete a single history entry. Deleting an absent entry is a no-op.

        Raises:
            StoreError: If the delete fails
        """
        try:
            entry = (
                db.query(LocationHistoryEntry)
                .filter(
                    LocationHistoryEntry.id == entry_id,
                    LocationHistoryEntry.pet_id == pet_id,
                )
                .first()
            )
            if entry is None:
                return
            db.delete(entry)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(
                "Failed to delete history entry %s of pet %s: %s", entry_id, pet_id, str(e)
            )
            raise StoreError(f"Failed to delete history entry: {str(e)}") from e

    @staticmethod
    def delete_all(db: Session, pet_id: int) -> int:
        """
        Delete a pet's whole history in one transaction.

        Returns:
            Number of deleted entries

        Raises:
            StoreError: If the delete fails; nothing is deleted in that case
        """
        try:
            deleted = (
                db.query(LocationHistoryEntry)
                .filter(LocationHistoryEntry.pet_id == pet_id)
                .delete(synchronize_session=False)
            )
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to delete history of pet %s: %s", pet_id, str(e))
            raise StoreError(f"Failed to delete history: {str(e)}") from e

        logger.info("Deleted %d history entries of pet %s", deleted, pet_id)
        return deleted

    @staticmethod
    def to_entry(row: LocationHistoryEntry) -> HistoryEntry:
        return HistoryEntry(
            id=row.id,
            coordinates=Coordinates(latitude=row.latitude, longitude=row.longitude),
            captured_at_ms=row.captured_at_ms,
        )


# Create a singleton instance
history_service = HistoryService()
