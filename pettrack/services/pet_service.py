"""
Pet service for owner-scoped pet record operations.
"""

from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from pettrack.models.pet import Pet
from pettrack.schemas.geo import Coordinates
from pettrack.schemas.pet import PetCreate, PetUpdate, TrackedPet


class PetService:
    """Service for handling pet record operations."""

    @staticmethod
    def get_owner_pets(db: Session, owner_id: int) -> List[Pet]:
        """
        Get all pets of an owner, sorted by name.

        Args:
            db: Database session
            owner_id: User ID of the owner

        Returns:
            List of Pet objects
        """
        return (
            db.query(Pet)
            .filter(Pet.owner_id == owner_id)
            .order_by(Pet.name, Pet.id)
            .all()
        )

    @staticmethod
    def get_pet(db: Session, owner_id: int, pet_id: int) -> Optional[Pet]:
        """
        Get a pet by ID, only if it belongs to the owner.

        Returns:
            Pet object if found and owned by `owner_id`, None otherwise
        """
        return (
            db.query(Pet)
            .filter(Pet.id == pet_id, Pet.owner_id == owner_id)
            .first()
        )

    @classmethod
    def get_pet_or_404(cls, db: Session, owner_id: int, pet_id: int) -> Pet:
        """
        Get an owned pet or fail the request.

        Another owner's pet is reported as not found so that pet ids of other
        users are not disclosed.

        Raises:
            HTTPException: If the pet does not exist or belongs to another owner
        """
        pet = cls.get_pet(db, owner_id, pet_id)
        if not pet:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Pet not found",
            )
        return pet

    @staticmethod
    def create_pet(db: Session, owner_id: int, pet_in: PetCreate) -> Pet:
        """
        Create a new pet for an owner.

        Raises:
            HTTPException: If the name is blank
        """
        name = pet_in.name.strip()
        if not name:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Pet name cannot be empty",
            )

        profile = pet_in.model_dump(exclude={"name"})
        pet = Pet(owner_id=owner_id, name=name, **profile)
        db.add(pet)
        db.commit()
        db.refresh(pet)

        return pet

    @classmethod
    def update_pet(
        cls, db: Session, owner_id: int, pet_id: int, pet_in: PetUpdate
    ) -> Pet:
        """
        Update the profile fields of an owned pet.

        Missing-report fields are not editable here; they change only through
        the missing report workflow.
        """
        pet = cls.get_pet_or_404(db, owner_id, pet_id)

        changes = pet_in.model_dump(exclude_unset=True)
        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Pet name cannot be empty",
                )
            changes["name"] = name

        for field, value in changes.items():
            setattr(pet, field, value)
        db.commit()
        db.refresh(pet)

        return pet

    @classmethod
    def delete_pet(cls, db: Session, owner_id: int, pet_id: int) -> bool:
        """
        Delete an owned pet together with its location history.
        """
        pet = cls.get_pet_or_404(db, owner_id, pet_id)
        db.delete(pet)
        db.commit()

        return True

    @staticmethod
    def to_tracked_pet(pet: Pet) -> TrackedPet:
        """Build the TrackedPet record for a stored pet."""
        coordinate = None
        if pet.last_seen_latitude is not None and pet.last_seen_longitude is not None:
            coordinate = Coordinates(
                latitude=pet.last_seen_latitude, longitude=pet.last_seen_longitude
            )
        return TrackedPet(
            id=pet.id,
            name=pet.name,
            profile_image_ref=pet.profile_image_ref,
            is_missing=bool(pet.is_missing),
            last_seen_coordinate=coordinate,
            last_seen_at_ms=pet.last_seen_at_ms,
            missing_notes=pet.missing_notes,
        )

    @staticmethod
    def save_tracked_pet(db: Session, pet: Pet, tracked: TrackedPet) -> Pet:
        """
        Write a TrackedPet's missing state through to the stored pet.
        """
        coordinate = tracked.last_seen_coordinate
        pet.is_missing = tracked.is_missing
        pet.last_seen_latitude = coordinate.latitude if coordinate else None
        pet.last_seen_longitude = coordinate.longitude if coordinate else None
        pet.last_seen_at_ms = tracked.last_seen_at_ms
        pet.missing_notes = tracked.missing_notes
        db.commit()
        db.refresh(pet)

        return pet

    @staticmethod
    def tracked_entity_id(pet: Pet) -> str:
        """Feed id to poll for a pet: its device id, or the pet id."""
        return pet.tracker_device_id or str(pet.id)


# Create a singleton instance
pet_service = PetService()
