from pettrack.models.location_history import LocationHistoryEntry
from pettrack.models.pet import Pet
from pettrack.models.user import User

__all__ = ["LocationHistoryEntry", "Pet", "User"]
