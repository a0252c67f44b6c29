"""
Sampling policy deciding which feed fixes become location history.
"""

from typing import Optional

from pettrack.core.config import settings
from pettrack.schemas.geo import Coordinates
from pettrack.utils.geo import distance_meters


class SamplingPolicy:
    """Persist a sample when enough time has passed or the pet moved far enough."""

    def __init__(
        self,
        time_threshold_ms: int = 30_000,
        distance_threshold_m: float = 1.0,
    ):
        self.time_threshold_ms = time_threshold_ms
        self.distance_threshold_m = distance_threshold_m

    @classmethod
    def from_settings(cls) -> "SamplingPolicy":
        return cls(
            time_threshold_ms=settings.SAMPLING_TIME_THRESHOLD_MS,
            distance_threshold_m=settings.SAMPLING_DISTANCE_THRESHOLD_M,
        )

    def should_persist(
        self,
        candidate: Coordinates,
        candidate_at_ms: int,
        last_persisted: Optional[Coordinates],
        last_persisted_at_ms: Optional[int],
    ) -> bool:
        """
        Decide whether `candidate` should be written to history.

        Args:
            candidate: Newly reported coordinate
            candidate_at_ms: Capture time of the candidate in epoch milliseconds
            last_persisted: Last coordinate written to history, None if none yet
            last_persisted_at_ms: Capture time of `last_persisted`

        Returns:
            True if the sample should be persisted
        """
        if last_persisted is None or last_persisted_at_ms is None:
            return True

        if candidate_at_ms - last_persisted_at_ms >= self.time_threshold_ms:
            return True

        return distance_meters(candidate, last_persisted) >= self.distance_threshold_m
