"""
History viewport: the map region and trail drawn for a pet's history.
"""

from typing import List, Sequence

from pettrack.schemas.geo import Coordinates, MapViewport
from pettrack.schemas.location_history import HistoryEntry, TrailMarker, TrailPoint
from pettrack.utils.geo import bounding_region

# Span used when there is no history to frame
EMPTY_TRAIL_SPAN_DEG = 0.005


class ViewportService:
    """Derives render data from history entries. Nothing here is persisted."""

    @staticmethod
    def compute_viewport(
        entries: Sequence[HistoryEntry], fallback: Coordinates
    ) -> MapViewport:
        """
        Map region framing every entry.

        An empty history is a normal state: the region is then centred on
        `fallback` instead of failing.
        """
        if not entries:
            return MapViewport(
                center=fallback,
                latitude_span=EMPTY_TRAIL_SPAN_DEG,
                longitude_span=EMPTY_TRAIL_SPAN_DEG,
            )
        return bounding_region([entry.coordinates for entry in entries])

    @staticmethod
    def ordered_trail(entries: Sequence[HistoryEntry]) -> List[TrailPoint]:
        """
        Trail points from oldest to newest.

        The oldest point is the start marker and the newest the current one;
        a single point is only the current position.
        """
        ordered = sorted(entries, key=lambda entry: (entry.captured_at_ms, entry.id))
        last = len(ordered) - 1

        trail = []
        for index, entry in enumerate(ordered):
            if index == last:
                marker = TrailMarker.CURRENT
            elif index == 0:
                marker = TrailMarker.START
            else:
                marker = TrailMarker.WAYPOINT
            trail.append(
                TrailPoint(
                    coordinates=entry.coordinates,
                    captured_at_ms=entry.captured_at_ms,
                    marker=marker,
                )
            )
        return trail


# Create a singleton instance
viewport_service = ViewportService()
