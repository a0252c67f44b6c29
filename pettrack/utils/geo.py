"""Geospatial helpers: great-circle distance and map region fitting."""

import math
from typing import Sequence

from pettrack.schemas.geo import Coordinates, MapViewport

EARTH_RADIUS_M = 6_371_000.0

# Added to both spans so that a single point still yields a zoomed-in,
# non-degenerate region.
REGION_PADDING_DEG = 0.01


class EmptyInputError(ValueError):
    """Raised when a region is requested for no points at all."""


def distance_meters(a: Coordinates, b: Coordinates) -> float:
    """
    Haversine distance in meters between two coordinates.

    Args:
        a: First coordinate
        b: Second coordinate

    Returns:
        Great-circle distance in meters
    """
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = math.sin(d_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    c = 2.0 * math.atan2(math.sqrt(h), math.sqrt(1.0 - h))
    return EARTH_RADIUS_M * c


def bounding_region(points: Sequence[Coordinates]) -> MapViewport:
    """
    Fit a map region around all points.

    The center is the midpoint of the extremes, not the centroid, so every
    point ends up inside the region.

    Raises:
        EmptyInputError: If `points` is empty
    """
    if not points:
        raise EmptyInputError("Cannot compute a region for an empty set of points")

    latitudes = [p.latitude for p in points]
    longitudes = [p.longitude for p in points]
    min_lat, max_lat = min(latitudes), max(latitudes)
    min_lon, max_lon = min(longitudes), max(longitudes)

    return MapViewport(
        center=Coordinates(
            latitude=(max_lat + min_lat) / 2,
            longitude=(max_lon + min_lon) / 2,
        ),
        latitude_span=(max_lat - min_lat) + REGION_PADDING_DEG,
        longitude_span=(max_lon - min_lon) + REGION_PADDING_DEG,
    )
