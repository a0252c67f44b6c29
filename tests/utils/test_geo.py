"""
Unit tests for geo helpers.
"""

import pytest

from pettrack.schemas.geo import Coordinates
from pettrack.utils.geo import EmptyInputError, bounding_region, distance_meters


@pytest.fixture
def sample_coordinates():
    """Sample coordinates for testing."""
    return {
        "park": Coordinates(latitude=14.6037, longitude=121.3084),
        "vet": Coordinates(latitude=14.7034, longitude=121.1451),
        "north_pole": Coordinates(latitude=90.0, longitude=0.0),
    }


def test_distance_to_itself_is_zero(sample_coordinates):
    """Test that a point is at distance 0 from itself"""
    for point in sample_coordinates.values():
        assert distance_meters(point, point) == 0


def test_distance_is_symmetric(sample_coordinates):
    """Test that distance does not depend on argument order"""
    park = sample_coordinates["park"]
    vet = sample_coordinates["vet"]

    assert distance_meters(park, vet) == pytest.approx(distance_meters(vet, park))


def test_distance_one_degree_of_latitude():
    """Test distance of one degree along a meridian"""
    a = Coordinates(latitude=0.0, longitude=0.0)
    b = Coordinates(latitude=1.0, longitude=0.0)

    # 2 * pi * 6371000 / 360
    assert distance_meters(a, b) == pytest.approx(111_194.93, rel=1e-6)


def test_distance_is_additive_along_a_line():
    """Test that A->C equals A->B + B->C for B between A and C"""
    a = Coordinates(latitude=10.0, longitude=20.0)
    b = Coordinates(latitude=10.5, longitude=20.0)
    c = Coordinates(latitude=11.0, longitude=20.0)

    assert distance_meters(a, c) == pytest.approx(
        distance_meters(a, b) + distance_meters(b, c), rel=1e-9
    )


def test_bounding_region_single_point():
    """Test that a single point yields a padded region centred on it"""
    region = bounding_region([Coordinates(latitude=0.0, longitude=0.0)])

    assert region.center == Coordinates(latitude=0.0, longitude=0.0)
    assert region.latitude_span == pytest.approx(0.01)
    assert region.longitude_span == pytest.approx(0.01)


def test_bounding_region_two_points():
    """Test region center is the midpoint of extremes plus padding on the spans"""
    region = bounding_region(
        [
            Coordinates(latitude=10.0, longitude=10.0),
            Coordinates(latitude=10.5, longitude=10.2),
        ]
    )

    assert region.center.latitude == pytest.approx(10.25)
    assert region.center.longitude == pytest.approx(10.1)
    assert region.latitude_span == pytest.approx(0.51)
    assert region.longitude_span == pytest.approx(0.21)


def test_bounding_region_uses_extremes_not_centroid():
    """Test that clustered points do not pull the center"""
    region = bounding_region(
        [
            Coordinates(latitude=0.0, longitude=0.0),
            Coordinates(latitude=0.0, longitude=0.0),
            Coordinates(latitude=0.0, longitude=0.0),
            Coordinates(latitude=1.0, longitude=1.0),
        ]
    )

    assert region.center.latitude == pytest.approx(0.5)
    assert region.center.longitude == pytest.approx(0.5)


def test_bounding_region_empty():
    """Test that an empty input is rejected"""
    with pytest.raises(EmptyInputError):
        bounding_region([])
