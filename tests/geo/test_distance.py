import pytest

from src.geo_attendance.geo_attendance.geo.distance import distance_meters, haversine_dist, is_within_radius
from src.geo_attendance.geo_attendance.geo.model import Coordinates
from tests.fakes import lat_offset


def test_distance_is_symmetric():
    a = Coordinates(10.7769, 106.7009)
    b = Coordinates(21.0285, 105.8542)

    assert distance_meters(a, b) == pytest.approx(distance_meters(b, a))


def test_distance_to_self_is_zero():
    a = Coordinates(48.8566, 2.3522)

    assert distance_meters(a, a) == 0.0


def test_one_degree_of_latitude_is_about_111km():
    assert haversine_dist(0.0, 0.0, 1.0, 0.0) == pytest.approx(111_195, rel=1e-3)


def test_antipodal_points_do_not_raise():
    assert haversine_dist(0.0, 0.0, 0.0, 180.0) == pytest.approx(20_015_087, rel=1e-3)


def test_is_within_radius_boundary():
    center = Coordinates(0.0, 0.0)

    assert is_within_radius(Coordinates(lat_offset(99.5), 0.0), center, 100)
    assert not is_within_radius(Coordinates(lat_offset(100.5), 0.0), center, 100)
