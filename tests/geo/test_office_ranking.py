from datetime import datetime

import pytest

from src.geo_attendance.geo_attendance.geo.model import LocationSample, OfficeLocation
from src.geo_attendance.geo_attendance.geo.ranking import detect_office_location, office_probability
from tests.fakes import lat_offset

NOW = datetime(2026, 3, 2, 9, 0, 0)


def _office(office_id: int, meters_north: float, radius: float = 100) -> OfficeLocation:
    return OfficeLocation(
        office_id=office_id,
        name=f"Office {office_id}",
        latitude=lat_offset(meters_north),
        longitude=0.0,
        radius_meters=radius,
    )


def _sample(accuracy: float = 5) -> LocationSample:
    return LocationSample(latitude=0.0, longitude=0.0, accuracy_meters=accuracy, timestamp=NOW)


def test_probability_bands():
    assert office_probability(50, 100, 200) == 1.0
    assert office_probability(150, 100, 200) == pytest.approx(0.8)
    assert office_probability(200, 100, 200) == pytest.approx(0.6)
    assert office_probability(250, 100, 200) == pytest.approx(0.15)
    assert office_probability(300, 100, 200) == pytest.approx(0.0)
    assert office_probability(301, 100, 200) == 0.0


def test_without_compensation_the_middle_band_is_empty():
    assert office_probability(101, 100, 100) == pytest.approx(0.3 - 0.003)


def test_candidates_sorted_by_probability_then_distance():
    offices = [_office(1, 150), _office(2, 40), _office(3, 10), _office(4, 5000)]

    detection = detect_office_location(_sample(), offices)

    assert [c.office.office_id for c in detection.candidates] == [3, 2, 1]
    assert detection.detected.office_id == 3
    assert detection.confidence == 1.0
    assert [c.office.office_id for c in detection.alternatives] == [2, 1]


def test_alternatives_limited_to_two():
    offices = [_office(i, i * 10) for i in range(1, 6)]

    detection = detect_office_location(_sample(), offices)

    assert len(detection.candidates) == 5
    assert len(detection.alternatives) == 2


def test_nothing_nearby():
    detection = detect_office_location(_sample(), [_office(1, 10_000)])

    assert detection.detected is None
    assert detection.confidence == 0.0
    assert detection.to_dict()["detected_office"] is None
