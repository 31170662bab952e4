from datetime import datetime, timedelta, timezone

import pytest

from src.geo_attendance.geo_attendance.common.clock import FixedClock
from src.geo_attendance.geo_attendance.core.enums import LocationQuality, ValidationPath
from src.geo_attendance.geo_attendance.core.exceptions import ValidationError
from src.geo_attendance.geo_attendance.geo.model import LocationSample, OfficeLocation
from src.geo_attendance.geo_attendance.geo.validation import (
    LocationValidator,
    location_recommendations,
    nearest_office,
    validate_location,
)
from tests.fakes import lat_offset

NOW = datetime(2026, 3, 2, 9, 0, 0)
HQ = OfficeLocation(office_id=1, name="HQ", latitude=0.0, longitude=0.0, radius_meters=100)


def _at(meters_north: float, accuracy: float) -> LocationSample:
    return LocationSample(latitude=lat_offset(meters_north), longitude=0.0, accuracy_meters=accuracy, timestamp=NOW)


def test_sample_on_top_of_office_is_valid():
    result = validate_location(_at(0, 5), [HQ])

    assert result.is_valid
    assert result.within_effective_radius
    assert result.distance_meters == pytest.approx(0.0)
    assert result.confidence == pytest.approx(0.9)
    assert result.validation_path == ValidationPath.EXACT
    assert result.office_id == 1


def test_sample_far_away_is_rejected_with_recommendations():
    result = validate_location(_at(5000, 5), [HQ])

    assert not result.is_valid
    assert result.validation_path == ValidationPath.FAILED
    assert result.distance_meters == pytest.approx(5000, rel=1e-6)
    assert any("5000m from HQ" in r for r in result.recommendations)


def test_poor_accuracy_widens_the_fence():
    result = validate_location(_at(140, 2000), [HQ])

    assert result.is_valid
    assert result.effective_radius_meters == pytest.approx(1100)
    assert result.validation_path == ValidationPath.ACCURACY_COMPENSATED
    assert result.quality == LocationQuality.POOR
    # poor GPS alone scores 0.5; an accepted sample is floored at 0.6
    assert result.confidence == pytest.approx(0.6)


def test_indoor_leniency_accepts_just_outside_the_radius():
    result = validate_location(_at(140, 50), [HQ])

    assert result.is_valid
    assert not result.within_effective_radius
    assert result.validation_path == ValidationPath.INDOOR_LENIENCY
    assert any("Indoor detection" in r for r in result.recommendations)


def test_indoor_leniency_can_be_switched_off():
    result = validate_location(_at(140, 50), [HQ], indoor_leniency_enabled=False)

    assert not result.is_valid


def test_leniency_stops_at_one_and_a_half_radii():
    assert not validate_location(_at(160, 50), [HQ]).is_valid


def test_no_active_offices():
    closed = OfficeLocation(office_id=2, name="Closed", latitude=0.0, longitude=0.0, radius_meters=100, is_active=False)

    result = validate_location(_at(0, 5), [closed])

    assert not result.is_valid
    assert result.confidence == 0.0
    assert result.validation_path == ValidationPath.NO_OFFICES
    assert result.recommendations[0].startswith("No office locations configured")


def test_nearest_active_office_is_used():
    far = OfficeLocation(office_id=2, name="Branch", latitude=lat_offset(3000), longitude=0.0, radius_meters=100)

    result = validate_location(_at(2950, 5), [HQ, far])

    assert result.is_valid
    assert result.office_id == 2


def test_validator_uses_injected_clock_for_sample_age():
    validator = LocationValidator(clock=FixedClock(datetime(2026, 3, 2, 9, 0, 6)))

    result = validator.validate(_at(0, 5), [HQ])

    assert result.confidence == pytest.approx(0.7)


def test_generic_recommendations_follow_accuracy():
    assert "Excellent" in location_recommendations(3)[0]
    assert len(location_recommendations(5000)) == 2


def test_utc_timestamp_from_request_matches_naive_clock():
    payload = {"latitude": 0.0, "longitude": 0.0, "accuracy": 5, "timestamp": "2026-03-02T08:55:00Z"}

    sample = LocationSample.from_payload(payload, default_timestamp=NOW)

    assert sample.timestamp.tzinfo is None
    assert sample.timestamp == datetime(2026, 3, 2, 8, 55, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert LocationValidator(clock=FixedClock(NOW)).validate(sample, [HQ]).is_valid


def test_offset_timestamp_follows_aware_clock():
    ict = timezone(timedelta(hours=7))
    payload = {"latitude": 0.0, "longitude": 0.0, "accuracy": 5, "timestamp": "2026-03-02T01:55:00Z"}

    sample = LocationSample.from_payload(payload, default_timestamp=datetime(2026, 3, 2, 9, 0, tzinfo=ict))

    assert sample.timestamp == datetime(2026, 3, 2, 8, 55, tzinfo=ict)
    assert sample.timestamp.utcoffset() == timedelta(hours=7)


def test_unparseable_timestamp_is_a_validation_error():
    with pytest.raises(ValidationError):
        LocationSample.from_payload(
            {"latitude": 0.0, "longitude": 0.0, "accuracy": 5, "timestamp": "yesterday"}, default_timestamp=NOW
        )


def test_nearest_office_prefers_closer_and_keeps_first_on_tie():
    north = OfficeLocation(office_id=2, name="North", latitude=lat_offset(300), longitude=0.0, radius_meters=100)
    twin = OfficeLocation(office_id=3, name="Twin", latitude=0.0, longitude=0.0, radius_meters=100)

    closest, distance = nearest_office(_at(250, 5), [HQ, north])
    assert closest.office_id == 2
    assert distance == pytest.approx(50, abs=0.01)

    assert nearest_office(_at(0, 5), [HQ, twin])[0].office_id == 1
