from datetime import datetime, timedelta

from src.geo_attendance.geo_attendance.core.enums import RiskLevel
from src.geo_attendance.geo_attendance.geo.anomaly import detect_anomalies, travel_speed_kmh
from src.geo_attendance.geo_attendance.geo.model import LocationSample
from tests.fakes import lat_offset

T0 = datetime(2026, 3, 2, 8, 0, 0)


def _s(meters_north: float, minutes: float, accuracy: float = 10) -> LocationSample:
    return LocationSample(
        latitude=lat_offset(meters_north),
        longitude=0.0,
        accuracy_meters=accuracy,
        timestamp=T0 + timedelta(minutes=minutes),
    )


def test_empty_history_is_clean():
    report = detect_anomalies(_s(0, 0), [])

    assert not report.is_anomalous
    assert report.risk_level == RiskLevel.LOW
    assert report.reasons == []


def test_impossible_travel_is_high_risk():
    report = detect_anomalies(_s(200_000, 10), [_s(0, 0)])

    assert report.is_anomalous
    assert report.risk_level == RiskLevel.HIGH
    assert "Impossible travel speed" in report.reasons[0]


def test_fast_travel_is_medium_risk():
    # 33 km in 10 minutes is roughly 200 km/h
    report = detect_anomalies(_s(33_000, 10), [_s(0, 0)])

    assert report.risk_level == RiskLevel.MEDIUM


def test_sudden_accuracy_improvement_is_medium_risk():
    report = detect_anomalies(_s(0, 1, accuracy=5), [_s(0, 0, accuracy=800)])

    assert report.risk_level == RiskLevel.MEDIUM
    assert "accuracy" in report.reasons[0]


def test_location_pattern_jump_is_flagged():
    history = [_s(0, 0), _s(100, 10), _s(200, 20)]

    report = detect_anomalies(_s(5200, 80), history)

    assert report.risk_level == RiskLevel.MEDIUM
    assert any("pattern" in r for r in report.reasons)


def test_pattern_check_needs_three_prior_samples():
    history = [_s(100, 10), _s(200, 20)]

    assert not detect_anomalies(_s(5200, 80), history).is_anomalous


def test_non_increasing_time_skips_checks():
    report = detect_anomalies(_s(500_000, 0), [_s(0, 0)])

    assert not report.is_anomalous
    assert travel_speed_kmh(_s(0, 5), _s(10, 0)) is None


def test_risk_never_decreases():
    report = detect_anomalies(_s(200_000, 10, accuracy=5), [_s(0, 0, accuracy=900)])

    assert report.risk_level == RiskLevel.HIGH
    assert len(report.reasons) == 2
