from __future__ import annotations

from typing import Sequence

from ..core.constants import (
    ACCURACY_JUMP_CURRENT_MAX,
    ACCURACY_JUMP_PREVIOUS_MIN,
    PATTERN_DISTANCE_FACTOR,
    PATTERN_MIN_DISTANCE_METERS,
    PATTERN_MIN_HISTORY,
    SPEED_HIGH_RISK_KMH,
    SPEED_MEDIUM_RISK_KMH,
)
from ..core.enums import RiskLevel
from .distance import distance_meters
from .model import AnomalyReport, LocationSample


def travel_speed_kmh(previous: LocationSample, current: LocationSample) -> float | None:
    """Implied ground speed between two samples; None when time did not move forward."""
    hours = (current.timestamp - previous.timestamp).total_seconds() / 3600
    if hours <= 0:
        return None
    return (distance_meters(previous.coordinates, current.coordinates) / 1000) / hours


def _recent_mean_step(history: Sequence[LocationSample]) -> float:
    tail = history[-(PATTERN_MIN_HISTORY + 1) :]
    steps = [distance_meters(a.coordinates, b.coordinates) for a, b in zip(tail, tail[1:])]
    steps = [s for s in steps if s > 0]
    if not steps:
        return 0.0
    return sum(steps) / len(steps)


def detect_anomalies(current: LocationSample, history: Sequence[LocationSample]) -> AnomalyReport:
    """Screen a sample against the user's prior samples (oldest -> newest).

    Advisory only: callers attach the report to the record, they do not reject on it.
    """
    if not history:
        return AnomalyReport.clean()

    previous = history[-1]
    speed = travel_speed_kmh(previous, current)
    if speed is None:
        return AnomalyReport.clean()

    reasons: list[str] = []
    risk = RiskLevel.LOW

    if speed > SPEED_HIGH_RISK_KMH:
        reasons.append(f"Impossible travel speed detected: {speed:.1f} km/h")
        risk = risk.escalate(RiskLevel.HIGH)
    elif speed >= SPEED_MEDIUM_RISK_KMH:
        reasons.append(f"High travel speed detected: {speed:.1f} km/h")
        risk = risk.escalate(RiskLevel.MEDIUM)

    if previous.accuracy_meters > ACCURACY_JUMP_PREVIOUS_MIN and current.accuracy_meters < ACCURACY_JUMP_CURRENT_MAX:
        reasons.append(
            f"Sudden GPS accuracy improvement: {previous.accuracy_meters:.0f}m -> {current.accuracy_meters:.0f}m"
        )
        risk = risk.escalate(RiskLevel.MEDIUM)

    if len(history) >= PATTERN_MIN_HISTORY:
        step = distance_meters(previous.coordinates, current.coordinates)
        mean_step = _recent_mean_step(history)
        if step > mean_step * PATTERN_DISTANCE_FACTOR and step > PATTERN_MIN_DISTANCE_METERS:
            reasons.append(f"Location pattern anomaly: jumped {step:.0f}m against a recent average of {mean_step:.0f}m")
            risk = risk.escalate(RiskLevel.MEDIUM)

    return AnomalyReport(is_anomalous=bool(reasons), risk_level=risk, reasons=reasons)
