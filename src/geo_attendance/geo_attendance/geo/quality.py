from __future__ import annotations

from datetime import datetime

from ..core.constants import (
    AGE_PENALTY_MAX,
    AGE_PENALTY_WINDOW_SECONDS,
    CONFIDENCE_EXCELLENT,
    CONFIDENCE_FAIR,
    CONFIDENCE_FLOOR,
    CONFIDENCE_GOOD,
    CONFIDENCE_POOR,
    GPS_ACCURACY_EXCELLENT,
    GPS_ACCURACY_FAIR,
    GPS_ACCURACY_GOOD,
    SOURCE_ADJUSTMENT_NETWORK,
    SOURCE_ADJUSTMENT_PASSIVE,
)
from ..core.enums import LocationQuality, LocationSource
from .model import LocationSample, QualityAssessment

_SOURCE_ADJUSTMENT = {
    LocationSource.GPS: 0.0,
    LocationSource.NETWORK: SOURCE_ADJUSTMENT_NETWORK,
    LocationSource.PASSIVE: SOURCE_ADJUSTMENT_PASSIVE,
}


def quality_tier(accuracy_meters: float) -> tuple[LocationQuality, float]:
    """Map reported accuracy to (tier, base confidence)."""
    if accuracy_meters <= GPS_ACCURACY_EXCELLENT:
        return LocationQuality.EXCELLENT, CONFIDENCE_EXCELLENT
    if accuracy_meters <= GPS_ACCURACY_GOOD:
        return LocationQuality.GOOD, CONFIDENCE_GOOD
    if accuracy_meters <= GPS_ACCURACY_FAIR:
        return LocationQuality.FAIR, CONFIDENCE_FAIR
    return LocationQuality.POOR, CONFIDENCE_POOR


def age_penalty(age_seconds: float) -> float:
    # Clock skew can make a sample look like it is from the future; no bonus for that.
    if age_seconds <= 0:
        return 0.0
    return min(age_seconds / AGE_PENALTY_WINDOW_SECONDS, AGE_PENALTY_MAX)


def score_confidence(accuracy_meters: float, source: LocationSource, age_seconds: float) -> QualityAssessment:
    quality, base = quality_tier(accuracy_meters)
    confidence = base + _SOURCE_ADJUSTMENT[source] - age_penalty(age_seconds)
    return QualityAssessment(quality=quality, confidence=max(CONFIDENCE_FLOOR, confidence))


def assess_quality(sample: LocationSample, now: datetime) -> QualityAssessment:
    age_seconds = (now - sample.timestamp).total_seconds()
    return score_confidence(sample.accuracy_meters, sample.source, age_seconds)
