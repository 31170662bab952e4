from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..common.clock import Clock, FixedClock, SystemClock
from ..core.constants import (
    GPS_ACCURACY_FAIR,
    GPS_ACCURACY_GOOD,
    GPS_ACCURACY_POOR,
    INDOOR_LENIENCY_MAX_ACCURACY,
    INDOOR_LENIENCY_RADIUS_FACTOR,
    VALID_CONFIDENCE_MIN,
)
from ..core.enums import ValidationPath
from .distance import distance_meters
from .model import LocationSample, OfficeLocation, ValidationResult
from .quality import assess_quality
from .radius import effective_radius

logger = logging.getLogger(__name__)


def active_offices(offices: Iterable[OfficeLocation]) -> list[OfficeLocation]:
    return [o for o in offices if o.is_active]


def nearest_office(sample: LocationSample, offices: Sequence[OfficeLocation]) -> tuple[OfficeLocation, float]:
    """Closest office and its distance. `offices` must not be empty; ties keep the first."""
    point = sample.coordinates
    closest = min(offices, key=lambda office: distance_meters(point, office.coordinates))
    return closest, distance_meters(point, closest.coordinates)


def location_recommendations(accuracy_meters: float) -> list[str]:
    """Generic guidance for the user based on the current GPS accuracy."""
    if accuracy_meters > GPS_ACCURACY_POOR:
        return [
            "GPS accuracy is very poor. Move to an open area away from buildings.",
            "Restart location services and check that location permission is granted.",
        ]
    if accuracy_meters > GPS_ACCURACY_FAIR:
        return [
            "GPS accuracy is limited. Move closer to a window if indoors.",
            "Wait a moment for the GPS fix to improve.",
        ]
    if accuracy_meters > GPS_ACCURACY_GOOD:
        return ["GPS accuracy is moderate. Location detected successfully."]
    return ["Excellent GPS accuracy. Location precisely detected."]


class LocationValidator:
    """Decides whether a sample places the user at one of the active offices."""

    def __init__(self, *, clock: Optional[Clock] = None, indoor_leniency_enabled: bool = True):
        self._clock = clock or SystemClock()
        self._indoor_leniency_enabled = bool(indoor_leniency_enabled)

    def validate(self, sample: LocationSample, offices: Iterable[OfficeLocation]) -> ValidationResult:
        assessment = assess_quality(sample, self._clock.now())
        candidates = active_offices(offices)

        if not candidates:
            return ValidationResult(
                is_valid=False,
                confidence=0.0,
                accuracy_meters=sample.accuracy_meters,
                source=sample.source,
                recommendations=["No office locations configured. Contact your administrator."],
                quality=assessment.quality,
                validation_path=ValidationPath.NO_OFFICES,
            )

        closest, min_distance = nearest_office(sample, candidates)

        radius = effective_radius(closest.radius_meters, sample.accuracy_meters)
        within = min_distance <= radius

        lenient = (
            self._indoor_leniency_enabled
            and not within
            and min_distance <= closest.radius_meters * INDOOR_LENIENCY_RADIUS_FACTOR
            and sample.accuracy_meters <= INDOOR_LENIENCY_MAX_ACCURACY
        )
        is_valid = within or lenient

        if not is_valid:
            path = ValidationPath.FAILED
        elif lenient:
            path = ValidationPath.INDOOR_LENIENCY
        elif min_distance <= closest.radius_meters:
            path = ValidationPath.EXACT
        else:
            path = ValidationPath.ACCURACY_COMPENSATED

        recommendations = self._recommendations(
            accuracy=sample.accuracy_meters,
            distance=min_distance,
            office=closest,
            path=path,
        )

        result = ValidationResult(
            is_valid=is_valid,
            confidence=max(assessment.confidence, VALID_CONFIDENCE_MIN) if is_valid else assessment.confidence,
            accuracy_meters=sample.accuracy_meters,
            source=sample.source,
            distance_meters=min_distance,
            within_effective_radius=within,
            recommendations=recommendations,
            office_id=closest.office_id,
            office_name=closest.name,
            effective_radius_meters=radius,
            quality=assessment.quality,
            validation_path=path,
        )
        logger.info(
            "location validation office=%s distance=%.1fm accuracy=%.1fm path=%s valid=%s",
            closest.office_id,
            min_distance,
            sample.accuracy_meters,
            path.value,
            is_valid,
        )
        return result

    @staticmethod
    def _recommendations(*, accuracy: float, distance: float, office: OfficeLocation, path: ValidationPath) -> list[str]:
        out: list[str] = []
        is_valid = path != ValidationPath.FAILED

        if accuracy > GPS_ACCURACY_POOR:
            if is_valid:
                out.append("GPS accuracy is poor indoors, but you are detected within the office area.")
            else:
                out.append("GPS accuracy is very poor. Try moving to an open area or near a window.")
        elif accuracy > GPS_ACCURACY_FAIR:
            out.append("GPS accuracy is limited indoors. Detection is compensated for this environment.")

        if path == ValidationPath.INDOOR_LENIENCY:
            out.append(
                f"Indoor detection: you are close to {office.name}. Check-in allowed with reduced GPS accuracy."
            )
        elif path == ValidationPath.ACCURACY_COMPENSATED:
            out.append("Office radius was widened to compensate for GPS accuracy.")
        elif path == ValidationPath.FAILED:
            out.append(
                f"You are {round(distance)}m from {office.name} (limit {round(office.radius_meters)}m). "
                "Move closer to the office and retry."
            )
            out.append("If you are inside the office, retry in a moment or contact support.")
        return out


def validate_location(
    sample: LocationSample,
    offices: Iterable[OfficeLocation],
    *,
    now: Optional[datetime] = None,
    indoor_leniency_enabled: bool = True,
) -> ValidationResult:
    """Functional entry point; `now` defaults to the sample's own timestamp."""

    clock = FixedClock(now or sample.timestamp)
    return LocationValidator(clock=clock, indoor_leniency_enabled=indoor_leniency_enabled).validate(sample, offices)
