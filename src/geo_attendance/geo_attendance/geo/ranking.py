from __future__ import annotations

from typing import Iterable

from ..core.constants import RANK_EFFECTIVE_BAND_FLOOR, RANK_OUTER_BAND_METERS, RANK_OUTER_BAND_START
from .distance import distance_meters
from .model import LocationSample, OfficeCandidate, OfficeDetection, OfficeLocation
from .radius import effective_radius
from .validation import active_offices


def office_probability(distance: float, radius: float, eff_radius: float) -> float:
    """Piecewise-linear likelihood that a sample at `distance` belongs to the office.

    1.0 inside the nominal radius, 1.0 -> 0.6 across the compensation band,
    0.3 -> 0.0 over the next 100m, 0 beyond.
    """
    if distance <= radius:
        return 1.0
    if distance <= eff_radius:
        span = eff_radius - radius
        return 1.0 - ((distance - radius) / span) * (1.0 - RANK_EFFECTIVE_BAND_FLOOR)
    if distance <= eff_radius + RANK_OUTER_BAND_METERS:
        return RANK_OUTER_BAND_START - ((distance - eff_radius) / RANK_OUTER_BAND_METERS) * RANK_OUTER_BAND_START
    return 0.0


def detect_office_location(sample: LocationSample, offices: Iterable[OfficeLocation]) -> OfficeDetection:
    candidates: list[OfficeCandidate] = []
    point = sample.coordinates

    for office in active_offices(offices):
        distance = distance_meters(point, office.coordinates)
        eff = effective_radius(office.radius_meters, sample.accuracy_meters)
        probability = office_probability(distance, office.radius_meters, eff)
        if probability > 0:
            candidates.append(OfficeCandidate(office=office, distance_meters=distance, probability=probability))

    candidates.sort(key=lambda c: (-c.probability, c.distance_meters))

    if not candidates:
        return OfficeDetection(detected=None, confidence=0.0, candidates=[])
    return OfficeDetection(detected=candidates[0].office, confidence=candidates[0].probability, candidates=candidates)
