from __future__ import annotations

from ..core.constants import (
    GPS_ACCURACY_FAIR,
    GPS_ACCURACY_GOOD,
    GPS_ACCURACY_POOR,
    RADIUS_COMPENSATION_FAIR,
    RADIUS_COMPENSATION_GOOD,
    RADIUS_COMPENSATION_POOR,
)


def effective_radius(radius_meters: float, accuracy_meters: float) -> float:
    """Inflate the office radius by a fraction of the reported GPS error.

    Additive per tier so very large errors widen the fence linearly, never
    multiplicatively. Accuracy at or below the "good" tier gets no compensation.
    """
    if accuracy_meters > GPS_ACCURACY_POOR:
        return radius_meters + accuracy_meters * RADIUS_COMPENSATION_POOR
    if accuracy_meters > GPS_ACCURACY_FAIR:
        return radius_meters + accuracy_meters * RADIUS_COMPENSATION_FAIR
    if accuracy_meters > GPS_ACCURACY_GOOD:
        return radius_meters + accuracy_meters * RADIUS_COMPENSATION_GOOD
    return radius_meters
