from __future__ import annotations

from math import asin, cos, radians, sin, sqrt

from ..core.constants import EARTH_RADIUS_METERS
from .model import Coordinates


def haversine_dist(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in meters between two lat/lng points."""
    φ1, φ2 = radians(lat1), radians(lat2)
    Δφ = radians(lat2 - lat1)
    Δλ = radians(lng2 - lng1)

    a = sin(Δφ / 2) ** 2 + cos(φ1) * cos(φ2) * sin(Δλ / 2) ** 2
    # Clamp: rounding can push a a hair above 1 for antipodal points.
    c = 2 * asin(sqrt(min(1.0, a)))
    return EARTH_RADIUS_METERS * c


def distance_meters(a: Coordinates, b: Coordinates) -> float:
    return haversine_dist(a.latitude, a.longitude, b.latitude, b.longitude)


def is_within_radius(point: Coordinates, center: Coordinates, radius_m: float) -> bool:
    return distance_meters(point, center) <= radius_m
