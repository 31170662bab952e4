from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import align_tz, parse_iso_datetime
from ..common.validators import require_latitude, require_longitude, require_positive
from ..core.constants import RANK_MAX_ALTERNATIVES
from ..core.enums import LocationQuality, LocationSource, RiskLevel, ValidationPath
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class LocationSample:
    """A single GPS reading captured by the device on a check-in/out attempt."""

    latitude: float
    longitude: float
    accuracy_meters: float
    timestamp: datetime
    source: LocationSource = LocationSource.GPS

    def __post_init__(self):
        require_latitude(self.latitude)
        require_longitude(self.longitude)
        require_positive(self.accuracy_meters, "accuracy")

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(self.latitude, self.longitude)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], *, default_timestamp: datetime) -> "LocationSample":
        """Build a sample from a request body (latitude/longitude/accuracy/timestamp/source)."""
        try:
            latitude = float(payload["latitude"])
            longitude = float(payload["longitude"])
            accuracy = float(payload.get("accuracy", payload.get("accuracy_meters", 0)))
        except (KeyError, TypeError, ValueError):
            raise ValidationError("latitude, longitude and accuracy are required")

        raw_ts = payload.get("timestamp")
        if raw_ts:
            try:
                timestamp = align_tz(parse_iso_datetime(str(raw_ts)), default_timestamp)
            except ValueError:
                raise ValidationError(f"invalid timestamp: {raw_ts!r}")
        else:
            timestamp = default_timestamp

        try:
            source = LocationSource(str(payload.get("source") or LocationSource.GPS.value).lower())
        except ValueError:
            raise ValidationError(f"unknown location source: {payload.get('source')!r}")

        return cls(
            latitude=latitude,
            longitude=longitude,
            accuracy_meters=accuracy,
            timestamp=timestamp,
            source=source,
        )


@dataclass(frozen=True)
class OfficeLocation:
    """Registered office geofence. Soft-deleted via is_active=False."""

    office_id: int
    name: str
    latitude: float
    longitude: float
    radius_meters: float
    is_active: bool = True

    def __post_init__(self):
        require_latitude(self.latitude)
        require_longitude(self.longitude)
        require_positive(self.radius_meters, "radius")

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(self.latitude, self.longitude)


@dataclass(frozen=True)
class QualityAssessment:
    quality: LocationQuality
    confidence: float


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of matching a sample against the office set. Never persisted."""

    is_valid: bool
    confidence: float
    accuracy_meters: float
    source: LocationSource
    distance_meters: Optional[float] = None
    within_effective_radius: Optional[bool] = None
    recommendations: list[str] = field(default_factory=list)
    office_id: Optional[int] = None
    office_name: Optional[str] = None
    effective_radius_meters: Optional[float] = None
    quality: Optional[LocationQuality] = None
    validation_path: ValidationPath = ValidationPath.FAILED

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "confidence": round(self.confidence, 3),
            "accuracy": self.accuracy_meters,
            "source": self.source.value,
            "distance": round(self.distance_meters, 1) if self.distance_meters is not None else None,
            "within_effective_radius": self.within_effective_radius,
            "recommendations": list(self.recommendations),
            "office_id": self.office_id,
            "office_name": self.office_name,
            "effective_radius": (
                round(self.effective_radius_meters, 1) if self.effective_radius_meters is not None else None
            ),
            "quality": self.quality.value if self.quality else None,
            "validation_path": self.validation_path.value,
        }


@dataclass(frozen=True)
class OfficeCandidate:
    office: OfficeLocation
    distance_meters: float
    probability: float

    def to_dict(self) -> dict:
        return {
            "office_id": self.office.office_id,
            "office_name": self.office.name,
            "distance": round(self.distance_meters, 1),
            "probability": round(self.probability, 3),
        }


@dataclass(frozen=True)
class OfficeDetection:
    detected: Optional[OfficeLocation]
    confidence: float
    candidates: list[OfficeCandidate]

    @property
    def alternatives(self) -> list[OfficeCandidate]:
        return self.candidates[1 : 1 + RANK_MAX_ALTERNATIVES]

    def to_dict(self) -> dict:
        return {
            "detected_office": self.candidates[0].to_dict() if self.candidates else None,
            "confidence": round(self.confidence, 3),
            "alternatives": [c.to_dict() for c in self.alternatives],
        }


@dataclass(frozen=True)
class AnomalyReport:
    is_anomalous: bool
    risk_level: RiskLevel
    reasons: list[str] = field(default_factory=list)

    @classmethod
    def clean(cls) -> "AnomalyReport":
        return cls(is_anomalous=False, risk_level=RiskLevel.LOW, reasons=[])

    def to_dict(self) -> dict:
        return {
            "is_anomalous": self.is_anomalous,
            "risk_level": self.risk_level.value,
            "reasons": list(self.reasons),
        }
