from __future__ import annotations

import logging
from typing import Hashable

from ..offices.repository import OfficeRepository
from .anomaly import detect_anomalies
from .history import LocationHistory
from .model import AnomalyReport, LocationSample, OfficeDetection, ValidationResult
from .ranking import detect_office_location
from .validation import LocationValidator

logger = logging.getLogger(__name__)


class LocationService:
    """Validation, office detection and anomaly screening against the current office set."""

    def __init__(self, offices: OfficeRepository, validator: LocationValidator, history: LocationHistory):
        self._offices = offices
        self._validator = validator
        self._history = history

    def validate(self, sample: LocationSample) -> ValidationResult:
        return self._validator.validate(sample, self._offices.list_active())

    def detect_office(self, sample: LocationSample) -> OfficeDetection:
        return detect_office_location(sample, self._offices.list_active())

    def preview_anomalies(self, user_id: Hashable, sample: LocationSample) -> AnomalyReport:
        """Screen without recording the sample (used by the standalone validate endpoint)."""
        return detect_anomalies(sample, self._history.recent(user_id))

    def screen(self, user_id: Hashable, sample: LocationSample) -> AnomalyReport:
        """Screen a sample against the user's history, then record it."""
        report = detect_anomalies(sample, self._history.recent(user_id))
        self._history.append(user_id, sample)
        if report.is_anomalous:
            logger.warning(
                "location anomaly user=%s risk=%s reasons=%s",
                user_id,
                report.risk_level.value,
                "; ".join(report.reasons),
            )
        return report
