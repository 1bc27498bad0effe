from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ..core import constants
from ..core.enums import SignalConfidence
from ..geo.validator import GeoPoint, distance_meters
from .model import DevicePosition
from .repository import LocationHistoryRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignalAssessment:
    valid: bool
    confidence: SignalConfidence
    indicators: List[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        if self.confidence == SignalConfidence.LOW:
            return "High risk of GPS spoofing detected"
        if self.confidence == SignalConfidence.MEDIUM:
            return "Potential GPS spoofing indicators detected"
        return "Location appears authentic"

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "confidence": self.confidence.value,
            "indicators": list(self.indicators),
            "message": self.message,
        }


@dataclass(frozen=True)
class MovementCheck:
    possible: bool
    distance_meters: float = 0.0
    time_diff_seconds: float = 0.0
    required_speed_kmh: float = 0.0


def assess_signal(position: DevicePosition, *, now: Optional[datetime] = None) -> SignalAssessment:
    """Advisory check on raw GPS fields reported by the device.

    Never blocks a clock event on its own; the movement check in
    AntiSpoofingGuard is the authoritative one.
    """

    indicators: list[str] = []

    if position.timestamp is not None:
        now = now or datetime.now(tz=position.timestamp.tzinfo)
        age = (now - position.timestamp).total_seconds()
        if age > constants.MAX_POSITION_AGE_SECONDS or age < -constants.MAX_POSITION_CLOCK_SKEW_SECONDS:
            indicators.append("GPS timestamp appears manipulated")

    if position.accuracy is not None:
        if position.accuracy < constants.MIN_PLAUSIBLE_ACCURACY_METERS:
            indicators.append("Unrealistically high GPS accuracy")
        elif position.accuracy > constants.MAX_PLAUSIBLE_ACCURACY_METERS:
            indicators.append("GPS accuracy outside plausible range")

    if position.altitude is None and position.altitude_accuracy is not None:
        indicators.append("Inconsistent altitude data")

    if position.speed is not None and position.speed > constants.MAX_DEVICE_SPEED_MPS:
        indicators.append("Impossible movement speed detected")

    if position.speed == 0 and position.heading is not None:
        indicators.append("Inconsistent heading data")

    if len(indicators) >= 2:
        confidence = SignalConfidence.LOW
    elif indicators:
        confidence = SignalConfidence.MEDIUM
    else:
        confidence = SignalConfidence.HIGH

    return SignalAssessment(valid=not indicators, confidence=confidence, indicators=indicators)


class AntiSpoofingGuard:
    """Movement-plausibility check against the student's last known location."""

    def __init__(self, history: LocationHistoryRepository, *, max_speed_kmh: float = constants.DEFAULT_MAX_SPEED_KMH):
        self._history = history
        self._max_speed_kmh = float(max_speed_kmh)

    def detect_impossible_movement(
        self,
        student_id: str,
        lat: float,
        lng: float,
        timestamp: datetime,
        max_speed_kmh: Optional[float] = None,
    ) -> MovementCheck:
        limit = self._max_speed_kmh if max_speed_kmh is None else float(max_speed_kmh)

        last = self._history.get_latest_for_student(student_id)
        if last is None:
            return MovementCheck(possible=True)

        distance = distance_meters(last.point, GeoPoint(lat=lat, lng=lng))
        time_diff = (timestamp - last.timestamp).total_seconds()

        if time_diff <= 0:
            # Same instant or earlier than the last sample: any displacement is infinitely fast.
            possible = distance == 0
            required = 0.0 if possible else float("inf")
        else:
            required = distance / time_diff * 3.6
            possible = required <= limit

        if not possible:
            logger.warning(
                "Impossible movement for student %s: %.0fm in %.0fs (%.1f km/h > %.0f km/h)",
                student_id,
                distance,
                time_diff,
                required,
                limit,
            )

        return MovementCheck(
            possible=possible,
            distance_meters=distance,
            time_diff_seconds=time_diff,
            required_speed_kmh=required,
        )
