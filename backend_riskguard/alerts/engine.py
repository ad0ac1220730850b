"""
Alert engine: block decisions and location alerts from analysis results.

Runs after evaluation on the caller side. Decides whether a result should
put the event's identifier on the blocklist, and turns a geospatial result
into at most one location alert (geofence breach, travel velocity anomaly,
new location), most severe first.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from backend_riskguard.analysis_engine.checksum import clean_card_number
from backend_riskguard.analysis_engine.classifier import ThresholdTable
from backend_riskguard.analysis_engine.models import (
    AnalysisResult,
    CardTransaction,
    Event,
    EventDomain,
    GenericTransaction,
    GeoTransaction,
    OtpMessage,
    PhishingSubmission,
    UrlSubmission,
)
from backend_riskguard.analysis_engine.signals import (
    DIMENSION_FAMILIARITY,
    DIMENSION_TRAVEL,
    DIMENSION_ZONE,
)
from backend_riskguard.riskguard_logging import get_logger, mask_identifier

logger = get_logger(__name__)

# Zone contribution at or above this means a restricted zone was entered
RESTRICTED_ZONE_SCORE = 60.0
TRAVEL_ALERT_ABOVE = 30.0
NEW_LOCATION_ALERT_FROM = 30.0
RESTRICTED_REASON_PREFIX = "Transaction in restricted zone"


class AlertType(str, Enum):
    GEOFENCE_BREACH = "geofence_breach"
    VELOCITY_ANOMALY = "velocity_anomaly"
    NEW_LOCATION = "new_location"


class AlertSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AlertAction(str, Enum):
    MONITOR = "monitor"
    ALERT = "alert"
    BLOCK = "block"


@dataclass(frozen=True)
class LocationAlert:
    type: AlertType
    severity: AlertSeverity
    action: AlertAction
    message: str
    location: str
    coordinates: tuple[float, float]

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "action": self.action.value,
            "message": self.message,
            "location": self.location,
            "coordinates": list(self.coordinates),
        }


def blocking_identifier(event: Event) -> str | None:
    """
    Identifier a caller would put on the blocklist for this event, or None.

    Card numbers are masked so the blocklist never holds a full PAN.
    """
    if isinstance(event, OtpMessage):
        return event.sender.strip() or None
    if isinstance(event, UrlSubmission):
        return event.url.strip() or None
    if isinstance(event, PhishingSubmission):
        return (event.sender or "").strip() or (event.url or "").strip() or None
    if isinstance(event, CardTransaction):
        digits = clean_card_number(event.card_number)
        return mask_identifier(digits) if digits else None
    if isinstance(event, GenericTransaction):
        return event.merchant.strip() or None
    if isinstance(event, GeoTransaction):
        return event.actor_id.strip() or None
    return None


def _restricted_zone_hit(result: AnalysisResult) -> bool:
    zone = result.contribution(DIMENSION_ZONE)
    if zone is None:
        return False
    return zone.score >= RESTRICTED_ZONE_SCORE and any(
        reason.startswith(RESTRICTED_REASON_PREFIX) for reason in zone.reasons
    )


def should_block(result: AnalysisResult, thresholds: ThresholdTable) -> bool:
    """True when the result is in the domain's top band, or (geo) a restricted zone was entered."""
    if result.severity_rank == len(thresholds.bands) - 1:
        return True
    return result.domain is EventDomain.GEO and _restricted_zone_hit(result)


def derive_location_alert(event: GeoTransaction, result: AnalysisResult) -> LocationAlert | None:
    """Most severe location alert for a geo result; None when nothing warrants one."""
    coordinates = (event.latitude, event.longitude)
    location = event.location or f"{event.latitude:.4f}, {event.longitude:.4f}"

    if _restricted_zone_hit(result):
        zone = result.contribution(DIMENSION_ZONE)
        breach = next(r for r in zone.reasons if r.startswith(RESTRICTED_REASON_PREFIX))
        alert = LocationAlert(
            type=AlertType.GEOFENCE_BREACH,
            severity=AlertSeverity.CRITICAL,
            action=AlertAction.BLOCK,
            message=breach,
            location=location,
            coordinates=coordinates,
        )
    else:
        travel = result.contribution(DIMENSION_TRAVEL)
        familiarity = result.contribution(DIMENSION_FAMILIARITY)
        if travel is not None and travel.score > TRAVEL_ALERT_ABOVE:
            alert = LocationAlert(
                type=AlertType.VELOCITY_ANOMALY,
                severity=AlertSeverity.HIGH,
                action=AlertAction.ALERT,
                message="Suspicious travel velocity detected",
                location=location,
                coordinates=coordinates,
            )
        elif familiarity is not None and familiarity.score >= NEW_LOCATION_ALERT_FROM:
            alert = LocationAlert(
                type=AlertType.NEW_LOCATION,
                severity=AlertSeverity.MEDIUM,
                action=AlertAction.MONITOR,
                message=f"Transaction from new location: {location}",
                location=location,
                coordinates=coordinates,
            )
        else:
            return None

    logger.info(
        "location_alert_derived",
        alert_type=alert.type.value,
        severity=alert.severity.value,
        total_score=round(result.total_score, 2),
    )
    return alert
