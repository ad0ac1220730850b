"""
Data models for analysis engine input and output.

Events are a tagged union over EventDomain: one frozen dataclass per domain,
each carrying its tag as a class attribute. HistoricalContext is the
read-only, caller-resolved history for the event's actor. RiskContribution
and AnalysisResult are the engine's outputs; all of these are immutable.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Union


class EventDomain(str, Enum):
    CARD = "card"
    OTP = "otp"
    URL = "url"
    PHISHING = "phishing"
    TRANSACTION = "transaction"
    GEO = "geo"


class CardTransactionType(str, Enum):
    PURCHASE = "purchase"
    WITHDRAWAL = "withdrawal"
    ONLINE = "online"
    CONTACTLESS = "contactless"


class MessageChannel(str, Enum):
    EMAIL = "email"
    URL = "url"
    SMS = "sms"
    CALL = "call"


# -----------------------------------------------------------------------------
# Events
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class CardTransaction:
    """Payment-card transaction submitted for authorization."""

    domain: ClassVar[EventDomain] = EventDomain.CARD

    card_number: str
    amount: float
    merchant: str
    location: str
    timestamp: datetime
    transaction_type: CardTransactionType = CardTransactionType.PURCHASE
    merchant_category: str = ""
    currency: str = "USD"
    device_id: str | None = None
    device_risk_factors: tuple[str, ...] = ()
    """Device findings from the client (e.g. "Emulator detected", "VPN/Proxy usage")."""


@dataclass(frozen=True)
class OtpMessage:
    """SMS carrying (or pretending to carry) a one-time password."""

    domain: ClassVar[EventDomain] = EventDomain.OTP

    message: str
    sender: str
    timestamp: datetime


@dataclass(frozen=True)
class UrlSubmission:
    domain: ClassVar[EventDomain] = EventDomain.URL

    url: str
    timestamp: datetime


@dataclass(frozen=True)
class PhishingSubmission:
    """Email, SMS, call transcript or link pasted in for phishing analysis."""

    domain: ClassVar[EventDomain] = EventDomain.PHISHING

    content: str
    timestamp: datetime
    channel: MessageChannel = MessageChannel.EMAIL
    sender: str = ""
    subject: str = ""
    url: str = ""


@dataclass(frozen=True)
class GenericTransaction:
    domain: ClassVar[EventDomain] = EventDomain.TRANSACTION

    amount: float
    merchant: str
    location: str
    timestamp: datetime
    card_number: str = ""
    currency: str = "INR"


@dataclass(frozen=True)
class GeoTransaction:
    """Transaction with device coordinates."""

    domain: ClassVar[EventDomain] = EventDomain.GEO

    latitude: float
    longitude: float
    amount: float
    timestamp: datetime
    location: str = ""
    actor_id: str = ""


Event = Union[
    CardTransaction,
    OtpMessage,
    UrlSubmission,
    PhishingSubmission,
    GenericTransaction,
    GeoTransaction,
]

EVENT_TYPES: dict[EventDomain, type] = {
    EventDomain.CARD: CardTransaction,
    EventDomain.OTP: OtpMessage,
    EventDomain.URL: UrlSubmission,
    EventDomain.PHISHING: PhishingSubmission,
    EventDomain.TRANSACTION: GenericTransaction,
    EventDomain.GEO: GeoTransaction,
}


# -----------------------------------------------------------------------------
# Historical context (resolved by the caller, never fetched by the engine)
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class PriorEvent:
    """One earlier event by the same actor (card, sender, account)."""

    timestamp: datetime
    amount: float = 0.0


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float
    timestamp: datetime


@dataclass(frozen=True)
class UserZone:
    """A place the actor transacts from regularly."""

    name: str
    latitude: float
    longitude: float
    radius_m: float
    frequency: float
    """Share of the actor's transactions in this zone, in percent."""
    avg_amount: float = 0.0


@dataclass(frozen=True)
class HistoricalContext:
    """
    Read-only history for the event's actor, supplied per call.

    Every field defaults to "unknown"; an unknown signal contributes no risk.
    Scores that the dashboard used to simulate are injected here instead.
    """

    recent_events: tuple[PriorEvent, ...] = ()
    known_locations: frozenset[str] = frozenset()
    last_legitimate_location: str | None = None
    previous_point: GeoPoint | None = None
    user_zones: tuple[UserZone, ...] = ()
    known_devices: frozenset[str] = frozenset()
    blocked_identifiers: frozenset[str] = frozenset()
    """Snapshot of the external blocklist."""

    behavioral_score: float | None = None
    """0-100, higher means closer to the actor's usual behavior."""
    biometric_score: float | None = None
    """0-100, higher means a stronger biometric match."""
    fraud_ring_score: float | None = None
    """0-100, association strength with known fraud rings."""
    cross_border_risk: float | None = None
    pattern_anomaly_score: float | None = None
    """0-100, distance from the actor's usual transaction pattern."""

    url_report_count: int = 0
    verified_scam_urls: frozenset[str] = frozenset()
    trusted_domains: frozenset[str] = frozenset()
    domain_age_days: int | None = None
    poor_domain_reputation: bool = False

    def with_blocked(self, identifiers: frozenset[str]) -> HistoricalContext:
        """Return a copy whose blocklist snapshot also contains identifiers."""
        return replace(self, blocked_identifiers=self.blocked_identifiers | identifiers)


EMPTY_CONTEXT = HistoricalContext()


# -----------------------------------------------------------------------------
# Outputs
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class RiskContribution:
    """Score and reasons produced by exactly one analyzer for one event."""

    dimension: str
    score: float
    reasons: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "dimension": self.dimension,
            "score": round(self.score, 2),
            "reasons": list(self.reasons),
        }


@dataclass(frozen=True)
class AnalysisResult:
    """
    Complete verdict for one evaluation.

    total_score is the clamped sum of contribution scores; status and
    recommendation depend only on total_score and the domain's threshold
    table; severity_rank is the index of the matched band (0 = lowest risk).
    """

    domain: EventDomain
    total_score: float
    status: str
    recommendation: str
    confidence: float
    severity_rank: int
    contributions: tuple[RiskContribution, ...] = field(default_factory=tuple)

    @property
    def reasons(self) -> list[str]:
        """All contribution reasons, in analyzer order."""
        return [reason for c in self.contributions for reason in c.reasons]

    def contribution(self, dimension: str) -> RiskContribution | None:
        for c in self.contributions:
            if c.dimension == dimension:
                return c
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "domain": self.domain.value,
            "total_score": round(self.total_score, 2),
            "status": self.status,
            "recommendation": self.recommendation,
            "confidence": round(self.confidence, 2),
            "severity_rank": self.severity_rank,
            "reasons": self.reasons,
            "contributions": [c.to_dict() for c in self.contributions],
        }
