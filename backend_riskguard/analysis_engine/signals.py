"""
Signal analyzers for transaction-shaped events (card, generic, geospatial).

Every analyzer has the same contract:

    analyzer(event, context, weights) -> RiskContribution

It reads only the event fields it needs (plus the caller-resolved
HistoricalContext), never raises on well-formed events, and never goes
below zero. Unknown history contributes nothing. Each weights dataclass
holds the thresholds and scores for one dimension; the defaults are the
card-domain values and rules.py overrides them per domain.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from backend_riskguard.analysis_engine.checksum import validate_checksum
from backend_riskguard.analysis_engine.geo import (
    haversine_km,
    is_undefined_speed,
    point_in_polygon,
    polygon_center,
    travel_speed_kmh,
)
from backend_riskguard.analysis_engine.models import (
    CardTransactionType,
    GeoPoint,
    HistoricalContext,
    RiskContribution,
    UserZone,
)
from backend_riskguard.analysis_engine.patterns import (
    ScoreTier,
    contains_any,
    contains_phrase,
    first_tier,
    matched_phrases,
)

DIMENSION_CHECKSUM = "checksum"
DIMENSION_AMOUNT = "amount"
DIMENSION_MERCHANT = "merchant"
DIMENSION_GEOGRAPHY = "geography"
DIMENSION_VELOCITY = "velocity"
DIMENSION_TEMPORAL = "temporal"
DIMENSION_CHANNEL = "channel"
DIMENSION_DEVICE = "device"
DIMENSION_BEHAVIOR = "behavior"
DIMENSION_TEXT_PATTERNS = "text_patterns"
DIMENSION_ANOMALY = "anomaly"
DIMENSION_ZONE = "zone"
DIMENSION_FAMILIARITY = "familiarity"
DIMENSION_TRAVEL = "travel"


def make_contribution(dimension: str, score: float, reasons: list[str]) -> RiskContribution:
    """Build a contribution, flooring the score at 0."""
    return RiskContribution(dimension=dimension, score=max(0.0, score), reasons=tuple(reasons))


def is_night(timestamp: datetime, night_start_hour: int, night_end_hour: int) -> bool:
    """True for hour >= night_start_hour or hour <= night_end_hour (e.g. 23:00-05:59)."""
    return timestamp.hour >= night_start_hour or timestamp.hour <= night_end_hour


def is_weekend(timestamp: datetime) -> bool:
    return timestamp.weekday() >= 5


def _transaction_type(event: Any) -> str | None:
    value = getattr(event, "transaction_type", None)
    if isinstance(value, CardTransactionType):
        return value.value
    return value


def matching_user_zone(latitude: float, longitude: float, zones: tuple[UserZone, ...]) -> UserZone | None:
    """First user zone whose radius contains the point."""
    for zone in zones:
        if haversine_km(latitude, longitude, zone.latitude, zone.longitude) < zone.radius_m / 1000.0:
            return zone
    return None


# -----------------------------------------------------------------------------
# Checksum / format
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class ChecksumWeights:
    invalid_score: float = 50.0
    invalid_reason: str = "Invalid card number (Luhn check failed)"


def analyze_checksum(event: Any, context: HistoricalContext, weights: ChecksumWeights) -> RiskContribution:
    """Fixed penalty when the card number fails the Luhn check."""
    if validate_checksum(event.card_number):
        return make_contribution(DIMENSION_CHECKSUM, 0.0, [])
    return make_contribution(DIMENSION_CHECKSUM, weights.invalid_score, [weights.invalid_reason])


# -----------------------------------------------------------------------------
# Amount
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class ChannelSurcharge:
    transaction_type: str
    threshold: float
    score: float
    reason: str


@dataclass(frozen=True)
class AmountWeights:
    tiers: tuple[ScoreTier, ...] = (
        ScoreTier(50000, 35, "Extremely high amount"),
        ScoreTier(25000, 25, "Very high amount"),
        ScoreTier(10000, 15, "High amount transaction"),
    )
    round_multiple: float = 1000.0
    round_floor: float = 5000.0
    round_score: float = 8.0
    fraud_amounts: tuple[float, ...] = ()
    fraud_amount_score: float = 20.0
    channel_surcharges: tuple[ChannelSurcharge, ...] = (
        ChannelSurcharge("withdrawal", 20000, 20, "High-value ATM withdrawal"),
        ChannelSurcharge("online", 15000, 12, "High-value online transaction"),
    )
    zone_average_multiple: float | None = None
    """Geo only: flag amounts above this multiple of the matched user zone's average."""
    zone_average_score: float = 20.0


def analyze_amount(event: Any, context: HistoricalContext, weights: AmountWeights) -> RiskContribution:
    """Tiered amount score, round-amount and known-fraud-amount bonuses, channel surcharges."""
    amount = float(event.amount)
    score = 0.0
    reasons: list[str] = []

    tier = first_tier(amount, weights.tiers)
    if tier is not None:
        score += tier.score
        reasons.append(f"{tier.reason} (> {tier.threshold:,.0f})")

    if (
        weights.round_score
        and weights.round_multiple > 0
        and amount >= weights.round_floor
        and amount % weights.round_multiple == 0
    ):
        score += weights.round_score
        reasons.append("Round amount pattern")

    if amount in weights.fraud_amounts:
        score += weights.fraud_amount_score
        reasons.append("Common fraud amount")

    tx_type = _transaction_type(event)
    for surcharge in weights.channel_surcharges:
        if tx_type == surcharge.transaction_type and amount > surcharge.threshold:
            score += surcharge.score
            reasons.append(surcharge.reason)

    if weights.zone_average_multiple is not None and hasattr(event, "latitude"):
        zone = matching_user_zone(event.latitude, event.longitude, context.user_zones)
        if zone is not None and zone.avg_amount > 0 and amount > zone.avg_amount * weights.zone_average_multiple:
            score += weights.zone_average_score
            reasons.append(f"Unusual amount for {zone.name} (average {zone.avg_amount:,.0f})")

    return make_contribution(DIMENSION_AMOUNT, score, reasons)


# -----------------------------------------------------------------------------
# Velocity
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class VelocityWeights:
    window_seconds: float = 3600.0
    count_tiers: tuple[ScoreTier, ...] = (
        ScoreTier(10, 30, "Excessive transaction frequency", inclusive=True),
        ScoreTier(5, 15, "High transaction frequency", inclusive=True),
    )
    amount_threshold: float | None = 50000.0
    """Flag when the window's cumulative amount (this event included) exceeds this; needs at least one prior event."""
    amount_score: float = 25.0
    amount_reason: str = "High cumulative transaction amount"


def analyze_velocity(event: Any, context: HistoricalContext, weights: VelocityWeights) -> RiskContribution:
    """Count and sum the actor's prior events in the trailing window ending at this event."""
    window_start = event.timestamp - timedelta(seconds=weights.window_seconds)
    in_window = [
        prior for prior in context.recent_events
        if window_start <= prior.timestamp <= event.timestamp
    ]
    score = 0.0
    reasons: list[str] = []

    tier = first_tier(len(in_window), weights.count_tiers)
    if tier is not None:
        score += tier.score
        reasons.append(f"{tier.reason} ({len(in_window)} in window)")

    # Cumulative amount needs at least one prior event in the window
    if weights.amount_threshold is not None and in_window:
        cumulative = sum(prior.amount for prior in in_window) + float(getattr(event, "amount", 0.0) or 0.0)
        if cumulative > weights.amount_threshold:
            score += weights.amount_score
            reasons.append(weights.amount_reason)

    return make_contribution(DIMENSION_VELOCITY, score, reasons)


# -----------------------------------------------------------------------------
# Geography (named locations)
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class LocationWeights:
    high_risk: tuple[str, ...] = ("Nigeria", "Romania", "Russia", "Unknown", "North Korea")
    high_risk_score: float = 30.0
    medium_risk: tuple[str, ...] = ("Brazil", "Mexico", "Philippines")
    medium_risk_score: float = 15.0
    unknown_markers: tuple[str, ...] = ("unknown",)
    min_length: int = 3
    unknown_score: float = 20.0
    unfamiliar_score: float | None = 30.0
    """Location outside the actor's history; None disables the check."""
    cross_border_threshold: float | None = 30.0


def analyze_geography(event: Any, context: HistoricalContext, weights: LocationWeights) -> RiskContribution:
    """Static high/medium-risk lists, unknown locations, location history, cross-border risk."""
    location = (event.location or "").strip()
    score = 0.0
    reasons: list[str] = []

    if contains_any(location, weights.high_risk, word_start=False):
        score += weights.high_risk_score
        reasons.append("High-risk geographic location")
    elif contains_any(location, weights.medium_risk, word_start=False):
        score += weights.medium_risk_score
        reasons.append("Medium-risk geographic location")

    if contains_any(location, weights.unknown_markers, word_start=False) or len(location) < weights.min_length:
        score += weights.unknown_score
        reasons.append("Unknown transaction location")

    if weights.unfamiliar_score is not None:
        history = {loc.strip().lower() for loc in context.known_locations}
        if context.last_legitimate_location:
            history.add(context.last_legitimate_location.strip().lower())
        if history and location.lower() not in history:
            score += weights.unfamiliar_score
            reasons.append("Location anomaly detected")

    if (
        weights.cross_border_threshold is not None
        and context.cross_border_risk is not None
        and context.cross_border_risk > weights.cross_border_threshold
    ):
        score += context.cross_border_risk
        reasons.append("High cross-border transaction risk")

    return make_contribution(DIMENSION_GEOGRAPHY, score, reasons)


# -----------------------------------------------------------------------------
# Merchant
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class MerchantWeights:
    high_risk_names: tuple[str, ...] = ("Casino", "Gambling", "Crypto", "Unknown Merchant", "Adult Entertainment")
    high_risk_score: float = 25.0
    high_risk_reason: str = "High-risk merchant"
    high_risk_categories: tuple[str, ...] = ("Gaming", "Cryptocurrency", "Adult", "Gambling", "High Risk")
    category_score: float = 20.0
    suspicious_names: tuple[str, ...] = ("unknown",)
    suspicious_score: float = 15.0
    min_length: int = 3
    short_name_score: float = 15.0
    card_not_present_keywords: tuple[str, ...] = ("online", "web", "internet")
    card_not_present_score: float = 15.0
    digit_run_length: int | None = 3
    """Flag merchant names with this many consecutive digits; None disables."""
    digit_run_score: float = 15.0


def analyze_merchant(event: Any, context: HistoricalContext, weights: MerchantWeights) -> RiskContribution:
    merchant = (event.merchant or "").strip()
    score = 0.0
    reasons: list[str] = []

    if contains_any(merchant, weights.high_risk_names, word_start=False):
        score += weights.high_risk_score
        reasons.append(weights.high_risk_reason)

    category = getattr(event, "merchant_category", "") or ""
    if category and contains_any(category, weights.high_risk_categories, word_start=False):
        score += weights.category_score
        reasons.append("High-risk merchant category")

    if contains_any(merchant, weights.suspicious_names, word_start=False):
        score += weights.suspicious_score
        reasons.append("Suspicious merchant name")

    if len(merchant) < weights.min_length:
        score += weights.short_name_score
        reasons.append("Incomplete merchant information")

    if weights.card_not_present_keywords and contains_any(merchant, weights.card_not_present_keywords):
        score += weights.card_not_present_score
        reasons.append("Card not present transaction")

    if weights.digit_run_length and re.search(r"\d{%d,}" % weights.digit_run_length, merchant):
        score += weights.digit_run_score
        reasons.append("Suspicious merchant name pattern")

    return make_contribution(DIMENSION_MERCHANT, score, reasons)


# -----------------------------------------------------------------------------
# Temporal
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class TemporalWeights:
    night_start_hour: int = 23
    night_end_hour: int = 5
    night_score: float = 12.0
    night_reason: str = "Unusual transaction time (night)"
    weekend_late_hour: int = 22
    weekend_late_score: float = 8.0
    weekend_score: float = 0.0
    """Any weekend event (geo panel); 0 disables."""
    night_withdrawal_score: float = 15.0


def analyze_temporal(event: Any, context: HistoricalContext, weights: TemporalWeights) -> RiskContribution:
    """Night hours, late weekend, any weekend, and night-time withdrawals."""
    ts = event.timestamp
    night = is_night(ts, weights.night_start_hour, weights.night_end_hour)
    score = 0.0
    reasons: list[str] = []

    if night and weights.night_score:
        score += weights.night_score
        reasons.append(weights.night_reason)

    if is_weekend(ts):
        if weights.weekend_late_score and ts.hour >= weights.weekend_late_hour:
            score += weights.weekend_late_score
            reasons.append("Late weekend transaction")
        if weights.weekend_score:
            score += weights.weekend_score
            reasons.append("Weekend transaction")

    if night and weights.night_withdrawal_score and _transaction_type(event) == CardTransactionType.WITHDRAWAL.value:
        score += weights.night_withdrawal_score
        reasons.append("ATM withdrawal at unusual time")

    return make_contribution(DIMENSION_TEMPORAL, score, reasons)


# -----------------------------------------------------------------------------
# Card channel (transaction type)
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class ChannelWeights:
    online_base_score: float = 5.0
    online_high_threshold: float = 10000.0
    online_high_score: float = 10.0
    withdrawal_threshold: float = 20000.0
    withdrawal_score: float = 15.0
    contactless_threshold: float = 5000.0
    contactless_score: float = 8.0


def analyze_channel(event: Any, context: HistoricalContext, weights: ChannelWeights) -> RiskContribution:
    tx_type = _transaction_type(event)
    amount = float(event.amount)
    score = 0.0
    reasons: list[str] = []

    if tx_type == CardTransactionType.ONLINE.value:
        score += weights.online_base_score
        reasons.append("Card-not-present channel (online)")
        if amount > weights.online_high_threshold:
            score += weights.online_high_score
            reasons.append("High-value online transaction")
    elif tx_type == CardTransactionType.WITHDRAWAL.value:
        if amount > weights.withdrawal_threshold:
            score += weights.withdrawal_score
            reasons.append("High-value ATM withdrawal")
    elif tx_type == CardTransactionType.CONTACTLESS.value:
        if amount > weights.contactless_threshold:
            score += weights.contactless_score
            reasons.append("High-value contactless payment")

    return make_contribution(DIMENSION_CHANNEL, score, reasons)


# -----------------------------------------------------------------------------
# Device and behavioral signals (card)
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class DeviceWeights:
    per_risk_factor_score: float = 20.0
    unknown_device_score: float = 20.0
    behavioral_threshold: float = 85.0
    behavioral_score: float = 25.0
    biometric_threshold: float = 80.0
    biometric_multiplier: float = 0.4
    fraud_ring_threshold: float = 20.0
    fraud_ring_multiplier: float = 1.5


def analyze_device(event: Any, context: HistoricalContext, weights: DeviceWeights) -> RiskContribution:
    """Device risk factors, unseen devices, and externally supplied behavior/biometric/ring scores."""
    score = 0.0
    reasons: list[str] = []

    for factor in getattr(event, "device_risk_factors", ()) or ():
        score += weights.per_risk_factor_score
        reasons.append(f"Device risk: {factor}")

    device_id = getattr(event, "device_id", None)
    if device_id and context.known_devices and device_id not in context.known_devices:
        score += weights.unknown_device_score
        reasons.append("New device for this card")

    if context.behavioral_score is not None and context.behavioral_score < weights.behavioral_threshold:
        score += weights.behavioral_score
        reasons.append("Unusual user behavior pattern")

    if context.biometric_score is not None and context.biometric_score < weights.biometric_threshold:
        score += (100.0 - context.biometric_score) * weights.biometric_multiplier
        reasons.append("Biometric verification failed")

    if context.fraud_ring_score is not None and context.fraud_ring_score > weights.fraud_ring_threshold:
        score += context.fraud_ring_score * weights.fraud_ring_multiplier
        reasons.append("Potential fraud ring association")

    return make_contribution(DIMENSION_DEVICE, score, reasons)


# -----------------------------------------------------------------------------
# Generic transaction: behavior, text patterns, composite anomaly
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class BehaviorWeights:
    anomaly_tiers: tuple[ScoreTier, ...] = (
        ScoreTier(80, 30, "Fraudulent behavior pattern"),
        ScoreTier(60, 20, "Suspicious behavior pattern"),
        ScoreTier(40, 10, "Unusual behavior pattern"),
    )
    night_start_hour: int = 23
    night_end_hour: int = 5
    night_score: float = 12.0


def analyze_behavior(event: Any, context: HistoricalContext, weights: BehaviorWeights) -> RiskContribution:
    """Externally scored pattern anomaly plus night-time activity."""
    score = 0.0
    reasons: list[str] = []

    if context.pattern_anomaly_score is not None:
        tier = first_tier(context.pattern_anomaly_score, weights.anomaly_tiers)
        if tier is not None:
            score += tier.score
            reasons.append(tier.reason)

    if is_night(event.timestamp, weights.night_start_hour, weights.night_end_hour):
        score += weights.night_score
        reasons.append("Unusual transaction time")

    return make_contribution(DIMENSION_BEHAVIOR, score, reasons)


@dataclass(frozen=True)
class TextPatternWeights:
    merchant_keywords: tuple[str, ...] = ("temp", "test", "fake", "unknown", "generic", "sample")
    keyword_score: float = 15.0
    unusual_characters_score: float = 10.0
    incomplete_location_score: float = 15.0
    min_location_length: int = 3


_UNUSUAL_MERCHANT_CHARS = re.compile(r"[^a-zA-Z0-9\s]")


def analyze_text_patterns(event: Any, context: HistoricalContext, weights: TextPatternWeights) -> RiskContribution:
    """Keyword and character checks over merchant and location text."""
    merchant = (event.merchant or "").lower()
    location = (event.location or "").strip().lower()
    score = 0.0
    reasons: list[str] = []

    for keyword in matched_phrases(merchant, weights.merchant_keywords, word_start=False):
        score += weights.keyword_score
        reasons.append(f"Suspicious keyword in merchant name: {keyword}")

    if _UNUSUAL_MERCHANT_CHARS.search(merchant):
        score += weights.unusual_characters_score
        reasons.append("Unusual characters in merchant name")

    if "unknown" in location or len(location) < weights.min_location_length:
        score += weights.incomplete_location_score
        reasons.append("Incomplete location information")

    return make_contribution(DIMENSION_TEXT_PATTERNS, score, reasons)


@dataclass(frozen=True)
class CompositeAnomalyWeights:
    amount_threshold: float = 75000.0
    short_merchant_length: int = 5
    night_start_hour: int = 23
    night_end_hour: int = 5
    min_hits: int = 2
    score: float = 25.0


def analyze_composite_anomaly(
    event: Any,
    context: HistoricalContext,
    weights: CompositeAnomalyWeights,
) -> RiskContribution:
    """Flag when several weak indicators co-occur on one transaction."""
    hits = [
        float(event.amount) > weights.amount_threshold,
        len((event.merchant or "").strip()) < weights.short_merchant_length,
        contains_phrase(event.location or "", "unknown", word_start=False),
        is_night(event.timestamp, weights.night_start_hour, weights.night_end_hour),
    ]
    if sum(hits) >= weights.min_hits:
        return make_contribution(DIMENSION_ANOMALY, weights.score, ["Anomalous transaction pattern"])
    return make_contribution(DIMENSION_ANOMALY, 0.0, [])


# -----------------------------------------------------------------------------
# Geospatial: risk zones, familiarity, travel
# -----------------------------------------------------------------------------

ZONE_HIGH_RISK = "high-risk"
ZONE_RESTRICTED = "restricted"


@dataclass(frozen=True)
class RiskZone:
    name: str
    kind: str
    """'high-risk' or 'restricted'; other kinds are informational only."""
    vertices: tuple[tuple[float, float], ...]
    center: tuple[float, float] | None = None

    def resolved_center(self) -> tuple[float, float]:
        return self.center if self.center is not None else polygon_center(self.vertices)

    def distance_km(self, latitude: float, longitude: float) -> float:
        """0 inside the polygon, otherwise the distance to the zone centre."""
        if point_in_polygon(latitude, longitude, self.vertices):
            return 0.0
        lat, lng = self.resolved_center()
        return haversine_km(latitude, longitude, lat, lng)


@dataclass(frozen=True)
class ZoneWeights:
    zones: tuple[RiskZone, ...] = (
        RiskZone(
            name="High Risk Area - Dharavi",
            kind=ZONE_HIGH_RISK,
            vertices=((19.0423, 72.8570), (19.0523, 72.8670), (19.0623, 72.8570), (19.0523, 72.8470)),
        ),
        RiskZone(
            name="Shopping District - Linking Road",
            kind="monitoring",
            vertices=((19.0544, 72.8291), (19.0644, 72.8391), (19.0744, 72.8291), (19.0644, 72.8191)),
        ),
    )
    high_risk_tiers: tuple[ScoreTier, ...] = (
        ScoreTier(1.0, 40, "Inside high-risk zone"),
        ScoreTier(2.0, 20, "Near high-risk zone"),
    )
    """threshold is a distance in km; tiers fire when the distance is below it."""
    restricted_radius_km: float = 0.5
    restricted_score: float = 60.0


def analyze_zone(event: Any, context: HistoricalContext, weights: ZoneWeights) -> RiskContribution:
    score = 0.0
    reasons: list[str] = []
    for zone in weights.zones:
        if zone.kind == ZONE_HIGH_RISK:
            distance = zone.distance_km(event.latitude, event.longitude)
            for tier in weights.high_risk_tiers:
                if distance < tier.threshold:
                    score += tier.score
                    reasons.append(f"{tier.reason}: {zone.name}")
                    break
        elif zone.kind == ZONE_RESTRICTED:
            distance = zone.distance_km(event.latitude, event.longitude)
            if distance < weights.restricted_radius_km:
                score += weights.restricted_score
                reasons.append(f"Transaction in restricted zone: {zone.name}")
    return make_contribution(DIMENSION_ZONE, score, reasons)


@dataclass(frozen=True)
class FamiliarityWeights:
    new_location_score: float = 30.0
    frequency_tiers: tuple[ScoreTier, ...] = (
        ScoreTier(10, 20, "Infrequent location"),
        ScoreTier(30, 10, "Somewhat familiar location"),
    )
    """threshold is a zone frequency in percent; tiers fire when frequency is below it."""


def analyze_familiarity(event: Any, context: HistoricalContext, weights: FamiliarityWeights) -> RiskContribution:
    """How familiar the point is, from the actor's frequent zones (needs history)."""
    if not context.user_zones:
        return make_contribution(DIMENSION_FAMILIARITY, 0.0, [])
    zone = matching_user_zone(event.latitude, event.longitude, context.user_zones)
    if zone is None:
        return make_contribution(DIMENSION_FAMILIARITY, weights.new_location_score, ["Transaction from new location"])
    for tier in weights.frequency_tiers:
        if zone.frequency < tier.threshold:
            return make_contribution(DIMENSION_FAMILIARITY, tier.score, [f"{tier.reason}: {zone.name}"])
    return make_contribution(DIMENSION_FAMILIARITY, 0.0, [])


@dataclass(frozen=True)
class TravelWeights:
    speed_tiers: tuple[ScoreTier, ...] = (
        ScoreTier(100, 40, "Impossible travel speed"),
        ScoreTier(60, 25, "Very fast travel"),
        ScoreTier(30, 10, "Fast travel"),
    )
    simultaneous_score: float = 40.0
    simultaneous_min_distance_km: float = 0.0


def analyze_travel(event: Any, context: HistoricalContext, weights: TravelWeights) -> RiskContribution:
    """Travel speed from the actor's previous point; an undefined speed is its own signal."""
    previous = context.previous_point
    if previous is None:
        return make_contribution(DIMENSION_TRAVEL, 0.0, [])
    current = GeoPoint(event.latitude, event.longitude, event.timestamp)
    distance = haversine_km(previous.latitude, previous.longitude, current.latitude, current.longitude)
    speed = travel_speed_kmh(previous, current)

    if is_undefined_speed(speed):
        if distance > weights.simultaneous_min_distance_km:
            return make_contribution(
                DIMENSION_TRAVEL,
                weights.simultaneous_score,
                [f"Simultaneous transactions at different locations ({distance:.1f} km apart)"],
            )
        return make_contribution(DIMENSION_TRAVEL, 0.0, [])

    tier = first_tier(speed, weights.speed_tiers)
    if tier is None:
        return make_contribution(DIMENSION_TRAVEL, 0.0, [])
    return make_contribution(
        DIMENSION_TRAVEL,
        tier.score,
        [f"{tier.reason}: {speed:,.0f} km/h over {distance:.1f} km"],
    )
