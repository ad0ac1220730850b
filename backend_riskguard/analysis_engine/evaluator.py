"""
Evaluation orchestrator — validate, run analyzers, aggregate, classify.

Responsibilities:
- Reject structurally invalid events before any analyzer runs.
- Run the analyzer set registered for the event's domain, in order.
- Aggregate contributions into a clamped total and classify it against the
  domain's threshold table; attach a confidence from its curve.

Synchronous and deterministic: no randomness, no I/O, no shared mutable
state, so one engine can serve concurrent callers.
"""

from __future__ import annotations

import functools
import math
from datetime import datetime
from enum import Enum
from typing import Any

from backend_riskguard.analysis_engine.aggregator import aggregate
from backend_riskguard.analysis_engine.classifier import compute_confidence
from backend_riskguard.analysis_engine.models import (
    EMPTY_CONTEXT,
    EVENT_TYPES,
    AnalysisResult,
    CardTransaction,
    CardTransactionType,
    Event,
    EventDomain,
    GenericTransaction,
    GeoTransaction,
    HistoricalContext,
    MessageChannel,
    OtpMessage,
    PhishingSubmission,
    UrlSubmission,
)
from backend_riskguard.analysis_engine.registry import analyzers_for
from backend_riskguard.analysis_engine.rules import EngineConfig, load_engine_config
from backend_riskguard.config import get_settings
from backend_riskguard.core.exceptions import InvalidInputError
from backend_riskguard.riskguard_logging import get_logger, mask_identifier

logger = get_logger(__name__)

# Text fields that must be non-blank per event type
REQUIRED_TEXT_FIELDS: dict[type, tuple[str, ...]] = {
    CardTransaction: ("card_number",),
    OtpMessage: ("message", "sender"),
    UrlSubmission: ("url",),
    PhishingSubmission: ("content",),
}

# Text fields that may be empty but must be strings when present
OPTIONAL_TEXT_FIELDS: dict[type, tuple[str, ...]] = {
    CardTransaction: ("merchant", "location", "merchant_category", "currency"),
    PhishingSubmission: ("sender", "subject", "url"),
    GenericTransaction: ("merchant", "location", "card_number", "currency"),
    GeoTransaction: ("location", "actor_id"),
}

ENUM_FIELDS: dict[type, tuple[tuple[str, type[Enum]], ...]] = {
    CardTransaction: (("transaction_type", CardTransactionType),),
    PhishingSubmission: (("channel", MessageChannel),),
}


def _invalid(message: str, field: str, domain: EventDomain | None) -> InvalidInputError:
    return InvalidInputError(message, field=field, domain=domain.value if domain else None)


def validate_event(event: Any) -> EventDomain:
    """Check the event is a known type with usable required fields; return its domain."""
    if type(event) not in EVENT_TYPES.values():
        raise InvalidInputError(f"unsupported event type: {type(event).__name__}", field="event")
    domain: EventDomain = event.domain

    if not isinstance(event.timestamp, datetime):
        raise _invalid("timestamp must be a datetime", "timestamp", domain)

    for name in REQUIRED_TEXT_FIELDS.get(type(event), ()):
        value = getattr(event, name)
        if not isinstance(value, str) or not value.strip():
            raise _invalid(f"{name} is required", name, domain)

    for name in OPTIONAL_TEXT_FIELDS.get(type(event), ()):
        if not isinstance(getattr(event, name), str):
            raise _invalid(f"{name} must be a string", name, domain)

    for name, enum_type in ENUM_FIELDS.get(type(event), ()):
        value = getattr(event, name)
        try:
            enum_type(value)
        except (ValueError, TypeError):
            raise _invalid(f"{name} must be one of {[m.value for m in enum_type]}, got {value!r}", name, domain) from None

    if isinstance(event, CardTransaction):
        if event.device_id is not None and not isinstance(event.device_id, str):
            raise _invalid("device_id must be a string", "device_id", domain)
        if not all(isinstance(factor, str) for factor in event.device_risk_factors):
            raise _invalid("device_risk_factors must be strings", "device_risk_factors", domain)

    if hasattr(event, "amount"):
        amount = event.amount
        if isinstance(amount, bool) or not isinstance(amount, (int, float)) or not math.isfinite(amount):
            raise _invalid("amount must be a finite number", "amount", domain)
        if amount < 0:
            raise _invalid("amount must not be negative", "amount", domain)

    if isinstance(event, GeoTransaction):
        for name, bound in (("latitude", 90.0), ("longitude", 180.0)):
            value = getattr(event, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise _invalid(f"{name} must be a finite number", name, domain)
            if abs(value) > bound:
                raise _invalid(f"{name} out of range: {value}", name, domain)

    return domain


def _validate_context(event: Event, context: HistoricalContext, domain: EventDomain) -> None:
    """Event and context timestamps must agree on being timezone-aware or naive."""
    aware = event.timestamp.tzinfo is not None
    stamps = [prior.timestamp for prior in context.recent_events]
    if context.previous_point is not None:
        stamps.append(context.previous_point.timestamp)
    for ts in stamps:
        if (ts.tzinfo is not None) != aware:
            raise _invalid("context timestamps must match the event's timezone awareness", "context", domain)


class RiskEngine:
    """
    Composable risk-scoring engine over a fixed EngineConfig.

    evaluate() is a pure function of (event, context, config).
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config if config is not None else load_engine_config()

    def evaluate(self, event: Event, context: HistoricalContext | None = None) -> AnalysisResult:
        """
        Score one event.

        Raises InvalidInputError (no partial result) when a required field is
        missing or malformed.
        """
        try:
            domain = validate_event(event)
            ctx = context if context is not None else EMPTY_CONTEXT
            _validate_context(event, ctx, domain)
        except InvalidInputError as exc:
            logger.info(
                "risk_evaluation_rejected",
                domain=exc.domain,
                field=exc.field,
                reason=exc.message,
            )
            raise

        domain_config = self.config.for_domain(domain)
        contributions = tuple(
            analyzer(event, ctx, domain_config.weights_for(dimension))
            for dimension, analyzer in analyzers_for(domain)
        )
        total_score, _ = aggregate(contributions)
        rank, band = domain_config.thresholds.band_for(total_score)
        confidence = compute_confidence(total_score, domain_config.confidence)

        result = AnalysisResult(
            domain=domain,
            total_score=total_score,
            status=band.status,
            recommendation=band.recommendation,
            confidence=confidence,
            severity_rank=rank,
            contributions=contributions,
        )
        logger.debug(
            "risk_evaluated",
            domain=domain.value,
            subject=_log_subject(event),
            total_score=round(total_score, 2),
            status=band.status,
            reason_count=len(result.reasons),
        )
        return result


def _log_subject(event: Event) -> str:
    if isinstance(event, CardTransaction):
        return mask_identifier(event.card_number)
    if isinstance(event, OtpMessage):
        return mask_identifier(event.sender)
    return ""


@functools.lru_cache(maxsize=1)
def get_default_engine() -> RiskEngine:
    """Engine built from embedded defaults plus RISKGUARD_RULES_PATH, if set. Cached."""
    return RiskEngine(load_engine_config(get_settings().rules_path))


def evaluate(event: Event, context: HistoricalContext | None = None) -> AnalysisResult:
    """Evaluate with the default engine."""
    return get_default_engine().evaluate(event, context)
