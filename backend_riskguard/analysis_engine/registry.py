"""
Analyzer registry: which analyzers run for each event domain, in order.

The order is part of the contract; AnalysisResult reasons follow it.
"""

from __future__ import annotations

from typing import Any, Callable

from backend_riskguard.analysis_engine import signals, text_signals
from backend_riskguard.analysis_engine.models import EventDomain, HistoricalContext, RiskContribution

Analyzer = Callable[[Any, HistoricalContext, Any], RiskContribution]

ANALYZERS: dict[EventDomain, tuple[tuple[str, Analyzer], ...]] = {
    EventDomain.CARD: (
        (signals.DIMENSION_CHECKSUM, signals.analyze_checksum),
        (signals.DIMENSION_AMOUNT, signals.analyze_amount),
        (signals.DIMENSION_MERCHANT, signals.analyze_merchant),
        (signals.DIMENSION_GEOGRAPHY, signals.analyze_geography),
        (signals.DIMENSION_VELOCITY, signals.analyze_velocity),
        (signals.DIMENSION_TEMPORAL, signals.analyze_temporal),
        (signals.DIMENSION_CHANNEL, signals.analyze_channel),
        (signals.DIMENSION_DEVICE, signals.analyze_device),
    ),
    EventDomain.OTP: (
        (text_signals.DIMENSION_SENDER, text_signals.analyze_sender),
        (text_signals.DIMENSION_OTP_CODE, text_signals.analyze_otp_code),
        (text_signals.DIMENSION_CONTENT, text_signals.analyze_otp_content),
        (signals.DIMENSION_TEMPORAL, signals.analyze_temporal),
        (signals.DIMENSION_VELOCITY, signals.analyze_velocity),
        (text_signals.DIMENSION_CONTEXT, text_signals.analyze_otp_context),
        (text_signals.DIMENSION_PHISHING, text_signals.analyze_phishing_phrases),
        (text_signals.DIMENSION_SPOOFING, text_signals.analyze_spoofing),
    ),
    EventDomain.URL: (
        (text_signals.DIMENSION_DOMAIN, text_signals.analyze_domain),
        (text_signals.DIMENSION_STRUCTURE, text_signals.analyze_structure),
        (text_signals.DIMENSION_REPUTATION, text_signals.analyze_reputation),
        (text_signals.DIMENSION_TECHNICAL, text_signals.analyze_url_technical),
        (text_signals.DIMENSION_SOCIAL_ENGINEERING, text_signals.analyze_url_social),
    ),
    EventDomain.PHISHING: (
        (text_signals.DIMENSION_LINKS, text_signals.analyze_links),
        (text_signals.DIMENSION_CONTENT, text_signals.analyze_phishing_content),
        (text_signals.DIMENSION_SENDER, text_signals.analyze_message_sender),
        (text_signals.DIMENSION_SOCIAL_ENGINEERING, text_signals.analyze_social_engineering),
        (text_signals.DIMENSION_TECHNICAL, text_signals.analyze_content_technical),
    ),
    EventDomain.TRANSACTION: (
        (signals.DIMENSION_AMOUNT, signals.analyze_amount),
        (signals.DIMENSION_VELOCITY, signals.analyze_velocity),
        (signals.DIMENSION_GEOGRAPHY, signals.analyze_geography),
        (signals.DIMENSION_MERCHANT, signals.analyze_merchant),
        (signals.DIMENSION_BEHAVIOR, signals.analyze_behavior),
        (signals.DIMENSION_TEXT_PATTERNS, signals.analyze_text_patterns),
        (signals.DIMENSION_ANOMALY, signals.analyze_composite_anomaly),
    ),
    EventDomain.GEO: (
        (signals.DIMENSION_ZONE, signals.analyze_zone),
        (signals.DIMENSION_FAMILIARITY, signals.analyze_familiarity),
        (signals.DIMENSION_TRAVEL, signals.analyze_travel),
        (signals.DIMENSION_TEMPORAL, signals.analyze_temporal),
        (signals.DIMENSION_AMOUNT, signals.analyze_amount),
    ),
}


def analyzers_for(domain: EventDomain) -> tuple[tuple[str, Analyzer], ...]:
    return ANALYZERS[EventDomain(domain)]


def dimensions_for(domain: EventDomain) -> tuple[str, ...]:
    return tuple(dimension for dimension, _ in analyzers_for(domain))
