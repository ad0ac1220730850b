"""
Analysis engine package — composable, explainable risk scoring.

Validates a domain event, runs the signal analyzers registered for its
domain, sums their contributions into a bounded score, and classifies it
into a status and recommendation with the reasons that produced it.
"""

from backend_riskguard.analysis_engine.models import (
    EMPTY_CONTEXT,
    AnalysisResult,
    CardTransaction,
    CardTransactionType,
    Event,
    EventDomain,
    GenericTransaction,
    GeoPoint,
    GeoTransaction,
    HistoricalContext,
    MessageChannel,
    OtpMessage,
    PhishingSubmission,
    PriorEvent,
    RiskContribution,
    UrlSubmission,
    UserZone,
)
from backend_riskguard.analysis_engine.checksum import detect_card_brand, validate_checksum
from backend_riskguard.analysis_engine.geo import (
    UNDEFINED_SPEED,
    haversine_km,
    travel_speed_kmh,
)
from backend_riskguard.analysis_engine.aggregator import aggregate
from backend_riskguard.analysis_engine.classifier import (
    ConfidenceCurve,
    ThresholdBand,
    ThresholdTable,
    classify,
    compute_confidence,
)
from backend_riskguard.analysis_engine.rules import (
    DomainConfig,
    EngineConfig,
    apply_overrides,
    default_engine_config,
    load_engine_config,
)
from backend_riskguard.analysis_engine.parsing import parse_context, parse_event
from backend_riskguard.analysis_engine.evaluator import (
    RiskEngine,
    evaluate,
    get_default_engine,
)

__all__ = [
    "EMPTY_CONTEXT",
    "AnalysisResult",
    "CardTransaction",
    "CardTransactionType",
    "Event",
    "EventDomain",
    "GenericTransaction",
    "GeoPoint",
    "GeoTransaction",
    "HistoricalContext",
    "MessageChannel",
    "OtpMessage",
    "PhishingSubmission",
    "PriorEvent",
    "RiskContribution",
    "UrlSubmission",
    "UserZone",
    "detect_card_brand",
    "validate_checksum",
    "UNDEFINED_SPEED",
    "haversine_km",
    "travel_speed_kmh",
    "aggregate",
    "ConfidenceCurve",
    "ThresholdBand",
    "ThresholdTable",
    "classify",
    "compute_confidence",
    "DomainConfig",
    "EngineConfig",
    "apply_overrides",
    "default_engine_config",
    "load_engine_config",
    "parse_context",
    "parse_event",
    "RiskEngine",
    "evaluate",
    "get_default_engine",
]
