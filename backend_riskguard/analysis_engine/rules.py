"""
Engine configuration: per-domain threshold tables, confidence curves, weights.

Defaults are embedded here. An optional JSON override file may replace a
domain's threshold table or patch individual confidence and weight fields:

    {
      "card": {
        "thresholds": [[0, "approved", "approve"], [60, "flagged", "review"], [90, "blocked", "decline"]],
        "confidence": {"base": 60},
        "weights": {"velocity": {"window_seconds": 1800}}
      }
    }

Configuration is built once and is immutable afterwards; any problem is a
ConfigurationError.
"""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from pydantic import TypeAdapter, ValidationError

from backend_riskguard.analysis_engine import signals as s
from backend_riskguard.analysis_engine import text_signals as t
from backend_riskguard.analysis_engine.classifier import ConfidenceCurve, ThresholdTable
from backend_riskguard.analysis_engine.models import EventDomain
from backend_riskguard.analysis_engine.patterns import ScoreTier
from backend_riskguard.analysis_engine.registry import dimensions_for
from backend_riskguard.core.exceptions import ConfigurationError
from backend_riskguard.riskguard_logging import get_logger

logger = get_logger(__name__)

OVERRIDE_SECTIONS = frozenset({"thresholds", "confidence", "weights"})


@dataclass(frozen=True)
class DomainConfig:
    domain: EventDomain
    thresholds: ThresholdTable
    confidence: ConfidenceCurve
    weights: Mapping[str, Any]
    """Dimension name -> that analyzer's weights dataclass."""

    def weights_for(self, dimension: str) -> Any:
        try:
            return self.weights[dimension]
        except KeyError:
            raise ConfigurationError(
                f"no weights configured for {self.domain.value}.{dimension}"
            ) from None


@dataclass(frozen=True)
class EngineConfig:
    domains: Mapping[EventDomain, DomainConfig]

    def for_domain(self, domain: EventDomain | str) -> DomainConfig:
        try:
            return self.domains[EventDomain(domain)]
        except (KeyError, ValueError):
            raise ConfigurationError(f"domain not configured: {domain}") from None


def _domain(
    domain: EventDomain,
    thresholds: list[tuple[float, str, str]],
    confidence: tuple[float, float, float],
    weights: dict[str, Any],
) -> DomainConfig:
    missing = set(dimensions_for(domain)) - set(weights)
    if missing:
        raise ConfigurationError(f"{domain.value}: missing weights for {sorted(missing)}")
    base, slope, cap = confidence
    return DomainConfig(
        domain=domain,
        thresholds=ThresholdTable.from_tuples(thresholds),
        confidence=ConfidenceCurve(base=base, slope=slope, max=cap),
        weights=MappingProxyType(dict(weights)),
    )


def default_engine_config() -> EngineConfig:
    """Embedded defaults, one DomainConfig per event domain."""
    card = _domain(
        EventDomain.CARD,
        [(0, "approved", "approve"), (50, "flagged", "review"), (80, "blocked", "decline")],
        (65.0, 0.3, 95.0),
        {
            s.DIMENSION_CHECKSUM: s.ChecksumWeights(),
            s.DIMENSION_AMOUNT: s.AmountWeights(),
            s.DIMENSION_MERCHANT: s.MerchantWeights(),
            s.DIMENSION_GEOGRAPHY: s.LocationWeights(),
            s.DIMENSION_VELOCITY: s.VelocityWeights(),
            s.DIMENSION_TEMPORAL: s.TemporalWeights(),
            s.DIMENSION_CHANNEL: s.ChannelWeights(),
            s.DIMENSION_DEVICE: s.DeviceWeights(),
        },
    )

    otp = _domain(
        EventDomain.OTP,
        [(0, "legitimate", "accept"), (30, "suspicious", "verify"), (60, "fake", "reject"), (80, "malicious", "reject")],
        (65.0, 0.3, 95.0),
        {
            t.DIMENSION_SENDER: t.SenderWeights(),
            t.DIMENSION_OTP_CODE: t.OtpCodeWeights(),
            t.DIMENSION_CONTENT: t.OtpContentWeights(),
            s.DIMENSION_TEMPORAL: s.TemporalWeights(
                night_score=10.0,
                night_reason="Unusual timing for OTP",
                weekend_late_score=0.0,
                night_withdrawal_score=0.0,
            ),
            s.DIMENSION_VELOCITY: s.VelocityWeights(
                count_tiers=(ScoreTier(6, 20, "High frequency from sender", inclusive=True),),
                amount_threshold=None,
            ),
            t.DIMENSION_CONTEXT: t.OtpContextWeights(),
            t.DIMENSION_PHISHING: t.PhishingPhraseWeights(),
            t.DIMENSION_SPOOFING: t.SpoofingWeights(),
        },
    )

    url = _domain(
        EventDomain.URL,
        [(0, "safe", "proceed"), (30, "suspicious", "caution"), (60, "dangerous", "block"), (80, "malicious", "block")],
        (75.0, 0.25, 98.0),
        {
            t.DIMENSION_DOMAIN: t.DomainWeights(),
            t.DIMENSION_STRUCTURE: t.StructureWeights(),
            t.DIMENSION_REPUTATION: t.ReputationWeights(),
            t.DIMENSION_TECHNICAL: t.UrlTechnicalWeights(),
            t.DIMENSION_SOCIAL_ENGINEERING: t.UrlSocialWeights(),
        },
    )

    phishing = _domain(
        EventDomain.PHISHING,
        [(0, "safe", "proceed"), (30, "suspicious", "caution"), (60, "phishing", "block"), (80, "malicious", "block")],
        (70.0, 0.3, 98.0),
        {
            t.DIMENSION_LINKS: t.LinkWeights(),
            t.DIMENSION_CONTENT: t.PhishingContentWeights(),
            t.DIMENSION_SENDER: t.MessageSenderWeights(),
            t.DIMENSION_SOCIAL_ENGINEERING: t.SocialEngineeringWeights(),
            t.DIMENSION_TECHNICAL: t.ContentTechnicalWeights(),
        },
    )

    transaction = _domain(
        EventDomain.TRANSACTION,
        [(0, "legitimate", "approve"), (40, "suspicious", "review"), (70, "fraudulent", "decline"), (85, "blocked", "decline")],
        (70.0, 0.3, 98.0),
        {
            s.DIMENSION_AMOUNT: s.AmountWeights(
                tiers=(
                    ScoreTier(100000, 35, "Extremely high amount"),
                    ScoreTier(50000, 25, "Very high amount"),
                    ScoreTier(25000, 15, "High amount transaction"),
                ),
                round_score=10.0,
                fraud_amounts=(9999.0, 19999.0, 49999.0, 99999.0),
                channel_surcharges=(),
            ),
            s.DIMENSION_VELOCITY: s.VelocityWeights(amount_threshold=100000.0),
            s.DIMENSION_GEOGRAPHY: s.LocationWeights(
                high_risk=("Nigeria", "Romania", "Russia", "Unknown"),
                min_length=0,
                unfamiliar_score=None,
                cross_border_threshold=None,
            ),
            s.DIMENSION_MERCHANT: s.MerchantWeights(
                high_risk_names=("Casino", "Gambling", "Crypto", "Adult Entertainment"),
                high_risk_reason="High-risk merchant category",
                high_risk_categories=(),
                suspicious_names=("Unknown Merchant", "Generic Store", "Online Retailer"),
                short_name_score=10.0,
                card_not_present_keywords=(),
                digit_run_length=None,
            ),
            s.DIMENSION_BEHAVIOR: s.BehaviorWeights(),
            s.DIMENSION_TEXT_PATTERNS: s.TextPatternWeights(),
            s.DIMENSION_ANOMALY: s.CompositeAnomalyWeights(),
        },
    )

    geo = _domain(
        EventDomain.GEO,
        [(0, "safe", "approve"), (50, "suspicious", "review"), (80, "blocked", "block")],
        (60.0, 0.4, 95.0),
        {
            s.DIMENSION_ZONE: s.ZoneWeights(),
            s.DIMENSION_FAMILIARITY: s.FamiliarityWeights(),
            s.DIMENSION_TRAVEL: s.TravelWeights(),
            s.DIMENSION_TEMPORAL: s.TemporalWeights(
                night_score=15.0,
                night_reason="Late night transaction",
                weekend_late_score=0.0,
                weekend_score=5.0,
                night_withdrawal_score=0.0,
            ),
            s.DIMENSION_AMOUNT: s.AmountWeights(
                tiers=(
                    ScoreTier(100000, 30, "Very high amount"),
                    ScoreTier(50000, 20, "High amount"),
                    ScoreTier(25000, 10, "Elevated amount"),
                ),
                round_score=0.0,
                channel_surcharges=(),
                zone_average_multiple=3.0,
            ),
        },
    )

    return EngineConfig(
        domains=MappingProxyType({c.domain: c for c in (card, otp, url, phishing, transaction, geo)})
    )


# -----------------------------------------------------------------------------
# JSON overrides
# -----------------------------------------------------------------------------


def _parse_thresholds(domain: EventDomain, rows: Any) -> ThresholdTable:
    if not isinstance(rows, list):
        raise ConfigurationError(f"{domain.value}.thresholds must be a list")
    parsed: list[tuple[float, str, str]] = []
    for row in rows:
        if isinstance(row, Mapping):
            try:
                parsed.append((float(row["min_score"]), str(row["status"]), str(row["recommendation"])))
            except (KeyError, TypeError, ValueError) as exc:
                raise ConfigurationError(f"{domain.value}.thresholds: bad band {row!r}") from exc
        elif isinstance(row, (list, tuple)) and len(row) == 3:
            try:
                parsed.append((float(row[0]), str(row[1]), str(row[2])))
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(f"{domain.value}.thresholds: bad band {row!r}") from exc
        else:
            raise ConfigurationError(f"{domain.value}.thresholds: bad band {row!r}")
    return ThresholdTable.from_tuples(parsed)


def _merge_dataclass(label: str, current: Any, patch: Any) -> Any:
    """Return a copy of the dataclass `current` with `patch` fields applied and validated."""
    if not isinstance(patch, Mapping):
        raise ConfigurationError(f"{label} override must be an object")
    cls = type(current)
    known = {f.name for f in dataclasses.fields(cls)}
    unknown = set(patch) - known
    if unknown:
        raise ConfigurationError(f"{label}: unknown field(s) {sorted(unknown)}")
    merged = dataclasses.asdict(current)
    merged.update(patch)
    try:
        return TypeAdapter(cls).validate_python(merged)
    except ValidationError as exc:
        raise ConfigurationError(f"{label}: {exc}") from exc


def apply_overrides(config: EngineConfig, overrides: Any) -> EngineConfig:
    """Apply a parsed override document to config; returns a new EngineConfig."""
    if not isinstance(overrides, Mapping):
        raise ConfigurationError("rules override must be a JSON object keyed by domain")

    domains = dict(config.domains)
    for key, section in overrides.items():
        try:
            domain = EventDomain(key)
        except ValueError:
            raise ConfigurationError(f"unknown domain in rules override: {key!r}") from None
        if not isinstance(section, Mapping):
            raise ConfigurationError(f"{key} override must be an object")
        unknown = set(section) - OVERRIDE_SECTIONS
        if unknown:
            raise ConfigurationError(f"{key}: unknown section(s) {sorted(unknown)}")

        current = domains[domain]
        thresholds = current.thresholds
        confidence = current.confidence
        weights = dict(current.weights)

        if "thresholds" in section:
            thresholds = _parse_thresholds(domain, section["thresholds"])
        if "confidence" in section:
            confidence = _merge_dataclass(f"{key}.confidence", confidence, section["confidence"])
        for dimension, patch in (section.get("weights") or {}).items():
            if dimension not in weights:
                raise ConfigurationError(f"unknown dimension in rules override: {key}.{dimension}")
            weights[dimension] = _merge_dataclass(f"{key}.weights.{dimension}", weights[dimension], patch)

        domains[domain] = DomainConfig(
            domain=domain,
            thresholds=thresholds,
            confidence=confidence,
            weights=MappingProxyType(weights),
        )
    return EngineConfig(domains=MappingProxyType(domains))


def load_engine_config(path: str | Path | None = None) -> EngineConfig:
    """
    Build the engine configuration: embedded defaults plus an optional JSON override.

    Raises ConfigurationError when the file cannot be read or parsed, names an
    unknown domain or dimension, or yields an invalid threshold table.
    """
    config = default_engine_config()
    if path is None:
        return config

    rules_path = Path(path)
    try:
        overrides = json.loads(rules_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"cannot read rules override {rules_path}: {exc}") from exc

    config = apply_overrides(config, overrides)
    logger.info("engine_config_loaded", path=str(rules_path), domains=sorted(overrides))
    return config
