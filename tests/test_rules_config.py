"""
Pytest tests for engine configuration: embedded defaults and JSON overrides.
"""

from __future__ import annotations

import json
from datetime import timedelta

import pytest

from backend_riskguard.analysis_engine import (
    CardTransaction,
    EventDomain,
    HistoricalContext,
    PriorEvent,
    RiskEngine,
    apply_overrides,
    default_engine_config,
    get_default_engine,
    load_engine_config,
)
from backend_riskguard.analysis_engine.registry import dimensions_for
from backend_riskguard.config import get_settings
from backend_riskguard.core.exceptions import ConfigurationError

from conftest import DAYTIME


def card(card_number: str = "4111111111111111") -> CardTransaction:
    return CardTransaction(
        card_number=card_number,
        amount=2500,
        merchant="Amazon",
        location="Mumbai, India",
        timestamp=DAYTIME,
    )


def test_every_registered_dimension_has_weights():
    config = default_engine_config()
    for domain in EventDomain:
        domain_config = config.for_domain(domain)
        for dimension in dimensions_for(domain):
            assert domain_config.weights_for(dimension) is not None


def test_default_threshold_tables():
    config = default_engine_config()
    assert config.for_domain("card").thresholds.statuses == ("approved", "flagged", "blocked")
    assert config.for_domain("otp").thresholds.top_status == "malicious"
    assert config.for_domain(EventDomain.GEO).thresholds.statuses == ("safe", "suspicious", "blocked")


def test_unknown_domain_and_dimension_lookups():
    config = default_engine_config()
    with pytest.raises(ConfigurationError):
        config.for_domain("bank")
    with pytest.raises(ConfigurationError):
        config.for_domain("card").weights_for("zone")


def test_velocity_window_override_changes_what_counts():
    base = default_engine_config()
    shorter = apply_overrides(base, {"card": {"weights": {"velocity": {"window_seconds": 1800}}}})
    assert shorter.for_domain("card").weights_for("velocity").window_seconds == 1800
    # Untouched fields and the input config are preserved
    assert shorter.for_domain("card").weights_for("velocity").count_tiers[0].score == 30
    assert base.for_domain("card").weights_for("velocity").window_seconds == 3600

    ctx = HistoricalContext(
        recent_events=tuple(PriorEvent(DAYTIME - timedelta(minutes=40), 100) for _ in range(5))
    )
    assert RiskEngine(base).evaluate(card(), ctx).contribution("velocity").score == 15
    assert RiskEngine(shorter).evaluate(card(), ctx).contribution("velocity").score == 0


def test_threshold_override_reclassifies():
    config = apply_overrides(
        default_engine_config(),
        {"card": {"thresholds": [[0, "approved", "approve"], [60, "flagged", "review"], [90, "blocked", "decline"]]}},
    )
    result = RiskEngine(config).evaluate(card("4111111111111112"))
    assert result.total_score == 50
    assert result.status == "approved"


def test_threshold_rows_as_mappings():
    config = apply_overrides(
        default_engine_config(),
        {
            "url": {
                "thresholds": [
                    {"min_score": 0, "status": "ok", "recommendation": "proceed"},
                    {"min_score": 20, "status": "bad", "recommendation": "block"},
                ]
            }
        },
    )
    assert config.for_domain("url").thresholds.statuses == ("ok", "bad")


def test_confidence_override():
    config = apply_overrides(default_engine_config(), {"card": {"confidence": {"base": 60}}})
    assert RiskEngine(config).evaluate(card()).confidence == 60


@pytest.mark.parametrize(
    "overrides",
    [
        [],
        {"bank": {}},
        {"card": []},
        {"card": {"extra": {}}},
        {"card": {"weights": {"nope": {}}}},
        {"card": {"weights": {"velocity": {"bogus": 1}}}},
        {"card": {"weights": {"velocity": {"window_seconds": "soon"}}}},
        {"card": {"weights": {"velocity": 5}}},
        {"card": {"thresholds": [[10, "approved", "approve"]]}},
        {"card": {"thresholds": [[0, "a", "x"], [0, "b", "y"]]}},
        {"card": {"thresholds": [[0, "a", "x"], [50, "a", "y"]]}},
        {"card": {"thresholds": [[0, "a"]]}},
        {"card": {"thresholds": [[0, "a", "x"], [float("nan"), "b", "y"], [80, "c", "z"]]}},
        {"card": {"thresholds": [[0, "a", "x"], [float("inf"), "b", "y"]]}},
        {"card": {"confidence": {"slope": float("nan")}}},
        {"card": {"thresholds": "high"}},
    ],
)
def test_bad_overrides_are_configuration_errors(overrides):
    with pytest.raises(ConfigurationError) as excinfo:
        apply_overrides(default_engine_config(), overrides)
    assert excinfo.value.code == "invalid_configuration"


def test_load_engine_config_from_file(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps({"otp": {"weights": {"spoofing": {"score": 50}}}}), encoding="utf-8")
    config = load_engine_config(path)
    assert config.for_domain("otp").weights_for("spoofing").score == 50
    assert load_engine_config(None).for_domain("otp").weights_for("spoofing").score == 35


def test_load_engine_config_unreadable(tmp_path):
    with pytest.raises(ConfigurationError):
        load_engine_config(tmp_path / "missing.json")
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_engine_config(broken)


def test_default_engine_reads_rules_path_from_env(tmp_path, monkeypatch):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps({"card": {"confidence": {"base": 50}}}), encoding="utf-8")
    monkeypatch.setenv("RISKGUARD_RULES_PATH", str(path))
    get_settings.cache_clear()
    get_default_engine.cache_clear()
    try:
        assert get_default_engine().evaluate(card()).confidence == 50
    finally:
        monkeypatch.delenv("RISKGUARD_RULES_PATH")
        get_settings.cache_clear()
        get_default_engine.cache_clear()


def test_recent_analyses_limit_defaults_to_ten(monkeypatch):
    monkeypatch.delenv("RECENT_ANALYSES_LIMIT", raising=False)
    get_settings.cache_clear()
    try:
        assert get_settings().recent_analyses_limit == 10
    finally:
        get_settings.cache_clear()
