"""
Pytest tests for caller-side alerts: block decisions, location alerts, stores.
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from backend_riskguard.alerts import (
    AlertAction,
    AlertSeverity,
    AlertType,
    Blocklist,
    RecentAnalyses,
    blocking_identifier,
    derive_location_alert,
    should_block,
)
from backend_riskguard.analysis_engine import (
    CardTransaction,
    GenericTransaction,
    GeoPoint,
    GeoTransaction,
    HistoricalContext,
    OtpMessage,
    PhishingSubmission,
    RiskEngine,
    UrlSubmission,
    UserZone,
    apply_overrides,
    default_engine_config,
)

from conftest import DAYTIME

RESTRICTED_RULES = {
    "geo": {
        "weights": {
            "zone": {
                "zones": [
                    {
                        "name": "Restricted - Airport",
                        "kind": "restricted",
                        "vertices": [[19.085, 72.855], [19.085, 72.865], [19.095, 72.865], [19.095, 72.855]],
                    }
                ]
            }
        }
    }
}


def geo(lat: float, lng: float, **overrides) -> GeoTransaction:
    return GeoTransaction(latitude=lat, longitude=lng, amount=500, timestamp=DAYTIME, **overrides)


# --- Identifiers ---


def test_blocking_identifier_per_domain():
    card = CardTransaction(
        card_number="4111-1111-1111-1111", amount=1, merchant="Amazon", location="Pune", timestamp=DAYTIME
    )
    assert blocking_identifier(card) == "************1111"
    assert blocking_identifier(OtpMessage(message="x", sender=" HDFC-BANK ", timestamp=DAYTIME)) == "HDFC-BANK"
    assert blocking_identifier(UrlSubmission(url="http://evil.example", timestamp=DAYTIME)) == "http://evil.example"
    assert blocking_identifier(PhishingSubmission(content="x", sender="a@b.example", timestamp=DAYTIME)) == "a@b.example"
    assert blocking_identifier(PhishingSubmission(content="x", url="http://x.example", timestamp=DAYTIME)) == "http://x.example"
    assert blocking_identifier(PhishingSubmission(content="x", timestamp=DAYTIME)) is None
    tx = GenericTransaction(amount=1, merchant="Lucky Spin", location="Pune", timestamp=DAYTIME)
    assert blocking_identifier(tx) == "Lucky Spin"
    assert blocking_identifier(geo(19.0, 72.8)) is None
    assert blocking_identifier(geo(19.0, 72.8, actor_id="user-7")) == "user-7"


# --- Block decisions ---


def test_should_block_top_band_only(engine):
    thresholds = engine.config.for_domain("card").thresholds
    risky = CardTransaction(
        card_number="4111111111111111", amount=99999, merchant="Unknown Merchant", location="Nigeria", timestamp=DAYTIME
    )
    flagged = CardTransaction(
        card_number="4111111111111112", amount=2500, merchant="Amazon", location="Mumbai, India", timestamp=DAYTIME
    )
    assert should_block(engine.evaluate(risky), thresholds)
    assert not should_block(engine.evaluate(flagged), thresholds)


def test_restricted_zone_blocks_and_raises_geofence_alert():
    engine = RiskEngine(apply_overrides(default_engine_config(), RESTRICTED_RULES))
    event = geo(19.09, 72.86, location="Airport")
    result = engine.evaluate(event)
    assert result.total_score == 60
    assert result.status == "suspicious"
    assert should_block(result, engine.config.for_domain("geo").thresholds)

    alert = derive_location_alert(event, result)
    assert alert.type is AlertType.GEOFENCE_BREACH
    assert alert.severity is AlertSeverity.CRITICAL
    assert alert.action is AlertAction.BLOCK
    assert alert.message == "Transaction in restricted zone: Restricted - Airport"
    assert alert.to_dict()["coordinates"] == [19.09, 72.86]


# --- Location alerts ---


def test_travel_alert(engine):
    event = geo(28.6139 + 0.45, 77.2090)
    ctx = HistoricalContext(previous_point=GeoPoint(28.6139, 77.2090, DAYTIME - timedelta(minutes=1)))
    alert = derive_location_alert(event, engine.evaluate(event, ctx))
    assert alert.type is AlertType.VELOCITY_ANOMALY
    assert alert.severity is AlertSeverity.HIGH
    assert alert.action is AlertAction.ALERT
    assert alert.message == "Suspicious travel velocity detected"


def test_new_location_alert(engine):
    event = geo(28.6139, 77.2090)
    ctx = HistoricalContext(user_zones=(UserZone("Home", 19.0760, 72.8777, radius_m=2000, frequency=60),))
    alert = derive_location_alert(event, engine.evaluate(event, ctx))
    assert alert.type is AlertType.NEW_LOCATION
    assert alert.action is AlertAction.MONITOR
    assert alert.location == "28.6139, 77.2090"


def test_no_alert_for_quiet_geo_event(engine):
    event = geo(28.6139, 77.2090)
    assert derive_location_alert(event, engine.evaluate(event)) is None


# --- Stores ---


def test_recent_analyses_is_capped_newest_first(engine):
    recent = RecentAnalyses(limit=2)
    results = [
        engine.evaluate(UrlSubmission(url=u, timestamp=DAYTIME))
        for u in ("not a url", "https://www.google.com/", "http://192.168.1.10:8080/login.exe")
    ]
    for result in results:
        recent.push(result)
    assert len(recent) == 2
    assert recent.limit == 2
    assert recent.items() == [results[2], results[1]]
    recent.clear()
    assert recent.items() == []


def test_recent_analyses_default_limit():
    assert RecentAnalyses().limit == 10


def test_recent_analyses_rejects_bad_limit():
    with pytest.raises(ValueError):
        RecentAnalyses(limit=0)


def test_blocklist_operations():
    blocklist = Blocklist({"SPAMMR"})
    assert "SPAMMR" in blocklist
    assert " SPAMMR " in blocklist
    assert 42 not in blocklist
    assert blocklist.add("HDFC-BANK")
    assert not blocklist.add("HDFC-BANK")
    assert not blocklist.add("   ")
    assert blocklist.snapshot() == frozenset({"SPAMMR", "HDFC-BANK"})
    assert blocklist.remove("SPAMMR")
    assert not blocklist.remove("SPAMMR")
    assert len(blocklist) == 1
