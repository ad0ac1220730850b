"""
Pytest tests for the FastAPI risk-scoring server.
"""

from __future__ import annotations

from backend_riskguard.api_server import server

SAFE_CARD = {
    "card_number": "4111111111111111",
    "amount": 2500,
    "merchant": "Amazon",
    "location": "Mumbai, India",
    "timestamp": "2025-03-12T14:30:00Z",
}
FAKE_OTP = {
    "message": "URGENT ACTION required! Your account suspended. Click here http://hdfc-verify.tk to verify account",
    "sender": "HDFC-BANK",
    "timestamp": "2025-03-12T14:30:00Z",
}


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_evaluate_safe_card(client):
    r = client.post("/evaluate/card", json={"event": SAFE_CARD})
    assert r.status_code == 200
    data = r.json()
    assert data["domain"] == "card"
    assert data["status"] == "approved"
    assert data["total_score"] == 0
    assert data["blocked_identifier"] is None
    assert [c["dimension"] for c in data["contributions"]][0] == "checksum"


def test_fake_otp_is_auto_blocked_then_seen_as_blocked(client):
    first = client.post("/evaluate/otp", json={"event": FAKE_OTP}).json()
    assert first["status"] == "malicious"
    assert first["blocked_identifier"] == "HDFC-BANK"
    assert client.get("/blocklist").json() == {"identifiers": ["HDFC-BANK"]}

    second = client.post("/evaluate/otp", json={"event": FAKE_OTP}).json()
    assert "Sender is in blocked list" in second["reasons"]
    assert second["blocked_identifier"] is None


def test_high_risk_card_blocks_masked_number(client):
    event = {**SAFE_CARD, "amount": 99999, "merchant": "Unknown Merchant", "location": "Nigeria"}
    data = client.post("/evaluate/card", json={"event": event}).json()
    assert data["status"] == "blocked"
    assert data["blocked_identifier"] == "************1111"


def test_auto_block_can_be_disabled(client, monkeypatch):
    monkeypatch.setenv("AUTO_BLOCK_ON_BLOCKED_STATUS", "false")
    server.reset_state_for_test()
    data = client.post("/evaluate/otp", json={"event": FAKE_OTP}).json()
    assert data["status"] == "malicious"
    assert data["blocked_identifier"] is None
    assert client.get("/blocklist").json() == {"identifiers": []}


def test_unknown_domain_is_404(client):
    r = client.post("/evaluate/bank", json={"event": {}})
    assert r.status_code == 404
    assert r.json() == {"detail": "Unknown domain: bank"}


def test_invalid_event_is_422(client):
    event = {k: v for k, v in SAFE_CARD.items() if k != "amount"}
    r = client.post("/evaluate/card", json={"event": event})
    assert r.status_code == 422
    detail = r.json()["detail"]
    assert detail["code"] == "invalid_input"
    assert detail["field"] == "amount"
    assert detail["domain"] == "card"


def test_negative_amount_is_422(client):
    r = client.post("/evaluate/card", json={"event": {**SAFE_CARD, "amount": -5}})
    assert r.status_code == 422
    assert r.json()["detail"]["field"] == "amount"


def test_missing_timestamp_uses_receive_time(client):
    r = client.post("/evaluate/url", json={"event": {"url": "https://www.google.com/"}})
    assert r.status_code == 200
    assert r.json()["status"] == "safe"


def test_context_is_passed_through(client):
    body = {
        "event": {"latitude": 28.6139, "longitude": 77.2090, "amount": 500, "timestamp": "2025-03-12T14:30:00Z"},
        "context": {
            "user_zones": [
                {"name": "Home", "latitude": 19.076, "longitude": 72.8777, "radius_m": 2000, "frequency": 60}
            ]
        },
    }
    data = client.post("/evaluate/geo", json=body).json()
    assert data["total_score"] == 30
    assert data["location_alert"]["type"] == "new_location"


def test_recent_analyses_keeps_newest_five(client):
    for i in range(5):
        client.post("/evaluate/url", json={"event": {"url": f"https://example{i}.com/", "timestamp": "2025-03-12T14:30:00Z"}})
    client.post("/evaluate/card", json={"event": SAFE_CARD})
    data = client.get("/analyses/recent").json()
    assert data["limit"] == 5
    assert len(data["items"]) == 5
    assert data["items"][0]["domain"] == "card"
    assert all(item["domain"] == "url" for item in data["items"][1:])


def test_blocklist_crud(client):
    r = client.post("/blocklist", json={"identifier": "SPAMMR"})
    assert r.status_code == 201
    assert r.json() == {"identifier": "SPAMMR", "added": True}

    r = client.post("/blocklist", json={"identifier": "SPAMMR"})
    assert r.status_code == 200
    assert r.json()["added"] is False

    r = client.delete("/blocklist/SPAMMR")
    assert r.status_code == 200
    assert r.json() == {"identifier": "SPAMMR", "removed": True}

    r = client.delete("/blocklist/SPAMMR")
    assert r.status_code == 404


def test_blank_identifier_is_rejected(client):
    r = client.post("/blocklist", json={"identifier": "   "})
    assert r.status_code == 400
