"""
Pytest fixtures for RiskGuard tests.

Timestamps are fixed (a Wednesday afternoon, UTC) so results never depend on
wall-clock time. The API client gets fresh settings, engine and stores.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

# Wednesday 2025-03-12 14:30 UTC: not night, not weekend
DAYTIME = datetime(2025, 3, 12, 14, 30, tzinfo=timezone.utc)
# Wednesday 2025-03-12 02:15 UTC: night
NIGHT = datetime(2025, 3, 12, 2, 15, tzinfo=timezone.utc)
# Saturday 2025-03-15 22:30 UTC: late weekend (not yet night)
WEEKEND_LATE = datetime(2025, 3, 15, 22, 30, tzinfo=timezone.utc)

VALID_CARD = "4111111111111111"
MUTATED_CARD = "4111111111111112"


@pytest.fixture
def daytime() -> datetime:
    return DAYTIME


@pytest.fixture
def engine():
    """Engine over the embedded default rules (ignores RISKGUARD_RULES_PATH)."""
    from backend_riskguard.analysis_engine import RiskEngine, default_engine_config

    return RiskEngine(default_engine_config())


@pytest.fixture
def client(monkeypatch):
    """FastAPI TestClient with default rules, auto-block on and empty stores."""
    from fastapi.testclient import TestClient

    from backend_riskguard.api_server import server

    monkeypatch.delenv("RISKGUARD_RULES_PATH", raising=False)
    monkeypatch.setenv("AUTO_BLOCK_ON_BLOCKED_STATUS", "true")
    monkeypatch.setenv("RECENT_ANALYSES_LIMIT", "5")
    server.reset_state_for_test()
    yield TestClient(server.app)
    server.reset_state_for_test()
