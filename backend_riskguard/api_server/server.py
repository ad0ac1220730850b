"""
FastAPI server — evaluate events over HTTP.

Exposes POST /evaluate/{domain} (engine result as JSON), the recent-analyses
buffer and the blocklist. The engine stays pure: this module merges the
blocklist snapshot into the context, records results, and applies the
auto-block decision after evaluation. Config via env (see config.settings).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from backend_riskguard.alerts import (
    Blocklist,
    RecentAnalyses,
    blocking_identifier,
    derive_location_alert,
    should_block,
)
from backend_riskguard.analysis_engine import (
    EventDomain,
    GeoTransaction,
    RiskEngine,
    get_default_engine,
    parse_context,
    parse_event,
)
from backend_riskguard.config import get_settings
from backend_riskguard.core.exceptions import ConfigurationError, InvalidInputError
from backend_riskguard.riskguard_logging import get_logger, mask_identifier

logger = get_logger(__name__)


# -----------------------------------------------------------------------------
# App-scoped state and dependencies
# -----------------------------------------------------------------------------

_recent: RecentAnalyses | None = None
_blocklist: Blocklist | None = None


def get_engine() -> RiskEngine:
    return get_default_engine()


def get_recent() -> RecentAnalyses:
    global _recent
    if _recent is None:
        _recent = RecentAnalyses(limit=get_settings().recent_analyses_limit)
    return _recent


def get_blocklist() -> Blocklist:
    global _blocklist
    if _blocklist is None:
        _blocklist = Blocklist()
    return _blocklist


def reset_state_for_test() -> None:
    """Drop cached settings, engine and stores so the next request rebuilds them."""
    global _recent, _blocklist
    _recent = None
    _blocklist = None
    get_settings.cache_clear()
    get_default_engine.cache_clear()


# -----------------------------------------------------------------------------
# Request / response models
# -----------------------------------------------------------------------------


class EvaluateRequest(BaseModel):
    """POST /evaluate/{domain} body: domain event plus optional historical context."""

    event: dict[str, Any] = Field(..., description="Event fields for the domain (see EventDomain)")
    context: dict[str, Any] | None = Field(None, description="HistoricalContext fields; omitted means no history")


class BlockRequest(BaseModel):
    """POST /blocklist body."""

    identifier: str = Field(..., min_length=1, max_length=2048, description="Sender ID, URL, masked card or merchant")


class BlockResponse(BaseModel):
    identifier: str
    added: bool = Field(..., description="False if the identifier was already blocked")


# -----------------------------------------------------------------------------
# App and routes
# -----------------------------------------------------------------------------

app = FastAPI(
    title="Backend RiskGuard API",
    description="Deterministic, explainable risk scoring for card, OTP, URL, phishing, transaction and geo events.",
    version="0.1.0",
)


@app.get("/health")
def health() -> dict[str, str]:
    """Liveness probe: API is up."""
    return {"status": "ok"}


@app.post("/evaluate/{domain}")
def evaluate_event(
    domain: str,
    body: EvaluateRequest,
    engine: RiskEngine = Depends(get_engine),
    recent: RecentAnalyses = Depends(get_recent),
    blocklist: Blocklist = Depends(get_blocklist),
) -> dict[str, Any]:
    """
    Score one event. Returns the AnalysisResult mapping plus the identifier
    blocked as a consequence (if any) and, for geo events, the location alert.
    """
    try:
        event_domain = EventDomain(domain)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown domain: {domain}") from None

    event = parse_event(event_domain, body.event, default_timestamp=datetime.now(timezone.utc))
    context = parse_context(body.context).with_blocked(blocklist.snapshot())
    result = engine.evaluate(event, context)
    recent.push(result)

    blocked: str | None = None
    thresholds = engine.config.for_domain(event_domain).thresholds
    if get_settings().auto_block and should_block(result, thresholds):
        identifier = blocking_identifier(event)
        if identifier and blocklist.add(identifier):
            blocked = identifier
            logger.info(
                "auto_block_applied",
                domain=event_domain.value,
                identifier=mask_identifier(identifier),
                status=result.status,
            )

    out = result.to_dict()
    out["blocked_identifier"] = blocked
    if isinstance(event, GeoTransaction):
        alert = derive_location_alert(event, result)
        out["location_alert"] = alert.to_dict() if alert else None
    return out


@app.get("/analyses/recent")
def recent_analyses(recent: RecentAnalyses = Depends(get_recent)) -> dict[str, Any]:
    """Newest-first results kept by the caller-side buffer."""
    return {"limit": recent.limit, "items": [r.to_dict() for r in recent.items()]}


@app.get("/blocklist")
def list_blocklist(blocklist: Blocklist = Depends(get_blocklist)) -> dict[str, list[str]]:
    return {"identifiers": sorted(blocklist.snapshot())}


@app.post("/blocklist", response_model=BlockResponse)
def add_to_blocklist(body: BlockRequest, blocklist: Blocklist = Depends(get_blocklist)):
    identifier = body.identifier.strip()
    if not identifier:
        raise HTTPException(status_code=400, detail="identifier must be non-empty")
    added = blocklist.add(identifier)
    resp = BlockResponse(identifier=identifier, added=added)
    return JSONResponse(status_code=201 if added else 200, content=resp.model_dump())


@app.delete("/blocklist/{identifier:path}")
def remove_from_blocklist(identifier: str, blocklist: Blocklist = Depends(get_blocklist)) -> dict[str, Any]:
    if not blocklist.remove(identifier):
        raise HTTPException(status_code=404, detail="Identifier is not blocked")
    return {"identifier": identifier.strip(), "removed": True}


@app.exception_handler(InvalidInputError)
def invalid_input_handler(request: Any, exc: InvalidInputError) -> JSONResponse:
    """Malformed or missing event fields: 422 with the error mapping."""
    return JSONResponse(status_code=422, content={"detail": exc.to_dict()})


@app.exception_handler(ConfigurationError)
def configuration_error_handler(request: Any, exc: ConfigurationError) -> JSONResponse:
    logger.error("engine_configuration_error", error=exc.message)
    return JSONResponse(status_code=500, content={"detail": exc.to_dict()})


@app.exception_handler(HTTPException)
def http_exception_handler(request: Any, exc: HTTPException) -> JSONResponse:
    """Consistent JSON error response for HTTPException."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )
