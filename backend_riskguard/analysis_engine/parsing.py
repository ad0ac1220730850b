"""
Build typed events and historical context from JSON-like mappings.

Used by the HTTP surface and the CLI. Validation is done by pydantic over
the frozen dataclasses in models.py; any failure is reported as an
InvalidInputError naming the first offending field. Naive timestamps are
taken as UTC so event and context times always compare.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Mapping

from pydantic import TypeAdapter, ValidationError

from backend_riskguard.analysis_engine.models import (
    EMPTY_CONTEXT,
    EVENT_TYPES,
    Event,
    EventDomain,
    HistoricalContext,
)
from backend_riskguard.core.exceptions import InvalidInputError

_ADAPTERS: dict[type, TypeAdapter[Any]] = {}


def _adapter(cls: type) -> TypeAdapter[Any]:
    if cls not in _ADAPTERS:
        _ADAPTERS[cls] = TypeAdapter(cls)
    return _ADAPTERS[cls]


def _as_utc(ts: datetime) -> datetime:
    return ts.replace(tzinfo=timezone.utc) if ts.tzinfo is None else ts


def _first_error(exc: ValidationError) -> tuple[str | None, str]:
    errors = exc.errors()
    if not errors:
        return None, str(exc)
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    return (loc or None), f"{loc or 'payload'}: {first.get('msg', 'invalid value')}"


def parse_domain(domain: str | EventDomain) -> EventDomain:
    try:
        return EventDomain(domain)
    except ValueError:
        raise InvalidInputError(f"unknown domain: {domain!r}", field="domain") from None


def parse_event(domain: str | EventDomain, payload: Any, *, default_timestamp: datetime | None = None) -> Event:
    """
    Build the event dataclass for domain from payload.

    default_timestamp fills a missing "timestamp" (the HTTP surface passes the
    receive time); without it a timestamp is required.
    """
    event_domain = parse_domain(domain)
    if not isinstance(payload, Mapping):
        raise InvalidInputError("event must be a JSON object", field="event", domain=event_domain.value)

    data = dict(payload)
    if data.get("timestamp") in (None, "") and default_timestamp is not None:
        data["timestamp"] = default_timestamp

    try:
        event = _adapter(EVENT_TYPES[event_domain]).validate_python(data)
    except ValidationError as exc:
        field, message = _first_error(exc)
        raise InvalidInputError(message, field=field, domain=event_domain.value) from exc
    return replace(event, timestamp=_as_utc(event.timestamp))


def parse_context(payload: Any) -> HistoricalContext:
    """Build a HistoricalContext; None or an empty mapping gives the empty context."""
    if payload is None:
        return EMPTY_CONTEXT
    if not isinstance(payload, Mapping):
        raise InvalidInputError("context must be a JSON object", field="context")
    if not payload:
        return EMPTY_CONTEXT

    try:
        context = _adapter(HistoricalContext).validate_python(dict(payload))
    except ValidationError as exc:
        field, message = _first_error(exc)
        raise InvalidInputError(message, field=f"context.{field}" if field else "context") from exc

    recent = tuple(replace(prior, timestamp=_as_utc(prior.timestamp)) for prior in context.recent_events)
    previous = context.previous_point
    if previous is not None:
        previous = replace(previous, timestamp=_as_utc(previous.timestamp))
    return replace(context, recent_events=recent, previous_point=previous)
