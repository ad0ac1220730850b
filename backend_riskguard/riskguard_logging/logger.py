"""
RiskGuard log pipeline — one JSON object per line on stdout.

Every record carries event_type, level, logger and an ISO-8601 UTC timestamp.
Engine records add domain, total_score and status; API records add the
route's outcome. Card numbers and sender IDs are masked before rendering, so
a raw PAN never reaches the log stream even if a caller forgets to mask it.

LOG_LEVEL picks the threshold (default INFO). LOG_FORMAT=console switches to
structlog's coloured renderer for local runs.

This module imports nothing from backend_riskguard so every other package
can log from import time.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)

LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

# Visible tail of identifiers (card numbers, phone numbers) in logs
MASK_VISIBLE_CHARS = 4

# Record keys whose values are always masked
SENSITIVE_KEYS = frozenset({"card_number", "sender", "identifier"})


def mask_identifier(value: str | None) -> str:
    """Mask all but the last few characters of a card number or sender ID for logging."""
    if not value:
        return ""
    text = str(value).strip()
    if len(text) <= MASK_VISIBLE_CHARS:
        return "*" * len(text)
    return "*" * (len(text) - MASK_VISIBLE_CHARS) + text[-MASK_VISIBLE_CHARS:]


def _stamp_utc(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _event_to_event_type(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog's positional `event` becomes `event_type`; `message` mirrors it unless given."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "message" not in event_dict and "event_type" in event_dict:
        event_dict["message"] = str(event_dict["event_type"])
    return event_dict


def _mask_sensitive(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    # mask_identifier is idempotent, so pre-masked values pass through unchanged
    for key in SENSITIVE_KEYS.intersection(event_dict):
        if isinstance(event_dict[key], str):
            event_dict[key] = mask_identifier(event_dict[key])
    return event_dict


def build_processors(log_format: str = LOG_FORMAT) -> list[Any]:
    """Processor chain for the given format ("json" or anything else for console)."""
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _stamp_utc,
        _event_to_event_type,
        _mask_sensitive,
    ]
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    return processors


def configure_structlog() -> None:
    structlog.configure(
        processors=build_processors(),
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL_VALUE),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Logger bound to `name` under the `logger` key.

        logger = get_logger(__name__)
        logger.info("risk_evaluated", domain="card", total_score=85.0, status="blocked")
    """
    return structlog.get_logger(name).bind(logger=name)
