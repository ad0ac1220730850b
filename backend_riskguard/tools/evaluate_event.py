#!/usr/bin/env python3
"""
Evaluate one event from JSON files and print the result.

Reads the event (and optional historical context) for a domain, scores it
with the embedded rules (or a JSON override), and prints the AnalysisResult
mapping as JSON.

Usage:
  python -m backend_riskguard.tools.evaluate_event --domain card --event event.json
  python -m backend_riskguard.tools.evaluate_event --domain geo --event e.json --context ctx.json --rules rules.json

Exit codes: 0 success, 1 unreadable file or bad configuration, 2 invalid event.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from backend_riskguard.analysis_engine import (
    EventDomain,
    RiskEngine,
    load_engine_config,
    parse_context,
    parse_event,
)
from backend_riskguard.config import get_settings
from backend_riskguard.core.exceptions import ConfigurationError, InvalidInputError
from backend_riskguard.riskguard_logging import get_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INVALID_INPUT = 2


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Score one fraud-monitoring event and print the explainable result as JSON.",
    )
    parser.add_argument("--domain", required=True, choices=[d.value for d in EventDomain], help="Event domain")
    parser.add_argument("--event", required=True, type=Path, help="Path to the event JSON object")
    parser.add_argument("--context", type=Path, default=None, help="Path to a HistoricalContext JSON object")
    parser.add_argument(
        "--rules",
        type=Path,
        default=None,
        help="JSON rules override (default: RISKGUARD_RULES_PATH, else embedded rules)",
    )
    parser.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2)")
    args = parser.parse_args(argv)

    try:
        event_payload = _read_json(args.event)
        context_payload = _read_json(args.context) if args.context else None
    except (OSError, json.JSONDecodeError) as e:
        logger.error("evaluate_event_read_failed", error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR

    try:
        engine = RiskEngine(load_engine_config(args.rules or get_settings().rules_path))
    except ConfigurationError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return EXIT_ERROR

    try:
        event = parse_event(args.domain, event_payload)
        context = parse_context(context_payload)
        result = engine.evaluate(event, context)
    except InvalidInputError as e:
        print(json.dumps({"error": e.to_dict()}, indent=args.indent), file=sys.stderr)
        return EXIT_INVALID_INPUT

    print(json.dumps(result.to_dict(), indent=args.indent))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
