"""
Environment variable loading for RiskGuard.

- RISKGUARD_RULES_PATH: optional JSON file overriding thresholds, weights, confidence
- API_HOST / API_PORT: HTTP server bind address
- RECENT_ANALYSES_LIMIT: size of the recent-analyses ring buffer (default 10)
- AUTO_BLOCK_ON_BLOCKED_STATUS: add identifiers of top-band results to the blocklist
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is backend_riskguard/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off")


def load_riskguard_env() -> None:
    """Load .env from project root. Safe to call multiple times; existing env wins."""
    if _ENV_PATH.is_file():
        load_dotenv(_ENV_PATH, override=False)


def get_env_str(name: str, default: str = "") -> str:
    load_riskguard_env()
    return (os.getenv(name) or default).strip()


def get_env_int(name: str, default: int) -> int:
    """Integer env var; falls back to default when unset or not an integer."""
    raw = get_env_str(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_env_bool(name: str, default: bool) -> bool:
    raw = get_env_str(name).lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    return default


def get_rules_path() -> Path | None:
    """Return RISKGUARD_RULES_PATH as a Path, or None to use embedded defaults."""
    raw = get_env_str("RISKGUARD_RULES_PATH")
    return Path(raw) if raw else None
