"""
Application settings and environment configuration.

Typed settings (rules override path, API bind address, log level, caller-side
store limits) for use across the analysis engine, API server and CLI.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from pathlib import Path

from backend_riskguard.config.env import (
    get_env_bool,
    get_env_int,
    get_env_str,
    get_rules_path,
)

DEFAULT_API_HOST = "0.0.0.0"
DEFAULT_API_PORT = 8000
DEFAULT_RECENT_ANALYSES_LIMIT = 10


@dataclass(frozen=True)
class Settings:
    rules_path: Path | None
    """JSON override for thresholds/weights/confidence; None means embedded defaults."""
    api_host: str
    api_port: int
    log_level: str
    recent_analyses_limit: int
    """Capacity of the caller-side recent analyses buffer."""
    auto_block: bool
    """Add the event identifier to the blocklist when a result lands in the top band."""


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return the current application settings (read once, then cached).

    Call get_settings.cache_clear() after changing the environment in tests.
    """
    return Settings(
        rules_path=get_rules_path(),
        api_host=get_env_str("API_HOST", DEFAULT_API_HOST),
        api_port=get_env_int("API_PORT", DEFAULT_API_PORT),
        log_level=get_env_str("LOG_LEVEL", "INFO").upper(),
        recent_analyses_limit=max(1, get_env_int("RECENT_ANALYSES_LIMIT", DEFAULT_RECENT_ANALYSES_LIMIT)),
        auto_block=get_env_bool("AUTO_BLOCK_ON_BLOCKED_STATUS", True),
    )
