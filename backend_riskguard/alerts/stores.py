"""
Caller-side stores: recent analyses and the identifier blocklist.

The engine never writes to either. Callers push results after evaluation
and decide what to block; the engine only reads a blocklist snapshot through
HistoricalContext.blocked_identifiers. Both stores are in-memory and guard
their state with a lock so request handlers may share them.
"""

from __future__ import annotations

import threading
from collections import deque

from backend_riskguard.analysis_engine.models import AnalysisResult
from backend_riskguard.riskguard_logging import get_logger, mask_identifier

logger = get_logger(__name__)

DEFAULT_RECENT_LIMIT = 10


class RecentAnalyses:
    """Capped, newest-first buffer of analysis results."""

    def __init__(self, limit: int = DEFAULT_RECENT_LIMIT) -> None:
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        self._items: deque[AnalysisResult] = deque(maxlen=limit)
        self._lock = threading.Lock()

    @property
    def limit(self) -> int:
        return self._items.maxlen or 0

    def push(self, result: AnalysisResult) -> None:
        with self._lock:
            self._items.appendleft(result)

    def items(self) -> list[AnalysisResult]:
        with self._lock:
            return list(self._items)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class Blocklist:
    """Set of blocked identifiers (sender IDs, URLs, masked cards, merchants)."""

    def __init__(self, identifiers: frozenset[str] | set[str] | None = None) -> None:
        self._items: set[str] = {i.strip() for i in (identifiers or ()) if i and i.strip()}
        self._lock = threading.Lock()

    def add(self, identifier: str) -> bool:
        """Add identifier; returns False when it was already blocked or is blank."""
        value = (identifier or "").strip()
        if not value:
            return False
        with self._lock:
            if value in self._items:
                return False
            self._items.add(value)
        logger.info("identifier_blocked", identifier=mask_identifier(value))
        return True

    def remove(self, identifier: str) -> bool:
        value = (identifier or "").strip()
        with self._lock:
            if value not in self._items:
                return False
            self._items.discard(value)
        logger.info("identifier_unblocked", identifier=mask_identifier(value))
        return True

    def snapshot(self) -> frozenset[str]:
        """Immutable copy for HistoricalContext.blocked_identifiers."""
        with self._lock:
            return frozenset(self._items)

    def __contains__(self, identifier: object) -> bool:
        if not isinstance(identifier, str):
            return False
        with self._lock:
            return identifier.strip() in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
