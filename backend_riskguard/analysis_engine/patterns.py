"""
Shared rule primitives for signal analyzers: score tiers and keyword lists.

Prose is matched case-insensitively at a word start ("suspend" matches
"suspended", "pin" does not match "shopping"). URL-shaped text is matched as
plain lowercase substrings.
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass
from typing import Iterable, Sequence


@dataclass(frozen=True)
class ScoreTier:
    """Fires when the measured value is strictly above `threshold` (or >= when inclusive)."""

    threshold: float
    score: float
    reason: str
    inclusive: bool = False

    def matches(self, value: float) -> bool:
        return value >= self.threshold if self.inclusive else value > self.threshold


@dataclass(frozen=True)
class KeywordCategory:
    """Phrases scored once each when found; reason is `label: "phrase"`."""

    label: str
    phrases: tuple[str, ...]
    score: float
    word_start: bool = True

    def reason(self, phrase: str) -> str:
        return f'{self.label}: "{phrase}"'


@dataclass(frozen=True)
class TextSignature:
    """Named regex signature (grammar defects, hidden characters, script markers)."""

    label: str
    pattern: str
    score: float

    @property
    def regex(self) -> re.Pattern[str]:
        return _compile(self.pattern, re.IGNORECASE)


@functools.lru_cache(maxsize=1024)
def _compile(pattern: str, flags: int = 0) -> re.Pattern[str]:
    return re.compile(pattern, flags)


def contains_phrase(text: str, phrase: str, *, word_start: bool = True) -> bool:
    if not phrase:
        return False
    if not word_start:
        return phrase.lower() in text.lower()
    return _compile(r"(?<!\w)" + re.escape(phrase.lower()), re.IGNORECASE).search(text) is not None


def matched_phrases(text: str, phrases: Iterable[str], *, word_start: bool = True) -> list[str]:
    """Phrases found in text, in list order."""
    return [p for p in phrases if contains_phrase(text, p, word_start=word_start)]


def contains_any(text: str, phrases: Iterable[str], *, word_start: bool = True) -> bool:
    return any(contains_phrase(text, p, word_start=word_start) for p in phrases)


def first_tier(value: float, tiers: Sequence[ScoreTier]) -> ScoreTier | None:
    """First matching tier; tiers are listed from most to least severe."""
    for tier in tiers:
        if tier.matches(value):
            return tier
    return None


def score_categories(
    text: str,
    categories: Sequence[KeywordCategory],
) -> tuple[float, list[str]]:
    """Sum category scores for every matched phrase; one reason per match."""
    score = 0.0
    reasons: list[str] = []
    for category in categories:
        for phrase in matched_phrases(text, category.phrases, word_start=category.word_start):
            score += category.score
            reasons.append(category.reason(phrase))
    return score, reasons


def score_signatures(text: str, signatures: Sequence[TextSignature]) -> tuple[float, list[str]]:
    score = 0.0
    reasons: list[str] = []
    for signature in signatures:
        if signature.regex.search(text):
            score += signature.score
            reasons.append(signature.label)
    return score, reasons
