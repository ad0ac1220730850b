"""
Risk aggregation — sum analyzer contributions into one bounded score.

Several analyzers can independently reach large values, so the total is
clamped to [0, 100]. Reasons keep analyzer invocation order so identical
inputs always produce identical reason lists.
"""

from __future__ import annotations

from typing import Iterable

from backend_riskguard.analysis_engine.models import RiskContribution

SCORE_MIN = 0.0
SCORE_MAX = 100.0


def clamp_score(score: float, min_score: float = SCORE_MIN, max_score: float = SCORE_MAX) -> float:
    return max(min_score, min(max_score, score))


def aggregate(contributions: Iterable[RiskContribution]) -> tuple[float, list[str]]:
    """
    Sum contribution scores and concatenate their reasons.

    Returns (total_score clamped to [0, 100], reasons in invocation order).
    """
    total = 0.0
    reasons: list[str] = []
    for contribution in contributions:
        total += contribution.score
        reasons.extend(contribution.reasons)
    return clamp_score(total), reasons
