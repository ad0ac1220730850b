"""
Score classification — threshold bands and confidence.

A ThresholdTable is an ascending, non-overlapping partition of [0, 100]
into bands, each mapping to a (status, recommendation) pair. Classification
scans from the highest band down, so a score equal to a band's lower bound
belongs to that (higher) band. There is no state machine: a verdict is a
pure function of the score.

Confidence follows the source dashboards' convention that the engine grows
more confident as risk rises: min(max, base + score * slope). It is a
modeling choice, not a calibrated probability.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from backend_riskguard.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class ThresholdBand:
    min_score: float
    status: str
    recommendation: str


@dataclass(frozen=True)
class ThresholdTable:
    """Ordered bands; index in `bands` is the status's severity rank."""

    bands: tuple[ThresholdBand, ...]

    def __post_init__(self) -> None:
        if not self.bands:
            raise ConfigurationError("threshold table has no bands")
        for band in self.bands:
            if not math.isfinite(band.min_score):
                raise ConfigurationError(f"threshold band {band.status!r} has a non-finite min_score")
        if self.bands[0].min_score != 0:
            raise ConfigurationError(
                f"threshold table must start at 0, starts at {self.bands[0].min_score}"
            )
        for lower, upper in zip(self.bands, self.bands[1:]):
            if upper.min_score <= lower.min_score:
                raise ConfigurationError(
                    f"threshold bands must strictly ascend: {lower.min_score} then {upper.min_score}"
                )
        if self.bands[-1].min_score > 100:
            raise ConfigurationError(f"threshold band above 100: {self.bands[-1].min_score}")
        statuses = [b.status for b in self.bands]
        if len(set(statuses)) != len(statuses):
            raise ConfigurationError(f"duplicate status in threshold table: {statuses}")

    @classmethod
    def from_tuples(cls, rows: Sequence[tuple[float, str, str]]) -> ThresholdTable:
        return cls(tuple(ThresholdBand(float(m), s, r) for m, s, r in rows))

    @property
    def statuses(self) -> tuple[str, ...]:
        return tuple(b.status for b in self.bands)

    @property
    def top_status(self) -> str:
        return self.bands[-1].status

    def rank(self, status: str) -> int:
        """Severity rank of a status (0 = lowest risk); ValueError if unknown."""
        return self.statuses.index(status)

    def band_for(self, score: float) -> tuple[int, ThresholdBand]:
        for index in range(len(self.bands) - 1, -1, -1):
            band = self.bands[index]
            if score >= band.min_score:
                return index, band
        # Scores are clamped to >= 0 and the first band starts at 0
        return 0, self.bands[0]


@dataclass(frozen=True)
class ConfidenceCurve:
    base: float
    slope: float
    max: float

    def __post_init__(self) -> None:
        if not all(math.isfinite(v) for v in (self.base, self.slope, self.max)):
            raise ConfigurationError(f"confidence curve values must be finite: {self}")
        if self.slope < 0:
            raise ConfigurationError(f"confidence slope must be >= 0, got {self.slope}")
        if not 0 <= self.max <= 100:
            raise ConfigurationError(f"confidence max must be within [0, 100], got {self.max}")


def classify(total_score: float, table: ThresholdTable) -> tuple[str, str]:
    """Map a total score to (status, recommendation) under the given table."""
    _, band = table.band_for(total_score)
    return band.status, band.recommendation


def compute_confidence(total_score: float, curve: ConfidenceCurve) -> float:
    """min(max, base + score * slope), floored at 0; non-decreasing in score."""
    return max(0.0, min(curve.max, curve.base + total_score * curve.slope))
