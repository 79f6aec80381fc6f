"""
Matching configuration model.

Holds the scoring weights, the answer ranges of the structured questions and
the confidence thresholds of one matching run. Validation of the weight
constraints lives in teamate.core.matching.config so a stale config can still
be represented and scored directly.
"""

from pydantic import ConfigDict, Field

from teamate.utils.constants import (
    DEFAULT_CONFIDENCE_THRESHOLDS,
    DEFAULT_FRQ_WEIGHT,
    DEFAULT_QUANT_WEIGHT,
    DEFAULT_SCORE_MAX,
    DEFAULT_SCORE_MIN,
)

from .base import FrozenModel


class ScoreRange(FrozenModel):
    """Inclusive answer range of one structured question."""

    min: float = DEFAULT_SCORE_MIN
    max: float = DEFAULT_SCORE_MAX

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2

    @property
    def span(self) -> float:
        return self.max - self.min

    def clamp(self, value: float) -> float:
        return max(self.min, min(self.max, value))


class ScoreRanges(FrozenModel):
    """Answer ranges for q1-q3."""

    q1: ScoreRange = Field(default_factory=ScoreRange)
    q2: ScoreRange = Field(default_factory=ScoreRange)
    q3: ScoreRange = Field(default_factory=ScoreRange)

    def for_question(self, question: str) -> ScoreRange:
        return getattr(self, question)


class ConfidenceThresholds(FrozenModel):
    """A final score strictly above a threshold reaches that tier."""

    high: float = DEFAULT_CONFIDENCE_THRESHOLDS["high"]
    medium: float = DEFAULT_CONFIDENCE_THRESHOLDS["medium"]


class MatchingConfig(FrozenModel):
    """Parameters of a matching run."""

    model_config = ConfigDict(extra="forbid")

    frq_weight: float = DEFAULT_FRQ_WEIGHT
    quant_weight: float = DEFAULT_QUANT_WEIGHT
    score_ranges: ScoreRanges = Field(default_factory=ScoreRanges)
    confidence_thresholds: ConfidenceThresholds = Field(default_factory=ConfidenceThresholds)

    @property
    def total_weight(self) -> float:
        return self.frq_weight + self.quant_weight


DEFAULT_MATCHING_CONFIG = MatchingConfig()
