"""
Match and scoring data models for Teamate.

Defines pairwise similarity scores, the matches produced by the assignment
step, aggregate statistics and the top-level result of a matching run.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from teamate.utils.constants import ConfidenceLevel

from .base import FrozenModel
from .config import MatchingConfig
from .participant import ExcludedParticipant


class SimilarityScore(FrozenModel):
    """Compatibility of one (left, right) pair."""

    left_id: str
    right_id: str
    frq_score: float = Field(..., ge=0, le=1)
    quant_score: float = Field(..., ge=0, le=1)
    final_score: float = Field(..., ge=0, le=1)


class MatchScores(FrozenModel):
    """Score components carried on a match."""

    frq: float = Field(..., ge=0, le=1)
    quant: float = Field(..., ge=0, le=1)
    final: float = Field(..., ge=0, le=1)


class Match(FrozenModel):
    """
    One pairing selected by the assignment step.

    The solver emits a provisional confidence and no rank; enrichment returns
    finalized copies with both set.
    """

    left_id: str
    right_id: str
    left_name: str = ""
    right_name: str = ""
    scores: MatchScores
    confidence: ConfidenceLevel = ConfidenceLevel.MEDIUM
    rank: Optional[int] = None


class ConfidenceDistribution(FrozenModel):
    """Number of matches in each confidence tier."""

    high: int = 0
    medium: int = 0
    low: int = 0


class MatchingStatistics(FrozenModel):
    """Aggregate figures over the final matches of a run."""

    total_matches: int = 0
    average_score: float = 0.0
    min_score: float = 0.0
    max_score: float = 0.0
    average_frq_score: float = 0.0
    average_quant_score: float = 0.0
    standard_deviation: float = 0.0
    confidence_distribution: ConfidenceDistribution = Field(default_factory=ConfidenceDistribution)


class MatchingResult(FrozenModel):
    """Top-level output of one matching run."""

    matches: list[Match]
    statistics: MatchingStatistics
    config: MatchingConfig
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    unmatched_left: Optional[list[str]] = None
    unmatched_right: Optional[list[str]] = None
    excluded_participants: Optional[list[ExcludedParticipant]] = None

    @property
    def total_score(self) -> float:
        return sum(m.scores.final for m in self.matches)


class PairScoreResult(FrozenModel):
    """Compact result of scoring one specific pair outside a run."""

    left_id: str
    right_id: str
    frq_score: float
    quant_score: float
    final_score: float
    final_percentage: int
    confidence: ConfidenceLevel
