"""
Data models for Teamate.

Pydantic models for participants, matching configuration, pairwise scores,
matches and run results.
"""

from .base import EmbeddedModel, FrozenModel
from .config import (
    DEFAULT_MATCHING_CONFIG,
    ConfidenceThresholds,
    MatchingConfig,
    ScoreRange,
    ScoreRanges,
)
from .match import (
    ConfidenceDistribution,
    Match,
    MatchingResult,
    MatchingStatistics,
    MatchScores,
    PairScoreResult,
    SimilarityScore,
)
from .participant import (
    CohortRetrieval,
    ExcludedParticipant,
    Participant,
    StructuredScores,
)

__all__ = [
    # Base
    "EmbeddedModel",
    "FrozenModel",
    # Config
    "DEFAULT_MATCHING_CONFIG",
    "ConfidenceThresholds",
    "MatchingConfig",
    "ScoreRange",
    "ScoreRanges",
    # Match
    "ConfidenceDistribution",
    "Match",
    "MatchingResult",
    "MatchingStatistics",
    "MatchScores",
    "PairScoreResult",
    "SimilarityScore",
    # Participant
    "CohortRetrieval",
    "ExcludedParticipant",
    "Participant",
    "StructuredScores",
]
