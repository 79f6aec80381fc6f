"""Cohort matching engine module."""

from .assignment import (
    AssignmentSolver,
    AssignmentStrategy,
    HungarianAssignmentStrategy,
    LinearSumAssignmentStrategy,
    get_assignment_strategy,
)
from .config import resolve_config, validate_matching_config
from .enrichment import ResultEnricher
from .exceptions import (
    DimensionMismatchError,
    EmptyVectorError,
    InvalidConfigError,
    MatchingError,
    NoParticipantsError,
    NoScoresComputedError,
    ParticipantNotFoundError,
    PipelineError,
)
from .pairwise import PairwiseScoreCalculator, build_score_matrix, top_matches_for
from .pipeline import MatchingPipeline, run_matching
from .similarity import (
    confidence_level,
    embedding_similarity,
    final_score,
    is_valid_embedding,
    structured_similarity,
)
from .single_pair import SinglePairScorer, compute_match_score

__all__ = [
    # Similarity
    "confidence_level",
    "embedding_similarity",
    "final_score",
    "is_valid_embedding",
    "structured_similarity",
    # Scoring and assignment
    "PairwiseScoreCalculator",
    "build_score_matrix",
    "top_matches_for",
    "AssignmentSolver",
    "AssignmentStrategy",
    "HungarianAssignmentStrategy",
    "LinearSumAssignmentStrategy",
    "get_assignment_strategy",
    "ResultEnricher",
    # Runs
    "MatchingPipeline",
    "run_matching",
    "SinglePairScorer",
    "compute_match_score",
    # Config
    "resolve_config",
    "validate_matching_config",
    # Errors
    "DimensionMismatchError",
    "EmptyVectorError",
    "InvalidConfigError",
    "MatchingError",
    "NoParticipantsError",
    "NoScoresComputedError",
    "ParticipantNotFoundError",
    "PipelineError",
]
