"""
Similarity scoring primitives.

Pure functions combining embedding (free-response) similarity and structured
(q1-q3) similarity into a final compatibility score and confidence tier.
"""

import math
from typing import Optional, Protocol, Sequence

import numpy as np

from teamate.data.models import MatchingConfig
from teamate.utils.constants import (
    STRUCTURED_QUESTIONS,
    WEIGHT_SUM_TOLERANCE,
    ConfidenceLevel,
)
from teamate.utils.logger import get_logger

from .exceptions import DimensionMismatchError, EmptyVectorError

logger = get_logger(__name__)


class HasStructuredScores(Protocol):
    q1: Optional[float]
    q2: Optional[float]
    q3: Optional[float]


def _clamp_unit(value: float) -> float:
    value = float(value)
    # NaN would otherwise survive max/min as 1.0
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


def embedding_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two embeddings, clamped to [0, 1].

    Negative similarities are treated as 0. A zero-magnitude vector yields 0
    with a warning rather than an error.

    Raises:
        DimensionMismatchError: If the vectors differ in length.
        EmptyVectorError: If the vectors have no components.
    """
    vec_a = np.asarray(a, dtype=np.float64)
    vec_b = np.asarray(b, dtype=np.float64)

    if vec_a.shape != vec_b.shape:
        raise DimensionMismatchError(
            f"Vector dimension mismatch: {vec_a.size} vs {vec_b.size}"
        )
    if vec_a.size == 0:
        raise EmptyVectorError("Vectors cannot be empty")

    norm_a = np.linalg.norm(vec_a)
    norm_b = np.linalg.norm(vec_b)
    if norm_a == 0 or norm_b == 0:
        logger.warning("Zero vector detected in cosine similarity calculation")
        return 0.0

    similarity = float(np.dot(vec_a, vec_b) / (norm_a * norm_b))
    return _clamp_unit(similarity)


def structured_similarity(
    scores_a: HasStructuredScores,
    scores_b: HasStructuredScores,
    config: MatchingConfig,
) -> float:
    """
    Similarity of two q1-q3 answer sets in [0, 1], 1 meaning identical.

    Missing answers take the midpoint of their question's range; answers are
    clamped into range. The sum of squared differences is normalized by the
    largest SSD the ranges allow.
    """
    ssd = 0.0
    max_ssd = 0.0

    for question in STRUCTURED_QUESTIONS:
        score_range = config.score_ranges.for_question(question)
        raw_a = getattr(scores_a, question)
        raw_b = getattr(scores_b, question)

        value_a = score_range.clamp(score_range.midpoint if raw_a is None else raw_a)
        value_b = score_range.clamp(score_range.midpoint if raw_b is None else raw_b)

        ssd += (value_a - value_b) ** 2
        max_ssd += score_range.span ** 2

    # No room to differ
    if max_ssd == 0:
        return 1.0

    return _clamp_unit(1 - ssd / max_ssd)


def final_score(frq: float, quant: float, config: MatchingConfig) -> float:
    """Weighted blend of the FRQ and quant scores, clamped to [0, 1]."""
    if abs(config.total_weight - 1.0) > WEIGHT_SUM_TOLERANCE:
        logger.warning(
            f"Weights do not sum to 1.0: frqWeight={config.frq_weight}, "
            f"quantWeight={config.quant_weight}"
        )

    return _clamp_unit(config.frq_weight * frq + config.quant_weight * quant)


def confidence_level(score: float, config: MatchingConfig) -> ConfidenceLevel:
    """Tier for a final score; a score equal to a threshold falls to the lower tier."""
    thresholds = config.confidence_thresholds
    if score > thresholds.high:
        return ConfidenceLevel.HIGH
    elif score > thresholds.medium:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def is_valid_embedding(
    embedding: Optional[Sequence[float]],
    expected_dimension: Optional[int] = None,
) -> bool:
    """
    Check that an embedding is usable for matching.

    Rejects missing, empty, all-zero and non-finite vectors, and vectors of the
    wrong length when `expected_dimension` is given.
    """
    if embedding is None:
        return False

    try:
        vector = np.asarray(embedding, dtype=np.float64)
    except (TypeError, ValueError):
        return False

    if vector.ndim != 1 or vector.size == 0:
        return False
    if expected_dimension is not None and vector.size != expected_dimension:
        return False
    if not np.all(np.isfinite(vector)):
        return False
    return bool(np.any(vector != 0))
