"""
Application-wide constants for Teamate.

This module contains all constant values used throughout the application.
Modify these values to customize behavior without changing code logic.
"""

from enum import Enum
from typing import Final


# =============================================================================
# Application Constants
# =============================================================================

APP_NAME: Final[str] = "teamate"
APP_DISPLAY_NAME: Final[str] = "Teamate Cohort Matching Engine"
VERSION: Final[str] = "0.1.0"


# =============================================================================
# Scoring Constants
# =============================================================================

# Default blend of embedding (FRQ) and structured (quant) similarity
DEFAULT_FRQ_WEIGHT: Final[float] = 0.7
DEFAULT_QUANT_WEIGHT: Final[float] = 0.3

# Weights must sum to 1.0 within this tolerance
WEIGHT_SUM_TOLERANCE: Final[float] = 0.001

# Structured preference questions and their default answer range
STRUCTURED_QUESTIONS: Final[tuple[str, ...]] = ("q1", "q2", "q3")
DEFAULT_SCORE_MIN: Final[float] = 1.0
DEFAULT_SCORE_MAX: Final[float] = 10.0

# Confidence tiers (strictly greater than)
DEFAULT_CONFIDENCE_THRESHOLDS: Final[dict[str, float]] = {
    "high": 0.8,
    "medium": 0.6,
}


# =============================================================================
# Assignment Constants
# =============================================================================

# Cost for padding cells when cohorts differ in size
PADDING_COST: Final[float] = 1e6

# Cost for real pairs that could not be scored
MISSING_PAIR_COST: Final[float] = 1.0

DEFAULT_ASSIGNMENT_STRATEGY: Final[str] = "scipy"


# =============================================================================
# Processing Constants
# =============================================================================

# Log pairwise scoring progress every N pairs
SCORING_PROGRESS_INTERVAL: Final[int] = 1000

# Max ids per vector store fetch request
RETRIEVAL_BATCH_SIZE: Final[int] = 1000

STATISTICS_PRECISION: Final[int] = 4


# =============================================================================
# Enums
# =============================================================================


class Cohort(str, Enum):
    """The two participant groups being paired."""

    SEEKER = "seeker"
    PROVIDER = "provider"


# Raw store categories mapped onto the two cohorts (lowercase keys)
COHORT_ALIASES: Final[dict[str, Cohort]] = {
    "seeker": Cohort.SEEKER,
    "young": Cohort.SEEKER,
    "student": Cohort.SEEKER,
    "mentee": Cohort.SEEKER,
    "provider": Cohort.PROVIDER,
    "older": Cohort.PROVIDER,
    "senior": Cohort.PROVIDER,
    "teacher": Cohort.PROVIDER,
    "mentor": Cohort.PROVIDER,
}


class ConfidenceLevel(str, Enum):
    """Coarse confidence bucket derived from a final score."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class PipelinePhase(str, Enum):
    """States of a single matching run."""

    CONFIGURED = "configured"
    RETRIEVING = "retrieving"
    SCORING = "scoring"
    ASSIGNING = "assigning"
    ENRICHING = "enriching"
    COMPLETE = "complete"
    FAILED = "failed"
