"""
Post-processing of assignment output.

Ranks matches, finalizes their confidence tier, computes aggregate statistics
and reports which participants were left without a partner.
"""

import numpy as np

from teamate.data.models import (
    ConfidenceDistribution,
    Match,
    MatchingConfig,
    MatchingStatistics,
    Participant,
)
from teamate.utils.constants import STATISTICS_PRECISION, ConfidenceLevel
from teamate.utils.logger import get_logger

from .similarity import confidence_level

logger = get_logger(__name__)


def _distribution(matches: list[Match]) -> ConfidenceDistribution:
    counts = {level: 0 for level in ConfidenceLevel}
    for match in matches:
        counts[match.confidence] += 1
    return ConfidenceDistribution(
        high=counts[ConfidenceLevel.HIGH],
        medium=counts[ConfidenceLevel.MEDIUM],
        low=counts[ConfidenceLevel.LOW],
    )


class ResultEnricher:
    """Ranks and labels matches and summarizes a run."""

    def __init__(self, config: MatchingConfig):
        self.config = config

    @staticmethod
    def sort_matches(matches: list[Match]) -> list[Match]:
        """Highest final score first; equal scores keep their input order."""
        return sorted(matches, key=lambda m: m.scores.final, reverse=True)

    def enrich(self, matches: list[Match]) -> list[Match]:
        """
        Rank matches and assign their confidence tier.

        Args:
            matches: Matches from the assignment step.

        Returns:
            New Match records sorted by final score, ranked from 1.
        """
        logger.info("Enriching matches with rank and confidence...")

        enriched = [
            match.model_copy(
                update={
                    "rank": position + 1,
                    "confidence": confidence_level(match.scores.final, self.config),
                }
            )
            for position, match in enumerate(self.sort_matches(matches))
        ]

        distribution = _distribution(enriched)
        logger.info(
            f"Confidence distribution: High={distribution.high}, "
            f"Medium={distribution.medium}, Low={distribution.low}"
        )

        return enriched

    @staticmethod
    def calculate_statistics(matches: list[Match]) -> MatchingStatistics:
        """
        Compute aggregate statistics over enriched matches.

        An empty list yields all-zero statistics.
        """
        logger.info("Calculating match statistics...")

        if not matches:
            return MatchingStatistics()

        final_scores = np.array([m.scores.final for m in matches])
        frq_scores = np.array([m.scores.frq for m in matches])
        quant_scores = np.array([m.scores.quant for m in matches])

        def _round(value: float) -> float:
            return round(float(value), STATISTICS_PRECISION)

        statistics = MatchingStatistics(
            total_matches=len(matches),
            average_score=_round(final_scores.mean()),
            min_score=_round(final_scores.min()),
            max_score=_round(final_scores.max()),
            average_frq_score=_round(frq_scores.mean()),
            average_quant_score=_round(quant_scores.mean()),
            # Population standard deviation
            standard_deviation=_round(final_scores.std()),
            confidence_distribution=_distribution(matches),
        )

        logger.info(
            f"Match statistics: total={statistics.total_matches}, "
            f"avg={statistics.average_score}, "
            f"range={statistics.min_score}-{statistics.max_score}, "
            f"std={statistics.standard_deviation}, "
            f"avg_frq={statistics.average_frq_score}, "
            f"avg_quant={statistics.average_quant_score}"
        )

        return statistics

    @staticmethod
    def unmatched_participants(
        matches: list[Match],
        left: list[Participant],
        right: list[Participant],
    ) -> tuple[list[str], list[str]]:
        """
        Ids of each cohort that appear in no match, in cohort order.

        Returns:
            (unmatched left ids, unmatched right ids)
        """
        matched_left = {m.left_id for m in matches}
        matched_right = {m.right_id for m in matches}

        return (
            [p.id for p in left if p.id not in matched_left],
            [p.id for p in right if p.id not in matched_right],
        )
