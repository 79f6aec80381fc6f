"""
Pairwise score calculation between the two cohorts.

Computes the full left x right cross-product of SimilarityScores. A pair that
cannot be scored is logged and skipped; the rest of the batch continues.
"""

from typing import Literal, Optional

from teamate.data.models import MatchingConfig, Participant, SimilarityScore
from teamate.utils.constants import SCORING_PROGRESS_INTERVAL
from teamate.utils.logger import get_logger

from .exceptions import DimensionMismatchError, EmptyVectorError
from .similarity import embedding_similarity, final_score, structured_similarity

logger = get_logger(__name__)


class PairwiseScoreCalculator:
    """
    Scores every (left, right) combination of two cohorts.

    Pairs are scored sequentially in left-major order, so identical inputs
    always produce identically ordered output.
    """

    def __init__(self, config: MatchingConfig):
        """
        Initialize the calculator.

        Args:
            config: Matching configuration supplying weights and ranges.
        """
        self.config = config

    def score_pair(self, left: Participant, right: Participant) -> SimilarityScore:
        """
        Score a single pair.

        Raises:
            DimensionMismatchError: If the embeddings differ in length.
            EmptyVectorError: If either embedding is empty.
        """
        frq = embedding_similarity(left.embedding, right.embedding)
        quant = structured_similarity(left, right, self.config)
        return SimilarityScore(
            left_id=left.id,
            right_id=right.id,
            frq_score=frq,
            quant_score=quant,
            final_score=final_score(frq, quant, self.config),
        )

    def calculate(
        self,
        left: list[Participant],
        right: list[Participant],
    ) -> list[SimilarityScore]:
        """
        Calculate scores for all pairs between the cohorts.

        Args:
            left: Left cohort (seekers).
            right: Right cohort (providers).

        Returns:
            One SimilarityScore per successfully scored pair; at most
            len(left) * len(right) entries.
        """
        total_pairs = len(left) * len(right)
        logger.info(f"Calculating pairwise scores for {len(left)} x {len(right)} participants...")

        scores: list[SimilarityScore] = []
        attempted = 0
        skipped = 0

        for left_participant in left:
            for right_participant in right:
                attempted += 1
                try:
                    scores.append(self.score_pair(left_participant, right_participant))
                except (DimensionMismatchError, EmptyVectorError) as e:
                    skipped += 1
                    logger.warning(
                        f"Skipping pair {left_participant.id} - {right_participant.id}: {e}"
                    )

                if attempted % SCORING_PROGRESS_INTERVAL == 0:
                    progress = attempted / total_pairs * 100
                    logger.info(f"Progress: {attempted}/{total_pairs} ({progress:.1f}%)")

        logger.info(f"Successfully calculated {len(scores)} pairwise scores ({skipped} skipped)")

        if scores:
            count = len(scores)
            avg_frq = sum(s.frq_score for s in scores) / count
            avg_quant = sum(s.quant_score for s in scores) / count
            avg_final = sum(s.final_score for s in scores) / count
            logger.info(
                f"Score averages: FRQ={avg_frq:.3f}, Quant={avg_quant:.3f}, Final={avg_final:.3f}"
            )

        return scores


def build_score_matrix(
    scores: list[SimilarityScore],
    left: list[Participant],
    right: list[Participant],
) -> list[list[Optional[SimilarityScore]]]:
    """
    Arrange scores in a grid where matrix[i][j] scores left[i] with right[j].

    Cells of pairs that were not scored hold None.
    """
    left_index = {p.id: i for i, p in enumerate(left)}
    right_index = {p.id: j for j, p in enumerate(right)}

    matrix: list[list[Optional[SimilarityScore]]] = [[None] * len(right) for _ in left]
    for score in scores:
        i = left_index.get(score.left_id)
        j = right_index.get(score.right_id)
        if i is not None and j is not None:
            matrix[i][j] = score

    return matrix


def top_matches_for(
    participant_id: str,
    scores: list[SimilarityScore],
    top_n: int = 5,
    side: Literal["left", "right"] = "left",
) -> list[SimilarityScore]:
    """
    Best-scoring pairs involving one participant.

    Args:
        participant_id: Participant to look up.
        scores: All pairwise scores of a run.
        top_n: Maximum number of scores to return.
        side: Which cohort the participant belongs to.

    Returns:
        Up to `top_n` scores, highest final score first.
    """
    if side == "left":
        relevant = [s for s in scores if s.left_id == participant_id]
    else:
        relevant = [s for s in scores if s.right_id == participant_id]

    return sorted(relevant, key=lambda s: s.final_score, reverse=True)[:top_n]
