"""
Optimal one-to-one assignment between the two cohorts.

Builds a square cost matrix (cost = 1 - final score, padded for unequal cohort
sizes) and solves it exactly with an interchangeable strategy. Padding
artifacts and assignments onto unscored pairs are discarded afterwards.
"""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np
from scipy.optimize import linear_sum_assignment

from teamate.data.models import Match, MatchScores, Participant, SimilarityScore
from teamate.utils.constants import (
    DEFAULT_ASSIGNMENT_STRATEGY,
    MISSING_PAIR_COST,
    PADDING_COST,
    ConfidenceLevel,
)
from teamate.utils.logger import get_logger

logger = get_logger(__name__)

Assignment = list[tuple[int, int]]


class AssignmentStrategy(ABC):
    """Solves an n x n minimum-cost perfect matching exactly and deterministically."""

    name: str = ""

    @abstractmethod
    def solve(self, cost_matrix: np.ndarray) -> Assignment:
        """
        Solve the assignment problem.

        Args:
            cost_matrix: Square matrix of non-negative costs.

        Returns:
            (row, column) pairs forming a bijection, ordered by row.
        """
        pass


class LinearSumAssignmentStrategy(AssignmentStrategy):
    """Jonker-Volgenant solver from scipy."""

    name = "scipy"

    def solve(self, cost_matrix: np.ndarray) -> Assignment:
        if cost_matrix.size == 0:
            return []
        rows, cols = linear_sum_assignment(cost_matrix)
        return [(int(r), int(c)) for r, c in zip(rows, cols)]


class HungarianAssignmentStrategy(AssignmentStrategy):
    """
    Kuhn-Munkres with row/column potentials, O(n^3).

    Rows are inserted one at a time; each insertion runs a Dijkstra-like search
    for the shortest augmenting path over reduced costs. Ties resolve to the
    lowest column index, which keeps the result deterministic.
    """

    name = "hungarian"

    def solve(self, cost_matrix: np.ndarray) -> Assignment:
        cost = np.asarray(cost_matrix, dtype=np.float64)
        n = cost.shape[0]
        if n == 0:
            return []
        if cost.shape != (n, n):
            raise ValueError(f"Cost matrix must be square, got {cost.shape}")

        # Index 0 is a virtual column/row used as the augmenting path root
        u = np.zeros(n + 1)
        v = np.zeros(n + 1)
        row_of_col = np.zeros(n + 1, dtype=np.int64)
        way = np.zeros(n + 1, dtype=np.int64)

        for row in range(1, n + 1):
            row_of_col[0] = row
            col0 = 0
            min_reduced = np.full(n + 1, np.inf)
            used = np.zeros(n + 1, dtype=bool)

            while True:
                used[col0] = True
                row0 = row_of_col[col0]

                free = ~used[1:]
                reduced = cost[row0 - 1] - u[row0] - v[1:]
                improved = free & (reduced < min_reduced[1:])
                min_reduced[1:][improved] = reduced[improved]
                way[1:][improved] = col0

                candidates = np.where(free, min_reduced[1:], np.inf)
                col1 = int(np.argmin(candidates)) + 1
                delta = candidates[col1 - 1]

                used_cols = np.flatnonzero(used)
                u[row_of_col[used_cols]] += delta
                v[used_cols] -= delta
                min_reduced[~used] -= delta

                col0 = col1
                if row_of_col[col0] == 0:
                    break

            # Flip the augmenting path
            while col0 != 0:
                col1 = way[col0]
                row_of_col[col0] = row_of_col[col1]
                col0 = col1

        assignment = [(int(row_of_col[col]) - 1, col - 1) for col in range(1, n + 1)]
        return sorted(assignment)


_STRATEGIES: dict[str, type[AssignmentStrategy]] = {
    LinearSumAssignmentStrategy.name: LinearSumAssignmentStrategy,
    HungarianAssignmentStrategy.name: HungarianAssignmentStrategy,
}


def get_assignment_strategy(name: Optional[str] = None) -> AssignmentStrategy:
    """
    Factory function for assignment strategies.

    Args:
        name: 'scipy' or 'hungarian'. Defaults to 'scipy'.

    Returns:
        AssignmentStrategy instance.
    """
    name = name or DEFAULT_ASSIGNMENT_STRATEGY
    try:
        return _STRATEGIES[name]()
    except KeyError:
        raise ValueError(f"Unknown assignment strategy: {name}") from None


class AssignmentSolver:
    """
    Turns pairwise scores into the one-to-one pairing with maximal total score.
    """

    def __init__(self, strategy: Optional[AssignmentStrategy] = None):
        """
        Initialize the solver.

        Args:
            strategy: Exact assignment strategy; scipy's solver by default.
        """
        self.strategy = strategy or get_assignment_strategy()

    @staticmethod
    def _score_lookup(scores: list[SimilarityScore]) -> dict[tuple[str, str], SimilarityScore]:
        return {(s.left_id, s.right_id): s for s in scores}

    def build_cost_matrix(
        self,
        scores: list[SimilarityScore],
        left: list[Participant],
        right: list[Participant],
    ) -> np.ndarray:
        """
        Build the square cost matrix.

        Real cells hold 1 - final score, or MISSING_PAIR_COST when the pair was
        not scored. Cells beyond either cohort hold PADDING_COST.
        """
        lookup = self._score_lookup(scores)
        n = max(len(left), len(right))

        cost_matrix = np.full((n, n), PADDING_COST, dtype=np.float64)
        for i, left_participant in enumerate(left):
            for j, right_participant in enumerate(right):
                score = lookup.get((left_participant.id, right_participant.id))
                cost_matrix[i, j] = 1.0 - score.final_score if score else MISSING_PAIR_COST

        return cost_matrix

    def solve(
        self,
        scores: list[SimilarityScore],
        left: list[Participant],
        right: list[Participant],
    ) -> list[Match]:
        """
        Compute the optimal matches.

        Args:
            scores: Pairwise scores of the run (may be incomplete).
            left: Left cohort (seekers).
            right: Right cohort (providers).

        Returns:
            Matches ordered by left cohort position, with provisional
            confidence and no rank.
        """
        logger.info(f"Starting assignment with '{self.strategy.name}' strategy...")

        cost_matrix = self.build_cost_matrix(scores, left, right)
        logger.info(f"Created {cost_matrix.shape[0]}x{cost_matrix.shape[1]} cost matrix")

        assignment = self.strategy.solve(cost_matrix)
        logger.info(f"Found {len(assignment)} assignments")

        lookup = self._score_lookup(scores)
        matches: list[Match] = []

        for row, col in assignment:
            # Padding artifacts
            if row >= len(left) or col >= len(right):
                continue

            left_participant = left[row]
            right_participant = right[col]
            score = lookup.get((left_participant.id, right_participant.id))
            if score is None:
                logger.debug(
                    f"Discarding assignment {left_participant.id} - {right_participant.id}: pair was not scored"
                )
                continue

            matches.append(
                Match(
                    left_id=left_participant.id,
                    right_id=right_participant.id,
                    left_name=left_participant.name,
                    right_name=right_participant.name,
                    scores=MatchScores(
                        frq=score.frq_score,
                        quant=score.quant_score,
                        final=score.final_score,
                    ),
                    confidence=ConfidenceLevel.MEDIUM,
                )
            )

        if matches:
            total_score = sum(m.scores.final for m in matches)
            logger.info(
                f"Total score: {total_score:.4f} (avg: {total_score / len(matches):.4f})"
            )

        return matches
