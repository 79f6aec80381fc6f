"""
Tests for teamate.core.matching.pairwise: cross-product scoring and lookups.
"""

import pytest

from teamate.core.matching.exceptions import DimensionMismatchError
from teamate.core.matching.pairwise import (
    PairwiseScoreCalculator,
    build_score_matrix,
    top_matches_for,
)
from teamate.data.models import SimilarityScore
from teamate.utils.constants import Cohort


@pytest.fixture
def calculator(default_config):
    return PairwiseScoreCalculator(default_config)


def _score(left_id: str, right_id: str, final: float) -> SimilarityScore:
    return SimilarityScore(
        left_id=left_id,
        right_id=right_id,
        frq_score=final,
        quant_score=final,
        final_score=final,
    )


# ── PairwiseScoreCalculator.calculate ────────────────────────────────────────


class TestCalculate:
    def test_full_cross_product(self, calculator, two_by_two):
        left, right = two_by_two
        scores = calculator.calculate(left, right)
        assert len(scores) == 4

    def test_left_major_order(self, calculator, two_by_two):
        left, right = two_by_two
        pairs = [(s.left_id, s.right_id) for s in calculator.calculate(left, right)]
        assert pairs == [("A", "X"), ("A", "Y"), ("B", "X"), ("B", "Y")]

    def test_identical_profiles_score_one(self, calculator, two_by_two):
        left, right = two_by_two
        scores = {(s.left_id, s.right_id): s for s in calculator.calculate(left, right)}
        assert abs(scores[("A", "X")].final_score - 1.0) < 1e-9
        assert abs(scores[("A", "Y")].final_score - 0.3) < 1e-9

    def test_scores_within_unit_interval(self, calculator, make_participant):
        left = [make_participant(id=f"s{i}", embedding=[i + 1.0, -i, 0.5], q1=i + 1) for i in range(3)]
        right = [
            make_participant(id=f"p{i}", category=Cohort.PROVIDER, embedding=[-1.0, i, 2.0], q3=10 - i)
            for i in range(4)
        ]
        for score in calculator.calculate(left, right):
            assert 0.0 <= score.frq_score <= 1.0
            assert 0.0 <= score.quant_score <= 1.0
            assert 0.0 <= score.final_score <= 1.0

    def test_failed_pair_skipped(self, calculator, make_participant):
        left = [make_participant(id="A", embedding=[1.0, 0.0])]
        right = [
            make_participant(id="X", category=Cohort.PROVIDER, embedding=[1.0, 0.0]),
            make_participant(id="Y", category=Cohort.PROVIDER, embedding=[1.0, 0.0, 0.0]),
        ]
        scores = calculator.calculate(left, right)
        assert [(s.left_id, s.right_id) for s in scores] == [("A", "X")]

    def test_all_pairs_failing_returns_empty(self, calculator, make_participant):
        left = [make_participant(id="A", embedding=[1.0, 0.0])]
        right = [make_participant(id="X", category=Cohort.PROVIDER, embedding=[1.0])]
        assert calculator.calculate(left, right) == []

    def test_empty_cohort(self, calculator, make_participant):
        assert calculator.calculate([make_participant()], []) == []

    def test_deterministic(self, calculator, two_by_two):
        left, right = two_by_two
        assert calculator.calculate(left, right) == calculator.calculate(left, right)


class TestScorePair:
    def test_raises_on_mismatch(self, calculator, make_participant):
        a = make_participant(id="A", embedding=[1.0, 0.0])
        b = make_participant(id="X", category=Cohort.PROVIDER, embedding=[1.0])
        with pytest.raises(DimensionMismatchError):
            calculator.score_pair(a, b)


# ── build_score_matrix / top_matches_for ─────────────────────────────────────


class TestBuildScoreMatrix:
    def test_shape_and_cells(self, calculator, two_by_two):
        left, right = two_by_two
        scores = calculator.calculate(left, right)
        matrix = build_score_matrix(scores, left, right)
        assert len(matrix) == 2
        assert all(len(row) == 2 for row in matrix)
        assert matrix[1][0].left_id == "B"
        assert matrix[1][0].right_id == "X"

    def test_missing_pairs_are_none(self, two_by_two):
        left, right = two_by_two
        matrix = build_score_matrix([_score("A", "Y", 0.5)], left, right)
        assert matrix[0][1] is not None
        assert matrix[0][0] is None
        assert matrix[1][1] is None


class TestTopMatchesFor:
    def test_sorted_descending(self):
        scores = [_score("A", "X", 0.2), _score("A", "Y", 0.9), _score("A", "Z", 0.5), _score("B", "X", 1.0)]
        top = top_matches_for("A", scores)
        assert [s.right_id for s in top] == ["Y", "Z", "X"]

    def test_top_n(self):
        scores = [_score("A", "X", 0.2), _score("A", "Y", 0.9), _score("A", "Z", 0.5)]
        assert len(top_matches_for("A", scores, top_n=2)) == 2

    def test_right_side(self):
        scores = [_score("A", "X", 0.2), _score("B", "X", 0.9), _score("B", "Y", 1.0)]
        top = top_matches_for("X", scores, side="right")
        assert [s.left_id for s in top] == ["B", "A"]

    def test_unknown_participant(self):
        assert top_matches_for("nobody", [_score("A", "X", 0.5)]) == []
