"""
Tests for teamate.core.matching.enrichment: ranking, confidence and statistics.
"""

import pytest

from teamate.core.matching.enrichment import ResultEnricher
from teamate.data.models import Match, MatchingStatistics, MatchScores
from teamate.utils.constants import Cohort, ConfidenceLevel


def _match(left_id: str, right_id: str, final: float, frq: float = 0.5, quant: float = 0.5) -> Match:
    return Match(
        left_id=left_id,
        right_id=right_id,
        scores=MatchScores(frq=frq, quant=quant, final=final),
    )


@pytest.fixture
def enricher(default_config):
    return ResultEnricher(default_config)


# ── sort_matches / enrich ────────────────────────────────────────────────────


class TestSortMatches:
    def test_descending(self):
        matches = [_match("A", "X", 0.2), _match("B", "Y", 0.9), _match("C", "Z", 0.5)]
        assert [m.left_id for m in ResultEnricher.sort_matches(matches)] == ["B", "C", "A"]

    def test_stable_for_ties(self):
        matches = [_match("A", "X", 0.5), _match("B", "Y", 0.5), _match("C", "Z", 0.5)]
        assert [m.left_id for m in ResultEnricher.sort_matches(matches)] == ["A", "B", "C"]


class TestEnrich:
    def test_ranks_are_gap_free(self, enricher):
        matches = [_match("A", "X", 0.2), _match("B", "Y", 0.9), _match("C", "Z", 0.5)]
        enriched = enricher.enrich(matches)
        assert [m.rank for m in enriched] == [1, 2, 3]

    def test_scores_non_increasing(self, enricher):
        matches = [_match(f"s{i}", f"p{i}", v) for i, v in enumerate([0.1, 0.7, 0.3, 0.7, 0.95])]
        finals = [m.scores.final for m in enricher.enrich(matches)]
        assert all(a >= b for a, b in zip(finals, finals[1:]))

    def test_confidence_assigned(self, enricher):
        enriched = enricher.enrich([_match("A", "X", 0.9), _match("B", "Y", 0.7), _match("C", "Z", 0.6)])
        assert [m.confidence for m in enriched] == [
            ConfidenceLevel.HIGH,
            ConfidenceLevel.MEDIUM,
            ConfidenceLevel.LOW,
        ]

    def test_returns_new_records(self, enricher):
        original = _match("A", "X", 0.9)
        enriched = enricher.enrich([original])
        assert original.rank is None
        assert original.confidence == ConfidenceLevel.MEDIUM
        assert enriched[0].rank == 1

    def test_empty(self, enricher):
        assert enricher.enrich([]) == []


# ── calculate_statistics ─────────────────────────────────────────────────────


class TestCalculateStatistics:
    def test_empty_is_all_zero(self):
        assert ResultEnricher.calculate_statistics([]) == MatchingStatistics()

    def test_values(self, enricher):
        matches = enricher.enrich([
            _match("A", "X", 0.9, frq=1.0, quant=0.6),
            _match("B", "Y", 0.5, frq=0.4, quant=0.8),
        ])
        stats = ResultEnricher.calculate_statistics(matches)

        assert stats.total_matches == 2
        assert stats.average_score == 0.7
        assert stats.min_score == 0.5
        assert stats.max_score == 0.9
        assert stats.average_frq_score == 0.7
        assert stats.average_quant_score == 0.7
        # Population standard deviation
        assert stats.standard_deviation == 0.2

    def test_rounded_to_four_decimals(self):
        matches = [_match("A", "X", 1 / 3), _match("B", "Y", 2 / 3), _match("C", "Z", 0.0)]
        stats = ResultEnricher.calculate_statistics(matches)
        assert stats.min_score == 0.0
        assert stats.max_score == 0.6667
        assert stats.average_score == 0.3333

    def test_confidence_distribution(self, enricher):
        matches = enricher.enrich([
            _match("A", "X", 0.95),
            _match("B", "Y", 0.85),
            _match("C", "Z", 0.7),
            _match("D", "W", 0.1),
        ])
        distribution = ResultEnricher.calculate_statistics(matches).confidence_distribution
        assert (distribution.high, distribution.medium, distribution.low) == (2, 1, 1)


# ── unmatched_participants ───────────────────────────────────────────────────


class TestUnmatchedParticipants:
    def test_reports_both_sides_in_cohort_order(self, make_participant):
        left = [make_participant(id=i) for i in ("A", "B", "C")]
        right = [make_participant(id=i, category=Cohort.PROVIDER) for i in ("X", "Y", "Z")]
        matches = [_match("B", "Y", 0.9)]

        unmatched_left, unmatched_right = ResultEnricher.unmatched_participants(matches, left, right)
        assert unmatched_left == ["A", "C"]
        assert unmatched_right == ["X", "Z"]

    def test_all_matched(self, make_participant):
        left = [make_participant(id="A")]
        right = [make_participant(id="X", category=Cohort.PROVIDER)]
        assert ResultEnricher.unmatched_participants([_match("A", "X", 0.5)], left, right) == ([], [])
