"""
End-to-end matching run.

Drives one batch run through its phases: retrieve both cohorts, score every
pair, solve the optimal assignment and enrich the result. Any failure stops
the run; no partial result is returned.
"""

import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from teamate.data.models import (
    CohortRetrieval,
    MatchingConfig,
    MatchingResult,
    Participant,
)
from teamate.utils.constants import PipelinePhase
from teamate.utils.logger import LoggerMixin, audit_log

from .assignment import AssignmentSolver
from .config import ConfigInput, resolve_config
from .enrichment import ResultEnricher
from .exceptions import (
    DimensionMismatchError,
    InvalidConfigError,
    MatchingError,
    NoParticipantsError,
    NoScoresComputedError,
    PipelineError,
)
from .pairwise import PairwiseScoreCalculator

if TYPE_CHECKING:
    from teamate.data.retrieval import ParticipantRetriever


def check_embedding_dimensions(participants: list[Participant]) -> int:
    """
    Verify that all embeddings share one length.

    Returns:
        The common dimension.

    Raises:
        DimensionMismatchError: If two lengths differ.
    """
    dimensions = {p.dimension for p in participants}
    if len(dimensions) > 1:
        raise DimensionMismatchError(
            f"Inconsistent embedding dimensions: {sorted(dimensions)}"
        )
    return dimensions.pop() if dimensions else 0


class MatchingPipeline(LoggerMixin):
    """
    Orchestrates a matching run over a participant retriever.

    The current phase is exposed as `phase`; it ends at COMPLETE or FAILED.
    """

    def __init__(
        self,
        retriever: "ParticipantRetriever",
        config: ConfigInput = None,
        calculator_cls: type[PairwiseScoreCalculator] = PairwiseScoreCalculator,
        solver: Optional[AssignmentSolver] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            retriever: Source of participants.
            config: Base config, partial overrides, or None for the defaults.
            calculator_cls: Pairwise calculator class, instantiated per run.
            solver: Assignment solver; scipy-backed by default.

        Raises:
            InvalidConfigError: If the config is invalid.
        """
        self.retriever = retriever
        self.config = resolve_config(config)
        self.calculator_cls = calculator_cls
        self.solver = solver or AssignmentSolver()
        self.phase = PipelinePhase.CONFIGURED

    def get_config(self) -> MatchingConfig:
        """Get a copy of the current configuration."""
        return self.config.model_copy(deep=True)

    def update_config(self, overrides: ConfigInput) -> MatchingConfig:
        """
        Merge overrides into the current configuration.

        Raises:
            InvalidConfigError: If the merged config is invalid; the current
                config is kept.
        """
        self.config = resolve_config(overrides, base=self.config)
        self.logger.info(
            f"Matching config updated: frq={self.config.frq_weight}, "
            f"quant={self.config.quant_weight}"
        )
        return self.get_config()

    def _enter(self, phase: PipelinePhase) -> None:
        self.phase = phase
        self.logger.debug(f"Entering phase {phase.value}")

    def _retrieve(self) -> CohortRetrieval:
        self._enter(PipelinePhase.RETRIEVING)
        cohorts = self.retriever.fetch_all_participants()

        if cohorts.is_empty:
            raise NoParticipantsError(
                f"Need participants in both cohorts, got {len(cohorts.left)} seekers "
                f"and {len(cohorts.right)} providers"
            )

        dimension = check_embedding_dimensions(cohorts.left + cohorts.right)
        self.logger.info(
            f"Retrieved {len(cohorts.left)} seekers and {len(cohorts.right)} providers "
            f"({dimension}-dimensional embeddings, {len(cohorts.excluded)} excluded)"
        )
        return cohorts

    def run_matching(self, config: ConfigInput = None) -> MatchingResult:
        """
        Execute a complete matching run.

        Args:
            config: Overrides for this run only, merged over the pipeline config.

        Returns:
            MatchingResult with ranked matches and statistics.

        Raises:
            InvalidConfigError: Before any retrieval, if the config is invalid.
            NoParticipantsError: If either cohort is empty.
            DimensionMismatchError: If embedding lengths differ across the run.
            NoScoresComputedError: If no pair could be scored.
            PipelineError: For any other failure, wrapping the original.
        """
        self.phase = PipelinePhase.CONFIGURED
        try:
            run_config = resolve_config(config, base=self.config)
        except InvalidConfigError as e:
            e.phase = PipelinePhase.CONFIGURED
            self._fail(e)
            raise

        self.logger.info("Starting matching run")
        self.logger.info(
            f"Config: frq={run_config.frq_weight}, quant={run_config.quant_weight}, "
            f"strategy={self.solver.strategy.name}"
        )
        started = time.perf_counter()

        try:
            cohorts = self._retrieve()

            self._enter(PipelinePhase.SCORING)
            scores = self.calculator_cls(run_config).calculate(cohorts.left, cohorts.right)
            if not scores:
                raise NoScoresComputedError("No similarity scores could be computed")

            self._enter(PipelinePhase.ASSIGNING)
            matches = self.solver.solve(scores, cohorts.left, cohorts.right)

            self._enter(PipelinePhase.ENRICHING)
            enricher = ResultEnricher(run_config)
            enriched = enricher.enrich(matches)
            statistics = enricher.calculate_statistics(enriched)
            unmatched_left, unmatched_right = enricher.unmatched_participants(
                enriched, cohorts.left, cohorts.right
            )

            result = MatchingResult(
                matches=enriched,
                statistics=statistics,
                config=run_config,
                timestamp=datetime.now(timezone.utc),
                unmatched_left=unmatched_left or None,
                unmatched_right=unmatched_right or None,
                excluded_participants=cohorts.excluded or None,
            )

        except MatchingError as e:
            if e.phase is None:
                e.phase = self.phase
            self._fail(e)
            raise
        except Exception as e:
            error = PipelineError(f"Unexpected failure: {e}", phase=self.phase)
            self._fail(error)
            raise error from e

        self.phase = PipelinePhase.COMPLETE
        duration = time.perf_counter() - started

        self.logger.info(f"Matching completed in {duration:.2f}s")
        self.logger.info(f"Total matches: {statistics.total_matches}")
        self.logger.info(f"Average score: {statistics.average_score:.3f}")
        if result.unmatched_left or result.unmatched_right:
            self.logger.warning(
                f"Unmatched participants: {len(unmatched_left)} seekers, "
                f"{len(unmatched_right)} providers"
            )

        audit_log(
            "matching_run_completed",
            {
                "total_matches": statistics.total_matches,
                "average_score": statistics.average_score,
                "seekers": len(cohorts.left),
                "providers": len(cohorts.right),
                "excluded": len(cohorts.excluded),
                "duration_seconds": round(duration, 3),
            },
        )

        return result

    def _fail(self, error: MatchingError) -> None:
        failed_phase = error.phase or self.phase
        self.phase = PipelinePhase.FAILED
        self.logger.error(f"Matching run failed during {failed_phase.value}: {error.message}")


def run_matching(
    retriever: "ParticipantRetriever",
    config: ConfigInput = None,
) -> MatchingResult:
    """
    Run a single matching pass.

    Args:
        retriever: Source of participants.
        config: Full config, partial overrides, or None for the defaults.

    Returns:
        MatchingResult of the run.
    """
    return MatchingPipeline(retriever, config=config).run_matching()
