"""Error types raised by the matching engine."""

from typing import Optional, Sequence

from teamate.utils.constants import PipelinePhase


class MatchingError(Exception):
    """Base class for matching failures; `phase` is set once a run attributes it."""

    def __init__(self, message: str, phase: Optional[PipelinePhase] = None):
        self.message = message
        self.phase = phase
        super().__init__(message)

    def __str__(self) -> str:
        if self.phase is not None:
            return f"[{self.phase.value}] {self.message}"
        return self.message


class InvalidConfigError(MatchingError, ValueError):
    """Weights out of range, weights not summing to 1, or malformed ranges."""


class NoParticipantsError(MatchingError):
    """A cohort came back empty from retrieval."""


class NoScoresComputedError(MatchingError):
    """Every pair failed scoring."""


class DimensionMismatchError(MatchingError, ValueError):
    """Two embeddings of different lengths were compared."""


class EmptyVectorError(MatchingError, ValueError):
    """An embedding has no components."""


class ParticipantNotFoundError(MatchingError, LookupError):
    """One or more requested participant ids are not in the store."""

    def __init__(self, missing_ids: Sequence[str], phase: Optional[PipelinePhase] = None):
        self.missing_ids = list(missing_ids)
        super().__init__(
            f"Participant(s) not found: {', '.join(self.missing_ids)}",
            phase=phase,
        )


class PipelineError(MatchingError):
    """Unexpected failure inside a pipeline phase; the original is the __cause__."""
