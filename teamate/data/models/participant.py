"""
Participant data models for Teamate.

Defines the typed participant record the matching core consumes, and the
retrieval output that splits participants into the two cohorts.
"""

from typing import Any, Optional

from pydantic import Field

from teamate.utils.constants import Cohort

from .base import EmbeddedModel, FrozenModel


class StructuredScores(EmbeddedModel):
    """Numeric preference answers; a missing answer is None."""

    q1: Optional[float] = None
    q2: Optional[float] = None
    q3: Optional[float] = None

    @property
    def is_complete(self) -> bool:
        return self.q1 is not None and self.q2 is not None and self.q3 is not None


class Participant(FrozenModel):
    """
    A single member of one cohort, with a pre-computed profile embedding.

    Constructed at the retrieval boundary and never modified afterwards.
    """

    id: str = Field(..., min_length=1)
    name: str
    category: Cohort
    embedding: list[float]

    # Structured preference scores
    q1: Optional[float] = None
    q2: Optional[float] = None
    q3: Optional[float] = None

    ideal_match: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def structured_scores(self) -> StructuredScores:
        """The q1-q3 answers as a StructuredScores record."""
        return StructuredScores(q1=self.q1, q2=self.q2, q3=self.q3)

    @property
    def dimension(self) -> int:
        return len(self.embedding)


class ExcludedParticipant(FrozenModel):
    """A store record left out of matching, and why."""

    id: str
    reason: str


class CohortRetrieval(FrozenModel):
    """Participants fetched for one run, split into left and right cohorts."""

    left: list[Participant] = Field(default_factory=list)
    right: list[Participant] = Field(default_factory=list)
    excluded: list[ExcludedParticipant] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.left or not self.right
