"""
Shared test fixtures for the Teamate test suite.

Sets environment variables before any teamate imports so no log files or
ChromaDB directories are created, then provides factory fixtures for
participants, configs, store records and retrievers.
"""

import os

# === Set environment BEFORE any teamate imports ===
os.environ.setdefault("APP_ENVIRONMENT", "testing")
os.environ.setdefault("LOG_FILE_OUTPUT", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("VECTOR_PROVIDER", "memory")

from typing import Any, Optional

import pytest

from teamate.core.matching.config import resolve_config
from teamate.data.models import (
    CohortRetrieval,
    ExcludedParticipant,
    MatchingConfig,
    Participant,
)
from teamate.data.retrieval import ParticipantRetriever, VectorStoreRetriever
from teamate.data.vector_store import InMemoryVectorStore, VectorRecord
from teamate.utils.constants import Cohort


# ---------------------------------------------------------------------------
# Participants and configs
# ---------------------------------------------------------------------------


@pytest.fixture
def make_participant():
    """Factory that returns a callable to build Participant models."""

    def _factory(
        id: str = "s1",
        name: Optional[str] = None,
        category: Cohort = Cohort.SEEKER,
        embedding: Optional[list[float]] = None,
        q1: Optional[float] = 5.0,
        q2: Optional[float] = 5.0,
        q3: Optional[float] = 5.0,
        **kwargs,
    ) -> Participant:
        return Participant(
            id=id,
            name=name or f"Participant {id}",
            category=category,
            embedding=embedding if embedding is not None else [1.0, 0.0, 0.0],
            q1=q1,
            q2=q2,
            q3=q3,
            **kwargs,
        )

    return _factory


@pytest.fixture
def make_config():
    """Factory that returns a callable to build validated MatchingConfig models."""

    def _factory(**overrides: Any) -> MatchingConfig:
        return resolve_config(overrides or None)

    return _factory


@pytest.fixture
def default_config() -> MatchingConfig:
    return MatchingConfig()


# ---------------------------------------------------------------------------
# Store records and retrievers
# ---------------------------------------------------------------------------


@pytest.fixture
def make_record():
    """Factory that returns a callable to build raw VectorRecords."""

    def _factory(
        id: str = "s1",
        embedding: Optional[list[float]] = None,
        name: Optional[str] = None,
        type: Optional[str] = "student",
        **metadata: Any,
    ) -> VectorRecord:
        meta: dict[str, Any] = {"name": name or f"Participant {id}"}
        if type is not None:
            meta["type"] = type
        meta.update(metadata)
        return VectorRecord(
            id=id,
            embedding=embedding if embedding is not None else [1.0, 0.0, 0.0],
            metadata=meta,
        )

    return _factory


@pytest.fixture
def make_store_retriever():
    """Factory that returns a callable to build a retriever over an in-memory store."""

    def _factory(
        records: Optional[list[VectorRecord]] = None,
        expected_dimension: Optional[int] = None,
    ) -> VectorStoreRetriever:
        return VectorStoreRetriever(
            InMemoryVectorStore(records or []),
            expected_dimension=expected_dimension,
        )

    return _factory


class StaticRetriever(ParticipantRetriever):
    """Retriever serving fixed cohorts and recording every call."""

    def __init__(
        self,
        left: Optional[list[Participant]] = None,
        right: Optional[list[Participant]] = None,
        excluded: Optional[list[ExcludedParticipant]] = None,
    ):
        self.left = left or []
        self.right = right or []
        self.excluded = excluded or []
        self.calls: list[str] = []

    def fetch_all_participants(self) -> CohortRetrieval:
        self.calls.append("fetch_all_participants")
        return CohortRetrieval(left=self.left, right=self.right, excluded=self.excluded)

    def fetch_participants_by_ids(self, ids: list[str]) -> list[Participant]:
        self.calls.append("fetch_participants_by_ids")
        by_id = {p.id: p for p in self.left + self.right}
        return [by_id[i] for i in ids if i in by_id]


@pytest.fixture
def make_static_retriever():
    """Factory that returns a callable to build a StaticRetriever."""

    def _factory(
        left: Optional[list[Participant]] = None,
        right: Optional[list[Participant]] = None,
        excluded: Optional[list[ExcludedParticipant]] = None,
    ) -> StaticRetriever:
        return StaticRetriever(left=left, right=right, excluded=excluded)

    return _factory


@pytest.fixture
def two_by_two(make_participant):
    """Seekers A, B and providers X, Y where A-X and B-Y are identical profiles."""
    left = [
        make_participant(id="A", embedding=[1.0, 0.0]),
        make_participant(id="B", embedding=[0.0, 1.0]),
    ]
    right = [
        make_participant(id="X", category=Cohort.PROVIDER, embedding=[1.0, 0.0]),
        make_participant(id="Y", category=Cohort.PROVIDER, embedding=[0.0, 1.0]),
    ]
    return left, right
