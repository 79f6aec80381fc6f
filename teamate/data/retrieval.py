"""
Participant retrieval from a vector store.

The retriever is the only component of a matching run that performs I/O. It
turns raw store records into typed Participants, normalizes raw category tags
onto the two cohorts, and reports records it could not use as excluded
participants instead of failing the run.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from teamate.core.matching.similarity import is_valid_embedding
from teamate.data.models import CohortRetrieval, ExcludedParticipant, Participant
from teamate.utils.constants import COHORT_ALIASES, RETRIEVAL_BATCH_SIZE, Cohort
from teamate.utils.logger import get_logger

from .vector_store import VectorRecord, VectorStore

logger = get_logger(__name__)


class RecordParseError(ValueError):
    """A store record cannot be turned into a Participant."""


class ParticipantRecord(BaseModel):
    """Schema of the metadata stored alongside each participant embedding."""

    model_config = ConfigDict(extra="allow", allow_inf_nan=False)

    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, validation_alias=AliasChoices("type", "category"))
    q1: Optional[float] = None
    q2: Optional[float] = None
    q3: Optional[float] = None
    ideal_match: Optional[str] = None


def _describe_validation_error(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        location = ".".join(str(loc) for loc in detail["loc"]) or "record"
        parts.append(f"{location}: {detail['msg']}")
    return "; ".join(parts)


def normalize_category(raw: str) -> Cohort:
    """
    Map a raw category tag onto a cohort.

    Raises:
        RecordParseError: If the tag belongs to neither cohort.
    """
    try:
        return COHORT_ALIASES[raw.strip().lower()]
    except KeyError:
        raise RecordParseError(f"Unrecognized category '{raw}'") from None


def parse_participant(
    record: VectorRecord,
    expected_dimension: Optional[int] = None,
) -> Participant:
    """
    Deserialize a store record into a Participant.

    Args:
        record: Raw record from the vector store.
        expected_dimension: Required embedding length, if any.

    Raises:
        RecordParseError: If metadata, category or embedding are unusable.
    """
    try:
        fields = ParticipantRecord.model_validate(record.metadata or {})
    except ValidationError as e:
        raise RecordParseError(_describe_validation_error(e)) from e

    category = normalize_category(fields.category)

    if not is_valid_embedding(record.embedding, expected_dimension):
        if expected_dimension is not None and record.embedding is not None:
            raise RecordParseError(
                f"Invalid or zero embedding vector (expected {expected_dimension} dimensions)"
            )
        raise RecordParseError("Invalid or zero embedding vector")

    return Participant(
        id=record.id,
        name=fields.name,
        category=category,
        embedding=[float(v) for v in record.embedding],
        q1=fields.q1,
        q2=fields.q2,
        q3=fields.q3,
        ideal_match=fields.ideal_match,
        metadata=dict(record.metadata),
    )


def participant_to_record(participant: Participant) -> VectorRecord:
    """Serialize a Participant into a store record."""
    metadata: dict[str, Any] = dict(participant.metadata)
    metadata.update(
        name=participant.name,
        type=participant.category.value,
        q1=participant.q1,
        q2=participant.q2,
        q3=participant.q3,
        ideal_match=participant.ideal_match,
    )
    return VectorRecord(
        id=participant.id,
        embedding=list(participant.embedding),
        metadata=metadata,
    )


class ParticipantRetriever(ABC):
    """Collaborator supplying participants to matching runs."""

    def connect(self) -> None:
        """Open any underlying connection."""

    def close(self) -> None:
        """Release any underlying connection."""

    def __enter__(self) -> "ParticipantRetriever":
        self.connect()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @abstractmethod
    def fetch_all_participants(self) -> CohortRetrieval:
        """Fetch both cohorts, plus the records excluded from matching."""
        pass

    @abstractmethod
    def fetch_participants_by_ids(self, ids: list[str]) -> list[Participant]:
        """Fetch specific participants; unknown ids are absent from the result."""
        pass


class VectorStoreRetriever(ParticipantRetriever):
    """
    Retrieves participants from a VectorStore.

    The store's lifecycle follows the retriever's: connect() and close() are
    forwarded, and the retriever can be used as a context manager.
    """

    def __init__(
        self,
        store: VectorStore,
        expected_dimension: Optional[int] = None,
        batch_size: int = RETRIEVAL_BATCH_SIZE,
    ):
        """
        Initialize the retriever.

        Args:
            store: Vector store holding participant embeddings.
            expected_dimension: Exclude embeddings of any other length.
            batch_size: Page size for store reads.
        """
        self.store = store
        self.expected_dimension = expected_dimension
        self.batch_size = batch_size

    def connect(self) -> None:
        self.store.connect()

    def close(self) -> None:
        self.store.close()

    def fetch_all_participants(self) -> CohortRetrieval:
        """
        Fetch all participants and split them into seekers (left) and providers (right).

        Returns:
            CohortRetrieval with both cohorts and the excluded records.
        """
        logger.info("Fetching all participants from vector store...")

        left: list[Participant] = []
        right: list[Participant] = []
        excluded: list[ExcludedParticipant] = []

        for record in self.store.iter_records(batch_size=self.batch_size):
            try:
                participant = parse_participant(record, self.expected_dimension)
            except RecordParseError as e:
                logger.warning(f"Excluding participant {record.id}: {e}")
                excluded.append(ExcludedParticipant(id=record.id, reason=str(e)))
                continue

            if participant.category == Cohort.SEEKER:
                left.append(participant)
            else:
                right.append(participant)

        logger.info(f"Separated participants: {len(left)} seekers, {len(right)} providers")
        if excluded:
            logger.warning(f"Excluded {len(excluded)} participants due to validation errors")

        self._report_data_quality(left, right)
        return CohortRetrieval(left=left, right=right, excluded=excluded)

    def fetch_participants_by_ids(self, ids: list[str]) -> list[Participant]:
        """
        Fetch specific participants in batches.

        Records that fail to parse are logged and skipped.
        """
        logger.info(f"Fetching {len(ids)} specific participants...")

        participants: list[Participant] = []
        for start in range(0, len(ids), self.batch_size):
            batch_ids = ids[start:start + self.batch_size]
            for record in self.store.get(batch_ids):
                try:
                    participants.append(parse_participant(record, self.expected_dimension))
                except RecordParseError as e:
                    logger.error(f"Error parsing participant {record.id}: {e}")

        logger.info(f"Successfully fetched {len(participants)} participants")
        return participants

    def ingest(self, participants: list[Participant]) -> int:
        """
        Store pre-embedded participants, replacing existing records with the same id.

        Returns:
            Number of participants written.
        """
        self.store.upsert([participant_to_record(p) for p in participants])
        logger.info(f"Ingested {len(participants)} participants")
        return len(participants)

    def delete(self, ids: list[str]) -> None:
        """Remove participants from the store."""
        self.store.delete(ids)
        logger.info(f"Deleted {len(ids)} participants")

    @staticmethod
    def _report_data_quality(left: list[Participant], right: list[Participant]) -> None:
        if not left:
            logger.warning("No seekers found in dataset")
        if not right:
            logger.warning("No providers found in dataset")
        if left and right and len(left) != len(right):
            logger.warning(
                f"Unequal participant counts: {len(left)} seekers vs {len(right)} providers"
            )

        missing_scores = [p.id for p in left + right if not p.structured_scores.is_complete]
        if missing_scores:
            logger.warning(
                f"{len(missing_scores)} participants have missing Q scores (will use defaults)"
            )
