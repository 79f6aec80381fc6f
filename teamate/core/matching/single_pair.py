"""
Score one specific pair outside a matching run.

Uses the same scoring primitives as a batch run but never invokes the
assignment solver.
"""

from typing import TYPE_CHECKING

from teamate.data.models import PairScoreResult, Participant
from teamate.utils.logger import audit_log, get_logger

from .config import ConfigInput, resolve_config
from .exceptions import DimensionMismatchError, EmptyVectorError, ParticipantNotFoundError
from .similarity import confidence_level, embedding_similarity, final_score, structured_similarity

if TYPE_CHECKING:
    from teamate.data.retrieval import ParticipantRetriever

logger = get_logger(__name__)


class SinglePairScorer:
    """Computes the compatibility of two participants by id."""

    def __init__(self, retriever: "ParticipantRetriever", config: ConfigInput = None):
        self.retriever = retriever
        self.config = resolve_config(config)

    def _fetch_pair(self, id_a: str, id_b: str) -> tuple[Participant, Participant]:
        participants = {p.id: p for p in self.retriever.fetch_participants_by_ids([id_a, id_b])}

        missing = [pid for pid in (id_a, id_b) if pid not in participants]
        if missing:
            raise ParticipantNotFoundError(missing)

        return participants[id_a], participants[id_b]

    def compute_match_score(
        self,
        id_a: str,
        id_b: str,
        config: ConfigInput = None,
    ) -> PairScoreResult:
        """
        Compute the match score between two participants.

        If the embeddings cannot be compared, the FRQ score falls back to 0
        and only the structured answers contribute.

        Args:
            id_a: First participant id.
            id_b: Second participant id.
            config: Overrides for this call only.

        Returns:
            PairScoreResult with component scores, percentage and confidence.

        Raises:
            InvalidConfigError: If the config is invalid.
            ParticipantNotFoundError: If either id is unknown.
        """
        run_config = resolve_config(config, base=self.config)
        logger.info(f"Computing match score between {id_a} and {id_b}")

        participant_a, participant_b = self._fetch_pair(id_a, id_b)

        try:
            frq = embedding_similarity(participant_a.embedding, participant_b.embedding)
        except (DimensionMismatchError, EmptyVectorError) as e:
            logger.warning(f"Could not compare embeddings of {id_a} and {id_b}, using FRQ score 0: {e}")
            frq = 0.0

        quant = structured_similarity(participant_a, participant_b, run_config)
        final = final_score(frq, quant, run_config)

        result = PairScoreResult(
            left_id=participant_a.id,
            right_id=participant_b.id,
            frq_score=frq,
            quant_score=quant,
            final_score=final,
            final_percentage=round(final * 100),
            confidence=confidence_level(final, run_config),
        )

        logger.info(
            f"{participant_a.name} <-> {participant_b.name}: "
            f"FRQ={frq:.4f}, Quant={quant:.4f}, Final={final:.4f} ({result.final_percentage}%)"
        )
        audit_log(
            "pair_scored",
            {"left_id": id_a, "right_id": id_b, "final_score": round(final, 4)},
            audit_type="SCORING",
        )

        return result


def compute_match_score(
    retriever: "ParticipantRetriever",
    id_a: str,
    id_b: str,
    config: ConfigInput = None,
) -> PairScoreResult:
    """Score a single pair with a one-off scorer."""
    return SinglePairScorer(retriever, config=config).compute_match_score(id_a, id_b)
