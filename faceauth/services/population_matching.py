"""Ranked matching of a probe descriptor against every enrolled identity."""
import asyncio
import time
from typing import Optional

from faceauth.core.config import settings
from faceauth.core.logging import get_logger
from faceauth.domain.interfaces.scoring.score_simulator import ScoreSimulator
from faceauth.domain.interfaces.storage.identity_store import IdentityStore
from faceauth.domain.value_objects.recognition import EvaluationMetrics, MatchEntry, MatchResult
from faceauth.services import vector_math
from faceauth.services.score_simulation import RandomScoreSimulator
from faceauth.services.vector_math import DescriptorLike

logger = get_logger(__name__)


class PopulationMatchingService:
    """Service for ranking a probe against the enrolled population.

    This service:
    1. Reads a snapshot of every enrolled (identity, descriptor) pair
    2. Scores each pair as exp(-euclidean distance)
    3. Drops rows whose identity cannot be resolved to display info
    4. Sorts by similarity, highest first, keeping store order for ties
    5. Counts matches at or above the threshold and attaches metrics

    The tpr/fpr/accuracy in the metrics are placeholders supplied by the
    ScoreSimulator and are flagged as simulated.
    """

    def __init__(
        self,
        identity_store: IdentityStore,
        score_simulator: Optional[ScoreSimulator] = None,
        threshold: Optional[float] = None,
    ) -> None:
        """Initialize the population matching service.

        Args:
            identity_store: Source of the enrolled population
            score_simulator: Source of the placeholder evaluation figures
            threshold: Default similarity threshold (MATCH_SIMILARITY_THRESHOLD when None)
        """
        self.identity_store = identity_store
        self.score_simulator = score_simulator or RandomScoreSimulator()
        self.threshold = settings.MATCH_SIMILARITY_THRESHOLD if threshold is None else threshold

    async def match_against_population(
        self,
        probe: DescriptorLike,
        threshold: Optional[float] = None,
    ) -> MatchResult:
        """Rank every enrolled identity by similarity to the probe.

        Args:
            probe: Descriptor to match
            threshold: Similarity threshold overriding the service default

        Returns:
            MatchResult with the full ranked list and evaluation metrics

        Raises:
            InvalidDescriptorError: If the probe is not a descriptor
            DimensionMismatchError: If any enrolled descriptor differs in length
        """
        started = time.perf_counter()
        limit = self.threshold if threshold is None else threshold

        population = await self.identity_store.list_population()
        distances = vector_math.euclidean_many(
            probe, [candidate.descriptor for candidate in population]
        )

        display_infos = await asyncio.gather(
            *(self.identity_store.resolve_display_info(c.identity_id) for c in population)
        )

        entries = []
        for candidate, distance, display in zip(population, distances, display_infos):
            if display is None:
                logger.warning(
                    "Dropping unresolved identity from match results",
                    identity_id=candidate.identity_id,
                )
                continue
            entries.append(
                MatchEntry(
                    identity_id=candidate.identity_id,
                    handle=display.handle,
                    display_name=display.display_name,
                    similarity=vector_math.distance_to_similarity(float(distance)),
                )
            )

        # sorted() is stable, so equal similarities keep store order
        ranked = sorted(entries, key=lambda entry: entry.similarity, reverse=True)
        above_threshold = sum(1 for entry in ranked if entry.similarity >= limit)
        tpr, fpr, accuracy = self.score_simulator.evaluation_metrics(above_threshold)

        metrics = EvaluationMetrics(
            total_faces=len(population),
            matched_above_threshold=above_threshold,
            processing_time_seconds=time.perf_counter() - started,
            tpr=tpr,
            fpr=fpr,
            accuracy=accuracy,
        )
        logger.info(
            "Matched probe against population",
            total_faces=metrics.total_faces,
            ranked=len(ranked),
            matched_above_threshold=above_threshold,
            threshold=limit,
        )
        return MatchResult(matches=ranked, threshold=limit, metrics=metrics)
