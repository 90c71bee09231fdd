"""Fusion of raw descriptor metrics into a similarity report."""
from typing import Optional

from faceauth.core.logging import get_logger
from faceauth.domain.interfaces.scoring.score_simulator import ScoreSimulator
from faceauth.domain.value_objects.recognition import SimilarityReport
from faceauth.services import vector_math
from faceauth.services.score_simulation import RandomScoreSimulator
from faceauth.services.vector_math import DescriptorLike

logger = get_logger(__name__)


class SimilarityFusionService:
    """Compares two descriptors and fuses the metrics into one report.

    ``overall_similarity`` is ``exp(-euclidean)``: 1.0 for identical
    descriptors and strictly decreasing with distance. The sub-model scores
    come from the injected ScoreSimulator and are simulated, so two calls with
    the same inputs share every metric except those scores.

    Example:
        ```python
        fusion = SimilarityFusionService(RandomScoreSimulator(seed=7))
        report = fusion.fuse(descriptor_a, descriptor_b)
        ```
    """

    def __init__(self, score_simulator: Optional[ScoreSimulator] = None) -> None:
        """Initialize the fusion service.

        Args:
            score_simulator: Source of simulated sub-model scores
        """
        self.score_simulator = score_simulator or RandomScoreSimulator()

    def fuse(self, a: DescriptorLike, b: DescriptorLike) -> SimilarityReport:
        """Compare two descriptors.

        Args:
            a: First descriptor
            b: Second descriptor

        Returns:
            SimilarityReport with distances, cosine, overall similarity and
            simulated sub-model scores

        Raises:
            DimensionMismatchError: If the descriptors differ in length
            InvalidDescriptorError: If either input is not a descriptor
        """
        euclidean = vector_math.euclidean(a, b)
        manhattan = vector_math.manhattan(a, b)
        cosine = vector_math.cosine(a, b)

        report = SimilarityReport(
            euclidean_distance=euclidean,
            manhattan_distance=manhattan,
            cosine_similarity=cosine,
            overall_similarity=vector_math.distance_to_similarity(euclidean),
            sub_model_scores=self.score_simulator.sub_model_scores(cosine),
        )
        logger.debug(
            "Compared descriptors",
            euclidean_distance=euclidean,
            overall_similarity=report.overall_similarity,
        )
        return report
