"""Score simulator interface.

The service has no access to third-party face recognition models or labelled
ground truth. Figures that would come from either are produced by a
ScoreSimulator so a real integration can replace it without touching callers.
"""
from abc import ABC, abstractmethod
from typing import Tuple

from faceauth.domain.value_objects.recognition import SubModelScores


class ScoreSimulator(ABC):
    """Source of simulated sub-model scores and evaluation figures."""

    @abstractmethod
    def sub_model_scores(self, cosine_similarity: float) -> SubModelScores:
        """
        Produce per-model scores for a pair of descriptors.

        Args:
            cosine_similarity: Cosine similarity of the compared descriptors

        Returns:
            SubModelScores with every score in [0, 1]
        """
        pass

    @abstractmethod
    def evaluation_metrics(self, matched_above_threshold: int) -> Tuple[float, float, float]:
        """
        Produce headline figures for a population match.

        Args:
            matched_above_threshold: Number of matches at or above threshold

        Returns:
            (tpr, fpr, accuracy)
        """
        pass
