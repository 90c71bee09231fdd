"""Simulated sub-model scores and placeholder evaluation metrics.

Nothing in this module performs real inference or measurement:

* Sub-model scores are SIMULATED stand-ins for the FaceNet, VGG-Face and
  ArcFace models, which this service does not run. Each score is
  ``clamp(cosine * weight + jitter, 0, 1)`` where jitter is drawn uniformly
  from ``[0, max_jitter)``.
* tpr, fpr and accuracy are fixed illustrative constants gated only on how many
  population matches cleared the similarity threshold. They are not computed
  from ground truth.

Both outputs are labelled ``simulated`` in every response.
"""
from typing import NamedTuple, Optional, Tuple

import numpy as np

from faceauth.domain.interfaces.scoring.score_simulator import ScoreSimulator
from faceauth.domain.value_objects.recognition import SubModelScores


class SimulatedModel(NamedTuple):
    weight: float
    max_jitter: float


FACE_NET = SimulatedModel(weight=0.90, max_jitter=0.10)
VGG_FACE = SimulatedModel(weight=0.85, max_jitter=0.15)
ARC_FACE = SimulatedModel(weight=0.95, max_jitter=0.05)

PLACEHOLDER_TPR = 0.953
PLACEHOLDER_FPR = 0.042
PLACEHOLDER_ACCURACY = 0.921
PLACEHOLDER_BASELINE_ACCURACY = 0.5


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


class RandomScoreSimulator(ScoreSimulator):
    """Score simulator backed by a seedable numpy random generator.

    Example:
        ```python
        simulator = RandomScoreSimulator(seed=42)
        scores = simulator.sub_model_scores(0.87)
        ```
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        """Initialize the simulator.

        Args:
            seed: Seed for a new generator; ignored when ``rng`` is given
            rng: Generator to draw jitter from
        """
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def _score(self, model: SimulatedModel, cosine_similarity: float) -> float:
        jitter = float(self.rng.uniform(0.0, model.max_jitter))
        return _clamp(cosine_similarity * model.weight + jitter)

    def sub_model_scores(self, cosine_similarity: float) -> SubModelScores:
        return SubModelScores(
            face_net=self._score(FACE_NET, cosine_similarity),
            vgg_face=self._score(VGG_FACE, cosine_similarity),
            arc_face=self._score(ARC_FACE, cosine_similarity),
        )

    def evaluation_metrics(self, matched_above_threshold: int) -> Tuple[float, float, float]:
        tpr = PLACEHOLDER_TPR if matched_above_threshold > 0 else 0.0
        fpr = PLACEHOLDER_FPR if matched_above_threshold > 1 else 0.0
        accuracy = (
            PLACEHOLDER_ACCURACY if matched_above_threshold > 0 else PLACEHOLDER_BASELINE_ACCURACY
        )
        return tpr, fpr, accuracy
