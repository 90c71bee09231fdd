"""Tests for similarity fusion and simulated sub-model scores."""
import math

import pytest

from faceauth.core.exceptions import DimensionMismatchError
from faceauth.services.score_simulation import RandomScoreSimulator
from faceauth.services.similarity_fusion import SimilarityFusionService


@pytest.fixture
def fusion(simulator):
    return SimilarityFusionService(simulator)


class TestFuse:

    def test_identical_descriptors(self, fusion, make_descriptor):
        """Should report overall similarity of exactly one at zero distance."""
        a = make_descriptor()
        report = fusion.fuse(a, a)
        assert report.euclidean_distance == 0.0
        assert report.manhattan_distance == 0.0
        assert report.overall_similarity == 1.0

    def test_overall_similarity_is_exp_negative_euclidean(self, fusion):
        report = fusion.fuse([0, 0], [3, 4])
        assert report.euclidean_distance == 5.0
        assert report.manhattan_distance == 7.0
        assert report.overall_similarity == math.exp(-5.0)

    def test_overall_similarity_decreases_with_distance(self, fusion):
        origin = [0.0, 0.0, 0.0]
        similarities = [
            fusion.fuse(origin, [step, 0.0, 0.0]).overall_similarity
            for step in (0.0, 0.1, 0.5, 1.0, 2.0)
        ]
        assert similarities == sorted(similarities, reverse=True)
        assert len(set(similarities)) == len(similarities)
        assert all(0.0 < s <= 1.0 for s in similarities)

    def test_sub_model_scores_are_bounded_and_labelled(self, fusion, make_descriptor):
        for _ in range(20):
            scores = fusion.fuse(make_descriptor(), make_descriptor()).sub_model_scores
            assert scores.simulated is True
            for value in (scores.face_net, scores.vgg_face, scores.arc_face):
                assert 0.0 <= value <= 1.0

    def test_dimension_mismatch(self, fusion, make_descriptor):
        with pytest.raises(DimensionMismatchError):
            fusion.fuse(make_descriptor(128), make_descriptor(64))


class TestSimulatedScores:

    def test_same_seed_gives_same_scores(self, make_descriptor):
        a, b = make_descriptor(), make_descriptor()
        first = SimilarityFusionService(RandomScoreSimulator(seed=7)).fuse(a, b)
        second = SimilarityFusionService(RandomScoreSimulator(seed=7)).fuse(a, b)
        assert first == second

    def test_repeat_calls_only_vary_simulated_scores(self, fusion, make_descriptor):
        a = make_descriptor()
        b = [value + 0.01 for value in a]
        first, second = fusion.fuse(a, b), fusion.fuse(a, b)
        assert first.euclidean_distance == second.euclidean_distance
        assert first.manhattan_distance == second.manhattan_distance
        assert first.cosine_similarity == second.cosine_similarity
        assert first.overall_similarity == second.overall_similarity
        assert first.sub_model_scores != second.sub_model_scores

    def test_score_stays_within_jitter_band(self):
        simulator = RandomScoreSimulator(seed=3)
        for _ in range(50):
            scores = simulator.sub_model_scores(0.5)
            assert 0.45 <= scores.face_net <= 0.55
            assert 0.425 <= scores.vgg_face <= 0.575
            assert 0.475 <= scores.arc_face <= 0.525

    def test_scores_are_clamped(self):
        simulator = RandomScoreSimulator(seed=3)
        high = simulator.sub_model_scores(1.5)
        low = simulator.sub_model_scores(-1.0)
        assert high.face_net == high.vgg_face == high.arc_face == 1.0
        assert low.face_net == low.vgg_face == low.arc_face == 0.0

    @pytest.mark.parametrize(
        "above, expected",
        [
            (0, (0.0, 0.0, 0.5)),
            (1, (0.953, 0.0, 0.921)),
            (2, (0.953, 0.042, 0.921)),
            (10, (0.953, 0.042, 0.921)),
        ],
    )
    def test_placeholder_evaluation_metrics(self, above, expected):
        assert RandomScoreSimulator(seed=0).evaluation_metrics(above) == expected
