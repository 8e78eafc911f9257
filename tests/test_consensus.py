"""Tests for grouper.utils.consensus: weight normalization and weighted scoring."""

import math

import pytest

from grouper.errors import MalformedInput
from grouper.state import Persona, Reaction
from grouper.utils.consensus import ConsensusPanel, score
from grouper.utils.scale import LIKERT, RatingScale


def _rater(name, weight):
    return Persona(name.lower(), name, "someone", "test-model", weight=weight)


class TestNormalization:
    @pytest.mark.parametrize("weights", [[1, 1], [1, 2, 3], [0.001, 1000.0], [5], [0, 3]])
    def test_weights_sum_to_one(self, weights):
        panel = ConsensusPanel([_rater(f"R{i}", w) for i, w in enumerate(weights)])
        assert math.isclose(sum(panel.weights), 1.0, abs_tol=1e-12)

    def test_equal_weights_normalize_to_half(self):
        panel = ConsensusPanel([_rater("A", 1), _rater("B", 1)])
        assert panel.weights == (0.5, 0.5)

    def test_rejects_empty_panel(self):
        with pytest.raises(ValueError):
            ConsensusPanel([])

    def test_rejects_negative_weight(self):
        with pytest.raises(ValueError):
            ConsensusPanel([_rater("A", -1), _rater("B", 2)])

    def test_rejects_all_zero_weights(self):
        with pytest.raises(ValueError):
            ConsensusPanel([_rater("A", 0), _rater("B", 0)])


class TestScore:
    def test_two_raters_strongly_agree_and_neutral(self):
        panel = ConsensusPanel([_rater("A", 1), _rater("B", 1)])
        assert panel.score([["STRONGLY_AGREE", "NEUTRAL"]]) == [0.75]

    def test_module_level_score(self):
        panel = ConsensusPanel([_rater("A", 1), _rater("B", 1)])
        assert score([["AGREE", "AGREE"], ["DISAGREE", "NEUTRAL"]], panel) == [0.75, 0.375]

    @pytest.mark.parametrize("rating", LIKERT.names)
    @pytest.mark.parametrize("weights", [[1, 1, 1], [1, 2, 3], [10, 0.5]])
    def test_unanimous_rating_scores_its_scale_value(self, rating, weights):
        panel = ConsensusPanel([_rater(f"R{i}", w) for i, w in enumerate(weights)])
        result = panel.score([[rating] * len(weights)])
        assert result[0] == pytest.approx(LIKERT.value(rating), abs=1e-12)

    def test_weights_shift_the_score(self):
        panel = ConsensusPanel([_rater("A", 3), _rater("B", 1)])
        assert panel.score([["STRONGLY_AGREE", "STRONGLY_DISAGREE"]]) == [0.75]

    def test_scores_stay_in_unit_interval(self):
        panel = ConsensusPanel([_rater("A", 1), _rater("B", 2), _rater("C", 7)])
        for row in (["STRONGLY_AGREE"] * 3, ["STRONGLY_DISAGREE"] * 3, ["AGREE", "NEUTRAL", "DISAGREE"]):
            assert 0.0 <= panel.score([row])[0] <= 1.0

    def test_too_few_ratings_is_malformed(self):
        panel = ConsensusPanel([_rater("A", 1), _rater("B", 1)])
        with pytest.raises(MalformedInput):
            panel.score([["AGREE"]])

    def test_too_many_ratings_is_malformed(self):
        panel = ConsensusPanel([_rater("A", 1)])
        with pytest.raises(MalformedInput):
            panel.score([["AGREE", "AGREE"]])

    def test_unknown_rating_is_malformed(self):
        panel = ConsensusPanel([_rater("A", 1)])
        with pytest.raises(MalformedInput):
            panel.score([["SORT_OF"]])

    def test_custom_scale(self):
        scale = RatingScale([("NO", 0.0), ("MAYBE", 0.4), ("YES", 1.0)])
        panel = ConsensusPanel([_rater("A", 1), _rater("B", 1)], scale=scale)
        assert panel.score([["YES", "MAYBE"]]) == [pytest.approx(0.7)]


class TestPresentFeedback:
    def test_attributes_feedback_in_panel_order(self):
        panel = ConsensusPanel([_rater("Alex", 1), _rater("Jordan", 1)])
        reactions = [Reaction("too long", ("AGREE",)), Reaction("love it", ("AGREE",))]
        assert panel.present_feedback(reactions) == ["Alex: too long", "Jordan: love it"]
