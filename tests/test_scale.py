"""Tests for grouper.utils.scale: RatingScale and the LIKERT instantiation."""

import pytest

from grouper.errors import MalformedInput
from grouper.utils.scale import LIKERT, RatingScale


class TestLikert:
    def test_five_points_quarter_steps(self):
        assert [LIKERT.value(n) for n in LIKERT] == [0.0, 0.25, 0.5, 0.75, 1.0]

    def test_names_in_order(self):
        assert LIKERT.names[0] == "STRONGLY_DISAGREE"
        assert LIKERT.names[-1] == "STRONGLY_AGREE"

    def test_unknown_rating_is_malformed(self):
        with pytest.raises(MalformedInput):
            LIKERT.value("MEH")

    @pytest.mark.parametrize("text", ["strongly agree", " Strongly-Agree ", "STRONGLY_AGREE"])
    def test_parse_normalizes_free_text(self, text):
        assert LIKERT.parse(text) == "STRONGLY_AGREE"

    def test_parse_rejects_non_string(self):
        with pytest.raises(MalformedInput):
            LIKERT.parse(3)


class TestCustomScale:
    def test_accepts_any_finite_ordered_scale(self):
        scale = RatingScale([("NO", 0.0), ("YES", 1.0)])
        assert len(scale) == 2
        assert scale.value("YES") == 1.0
        assert "NO" in scale

    def test_rejects_empty(self):
        with pytest.raises(ValueError):
            RatingScale([])

    def test_rejects_out_of_range(self):
        with pytest.raises(ValueError):
            RatingScale([("LOW", -0.1), ("HIGH", 1.0)])

    def test_rejects_unordered(self):
        with pytest.raises(ValueError):
            RatingScale([("HIGH", 1.0), ("LOW", 0.0)])

    def test_rejects_duplicate_names(self):
        with pytest.raises(ValueError):
            RatingScale([("A", 0.0), ("A", 1.0)])
