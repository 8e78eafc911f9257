"""Tests for grouper.utils.selection: creative selection strategies."""

import pytest

from grouper.utils.selection import RoundRobin, SeededRandom, make_strategy


class TestRoundRobin:
    def test_cycles_in_order(self):
        strategy = RoundRobin(["a", "b", "c"])
        assert [strategy.pick() for _ in range(5)] == ["a", "b", "c", "a", "b"]

    def test_rejects_empty(self):
        with pytest.raises(ValueError):
            RoundRobin([])


class TestSeededRandom:
    def test_same_seed_same_sequence(self):
        first = SeededRandom(["a", "b", "c"], seed=7)
        second = SeededRandom(["a", "b", "c"], seed=7)
        assert [first.pick() for _ in range(10)] == [second.pick() for _ in range(10)]

    def test_picks_from_items(self):
        strategy = SeededRandom(["a", "b"], seed=1)
        assert {strategy.pick() for _ in range(20)} <= {"a", "b"}


class TestMakeStrategy:
    def test_by_name(self):
        assert isinstance(make_strategy("round_robin", ["a"]), RoundRobin)
        assert isinstance(make_strategy("random", ["a"], seed=3), SeededRandom)

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            make_strategy("weighted", ["a"])
