"""Tests for grouper.utils.ranking: the bounded ranked store."""

import itertools
import random

import pytest

from grouper.utils.ranking import BoundedRankedStore, RatedCandidate, insert


def _rc(score, name=None):
    return RatedCandidate(name or f"w{score}", score)


class TestInsert:
    def test_scenario_one_item_per_batch(self):
        store = BoundedRankedStore(capacity=3)
        for score in [0.9, 0.2, 0.95, 0.5, 0.4]:
            store = store.add([_rc(score)])
        assert [e.score for e in store] == [0.95, 0.9, 0.5]

    def test_module_level_insert_uses_given_capacity(self):
        store = insert(BoundedRankedStore(capacity=5), [_rc(0.1), _rc(0.8), _rc(0.3)], 2)
        assert store.capacity == 2
        assert [e.score for e in store] == [0.8, 0.3]

    def test_returns_new_store(self):
        store = BoundedRankedStore(capacity=3)
        incoming = [_rc(0.5)]
        updated = store.add(incoming)
        incoming.append(_rc(0.9))
        assert len(store) == 0
        assert len(updated) == 1

    def test_ties_keep_existing_before_incoming(self):
        store = BoundedRankedStore(capacity=4).add([_rc(0.5, "old-a"), _rc(0.5, "old-b")])
        store = store.add([_rc(0.5, "new-a"), _rc(0.5, "new-b")])
        assert [e.candidate for e in store] == ["old-a", "old-b", "new-a", "new-b"]

    def test_tie_at_the_cut_drops_the_newcomer(self):
        store = BoundedRankedStore(capacity=1).add([_rc(0.5, "old")])
        store = store.add([_rc(0.5, "new")])
        assert [e.candidate for e in store] == ["old"]

    def test_random_sequences_keep_invariants(self):
        rng = random.Random(42)
        capacity = 7
        store = BoundedRankedStore(capacity=capacity)
        seen = []
        names = itertools.count()
        for _ in range(50):
            batch = [
                _rc(round(rng.random(), 3), f"w{next(names)}")
                for _ in range(rng.randint(0, 5))
            ]
            seen.extend(e.score for e in batch)
            store = store.add(batch)
            scores = [e.score for e in store]
            assert len(store) <= capacity
            assert scores == sorted(scores, reverse=True)
            assert scores == sorted(seen, reverse=True)[:capacity]

    def test_reinserting_the_same_set_keeps_scores(self):
        store = BoundedRankedStore(capacity=3).add([_rc(0.9), _rc(0.6), _rc(0.4), _rc(0.1)])
        again = store.add(list(store))
        assert [e.score for e in again] == [e.score for e in store]

    def test_reinserting_own_entries_leaves_store_unchanged(self):
        store = BoundedRankedStore(capacity=3).add([_rc(0.9, "a"), _rc(0.6, "b"), _rc(0.4, "c")])
        again = insert(store, list(store.entries), 3)
        assert again.entries == store.entries

    def test_equal_entries_in_one_batch_are_kept_once(self):
        store = BoundedRankedStore(capacity=3).add([_rc(0.7, "a"), _rc(0.7, "a"), _rc(0.5, "b")])
        assert [(e.candidate, e.score) for e in store] == [("a", 0.7), ("b", 0.5)]

    def test_same_wording_with_new_score_is_a_distinct_entry(self):
        store = BoundedRankedStore(capacity=3).add([_rc(0.4, "a")])
        store = store.add([_rc(0.8, "a")])
        assert [e.score for e in store] == [0.8, 0.4]

    def test_zero_capacity_keeps_nothing(self):
        assert len(BoundedRankedStore(capacity=0).add([_rc(1.0)])) == 0


class TestBest:
    @pytest.fixture
    def store(self):
        return BoundedRankedStore(capacity=3).add([_rc(0.95), _rc(0.9), _rc(0.5)])

    def test_prefix_at_min_score(self, store):
        assert [e.score for e in store.best(0.7)] == [0.95, 0.9]

    def test_min_score_is_inclusive(self, store):
        assert len(store.best(0.9)) == 2

    def test_default_returns_everything(self, store):
        assert len(store.best()) == 3

    def test_n_caps_the_result(self, store):
        assert [e.score for e in store.best(0.0, n=1)] == [0.95]

    def test_n_and_min_score_combine(self, store):
        assert [e.score for e in store.best(0.7, n=5)] == [0.95, 0.9]

    def test_show_formats_two_decimals(self, store):
        assert store.show(2) == "w0.95: 0.95\nw0.9: 0.90"


class TestValidation:
    def test_score_above_one_rejected(self):
        with pytest.raises(ValueError):
            RatedCandidate("x", 1.01)

    def test_score_below_zero_rejected(self):
        with pytest.raises(ValueError):
            RatedCandidate("x", -0.01)

    def test_bounds_are_inclusive(self):
        assert RatedCandidate("x", 0.0).score == 0.0
        assert RatedCandidate("x", 1.0).score == 1.0

    def test_store_over_capacity_rejected(self):
        with pytest.raises(ValueError):
            BoundedRankedStore(capacity=1, entries=(_rc(0.1), _rc(0.2)))
