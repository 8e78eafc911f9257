"""Creative selection strategies, injected into the generation collaborator."""

import random
from typing import Sequence


class RoundRobin:
    """Cycle through the items in declaration order."""

    def __init__(self, items: Sequence):
        if not items:
            raise ValueError("Nothing to select from.")
        self._items = tuple(items)
        self._next = 0

    def pick(self):
        item = self._items[self._next]
        self._next = (self._next + 1) % len(self._items)
        return item


class SeededRandom:
    """Uniform random choice from a private, seeded generator."""

    def __init__(self, items: Sequence, seed: int | None = None):
        if not items:
            raise ValueError("Nothing to select from.")
        self._items = tuple(items)
        self._rng = random.Random(seed)

    def pick(self):
        return self._rng.choice(self._items)


STRATEGIES = {
    "round_robin": lambda items, seed: RoundRobin(items),
    "random": lambda items, seed: SeededRandom(items, seed),
}


def make_strategy(name: str, items: Sequence, seed: int | None = None):
    """Build a selection strategy by its config name."""
    try:
        factory = STRATEGIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown selection strategy '{name}'. Must be one of: {set(STRATEGIES)}"
        ) from None
    return factory(items, seed)
