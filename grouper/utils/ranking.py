"""Bounded ranked store — the best-N rated wordings seen so far."""

from dataclasses import dataclass
from itertools import islice, takewhile
from typing import Iterable


@dataclass(frozen=True)
class RatedCandidate:
    candidate: str
    score: float

    def __post_init__(self):
        if not 0.0 <= self.score <= 1.0:
            raise ValueError(f"Score {self.score} outside [0, 1] for '{self.candidate}'.")

    def __str__(self) -> str:
        return f"{self.candidate}: {self.score:.2f}"


@dataclass(frozen=True)
class BoundedRankedStore:
    """Immutable, score-descending sequence of at most ``capacity`` entries."""

    capacity: int
    entries: tuple[RatedCandidate, ...] = ()

    def __post_init__(self):
        if self.capacity < 0:
            raise ValueError(f"Capacity must be non-negative, got {self.capacity}.")
        if len(self.entries) > self.capacity:
            raise ValueError(
                f"{len(self.entries)} entries exceed capacity {self.capacity}."
            )

    def add(self, incoming: Iterable[RatedCandidate]) -> "BoundedRankedStore":
        """Return a new store with ``incoming`` merged in at this store's capacity."""
        return insert(self, incoming, self.capacity)

    def best(self, min_score: float = 0.0, n: int | None = None) -> list[RatedCandidate]:
        """Leading entries scoring at least ``min_score``, optionally capped at ``n``."""
        prefix = takewhile(lambda entry: entry.score >= min_score, self.entries)
        if n is not None:
            prefix = islice(prefix, max(n, 0))
        return list(prefix)

    def show(self, n: int) -> str:
        return "\n".join(str(entry) for entry in self.best(n=n))

    def candidates(self) -> set[str]:
        return {entry.candidate for entry in self.entries}

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)


def insert(
    existing: BoundedRankedStore,
    incoming: Iterable[RatedCandidate],
    capacity: int,
) -> BoundedRankedStore:
    """Merge, stable-sort descending by score, truncate to ``capacity``.

    Existing entries precede incoming ones among equal scores. An incoming
    entry equal to one already merged (same wording and score) is dropped, so
    re-inserting the store's own entries leaves it unchanged.
    """
    merged = list(dict.fromkeys([*existing.entries, *incoming]))
    merged.sort(key=lambda entry: entry.score, reverse=True)
    return BoundedRankedStore(capacity=capacity, entries=tuple(merged[:capacity]))
