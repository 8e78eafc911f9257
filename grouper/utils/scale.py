"""Rating scale — ordered symbolic ratings mapped onto scores in [0, 1]."""

from typing import Iterator, Sequence

from grouper.errors import MalformedInput


class RatingScale:
    """A finite, strictly increasing mapping of rating symbols to scores."""

    def __init__(self, levels: Sequence[tuple[str, float]]):
        if not levels:
            raise ValueError("A rating scale needs at least one level.")

        names = [name for name, _ in levels]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate rating names in scale: {names}")

        previous = None
        for name, value in levels:
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"Rating '{name}' has value {value} outside [0, 1].")
            if previous is not None and value <= previous:
                raise ValueError("Rating scale values must be strictly increasing.")
            previous = value

        self._levels = tuple((name, float(value)) for name, value in levels)
        self._values = dict(self._levels)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self._levels)

    def value(self, rating: str) -> float:
        """Return the score of a rating symbol."""
        try:
            return self._values[rating]
        except KeyError:
            raise MalformedInput(
                f"Unknown rating '{rating}'. Must be one of: {self.names}"
            ) from None

    def parse(self, text: str) -> str:
        """Normalize free-form model output (e.g. 'strongly agree') to a rating symbol."""
        if not isinstance(text, str):
            raise MalformedInput(f"Rating must be a string, got {type(text).__name__}.")
        candidate = text.strip().upper().replace("-", "_").replace(" ", "_")
        if candidate not in self._values:
            raise MalformedInput(
                f"Unknown rating '{text}'. Must be one of: {self.names}"
            )
        return candidate

    def __contains__(self, rating: object) -> bool:
        return rating in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __len__(self) -> int:
        return len(self._levels)

    def __repr__(self) -> str:
        return f"RatingScale({list(self._levels)!r})"


LIKERT = RatingScale([
    ("STRONGLY_DISAGREE", 0.0),
    ("DISAGREE", 0.25),
    ("NEUTRAL", 0.5),
    ("AGREE", 0.75),
    ("STRONGLY_AGREE", 1.0),
])
