"""Weighted consensus scoring across a focus-group panel."""

import math
from typing import Sequence

from grouper.errors import MalformedInput
from grouper.utils.scale import LIKERT, RatingScale


class ConsensusPanel:
    """A fixed, ordered set of raters with weights normalized once at construction.

    Raters are any objects with ``name`` and ``weight`` attributes (personas in
    practice). The normalized weights are never recomputed afterwards.
    """

    def __init__(self, raters: Sequence, scale: RatingScale = LIKERT):
        if not raters:
            raise ValueError("A consensus panel needs at least one rater.")

        for rater in raters:
            if rater.weight < 0:
                raise ValueError(f"Rater '{rater.name}' has negative weight {rater.weight}.")

        total = math.fsum(rater.weight for rater in raters)
        if total <= 0:
            raise ValueError("Panel weights must not all be zero.")

        self.raters = tuple(raters)
        self.weights = tuple(rater.weight / total for rater in raters)
        self.scale = scale

    def __len__(self) -> int:
        return len(self.raters)

    def __iter__(self):
        return iter(self.raters)

    def score(self, ratings_per_candidate: Sequence[Sequence[str]]) -> list[float]:
        """Reduce one rating per rater (panel order) to one score per candidate."""
        scores = []
        for i, ratings in enumerate(ratings_per_candidate):
            if len(ratings) != len(self.weights):
                raise MalformedInput(
                    f"Candidate {i} has {len(ratings)} ratings, "
                    f"expected one per panel member ({len(self.weights)})."
                )
            total = math.fsum(
                weight * self.scale.value(rating)
                for weight, rating in zip(self.weights, ratings)
            )
            scores.append(min(1.0, max(0.0, total)))
        return scores

    def present_feedback(self, reactions: Sequence) -> list[str]:
        """Attribute each reaction's feedback to its rater, in panel order."""
        return [
            f"{rater.name}: {reaction.feedback}"
            for rater, reaction in zip(self.raters, reactions)
        ]


def score(ratings_per_candidate: Sequence[Sequence[str]], panel: ConsensusPanel) -> list[float]:
    """Module-level form of :meth:`ConsensusPanel.score`."""
    return panel.score(ratings_per_candidate)
