"""Grouper State — the immutable value threaded through the planner."""

from dataclasses import dataclass

from grouper.utils.consensus import ConsensusPanel
from grouper.utils.ranking import BoundedRankedStore


@dataclass(frozen=True)
class Message:
    """A logical message whose wording is being refined.

    content: what is said, e.g. "smoking is bad".
    objective: what the wording should achieve, e.g. "deter smoking".
    deliverable: the form it takes, e.g. "billboard slogan".
    """

    id: str
    content: str
    objective: str
    deliverable: str

    def __str__(self) -> str:
        return (
            f"Message is {self.content}\n"
            f"Objective is {self.objective}\n"
            f"The deliverable result is {self.deliverable}"
        )


@dataclass(frozen=True)
class Persona:
    """A creative or a focus-group participant, backed by one chat model."""

    id: str
    name: str
    identity: str
    model: str
    provider: str = "anthropic"
    temperature: float = 0.7
    weight: float = 1.0


@dataclass(frozen=True)
class GrouperConfig:
    message: Message
    panel: ConsensusPanel
    creatives: tuple[Persona, ...] = ()
    min_score: float = 0.7
    required_count: int = 10
    display_count: int = 20
    num_proposals: int = 10
    max_iterations: int = 20

    @property
    def capacity(self) -> int:
        return max(self.required_count, self.display_count)


@dataclass(frozen=True)
class Proposal:
    """Output of one generation call."""

    candidates: tuple[str, ...]
    learnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class Reaction:
    """Output of one panel member's evaluation call: one rating per candidate."""

    feedback: str
    ratings: tuple[str, ...]


@dataclass(frozen=True)
class RefinementState:
    config: GrouperConfig
    store: BoundedRankedStore
    iteration: int = 0
    pending: tuple[str, ...] = ()
    has_pending: bool = False  # True only between a generation and its evaluation.
    feedback: tuple[str, ...] = ()
    learnings: tuple[str, ...] = ()

    @classmethod
    def start(cls, config: GrouperConfig) -> "RefinementState":
        return cls(config=config, store=BoundedRankedStore(capacity=config.capacity))

    @property
    def result(self) -> str:
        return self.store.show(self.config.required_count)
