"""Shared fixtures for the Grouper test suite."""

import asyncio
from unittest.mock import patch

import pytest

from grouper.state import GrouperConfig, Message, Persona, Proposal, Reaction, RefinementState
from grouper.utils.consensus import ConsensusPanel


class FakeGenerator:
    """Generation collaborator returning scripted batches, one per call."""

    def __init__(self, batches, learnings=("keep it short",)):
        self.batches = list(batches)
        self.learnings = tuple(learnings)
        self.calls = []

    async def generate(self, prior_best, feedback, learnings, count):
        self.calls.append({"prior_best": prior_best, "feedback": feedback, "learnings": learnings, "count": count})
        batch = self.batches[min(len(self.calls) - 1, len(self.batches) - 1)]
        return Proposal(candidates=tuple(batch), learnings=self.learnings)


class FakeEvaluator:
    """Evaluation collaborator: ``ratings_by_rater[name]`` maps wording -> rating."""

    def __init__(self, ratings_by_rater, default="NEUTRAL", failing=(), delay=0.0):
        self.ratings_by_rater = ratings_by_rater
        self.default = default
        self.failing = set(failing)
        self.delay = delay
        self.completed = []

    async def evaluate(self, candidates, rater, message):
        if rater.name in self.failing:
            raise RuntimeError(f"{rater.name} is unavailable")
        if self.delay:
            await asyncio.sleep(self.delay)
        table = self.ratings_by_rater.get(rater.name, {})
        self.completed.append(rater.name)
        return Reaction(
            feedback=f"{len(candidates)} wordings seen",
            ratings=tuple(table.get(c, self.default) for c in candidates),
        )


@pytest.fixture
def message():
    return Message(
        id="smoking",
        content="smoking is bad",
        objective="deter smoking",
        deliverable="billboard slogan",
    )


@pytest.fixture
def participants():
    return [
        Persona("participant1", "Alex", "urban professional", "claude-sonnet-4-5"),
        Persona("participant2", "Jordan", "parent", "gemini-2.0-flash", provider="google"),
        Persona("participant3", "Taylor", "college student", "claude-sonnet-4-5"),
    ]


@pytest.fixture
def creatives():
    return (
        Persona("creative1", "Morgan", "ad professional", "gemini-2.0-flash", provider="google"),
        Persona("creative2", "Casey", "copywriter", "claude-sonnet-4-5"),
    )


@pytest.fixture
def grouper_config(message, participants, creatives):
    return GrouperConfig(
        message=message,
        panel=ConsensusPanel(participants),
        creatives=creatives,
        min_score=0.7,
        required_count=2,
        display_count=3,
        num_proposals=3,
        max_iterations=4,
    )


@pytest.fixture
def base_state(grouper_config):
    """Fresh RefinementState with an empty store."""
    return RefinementState.start(grouper_config)


@pytest.fixture
def mock_config():
    """Patch the config singleton with test-friendly values."""
    test_config = {
        "llm_max_retries": 3,
        "llm_retry_wait_min": 0,
        "llm_retry_wait_max": 0,
        "guidance_enabled": False,
        "output_path": "./output/wordings.md",
    }
    with patch("grouper.config._config", test_config):
        yield test_config
