"""Reference actions and goal for message-wording refinement.

Declaration order is the dispatch priority:
1. generate — runs while no batch is pending
2. evaluate — runs while a batch is pending

The preconditions are mutually exclusive and exhaustive over ``has_pending``,
so the two actions alternate.
"""

import asyncio
import sys
from dataclasses import replace

from grouper.errors import CollaboratorFailure, MalformedInput
from grouper.graph import Action, Goal, Planner
from grouper.state import Proposal, Reaction, RefinementState
from grouper.utils.ranking import RatedCandidate
from grouper.utils.screening import screen_candidates


async def _call(collaborator: str, coro, timeout: float | None):
    """Await one collaborator call, mapping failures and timeouts to CollaboratorFailure.

    MalformedInput passes through unchanged.
    """
    try:
        if timeout is None:
            return await coro
        return await asyncio.wait_for(coro, timeout=timeout)
    except asyncio.TimeoutError as exc:
        raise CollaboratorFailure(collaborator, f"timed out after {timeout}s") from exc
    except (CollaboratorFailure, MalformedInput):
        raise
    except Exception as exc:
        raise CollaboratorFailure(collaborator, repr(exc)) from exc


# --- Generate ---


def needs_generation(state: RefinementState) -> bool:
    return not state.has_pending


def begin_generation(state: RefinementState) -> RefinementState:
    """Belief: drop any stale batch and start a new iteration."""
    return replace(state, pending=(), has_pending=False, iteration=state.iteration + 1)


def make_generate_effect(generator, timeout: float | None = None, max_chars: int | None = None):
    async def generate(state: RefinementState) -> RefinementState:
        config = state.config
        print(
            "[Grouper] Current best wordings:\n" + (state.store.show(config.display_count) or "(none)"),
            file=sys.stderr,
        )

        proposal: Proposal = await _call(
            "generator",
            generator.generate(
                state.store, list(state.feedback), list(state.learnings), config.num_proposals
            ),
            timeout,
        )

        batch, issues = screen_candidates(
            proposal.candidates,
            seen=state.store.candidates(),
            limit=config.num_proposals,
            max_chars=max_chars,
        )
        for issue in issues:
            print(f"[Grouper] Warning: {issue}", file=sys.stderr)
        if not batch:
            print("[Grouper] Warning: generation produced no usable wordings.", file=sys.stderr)

        return replace(
            state,
            pending=tuple(batch),
            has_pending=bool(batch),
            learnings=state.learnings + tuple(item for item in proposal.learnings if item.strip()),
        )

    return generate


# --- Evaluate ---


def needs_evaluation(state: RefinementState) -> bool:
    return state.has_pending


def begin_evaluation(state: RefinementState) -> RefinementState:
    """Belief: evaluation commits nothing before the panel has answered."""
    return state


async def gather_reactions(evaluator, state: RefinementState, timeout: float | None = None) -> list[Reaction]:
    """Fan out one evaluation call per panel member and fan in.

    A failing rater does not cancel its siblings; once all have settled, the
    first failure (in panel order) is raised.
    """
    panel = state.config.panel
    candidates = list(state.pending)
    results = await asyncio.gather(
        *[
            _call(
                f"evaluator[{rater.name}]",
                evaluator.evaluate(candidates, rater, state.config.message),
                timeout,
            )
            for rater in panel
        ],
        return_exceptions=True,
    )

    failures = [r for r in results if isinstance(r, BaseException)]
    for failure in failures:
        print(f"[Grouper] Rater failed: {failure}", file=sys.stderr)
    if failures:
        raise failures[0]

    for rater, reaction in zip(panel, results):
        if len(reaction.ratings) != len(candidates):
            raise MalformedInput(
                f"{rater.name} returned {len(reaction.ratings)} ratings "
                f"for {len(candidates)} wordings."
            )
    return results


def rate_candidates(state: RefinementState, reactions: list[Reaction]) -> list[RatedCandidate]:
    """Transpose per-rater reactions into per-candidate ratings and score them."""
    ratings_per_candidate = [
        [reaction.ratings[i] for reaction in reactions]
        for i in range(len(state.pending))
    ]
    scores = state.config.panel.score(ratings_per_candidate)
    return [RatedCandidate(candidate, score) for candidate, score in zip(state.pending, scores)]


def make_evaluate_effect(evaluator, timeout: float | None = None):
    async def evaluate(state: RefinementState) -> RefinementState:
        reactions = await gather_reactions(evaluator, state, timeout)
        rated = rate_candidates(state, reactions)
        return replace(
            state,
            store=state.store.add(rated),
            pending=(),
            has_pending=False,
            feedback=state.feedback + tuple(state.config.panel.present_feedback(reactions)),
        )

    return evaluate


# --- Goal ---


def enough_good_wordings(state: RefinementState) -> bool:
    config = state.config
    return len(state.store.best(config.min_score)) >= config.required_count


def goal_reached(state: RefinementState) -> bool:
    """Enough good wordings, or the iteration budget is spent.

    The iteration disjunct waits for the pending batch to be evaluated.
    """
    if enough_good_wordings(state):
        return True
    return state.iteration >= state.config.max_iterations and not state.has_pending


WORDINGS_GOAL = Goal(name="Needed number of good proposals reached", test=goal_reached)


def build_actions(
    generator,
    evaluator,
    timeout: float | None = None,
    max_chars: int | None = None,
) -> list[Action]:
    return [
        Action(
            name="generate",
            description="Evolve message wording; previous wordings must already be rated.",
            precondition=needs_generation,
            belief=begin_generation,
            effect=make_generate_effect(generator, timeout, max_chars),
        ),
        Action(
            name="evaluate",
            description="Run the focus group over wordings that are not rated yet.",
            precondition=needs_evaluation,
            belief=begin_evaluation,
            effect=make_evaluate_effect(evaluator, timeout),
        ),
    ]


def build_planner(
    generator,
    evaluator,
    max_steps: int = 100,
    timeout: float | None = None,
    max_chars: int | None = None,
) -> Planner:
    """Wire the reference actions and goal into a planner."""
    return Planner(
        build_actions(generator, evaluator, timeout, max_chars),
        WORDINGS_GOAL,
        max_steps=max_steps,
    )
