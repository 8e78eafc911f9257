"""LangGraph planner: goal-directed, first-match action dispatch.

Each tick the router checks the goal, then the absolute step bound, then scans
the registered actions in declaration order and dispatches the first whose
precondition holds. Action order is part of the contract: callers must list
actions in priority order.

Graph shape (one node per action, plus three terminal nodes)::

    START ─route─▶ <action> ─route─▶ <action> ─route─▶ ... ─▶ goal_reached / safety_bound / stuck ─▶ END
"""

import asyncio
import contextlib
import inspect
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, NamedTuple, Sequence, TypedDict

from langgraph.graph import END, START, StateGraph

from grouper.errors import ActionFailed


class Outcome(str, Enum):
    GOAL_REACHED = "goal_reached"
    SAFETY_BOUND_REACHED = "safety_bound"
    STUCK = "stuck"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Action:
    """A named unit of work.

    precondition: state -> bool, gates whether the action may run this tick.
    belief: state -> state, pure and synchronous, applied before the effect.
    effect: state -> state (or an awaitable of it), may call collaborators.
    """

    name: str
    precondition: Callable[[Any], bool]
    belief: Callable[[Any], Any]
    effect: Callable[[Any], Any]
    description: str = ""


@dataclass(frozen=True)
class Goal:
    name: str
    test: Callable[[Any], bool]


class PlanResult(NamedTuple):
    state: Any
    outcome: Outcome


class PlannerState(TypedDict):
    state: Any  # The domain state; replaced, never mutated.
    steps: int  # Actions executed so far.
    last_action: str
    outcome: str


_TERMINALS = {
    Outcome.GOAL_REACHED.value: Outcome.GOAL_REACHED,
    Outcome.SAFETY_BOUND_REACHED.value: Outcome.SAFETY_BOUND_REACHED,
    Outcome.STUCK.value: Outcome.STUCK,
}
_RESERVED_CHARS = (":", "|")


async def apply_action(action: Action, state):
    """Run ``belief`` then ``effect`` and return the new state."""
    believed = action.belief(state)
    result = action.effect(believed)
    if inspect.isawaitable(result):
        result = await result
    return result


class Planner:
    """First-match action scheduler with an absolute step bound."""

    def __init__(self, actions: Sequence[Action], goal: Goal, max_steps: int = 100):
        if not actions:
            raise ValueError("Planner needs at least one action.")
        names = [action.name for action in actions]
        if len(set(names)) != len(names):
            raise ValueError(f"Action names must be unique: {names}")
        for name in names:
            if name in {o.value for o in Outcome} or name in (START, END):
                raise ValueError(f"Action name '{name}' is reserved.")
            if not name or any(ch in name for ch in _RESERVED_CHARS):
                raise ValueError(f"Action name '{name}' must be non-empty without ':' or '|'.")
        if max_steps < 1:
            raise ValueError(f"max_steps must be at least 1, got {max_steps}.")

        self.actions = tuple(actions)
        self.goal = goal
        self.max_steps = max_steps
        self._by_name = {action.name: action for action in self.actions}
        self.graph = self._build()

    # --- Routing ---

    def route(self, state, steps: int = 0) -> str:
        """Return the name of the action to run next, or a terminal outcome value.

        Priority order:
        1. goal holds → goal_reached
        2. step bound hit → safety_bound
        3. first action whose precondition holds
        4. nothing applicable → stuck
        """
        if self.goal.test(state):
            return Outcome.GOAL_REACHED.value
        if steps >= self.max_steps:
            return Outcome.SAFETY_BOUND_REACHED.value
        for action in self.actions:
            if action.precondition(state):
                return action.name
        return Outcome.STUCK.value

    def _route_node(self, planner_state: PlannerState) -> str:
        return self.route(planner_state["state"], planner_state["steps"])

    # --- Build the graph ---

    def _action_node(self, action: Action):
        async def node(planner_state: PlannerState) -> dict:
            state = planner_state["state"]
            label = f"{action.name} ({action.description})" if action.description else action.name
            print(f"[Grouper] Step {planner_state['steps'] + 1}: {label}", file=sys.stderr)
            try:
                new_state = await apply_action(action, state)
            except Exception as exc:
                raise ActionFailed(action.name, state, exc) from exc
            return {
                "state": new_state,
                "steps": planner_state["steps"] + 1,
                "last_action": action.name,
            }

        return node

    @staticmethod
    def _terminal_node(outcome: Outcome):
        def node(planner_state: PlannerState) -> dict:
            return {"outcome": outcome.value}

        return node

    def _build(self):
        workflow = StateGraph(PlannerState)

        path_map = {name: name for name in self._by_name}
        for action in self.actions:
            workflow.add_node(action.name, self._action_node(action))
        for key, outcome in _TERMINALS.items():
            workflow.add_node(key, self._terminal_node(outcome))
            workflow.add_edge(key, END)
            path_map[key] = key

        workflow.add_conditional_edges(START, self._route_node, path_map)
        for action in self.actions:
            workflow.add_conditional_edges(action.name, self._route_node, path_map)

        return workflow.compile()

    # --- Execution ---

    async def _drive(self, initial_state, progress: dict) -> None:
        inputs: PlannerState = {
            "state": initial_state,
            "steps": 0,
            "last_action": "",
            "outcome": "",
        }
        # One superstep per action plus the terminal node; leave headroom.
        config = {"recursion_limit": self.max_steps + 5}
        async for snapshot in self.graph.astream(inputs, config=config, stream_mode="values"):
            progress.update(snapshot)

    async def run(
        self,
        initial_state,
        *,
        timeout: float | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> PlanResult:
        """Run the loop until the goal holds, the bound is hit, or no action applies.

        Returns ``PlanResult(final_state, outcome)``. A timeout, a set
        ``cancel_event`` or cancellation of the calling task cancels any
        in-flight collaborator calls and yields ``Outcome.CANCELLED`` with the
        last installed state. Effect failures raise :class:`ActionFailed`.
        """
        progress = {"state": initial_state, "steps": 0, "outcome": ""}
        driver = asyncio.ensure_future(self._drive(initial_state, progress))
        waiters = {driver}
        stopper = None
        if cancel_event is not None:
            stopper = asyncio.ensure_future(cancel_event.wait())
            waiters.add(stopper)

        try:
            done, _ = await asyncio.wait(
                waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            done = set()
        finally:
            if stopper is not None:
                stopper.cancel()

        if driver not in done:
            driver.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await driver
            print(
                f"[Grouper] Run cancelled after {progress['steps']} step(s).",
                file=sys.stderr,
            )
            return PlanResult(progress["state"], Outcome.CANCELLED)

        driver.result()
        outcome = Outcome(progress["outcome"])
        if outcome is Outcome.STUCK:
            print(
                "[Grouper] Error: no applicable action, the action set cannot make progress.",
                file=sys.stderr,
            )
        else:
            print(
                f"[Grouper] Finished: {outcome.value} after {progress['steps']} step(s).",
                file=sys.stderr,
            )
        return PlanResult(progress["state"], outcome)

    def run_sync(self, initial_state, **kwargs) -> PlanResult:
        """Blocking wrapper around :meth:`run` for the CLI."""
        return asyncio.run(self.run(initial_state, **kwargs))

    async def run_single_step(self, state, action_name: str):
        """Run one named action and return the new state.

        Used by the dashboard for manual step-by-step execution.
        """
        action = self._by_name[action_name]
        try:
            return await apply_action(action, state)
        except Exception as exc:
            raise ActionFailed(action.name, state, exc) from exc
