"""Grouper — Streamlit UI for refining a message's wording with a focus group."""

import asyncio
import sys
from pathlib import Path

# Add project root to path so 'grouper' package is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

import streamlit as st

from grouper.actions import build_planner, enough_good_wordings
from grouper.agents.creative import CreativeGenerator
from grouper.agents.focus_group import FocusGroupEvaluator
from grouper.config import build_grouper_config, build_selection, get_config
from grouper.errors import ActionFailed
from grouper.graph import Outcome
from grouper.state import RefinementState
from grouper.utils.formatter import _render_markdown, outcome_note

st.set_page_config(page_title="Grouper — Message Wording Refiner", layout="wide")
st.title("Grouper — Message Wording Refiner")
st.markdown(
    "Refines the wording of a message through repeated rounds of **creatives** "
    "proposing variations and a weighted **focus group** rating them. The best "
    "wordings are kept until enough of them clear the minimum score."
)

st.divider()

_defaults = get_config()["message"]
col_left, col_right = st.columns(2)
with col_left:
    content = st.text_input("Message", value=_defaults["content"])
    objective = st.text_input("Objective", value=_defaults["objective"])
with col_right:
    deliverable = st.text_input("Deliverable", value=_defaults["deliverable"])
    max_iterations = st.number_input(
        "Max iterations", min_value=1, max_value=100, value=get_config().get("max_iterations", 20)
    )


# ---------------------------------------------------------------------------
# Helper renderers
# ---------------------------------------------------------------------------


def _render_score_table(entries) -> str:
    """Build a markdown table of rated wordings."""
    if not entries:
        return "*No wordings rated yet.*"

    lines = [
        "| # | Score | Wording |",
        "|---|-------|---------|",
    ]
    for i, entry in enumerate(entries, 1):
        wording = entry.candidate.replace("|", "\\|")
        lines.append(f"| {i} | {entry.score:.2f} | {wording} |")
    return "\n".join(lines)


def _render_round(state: RefinementState, batch: tuple[str, ...]) -> None:
    """Show how the latest batch landed in the store."""
    kept = [entry for entry in state.store if entry.candidate in set(batch)]
    good = len(state.store.best(state.config.min_score))
    label = (
        f"Iteration {state.iteration} — {len(kept)}/{len(batch)} kept, "
        f"{good}/{state.config.required_count} at or above {state.config.min_score:.2f}"
    )
    with st.expander(label, expanded=False):
        st.markdown(_render_score_table(kept))
        for note in state.feedback[-len(state.config.panel):]:
            st.caption(note)


def _render_final_output(state: RefinementState, outcome: Outcome | None, error: str | None = None) -> None:
    note = outcome_note(state, outcome, error)
    if error is not None or outcome is Outcome.STUCK:
        st.error(note)
    elif outcome is Outcome.GOAL_REACHED and enough_good_wordings(state):
        st.success(f"{note} ({state.iteration} iteration(s))")
    else:
        st.warning(note)

    st.subheader("Best Wordings")
    st.markdown(_render_score_table(state.store.best(n=state.config.display_count)))

    st.download_button(
        label="Download wordings.md",
        data=_render_markdown(state, outcome, error),
        file_name="wordings.md",
        mime="text/markdown",
    )

    if state.learnings:
        with st.expander("Creative Learnings"):
            for learning in state.learnings:
                st.markdown(f"- {learning}")


# ---------------------------------------------------------------------------
# Main refinement loop
# ---------------------------------------------------------------------------


def _run_refinement_loop(initial: RefinementState) -> None:
    """Step the planner one action at a time, rendering each evaluated batch."""
    config = get_config()
    generator = CreativeGenerator(
        initial.config.message,
        build_selection(config, initial.config.creatives),
        show=initial.config.display_count,
    )
    planner = build_planner(
        generator,
        FocusGroupEvaluator(initial.config.panel.scale),
        max_steps=config.get("max_planner_steps", 100),
        timeout=config.get("collaborator_timeout"),
        max_chars=config.get("max_candidate_chars"),
    )

    state = initial
    steps = 0
    with st.status("Refining wordings...", expanded=True) as status_widget:
        while True:
            route = planner.route(state, steps)
            if route in {o.value for o in Outcome}:
                outcome = Outcome(route)
                break

            batch = state.pending
            try:
                state = asyncio.run(planner.run_single_step(state, route))
            except ActionFailed as exc:
                status_widget.update(label="Run aborted", state="error")
                st.session_state["grouper_error"] = (exc.state, str(exc))
                return
            steps += 1

            if route == "evaluate":
                _render_round(state, batch)

        status_widget.update(label="Refinement complete", state="complete", expanded=False)

    st.session_state["grouper_result"] = (state, outcome)


# ---------------------------------------------------------------------------
# Page logic
# ---------------------------------------------------------------------------

if st.button("Refine Wording", type="primary"):
    raw = dict(get_config())
    raw["message"] = {**_defaults, "content": content, "objective": objective, "deliverable": deliverable}
    raw["max_iterations"] = int(max_iterations)
    try:
        grouper_config = build_grouper_config(raw)
    except ValueError as exc:
        st.error(str(exc))
        st.stop()

    st.session_state.pop("grouper_result", None)
    st.session_state.pop("grouper_error", None)
    _run_refinement_loop(RefinementState.start(grouper_config))

if "grouper_result" in st.session_state:
    final_state, final_outcome = st.session_state["grouper_result"]
    _render_final_output(final_state, final_outcome)
elif "grouper_error" in st.session_state:
    failed_state, error = st.session_state["grouper_error"]
    _render_final_output(failed_state, None, error)
