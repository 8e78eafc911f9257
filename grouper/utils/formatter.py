"""Output Formatter — renders a finished run as a Markdown report."""

from pathlib import Path

from grouper.actions import enough_good_wordings
from grouper.config import get_config
from grouper.graph import Outcome
from grouper.state import RefinementState

_OUTCOME_NOTES = {
    Outcome.GOAL_REACHED: "Goal reached: enough wordings met the minimum score.",
    Outcome.SAFETY_BOUND_REACHED: (
        "Stopped at the planner's step bound. Results are best effort."
    ),
    Outcome.STUCK: "Stopped: no action was applicable. Check the action set.",
    Outcome.CANCELLED: "Cancelled before completion. Results are partial.",
}


def outcome_note(
    state: RefinementState,
    outcome: Outcome | None,
    error: str | None = None,
) -> str:
    """One-line account of why the run stopped.

    ``error`` marks a run aborted by a failed action; ``outcome`` is then
    ignored. The goal outcome is worded from the store, since the goal also
    holds once the iteration limit is spent.
    """
    if error is not None:
        return f"Aborted. {error}. Results are from the last completed step."
    if outcome is Outcome.GOAL_REACHED and not enough_good_wordings(state):
        config = state.config
        good = len(state.store.best(config.min_score))
        return (
            f"Stopped at the iteration limit ({config.max_iterations}) with only "
            f"{good} of {config.required_count} wordings at or above the minimum score."
        )
    return _OUTCOME_NOTES[outcome]


def _render_markdown(
    state: RefinementState,
    outcome: Outcome | None,
    error: str | None = None,
) -> str:
    """Convert the final state into a Markdown report."""
    config = state.config
    message = config.message
    lines = [f"# {message.id} — Wording Report", ""]

    lines.append("## Message")
    lines.append("")
    lines.append(f"- **Content:** {message.content}")
    lines.append(f"- **Objective:** {message.objective}")
    lines.append(f"- **Deliverable:** {message.deliverable}")
    lines.append("")

    lines.append("## Outcome")
    lines.append("")
    lines.append(outcome_note(state, outcome, error))
    lines.append("")
    lines.append(f"- **Iterations:** {state.iteration}")
    good = state.store.best(config.min_score)
    lines.append(
        f"- **Wordings at or above {config.min_score:.2f}:** "
        f"{len(good)} of {config.required_count} required"
    )
    lines.append("")

    entries = state.store.best(n=config.display_count)
    if entries:
        lines.append("## Best Wordings")
        lines.append("")
        lines.append("| # | Score | Wording |")
        lines.append("|---|-------|---------|")
        for i, entry in enumerate(entries, 1):
            wording = entry.candidate.replace("|", "\\|")
            lines.append(f"| {i} | {entry.score:.2f} | {wording} |")
        lines.append("")

    if state.learnings:
        lines.append("## Learnings")
        lines.append("")
        for learning in state.learnings:
            lines.append(f"- {learning}")
        lines.append("")

    if state.feedback:
        lines.append("## Focus Group Feedback")
        lines.append("")
        for note in state.feedback:
            lines.append(f"- {note}")
        lines.append("")

    return "\n".join(lines)


def write_report(
    state: RefinementState,
    outcome: Outcome | None,
    error: str | None = None,
) -> Path:
    """Render the report and write it to the configured output path."""
    config = get_config()
    output_path = Path(config.get("output_path", "./output/wordings.md"))
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(_render_markdown(state, outcome, error), encoding="utf-8")
    return output_path
