"""Entry point: builds the planner from config, runs it, writes the report."""

import sys

from grouper.actions import build_planner
from grouper.agents.creative import CreativeGenerator
from grouper.agents.focus_group import FocusGroupEvaluator
from grouper.config import build_grouper_config, build_selection, get_config
from grouper.errors import ActionFailed
from grouper.graph import Outcome, PlanResult
from grouper.state import RefinementState
from grouper.utils.formatter import write_report


def run(max_iterations: int | None = None, timeout: float | None = None) -> PlanResult:
    """Run the full refinement loop on the configured message.

    Args:
        max_iterations: Override for the domain iteration ceiling. None uses config.
        timeout: Wall-clock limit for the whole run in seconds. None means no limit.
    """
    config = dict(get_config())
    if max_iterations is not None:
        config["max_iterations"] = max_iterations
    grouper_config = build_grouper_config(config)

    generator = CreativeGenerator(
        grouper_config.message,
        build_selection(config, grouper_config.creatives),
        show=grouper_config.display_count,
    )
    planner = build_planner(
        generator,
        FocusGroupEvaluator(grouper_config.panel.scale),
        max_steps=config.get("max_planner_steps", 100),
        timeout=config.get("collaborator_timeout"),
        max_chars=config.get("max_candidate_chars"),
    )

    result = planner.run_sync(RefinementState.start(grouper_config), timeout=timeout)

    output_path = write_report(result.state, result.outcome)
    print("Final result:")
    print(result.state.result or "(no wordings retained)")
    print()
    print(f"[Grouper] Status: {result.outcome.value}")
    print(f"[Grouper] Iterations: {result.state.iteration}")
    print(f"[Grouper] Output written to: {output_path}")
    return result


def main() -> None:
    """CLI entry point — optional --max-iterations N and --timeout SECONDS."""
    args = sys.argv[1:]
    max_iterations = None
    timeout = None

    try:
        if "--max-iterations" in args:
            max_iterations = int(args[args.index("--max-iterations") + 1])
        if "--timeout" in args:
            timeout = float(args[args.index("--timeout") + 1])
    except (IndexError, ValueError):
        print("Usage: grouper [--max-iterations N] [--timeout SECONDS]", file=sys.stderr)
        sys.exit(2)

    try:
        result = run(max_iterations=max_iterations, timeout=timeout)
    except ActionFailed as exc:
        print(f"[Grouper] Run aborted: {exc}", file=sys.stderr)
        if exc.state.store:
            print("Best wordings before the failure:")
            print(exc.state.result)
        output_path = write_report(exc.state, None, error=str(exc))
        print(f"[Grouper] Output written to: {output_path}")
        sys.exit(1)

    if result.outcome is Outcome.STUCK:
        sys.exit(1)


if __name__ == "__main__":
    main()
