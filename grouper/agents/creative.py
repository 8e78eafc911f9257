"""Creative Agent — proposes new wordings of the message.

Required output schema:
{
  "learnings": "string (what the creative takes away from the feedback so far)",
  "wordings": ["string", ...]
}
"""

import json
import sys

from grouper.agents.models import make_chat_model
from grouper.state import Message, Proposal
from grouper.utils.guidance import load_guidance
from grouper.utils.parsing import ainvoke_with_retry, strip_fences
from grouper.utils.ranking import BoundedRankedStore

SYSTEM_PROMPT = """\
You are a creative messaging expert specialized in crafting impactful communications.
Your task is to generate message variations that achieve specific objectives.

Your name is {name}. Your background: {identity}.

Guidelines:
- Each message should be clear, concise and impactful
- Focus on the intended outcome and target audience
- Consider psychological and emotional aspects
- Maintain appropriate tone for the medium
- Stay within character limits for the deliverable type
- Never exceed the requested number of proposals

You MUST respond with valid JSON matching this exact schema:
{{
  "learnings": "one or two sentences on what previous feedback taught you",
  "wordings": ["first proposal", "second proposal"]
}}

Respond ONLY with the JSON object. No markdown fences, no commentary.
"""


def _numbered(items: list[str]) -> str:
    return "\n".join(f"{i}. {item}" for i, item in enumerate(items)) or "(none yet)"


def _build_user_prompt(
    message: Message,
    prior_best: BoundedRankedStore,
    feedback: list[str],
    learnings: list[str],
    count: int,
    show: int,
) -> str:
    """Construct the user prompt from the refinement history."""
    return (
        f"{message}\n\n"
        f"Previous feedback:\n{_numbered(feedback)}\n\n"
        f"Previous learnings:\n{_numbered(learnings)}\n\n"
        "Task:\n"
        "1. Analyze previous high-scoring messages\n"
        f"2. Create up to {count} new variations\n"
        "3. Each proposal should aim to achieve the objective while fitting the deliverable format\n\n"
        f"Current top performing messages:\n{prior_best.show(show) or '(none yet)'}"
    )


def _validate_response(data: dict) -> Proposal:
    """Validate the Creative response and convert it to a Proposal."""
    if not isinstance(data, dict):
        raise ValueError("Creative response must be a JSON object.")
    if "wordings" not in data:
        raise ValueError("Creative response missing 'wordings' field.")
    wordings = data["wordings"]
    if not isinstance(wordings, list) or not all(isinstance(w, str) for w in wordings):
        raise ValueError("'wordings' must be a list of strings.")

    learnings = data.get("learnings", "")
    if isinstance(learnings, str):
        learnings = [learnings]
    elif not isinstance(learnings, list):
        raise ValueError("'learnings' must be a string or a list of strings.")

    return Proposal(
        candidates=tuple(wordings),
        learnings=tuple(str(item) for item in learnings),
    )


class CreativeGenerator:
    """Generation collaborator: one LLM call per Generate action.

    The creative persona for each call comes from the injected selection
    strategy (round-robin or seeded random).
    """

    def __init__(self, message: Message, selection, show: int = 20):
        self.message = message
        self.selection = selection
        self.show = show

    async def generate(
        self,
        prior_best: BoundedRankedStore,
        feedback: list[str],
        learnings: list[str],
        count: int,
    ) -> Proposal:
        creative = self.selection.pick()
        llm = make_chat_model(creative)

        system_content = SYSTEM_PROMPT.format(name=creative.name, identity=creative.identity)
        guidance = load_guidance()
        if guidance:
            system_content += (
                "\n\n## Copywriting Guidelines\n"
                "Apply the following where they suit the deliverable.\n\n"
                f"{guidance}"
            )

        messages = [
            {"role": "system", "content": system_content},
            {
                "role": "user",
                "content": _build_user_prompt(
                    self.message, prior_best, feedback, learnings, count, self.show
                ),
            },
        ]

        # First attempt
        response = await ainvoke_with_retry(llm, messages)
        try:
            return _validate_response(json.loads(strip_fences(response.content)))
        except (json.JSONDecodeError, ValueError) as exc:
            print(
                f"[Grouper] {creative.name} returned an invalid proposal ({exc}). Re-prompting once.",
                file=sys.stderr,
            )

        # Re-prompt once before raising
        messages.append({"role": "assistant", "content": response.content})
        messages.append({
            "role": "user",
            "content": (
                "Your response did not match the required JSON schema. "
                "Please try again with ONLY the raw JSON object, "
                "no markdown fences, no commentary."
            ),
        })
        response = await ainvoke_with_retry(llm, messages)
        return _validate_response(json.loads(strip_fences(response.content)))
