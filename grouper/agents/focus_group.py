"""Focus Group Agent — one participant reacts to a batch of wordings.

Required output schema:
{
  "feedback": "string (overall positives and negatives)",
  "ratings": ["STRONGLY_DISAGREE | DISAGREE | NEUTRAL | AGREE | STRONGLY_AGREE", ...]
}
with exactly one rating per wording, in the order given.
"""

import json
import sys

from grouper.agents.models import make_chat_model
from grouper.errors import MalformedInput
from grouper.state import Message, Persona, Reaction
from grouper.utils.parsing import ainvoke_with_retry, strip_fences
from grouper.utils.scale import LIKERT, RatingScale

SYSTEM_PROMPT = """\
Your name is {name}. Your identity is {identity}.

You are a member of a focus group.
Your replies are confidential and you don't need to worry about
anyone knowing what you said, so you can share your feelings
honestly without fear of judgment or consequences.

IMPORTANT: Be critical in your evaluation. Do not hesitate to point out flaws,
weaknesses, or potential improvements. Your role is to be objective, not to be
supportive or positive. Focus on what doesn't work as well as what does.

You MUST respond with valid JSON matching this exact schema:
{{
  "feedback": "overall feedback on the positive and negative aspects of the wordings",
  "ratings": [one of {ratings} per wording, in order]
}}

Respond ONLY with the JSON object. No markdown fences, no commentary.
"""


def _build_user_prompt(candidates: list[str], message: Message) -> str:
    wordings = "\n".join(f"<message>{c}</message>" for c in candidates)
    return (
        f"React to the following wording versions:\n\n{wordings}\n\n"
        "Assess in terms of whether it would produce the following objective in your mind:\n"
        f"<objective>{message.objective}</objective>\n"
        f"Also consider whether it is effective as <deliverable>{message.deliverable}</deliverable>\n\n"
        "You should provide an overall feedback highlighting the positive and negative aspects "
        "of the wordings.\n"
        f"Also provide a list of {len(candidates)} likert ratings to give the assessment to "
        "every specific wording."
    )


def _validate_response(data: dict, expected: int, scale: RatingScale) -> Reaction:
    """Validate a participant response and normalize its ratings to scale symbols."""
    if not isinstance(data, dict):
        raise MalformedInput("Participant response must be a JSON object.")
    if "ratings" not in data:
        raise MalformedInput("Participant response missing 'ratings' field.")
    ratings = data["ratings"]
    if not isinstance(ratings, list):
        raise MalformedInput("'ratings' must be a list.")
    if len(ratings) != expected:
        raise MalformedInput(f"Expected {expected} ratings, got {len(ratings)}.")

    feedback = data.get("feedback", "")
    if not isinstance(feedback, str):
        feedback = json.dumps(feedback)

    return Reaction(
        feedback=feedback.strip(),
        ratings=tuple(scale.parse(r) for r in ratings),
    )


class FocusGroupEvaluator:
    """Evaluation collaborator: one LLM call per panel member."""

    def __init__(self, scale: RatingScale = LIKERT):
        self.scale = scale

    async def evaluate(self, candidates: list[str], rater: Persona, message: Message) -> Reaction:
        llm = make_chat_model(rater)
        messages = [
            {
                "role": "system",
                "content": SYSTEM_PROMPT.format(
                    name=rater.name,
                    identity=rater.identity,
                    ratings=" | ".join(self.scale.names),
                ),
            },
            {"role": "user", "content": _build_user_prompt(candidates, message)},
        ]

        # First attempt
        response = await ainvoke_with_retry(llm, messages)
        try:
            return _validate_response(
                json.loads(strip_fences(response.content)), len(candidates), self.scale
            )
        except (json.JSONDecodeError, ValueError) as exc:
            print(
                f"[Grouper] {rater.name} returned an invalid reaction ({exc}). Re-prompting once.",
                file=sys.stderr,
            )

        # Re-prompt once before raising
        messages.append({"role": "assistant", "content": response.content})
        messages.append({
            "role": "user",
            "content": (
                "Your response did not match the required JSON schema. "
                f"Return ONLY the raw JSON object with exactly {len(candidates)} ratings."
            ),
        })
        response = await ainvoke_with_retry(llm, messages)
        return _validate_response(
            json.loads(strip_fences(response.content)), len(candidates), self.scale
        )
