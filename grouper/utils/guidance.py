"""Distilled copywriting guidance for injection into the creative prompt."""

# Imperative rules for LLM consumption. Edit the list below to tune generation.
_GUIDANCE_RULES = """\
- Lead with the outcome the audience cares about, not with the sender's intent.
- Prefer concrete, sensory words over abstractions; one idea per wording.
- Match the register of the deliverable: a billboard reads in three seconds, an email \
subject line competes with a crowded inbox, a blog headline must earn the click.
- Use contrast, surprise or a question to stop the reader; avoid clichés the audience \
has already tuned out.
- Never shame or threaten the audience; persuasive messages that blame tend to backfire.
- Vary structure across the batch (imperatives, questions, statements, wordplay) so the \
focus group can discriminate between approaches.\
"""


def load_guidance() -> str:
    """Return the distilled copywriting guidance rules.

    Returns an empty string if guidance is disabled in config
    (set guidance_enabled to false or remove it).
    """
    from grouper.config import get_config

    config = get_config()
    if not config.get("guidance_enabled", False):
        return ""

    return _GUIDANCE_RULES
