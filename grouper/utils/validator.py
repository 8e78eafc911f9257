"""Input validation — checks the message block before a run starts."""

REQUIRED_MESSAGE_FIELDS = ("id", "content", "objective", "deliverable")


def validate_message(message) -> dict:
    """Validate that the message has every field as a non-empty string.

    Returns a dict of stripped fields on success.
    Raises ValueError if the message is missing or any field is empty.
    """
    if not isinstance(message, dict):
        raise ValueError("Message must be a mapping with id, content, objective, deliverable.")

    cleaned = {}
    for field in REQUIRED_MESSAGE_FIELDS:
        value = message.get(field)
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"Message field '{field}' must be a non-empty string.")
        cleaned[field] = value.strip()
    return cleaned
