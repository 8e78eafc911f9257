"""Chat-model factory — one client per persona, chosen by provider."""

from langchain_anthropic import ChatAnthropic
from langchain_google_genai import ChatGoogleGenerativeAI

from grouper.state import Persona

PROVIDERS = {
    "anthropic": ChatAnthropic,
    "google": ChatGoogleGenerativeAI,
}


def make_chat_model(persona: Persona):
    """Build the chat model a persona speaks through."""
    try:
        factory = PROVIDERS[persona.provider]
    except KeyError:
        raise ValueError(
            f"Persona '{persona.id}' has unknown provider '{persona.provider}'. "
            f"Must be one of: {set(PROVIDERS)}"
        ) from None
    return factory(model=persona.model, temperature=persona.temperature)
