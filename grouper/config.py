"""Centralized config loading — read once at import time."""

from pathlib import Path

import yaml
from dotenv import load_dotenv

from grouper.state import GrouperConfig, Message, Persona
from grouper.utils.consensus import ConsensusPanel
from grouper.utils.selection import make_strategy
from grouper.utils.validator import validate_message

# Load .env from project root (parent of grouper/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

CONFIG_PATH = Path(__file__).resolve().parent / "config.yaml"

_config = yaml.safe_load(CONFIG_PATH.read_text())


def get_config() -> dict:
    """Return the loaded config dictionary."""
    return _config


def _persona(entry: dict) -> Persona:
    missing = {"id", "name", "identity", "model"} - set(entry)
    if missing:
        raise ValueError(f"Persona {entry.get('id', '?')} missing required fields: {missing}")
    return Persona(
        id=entry["id"],
        name=entry["name"],
        identity=entry["identity"],
        model=entry["model"],
        provider=entry.get("provider", "anthropic"),
        temperature=float(entry.get("temperature", 0.7)),
        weight=float(entry.get("weight", 1.0)),
    )


def build_grouper_config(config: dict | None = None) -> GrouperConfig:
    """Turn the raw config dict into a GrouperConfig.

    The consensus panel is built here, so participant weights are normalized
    exactly once per run.
    """
    config = config if config is not None else get_config()

    message = Message(**validate_message(config.get("message")))
    participants = [_persona(p) for p in config.get("participants", [])]
    creatives = tuple(_persona(c) for c in config.get("creatives", []))
    if not creatives:
        raise ValueError("At least one creative persona is required.")

    grouper_config = GrouperConfig(
        message=message,
        panel=ConsensusPanel(participants),
        creatives=creatives,
        min_score=float(config.get("min_score", 0.7)),
        required_count=int(config.get("required_count", 10)),
        display_count=int(config.get("display_count", 20)),
        num_proposals=int(config.get("num_proposals", 10)),
        max_iterations=int(config.get("max_iterations", 20)),
    )
    if not 0.0 <= grouper_config.min_score <= 1.0:
        raise ValueError(f"min_score must be in [0, 1], got {grouper_config.min_score}.")
    if grouper_config.num_proposals < 1 or grouper_config.required_count < 1:
        raise ValueError("num_proposals and required_count must be at least 1.")
    return grouper_config


def build_selection(config: dict | None, personas):
    """Return the configured creative selection strategy."""
    config = config if config is not None else get_config()
    return make_strategy(
        config.get("creative_selection", "round_robin"),
        personas,
        config.get("selection_seed"),
    )
