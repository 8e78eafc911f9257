"""Candidate screening — deterministic cleanup of a generated batch.

Runs before a batch is queued for the focus group so raters never spend a
call on blanks, repeats, or wordings that cannot fit the deliverable.
"""

import re
from typing import Iterable

_NUMBERING_RE = re.compile(r"^\s*(?:[-*•]|\(?\d+[.)]|\d+\s*[-:])\s*")
_QUOTES = "\"'“”‘’"


def clean_candidate(text: str) -> str:
    """Strip list numbering, bullets and wrapping quotes from one wording."""
    text = _NUMBERING_RE.sub("", text.strip(), count=1).strip()
    if len(text) >= 2 and text[0] in _QUOTES and text[-1] in _QUOTES:
        text = text[1:-1].strip()
    return text


def screen_candidates(
    candidates: Iterable[str],
    seen: Iterable[str] = (),
    limit: int | None = None,
    max_chars: int | None = None,
) -> tuple[list[str], list[str]]:
    """Return ``(kept, issues)``.

    A wording is dropped if it is blank, longer than ``max_chars``, or already
    in ``seen`` or earlier in the batch (case-insensitive). At most ``limit``
    wordings are kept.
    """
    known = {s.casefold() for s in seen}
    kept: list[str] = []
    issues: list[str] = []

    for raw in candidates:
        text = clean_candidate(raw) if isinstance(raw, str) else ""
        if not text:
            issues.append("Dropped blank wording.")
            continue
        if max_chars is not None and len(text) > max_chars:
            issues.append(f"Dropped wording over {max_chars} chars: {text[:40]!r}...")
            continue
        key = text.casefold()
        if key in known:
            issues.append(f"Dropped duplicate wording: {text!r}")
            continue
        if limit is not None and len(kept) >= limit:
            issues.append(f"Dropped wording beyond the {limit} requested: {text!r}")
            continue
        known.add(key)
        kept.append(text)

    return kept, issues
