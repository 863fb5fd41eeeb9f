"""resume_rag.generation.sanitizer

Clean-up of raw backend answers before they reach callers.

Models tend to open with boilerplate such as "Based on your current
skills, ..." or a "Your current skills include:" heading. These lead-ins are
removed, line endings are normalised and runs of blank lines collapsed. If
the cleaned text ends up shorter than ``min_length`` characters, the merely
trimmed raw text is returned instead.

Lead-ins are matched only at the very start of the answer. Text in front of
the phrase is kept along with the phrase itself, so ``"Sure! Based on your
current skills, ..."`` comes back unchanged rather than being cut down to
what follows the phrase.
"""

from __future__ import annotations

import re
from typing import Optional

DEFAULT_MIN_LENGTH = 8

LEAD_IN_PATTERNS = (
    re.compile(r"^\s*based on your current skills(?: and experience)?\s*[,.:]?\s*", re.IGNORECASE),
    re.compile(r"^\s*your current skills include[: \t]*\n", re.IGNORECASE),
    re.compile(r"^\s*your current skills are[: \t]*\n", re.IGNORECASE),
    re.compile(r"^\s*based on the (?:provided )?resume(?: extract)?\s*[,:]\s*", re.IGNORECASE),
)

_EXTRA_BLANK_LINES = re.compile(r"\n{3,}")


def normalise_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def sanitize_answer(raw: Optional[str], min_length: int = DEFAULT_MIN_LENGTH) -> str:
    """Return a cleaned version of ``raw``.

    Parameters
    ----------
    raw : str or None
        Text returned by a generation backend.
    min_length : int, optional
        Shortest acceptable cleaned answer. Defaults to ``8``.

    Returns
    -------
    str
        The cleaned answer, or ``raw.strip()`` when cleaning would leave fewer
        than ``min_length`` characters. ``None`` yields ``""``.
    """
    if not raw:
        return ""

    trimmed = normalise_newlines(raw).strip()
    cleaned = trimmed
    for pattern in LEAD_IN_PATTERNS:
        cleaned = pattern.sub("", cleaned, count=1)
    cleaned = _EXTRA_BLANK_LINES.sub("\n\n", cleaned).strip()

    if len(cleaned) < min_length:
        return trimmed
    return cleaned


__all__ = ["DEFAULT_MIN_LENGTH", "LEAD_IN_PATTERNS", "sanitize_answer"]
