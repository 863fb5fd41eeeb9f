"""resume_rag.generation.response_decoder

Decoding of primary-backend (Gemini ``generateContent``) JSON bodies.

Response bodies are matched against a fixed sequence of known shapes in
priority order; the first structurally valid shape wins. A body matching no
shape is a decode failure, never a silent ``None``.

Shapes, in order
----------------
1. ``{"candidates": [{"content": {"parts": [{"text": ...}, ...]}}]}``
2. ``{"candidates": [{"text": ...}]}`` or ``{"candidates": [{"output": ...}]}``
3. ``{"text": ...}``
4. ``{"error": {"code": ..., "status": ..., "message": ..., "details": [...]}}``

Classes
-------
CandidateText
    Successful decode carrying generated text.
ErrorPayload
    Decoded backend error object.
ResponseDecodeError
    Raised when no known shape matches.

Functions
---------
decode_response
    Decode a parsed JSON body.
parse_retry_delay
    Parse a duration such as ``"12s"`` into seconds.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

_DURATION = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|m|h)?\s*$", re.IGNORECASE)
_RETRY_IN_MESSAGE = re.compile(r"retry in\s+(\d+(?:\.\d+)?)\s*(ms|s|m|h)?", re.IGNORECASE)
_UNIT_SECONDS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


class ResponseDecodeError(ValueError):
    """Raised when a backend body matches none of the known shapes."""


@dataclass(frozen=True)
class CandidateText:
    """Generated text extracted from a successful body."""
    text: str


@dataclass(frozen=True)
class ErrorPayload:
    """Backend error object.

    Attributes
    ----------
    code : int or None
        Numeric error code (mirrors the HTTP status for Gemini).
    status : str or None
        Symbolic status such as ``"RESOURCE_EXHAUSTED"``.
    message : str
        Backend-provided description.
    retry_after : float or None
        Suggested retry delay in seconds, when present.
    """
    code: Optional[int]
    status: Optional[str]
    message: str
    retry_after: Optional[float] = None


DecodedResponse = Union[CandidateText, ErrorPayload]


def parse_retry_delay(value: Any) -> Optional[float]:
    """Parse a retry delay into seconds.

    Accepts numbers, numeric strings and protobuf-style durations
    (``"12s"``, ``"1.5s"``, ``"500ms"``).

    Examples
    --------
    >>> parse_retry_delay("12s")
    12.0
    >>> parse_retry_delay("bogus") is None
    True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if value >= 0 else None
    if not isinstance(value, str):
        return None
    match = _DURATION.match(value)
    if not match:
        return None
    amount, unit = match.groups()
    return float(amount) * _UNIT_SECONDS[(unit or "s").lower()]


def retry_delay_from_message(message: str) -> Optional[float]:
    """Extract a delay from text like ``"Please retry in 12.5s."``."""
    match = _RETRY_IN_MESSAGE.search(message or "")
    if not match:
        return None
    amount, unit = match.groups()
    return float(amount) * _UNIT_SECONDS[(unit or "s").lower()]


def _first_candidate(body: dict) -> Optional[dict]:
    candidates = body.get("candidates")
    if isinstance(candidates, list) and candidates and isinstance(candidates[0], dict):
        return candidates[0]
    return None


def _decode_content_parts(body: dict) -> Optional[DecodedResponse]:
    candidate = _first_candidate(body)
    if candidate is None:
        return None
    content = candidate.get("content")
    if not isinstance(content, dict):
        return None
    parts = content.get("parts")
    if not isinstance(parts, list):
        return None
    texts = [p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)]
    if not texts:
        return None
    return CandidateText("".join(texts))


def _decode_candidate_text(body: dict) -> Optional[DecodedResponse]:
    candidate = _first_candidate(body)
    if candidate is None:
        return None
    for key in ("text", "output"):
        value = candidate.get(key)
        if isinstance(value, str):
            return CandidateText(value)
    return None


def _decode_top_level_text(body: dict) -> Optional[DecodedResponse]:
    value = body.get("text")
    if isinstance(value, str):
        return CandidateText(value)
    return None


def _decode_error(body: dict) -> Optional[DecodedResponse]:
    error = body.get("error")
    if not isinstance(error, dict):
        return None

    code = error.get("code")
    code = code if isinstance(code, int) and not isinstance(code, bool) else None
    status = error.get("status") if isinstance(error.get("status"), str) else None
    message = error.get("message") if isinstance(error.get("message"), str) else ""

    retry_after = None
    for detail in error.get("details") or []:
        if isinstance(detail, dict) and "retryDelay" in detail:
            retry_after = parse_retry_delay(detail.get("retryDelay"))
            if retry_after is not None:
                break
    if retry_after is None:
        retry_after = retry_delay_from_message(message)

    return ErrorPayload(code=code, status=status, message=message, retry_after=retry_after)


_DECODERS: tuple[Callable[[dict], Optional[DecodedResponse]], ...] = (
    _decode_content_parts,
    _decode_candidate_text,
    _decode_top_level_text,
    _decode_error,
)


def decode_response(body: Any) -> DecodedResponse:
    """Decode a parsed JSON body into a tagged variant.

    Parameters
    ----------
    body : Any
        Parsed JSON body of a ``generateContent`` response.

    Returns
    -------
    CandidateText or ErrorPayload
        The first matching shape.

    Raises
    ------
    ResponseDecodeError
        If ``body`` is not a JSON object or matches no known shape.
    """
    if not isinstance(body, dict):
        raise ResponseDecodeError(f"Expected a JSON object, got {type(body).__name__}")
    for decoder in _DECODERS:
        decoded = decoder(body)
        if decoded is not None:
            return decoded
    raise ResponseDecodeError(f"Unrecognised response shape with keys {sorted(body)}")


__all__ = [
    "CandidateText",
    "DecodedResponse",
    "ErrorPayload",
    "ResponseDecodeError",
    "decode_response",
    "parse_retry_delay",
    "retry_delay_from_message",
]
