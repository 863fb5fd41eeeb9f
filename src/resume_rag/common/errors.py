"""resume_rag.common.errors

Error taxonomy surfaced by the question-answering pipeline.

Every error raised to callers of the pipeline derives from
:class:`ResumeRagError`, so request handlers can map each category to a
user-facing response without inspecting messages.

Classes
-------
ResumeRagError
    Base class carrying a message and a ``details`` mapping.
InvalidInput
    The caller supplied a missing or malformed question, mode, or upload.
NotFound
    No resume has been uploaded yet.
RateLimited
    The generation backend quota is exhausted; carries a retry-after hint.
UpstreamFatal
    The generation backend rejected the request outright.
GenerationExhausted
    All backends and retries failed without a clear rejection reason.
ConfigurationError
    Required configuration (e.g. an API key) is missing or invalid.
"""

from __future__ import annotations

from typing import Any


class ResumeRagError(Exception):
    """Base exception for the resume question-answering system."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidInput(ResumeRagError):
    """Raised when a question, mode or uploaded file is not acceptable."""


class NotFound(ResumeRagError):
    """Raised when no resume document is available."""


class RateLimited(ResumeRagError):
    """Raised when the primary backend reported quota exhaustion.

    Parameters
    ----------
    message : str
        Human-readable description.
    retry_after : float or None
        Suggested wait in seconds before retrying, when the backend supplied one.
    """

    def __init__(
            self,
            message: str,
            retry_after: float | None = None,
            details: dict[str, Any] | None = None,
        ):
        super().__init__(message, details)
        self.retry_after = retry_after


class UpstreamFatal(ResumeRagError):
    """Raised when the backend rejected the request with a non-retryable error."""

    def __init__(
            self,
            message: str,
            status_code: int | None = None,
            details: dict[str, Any] | None = None,
        ):
        super().__init__(message, details)
        self.status_code = status_code


class GenerationExhausted(ResumeRagError):
    """Raised when every backend attempt failed."""


class ConfigurationError(ResumeRagError):
    """Raised for missing or invalid configuration."""


__all__ = [
    "ResumeRagError",
    "InvalidInput",
    "NotFound",
    "RateLimited",
    "UpstreamFatal",
    "GenerationExhausted",
    "ConfigurationError",
]
