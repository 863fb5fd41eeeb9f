"""resume_rag.generation.orchestrator

Primary/fallback generation with retry, backoff and rate-limit handling.

Per request the orchestrator moves through these states::

    ATTEMPT_PRIMARY -> SUCCESS | TRANSIENT_RETRY | RATE_LIMITED | FATAL_CLIENT_ERROR
    RATE_LIMITED | primary exhausted -> ATTEMPT_FALLBACK -> SUCCESS | FAIL

- 5xx statuses and network failures are retried against the primary up to
  ``max_retries`` times, sleeping ``backoff_base ** n`` seconds before retry
  ``n`` (1-based), as long as the overall deadline allows it.
- A rate limit (HTTP 429 or ``RESOURCE_EXHAUSTED``) is not retried; its
  retry-after hint is kept and the fallback runs immediately.
- Any other client error is fatal and raised without trying the fallback.
- The fallback walks its model list in order; each failed model is logged
  and skipped.

Successful text is sanitized and, when a cache key is given, written to the
orchestrator's :class:`~resume_rag.generation.answer_cache.AnswerCache`.

Classes
-------
ModeParameters
    Sampling parameters for one answer mode.
RetryPolicy
    Retry bound, backoff base and overall deadline.
GenerationOrchestrator
    Runs the state machine above.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from resume_rag.common.errors import GenerationExhausted, RateLimited, UpstreamFatal
from resume_rag.common.schemas import AnswerMode, GenerationResult
from resume_rag.generation.answer_cache import AnswerCache
from resume_rag.generation.llm_interface import (
    BackendError,
    BackendHTTPError,
    BackendUnavailableError,
    BaseLLM,
)
from resume_rag.generation.response_decoder import ResponseDecodeError
from resume_rag.generation.sanitizer import DEFAULT_MIN_LENGTH, sanitize_answer

logger = logging.getLogger(__name__)

PRIMARY = "primary"
FALLBACK = "fallback"


@dataclass(frozen=True)
class ModeParameters:
    """Sampling parameters applied to both backends for one answer mode."""
    temperature: float
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    max_output_tokens: int = 1024
    fallback_max_tokens: int = 512

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], base: "ModeParameters") -> "ModeParameters":
        return cls(
            temperature=float(data.get("temperature", base.temperature)),
            top_p=data.get("top_p", base.top_p),
            top_k=data.get("top_k", base.top_k),
            max_output_tokens=int(data.get("max_output_tokens", base.max_output_tokens)),
            fallback_max_tokens=int(data.get("fallback_max_tokens", base.fallback_max_tokens)),
        )


DEFAULT_MODE_PARAMETERS: dict[AnswerMode, ModeParameters] = {
    AnswerMode.RECOMMEND: ModeParameters(temperature=0.25, top_p=0.95, top_k=40),
    AnswerMode.STRICT: ModeParameters(temperature=0.0, top_p=1.0, top_k=1),
}


@dataclass(frozen=True)
class RetryPolicy:
    """Retry settings for the primary backend.

    Attributes
    ----------
    max_retries : int
        Retries after the first attempt on transient failures.
    backoff_base : float
        Retry ``n`` waits ``backoff_base ** n`` seconds.
    deadline_seconds : float or None
        No retry is scheduled if it would end past this budget.
    """
    max_retries: int = 1
    backoff_base: float = 2.0
    deadline_seconds: Optional[float] = 60.0

    def delay_for(self, retry: int) -> float:
        return float(self.backoff_base) ** retry


class GenerationOrchestrator:
    """Generate answers with a primary backend and an optional fallback.

    Parameters
    ----------
    primary : BaseLLM
        Preferred backend (Gemini in the default configuration).
    fallback : BaseLLM or None, optional
        Secondary backend. Its ``models`` attribute, when present, lists the
        model identifiers to try in order.
    cache : AnswerCache or None, optional
        Answer cache owned by this orchestrator. A new one is created if omitted.
    retry_policy : RetryPolicy or None, optional
        Primary retry settings.
    mode_parameters : Mapping[AnswerMode, ModeParameters] or None, optional
        Sampling parameters per mode.
    min_answer_length : int, optional
        Passed to :func:`~resume_rag.generation.sanitizer.sanitize_answer`.
    sleep : Callable[[float], None], optional
        Used for backoff waits.
    clock : Callable[[], float], optional
        Monotonic clock used for the deadline.
    """

    def __init__(
            self,
            primary: BaseLLM,
            fallback: Optional[BaseLLM] = None,
            cache: Optional[AnswerCache] = None,
            retry_policy: Optional[RetryPolicy] = None,
            mode_parameters: Optional[Mapping[AnswerMode, ModeParameters]] = None,
            min_answer_length: int = DEFAULT_MIN_LENGTH,
            sleep: Callable[[float], None] = time.sleep,
            clock: Callable[[], float] = time.monotonic,
        ):
        self.primary = primary
        self.fallback = fallback
        self.cache = cache if cache is not None else AnswerCache()
        self.retry_policy = retry_policy or RetryPolicy()
        self.mode_parameters = dict(DEFAULT_MODE_PARAMETERS)
        self.mode_parameters.update(mode_parameters or {})
        self.min_answer_length = min_answer_length
        self._sleep = sleep
        self._clock = clock

    @classmethod
    def from_config(
            cls,
            config: Mapping[str, Any],
            primary: BaseLLM,
            fallback: Optional[BaseLLM] = None,
            cache: Optional[AnswerCache] = None,
        ) -> "GenerationOrchestrator":
        """Build an orchestrator from the ``generation`` configuration section."""
        cfg = dict(config or {})
        deadline = cfg.get("deadline_seconds", 60.0)
        policy = RetryPolicy(
            max_retries=max(0, int(cfg.get("max_retries", 1))),
            backoff_base=float(cfg.get("backoff_base", 2.0)),
            deadline_seconds=float(deadline) if deadline is not None else None,
        )

        modes: dict[AnswerMode, ModeParameters] = {}
        for name, section in (cfg.get("modes") or {}).items():
            mode = AnswerMode.parse(name)
            modes[mode] = ModeParameters.from_dict(section or {}, DEFAULT_MODE_PARAMETERS[mode])

        return cls(
            primary=primary,
            fallback=fallback,
            cache=cache,
            retry_policy=policy,
            mode_parameters=modes,
            min_answer_length=int(cfg.get("min_answer_length", DEFAULT_MIN_LENGTH)),
        )

    def generate(
            self,
            prompt: str,
            mode: AnswerMode | str = AnswerMode.RECOMMEND,
            cache_key: Optional[str] = None,
        ) -> GenerationResult:
        """Generate a sanitized answer for ``prompt``.

        Parameters
        ----------
        prompt : str
            Fully assembled grounding prompt.
        mode : AnswerMode or str, optional
            Selects sampling parameters.
        cache_key : str or None, optional
            When given, the answer is stored under this key on success.

        Returns
        -------
        GenerationResult
            Sanitized text with the backend and model that produced it.

        Raises
        ------
        UpstreamFatal
            The primary rejected the request with a non-retryable client error.
        RateLimited
            The primary was rate-limited and no fallback produced an answer.
        GenerationExhausted
            Every attempt failed for any other reason.
        """
        mode = AnswerMode.parse(mode)
        params = self.mode_parameters[mode]
        rate_limit: Optional[BackendHTTPError] = None
        primary_error: Optional[Exception] = None

        try:
            text = self._call_primary(prompt, params)
            return self._finish(text, PRIMARY, getattr(self.primary, "model_name", None), cache_key)
        except BackendHTTPError as e:
            if e.is_rate_limited:
                logger.warning("Primary backend rate-limited (retry after %s s); switching to fallback", e.retry_after)
                rate_limit = e
            elif e.is_server_error:
                primary_error = e
            else:
                logger.error("Primary backend rejected the request: %s", e.message)
                raise UpstreamFatal(
                    e.message,
                    status_code=e.status_code,
                    details={"status": e.status},
                ) from e
        except (BackendError, ResponseDecodeError) as e:
            primary_error = e

        if primary_error is not None:
            logger.warning("Primary backend failed: %s", primary_error)

        fallback = self._call_fallback(prompt, params)
        if fallback is not None:
            text, model = fallback
            return self._finish(text, FALLBACK, model, cache_key)

        if rate_limit is not None:
            raise RateLimited(
                "The AI service is rate-limited. Please try again later.",
                retry_after=rate_limit.retry_after,
                details={"status_code": rate_limit.status_code, "status": rate_limit.status},
            )
        raise GenerationExhausted(
            "Failed to generate answer",
            details={"error": str(primary_error) if primary_error else None},
        )

    def _call_primary(self, prompt: str, params: ModeParameters) -> str:
        policy = self.retry_policy
        started = self._clock()
        retry = 0
        while True:
            try:
                return self.primary.generate(
                    prompt,
                    temperature=params.temperature,
                    max_output_tokens=params.max_output_tokens,
                    top_p=params.top_p,
                    top_k=params.top_k,
                )
            except (BackendUnavailableError, BackendHTTPError) as e:
                transient = isinstance(e, BackendUnavailableError) or (e.is_server_error and not e.is_rate_limited)
                if not transient or retry >= policy.max_retries:
                    raise
                retry += 1
                delay = policy.delay_for(retry)
                if policy.deadline_seconds is not None and self._clock() - started + delay > policy.deadline_seconds:
                    logger.warning("Deadline of %.1f s reached; not retrying primary backend", policy.deadline_seconds)
                    raise
                logger.info("Primary attempt %d failed (%s); retrying in %.1f s", retry, e, delay)
                self._sleep(delay)

    def _call_fallback(self, prompt: str, params: ModeParameters) -> Optional[tuple[str, Optional[str]]]:
        if self.fallback is None:
            logger.info("No fallback backend configured")
            return None

        models = list(getattr(self.fallback, "models", None) or [None])
        for model in models:
            try:
                text = self.fallback.generate(
                    prompt,
                    model=model,
                    temperature=params.temperature,
                    max_tokens=params.fallback_max_tokens,
                )
            except Exception as e:
                logger.warning("Fallback model %s failed: %s", model, e)
                continue
            if text and text.strip():
                return text, model
            logger.warning("Fallback model %s returned no text", model)
        return None

    def _finish(self, text: str, backend: str, model: Optional[str], cache_key: Optional[str]) -> GenerationResult:
        answer = sanitize_answer(text, min_length=self.min_answer_length)
        if cache_key is not None:
            self.cache.put(cache_key, answer, backend=backend, model=model)
        return GenerationResult(text=answer, backend=backend, model=model)


__all__ = [
    "DEFAULT_MODE_PARAMETERS",
    "GenerationOrchestrator",
    "ModeParameters",
    "RetryPolicy",
]
