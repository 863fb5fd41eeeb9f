"""resume_rag.generation.llm_interface

Interface and factory for text-generation backends.

Two backends are supported: Google Gemini's ``generateContent`` REST API as
the primary, and any OpenAI-compatible chat completions endpoint (Groq by
default) as the fallback. Backends raise the typed errors defined here so the
orchestrator can tell transient failures, rate limits and rejections apart.

Classes
-------
BaseLLM
    Abstract interface used by the generation orchestrator.
GeminiLLM
    Gemini ``generateContent`` over HTTP via ``requests``.
OpenAIChatLLM
    OpenAI-compatible chat completions via LangChain's ``ChatOpenAI``.
BackendError
    Base class for backend failures.
BackendHTTPError
    Non-success HTTP status or error body.
BackendUnavailableError
    Network failure or timeout (no usable response).

Functions
---------
create_llm
    Construct a backend from a configuration mapping.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Sequence

import requests
from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI

from resume_rag.config.global_config import is_unset, resolve_setting
from resume_rag.generation.response_decoder import (
    CandidateText,
    ErrorPayload,
    ResponseDecodeError,
    decode_response,
    parse_retry_delay,
)

logger = logging.getLogger(__name__)

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
GROQ_API_BASE = "https://api.groq.com/openai/v1"
DEFAULT_FALLBACK_MODELS = ("llama-3.1-8b-instant", "llama-3.3-70b-versatile")
DEFAULT_TIMEOUT_S = 30.0

RATE_LIMIT_STATUS = "RESOURCE_EXHAUSTED"


class BackendError(Exception):
    """Base class for generation backend failures."""


class BackendHTTPError(BackendError):
    """The backend answered with an error status or error body.

    Attributes
    ----------
    status_code : int or None
        HTTP status (or error ``code`` from the body).
    status : str or None
        Symbolic error status, e.g. ``"RESOURCE_EXHAUSTED"``.
    retry_after : float or None
        Suggested retry delay in seconds.
    """

    def __init__(
            self,
            message: str,
            status_code: Optional[int] = None,
            status: Optional[str] = None,
            retry_after: Optional[float] = None,
        ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.status = status
        self.retry_after = retry_after

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429 or (self.status or "").upper() == RATE_LIMIT_STATUS

    @property
    def is_server_error(self) -> bool:
        return self.status_code is not None and 500 <= self.status_code < 600


class BackendUnavailableError(BackendError):
    """No response was received (connection error, timeout)."""


class BaseLLM(ABC):
    """Abstract interface for text generation backends.

    Concrete implementations wrap provider-specific clients and expose a
    single :meth:`generate` call returning plain text.
    """

    name: str = "llm"

    @classmethod
    @abstractmethod
    def from_config_dict(cls, config: Mapping[str, Any]) -> "BaseLLM":
        """Create a backend from a configuration mapping."""

    @abstractmethod
    def generate(self, prompt: str, **kwargs: Any) -> str:
        """Generate text for ``prompt``.

        Raises
        ------
        BackendError
            If the backend fails or returns no usable text.
        """


class GeminiLLM(BaseLLM):
    """Gemini ``generateContent`` client.

    Parameters
    ----------
    api_key : str
        Gemini API key, sent as the ``key`` query parameter.
    model_name : str, optional
        Model identifier. Defaults to ``gemini-2.5-flash``.
    api_base : str, optional
        REST base URL.
    timeout : float, optional
        Per-request timeout in seconds.
    session : requests.Session, optional
        Session used for HTTP calls (handy for tests).
    """

    name = "gemini"

    def __init__(
            self,
            api_key: str,
            model_name: str = DEFAULT_GEMINI_MODEL,
            api_base: str = GEMINI_API_BASE,
            timeout: float = DEFAULT_TIMEOUT_S,
            session: Optional[requests.Session] = None,
        ):
        if is_unset(api_key):
            raise ValueError("GeminiLLM requires an api_key")
        self.api_key = api_key
        self.model_name = model_name
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config_dict(cls, config: Mapping[str, Any]) -> "GeminiLLM":
        return cls(
            api_key=config.get("api_key"),
            model_name=resolve_setting(config.get("model_name"), DEFAULT_GEMINI_MODEL),
            api_base=resolve_setting(config.get("api_base"), GEMINI_API_BASE),
            timeout=float(resolve_setting(config.get("timeout"), DEFAULT_TIMEOUT_S)),
        )

    @property
    def endpoint(self) -> str:
        return f"{self.api_base}/models/{self.model_name}:generateContent"

    def build_payload(
            self,
            prompt: str,
            temperature: float = 0.25,
            max_output_tokens: int = 1024,
            top_p: Optional[float] = None,
            top_k: Optional[int] = None,
            candidate_count: int = 1,
        ) -> dict[str, Any]:
        generation_config: dict[str, Any] = {
            "temperature": temperature,
            "maxOutputTokens": max_output_tokens,
            "candidateCount": candidate_count,
        }
        if top_p is not None:
            generation_config["topP"] = top_p
        if top_k is not None:
            generation_config["topK"] = top_k
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }

    def generate(self, prompt: str, **kwargs: Any) -> str:
        """Call ``generateContent`` and return the first candidate's text.

        Keyword arguments are forwarded to :meth:`build_payload`.

        Raises
        ------
        BackendUnavailableError
            On connection errors, timeouts and broken transfers.
        BackendHTTPError
            On non-2xx statuses or an error body.
        ResponseDecodeError
            When a 2xx body has an unknown shape.
        BackendError
            When the decoded text is empty.
        """
        payload = self.build_payload(prompt, **kwargs)
        try:
            response = self.session.post(
                self.endpoint,
                params={"key": self.api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise BackendUnavailableError(f"Gemini request failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.ok:
            raise self._http_error(response, body)

        decoded = decode_response(body)
        if isinstance(decoded, ErrorPayload):
            raise BackendHTTPError(
                decoded.message or "Gemini returned an error body",
                status_code=decoded.code,
                status=decoded.status,
                retry_after=decoded.retry_after,
            )
        text = decoded.text if isinstance(decoded, CandidateText) else ""
        if not text.strip():
            raise BackendError("Gemini returned an empty candidate")
        return text

    def _http_error(self, response: requests.Response, body: Any) -> BackendHTTPError:
        status_code = response.status_code
        status = None
        message = f"Gemini API error {status_code}"
        retry_after = None

        try:
            decoded = decode_response(body)
        except ResponseDecodeError:
            decoded = None
        if isinstance(decoded, ErrorPayload):
            status = decoded.status
            retry_after = decoded.retry_after
            if decoded.message:
                message = f"{message}: {decoded.message}"
        elif response.text:
            message = f"{message}: {response.text[:500]}"

        if retry_after is None:
            retry_after = parse_retry_delay(response.headers.get("Retry-After"))

        return BackendHTTPError(message, status_code=status_code, status=status, retry_after=retry_after)


class OpenAIChatLLM(BaseLLM):
    """Chat completions against an OpenAI-compatible endpoint.

    Holds an ordered list of model identifiers; :meth:`generate` targets one
    of them per call. LangChain clients are created lazily per
    ``(model, temperature, max_tokens)`` and reused.

    Parameters
    ----------
    api_key : str
        API key for the endpoint (``GROQ_API_KEY`` by default).
    models : Sequence[str]
        Model identifiers, most preferred first.
    api_base : str, optional
        Base URL. Defaults to Groq's OpenAI-compatible endpoint.
    timeout : float, optional
        Per-request timeout in seconds.
    """

    name = "openai_chat"

    def __init__(
            self,
            api_key: str,
            models: Sequence[str] = DEFAULT_FALLBACK_MODELS,
            api_base: str = GROQ_API_BASE,
            timeout: float = DEFAULT_TIMEOUT_S,
        ):
        if is_unset(api_key):
            raise ValueError("OpenAIChatLLM requires an api_key")
        self.api_key = api_key
        self.models = clean_model_list(models) or list(DEFAULT_FALLBACK_MODELS)
        self.api_base = api_base
        self.timeout = timeout
        self._clients: dict[tuple[str, float, int], ChatOpenAI] = {}

    @classmethod
    def from_config_dict(cls, config: Mapping[str, Any]) -> "OpenAIChatLLM":
        models = config.get("models")
        if isinstance(models, str):
            models = [models]
        return cls(
            api_key=config.get("api_key"),
            models=models or DEFAULT_FALLBACK_MODELS,
            api_base=resolve_setting(config.get("api_base"), GROQ_API_BASE),
            timeout=float(resolve_setting(config.get("timeout"), DEFAULT_TIMEOUT_S)),
        )

    def _client(self, model: str, temperature: float, max_tokens: int) -> ChatOpenAI:
        key = (model, float(temperature), int(max_tokens))
        client = self._clients.get(key)
        if client is None:
            client = ChatOpenAI(
                model=model,
                base_url=self.api_base,
                api_key=self.api_key,
                temperature=temperature,
                max_tokens=max_tokens,
                timeout=self.timeout,
                max_retries=0,
            )
            self._clients[key] = client
        return client

    def generate(
            self,
            prompt: str,
            model: Optional[str] = None,
            temperature: float = 0.25,
            max_tokens: int = 512,
            **kwargs: Any,
        ) -> str:
        """Send ``prompt`` as a single user message and return the reply.

        Raises
        ------
        BackendError
            If the call fails or the reply is empty.
        """
        model = model or self.models[0]
        try:
            message = self._client(model, temperature, max_tokens).invoke([HumanMessage(content=prompt)])
        except Exception as e:
            raise BackendError(f"Chat completion with {model!r} failed: {type(e).__name__}: {e}") from e

        content = message.content if isinstance(message.content, str) else ""
        if not content.strip():
            raise BackendError(f"Chat completion with {model!r} returned no content")
        return content


def clean_model_list(models: Sequence[Any] | None) -> list[str]:
    """Drop unset entries and duplicates from ``models``, keeping order."""
    cleaned: list[str] = []
    for model in models or []:
        if is_unset(model):
            continue
        name = str(model).strip()
        if name not in cleaned:
            cleaned.append(name)
    return cleaned


_REGISTRY: dict[str, type[BaseLLM]] = {
    "gemini": GeminiLLM,
    "google": GeminiLLM,
    "openai_chat": OpenAIChatLLM,
    "chat_openai": OpenAIChatLLM,
    "groq": OpenAIChatLLM,
}


def create_llm(config: Mapping[str, Any]) -> BaseLLM:
    """Create a backend from a configuration mapping.

    The implementation is chosen by the ``type`` (or ``kind``/``provider``)
    key: ``gemini`` or ``openai_chat`` (alias ``groq``).

    Raises
    ------
    TypeError
        If ``config`` is not a mapping.
    ValueError
        If the discriminator is missing or unknown, or required keys are unset.
    """
    if not isinstance(config, Mapping):
        raise TypeError(f"create_llm expected a mapping/dict, got {type(config)}")

    kind_raw = config.get("type") or config.get("kind") or config.get("provider")
    if not kind_raw:
        raise ValueError("LLM config is missing a 'type' field (e.g. type: gemini).")
    kind = str(kind_raw).strip().lower().replace("-", "_")

    cls = _REGISTRY.get(kind)
    if cls is None:
        raise ValueError(f"Unknown LLM type {kind_raw!r}. Supported types: {sorted(_REGISTRY)}.")
    return cls.from_config_dict(config)


__all__ = [
    "BackendError",
    "BackendHTTPError",
    "BackendUnavailableError",
    "BaseLLM",
    "GeminiLLM",
    "OpenAIChatLLM",
    "clean_model_list",
    "create_llm",
]
