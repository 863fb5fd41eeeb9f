"""resume_rag.common.schemas

Core data schemas shared across the question-answering pipeline.

These lightweight dataclasses describe the shapes passed between upload,
chunking, retrieval, generation and the HTTP layer.

Classes
-------
AnswerMode
    How the answer should be generated (``recommend`` or ``strict``).
Document
    The single uploaded resume and its derived chunks.
ScoredChunk
    A chunk paired with its relevance score and input position.
GenerationResult
    Sanitized text produced by a generation backend.
QueryResult
    Final answer returned to callers of the pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


class AnswerMode(str, Enum):
    """Answering style requested by the caller.

    ``recommend`` allows bounded creative latitude (e.g. suggesting next
    steps); ``strict`` asks for deterministic, extract-only answers.
    """

    RECOMMEND = "recommend"
    STRICT = "strict"

    @classmethod
    def parse(cls, value: "AnswerMode | str | None") -> "AnswerMode":
        """Coerce ``value`` into an :class:`AnswerMode`.

        ``None`` and empty strings map to :attr:`RECOMMEND`.

        Raises
        ------
        ValueError
            If ``value`` names no known mode.
        """
        if value is None or value == "":
            return cls.RECOMMEND
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Unknown answer mode: {value!r}")
        try:
            return cls(value.strip().lower())
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown answer mode {value!r}. Expected one of: {allowed}") from None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Document:
    """Container for the uploaded resume.

    Attributes
    ----------
    text : str
        Full extracted text of the resume.
    chunks : List[str]
        Sentence-bounded chunks derived from ``text`` at upload time.
    created_at : datetime
        UTC timestamp of the upload.
    source_name : str or None
        Original file name, when known.
    metadata : Dict[str, Any]
        Arbitrary extra information (e.g. ``{"kind": "pdf"}``).
    """
    text: str
    chunks: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utcnow)
    source_name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "chunks": list(self.chunks),
            "createdAt": self.created_at.isoformat(),
            "sourceName": self.source_name,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Document":
        created_raw = data.get("createdAt")
        created_at = datetime.fromisoformat(created_raw) if created_raw else _utcnow()
        return cls(
            text=data.get("text", ""),
            chunks=list(data.get("chunks") or []),
            created_at=created_at,
            source_name=data.get("sourceName"),
            metadata=dict(data.get("metadata") or {}),
        )


@dataclass(frozen=True)
class ScoredChunk:
    """A chunk with its cosine relevance score.

    Attributes
    ----------
    text : str
        Chunk text.
    score : float
        Cosine similarity to the question, in ``[0, 1]``.
    position : int
        Index of the chunk in the list that was ranked.
    """
    text: str
    score: float
    position: int


@dataclass
class GenerationResult:
    """Sanitized answer text and the backend that produced it."""
    text: str
    backend: str
    model: Optional[str] = None


@dataclass
class QueryResult:
    """Answer returned by :class:`~resume_rag.pipelines.resume_pipeline.ResumeQAPipeline`."""
    answer: str
    relevant_chunks: int
    mode: AnswerMode = AnswerMode.RECOMMEND
    cached: bool = False
    backend: Optional[str] = None
