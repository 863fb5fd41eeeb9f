"""
Common building blocks shared across the question-answering stack.

This package provides small, widely-used primitives (schemas, the error
taxonomy and lexical tokenisation) imported by multiple layers of the system.

Classes
-------
AnswerMode
    Requested answering style.
Document
    The uploaded resume and its chunks.
ScoredChunk
    Chunk with relevance score.
GenerationResult
    Sanitized backend output.
QueryResult
    Final pipeline answer.

See Also
--------
resume_rag.common.errors
    Exceptions surfaced by the pipeline.
resume_rag.common.tokenisation
    Lowercase word tokenizer used by the vectorizer.
"""
from __future__ import annotations

from .schemas import (
    AnswerMode,
    Document,
    GenerationResult,
    QueryResult,
    ScoredChunk,
)

__all__ = [
    "AnswerMode",
    "Document",
    "GenerationResult",
    "QueryResult",
    "ScoredChunk",
]
