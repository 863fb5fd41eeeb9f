"""resume_rag.retrieval.text_splitter

Sentence-bounded chunking of extracted resume text.

The splitter breaks text at sentence-terminal punctuation followed by
whitespace and greedily packs consecutive sentences into chunks of at most
``chunk_size`` characters. Sentences are never cut: a single sentence longer
than ``chunk_size`` becomes its own oversized chunk.

Functions
---------
split_sentences
    Split text into trimmed, non-empty sentences.
split_into_chunks
    Pack sentences into size-bounded chunks.
"""

from __future__ import annotations

import re

DEFAULT_CHUNK_SIZE = 500
SENTENCE_SEPARATOR = " "

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")


def split_sentences(text: str) -> list[str]:
    """Split ``text`` into sentences.

    The terminal punctuation stays attached to its sentence. Empty pieces are
    dropped and the remaining ones are trimmed.

    Parameters
    ----------
    text : str
        Raw text to split.

    Returns
    -------
    list[str]
        Sentences in document order.
    """
    if not text:
        return []
    return [s.strip() for s in _SENTENCE_BOUNDARY.split(text) if s.strip()]


def split_into_chunks(text: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[str]:
    """Split ``text`` into sentence-bounded chunks.

    Sentences are appended to a running buffer (joined with a single space).
    When the next sentence would push a non-empty buffer past ``chunk_size``,
    the buffer is emitted as a chunk and a new buffer starts with that
    sentence.

    Parameters
    ----------
    text : str
        Extracted document text.
    chunk_size : int, optional
        Target maximum chunk length in characters. Defaults to ``500``.

    Returns
    -------
    list[str]
        Non-empty, trimmed chunks in document order. Blank input yields an
        empty list; any other input yields at least one chunk.

    Raises
    ------
    ValueError
        If ``chunk_size`` is not positive.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be a positive integer, got {chunk_size!r}")
    if not text or not text.strip():
        return []

    chunks: list[str] = []
    buffer = ""
    for sentence in split_sentences(text):
        candidate = f"{buffer}{SENTENCE_SEPARATOR}{sentence}" if buffer else sentence
        if buffer and len(candidate) > chunk_size:
            chunks.append(buffer)
            buffer = sentence
        else:
            buffer = candidate
    if buffer:
        chunks.append(buffer)

    return chunks or [text.strip()]


__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "split_sentences",
    "split_into_chunks",
]
