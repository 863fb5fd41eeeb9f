"""resume_rag.retrieval.vectorizer

Term-frequency vectors over a per-query vocabulary.

A vocabulary is an ordered list of distinct tokens. Vectors are lists of
integer counts aligned with that order, so two vectors are comparable only
when they were built from the same vocabulary.

Functions
---------
build_vocabulary
    Collect distinct tokens from several texts in first-appearance order.
vectorize
    Turn a text into a count vector over a vocabulary.
cosine_similarity
    Cosine of the angle between two count vectors.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

from resume_rag.common.tokenisation import count_tokens, tokenize


def build_vocabulary(texts: Iterable[str]) -> list[str]:
    """Return the distinct tokens of ``texts`` in first-appearance order.

    Examples
    --------
    >>> build_vocabulary(["Go and Rust", "rust, python"])
    ['go', 'and', 'rust', 'python']
    """
    # dict preserves insertion order, giving a stable vocabulary ordering
    seen: dict[str, None] = {}
    for text in texts:
        for token in tokenize(text):
            seen.setdefault(token, None)
    return list(seen)


def vectorize(text: str, vocabulary: Sequence[str]) -> list[int]:
    """Return the term-frequency vector of ``text`` over ``vocabulary``.

    Parameters
    ----------
    text : str
        Text to vectorize.
    vocabulary : Sequence[str]
        Ordered vocabulary. Terms missing from ``text`` count as ``0``.

    Returns
    -------
    list[int]
        One count per vocabulary term, ``len(vocabulary)`` long.
    """
    counts = count_tokens(text)
    return [counts.get(term, 0) for term in vocabulary]


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Return the cosine similarity of ``a`` and ``b``.

    Returns ``0.0`` when either vector has zero norm or when the vectors have
    different lengths.
    """
    if len(a) != len(b):
        return 0.0

    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y

    if norm_a == 0 or norm_b == 0:
        return 0.0
    score = dot / (math.sqrt(norm_a) * math.sqrt(norm_b))
    # counts are non-negative; clamp float rounding above 1.0
    return min(score, 1.0)


__all__ = ["build_vocabulary", "vectorize", "cosine_similarity"]
