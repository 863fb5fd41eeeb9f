"""resume_rag.retrieval.retriever

Lexical vector-space retrieval over resume chunks.

Each ranking call builds a fresh vocabulary from the question and the
candidate chunks, converts every text into a term-frequency vector over it,
and scores chunks by cosine similarity to the question.

Classes
-------
LexicalRetriever
    Cosine-similarity ranker with a stable tie-break.

Functions
---------
rank
    Convenience wrapper returning only the ranked chunk texts.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from resume_rag.common.schemas import ScoredChunk
from resume_rag.retrieval.vectorizer import build_vocabulary, cosine_similarity, vectorize

DEFAULT_TOP_K = 3


class LexicalRetriever:
    """Rank chunks against a question with a term-frequency cosine model.

    Ties keep the relative order of the input chunks, so ranking is fully
    deterministic. When no chunk shares a token with the question every score
    is ``0.0`` and the first ``top_k`` chunks are returned in document order.

    Parameters
    ----------
    top_k : int, optional
        Default number of chunks returned by :meth:`retrieve`. Defaults to ``3``.

    Raises
    ------
    ValueError
        If ``top_k`` is smaller than ``1``.
    """

    def __init__(self, top_k: int = DEFAULT_TOP_K):
        self.top_k = _validate_top_k(top_k)

    def score(self, query: str, chunks: Sequence[str]) -> List[ScoredChunk]:
        """Score every chunk against ``query``.

        Parameters
        ----------
        query : str
            Natural-language question.
        chunks : Sequence[str]
            Candidate chunks.

        Returns
        -------
        list[ScoredChunk]
            One entry per chunk, in input order.
        """
        if not chunks:
            return []

        vocabulary = build_vocabulary([query, *chunks])
        query_vec = vectorize(query, vocabulary)

        return [
            ScoredChunk(
                text=chunk,
                score=cosine_similarity(query_vec, vectorize(chunk, vocabulary)),
                position=idx,
            )
            for idx, chunk in enumerate(chunks)
        ]

    def retrieve(
            self,
            query: str,
            chunks: Sequence[str],
            top_k: Optional[int] = None,
        ) -> List[ScoredChunk]:
        """Return the ``top_k`` most relevant chunks, best first.

        Parameters
        ----------
        query : str
            Natural-language question.
        chunks : Sequence[str]
            Candidate chunks.
        top_k : int or None, optional
            Overrides the instance default for this call.

        Returns
        -------
        list[ScoredChunk]
            At most ``top_k`` chunks sorted by descending score.
        """
        limit = self.top_k if top_k is None else _validate_top_k(top_k)
        scored = self.score(query, chunks)
        # sorted() is stable: equal scores keep their input order
        ranked = sorted(scored, key=lambda item: item.score, reverse=True)
        return ranked[:limit]


def rank(question: str, chunks: Sequence[str], top_k: int = DEFAULT_TOP_K) -> List[str]:
    """Return the texts of the ``top_k`` most relevant chunks for ``question``."""
    return [item.text for item in LexicalRetriever(top_k=top_k).retrieve(question, chunks)]


def _validate_top_k(top_k: int) -> int:
    try:
        value = int(top_k)
    except (TypeError, ValueError):
        raise ValueError(f"top_k must be an integer, got {top_k!r}") from None
    if value < 1:
        raise ValueError(f"top_k must be at least 1, got {value}")
    return value


__all__ = ["DEFAULT_TOP_K", "LexicalRetriever", "rank"]
