"""resume_rag.retrieval.types

Shared type definitions for the retrieval layer.

Classes
-------
Retriever
    Protocol defining the minimal retriever interface.
"""

from typing import List, Protocol, Sequence

from resume_rag.common.schemas import ScoredChunk


class Retriever(Protocol):
    """Protocol defining the retriever interface.

    A retriever ranks a list of chunk strings against a natural-language
    question and returns the most relevant ones, best first.

    Methods
    -------
    retrieve
        Rank chunks for a question.
    """
    def retrieve(
            self,
            query: str,
            chunks: Sequence[str],
            top_k: int | None = None,
        ) -> List[ScoredChunk]:
        """Rank ``chunks`` for ``query``.

        Parameters
        ----------
        query : str
            Natural-language question.
        chunks : Sequence[str]
            Candidate chunks in document order.
        top_k : int or None, optional
            Maximum number of results. Implementations supply a default.

        Returns
        -------
        list[ScoredChunk]
            Ranked chunks with scores, best first.
        """
        ...
