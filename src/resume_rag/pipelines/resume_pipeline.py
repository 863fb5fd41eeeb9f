"""resume_rag.pipelines.resume_pipeline

End-to-end question answering over the uploaded resume.

Classes
-------
ResumeQAPipeline
    Orchestrates validation -> greeting check -> document load -> ranking
    -> cache lookup -> prompt assembly -> generation.

Functions
---------
is_greeting
    Whether a question is a plain greeting that needs no retrieval.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from resume_rag.common.errors import InvalidInput, NotFound
from resume_rag.common.schemas import AnswerMode, QueryResult
from resume_rag.generation.orchestrator import GenerationOrchestrator
from resume_rag.generation.prompt_builder import PromptBuilder, assemble_prompt
from resume_rag.retrieval.document_store import DocumentStore
from resume_rag.retrieval.types import Retriever
from resume_rag.retrieval.text_splitter import DEFAULT_CHUNK_SIZE, split_into_chunks

logger = logging.getLogger(__name__)

GREETING_ANSWER = (
    "Hi! I can answer questions about your uploaded resume. "
    "Try asking things like \"What are my strongest skills?\", "
    "\"Which projects have I worked on?\" or \"What roles would suit me next?\"."
)
NO_RELEVANT_INFO_ANSWER = "I couldn't find relevant information in your resume to answer this question."

_GREETING = re.compile(
    r"^\s*(?:hello|hi|hey|hiya|howdy|greetings|good\s+(?:morning|afternoon|evening))"
    r"(?:\s+there)?[\s!.?,;:~]*$",
    re.IGNORECASE,
)


def is_greeting(question: str) -> bool:
    """Return ``True`` if ``question`` is only a greeting such as ``"Hello!"``."""
    return bool(_GREETING.match(question or ""))


class ResumeQAPipeline:
    """Answer questions about the single stored resume.

    The pipeline holds no per-request state and is safe to reuse across
    requests.

    Parameters
    ----------
    document_store : DocumentStore
        Slot holding the uploaded resume.
    retriever : Retriever
        Ranks chunks against the question.
    orchestrator : GenerationOrchestrator
        Generates answers and owns the answer cache.
    prompt_builder : PromptBuilder or None, optional
        Template registry; packaged defaults are used when ``None``.
    chunk_size : int, optional
        Used only to re-split documents stored without chunks.
    """

    def __init__(
            self,
            document_store: DocumentStore,
            retriever: Retriever,
            orchestrator: GenerationOrchestrator,
            prompt_builder: Optional[PromptBuilder] = None,
            chunk_size: int = DEFAULT_CHUNK_SIZE,
        ):
        self.document_store = document_store
        self.retriever = retriever
        self.orchestrator = orchestrator
        self.prompt_builder = prompt_builder or PromptBuilder.with_defaults()
        self.chunk_size = chunk_size

    @property
    def cache(self):
        return self.orchestrator.cache

    def run(self, question: Any, mode: AnswerMode | str | None = None) -> QueryResult:
        """Answer ``question`` from the stored resume.

        Parameters
        ----------
        question : Any
            The user's question. Must be a non-blank string.
        mode : AnswerMode, str or None, optional
            ``recommend`` (default) or ``strict``.

        Returns
        -------
        QueryResult
            The answer and how many chunks grounded it.

        Raises
        ------
        InvalidInput
            If the question is missing or blank, or the mode is unknown.
        NotFound
            If no resume has been uploaded.
        RateLimited, UpstreamFatal, GenerationExhausted
            Propagated from the generation orchestrator.
        """
        if not isinstance(question, str) or not question.strip():
            raise InvalidInput("Please provide a valid question")
        try:
            answer_mode = AnswerMode.parse(mode)
        except ValueError as e:
            raise InvalidInput(str(e)) from e

        if is_greeting(question):
            return QueryResult(answer=GREETING_ANSWER, relevant_chunks=0, mode=answer_mode)

        document = self.document_store.load()
        if document is None:
            raise NotFound("No resume found. Upload a resume first.")

        chunks = document.chunks or split_into_chunks(document.text, chunk_size=self.chunk_size)
        ranked = [item.text for item in self.retriever.retrieve(question, chunks)]
        if not ranked:
            return QueryResult(answer=NO_RELEVANT_INFO_ANSWER, relevant_chunks=0, mode=answer_mode)

        cache_key = self.cache.key_for(question, answer_mode)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Answer cache hit for %r", cache_key)
            return QueryResult(answer=cached, relevant_chunks=len(ranked), mode=answer_mode, cached=True)

        prompt = assemble_prompt(question, ranked, answer_mode, builder=self.prompt_builder)
        result = self.orchestrator.generate(prompt, answer_mode, cache_key=cache_key)

        return QueryResult(
            answer=result.text,
            relevant_chunks=len(ranked),
            mode=answer_mode,
            backend=result.backend,
        )

    def __call__(self, question: Any, mode: AnswerMode | str | None = None) -> QueryResult:
        return self.run(question, mode)


__all__ = [
    "GREETING_ANSWER",
    "NO_RELEVANT_INFO_ANSWER",
    "ResumeQAPipeline",
    "is_greeting",
]
