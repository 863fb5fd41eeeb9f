"""resume_rag.app.container

Composition root for the resume question-answering system.

This module is the single place where concrete implementations are wired
together from configuration (document store, retriever, prompt builder,
generation backends, answer cache, orchestrator and pipeline). Components are
constructed lazily and cached on first access.

Notes
-----
Importing this module performs no network calls and reads no files.

Examples
--------
>>> from resume_rag.config import GlobalConfig
>>> from resume_rag.app.container import build_container
>>> c = build_container(GlobalConfig.load("config.yaml"))
>>> c.pipeline.run("What languages do I know?").answer
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Optional

from resume_rag.common.errors import ConfigurationError
from resume_rag.config import GlobalConfig, is_unset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResumeRagContainer:
    """Cached runtime components built from a :class:`GlobalConfig`.

    Parameters
    ----------
    config : GlobalConfig
        Loaded configuration.
    """

    config: GlobalConfig

    @cached_property
    def document_store(self) -> Any:
        from resume_rag.retrieval.document_store import create_document_store

        return create_document_store(self.config.document_store)

    @cached_property
    def prompt_builder(self) -> Any:
        """Return the prompt builder with packaged and configured templates.

        Relative prompt file paths resolve against the config file directory.
        """
        from resume_rag.generation.prompt_builder import PromptBuilder

        builder = PromptBuilder.with_defaults()
        base_dir = self.config.config_path.parent if self.config.config_path else None
        for source in self.config.prompts:
            builder.register_from_source(source, base_dir=base_dir)
        return builder

    @cached_property
    def retriever(self) -> Any:
        from resume_rag.retrieval.retriever import LexicalRetriever

        return LexicalRetriever(top_k=self.config.top_k)

    @cached_property
    def answer_cache(self) -> Any:
        from resume_rag.generation.answer_cache import AnswerCache

        return AnswerCache(ttl_seconds=self.config.cache_ttl_seconds)

    @cached_property
    def primary_llm(self) -> Any:
        """Return the primary backend.

        Raises
        ------
        ConfigurationError
            If the primary backend has no API key.
        """
        from resume_rag.generation.llm_interface import create_llm

        section = dict(self.config.primary_llm)
        if is_unset(section.get("api_key")):
            raise ConfigurationError("GEMINI_API_KEY not set in env")
        return create_llm(section)

    @cached_property
    def fallback_llm(self) -> Optional[Any]:
        """Return the fallback backend, or ``None`` when it has no API key."""
        from resume_rag.generation.llm_interface import create_llm

        section = self.config.fallback_llm
        if section is None or is_unset(section.get("api_key")):
            logger.info("Fallback backend not configured")
            return None
        return create_llm(dict(section))

    @cached_property
    def orchestrator(self) -> Any:
        from resume_rag.generation.orchestrator import GenerationOrchestrator

        return GenerationOrchestrator.from_config(
            self.config.generation,
            primary=self.primary_llm,
            fallback=self.fallback_llm,
            cache=self.answer_cache,
        )

    @cached_property
    def pipeline(self) -> Any:
        from resume_rag.pipelines.resume_pipeline import ResumeQAPipeline

        return ResumeQAPipeline(
            document_store=self.document_store,
            retriever=self.retriever,
            orchestrator=self.orchestrator,
            prompt_builder=self.prompt_builder,
            chunk_size=self.config.chunk_size,
        )


def build_container(config: GlobalConfig) -> ResumeRagContainer:
    """Create a :class:`ResumeRagContainer` for ``config``."""
    return ResumeRagContainer(config=config)


__all__ = ["ResumeRagContainer", "build_container"]
