"""resume_rag

Resume question-answering package.

This package answers natural-language questions about a single uploaded
resume. It splits the resume into sentence-aligned chunks, ranks them
lexically against the question and grounds a generative backend on the
best matches.

Attributes
----------
__version__ : str
    Package version string. Defaults to ``"0.0.0-dev"`` when package metadata is
    unavailable.

Modules
-------
config
    Global configuration loader and cached accessors.
app
    Application container, FastAPI service and composition root.
pipelines
    End-to-end question answering (retrieval -> prompting -> generation).
retrieval
    Resume loading, chunking, lexical vectors, ranking and the document store.
generation
    Prompt templates, generation backends, retry/fallback orchestration,
    answer sanitizing and the answer cache.
common
    Shared schemas, errors and tokenisation.

Exports
-------
GlobalConfig
    Global configuration loader and accessor.
ResumeRagContainer
    Cached runtime component container for applications.
build_container
    Factory function to construct a configured :class:`~resume_rag.app.container.ResumeRagContainer`.
ResumeQAPipeline
    End-to-end resume question-answering pipeline.
AnswerMode
    Requested answering style.
Document
    Uploaded resume schema.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("resume-rag")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

from .config import GlobalConfig
from .app.container import ResumeRagContainer, build_container
from .pipelines.resume_pipeline import ResumeQAPipeline
from .common import AnswerMode, Document

__all__ = [
    "__version__",
    "GlobalConfig",
    "ResumeRagContainer",
    "build_container",
    "ResumeQAPipeline",
    "AnswerMode",
    "Document",
]
