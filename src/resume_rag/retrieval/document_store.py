"""resume_rag.retrieval.document_store

Single-slot storage for the uploaded resume.

The system is single-tenant: exactly one :class:`~resume_rag.common.schemas.Document`
exists at a time and each upload replaces it (last write wins). Stores return
``None`` when nothing has been uploaded yet.

Classes
-------
DocumentStore
    Protocol for single-slot document stores.
InMemoryDocumentStore
    Process-local store, lost on restart.
FileDocumentStore
    JSON file store holding text, chunks and upload time.

Functions
---------
create_document_store
    Construct a store from a configuration mapping.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Mapping, Optional, Protocol

from resume_rag.common.schemas import Document

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_PATH = "data/resume.json"


class DocumentStore(Protocol):
    """Protocol for the resume slot."""

    def save(self, document: Document) -> None:
        """Replace the stored document with ``document``."""

    def load(self) -> Optional[Document]:
        """Return the stored document, or ``None`` if none was uploaded."""


class InMemoryDocumentStore:
    """Keep the resume in process memory."""

    def __init__(self, document: Optional[Document] = None):
        self._document = document

    def save(self, document: Document) -> None:
        self._document = document

    def load(self) -> Optional[Document]:
        return self._document


class FileDocumentStore:
    """Persist the resume as a JSON file.

    The file holds ``text``, ``chunks``, ``createdAt``, ``sourceName`` and
    ``metadata`` keys. Parent directories are created on first save.

    Parameters
    ----------
    path : str or Path
        Location of the JSON file.
    """

    def __init__(self, path: str | Path = DEFAULT_DOCUMENT_PATH):
        self.path = Path(path).expanduser()

    def save(self, document: Document) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # one temp file per save so concurrent writers never share a path
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_path = Path(f.name)
            try:
                json.dump(document.to_dict(), f, indent=2, ensure_ascii=False)
            except BaseException:
                f.close()
                tmp_path.unlink(missing_ok=True)
                raise
        os.replace(tmp_path, self.path)
        logger.info("Stored resume (%d chars, %d chunks) at %s", len(document.text), len(document.chunks), self.path)

    def load(self) -> Optional[Document]:
        if not self.path.exists():
            return None
        with self.path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Resume store {self.path} must contain a JSON object, got {type(data)!r}")
        return Document.from_dict(data)


def create_document_store(config: Mapping[str, Any] | None = None) -> DocumentStore:
    """Create a document store from configuration.

    Parameters
    ----------
    config : Mapping[str, Any] or None
        Mapping with a ``type`` key (``"memory"`` or ``"file"``) and, for file
        stores, an optional ``path``. ``None`` selects an in-memory store.

    Returns
    -------
    DocumentStore
        The configured store.

    Raises
    ------
    ValueError
        If ``type`` is not supported.
    """
    cfg = dict(config or {})
    kind = str(cfg.get("type") or "memory").lower().strip()

    if kind in {"memory", "in_memory", "inmemory"}:
        return InMemoryDocumentStore()
    if kind in {"file", "json"}:
        return FileDocumentStore(cfg.get("path") or DEFAULT_DOCUMENT_PATH)

    raise ValueError(f"Unsupported document store type {kind!r}. Supported: ['memory', 'file'].")


__all__ = [
    "DocumentStore",
    "InMemoryDocumentStore",
    "FileDocumentStore",
    "create_document_store",
]
