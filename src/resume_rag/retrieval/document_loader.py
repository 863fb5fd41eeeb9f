"""resume_rag.retrieval.document_loader

Text extraction for uploaded resumes.

Uploads are accepted as raw bytes plus the declared file name and MIME type.
PDF files are read with ``pypdf`` and DOCX files with ``python-docx``. The
extracted text is chunked and stored as the single current
:class:`~resume_rag.common.schemas.Document`.

Functions
---------
detect_file_kind
    Decide whether an upload is a PDF or a DOCX file.
extract_text
    Extract plain text from an uploaded file.
ingest_resume
    Extract, chunk and store an uploaded resume.
"""
from __future__ import annotations

import io
import logging
from typing import Optional

from resume_rag.common.errors import InvalidInput
from resume_rag.common.schemas import Document
from resume_rag.retrieval.document_store import DocumentStore
from resume_rag.retrieval.text_splitter import DEFAULT_CHUNK_SIZE, split_into_chunks

logger = logging.getLogger(__name__)

PDF = "pdf"
DOCX = "docx"


def detect_file_kind(filename: Optional[str], content_type: Optional[str]) -> str:
    """Return ``"pdf"`` or ``"docx"`` for an upload.

    The MIME type is checked first, then the file extension.

    Raises
    ------
    InvalidInput
        If the upload is neither a PDF nor a DOCX file.
    """
    mime = (content_type or "").lower()
    name = (filename or "").lower()

    if "pdf" in mime or name.endswith(".pdf"):
        return PDF
    if "wordprocessingml" in mime or name.endswith(".docx"):
        return DOCX

    raise InvalidInput(
        "Invalid file type. Please upload a PDF or DOCX file.",
        details={"filename": filename, "content_type": content_type},
    )


def _extract_pdf(payload: bytes) -> str:
    from pypdf import PdfReader

    reader = PdfReader(io.BytesIO(payload))
    pages = [page.extract_text() or "" for page in reader.pages]
    logger.debug("Extracted %d PDF pages", len(pages))
    return "\n".join(pages)


def _extract_docx(payload: bytes) -> str:
    import docx

    document = docx.Document(io.BytesIO(payload))
    parts = [p.text for p in document.paragraphs if p.text.strip()]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                parts.append(" | ".join(cells))
    return "\n".join(parts)


def extract_text(
        payload: bytes,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> str:
    """Extract plain text from an uploaded PDF or DOCX file.

    Parameters
    ----------
    payload : bytes
        Raw file contents.
    filename : str or None, optional
        Declared file name.
    content_type : str or None, optional
        Declared MIME type.

    Returns
    -------
    str
        Extracted text (not trimmed).

    Raises
    ------
    InvalidInput
        If the file type is unsupported, the payload is empty, the file cannot
        be parsed, or no text could be extracted.
    """
    kind = detect_file_kind(filename, content_type)
    if not payload:
        raise InvalidInput("No file provided", details={"filename": filename})

    try:
        text = _extract_pdf(payload) if kind == PDF else _extract_docx(payload)
    except ImportError:
        raise
    except Exception as e:
        logger.warning("Failed to parse %s upload %r: %s", kind, filename, e)
        raise InvalidInput(
            f"The {kind.upper()} file could not be parsed.",
            details={"filename": filename, "error": f"{type(e).__name__}: {e}"},
        ) from e

    if not text.strip():
        raise InvalidInput("No text could be extracted from the file.", details={"filename": filename})
    return text


def ingest_resume(
        store: DocumentStore,
        payload: bytes,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> Document:
    """Extract, chunk and store an uploaded resume.

    The new document replaces whatever was stored before.

    Returns
    -------
    Document
        The stored document.
    """
    text = extract_text(payload, filename=filename, content_type=content_type)
    document = Document(
        text=text,
        chunks=split_into_chunks(text, chunk_size=chunk_size),
        source_name=filename,
        metadata={"kind": detect_file_kind(filename, content_type)},
    )
    store.save(document)
    logger.info("Ingested resume %r: %d chars, %d chunks", filename, len(text), len(document.chunks))
    return document


__all__ = ["detect_file_kind", "extract_text", "ingest_resume"]
