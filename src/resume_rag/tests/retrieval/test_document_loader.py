import io

import docx
import pytest

from resume_rag.common.errors import InvalidInput
from resume_rag.retrieval.document_loader import detect_file_kind, extract_text, ingest_resume
from resume_rag.retrieval.document_store import InMemoryDocumentStore

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _docx_bytes(*paragraphs: str, table_rows=()) -> bytes:
    document = docx.Document()
    for text in paragraphs:
        document.add_paragraph(text)
    if table_rows:
        table = document.add_table(rows=len(table_rows), cols=len(table_rows[0]))
        for r, row in enumerate(table_rows):
            for c, value in enumerate(row):
                table.cell(r, c).text = value
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


@pytest.mark.parametrize(
    "filename, content_type, expected",
    [
        ("cv.pdf", None, "pdf"),
        ("upload", "application/pdf", "pdf"),
        ("CV.DOCX", None, "docx"),
        ("upload", DOCX_MIME, "docx"),
    ],
)
def test_detect_file_kind(filename, content_type, expected):
    assert detect_file_kind(filename, content_type) == expected


def test_unsupported_file_type_is_invalid_input():
    with pytest.raises(InvalidInput) as exc_info:
        extract_text(b"hello", filename="cv.txt", content_type="text/plain")

    assert exc_info.value.message == "Invalid file type. Please upload a PDF or DOCX file."


def test_empty_payload_is_invalid_input():
    with pytest.raises(InvalidInput, match="No file provided"):
        extract_text(b"", filename="cv.pdf")


def test_corrupt_pdf_is_invalid_input():
    with pytest.raises(InvalidInput):
        extract_text(b"definitely not a pdf", filename="cv.pdf", content_type="application/pdf")


def test_docx_paragraphs_and_tables_are_extracted():
    payload = _docx_bytes(
        "Skilled in Go and Rust.",
        "Built three scheduler engines.",
        table_rows=[("Language", "Years"), ("Go", "5")],
    )

    text = extract_text(payload, filename="cv.docx")

    assert "Skilled in Go and Rust." in text
    assert "Built three scheduler engines." in text
    assert "Go | 5" in text


def test_docx_without_text_is_invalid_input():
    with pytest.raises(InvalidInput, match="No text could be extracted"):
        extract_text(_docx_bytes(), filename="cv.docx")


def test_ingest_resume_replaces_stored_document():
    store = InMemoryDocumentStore()
    ingest_resume(store, _docx_bytes("Old resume text."), filename="old.docx")

    document = ingest_resume(
        store,
        _docx_bytes("Skilled in Go and Rust.", "Built three scheduler engines.", "Graduated 2023."),
        filename="new.docx",
        content_type=DOCX_MIME,
        chunk_size=30,
    )

    assert store.load() is document
    assert document.source_name == "new.docx"
    assert document.metadata == {"kind": "docx"}
    assert document.chunks == [
        "Skilled in Go and Rust.",
        "Built three scheduler engines.",
        "Graduated 2023.",
    ]
