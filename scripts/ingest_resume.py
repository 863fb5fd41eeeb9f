"""Resume ingestion entrypoint.

Loads configuration, extracts text from a PDF or DOCX resume, chunks it and
writes it to the configured document store, replacing any previous resume.

Works when running from a repo checkout (adds `<repo>/src` to sys.path).
"""

from __future__ import annotations

import argparse
import logging
import mimetypes
import sys
from pathlib import Path

# Make `src/resume_rag` importable when running from a repo checkout.
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = REPO_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from resume_rag.app.container import build_container
from resume_rag.common.errors import ResumeRagError
from resume_rag.config import GlobalConfig
from resume_rag.retrieval.document_loader import ingest_resume


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Ingest a resume into the document store")

    parser.add_argument(
        "--config-file",
        "-c",
        required=False,
        type=str,
        default=None,
        help="Path to the YAML configuration file (defaults to $RESUME_RAG_CONFIG or the packaged config)",
    )
    parser.add_argument(
        "--file",
        "-f",
        required=True,
        type=str,
        help="Path to the resume (.pdf or .docx)",
    )
    parser.add_argument(
        "--content-type",
        required=False,
        type=str,
        default=None,
        help="Override the MIME type guessed from the file name (optional)",
    )

    return parser.parse_args()


def main() -> int:
    args = parse_args()

    cfg = GlobalConfig.load(args.config_file) if args.config_file else GlobalConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, cfg.logging_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    container = build_container(cfg)

    path = Path(args.file).expanduser()
    content_type = args.content_type or mimetypes.guess_type(path.name)[0]

    print(f"Ingesting {path}...")
    try:
        document = ingest_resume(
            container.document_store,
            path.read_bytes(),
            filename=path.name,
            content_type=content_type,
            chunk_size=cfg.chunk_size,
        )
    except ResumeRagError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    print(f"Stored {len(document.text)} characters in {len(document.chunks)} chunks.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
