"""Ask a question about the stored resume from the command line."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Make `src/resume_rag` importable when running from a repo checkout.
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = REPO_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from resume_rag.app.container import build_container
from resume_rag.common.errors import RateLimited, ResumeRagError
from resume_rag.config import GlobalConfig


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Answer a question about the stored resume")

    parser.add_argument(
        "--config-file",
        "-c",
        required=False,
        type=str,
        default=None,
        help="Path to the YAML configuration file (defaults to $RESUME_RAG_CONFIG or the packaged config)",
    )
    parser.add_argument(
        "--question",
        "-q",
        required=True,
        type=str,
        help="Question to ask",
    )
    parser.add_argument(
        "--mode",
        "-m",
        required=False,
        choices=["recommend", "strict"],
        default="recommend",
        help="Answering style (default: recommend)",
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

    try:
        result = container.pipeline.run(args.question, args.mode)
    except RateLimited as e:
        hint = f" (retry after {e.retry_after:.0f}s)" if e.retry_after is not None else ""
        print(f"Error: {e.message}{hint}", file=sys.stderr)
        return 2
    except ResumeRagError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    print(result.answer)
    print(f"\n[{result.relevant_chunks} relevant chunks, mode={result.mode.value}, cached={result.cached}]")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
