# resume_rag/app/api.py
from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from resume_rag.app.container import ResumeRagContainer, build_container
from resume_rag.common.errors import (
    ConfigurationError,
    GenerationExhausted,
    InvalidInput,
    NotFound,
    RateLimited,
    ResumeRagError,
    UpstreamFatal,
)
from resume_rag.config import GlobalConfig
from resume_rag.retrieval.document_loader import ingest_resume

logger = logging.getLogger("resume_rag.api")


class QueryRequest(BaseModel):
    question: Optional[Any] = None
    mode: Optional[Any] = None


class QueryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    answer: str
    relevant_chunks: int = Field(alias="relevantChunks")
    mode: str
    cached: bool = False


class UploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    text_length: int = Field(alias="textLength")
    chunk_count: int = Field(alias="chunkCount")


_STATUS_BY_ERROR: list[tuple[type[ResumeRagError], int]] = [
    (InvalidInput, 400),
    (NotFound, 404),
    (RateLimited, 429),
    (UpstreamFatal, 502),
    (GenerationExhausted, 503),
    (ConfigurationError, 500),
]


def error_response(exc: ResumeRagError) -> JSONResponse:
    """Map a pipeline error to a JSON error response."""
    status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(exc, cls)), 500)
    body: dict[str, Any] = {"error": exc.message}
    headers: dict[str, str] = {}

    if isinstance(exc, RateLimited) and exc.retry_after is not None:
        body["retryAfter"] = exc.retry_after
        headers["Retry-After"] = str(int(round(exc.retry_after)))
    if isinstance(exc, UpstreamFatal):
        body["upstreamStatus"] = exc.status_code

    return JSONResponse(status_code=status, content=body, headers=headers)


def _container(request: Request) -> ResumeRagContainer:
    return request.app.state.container


def create_app(container: ResumeRagContainer | None = None) -> FastAPI:
    """Create the FastAPI application.

    When ``container`` is ``None`` it is built at startup from the file named by
    ``RESUME_RAG_CONFIG`` (or the packaged default configuration).
    """
    app = FastAPI(title="Resume RAG API", version="0.1.0")
    if container is not None:
        app.state.container = container

    @app.on_event("startup")
    def startup():
        if getattr(app.state, "container", None) is not None:
            return
        cfg = GlobalConfig.from_env()
        logging.basicConfig(
            level=getattr(logging, cfg.logging_level, logging.INFO),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
        app.state.container = build_container(cfg)

    @app.exception_handler(ResumeRagError)
    def handle_pipeline_error(request: Request, exc: ResumeRagError):
        if isinstance(exc, (ConfigurationError, GenerationExhausted, UpstreamFatal)):
            logger.error("%s while handling %s: %s", type(exc).__name__, request.url.path, exc.message)
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    def handle_malformed_request(request: Request, exc: RequestValidationError):
        logger.info("Malformed request to %s: %s", request.url.path, exc.errors())
        return error_response(InvalidInput("Invalid request body"))

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/api/upload", response_model=UploadResponse)
    def upload(request: Request, file: Optional[UploadFile] = File(None)):
        if file is None:
            raise InvalidInput("No file provided")
        container = _container(request)
        payload = file.file.read()
        try:
            document = ingest_resume(
                container.document_store,
                payload,
                filename=file.filename,
                content_type=file.content_type,
                chunk_size=container.config.chunk_size,
            )
        except ResumeRagError:
            raise
        except Exception:
            logger.exception("Error while handling /api/upload")
            return JSONResponse(status_code=500, content={"error": "Failed to process file"})

        return UploadResponse(
            message="Resume uploaded successfully",
            text_length=len(document.text),
            chunk_count=len(document.chunks),
        )

    @app.post("/api/query", response_model=QueryResponse)
    def query(request: Request, req: QueryRequest):
        container = _container(request)
        try:
            result = container.pipeline.run(req.question, req.mode)
        except ResumeRagError:
            raise
        except Exception:
            logger.exception("Error while handling /api/query")
            return JSONResponse(status_code=500, content={"error": "Failed to process query"})

        return QueryResponse(
            answer=result.answer,
            relevant_chunks=result.relevant_chunks,
            mode=result.mode.value,
            cached=result.cached,
        )

    return app


app = create_app()
