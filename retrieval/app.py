import time

from fastapi import FastAPI, HTTPException

from common.exceptions import (
    EmbeddingProviderError,
    InvalidRequestError,
    RAGError,
    StoreError,
)
from common.logging_config import get_logger

from .config import RetrievalConfig
from .models import QueryRequest, SearchResponse
from .retriever import Retriever
from .service import RetrievalService, build_retriever

logger = get_logger(__name__)


def to_http_exception(exc: Exception) -> HTTPException:
    """Map pipeline errors onto HTTP status codes."""
    if isinstance(exc, InvalidRequestError):
        return HTTPException(status_code=400, detail=exc.message)
    if isinstance(exc, StoreError):
        return HTTPException(
            status_code=503,
            detail=f"Vector store not initialized. Run the ingest and embed steps first. ({exc.message})",
        )
    if isinstance(exc, EmbeddingProviderError):
        return HTTPException(status_code=504 if exc.timed_out else 503, detail=str(exc))
    if isinstance(exc, RAGError):
        return HTTPException(status_code=500, detail=exc.message)
    return HTTPException(status_code=500, detail=str(exc))


def create_app(config: RetrievalConfig | None = None, retriever: Retriever | None = None) -> FastAPI:
    cfg = config or RetrievalConfig.from_env()
    service = RetrievalService(cfg, retriever or build_retriever(cfg))
    started = time.time()

    app = FastAPI(
        title="Retrieval Service",
        version="1.0.0",
        description="Semantic search over the documentation vector store.",
    )

    @app.get("/api/health")
    def health() -> dict:
        return {"status": "ok", **service.retriever.store_provider.status()}

    @app.get("/api/stats")
    def stats() -> dict:
        return {**service.stats(), "uptime_seconds": round(time.time() - started, 1)}

    @app.post("/api/rag", response_model=SearchResponse)
    def search(request: QueryRequest) -> SearchResponse:
        try:
            return service.search(request.query, request.top_k)
        except Exception as exc:
            logger.error("Search failed: %s", exc)
            raise to_http_exception(exc) from exc

    return app
