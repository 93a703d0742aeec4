import time

from fastapi import FastAPI, HTTPException

from analytics.tracker import AnalyticsTracker
from common.exceptions import RAGError
from common.logging_config import get_logger
from retrieval.app import to_http_exception
from retrieval.config import RetrievalConfig
from retrieval.retriever import Retriever
from retrieval.service import build_retriever

from .config import GenerationConfig
from .models import ChatRequest, ChatResponse, FeedbackRequest
from .service import ChatService, Generator

logger = get_logger(__name__)


def create_app(
    config: GenerationConfig | None = None,
    retrieval_config: RetrievalConfig | None = None,
    retriever: Retriever | None = None,
    generator: Generator | None = None,
    tracker: AnalyticsTracker | None = None,
) -> FastAPI:
    cfg = config or GenerationConfig.from_env()
    rcfg = retrieval_config or RetrievalConfig.from_env()
    if tracker is None and cfg.analytics_path:
        tracker = AnalyticsTracker(cfg.analytics_path)
    service = ChatService(
        cfg,
        rcfg,
        retriever or build_retriever(rcfg),
        generator=generator,
        tracker=tracker,
    )
    started = time.time()

    app = FastAPI(
        title="Docs Chat Service",
        version="1.0.0",
        description="Answers questions about the documentation with retrieval-augmented generation.",
    )

    @app.get("/api/health")
    def health() -> dict:
        return {
            "status": "ok",
            "generation": "enabled" if service.generator else "template",
            "model": service.generator.model if service.generator else None,
            "analytics": tracker is not None,
            "uptime_seconds": round(time.time() - started, 1),
            **service.retriever.store_provider.status(),
        }

    @app.post("/api/chat", response_model=ChatResponse)
    def chat(request: ChatRequest) -> ChatResponse:
        try:
            return service.answer(request)
        except Exception as exc:
            logger.error("Chat request failed: %s", exc)
            raise to_http_exception(exc) from exc

    @app.post("/api/feedback")
    def feedback(request: FeedbackRequest) -> dict:
        if tracker is None:
            raise HTTPException(status_code=503, detail="Analytics is disabled")
        try:
            rated = tracker.rate_interaction(request.interaction_id, request.rating)
        except (RAGError, OSError) as exc:
            logger.error("Recording feedback failed: %s", exc)
            raise HTTPException(status_code=503, detail=f"Analytics unavailable: {exc}") from exc
        if not rated:
            raise HTTPException(status_code=404, detail=f"Unknown interaction: {request.interaction_id}")
        return {"status": "ok", "interaction_id": request.interaction_id, "rating": request.rating}

    return app
