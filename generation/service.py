from __future__ import annotations

import time
from typing import Optional, Protocol, Sequence

from common.exceptions import GenerationError, InvalidRequestError
from common.logging_config import get_logger
from retrieval.config import RetrievalConfig
from retrieval.context import assemble_context
from retrieval.retriever import Retriever
from retrieval.service import clamp_top_k, to_source_info
from vector_store.models import RankedResult

from .config import GenerationConfig
from .fallback import template_answer
from .models import ChatRequest, ChatResponse
from .ollama_client import chat
from .postprocess import postprocess_answer
from .prompts import SYSTEM_PROMPT, build_prompt

logger = get_logger(__name__)

NO_RESULTS_REPLY = (
    "I couldn't find relevant information in the documentation to answer your question."
)


class Generator(Protocol):
    model: str

    def generate(self, prompt: str) -> str:
        ...


class InteractionSink(Protocol):
    def track_interaction(
        self,
        user_message: str,
        bot_response: str,
        sources: Sequence[dict],
        response_time_ms: int,
        variant: str = "A",
        experiment_id: Optional[str] = None,
        metadata: Optional[dict] = None,
    ) -> str:
        ...


class OllamaGenerator:
    """Text generation through the Ollama chat endpoint."""

    def __init__(self, config: GenerationConfig):
        self.config = config
        self.model = config.ollama_model

    def generate(self, prompt: str) -> str:
        """
        Generate an answer for ``prompt``.

        Raises:
            GenerationError: On connection problems, timeouts, HTTP errors
                or an empty reply.
        """
        try:
            content = chat(
                base_url=self.config.ollama_base_url,
                model=self.model,
                system_prompt=SYSTEM_PROMPT,
                user_prompt=prompt,
                temperature=self.config.temperature,
                top_p=self.config.top_p,
                output_tokens=self.config.output_tokens,
                timeout=self.config.timeout,
            )
        except (RuntimeError, ConnectionError, TimeoutError) as e:
            raise GenerationError("Text generation failed", model=self.model, original_error=e) from e

        answer = postprocess_answer(content, prompt)
        if not answer:
            raise GenerationError("Generation returned an empty answer", model=self.model)
        return answer


class ChatService:
    """
    Question answering over the vector store.

    retrieve -> assemble context -> generate (or template fallback) -> report.
    Generation and analytics failures never fail the request; retrieval
    failures propagate to the caller.
    """

    def __init__(
        self,
        config: GenerationConfig,
        retrieval_config: RetrievalConfig,
        retriever: Retriever,
        generator: Optional[Generator] = None,
        tracker: Optional[InteractionSink] = None,
    ):
        self.config = config
        self.retrieval_config = retrieval_config
        self.retriever = retriever
        if generator is None and config.enabled:
            generator = OllamaGenerator(config)
        self.generator = generator
        self.tracker = tracker

    def answer(self, request: ChatRequest) -> ChatResponse:
        start = time.perf_counter()
        query = request.query
        if not query.strip():
            raise InvalidRequestError("Query must be a non-empty string")
        top_k = clamp_top_k(
            request.top_k,
            self.retrieval_config.default_top_k,
            self.retrieval_config.max_top_k,
        )

        results = self.retriever.retrieve(query, top_k)
        if not results:
            reply, mode = NO_RESULTS_REPLY, "none"
        else:
            context = assemble_context(results, self.retrieval_config.excerpt_chars)
            reply, mode = self._generate(query, context, results)

        sources = [to_source_info(r) for r in results]
        elapsed_ms = int((time.perf_counter() - start) * 1000)

        metadata = {
            "generation": mode,
            "model": self.generator.model if self.generator else None,
            "top_k": top_k,
            "results": len(results),
            "response_time_ms": elapsed_ms,
            "variant": request.variant or "A",
        }
        interaction_id = self._report(request, reply, [s.model_dump() for s in sources], elapsed_ms, metadata)
        if interaction_id:
            metadata["interaction_id"] = interaction_id

        return ChatResponse(reply=reply, sources=sources, metadata=metadata)

    def _generate(self, query: str, context: str, results: Sequence[RankedResult]) -> tuple[str, str]:
        if self.generator is not None:
            try:
                return self.generator.generate(build_prompt(query, context)), "model"
            except GenerationError as e:
                logger.warning("Generation failed, using template answer: %s", e)
            except Exception as e:
                logger.warning("Generation failed unexpectedly (%r), using template answer", e)
        return template_answer(query, context, results, self.retrieval_config.excerpt_chars), "template"

    def _report(
        self,
        request: ChatRequest,
        reply: str,
        sources: list[dict],
        elapsed_ms: int,
        metadata: dict,
    ) -> Optional[str]:
        if self.tracker is None:
            return None
        try:
            return self.tracker.track_interaction(
                user_message=request.query,
                bot_response=reply,
                sources=sources,
                response_time_ms=elapsed_ms,
                variant=request.variant or "A",
                experiment_id=request.experiment_id,
                metadata=dict(metadata),
            )
        except Exception as e:
            logger.warning("Analytics tracking failed: %s", e)
            return None
