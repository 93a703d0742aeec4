from typing import Optional

from common.exceptions import InvalidRequestError
from vector_store.embedder import EmbeddingProvider, HashEmbedder, OllamaEmbedder
from vector_store.models import RankedResult
from vector_store.store import StoreProvider

from .config import RetrievalConfig
from .context import assemble_context, truncate_excerpt
from .models import SearchHit, SearchResponse, SourceInfo
from .retriever import Retriever

SEARCH_EXCERPT_CHARS = 300


def to_source_info(result: RankedResult) -> SourceInfo:
    source = result.source
    return SourceInfo(
        label=source.label,
        title=source.title,
        section=source.section,
        file=source.file,
        confidence=result.confidence,
    )


def clamp_top_k(requested: Optional[int], default: int, maximum: int) -> int:
    top_k = default if requested is None else requested
    if top_k < 1:
        raise InvalidRequestError(f"top_k must be >= 1, got {top_k}")
    return min(top_k, maximum)


def build_retriever(
    config: RetrievalConfig,
    store_provider: Optional[StoreProvider] = None,
    embedder: Optional[EmbeddingProvider] = None,
) -> Retriever:
    """Wire a Retriever from configuration (one instance per process)."""
    provider = store_provider or StoreProvider(config.snapshot_path)
    embedder = embedder or OllamaEmbedder(
        model=config.embedding_model,
        base_url=config.ollama_base_url,
        timeout=config.embedding_timeout,
    )
    fallback = HashEmbedder() if config.hash_fallback else None
    return Retriever(provider, embedder, fallback_embedder=fallback)


class RetrievalService:
    def __init__(self, config: RetrievalConfig, retriever: Retriever):
        self.config = config
        self.retriever = retriever

    def search(self, query: str, top_k: Optional[int] = None) -> SearchResponse:
        if not isinstance(query, str) or not query.strip():
            raise InvalidRequestError("Query must be a non-empty string")
        k = clamp_top_k(top_k, self.config.default_top_k, self.config.max_top_k)

        results = self.retriever.retrieve(query, k)
        hits = [
            SearchHit(
                record_id=r.record.record_id,
                text=truncate_excerpt(r.text, SEARCH_EXCERPT_CHARS),
                source=to_source_info(r),
                score=round(r.score, 4),
            )
            for r in results
        ]
        return SearchResponse(
            query=query[:100],
            results=hits,
            context_text=assemble_context(results, self.config.excerpt_chars),
        )

    def stats(self) -> dict:
        return {
            "top_k": self.config.default_top_k,
            "max_top_k": self.config.max_top_k,
            "embedding_model": self.retriever.embedder.model,
            "hash_fallback": self.retriever.fallback_embedder is not None,
            **self.retriever.store_provider.status(),
        }
