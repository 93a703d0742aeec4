"""
Retriever - query text to ranked store records

Steps per query:
1. Get the store from the StoreProvider (loaded once, then cached).
2. Embed the query with the configured provider. If the provider fails,
   the error propagates unless a fallback provider was configured
   explicitly (degraded mode, e.g. HashEmbedder, sized to the store).
3. Return [] for an empty store, otherwise rank all records and keep K.

Usage:
    from retrieval import Retriever
    from vector_store import OllamaEmbedder, StoreProvider

    retriever = Retriever(StoreProvider("data/rag/store.json"), OllamaEmbedder())
    results = retriever.retrieve("How do robots perceive depth?", top_k=4)
"""

from typing import Optional, Sequence

from common.exceptions import DimensionMismatchError, EmbeddingProviderError
from common.logging_config import get_logger
from vector_store.embedder import EmbeddingProvider
from vector_store.models import RankedResult
from vector_store.similarity import BruteForceSimilarityEngine, SimilarityEngine
from vector_store.store import StoreProvider

logger = get_logger(__name__)


class Retriever:
    """
    Orchestrates embedding, store access and ranking for one query.

    The retriever holds no per-query state and the store is read-only,
    so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        store_provider: StoreProvider,
        embedder: EmbeddingProvider,
        engine: Optional[SimilarityEngine] = None,
        fallback_embedder: Optional[EmbeddingProvider] = None,
    ):
        """
        Args:
            store_provider: Lazy handle to the vector store.
            embedder: Provider used for query embeddings.
            engine: Ranking engine (exact full scan by default).
            fallback_embedder: Optional degraded-mode provider used only
                when ``embedder`` fails.
        """
        self.store_provider = store_provider
        self.embedder = embedder
        self.engine = engine or BruteForceSimilarityEngine()
        self.fallback_embedder = fallback_embedder
        self._warned_models: set[str] = set()

    def embed_query(self, query: str, dimension: Optional[int] = None) -> tuple[list[float], str]:
        """
        Embed ``query``.

        Args:
            query: Question text.
            dimension: Vector size of the target store. A fallback provider
                that can be resized (``with_dimension``) is sized to match.

        Returns:
            Tuple of (vector, model identifier of the provider used).
        """
        try:
            return self.embedder.embed(query), self.embedder.model
        except EmbeddingProviderError as e:
            if self.fallback_embedder is None:
                logger.error("Query embedding failed: %s", e)
                raise
            fallback = self._sized_fallback(dimension)
            logger.warning(
                "Query embedding failed (%s); using fallback embedder '%s'",
                e, fallback.model,
            )
            return fallback.embed(query), fallback.model

    def _sized_fallback(self, dimension: Optional[int]) -> EmbeddingProvider:
        fallback = self.fallback_embedder
        resize = getattr(fallback, "with_dimension", None)
        if dimension and resize is not None:
            fallback = resize(dimension)
            self.fallback_embedder = fallback
        return fallback

    def retrieve(self, query: str, top_k: int) -> list[RankedResult]:
        """
        Retrieve the ``top_k`` records most similar to ``query``.

        Returns:
            Up to ``top_k`` results, score descending, stable for ties.

        Raises:
            ValueError: If ``top_k`` < 1.
            EmbeddingProviderError: If the query cannot be embedded.
            StoreNotFoundError / StoreCorruptError: If the store cannot be loaded.
            DimensionMismatchError: If the query vector does not fit the store.
        """
        if top_k < 1:
            raise ValueError(f"top_k must be >= 1, got {top_k}")

        store = self.store_provider.get()
        vector, model = self.embed_query(query, store.embedding_dimension)
        if store.is_empty():
            return []

        if model != store.model_identifier and model not in self._warned_models:
            self._warned_models.add(model)
            logger.warning(
                "Query embedded with '%s' but store was built with '%s'",
                model, store.model_identifier,
            )

        return self.retrieve_by_vector(vector, top_k)

    def retrieve_by_vector(self, vector: Sequence[float], top_k: int) -> list[RankedResult]:
        """Rank the store against a precomputed query vector."""
        if top_k < 1:
            raise ValueError(f"top_k must be >= 1, got {top_k}")

        store = self.store_provider.get()
        try:
            return store.search(vector, top_k, engine=self.engine)
        except DimensionMismatchError as e:
            logger.error(
                "Dimension mismatch between query and store (%s). "
                "The snapshot was probably built with a different embedding model; "
                "re-run the embed step.",
                e,
            )
            raise
