"""
Embedding run - chunk file to vector store snapshot

Embeds every chunk of a ChunkingResult in batches and builds a fresh
VectorStore. The store is always rebuilt in full; there is no merge with
a previous snapshot.

Usage:
    from vector_store import EmbeddingService, StoreConfig

    service = EmbeddingService(StoreConfig())
    stats = service.embed_and_save("data/rag/chunks.json")
"""

import time
from typing import Callable, Optional, Sequence

from chunking.models import Chunk, ChunkingResult
from common.logging_config import get_logger

from .embedder import EmbeddingProvider, OllamaEmbedder
from .models import EmbeddedChunk, EmbedStats, StoreConfig, make_record_id
from .store import VectorStore

logger = get_logger(__name__)

ProgressCallback = Callable[[int, int, str], None]


def embed_chunks(
    chunks: Sequence[Chunk],
    embedder: EmbeddingProvider,
    batch_size: int = 32,
    progress_callback: Optional[ProgressCallback] = None,
) -> tuple[VectorStore, EmbedStats]:
    """
    Embed ``chunks`` and collect them into a new VectorStore.

    The dimension check runs as each record is appended, so a provider
    returning vectors of varying length fails the run immediately.

    Args:
        chunks: Chunks in ingestion order.
        embedder: Embedding provider; its ``model`` becomes the store's
            model identifier.
        batch_size: Texts per embedding call.
        progress_callback: Optional callback(current, total, status).

    Returns:
        Tuple of (store, stats).
    """
    total_start = time.time()
    store = VectorStore(model_identifier=embedder.model)
    total = len(chunks)

    if progress_callback:
        progress_callback(0, total, "Generating embeddings...")

    embed_time = 0.0
    for start in range(0, total, batch_size):
        batch = chunks[start:start + batch_size]
        embed_start = time.time()
        vectors = embedder.embed_batch([c.text for c in batch])
        embed_time += time.time() - embed_start

        for chunk, vector in zip(batch, vectors):
            store.add(EmbeddedChunk(
                record_id=make_record_id(chunk.source, chunk.sequence_index, chunk.text),
                text=chunk.text,
                vector=vector,
                source=chunk.source,
                sequence_index=chunk.sequence_index,
            ))

        done = min(start + batch_size, total)
        logger.info("Embedded %d/%d chunks", done, total)
        if progress_callback:
            progress_callback(done, total, "Embedding...")

    if progress_callback:
        progress_callback(total, total, "Done")

    stats = EmbedStats(
        records_stored=len(store),
        embedding_dimension=store.embedding_dimension,
        model_identifier=store.model_identifier,
        embedding_time_seconds=round(embed_time, 2),
        total_time_seconds=round(time.time() - total_start, 2),
    )
    return store, stats


class EmbeddingService:
    """Runs the offline embed step and writes the snapshot."""

    def __init__(
        self,
        config: Optional[StoreConfig] = None,
        embedder: Optional[EmbeddingProvider] = None,
    ):
        self.config = config or StoreConfig()
        self.embedder = embedder or OllamaEmbedder(
            model=self.config.embedding_model,
            base_url=self.config.ollama_base_url,
            timeout=self.config.embedding_timeout_seconds,
        )

    def embed_result(
        self,
        chunking_result: ChunkingResult,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> EmbedStats:
        if not chunking_result.chunks:
            logger.warning("No chunks to embed; writing an empty store")

        store, stats = embed_chunks(
            chunking_result.chunks,
            self.embedder,
            batch_size=self.config.batch_size,
            progress_callback=progress_callback,
        )
        path = store.save(self.config.snapshot_path)
        return stats.model_copy(update={"snapshot_path": str(path)})

    def embed_and_save(
        self,
        chunks_json: str,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> EmbedStats:
        """Load a chunk file, embed it and replace the snapshot."""
        return self.embed_result(ChunkingResult.load(chunks_json), progress_callback)
