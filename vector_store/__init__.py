"""
Vector Store Module - embedded chunks, JSON snapshots and exact similarity search

Holds one generation of embedded chunks in memory, persists it as a single
JSON snapshot and ranks records against a query vector by cosine
similarity (full scan).

Quick Start:
    from vector_store import EmbeddingService, StoreProvider, StoreConfig

    # Offline: embed chunks and write the snapshot
    EmbeddingService(StoreConfig()).embed_and_save("data/rag/chunks.json")

    # Query time: load once, rank
    provider = StoreProvider("data/rag/store.json")
    results = provider.get().search(query_vector, top_k=4)
"""

__version__ = "1.0.0"

from .embedder import EmbeddingProvider, HashEmbedder, OllamaEmbedder
from .ingest import EmbeddingService, embed_chunks
from .models import (
    EmbedStats,
    EmbeddedChunk,
    RankedResult,
    StoreConfig,
    StoreSnapshot,
    make_record_id,
)
from .similarity import (
    BruteForceSimilarityEngine,
    SimilarityEngine,
    cosine_similarity,
    score_all,
)
from .store import StoreProvider, VectorStore

__all__ = [
    "__version__",
    "VectorStore",
    "StoreProvider",
    "EmbeddingService",
    "embed_chunks",
    "EmbeddingProvider",
    "OllamaEmbedder",
    "HashEmbedder",
    "StoreConfig",
    "StoreSnapshot",
    "EmbeddedChunk",
    "RankedResult",
    "EmbedStats",
    "make_record_id",
    "SimilarityEngine",
    "BruteForceSimilarityEngine",
    "cosine_similarity",
    "score_all",
]
