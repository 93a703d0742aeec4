"""
Data Models for the Vector Store Pipeline

Defines:
1. StoreConfig - Snapshot location, embedding model and Ollama settings
2. EmbeddedChunk - A chunk plus its embedding vector (one store record)
3. StoreSnapshot - The persisted JSON shape of a whole store
4. RankedResult - A record annotated with its similarity score
5. EmbedStats - Statistics from an embedding run

Design Principles:
- Pydantic v2 for validation (consistent with the chunking models)
- The snapshot is the only persisted artifact; it is rebuilt in full on
  every embedding run
"""

import hashlib
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from chunking.models import SourceRef

SNAPSHOT_VERSION = "1.0"


class StoreConfig(BaseModel):
    """Configuration for the vector store."""
    snapshot_path: str = Field(
        "data/rag/store.json",
        description="Location of the persisted store snapshot",
    )
    embedding_model: str = Field(
        "all-minilm",
        description="Ollama embedding model name",
    )
    ollama_base_url: str = Field(
        "http://localhost:11434",
        description="Ollama API base URL",
    )
    embedding_timeout_seconds: float = Field(
        30.0,
        description="Upper bound for a single embedding call",
        gt=0,
    )
    batch_size: int = Field(
        32,
        description="Texts per embedding request during ingestion",
        ge=1,
    )


def make_record_id(source: SourceRef, sequence_index: int, text: str) -> str:
    """Content-addressed record ID (first 16 hex chars of SHA-256)."""
    digest = hashlib.sha256()
    digest.update(source.file.encode("utf-8"))
    digest.update(b"\x00")
    digest.update(str(sequence_index).encode("utf-8"))
    digest.update(b"\x00")
    digest.update(text.encode("utf-8"))
    return digest.hexdigest()[:16]


class EmbeddedChunk(BaseModel):
    """A single store record: chunk text, provenance and vector."""
    record_id: str = Field(
        ...,
        description="Unique within one store generation",
        min_length=1,
    )
    text: str = Field(
        ...,
        description="Chunk text",
        min_length=1,
    )
    vector: list[float] = Field(
        ...,
        description="Embedding vector (length == store embedding_dimension)",
    )
    source: SourceRef
    sequence_index: int = Field(0, ge=0)


class StoreSnapshot(BaseModel):
    """
    Persisted form of a VectorStore.

    ``embedding_dimension`` must always be present; it may only be null
    when ``records`` is empty.
    """
    version: str = SNAPSHOT_VERSION
    embedding_dimension: Optional[int] = Field(..., ge=1)
    model_identifier: str = Field(..., min_length=1)
    records: list[EmbeddedChunk]
    generated_at: datetime = Field(default_factory=datetime.utcnow)


class RankedResult(BaseModel):
    """A store record annotated with its similarity to the query."""
    record: EmbeddedChunk
    score: float = Field(
        ...,
        description="Cosine similarity (1 = identical direction, 0 = orthogonal)",
    )
    rank: int = Field(
        ...,
        description="1-based position in the result list",
        ge=1,
    )

    @property
    def confidence(self) -> int:
        """Score as a rounded percentage."""
        return round(self.score * 100)

    @property
    def text(self) -> str:
        return self.record.text

    @property
    def source(self) -> SourceRef:
        return self.record.source


class EmbedStats(BaseModel):
    """Statistics from an embedding run."""
    records_stored: int = 0
    embedding_dimension: Optional[int] = None
    model_identifier: str = ""
    embedding_time_seconds: float = 0.0
    total_time_seconds: float = 0.0
    snapshot_path: str = ""
