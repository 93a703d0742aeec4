"""
Data Models for the Chunking Pipeline

Defines:
1. ChunkingConfig - Splitting strategy, chunk size and minimum chunk length
2. SourceRef - Provenance of a chunk (file, section, title)
3. Chunk - A single text chunk with its source and position
4. ChunkingResult - Complete chunking output with statistics

Design Principles:
- Pydantic v2 for validation and serialization
- One policy per ingestion run: the chunk size unit (words or characters)
  follows the configured strategy and is recorded with the result
- Save/load pattern so the embed step can pick up the chunk file

Usage:
    config = ChunkingConfig(strategy="sentences", chunk_size=2000)
    result = chunker.chunk_directory("docs")
    result.save("data/rag/chunks.json")
"""

import json
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

DEFAULT_SENTENCE_CHUNK_CHARS = 2000
DEFAULT_WORD_CHUNK_WORDS = 500


class ChunkingStrategy(str, Enum):
    """How text is accumulated into chunks."""
    WORDS = "words"
    SENTENCES = "sentences"


class ChunkingConfig(BaseModel):
    """
    Configuration for the chunking pipeline.

    ``chunk_size`` is measured in words for the ``words`` strategy and in
    characters for the ``sentences`` strategy.
    """
    strategy: ChunkingStrategy = Field(
        ChunkingStrategy.SENTENCES,
        description="Splitting policy: greedy word accumulation or whole sentences",
    )
    chunk_size: Optional[int] = Field(
        None,
        description="Upper bound per chunk (words or characters, see strategy)",
        ge=1,
    )
    min_chunk_chars: int = Field(
        50,
        description="Chunks shorter than this many characters are dropped",
        ge=0,
    )

    @property
    def effective_chunk_size(self) -> int:
        if self.chunk_size is not None:
            return self.chunk_size
        if self.strategy == ChunkingStrategy.WORDS:
            return DEFAULT_WORD_CHUNK_WORDS
        return DEFAULT_SENTENCE_CHUNK_CHARS


class SourceRef(BaseModel):
    """Identifies the document (and section) a chunk originates from."""
    file: str = Field(
        ...,
        description="Document path relative to the docs root's parent",
        min_length=1,
    )
    section: str = Field(
        "",
        description="Section name derived from the document's directory",
    )
    title: str = Field(
        "",
        description="Document title from front matter or file name",
    )

    @property
    def label(self) -> str:
        """Human-readable source label, e.g. ``[physical-ai] Introduction``."""
        title = self.title or self.file
        if self.section:
            return f"[{self.section}] {title}"
        return title


class Chunk(BaseModel):
    """
    A single text chunk, ready for embedding.
    """
    chunk_id: str = Field(
        ...,
        description="Unique identifier (format: {document_id}_chunk_{index:04d})",
    )
    text: str = Field(
        ...,
        description="The chunk text content",
        min_length=1,
    )
    source: SourceRef = Field(
        ...,
        description="Originating document",
    )
    sequence_index: int = Field(
        ...,
        description="Position of this chunk within its document (0-indexed)",
        ge=0,
    )
    char_count: int = Field(0, ge=0)
    word_count: int = Field(0, ge=0)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class ChunkingStats(BaseModel):
    """Statistics about the chunking process."""
    files_processed: int = 0
    files_skipped: int = 0
    total_chunks: int = 0
    avg_chunk_chars: float = 0.0
    min_chunk_chars: int = 0
    max_chunk_chars: int = 0


class ChunkingResult(BaseModel):
    """
    Complete result of chunking a documentation tree.

    Chunks appear in file order (sorted paths), then in text order.
    """
    docs_dir: str = Field(
        ...,
        description="Root directory the documents were read from",
    )
    config: ChunkingConfig = Field(
        ...,
        description="Configuration used for chunking",
    )
    chunks: list[Chunk] = Field(
        default_factory=list,
        description="All chunks with provenance",
    )
    stats: ChunkingStats = Field(
        default_factory=ChunkingStats,
        description="Chunking statistics",
    )
    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="When chunking was performed",
    )

    @property
    def total_chunks(self) -> int:
        return len(self.chunks)

    def get_chunk_by_id(self, chunk_id: str) -> Optional[Chunk]:
        """Find a chunk by its ID."""
        for chunk in self.chunks:
            if chunk.chunk_id == chunk_id:
                return chunk
        return None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    def save(self, path: str) -> None:
        """Save chunking result to a JSON file."""
        Path(path).write_text(self.to_json(), encoding="utf-8")

    @classmethod
    def load(cls, path: str) -> "ChunkingResult":
        """Load chunking result from a JSON file."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls.model_validate(data)
