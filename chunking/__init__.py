"""
Chunking Module - Markdown documentation to retrieval-sized passages

Discovers .md/.mdx files, strips markdown syntax and splits the text into
bounded chunks (greedy words or whole sentences) with source metadata.

Quick Start:
    from chunking import DocumentChunker, ChunkingConfig

    chunker = DocumentChunker(ChunkingConfig(strategy="sentences", chunk_size=2000))
    result = chunker.chunk_directory("docs")
    result.save("data/rag/chunks.json")
"""

__version__ = "1.0.0"

from .chunker import DocumentChunker, chunk_text
from .service import ChunkingService
from .config import ChunkingServiceConfig
from .markdown import clean_markdown, extract_source_ref, find_markdown_files
from .models import (
    Chunk,
    ChunkingConfig,
    ChunkingResult,
    ChunkingStats,
    ChunkingStrategy,
    SourceRef,
)
from .sentence_splitter import split_sentences
from .storage import ChunkingStorage

__all__ = [
    "__version__",
    "DocumentChunker",
    "chunk_text",
    "ChunkingService",
    "ChunkingServiceConfig",
    "ChunkingStorage",
    "Chunk",
    "ChunkingConfig",
    "ChunkingResult",
    "ChunkingStats",
    "ChunkingStrategy",
    "SourceRef",
    "clean_markdown",
    "extract_source_ref",
    "find_markdown_files",
    "split_sentences",
]
