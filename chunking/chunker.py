"""
Document Chunker - Core chunking logic for the RAG pipeline

Turns a documentation tree into a ChunkingResult of bounded-size passages
with provenance.

Algorithm:
1. Discover markdown files (sorted) and clean each one.
2. Split the cleaned text with the configured policy:
   - ``words``: greedy word accumulation; a chunk is emitted as soon as the
     word budget is reached.
   - ``sentences``: whole sentences are appended to a running chunk; the
     chunk is flushed when the next sentence would push it past the
     character budget. Sentences are never split, so one sentence longer
     than the budget becomes a chunk of its own.
3. Drop chunks shorter than ``min_chunk_chars``.
4. Attach SourceRef and sequence index.

Usage:
    from chunking import DocumentChunker, ChunkingConfig

    chunker = DocumentChunker(ChunkingConfig(strategy="words", chunk_size=500))
    result = chunker.chunk_directory("docs")
    result.save("data/rag/chunks.json")
"""

from pathlib import Path
from typing import Optional, Union

from common.logging_config import get_logger

from .markdown import clean_markdown, document_id_for, extract_source_ref, find_markdown_files
from .models import (
    Chunk,
    ChunkingConfig,
    ChunkingResult,
    ChunkingStats,
    ChunkingStrategy,
    SourceRef,
)
from .sentence_splitter import split_sentences

logger = get_logger(__name__)


def chunk_text(
    cleaned_text: str,
    target_size: int,
    strategy: Union[ChunkingStrategy, str] = ChunkingStrategy.SENTENCES,
    min_chunk_chars: int = 50,
) -> list[str]:
    """
    Split cleaned text into chunks not exceeding ``target_size``.

    Args:
        cleaned_text: Text already stripped of markup.
        target_size: Words per chunk (``words``) or characters per chunk
            (``sentences``).
        strategy: Splitting policy.
        min_chunk_chars: Chunks shorter than this are dropped.

    Returns:
        Chunks in source order. May be empty.
    """
    if target_size < 1:
        raise ValueError(f"target_size must be >= 1, got {target_size}")
    if not cleaned_text or not cleaned_text.strip():
        return []

    strategy = ChunkingStrategy(strategy)
    if strategy == ChunkingStrategy.WORDS:
        chunks = _split_by_words(cleaned_text, target_size)
    else:
        chunks = _split_by_sentences(cleaned_text, target_size)

    return [chunk for chunk in chunks if len(chunk) >= min_chunk_chars]


def _split_by_words(text: str, max_words: int) -> list[str]:
    chunks: list[str] = []
    current: list[str] = []

    for word in text.split():
        current.append(word)
        if len(current) >= max_words:
            chunks.append(" ".join(current))
            current = []

    if current:
        chunks.append(" ".join(current))
    return chunks


def _split_by_sentences(text: str, max_chars: int) -> list[str]:
    chunks: list[str] = []
    current = ""

    for sentence in split_sentences(text):
        candidate = f"{current} {sentence}" if current else sentence
        if len(candidate) > max_chars and current:
            chunks.append(current)
            current = sentence
        else:
            current = candidate

    if current:
        chunks.append(current)
    return chunks


class DocumentChunker:
    """
    Splits documentation files into chunks with provenance metadata.
    """

    def __init__(self, config: Optional[ChunkingConfig] = None):
        self.config = config or ChunkingConfig()

    def chunk_source(self, cleaned_text: str, source: SourceRef) -> list[Chunk]:
        """Chunk already-cleaned text belonging to one document."""
        texts = chunk_text(
            cleaned_text,
            self.config.effective_chunk_size,
            strategy=self.config.strategy,
            min_chunk_chars=self.config.min_chunk_chars,
        )
        document_id = document_id_for(source)
        return [
            Chunk(
                chunk_id=f"{document_id}_chunk_{i:04d}",
                text=text,
                source=source,
                sequence_index=i,
                char_count=len(text),
                word_count=len(text.split()),
            )
            for i, text in enumerate(texts)
        ]

    def chunk_document(self, path: Union[str, Path], docs_dir: Union[str, Path]) -> list[Chunk]:
        """
        Read, clean and chunk a single markdown file.

        Args:
            path: Markdown file.
            docs_dir: Documentation root (used for the relative source path).

        Returns:
            Chunks of the document, possibly empty.
        """
        content = Path(path).read_text(encoding="utf-8")
        source = extract_source_ref(path, content, docs_dir)
        return self.chunk_source(clean_markdown(content), source)

    def chunk_directory(self, docs_dir: Union[str, Path]) -> ChunkingResult:
        """
        Chunk every markdown file below ``docs_dir``.

        A file that cannot be read or yields no chunks is logged and
        skipped; it never aborts the run.
        """
        files = find_markdown_files(docs_dir)
        logger.info("Found %d markdown files in %s", len(files), docs_dir)

        chunks: list[Chunk] = []
        processed = 0
        skipped = 0

        for path in files:
            try:
                doc_chunks = self.chunk_document(path, docs_dir)
            except (OSError, UnicodeDecodeError) as exc:
                logger.error("Error processing %s: %s", path, exc)
                skipped += 1
                continue

            processed += 1
            if not doc_chunks:
                logger.info("Skipping %s (too small)", path.name)
                continue
            logger.debug("%s -> %d chunks", path.name, len(doc_chunks))
            chunks.extend(doc_chunks)

        stats = self._compute_stats(chunks, processed, skipped)
        logger.info(
            "Chunking complete: %d chunks from %d files (%d skipped)",
            stats.total_chunks, processed, skipped,
        )
        return ChunkingResult(
            docs_dir=str(docs_dir),
            config=self.config,
            chunks=chunks,
            stats=stats,
        )

    def _compute_stats(self, chunks: list[Chunk], processed: int, skipped: int) -> ChunkingStats:
        if not chunks:
            return ChunkingStats(files_processed=processed, files_skipped=skipped)

        sizes = [c.char_count for c in chunks]
        return ChunkingStats(
            files_processed=processed,
            files_skipped=skipped,
            total_chunks=len(chunks),
            avg_chunk_chars=sum(sizes) / len(sizes),
            min_chunk_chars=min(sizes),
            max_chunk_chars=max(sizes),
        )
