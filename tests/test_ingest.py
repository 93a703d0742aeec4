"""Tests for vector_store.ingest: embedding runs and snapshot writing."""

import pytest

from chunking.models import Chunk, ChunkingConfig, ChunkingResult, SourceRef
from common.exceptions import DimensionMismatchError
from vector_store.ingest import EmbeddingService, embed_chunks
from vector_store.models import StoreConfig, make_record_id
from vector_store.store import VectorStore

from conftest import FakeEmbedder


def _make_chunk(index: int, file: str = "docs/robotics/arms.md") -> Chunk:
    text = f"Robot arms use joint encoders for position feedback, part {index}."
    return Chunk(
        chunk_id=f"{file[:-3]}_chunk_{index:04d}",
        text=text,
        source=SourceRef(file=file, section="robotics", title="Robot Arms"),
        sequence_index=index,
        char_count=len(text),
        word_count=len(text.split()),
    )


def _make_result(n: int) -> ChunkingResult:
    return ChunkingResult(docs_dir="docs", config=ChunkingConfig(), chunks=[_make_chunk(i) for i in range(n)])


class _VaryingEmbedder(FakeEmbedder):
    def embed_batch(self, texts):
        return [[1.0] * (2 + i) for i, _ in enumerate(texts)]


class TestEmbedChunks:
    def test_builds_store(self):
        chunks = _make_result(5).chunks
        store, stats = embed_chunks(chunks, FakeEmbedder(default=[0.5, 0.5, 0.0]), batch_size=2)

        assert len(store) == 5
        assert store.embedding_dimension == 3
        assert store.model_identifier == "fake-model"
        assert stats.records_stored == 5
        assert stats.embedding_dimension == 3

    def test_batches(self):
        embedder = FakeEmbedder()
        embed_chunks(_make_result(5).chunks, embedder, batch_size=2)
        assert [len(batch) for batch in embedder.calls] == [2, 2, 1]

    def test_records_keep_order_and_provenance(self):
        chunks = _make_result(3).chunks
        store, _ = embed_chunks(chunks, FakeEmbedder())
        for chunk, record in zip(chunks, store.records):
            assert record.text == chunk.text
            assert record.source == chunk.source
            assert record.record_id == make_record_id(chunk.source, chunk.sequence_index, chunk.text)

    def test_varying_dimension_fails(self):
        with pytest.raises(DimensionMismatchError):
            embed_chunks(_make_result(3).chunks, _VaryingEmbedder())

    def test_progress_callback(self):
        calls = []
        embed_chunks(_make_result(3).chunks, FakeEmbedder(), batch_size=2,
                     progress_callback=lambda cur, total, status: calls.append((cur, total)))
        assert calls[0] == (0, 3)
        assert calls[-1] == (3, 3)

    def test_no_chunks(self):
        store, stats = embed_chunks([], FakeEmbedder())
        assert store.is_empty()
        assert stats.records_stored == 0


class TestEmbeddingService:
    def test_embed_result_writes_snapshot(self, tmp_path):
        config = StoreConfig(snapshot_path=str(tmp_path / "store.json"))
        stats = EmbeddingService(config, FakeEmbedder()).embed_result(_make_result(4))

        assert stats.snapshot_path == str(tmp_path / "store.json")
        assert len(VectorStore.load(stats.snapshot_path)) == 4

    def test_embed_and_save_from_chunk_file(self, tmp_path):
        chunk_file = tmp_path / "chunks.json"
        _make_result(2).save(str(chunk_file))
        config = StoreConfig(snapshot_path=str(tmp_path / "store.json"))

        stats = EmbeddingService(config, FakeEmbedder()).embed_and_save(str(chunk_file))
        assert stats.records_stored == 2

    def test_rebuild_replaces_snapshot(self, tmp_path):
        config = StoreConfig(snapshot_path=str(tmp_path / "store.json"))
        service = EmbeddingService(config, FakeEmbedder())
        service.embed_result(_make_result(4))
        service.embed_result(_make_result(2))
        assert len(VectorStore.load(config.snapshot_path)) == 2
