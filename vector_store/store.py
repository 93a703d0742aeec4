"""
Vector Store - in-memory collection of embedded chunks with JSON snapshots

Manages one generation of embedded chunks:
- Build: records are appended in ingestion order; the first record fixes
  the embedding dimension and every later record is checked against it
- Persist: the whole store is written as one JSON snapshot, atomically
  (temporary file in the target directory, then os.replace)
- Load: a snapshot is parsed and validated; a missing file raises
  StoreNotFoundError, anything unparsable or incomplete StoreCorruptError
- Search: delegates ranking to a SimilarityEngine (exact full scan by default)

A loaded store is never mutated. A new embedding run writes a new
snapshot that replaces the old one wholesale.

Usage:
    from vector_store import VectorStore, StoreProvider

    store = VectorStore.load("data/rag/store.json")
    results = store.search(query_vector, top_k=4)

    provider = StoreProvider("data/rag/store.json")   # lazy, load-once
    store = provider.get()
"""

import hashlib
import json
import os
import tempfile
import threading
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional, Sequence, Union

from pydantic import ValidationError

from common.exceptions import DimensionMismatchError, StoreCorruptError, StoreNotFoundError
from common.logging_config import get_logger

from .models import EmbeddedChunk, RankedResult, StoreSnapshot
from .similarity import BruteForceSimilarityEngine, SimilarityEngine

logger = get_logger(__name__)


class VectorStore:
    """
    Ordered collection of EmbeddedChunk records sharing one dimension.
    """

    def __init__(
        self,
        model_identifier: str,
        embedding_dimension: Optional[int] = None,
        generated_at: Optional[datetime] = None,
    ):
        """
        Args:
            model_identifier: Embedding model that produced the vectors.
            embedding_dimension: Fixed dimension; taken from the first
                record when not given.
            generated_at: Timestamp of the embedding run.
        """
        if not model_identifier:
            raise ValueError("model_identifier must not be empty")
        if embedding_dimension is not None and embedding_dimension < 1:
            raise ValueError(f"embedding_dimension must be >= 1, got {embedding_dimension}")
        self._model_identifier = model_identifier
        self._dimension = embedding_dimension
        self._records: list[EmbeddedChunk] = []
        self._ids: set[str] = set()
        self.generated_at = generated_at or datetime.utcnow()

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def model_identifier(self) -> str:
        return self._model_identifier

    @property
    def embedding_dimension(self) -> Optional[int]:
        return self._dimension

    @property
    def records(self) -> tuple[EmbeddedChunk, ...]:
        return tuple(self._records)

    @property
    def fingerprint(self) -> str:
        """Content hash identifying this store generation."""
        digest = hashlib.sha256()
        digest.update(self._model_identifier.encode("utf-8"))
        digest.update(str(self._dimension).encode("utf-8"))
        for record in self._records:
            digest.update(record.record_id.encode("utf-8"))
        return digest.hexdigest()[:16]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[EmbeddedChunk]:
        return iter(self._records)

    def is_empty(self) -> bool:
        return not self._records

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def add(self, record: EmbeddedChunk) -> None:
        """
        Append a record.

        Raises:
            DimensionMismatchError: If the vector length differs from the
                store's embedding dimension.
            ValueError: If the record ID already exists in this store.
        """
        length = len(record.vector)
        if self._dimension is None:
            if length < 1:
                raise DimensionMismatchError(1, length, f"record {record.record_id}")
            self._dimension = length
        elif length != self._dimension:
            raise DimensionMismatchError(self._dimension, length, f"record {record.record_id}")

        if record.record_id in self._ids:
            raise ValueError(f"Duplicate record_id: {record.record_id}")

        self._records.append(record)
        self._ids.add(record.record_id)

    def extend(self, records: Sequence[EmbeddedChunk]) -> None:
        for record in records:
            self.add(record)

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def search(
        self,
        query_vector: Sequence[float],
        top_k: int,
        engine: Optional[SimilarityEngine] = None,
    ) -> list[RankedResult]:
        """
        Rank all records against ``query_vector``.

        Returns an empty list for an empty store.

        Raises:
            DimensionMismatchError: If the query length differs from the
                store's embedding dimension.
        """
        if not self._records:
            return []
        if len(query_vector) != self._dimension:
            raise DimensionMismatchError(self._dimension, len(query_vector), "query vs. store")
        engine = engine or BruteForceSimilarityEngine()
        return engine.rank(query_vector, self._records, top_k)

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    def to_snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            embedding_dimension=self._dimension,
            model_identifier=self._model_identifier,
            records=list(self._records),
            generated_at=self.generated_at,
        )

    @classmethod
    def from_snapshot(cls, snapshot: StoreSnapshot) -> "VectorStore":
        store = cls(
            model_identifier=snapshot.model_identifier,
            embedding_dimension=snapshot.embedding_dimension,
            generated_at=snapshot.generated_at,
        )
        store.extend(snapshot.records)
        return store

    def save(self, path: Union[str, Path]) -> Path:
        """
        Write the snapshot atomically.

        The JSON is written to a temporary file next to ``path`` and moved
        into place with os.replace, so readers see either the previous
        snapshot or the complete new one.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        payload = self.to_snapshot().model_dump_json(indent=2)

        handle = tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=target.parent,
            prefix=f".{target.name}.",
            suffix=".tmp",
            delete=False,
        )
        try:
            with handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(handle.name, target)
        except BaseException:
            Path(handle.name).unlink(missing_ok=True)
            raise

        logger.info(
            "Saved vector store: %d records, dimension %s -> %s",
            len(self), self._dimension, target,
        )
        return target

    @classmethod
    def load(cls, path: Union[str, Path]) -> "VectorStore":
        """
        Load and validate a snapshot.

        Raises:
            StoreNotFoundError: If the snapshot file does not exist.
            StoreCorruptError: If it cannot be parsed or lacks required
                fields, or its records are inconsistent.
        """
        source = Path(path)
        if not source.is_file():
            raise StoreNotFoundError(str(source))

        try:
            raw = json.loads(source.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise StoreCorruptError(str(source), "snapshot could not be read", e) from e
        except json.JSONDecodeError as e:
            raise StoreCorruptError(str(source), "snapshot is not valid JSON", e) from e

        if not isinstance(raw, dict):
            raise StoreCorruptError(str(source), "snapshot root must be an object")

        try:
            snapshot = StoreSnapshot.model_validate(raw)
        except ValidationError as e:
            fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
            reason = "missing or invalid fields: " + ", ".join(fields) if fields else "invalid snapshot"
            raise StoreCorruptError(str(source), reason, e) from e

        if snapshot.records and snapshot.embedding_dimension is None:
            raise StoreCorruptError(str(source), "records present but embedding_dimension is null")

        try:
            store = cls.from_snapshot(snapshot)
        except (DimensionMismatchError, ValueError) as e:
            logger.error("Inconsistent snapshot %s: %s", source, e)
            raise StoreCorruptError(str(source), "inconsistent records", e) from e

        logger.info(
            "Loaded vector store: %d records, dimension %s, model %s",
            len(store), store.embedding_dimension, store.model_identifier,
        )
        return store


class StoreProvider:
    """
    Owned, injectable handle that loads the store at most once.

    The first successful ``get()`` loads the snapshot; every later call
    returns the same instance for the lifetime of the provider. There is
    no invalidation: a regenerated snapshot is only picked up after the
    process (or provider) is recreated. A failed load is not cached, so a
    service started before the first embed run recovers once the snapshot
    exists.
    """

    def __init__(self, snapshot_path: Union[str, Path]):
        self.snapshot_path = Path(snapshot_path)
        self._store: Optional[VectorStore] = None
        self._lock = threading.Lock()

    @classmethod
    def from_store(cls, store: VectorStore, snapshot_path: Union[str, Path] = "") -> "StoreProvider":
        """Wrap an already-built store (no disk access)."""
        provider = cls(snapshot_path)
        provider._store = store
        return provider

    @property
    def is_loaded(self) -> bool:
        return self._store is not None

    def get(self) -> VectorStore:
        if self._store is not None:
            return self._store
        with self._lock:
            if self._store is None:
                self._store = VectorStore.load(self.snapshot_path)
            return self._store

    def status(self) -> dict:
        """Readiness summary for health endpoints; never raises."""
        if self._store is None and not self.snapshot_path.is_file():
            return {"vector_store": "not initialized", "snapshot_path": str(self.snapshot_path)}
        if self._store is None:
            return {"vector_store": "not loaded", "snapshot_path": str(self.snapshot_path)}
        return {
            "vector_store": "ready",
            "snapshot_path": str(self.snapshot_path),
            "records": len(self._store),
            "embedding_dimension": self._store.embedding_dimension,
            "model_identifier": self._store.model_identifier,
            "fingerprint": self._store.fingerprint,
        }
