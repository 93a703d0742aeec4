from dataclasses import dataclass, field
import os

from .models import ChunkingConfig, ChunkingStrategy


@dataclass
class ChunkingServiceConfig:
    docs_dir: str = "docs"
    data_dir: str = "data/rag"
    chunking: ChunkingConfig = field(default_factory=ChunkingConfig)

    @classmethod
    def from_env(cls) -> "ChunkingServiceConfig":
        size = os.environ.get("RAG_CHUNK_SIZE")
        min_chars = os.environ.get("RAG_MIN_CHUNK_CHARS")
        chunking = ChunkingConfig(
            strategy=ChunkingStrategy(
                os.environ.get("RAG_CHUNK_STRATEGY", ChunkingStrategy.SENTENCES.value)
            ),
            chunk_size=int(size) if size else None,
            min_chunk_chars=int(min_chars) if min_chars else 50,
        )
        return cls(
            docs_dir=os.environ.get("RAG_DOCS_DIR", cls.docs_dir),
            data_dir=os.environ.get("RAG_DATA_DIR", cls.data_dir),
            chunking=chunking,
        )
