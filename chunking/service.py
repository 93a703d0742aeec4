from typing import Optional

from .chunker import DocumentChunker
from .config import ChunkingServiceConfig
from .models import ChunkingResult
from .storage import ChunkingStorage


class ChunkingService:
    def __init__(self, config: ChunkingServiceConfig | None = None):
        self.config = config or ChunkingServiceConfig()
        self.chunker = DocumentChunker(self.config.chunking)
        self.storage = ChunkingStorage(self.config.data_dir)

    def chunk_docs(self, docs_dir: Optional[str] = None) -> ChunkingResult:
        return self.chunker.chunk_directory(docs_dir or self.config.docs_dir)

    def ingest(self, docs_dir: Optional[str] = None) -> tuple[ChunkingResult, str]:
        result = self.chunk_docs(docs_dir)
        paths = self.storage.save(result)
        return result, str(paths.chunk_file)
