from dataclasses import dataclass
from pathlib import Path

from .models import ChunkingResult

CHUNKS_FILENAME = "chunks.json"


@dataclass
class ChunkingPaths:
    data_dir: Path
    chunk_file: Path


class ChunkingStorage:
    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)

    def build_paths(self) -> ChunkingPaths:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return ChunkingPaths(
            data_dir=self.data_dir,
            chunk_file=self.data_dir / CHUNKS_FILENAME,
        )

    def save(self, result: ChunkingResult) -> ChunkingPaths:
        paths = self.build_paths()
        result.save(str(paths.chunk_file))
        return paths

    def load(self) -> ChunkingResult:
        return ChunkingResult.load(str(self.data_dir / CHUNKS_FILENAME))
