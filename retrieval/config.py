from dataclasses import dataclass
import os


@dataclass
class RetrievalConfig:
    snapshot_path: str = "data/rag/store.json"
    embedding_model: str = "all-minilm"
    ollama_base_url: str = "http://localhost:11434"
    embedding_timeout: float = 30.0
    hash_fallback: bool = False
    default_top_k: int = 4
    max_top_k: int = 20
    excerpt_chars: int = 400

    @classmethod
    def from_env(cls) -> "RetrievalConfig":
        def _int(name: str, default: int) -> int:
            value = os.environ.get(name)
            return int(value) if value else default

        def _float(name: str, default: float) -> float:
            value = os.environ.get(name)
            return float(value) if value else default

        return cls(
            snapshot_path=os.environ.get("RAG_SNAPSHOT_PATH", cls.snapshot_path),
            embedding_model=os.environ.get("RAG_EMBEDDING_MODEL", cls.embedding_model),
            ollama_base_url=os.environ.get("OLLAMA_BASE_URL", cls.ollama_base_url),
            embedding_timeout=_float("RAG_EMBEDDING_TIMEOUT", cls.embedding_timeout),
            hash_fallback=os.environ.get("RAG_HASH_FALLBACK") == "1",
            default_top_k=_int("RAG_TOP_K", cls.default_top_k),
            max_top_k=_int("RAG_MAX_TOP_K", cls.max_top_k),
            excerpt_chars=_int("RAG_EXCERPT_CHARS", cls.excerpt_chars),
        )
