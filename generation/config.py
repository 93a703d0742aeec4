from dataclasses import dataclass
import os


@dataclass
class GenerationConfig:
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.1:latest"
    enabled: bool = True
    timeout: float = 60.0
    output_tokens: int = 200
    temperature: float = 0.7
    top_p: float = 0.9
    analytics_path: str = "data/rag/analytics.json"

    @classmethod
    def from_env(cls) -> "GenerationConfig":
        def _int(name: str, default: int) -> int:
            value = os.environ.get(name)
            return int(value) if value else default

        def _float(name: str, default: float) -> float:
            value = os.environ.get(name)
            return float(value) if value else default

        return cls(
            ollama_base_url=os.environ.get("OLLAMA_BASE_URL", cls.ollama_base_url),
            ollama_model=os.environ.get("OLLAMA_MODEL", cls.ollama_model),
            enabled=os.environ.get("GENERATION_ENABLED", "1") != "0",
            timeout=_float("GENERATION_TIMEOUT", cls.timeout),
            output_tokens=_int("GENERATION_OUTPUT_TOKENS", cls.output_tokens),
            temperature=_float("GENERATION_TEMPERATURE", cls.temperature),
            top_p=_float("GENERATION_TOP_P", cls.top_p),
            analytics_path=os.environ.get("RAG_ANALYTICS_PATH", cls.analytics_path),
        )
