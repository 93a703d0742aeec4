"""
Embedding Providers - map text to fixed-size vectors

Two implementations of the EmbeddingProvider protocol:

- OllamaEmbedder: the real provider, a thin wrapper around the Ollama
  Python client with a bounded request timeout.
- HashEmbedder: a deterministic pseudo-embedding built from word hashes.
  It keeps the retrieval path exercisable without a model. Its vectors are
  dimensionally valid but carry no semantic meaning.

Usage:
    from vector_store.embedder import OllamaEmbedder

    embedder = OllamaEmbedder(model="all-minilm")
    vector = embedder.embed("How do robots perceive depth?")
    vectors = embedder.embed_batch(["Text 1", "Text 2"])
"""

from typing import Optional, Protocol, runtime_checkable

import numpy as np
import ollama

from common.exceptions import EmbeddingProviderError
from common.logging_config import get_logger

logger = get_logger(__name__)


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Narrow interface the pipeline needs from an embedding model."""

    model: str

    def embed(self, text: str) -> list[float]:
        ...

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        ...


class OllamaEmbedder:
    """
    Generates text embeddings using a local Ollama model.

    Every failure of the underlying client (connection refused, model
    missing, timeout) surfaces as EmbeddingProviderError.
    """

    def __init__(
        self,
        model: str = "all-minilm",
        base_url: str = "http://localhost:11434",
        timeout: float = 30.0,
    ):
        """
        Initialize the embedder.

        Args:
            model: Ollama model name for embeddings.
            base_url: Ollama API base URL.
            timeout: Seconds before a request is abandoned.
        """
        self.model = model
        self.base_url = base_url
        self.timeout = timeout
        self._client = ollama.Client(host=base_url, timeout=timeout)
        self._dimensions: Optional[int] = None

    @property
    def dimensions(self) -> Optional[int]:
        """Return the embedding dimensions (available after first embed call)."""
        return self._dimensions

    def embed(self, text: str) -> list[float]:
        """
        Generate an embedding for a single text.

        Raises:
            ValueError: If the text is empty.
            EmbeddingProviderError: If Ollama fails or times out.
        """
        if not text or not text.strip():
            raise ValueError("Cannot embed empty text")

        response = self._call(text)
        embedding = list(response["embeddings"][0])
        self._dimensions = len(embedding)
        return embedding

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """
        Generate embeddings for several texts in one request.

        Returns one vector per input text, in input order.
        """
        if not texts:
            return []
        if any(not t or not t.strip() for t in texts):
            raise ValueError("Cannot embed empty text in batch")

        response = self._call(texts)
        embeddings = [list(e) for e in response["embeddings"]]
        if len(embeddings) != len(texts):
            raise EmbeddingProviderError(
                f"Expected {len(texts)} embeddings, received {len(embeddings)}",
                model=self.model,
            )
        if embeddings:
            self._dimensions = len(embeddings[0])
        return embeddings

    def _call(self, payload):
        try:
            return self._client.embed(model=self.model, input=payload)
        except ollama.ResponseError as e:
            raise EmbeddingProviderError(
                "Ollama embedding request was rejected",
                model=self.model,
                original_error=e,
            ) from e
        except Exception as e:
            if "Timeout" in type(e).__name__ or "timed out" in str(e).lower():
                raise EmbeddingProviderError(
                    f"Ollama embedding timed out after {self.timeout}s",
                    model=self.model,
                    original_error=e,
                    timed_out=True,
                ) from e
            if "Connection" in type(e).__name__ or "refused" in str(e).lower():
                raise EmbeddingProviderError(
                    f"Cannot connect to Ollama at {self.base_url}. "
                    f"Is Ollama running? Start it with: ollama serve",
                    model=self.model,
                    original_error=e,
                ) from e
            raise EmbeddingProviderError(
                "Embedding generation failed",
                model=self.model,
                original_error=e,
            ) from e

    def health_check(self) -> dict[str, bool | str]:
        result = {
            "healthy": False,
            "ollama_running": False,
            "model_available": False,
            "model": self.model,
            "error": "",
        }

        try:
            models = self._client.list()
            result["ollama_running"] = True

            model_names = [m.model for m in models.models]
            result["model_available"] = any(
                m.startswith(self.model) for m in model_names
            )

            if not result["model_available"]:
                result["error"] = (
                    f"Model '{self.model}' not found. "
                    f"Available: {model_names}. "
                    f"Pull it with: ollama pull {self.model}"
                )
            else:
                result["healthy"] = True

        except Exception as e:
            result["error"] = f"Cannot connect to Ollama: {e}"

        return result


def _string_hash(word: str) -> int:
    """32-bit rolling hash ``h = h * 31 + code``, wrapped to a signed int."""
    h = 0
    for char in word:
        h = (h * 31 + ord(char)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


class HashEmbedder:
    """
    Deterministic pseudo-embedding for degraded mode.

    Each lower-cased word contributes ``sin(hash * (i + 1)) * 0.01`` to
    component ``i``; the sum is L2-normalised. Text with no words maps to
    the zero vector.
    """

    def __init__(self, dimension: int = 384):
        if dimension < 1:
            raise ValueError(f"dimension must be >= 1, got {dimension}")
        self.dimension = dimension
        self.model = f"hash-{dimension}"
        self._positions = np.arange(1, dimension + 1, dtype=np.float64)

    def embed(self, text: str) -> list[float]:
        vector = np.zeros(self.dimension, dtype=np.float64)
        for word in text.lower().split():
            vector += np.sin(_string_hash(word) * self._positions) * 0.01

        norm = np.linalg.norm(vector)
        if norm > 0:
            vector /= norm
        return vector.tolist()

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        return [self.embed(t) for t in texts]

    def with_dimension(self, dimension: int) -> "HashEmbedder":
        """Same scheme with ``dimension`` components (``self`` if unchanged)."""
        if dimension == self.dimension:
            return self
        return HashEmbedder(dimension)
