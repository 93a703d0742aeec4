"""
Shared building blocks for the docs-rag pipeline: logging setup and the
exception hierarchy used by every stage.
"""

__version__ = "1.0.0"

from .exceptions import (
    DimensionMismatchError,
    EmbeddingProviderError,
    GenerationError,
    InvalidRequestError,
    RAGError,
    StoreCorruptError,
    StoreError,
    StoreNotFoundError,
)
from .logging_config import get_logger, setup_logging

__all__ = [
    "__version__",
    "RAGError",
    "StoreError",
    "StoreNotFoundError",
    "StoreCorruptError",
    "DimensionMismatchError",
    "EmbeddingProviderError",
    "GenerationError",
    "InvalidRequestError",
    "get_logger",
    "setup_logging",
]
