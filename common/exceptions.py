"""
Custom Exceptions for the docs-rag pipeline.

Exception Hierarchy:
    RAGError (base)
    ├── StoreError
    │   ├── StoreNotFoundError
    │   └── StoreCorruptError
    ├── DimensionMismatchError
    ├── EmbeddingProviderError
    ├── GenerationError
    └── InvalidRequestError

Store and dimension errors are data-integrity faults and propagate to the
caller. Generation errors are recovered by the chat service with a
template answer.

Usage:
    from common.exceptions import StoreNotFoundError, DimensionMismatchError

    try:
        store = VectorStore.load("data/rag/store.json")
    except StoreNotFoundError as e:
        print(f"Run the embed step first: {e.path}")
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# BASE EXCEPTION
# =============================================================================


class RAGError(Exception):
    """
    Base exception for all pipeline errors.

    Attributes:
        message: Human-readable error description
        details: Additional technical details (optional)
    """

    def __init__(
        self,
        message: str = "A retrieval pipeline error occurred",
        details: Optional[str] = None,
    ):
        self.message = message
        self.details = details

        full_message = message
        if details:
            full_message = f"{message} | Details: {details}"

        super().__init__(full_message)


# =============================================================================
# STORE ERRORS
# =============================================================================


class StoreError(RAGError):
    """Base class for vector store snapshot errors."""

    def __init__(
        self,
        message: str = "Vector store error",
        path: Optional[str] = None,
        details: Optional[str] = None,
    ):
        self.path = path
        if path:
            message = f"{message} [{path}]"
        super().__init__(message, details)


class StoreNotFoundError(StoreError):
    """
    Raised when the snapshot file does not exist.

    The service answers with a "not initialized" signal until the embed
    step has produced a snapshot.
    """

    def __init__(self, path: str):
        super().__init__(
            message="Vector store not initialized: snapshot not found",
            path=path,
        )


class StoreCorruptError(StoreError):
    """
    Raised when the snapshot cannot be parsed or lacks required fields.

    Attributes:
        path: Path to the snapshot
        original_error: The underlying parse/validation error
    """

    def __init__(
        self,
        path: str,
        reason: str = "snapshot is unreadable or incomplete",
        original_error: Optional[Exception] = None,
    ):
        self.reason = reason
        self.original_error = original_error
        details = str(original_error) if original_error else None
        super().__init__(
            message=f"Vector store corrupt: {reason}",
            path=path,
            details=details,
        )


# =============================================================================
# SIMILARITY ERRORS
# =============================================================================


class DimensionMismatchError(RAGError):
    """
    Raised when two vectors of different length are compared, or when a
    record does not match the store's embedding dimension.

    Usually means the snapshot was built with a different embedding model.

    Attributes:
        expected: Length of the reference vector / store dimension
        actual: Length of the offending vector
    """

    def __init__(self, expected: int, actual: int, context: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        message = f"Vector dimension mismatch: expected {expected}, got {actual}"
        if context:
            message = f"{message} ({context})"
        super().__init__(message)


# =============================================================================
# EXTERNAL COLLABORATOR ERRORS
# =============================================================================


class EmbeddingProviderError(RAGError):
    """
    Raised when the embedding provider fails or times out.

    Attributes:
        model: Embedding model that was called
        original_error: The underlying client exception
        timed_out: Whether the call exceeded its time budget
    """

    def __init__(
        self,
        message: str = "Embedding provider failed",
        model: Optional[str] = None,
        original_error: Optional[Exception] = None,
        timed_out: bool = False,
    ):
        self.model = model
        self.original_error = original_error
        self.timed_out = timed_out
        if model:
            message = f"{message} (model '{model}')"
        details = str(original_error) if original_error else None
        super().__init__(message, details)


class GenerationError(RAGError):
    """
    Raised when the text-generation step fails or times out.

    Attributes:
        model: Generation model that was called
        original_error: The underlying exception
    """

    def __init__(
        self,
        message: str = "Text generation failed",
        model: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.model = model
        self.original_error = original_error
        if model:
            message = f"{message} (model '{model}')"
        details = str(original_error) if original_error else None
        super().__init__(message, details)


class InvalidRequestError(RAGError):
    """Raised for malformed caller input before any retrieval work."""

    def __init__(self, message: str = "Invalid request", details: Optional[str] = None):
        super().__init__(message, details)
