"""Tests for common.exceptions and common.logging_config."""

import logging

import pytest

from common.exceptions import (
    DimensionMismatchError,
    EmbeddingProviderError,
    GenerationError,
    InvalidRequestError,
    RAGError,
    StoreCorruptError,
    StoreError,
    StoreNotFoundError,
)
from common.logging_config import APP_LOGGER_NAME, get_logger, setup_logging


class TestHierarchy:
    @pytest.mark.parametrize("exc", [
        StoreNotFoundError("store.json"),
        StoreCorruptError("store.json"),
        DimensionMismatchError(3, 4),
        EmbeddingProviderError(),
        GenerationError(),
        InvalidRequestError(),
    ])
    def test_all_are_rag_errors(self, exc):
        assert isinstance(exc, RAGError)

    def test_store_errors(self):
        assert issubclass(StoreNotFoundError, StoreError)
        assert issubclass(StoreCorruptError, StoreError)


class TestMessages:
    def test_details_appended(self):
        assert str(RAGError("Boom", "stack")) == "Boom | Details: stack"

    def test_store_not_found(self):
        exc = StoreNotFoundError("data/rag/store.json")
        assert exc.path == "data/rag/store.json"
        assert "not initialized" in str(exc)
        assert "data/rag/store.json" in str(exc)

    def test_store_corrupt_keeps_cause(self):
        cause = ValueError("bad json")
        exc = StoreCorruptError("s.json", "snapshot is not valid JSON", cause)
        assert exc.reason == "snapshot is not valid JSON"
        assert exc.original_error is cause
        assert exc.details == "bad json"

    def test_dimension_mismatch(self):
        exc = DimensionMismatchError(384, 768, "query vs. store")
        assert exc.expected == 384
        assert exc.actual == 768
        assert str(exc) == "Vector dimension mismatch: expected 384, got 768 (query vs. store)"

    def test_embedding_error_model(self):
        exc = EmbeddingProviderError("Timed out", model="all-minilm", timed_out=True)
        assert exc.timed_out
        assert "all-minilm" in str(exc)


class TestLogging:
    def test_get_logger_namespaced(self):
        assert get_logger("retrieval.retriever").name == f"{APP_LOGGER_NAME}.retrieval.retriever"

    def test_setup_logging_replaces_handlers(self, tmp_path):
        logger = logging.getLogger(APP_LOGGER_NAME)
        previous = list(logger.handlers)
        try:
            setup_logging(logging.DEBUG, log_file=tmp_path / "rag.log")
            setup_logging(logging.DEBUG, log_file=tmp_path / "rag.log")
            assert len(logger.handlers) == 2
            assert logger.level == logging.DEBUG
        finally:
            for handler in logger.handlers:
                handler.close()
            logger.handlers = previous
            logger.setLevel(logging.NOTSET)

    def test_level_names(self):
        logger = logging.getLogger(APP_LOGGER_NAME)
        previous = list(logger.handlers)
        try:
            assert setup_logging("warning").level == logging.WARNING
            with pytest.raises(ValueError):
                setup_logging("chatty")
        finally:
            logger.handlers = previous
            logger.setLevel(logging.NOTSET)
