"""
Pytest fixtures for the docs-rag tests.
"""

import logging
import math

import pytest

from chunking.models import SourceRef
from common.logging_config import APP_LOGGER_NAME
from vector_store.models import EmbeddedChunk, make_record_id
from vector_store.store import StoreProvider, VectorStore


INTRO_DOC = """---
title: Introduction to Physical AI
sidebar_position: 1
---

# Introduction to Physical AI

Physical AI describes systems that perceive the world and act in it. Robots combine sensors, actuators and learned models to close the loop between perception and action.

## Sensors

Depth cameras project a pattern of infrared light and measure its distortion. Lidar sensors measure the time of flight of laser pulses to build a point cloud of the scene.
"""

PROMPTING_DOC = """# Prompt Basics

A prompt is the instruction given to a language model. Clear prompts state the task, the expected format and any constraints the answer must respect.

```python
prompt = "Summarize the following text"
```

See the [style guide](../style.md) for more examples of well-formed prompts in `production` systems.
"""

TINY_DOC = "# Tiny\n\nHi.\n"


@pytest.fixture
def docs_dir(tmp_path):
    """A small documentation tree with three sections."""
    root = tmp_path / "docs"
    (root / "physical-ai").mkdir(parents=True)
    (root / "prompting").mkdir()
    (root / "robotics").mkdir()
    (root / "physical-ai" / "01-intro.md").write_text(INTRO_DOC, encoding="utf-8")
    (root / "prompting" / "basics.mdx").write_text(PROMPTING_DOC, encoding="utf-8")
    (root / "robotics" / "tiny.md").write_text(TINY_DOC, encoding="utf-8")
    (root / "robotics" / "notes.txt").write_text("not markdown", encoding="utf-8")
    return root


def unit_vector(cos: float) -> list[float]:
    """2-d unit vector whose cosine with [1, 0] is ``cos``."""
    return [cos, math.sqrt(max(0.0, 1.0 - cos * cos))]


def make_record(
    text: str,
    vector: list[float],
    file: str = "docs/physical-ai/01-intro.md",
    section: str = "physical-ai",
    title: str = "Introduction",
    sequence_index: int = 0,
) -> EmbeddedChunk:
    source = SourceRef(file=file, section=section, title=title)
    return EmbeddedChunk(
        record_id=make_record_id(source, sequence_index, text),
        text=text,
        vector=vector,
        source=source,
        sequence_index=sequence_index,
    )


def make_store(vectors: list[list[float]], model: str = "fake-model") -> VectorStore:
    store = VectorStore(model_identifier=model)
    for i, vector in enumerate(vectors):
        store.add(make_record(f"Passage number {i} about robots and sensors.", vector, sequence_index=i))
    return store


class FakeEmbedder:
    """Deterministic embedder: looks texts up in a table, else a default vector."""

    def __init__(self, table=None, default=None, model: str = "fake-model"):
        self.model = model
        self.table = table or {}
        self.default = default or [1.0, 0.0]
        self.calls: list[list[str]] = []

    def embed(self, text: str) -> list[float]:
        self.calls.append([text])
        return list(self.table.get(text, self.default))

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        return [list(self.table.get(t, self.default)) for t in texts]


class FailingEmbedder:
    def __init__(self, error: Exception, model: str = "fake-model"):
        self.model = model
        self.error = error

    def embed(self, text: str) -> list[float]:
        raise self.error

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        raise self.error


@pytest.fixture
def ranked_store():
    """Three records with cosines 0.4, 0.9, 0.9 against the query [1, 0]."""
    return make_store([unit_vector(0.4), unit_vector(0.9), unit_vector(0.9)])


@pytest.fixture
def store_provider(ranked_store):
    return StoreProvider.from_store(ranked_store)


@pytest.fixture(autouse=True)
def _reset_app_logger():
    """Drop handlers installed by CLI entry points (they bind captured streams)."""
    logger = logging.getLogger(APP_LOGGER_NAME)
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)
