"""Tests for the HTTP surfaces: retrieval.app and generation.app."""

import pytest
from fastapi.testclient import TestClient

from analytics.tracker import AnalyticsTracker
from common.exceptions import EmbeddingProviderError
from generation.app import create_app as create_chat_app
from generation.config import GenerationConfig
from retrieval.app import create_app as create_search_app
from retrieval.config import RetrievalConfig
from retrieval.retriever import Retriever
from vector_store.store import StoreProvider

from conftest import FailingEmbedder, FakeEmbedder


def _chat_client(retriever: Retriever, tracker=None) -> TestClient:
    app = create_chat_app(
        config=GenerationConfig(enabled=False, analytics_path=""),
        retrieval_config=RetrievalConfig(),
        retriever=retriever,
        tracker=tracker,
    )
    return TestClient(app)


@pytest.fixture
def retriever(store_provider):
    return Retriever(store_provider, FakeEmbedder())


@pytest.fixture
def missing_store_retriever(tmp_path):
    return Retriever(StoreProvider(tmp_path / "missing.json"), FakeEmbedder())


class TestChatEndpoint:
    def test_answer(self, retriever):
        response = _chat_client(retriever).post("/api/chat", json={"query": "robots and sensors", "top_k": 2})
        assert response.status_code == 200
        body = response.json()
        assert body["reply"]
        assert len(body["sources"]) == 2
        assert set(body["sources"][0]) == {"label", "title", "section", "file", "confidence"}

    def test_message_alias(self, retriever):
        response = _chat_client(retriever).post("/api/chat", json={"message": "robots"})
        assert response.status_code == 200

    def test_missing_query(self, retriever):
        assert _chat_client(retriever).post("/api/chat", json={}).status_code == 422

    def test_blank_query(self, retriever):
        assert _chat_client(retriever).post("/api/chat", json={"query": "   "}).status_code == 422

    def test_non_string_query(self, retriever):
        assert _chat_client(retriever).post("/api/chat", json={"query": 42}).status_code == 422

    def test_top_k_out_of_range(self, retriever):
        assert _chat_client(retriever).post("/api/chat", json={"query": "robots", "top_k": 0}).status_code == 422

    def test_store_not_initialized(self, missing_store_retriever):
        response = _chat_client(missing_store_retriever).post("/api/chat", json={"query": "robots"})
        assert response.status_code == 503
        assert "not initialized" in response.json()["detail"]

    def test_embedding_unavailable(self, store_provider):
        retriever = Retriever(store_provider, FailingEmbedder(EmbeddingProviderError("down")))
        assert _chat_client(retriever).post("/api/chat", json={"query": "robots"}).status_code == 503

    def test_embedding_timeout(self, store_provider):
        retriever = Retriever(store_provider, FailingEmbedder(EmbeddingProviderError("slow", timed_out=True)))
        assert _chat_client(retriever).post("/api/chat", json={"query": "robots"}).status_code == 504


class TestFeedbackEndpoint:
    def test_rating_recorded(self, retriever, tmp_path):
        tracker = AnalyticsTracker(tmp_path / "analytics.json")
        client = _chat_client(retriever, tracker)

        interaction_id = client.post("/api/chat", json={"query": "robots"}).json()["metadata"]["interaction_id"]
        response = client.post("/api/feedback", json={"interaction_id": interaction_id, "rating": 4})

        assert response.status_code == 200
        assert tracker.load().interactions[0].user_rating == 4

    def test_unknown_interaction(self, retriever, tmp_path):
        client = _chat_client(retriever, AnalyticsTracker(tmp_path / "analytics.json"))
        response = client.post("/api/feedback", json={"interaction_id": "interaction_x", "rating": 4})
        assert response.status_code == 404

    def test_invalid_rating(self, retriever, tmp_path):
        client = _chat_client(retriever, AnalyticsTracker(tmp_path / "analytics.json"))
        response = client.post("/api/feedback", json={"interaction_id": "interaction_x", "rating": 9})
        assert response.status_code == 422

    def test_analytics_disabled(self, retriever):
        response = _chat_client(retriever).post("/api/feedback", json={"interaction_id": "x", "rating": 3})
        assert response.status_code == 503

    def test_corrupt_analytics_file(self, retriever, tmp_path):
        path = tmp_path / "analytics.json"
        path.write_text("{not json", encoding="utf-8")
        client = _chat_client(retriever, AnalyticsTracker(path))
        response = client.post("/api/feedback", json={"interaction_id": "interaction_x", "rating": 4})
        assert response.status_code == 503
        assert "Analytics unavailable" in response.json()["detail"]


class TestChatHealth:
    def test_ready(self, retriever):
        body = _chat_client(retriever).get("/api/health").json()
        assert body["status"] == "ok"
        assert body["vector_store"] == "ready"
        assert body["generation"] == "template"

    def test_not_initialized(self, missing_store_retriever):
        body = _chat_client(missing_store_retriever).get("/api/health").json()
        assert body["vector_store"] == "not initialized"


class TestSearchApp:
    def _client(self, retriever) -> TestClient:
        return TestClient(create_search_app(config=RetrievalConfig(), retriever=retriever))

    def test_rag_search(self, retriever):
        response = self._client(retriever).post("/api/rag", json={"query": "robots", "top_k": 2})
        assert response.status_code == 200
        body = response.json()
        assert len(body["results"]) == 2
        assert body["results"][0]["score"] == pytest.approx(0.9)
        assert body["context_text"].startswith("[1] (90% match)")

    def test_missing_query(self, retriever):
        assert self._client(retriever).post("/api/rag", json={"top_k": 2}).status_code == 422

    def test_store_not_initialized(self, missing_store_retriever):
        assert self._client(missing_store_retriever).post("/api/rag", json={"query": "x"}).status_code == 503

    def test_health_and_stats(self, retriever):
        client = self._client(retriever)
        assert client.get("/api/health").json()["vector_store"] == "ready"
        stats = client.get("/api/stats").json()
        assert stats["records"] == 3
        assert "uptime_seconds" in stats
