"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def test_client(offline_manager, monkeypatch):
    """Create a test client without lifespan, backed by an offline manager."""
    # Create app without lifespan to avoid building the configured embedding client
    from fastapi import FastAPI
    from sheetmapper.api import app as app_module
    from sheetmapper.api.routes import router

    monkeypatch.setattr(app_module, "_manager", offline_manager)

    app = FastAPI()
    app.include_router(router, prefix="/api")

    with TestClient(app) as client:
        yield client


class TestHealthEndpoint:
    """Test the /api/health endpoint."""

    def test_health_check_returns_ok_status(self, test_client):
        response = test_client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["service"] == "sheetmapper"

    def test_health_check_shows_key_presence_without_secrets(self, test_client):
        """Test that health check shows key presence without exposing actual keys."""
        response = test_client.get("/api/health")

        config = response.json()["config"]
        assert "embedding_provider" in config
        assert isinstance(config["huggingface_key_present"], bool)
        assert "huggingface_api_key" not in config


class TestSchemaEndpoints:
    """Test the schema listing endpoints."""

    def test_list_schemas(self, test_client):
        response = test_client.get("/api/schemas")

        assert response.status_code == 200
        kinds = [schema["kind"] for schema in response.json()["schemas"]]
        assert kinds == ["client", "worker", "task"]

    def test_get_schema(self, test_client):
        response = test_client.get("/api/schemas/worker")

        assert response.status_code == 200
        names = [field["name"] for field in response.json()["fields"]]
        assert names[:3] == ["WorkerID", "WorkerName", "Skills"]

    def test_unknown_schema_returns_404(self, test_client):
        response = test_client.get("/api/schemas/vendor")

        assert response.status_code == 404


class TestMappingEndpoints:
    """Test classification and mapping endpoints."""

    def test_classify(self, test_client):
        response = test_client.post(
            "/api/classify", json={"headers": ["ClientID", "ClientName", "PriorityLevel"]}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["entity_kind"] == "client"
        assert data["method"] == "keyword"

    def test_map_with_kind(self, test_client):
        response = test_client.post(
            "/api/map", json={"headers": ["customer_id", "Qwerty"], "entity_kind": "client"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["entity_kind"] == "client"
        assert data["mappings"]["customer_id"]["field_name"] == "ClientID"
        assert data["mappings"]["customer_id"]["method"] == "alias"
        assert data["unmapped"] == ["Qwerty"]
        assert data["classification"] is None

    def test_map_classifies_when_kind_missing(self, test_client):
        response = test_client.post(
            "/api/map", json={"headers": ["TaskID", "TaskName", "Duration"]}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["entity_kind"] == "task"
        assert data["classification"]["entity_kind"] == "task"

    def test_map_unknown_kind_returns_400(self, test_client):
        response = test_client.post(
            "/api/map", json={"headers": ["ClientID"], "entity_kind": "vendor"}
        )

        assert response.status_code == 400

    def test_suggestions(self, test_client):
        response = test_client.post(
            "/api/suggestions", json={"unmapped": ["cust"], "entity_kind": "client"}
        )

        assert response.status_code == 200
        assert response.json()["suggestions"] == ['"cust" might be "ClientID"']


class TestDiagnosticsEndpoints:
    """Test stats and cache control."""

    def test_stats(self, test_client):
        response = test_client.get("/api/stats")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "hit_rate" in data["cache"]
        assert "state" in data["embeddings"]

    def test_clear_cache(self, test_client, offline_manager):
        offline_manager.cache.put("ratio::a||b", 0.5)

        response = test_client.post("/api/cache/clear")

        assert response.status_code == 200
        assert offline_manager.cache.size() == 0


class TestLifespan:
    """Test application startup and shutdown."""

    def test_startup_resolves_embeddings_and_shutdown_resets(self, offline_manager, monkeypatch):
        from sheetmapper.api import app as app_module
        from sheetmapper.api import create_app
        from sheetmapper.embeddings import EmbeddingState

        monkeypatch.setattr(app_module, "_manager", offline_manager)

        with TestClient(create_app()) as client:
            assert client.app.state.manager is offline_manager
            assert offline_manager.embeddings.state == EmbeddingState.UNAVAILABLE

            response = client.post("/api/classify", json={"headers": ["TaskID", "TaskName"]})
            assert response.json()["entity_kind"] == "task"

        assert app_module._manager is None
