"""Endpoint tests for the FastAPI app (computeless_rag/main.py).

The lifespan is not entered, so no HTTP clients are opened; pipelines are
swapped for ones running against the in-memory fake services.
"""

import pytest
from fastapi.testclient import TestClient

from computeless_rag.dependencies import get_query_pipeline, get_store_pipeline
from computeless_rag.main import app
from computeless_rag.pipeline.rag_pipeline import QueryPipeline, StorePipeline
from tests.fixtures.stub_transport import raw_response, timeout

EMBED_PATH = "/model/amazon.titan-embed-text-v1/invoke"


@pytest.fixture
def client(transport, pipeline_config):
    app.dependency_overrides[get_query_pipeline] = lambda: QueryPipeline(
        transport=transport, config=pipeline_config
    )
    app.dependency_overrides[get_store_pipeline] = lambda: StorePipeline(
        transport=transport, config=pipeline_config
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.mark.integration
class TestQueryEndpoint:

    def test_answer(self, client, services):
        services.seed("Employees must give 30 days notice.")

        response = client.post("/api/query", json={"query": "What is the notice period?"})

        assert response.status_code == 200
        assert response.json() == {"answer": "30 days."}

    def test_collaborator_status_and_body_pass_through(self, client, transport):
        body = '{"message":"Internal server error"}'
        transport.route("pinecone", "/query", lambda r: raw_response(body, 500))

        response = client.post("/api/query", json={"query": "What is the notice period?"})

        assert response.status_code == 500
        payload = response.json()
        assert payload["error"] == "collaborator_error"
        assert payload["body"] == body
        assert payload["collaborator"] == "pinecone"
        assert payload["step"] == "RetrieverStep"

    def test_timeout_is_bad_gateway(self, client, transport):
        transport.route("bedrock", EMBED_PATH, timeout)

        response = client.post("/api/query", json={"query": "What is the notice period?"})

        assert response.status_code == 502
        assert response.json()["error_type"] == "TimeoutError"

    def test_blank_query_is_rejected(self, client, transport):
        response = client.post("/api/query", json={"query": "   "})

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"
        assert transport.calls == []

    def test_missing_query_field(self, client):
        response = client.post("/api/query", json={})

        assert response.status_code == 422


@pytest.mark.integration
class TestStoreEndpoint:

    def test_store_ack(self, client, services):
        response = client.post("/api/store", json={"query": "Holidays accrue monthly."})

        assert response.status_code == 200
        payload = response.json()
        assert payload["namespace"] == "computeless-rag"
        assert [v["id"] for v in services.vectors["computeless-rag"]] == [payload["vector_id"]]

    def test_store_failure_passes_status_through(self, client, transport):
        transport.route("secrets", "/", lambda r: raw_response('{"__type":"AccessDenied"}', 400))

        response = client.post("/api/store", json={"query": "text"})

        assert response.status_code == 400
        assert response.json()["body"] == '{"__type":"AccessDenied"}'


@pytest.mark.unit
def test_health_without_clients(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "unavailable"
