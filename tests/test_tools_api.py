"""Tests for the tool and health endpoints."""

import json

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from design_service.api.v1 import health_router, tools_router
from design_service.main import install_services


def payload_of(body):
    """The machine-readable part: last content item, JSON encoded."""
    return json.loads(body["content"][-1]["text"])


@pytest.fixture
def make_client():
    def build(catalog, provider=None) -> TestClient:
        app = FastAPI()
        app.include_router(health_router)
        app.include_router(tools_router, prefix="/api/v1")
        install_services(app, provider, catalog)
        return TestClient(app)
    return build


@pytest.fixture
def client(make_client, sample_catalog) -> TestClient:
    return make_client(sample_catalog)


class TestToolList:

    def test_lists_four_tools(self, client):
        response = client.get("/api/v1/tools")

        assert response.status_code == 200
        tools = {tool["name"]: tool for tool in response.json()["tools"]}
        assert set(tools) == {"analyze_and_plan", "design_block", "integrate", "query_component"}
        assert "blockId" in tools["design_block"]["inputSchema"]["properties"]
        assert "componentName" in tools["query_component"]["inputSchema"]["properties"]


class TestToolCalls:

    def test_unknown_tool_is_404(self, client):
        response = client.post("/api/v1/tools/delete_everything", json={})
        assert response.status_code == 404

    def test_missing_arguments_are_reported(self, client):
        response = client.post("/api/v1/tools/design_block", json={})

        assert response.status_code == 200
        body = response.json()
        assert body["isError"] is True
        assert len(body["content"]) == 1
        text = body["content"][0]["text"]
        assert text.startswith("❌ Block design failed: Invalid arguments:")
        assert "blockId is required" in text
        assert "prompt is required" in text

    def test_no_body_is_validated_too(self, client):
        body = client.post("/api/v1/tools/query_component").json()
        assert body["isError"] is True
        assert "componentName is required" in body["content"][0]["text"]

    def test_query_unknown_component(self, make_client, ab_catalog):
        body = make_client(ab_catalog).post(
            "/api/v1/tools/query_component", json={"componentName": "nonexistent"}
        ).json()

        assert body["isError"] is True
        assert "Component query failed" in body["content"][0]["text"]
        assert "Available components: a, b" in body["content"][0]["text"]

    def test_query_known_component(self, client):
        body = client.post("/api/v1/tools/query_component", json={"componentName": "cat-button"}).json()

        assert "isError" not in body
        assert payload_of(body) == {
            "componentName": "cat-button",
            "component": {"api": {"props": {"loading": "boolean"}}},
        }

    def test_analyze_and_plan(self, client):
        body = client.post(
            "/api/v1/tools/analyze_and_plan",
            json={"prompt": [{"type": "text", "text": "需要一个表格和搜索表单"}]},
        ).json()

        assert "isError" not in body
        assert body["content"][0]["text"].startswith("## Design Strategy")

        payload = payload_of(body)
        assert payload["complexityAnalysis"]["complexity"] == "medium"
        assert [b["blockId"] for b in payload["strategy"]["blocks"]] == ["content-area-1", "content-area-2"]
        assert payload["nextAction"]["tool"] == "design_block"
        assert payload["smartAnalysis"]["source"] == "fallback"

    def test_design_block_without_provider_fails_softly(self, client):
        body = client.post(
            "/api/v1/tools/design_block",
            json={"blockId": "b1", "prompt": [{"type": "text", "text": "a table"}]},
        ).json()

        assert body["isError"] is True
        assert body["content"][0]["text"] == (
            "❌ Block design failed: No text-generation provider configured"
        )

    def test_design_block_with_provider(self, make_client, sample_catalog, scripted_provider):
        provider = scripted_provider(
            "### Component Name\nRecordTable\n\n### Component Description\nRecords.\n"
        )
        client = make_client(sample_catalog, provider)

        body = client.post(
            "/api/v1/tools/design_block",
            json={"blockId": "  b1 ", "prompt": [{"type": "text", "text": "a table"}]},
        ).json()

        payload = payload_of(body)
        assert payload["blockId"] == "b1"
        assert payload["design"]["componentName"] == "RecordTable"
        assert payload["integrated"] is None

    def test_integrate_private_component(self, client):
        body = client.post(
            "/api/v1/tools/integrate",
            json={
                "strategy": {"blocks": [{"blockId": "b1", "title": "Only block"}]},
                "blockDesigns": [
                    {"blockId": "b1", "component": {"library": [{"components": ["cat-button"]}], "props": []}}
                ],
            },
        ).json()

        assert body["content"][0]["text"].startswith("# Component Integration Plan")
        aggregated = payload_of(body)["integrated"]["aggregated"]
        assert aggregated["privateComponentsUsed"] == ["cat-button"]
        assert "b1" not in aggregated["propsByBlock"]


class TestHealth:

    def test_degraded_without_provider(self, client):
        body = client.get("/health").json()

        assert body["status"] == "degraded"
        assert body["provider_configured"] is False
        assert body["catalog_components"] == 2

    def test_healthy_with_provider(self, make_client, sample_catalog, scripted_provider):
        body = make_client(sample_catalog, scripted_provider()).get("/health").json()
        assert body["status"] == "healthy"


def test_application_startup():
    from design_service.main import app

    with TestClient(app) as client:
        response = client.get("/health", headers={"X-Correlation-ID": "test-correlation"})

    assert response.status_code == 200
    assert response.headers["X-Correlation-ID"] == "test-correlation"
