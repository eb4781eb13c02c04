"""
Endpoint tests for the assistant API

Uses FastAPI's TestClient with the ToolContext dependency overridden to
point at the fake storefront.

Author: TM3
Date: 2026-10-17
"""
from unittest.mock import AsyncMock, Mock, patch

import pytest
from fastapi.testclient import TestClient

from shopassist.api.chat import get_tool_context
from shopassist.main import app
from shopassist.services.claude_chat_service import ChatResult


@pytest.fixture
def client(ctx):
    """TestClient whose tools run against the fake storefront"""
    app.dependency_overrides[get_tool_context] = lambda: ctx
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestStatusEndpoints:

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "online"

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"

    def test_chat_health(self, client):
        data = client.get("/api/v1/assistant/chat/health").json()

        assert data["status"] in ("healthy", "not_configured")
        assert "model" in data


class TestToolEndpoints:

    def test_list_tools(self, client):
        data = client.get("/api/v1/assistant/tools").json()

        assert data["count"] == 15
        admin_flags = {tool["name"]: tool["admin_only"] for tool in data["tools"]}
        assert admin_flags["update_product_stock"] is True
        assert admin_flags["search_products"] is False

    def test_run_tool(self, client):
        response = client.post("/api/v1/assistant/tools/search_products", json={"query": "phone"})

        assert response.status_code == 200
        assert response.json()["totalResults"] == 2

    def test_run_tool_without_body(self, client):
        response = client.post("/api/v1/assistant/tools/clear_cart")

        assert response.status_code == 200
        assert response.json()["message"] == "Cart is already empty"

    def test_failed_tool_is_200_with_envelope(self, client):
        response = client.post("/api/v1/assistant/tools/get_order_details", json={"order_id": "nope"})

        assert response.status_code == 200
        assert response.json()["success"] is False
        assert response.json()["errorKind"] == "not_found"

    def test_unknown_tool_is_404(self, client):
        assert client.post("/api/v1/assistant/tools/drop_tables", json={}).status_code == 404

    def test_bad_parameters_are_422(self, client):
        response = client.post("/api/v1/assistant/tools/clear_cart", json={"everything": True})

        assert response.status_code == 422

    def test_admin_tool_refused_for_shopper(self, client, storefront):
        response = client.post(
            "/api/v1/assistant/tools/update_product_details",
            json={"product_id": "p1", "updates": {"price": 1}},
        )

        assert response.status_code == 403
        assert storefront.requests_for("PUT") == []

    def test_admin_tool_refused_for_non_admin_user(self, client, storage, storefront):
        storage.set_json("userInfo", {"name": "Jane", "isAdmin": False})

        response = client.post(
            "/api/v1/assistant/tools/update_product_stock",
            json={"product_id": "p3", "new_stock_level": 0},
        )

        assert response.status_code == 403
        assert storefront.requests_for("PUT") == []

    def test_admin_tool_runs_for_admin(self, client, storage, storefront):
        storage.set_json("userInfo", {"name": "Admin", "isAdmin": True})

        response = client.post(
            "/api/v1/assistant/tools/update_product_details",
            json={"product_id": "p1", "updates": {"price": 1}},
        )

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert len(storefront.requests_for("PUT")) == 1

    def test_cart_tool_updates_context(self, client):
        client.post("/api/v1/assistant/tools/add_to_cart", json={"product_id": "p1", "quantity": 2})

        context = client.get("/api/v1/assistant/context", params={"path": "/product/p1"}).json()

        assert context["currentPage"]["pageType"] == "product-detail"
        assert context["cartState"]["itemCount"] == 2
        assert context["userInfo"]["isLoggedIn"] is False


class TestChatEndpoint:

    @patch("shopassist.api.chat.get_chat_service")
    def test_chat(self, mock_get_service, client):
        service = Mock()
        service.process_query = AsyncMock(return_value=ChatResult(
            response="Here you go",
            tools_used=["search_products"],
            model="claude-haiku-4-5-20251001",
            input_tokens=120,
            output_tokens=30,
        ))
        mock_get_service.return_value = service

        response = client.post("/api/v1/assistant/chat", json={
            "message": "Find headphones",
            "history": [{"role": "user", "content": "Hi"}],
            "path": "/",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["response"] == "Here you go"
        assert data["usage"]["total_tokens"] == 150
        kwargs = service.process_query.await_args.kwargs
        assert kwargs["history"] == [{"role": "user", "content": "Hi"}]
        assert kwargs["path"] == "/"

    @patch("shopassist.api.chat.get_chat_service")
    def test_chat_not_configured(self, mock_get_service, client):
        mock_get_service.side_effect = ValueError("ANTHROPIC_API_KEY environment variable not set")

        response = client.post("/api/v1/assistant/chat", json={"message": "Hi"})

        assert response.status_code == 500
        assert response.json()["detail"] == "Chat service not configured. Please contact administrator."

    def test_empty_message_rejected(self, client):
        assert client.post("/api/v1/assistant/chat", json={"message": ""}).status_code == 422
