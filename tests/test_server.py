"""Tests for server wiring, the health route and the entry point."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from starlette.testclient import TestClient

from persist_mcp.config import Settings
from persist_mcp.server import app_lifespan, create_server
from persist_mcp.services.state import set_deps


class TestHealthCheck:
    """Tests for health check endpoint."""

    @pytest.fixture
    def client(self) -> TestClient:
        server = create_server(Settings())
        return TestClient(server.http_app())

    def test_health_returns_ok(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.text == "OK"
        assert "text/plain" in response.headers["content-type"]


class TestCreateServer:
    """Tests for tool and resource registration."""

    @pytest.mark.asyncio
    async def test_registers_tool_and_resource(self) -> None:
        server = create_server(Settings())

        tools = await server.get_tools()
        resources = await server.get_resources()

        assert "sync_storage" in tools
        assert "storage://status" in resources


class TestLifespan:
    """Tests for startup and shutdown."""

    @pytest.mark.asyncio
    async def test_cleanup_on_shutdown(self) -> None:
        deps = MagicMock()
        deps.settings = Settings()
        deps.cleanup = AsyncMock()
        set_deps(deps)

        async with app_lifespan(MagicMock()) as state:
            assert state == {"storage_configured": False}
            deps.cleanup.assert_not_awaited()

        deps.cleanup.assert_awaited_once()


class TestMain:
    """Tests for __main__ module."""

    def test_runs_with_http_transport_by_default(self) -> None:
        mock_mcp = MagicMock()
        deps = MagicMock()
        deps.settings = Settings(http_host="127.0.0.1", http_port=8000)

        with patch("persist_mcp.__main__.mcp", mock_mcp), \
             patch("persist_mcp.__main__.get_deps", return_value=deps):
            from persist_mcp.__main__ import run_server
            run_server()

        mock_mcp.run.assert_called_once_with(transport="http", host="127.0.0.1", port=8000)

    def test_runs_with_stdio_when_configured(self) -> None:
        mock_mcp = MagicMock()
        deps = MagicMock()
        deps.settings = Settings(transport="stdio")

        with patch("persist_mcp.__main__.mcp", mock_mcp), \
             patch("persist_mcp.__main__.get_deps", return_value=deps):
            from persist_mcp.__main__ import run_server
            run_server()

        mock_mcp.run.assert_called_once_with(transport="stdio")
