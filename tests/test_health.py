"""
HackeyeBot - Health Check Tests
===============================

Tests for the /health status payload.
"""

import json
from unittest.mock import MagicMock

import pytest

from hackeye.core.health import HealthCheckServer


@pytest.fixture
def status_bot():
    bot = MagicMock()
    bot.is_ready = MagicMock(return_value=True)
    bot.guilds = [MagicMock(), MagicMock()]
    bot.pipeline = MagicMock(active_workers=3)
    return bot


class TestHealthStatus:
    """Tests for HealthCheckServer.build_status and the handler."""

    @pytest.mark.asyncio
    async def test_healthy_status(self, status_bot):
        status = HealthCheckServer(status_bot, port=0).build_status()

        assert status["status"] == "healthy"
        assert status["connected"] is True
        assert status["guilds"] == 2
        assert status["active_workers"] == 3
        assert "timestamp" in status

    @pytest.mark.asyncio
    async def test_starting_without_pipeline(self, status_bot):
        status_bot.is_ready = MagicMock(return_value=False)
        status_bot.pipeline = None

        status = HealthCheckServer(status_bot, port=0).build_status()

        assert status["status"] == "starting"
        assert status["active_workers"] == 0

    @pytest.mark.asyncio
    async def test_handler_returns_json(self, status_bot):
        response = await HealthCheckServer(status_bot, port=0).health_handler(MagicMock())

        assert response.status == 200
        assert json.loads(response.text)["guilds"] == 2

    @pytest.mark.asyncio
    async def test_handler_reports_errors(self, status_bot):
        status_bot.is_ready = MagicMock(side_effect=RuntimeError("boom"))

        response = await HealthCheckServer(status_bot, port=0).health_handler(MagicMock())

        assert response.status == 500
        assert json.loads(response.text)["status"] == "error"

    @pytest.mark.asyncio
    async def test_stop_without_start(self, status_bot):
        server = HealthCheckServer(status_bot, port=0)
        await server.stop()
        assert server.runner is None
