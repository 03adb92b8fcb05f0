"""
Unit tests for the HTTP-mode wiring in app.py.

The module is imported with a throwaway environment; no server is started.
"""

import importlib
import sys
from unittest.mock import AsyncMock

import pytest


@pytest.fixture
def app_module(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SLACK_BOT_TOKEN", "xoxb-test")
    monkeypatch.setenv("SLACK_SIGNING_SECRET", "signing-secret")
    monkeypatch.delenv("SLACK_APP_TOKEN", raising=False)
    monkeypatch.setenv("NOTION_API_KEY", "secret")
    monkeypatch.setenv("NOTION_USERS_DATABASE_ID", "users-db")
    monkeypatch.setenv("NOTION_NEIGHBORHOODS_DATABASE_ID", "hoods-db")

    sys.modules.pop("app", None)
    module = importlib.import_module("app")
    yield module
    sys.modules.pop("app", None)


class TestHttpMode:
    def test_web_app_registers_cleanup(self, app_module):
        web_app = app_module.build_web_app()

        assert app_module._cleanup in web_app.on_cleanup

    @pytest.mark.asyncio
    async def test_cleanup_runs_shutdown(self, app_module, monkeypatch):
        shutdown = AsyncMock()
        monkeypatch.setattr(app_module, "shutdown", shutdown)

        await app_module._cleanup(app_module.build_web_app())

        shutdown.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_shutdown_drains_router_and_closes_gateway(self, app_module, monkeypatch):
        drain = AsyncMock()
        gateway_shutdown = AsyncMock()
        monkeypatch.setattr(app_module.router, "drain", drain)
        monkeypatch.setattr(app_module.get_gateway_service(), "shutdown", gateway_shutdown)

        await app_module.shutdown()

        drain.assert_awaited_once_with(timeout=10)
        gateway_shutdown.assert_awaited_once()
