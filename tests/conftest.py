"""Pytest configuration for the Test Runner MCP test suite."""

from __future__ import annotations

import pytest

from testrunnermcp.components.session_registry import SessionRegistry
from testrunnermcp.components.tool_dispatcher import ToolDispatcher
from testrunnermcp.config.settings import ServerConfig
from testrunnermcp.models.session_models import SessionType
from tests.unit.helpers.fake_engine import FakeEngine


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def dispatcher(registry: SessionRegistry, engine: FakeEngine) -> ToolDispatcher:
    return ToolDispatcher(registry, engine)


@pytest.fixture
def open_web_session(registry: SessionRegistry) -> SessionRegistry:
    """Registry already holding web session ``abc``."""
    registry.set_current("abc", SessionType.WEB)
    return registry


@pytest.fixture
def server_config() -> ServerConfig:
    return ServerConfig(engine_url="http://127.0.0.1:7373", port=3100)
