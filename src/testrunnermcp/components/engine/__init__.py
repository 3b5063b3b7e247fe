"""Test runner engine boundary."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .http_client import TestRunnerHttpClient
from .interface import (
    DEFAULT_DOM_DEPTH,
    EngineConnectionError,
    EngineError,
    EngineProtocolError,
    TestRunnerEngine,
)

if TYPE_CHECKING:
    from testrunnermcp.config.settings import ServerConfig


def create_engine(config: "ServerConfig") -> TestRunnerEngine:
    """Build the engine client described by the server configuration."""
    return TestRunnerHttpClient(
        base_url=config.engine_url,
        token=config.engine_token,
        timeout=config.engine_timeout,
    )


__all__ = [
    "DEFAULT_DOM_DEPTH",
    "EngineConnectionError",
    "EngineError",
    "EngineProtocolError",
    "TestRunnerEngine",
    "TestRunnerHttpClient",
    "create_engine",
]
