"""Runtime configuration for the Test Runner MCP server."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

_DEFAULT_ENGINE_URL = "http://127.0.0.1:7373"
_DEFAULT_ENGINE_TIMEOUT = 300.0
_DEFAULT_HOST = "127.0.0.1"
_DEFAULT_PORT = 3000
_DEFAULT_PATH = "/mcp"
_DEFAULT_LOG_LEVEL = "INFO"
_ENV_LOADED = False


@dataclass(frozen=True)
class ServerConfig:
    """Holds settings for the MCP transport and the test runner connection."""

    engine_url: str = _DEFAULT_ENGINE_URL
    engine_token: Optional[str] = None
    engine_timeout: float = _DEFAULT_ENGINE_TIMEOUT
    host: str = _DEFAULT_HOST
    port: int = _DEFAULT_PORT
    path: str = _DEFAULT_PATH
    log_level: str = _DEFAULT_LOG_LEVEL

    @property
    def http_url(self) -> str:
        return f"http://{self.host}:{self.port}{self.path}"

    def with_overrides(
        self,
        *,
        engine_url: Optional[str] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
        path: Optional[str] = None,
        log_level: Optional[str] = None,
    ) -> "ServerConfig":
        """Return a copy with the provided overrides applied."""

        cfg = self
        if engine_url:
            cfg = replace(cfg, engine_url=engine_url)
        if host:
            cfg = replace(cfg, host=host)
        if port is not None:
            cfg = replace(cfg, port=port)
        if path:
            cfg = replace(cfg, path=path)
        if log_level:
            cfg = replace(cfg, log_level=log_level.upper())
        return cfg


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def load_server_config(
    *,
    engine_url: Optional[str] = None,
    host: Optional[str] = None,
    port: Optional[int] = None,
    path: Optional[str] = None,
    log_level: Optional[str] = None,
) -> ServerConfig:
    """Load configuration from environment variables and overrides.

    Environment variables:
    - TESTRUNNER_ENGINE_URL: base URL of the test runner service
    - TESTRUNNER_ENGINE_TOKEN: optional shared secret sent to the runner
    - TESTRUNNER_ENGINE_TIMEOUT: socket timeout in seconds (default 300)
    - MCP_SERVER_HOST / MCP_SERVER_PORT / MCP_SERVER_PATH: HTTP transport
    - TESTRUNNER_MCP_LOG_LEVEL: log level (default INFO)
    """

    _ensure_env_loaded()
    config = ServerConfig(
        engine_url=os.getenv("TESTRUNNER_ENGINE_URL", "").strip() or _DEFAULT_ENGINE_URL,
        engine_token=os.getenv("TESTRUNNER_ENGINE_TOKEN", "").strip() or None,
        engine_timeout=_env_float("TESTRUNNER_ENGINE_TIMEOUT", _DEFAULT_ENGINE_TIMEOUT),
        host=os.getenv("MCP_SERVER_HOST", "").strip() or _DEFAULT_HOST,
        port=port if port is not None else _env_int("MCP_SERVER_PORT", _DEFAULT_PORT),
        path=os.getenv("MCP_SERVER_PATH", "").strip() or _DEFAULT_PATH,
        log_level=(os.getenv("TESTRUNNER_MCP_LOG_LEVEL", "").strip() or _DEFAULT_LOG_LEVEL).upper(),
    )
    return config.with_overrides(
        engine_url=engine_url,
        host=host,
        port=port,
        path=path,
        log_level=log_level,
    )


def _ensure_env_loaded() -> None:
    global _ENV_LOADED
    if _ENV_LOADED:
        return
    _ENV_LOADED = True
    dotenv_path = Path.cwd() / ".env"
    if dotenv_path.exists():
        load_dotenv(dotenv_path=dotenv_path)
    else:
        load_dotenv()
