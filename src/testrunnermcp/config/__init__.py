"""Configuration and static capability catalog."""

from .capability_catalog import (
    PROMPT_SPECS,
    RESOURCE_SPECS,
    SERVER_CONFIG,
    TOOL_SPECS,
)
from .settings import ServerConfig, load_server_config

__all__ = [
    "PROMPT_SPECS",
    "RESOURCE_SPECS",
    "SERVER_CONFIG",
    "TOOL_SPECS",
    "ServerConfig",
    "load_server_config",
]
