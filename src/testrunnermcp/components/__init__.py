"""Core components: session bookkeeping, validation, translation and dispatch."""

from .command_translator import build_open_session_run, translate_step
from .request_validator import RequestValidator, ValidationOutcome
from .session_registry import SessionRegistry
from .tool_dispatcher import ToolDispatcher

__all__ = [
    "RequestValidator",
    "SessionRegistry",
    "ToolDispatcher",
    "ValidationOutcome",
    "build_open_session_run",
    "translate_step",
]
