"""Boundary between the MCP core and the test runner."""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, runtime_checkable

from testrunnermcp.models.session_models import EngineResult

DEFAULT_DOM_DEPTH = 30


class EngineError(Exception):
    """Base exception for faults talking to the test runner."""

    pass


class EngineConnectionError(EngineError):
    """Raised when the test runner cannot be reached."""

    pass


class EngineProtocolError(EngineError):
    """Raised when the test runner answers with something other than a result envelope."""

    pass


@runtime_checkable
class TestRunnerEngine(Protocol):
    """Entry points the tool dispatcher needs from a test runner.

    Every call returns an ``EngineResult``. Business failures come back as
    ``success=False``; exceptions are reserved for transport faults and are
    left to propagate.
    """

    async def open_session(self, run_data: Dict[str, Any]) -> EngineResult: ...

    async def close_session(self, session_id: str) -> EngineResult: ...

    async def run_session(self, session_id: str, run_data: Dict[str, Any]) -> EngineResult: ...

    async def get_ax_tree(
        self, session_id: str, selector: Optional[str] = None
    ) -> EngineResult: ...

    async def get_dom_tree(
        self,
        session_id: str,
        depth: int = DEFAULT_DOM_DEPTH,
        selector: Optional[str] = None,
    ) -> EngineResult: ...
