"""Session-related data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

# Sentinel the wire schema uses for "no position" on a step.
UNSET_POSITION = -1


class SessionType(str, Enum):
    """Kinds of session the test runner can drive."""

    WEB = "web"
    MOBILE = "mobile"
    API = "api"
    MIXED = "mixed"  # engine vocabulary only, never opened through a tool


@dataclass(frozen=True)
class Session:
    """Cached view of an engine-side session.

    Only the identifier and declared type are kept here; browser/driver
    resources belong to the test runner.
    """

    session_id: str
    session_type: SessionType


@dataclass
class StepRequest:
    """A single generic step as requested by the MCP caller."""

    command: str
    selectors: List[str] = field(default_factory=list)
    position: Optional[int] = None
    value: Optional[str] = None
    operator: Optional[str] = None

    @classmethod
    def from_wire(
        cls,
        command: str,
        selectors: Optional[List[str]] = None,
        position: Optional[int] = None,
        value: Optional[str] = None,
        operator: Optional[str] = None,
    ) -> "StepRequest":
        """Build a request from raw tool arguments.

        ``position == -1`` is the protocol's way of saying "unset" and is
        mapped to ``None`` here so nothing downstream sees the sentinel.
        """
        if position == UNSET_POSITION:
            position = None
        return cls(
            command=command,
            selectors=list(selectors or []),
            position=position,
            value=value,
            operator=operator,
        )


@dataclass
class EngineResult:
    """Uniform result envelope returned by every test runner entry point."""

    success: bool
    session_id: Optional[str] = None
    tree: Any = None
    message: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Optional[Dict[str, Any]]) -> "EngineResult":
        """Parse the runner's JSON envelope.

        A missing or non-dict payload counts as a failed call.
        """
        if not isinstance(payload, dict):
            return cls(success=False, message="empty response from test runner")
        return cls(
            success=payload.get("success") is True,
            session_id=payload.get("sessionId") or None,
            tree=payload.get("tree"),
            message=payload.get("message") or payload.get("error"),
        )
