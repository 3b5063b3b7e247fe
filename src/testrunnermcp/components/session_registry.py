"""Single-slot registry of the currently open test runner session."""

from __future__ import annotations

import logging
from typing import Optional

from testrunnermcp.models.session_models import Session, SessionType

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Holds at most one open session for the lifetime of the process.

    The registry is plain shared state without a lock. Tool calls run on a
    single event loop and only suspend while awaiting the test runner, so
    overlapping calls can observe each other's writes between those points.
    """

    def __init__(self) -> None:
        self._current: Optional[Session] = None

    @property
    def current(self) -> Optional[Session]:
        return self._current

    @property
    def current_id(self) -> Optional[str]:
        return self._current.session_id if self._current else None

    def set_current(self, session_id: str, session_type: SessionType) -> Optional[Session]:
        """Overwrite the slot and return whatever it held before."""
        previous = self._current
        self._current = Session(session_id=session_id, session_type=SessionType(session_type))
        logger.debug(
            "Current session set to %s (%s)", session_id, self._current.session_type.value
        )
        return previous

    def clear_current(self) -> None:
        if self._current is not None:
            logger.debug("Clearing current session %s", self._current.session_id)
        self._current = None

    def is_current(self, session_id: Optional[str]) -> bool:
        if self._current is None or session_id is None:
            return False
        return self._current.session_id == session_id

    def current_type(self) -> Optional[SessionType]:
        return self._current.session_type if self._current else None
