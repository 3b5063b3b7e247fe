"""Session-id checks shared by every session-bound tool."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from testrunnermcp.components.session_registry import SessionRegistry
from testrunnermcp.models.tool_models import ToolResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationOutcome:
    ok: bool
    response: Optional[ToolResponse] = None


class RequestValidator:
    """Decide whether a request may run against the open session.

    On a mismatch the caller gets back a complete response to return as-is:
    an explanatory text item plus, when given, the tool's empty structured
    shape (e.g. ``{"axtree": None}``) so structured-content consumers never
    see a missing key.
    """

    def __init__(self, registry: SessionRegistry) -> None:
        self.registry = registry

    def validate(
        self,
        session_id: str,
        fallback_structured_content: Optional[Dict[str, Any]] = None,
    ) -> ValidationOutcome:
        if self.registry.is_current(session_id):
            return ValidationOutcome(ok=True)

        logger.info(
            "Rejected request for session %r (current session: %r)",
            session_id,
            self.registry.current_id,
        )
        response = ToolResponse(
            texts=[f'Error: Session ID "{session_id}" does not match the current open session.'],
            structured_content=(
                dict(fallback_structured_content)
                if fallback_structured_content is not None
                else None
            ),
        )
        return ValidationOutcome(ok=False, response=response)
