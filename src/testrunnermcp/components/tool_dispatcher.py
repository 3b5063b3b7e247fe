"""Tool handlers composing the registry, validator, translator and test runner.

Every handler returns a ``ToolResponse``. Business failures (unknown
session, missing URL, runner reporting ``success: false``) are described
in the response; only exceptions raised by the runner itself propagate.
"""

from __future__ import annotations

import json
import logging
from typing import Any, List, Optional, Union

from testrunnermcp.components.command_translator import (
    build_open_session_run,
    translate_step,
)
from testrunnermcp.components.engine.interface import DEFAULT_DOM_DEPTH, TestRunnerEngine
from testrunnermcp.components.request_validator import RequestValidator
from testrunnermcp.components.session_registry import SessionRegistry
from testrunnermcp.models.session_models import SessionType, StepRequest
from testrunnermcp.models.tool_models import ToolResponse

logger = logging.getLogger(__name__)

DEFAULT_BROWSER = "chrome"


def _tree_as_text(tree: Any) -> str:
    return json.dumps(tree, indent=2, default=str)


class ToolDispatcher:
    """Handlers behind the five test runner tools."""

    def __init__(
        self,
        registry: SessionRegistry,
        engine: TestRunnerEngine,
        validator: Optional[RequestValidator] = None,
    ) -> None:
        self.registry = registry
        self.engine = engine
        self.validator = validator or RequestValidator(registry)

    async def open_session(
        self,
        type: Union[SessionType, str] = SessionType.WEB,
        url: Optional[str] = None,
        browser: Optional[str] = None,
    ) -> ToolResponse:
        """Open a runner session and make it the current one.

        A web session needs a URL and defaults to chrome. Opening while
        another session is current replaces the bookkeeping without closing
        the previous runner session.
        """
        session_type = SessionType(type)

        if session_type is SessionType.WEB and not url:
            return ToolResponse(
                texts=["Error: Url must be provided to open a web session."],
                structured_content={"sessionType": session_type.value, "sessionId": None},
            )

        if session_type is SessionType.WEB and not browser:
            browser = DEFAULT_BROWSER

        details = f'Opening test runner session for URL "{url}" using browser "{browser}"'

        run_config = build_open_session_run(session_type, url=url, browser=browser)
        result = await self.engine.open_session(run_config.to_dict())

        session_id = result.session_id if result.success else None
        if session_id:
            previous = self.registry.set_current(session_id, session_type)
            if previous is not None and previous.session_id != session_id:
                logger.warning(
                    "Session %s superseded by %s without being closed",
                    previous.session_id,
                    session_id,
                )
            details += (
                f"\n\nSession successfully created for type {session_type.value} "
                f"with ID: {session_id} !"
            )
        else:
            details += "\n\nFailed to create session."
            if result.message:
                details += f" {result.message}"
        logger.info("Result from test runner: %s", details)

        return ToolResponse(
            texts=[details],
            structured_content={"sessionType": session_type.value, "sessionId": session_id},
        )

    async def close_session(self, session_id: str) -> ToolResponse:
        check = self.validator.validate(session_id, None)
        if not check.ok:
            return check.response

        details = f'Closing test runner session with ID "{session_id}"'
        result = await self.engine.close_session(session_id)

        if result.success:
            self.registry.clear_current()
            details += "\n\nSession successfully closed!"
            logger.info("Closed session %s", session_id)
        else:
            details += "\n\nFailed to close session."
            if result.message:
                details += f" {result.message}"

        return ToolResponse(texts=[details])

    async def get_accessibility_tree(
        self, session_id: str, selector: Optional[str] = None
    ) -> ToolResponse:
        check = self.validator.validate(session_id, {"axtree": None})
        if not check.ok:
            return check.response

        details = f"Retrieving accessibility tree for session ID [{session_id}]"
        result = await self.engine.get_ax_tree(session_id, selector)
        if not result.success:
            details += "\n\nFailed to retrieve accessibility tree."
            if result.message:
                details += f" {result.message}"
            return ToolResponse(texts=[details], structured_content={"axtree": None})

        details += "\n\nAccessibility tree retrieved successfully!!"
        return ToolResponse(
            texts=[details, _tree_as_text(result.tree)],
            structured_content={"axtree": result.tree},
        )

    async def get_dom_tree(
        self,
        session_id: str,
        depth: Optional[int] = DEFAULT_DOM_DEPTH,
        selector: Optional[str] = None,
    ) -> ToolResponse:
        check = self.validator.validate(session_id, {"domtree": None})
        if not check.ok:
            return check.response

        if depth is None:
            depth = DEFAULT_DOM_DEPTH

        details = f"Retrieving DOM tree for session ID [{session_id}]"
        result = await self.engine.get_dom_tree(session_id, depth, selector)
        if not result.success:
            details += "\n\nFailed to retrieve DOM tree."
            if result.message:
                details += f" {result.message}"
            return ToolResponse(texts=[details], structured_content={"domtree": None})

        details += "\n\nDOM tree retrieved successfully!!"
        return ToolResponse(
            texts=[details, _tree_as_text(result.tree)],
            structured_content={"domtree": result.tree},
        )

    async def do_step(
        self,
        session_id: str,
        command: str,
        selectors: Optional[List[str]] = None,
        position: Optional[int] = None,
        value: Optional[str] = None,
        operator: Optional[str] = None,
    ) -> ToolResponse:
        """Run one step in the current session.

        The test type comes from the registry, never from the caller: only
        the registry knows what kind of session is live.
        """
        check = self.validator.validate(session_id, {"result": False})
        if not check.ok:
            return check.response

        details = f'Performing step in session ID "{session_id}"'

        request = StepRequest.from_wire(
            command=command,
            selectors=selectors,
            position=position,
            value=value,
            operator=operator,
        )
        session_type = self.registry.current_type() or SessionType.WEB
        run_config = translate_step(request, session_type)

        result = await self.engine.run_session(session_id, run_config.to_dict())

        if not result.success:
            details += f"\n\nFailed to execute step: {result.message or 'Unknown error'}"
            logger.warning("Step %r failed in session %s", command, session_id)
            return ToolResponse(texts=[details], structured_content={"result": False})

        details += "\n\nStep executed successfully!"
        return ToolResponse(texts=[details], structured_content={"result": True})
