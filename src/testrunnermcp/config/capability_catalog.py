"""Static catalog of the tools, resources and prompts this server exposes.

Server registration, the ``server-info`` resource and the HTTP dashboard
all read from here so the three never disagree.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel

from testrunnermcp import __version__
from testrunnermcp.models.tool_models import (
    AccessibilityTreeOutput,
    DomTreeOutput,
    OpenSessionOutput,
    StepOutput,
)

STEP_COMMANDS_REFERENCE = (
    "https://raw.githubusercontent.com/Applitest-co-il/test-runner/main/docs/step-commands.md"
)

INFO_RESOURCE_URI = "test-runner://info"


@dataclass(frozen=True)
class ToolSpec:
    name: str
    title: str
    description: str
    output_model: Optional[Type[BaseModel]] = None

    @property
    def output_schema(self) -> Optional[Dict[str, Any]]:
        if self.output_model is None:
            return None
        return self.output_model.model_json_schema()


@dataclass(frozen=True)
class ResourceSpec:
    name: str
    uri: str
    title: str
    description: str
    mime_type: str = "text/plain"


@dataclass(frozen=True)
class PromptSpec:
    name: str
    title: str
    description: str


OPEN_SESSION = ToolSpec(
    name="open-session",
    title="Open Session Tool",
    description=(
        "Open a local test runner session for a given URL and browser:\n"
        '- If type is "web", a web session will be opened with indicated browser\n'
        '- If type is "mobile", a mobile session will be opened. It will connect to the '
        "locally running appium session and simulator\n"
        '- If type is "api", an API session will be opened\n'
        "Note: only one session can be tracked at a time; opening a new session "
        "replaces the previous one without closing it, so close it first."
    ),
    output_model=OpenSessionOutput,
)

CLOSE_SESSION = ToolSpec(
    name="close-session",
    title="Close Session Tool",
    description="Close a test runner session",
)

GET_ACCESSIBILITY_TREE = ToolSpec(
    name="get-accessibility-tree",
    title="Get Accessibility Tree Tool",
    description=(
        "Retrieve the accessibility tree for current page or part of it "
        "(based on provided CSS selector)"
    ),
    output_model=AccessibilityTreeOutput,
)

GET_DOM_TREE = ToolSpec(
    name="get-dom-tree",
    title="Get DOM Tree Tool",
    description=(
        "Retrieve the DOM tree for current page or part of it (based on provided selector)"
    ),
    output_model=DomTreeOutput,
)

DO_STEP = ToolSpec(
    name="do-step",
    title="Do Step Tool",
    description=(
        "Perform a step action in the test runner session. A few notes about this tool:\n"
        "- The command should be a valid command recognized by the test runner "
        "(e.g., click, item-select, input-text, etc...). Full list can be found at "
        f"{STEP_COMMANDS_REFERENCE}\n"
        "- The selector is optional but recommended to specify the target element for the "
        "action. The order of preference for selector type should be: ARIA (e.g. aria/Submit), "
        "content based (e.g. button=Submit), xpath, css\n"
        "- The position is optional and may be required if the selector matches multiple "
        "elements (-1 means no position)\n"
        "- The value is optional and may be required for certain commands "
        "(e.g., input-text requires a value to input)\n"
        "- The operator is optional and may be used to alter the command "
        "(e.g.: comparison type in assertions, execute type for javascript, etc...)\n"
    ),
    output_model=StepOutput,
)

TOOL_SPECS: Dict[str, ToolSpec] = {
    spec.name: spec
    for spec in (OPEN_SESSION, CLOSE_SESSION, GET_ACCESSIBILITY_TREE, GET_DOM_TREE, DO_STEP)
}

SERVER_INFO = ResourceSpec(
    name="server-info",
    uri=INFO_RESOURCE_URI,
    title="Server Information",
    description="Information about this test runner MCP server",
)

RESOURCE_SPECS: Dict[str, ResourceSpec] = {SERVER_INFO.name: SERVER_INFO}

PROMPT_SPECS: Dict[str, PromptSpec] = {
    spec.name: spec
    for spec in (
        PromptSpec(
            "open-session-prompt",
            "Open Session Prompt",
            "Open a session for a given URL and optionally browser",
        ),
        PromptSpec(
            "close-session-prompt",
            "Close Session Prompt",
            "Close a session for a given session ID",
        ),
        PromptSpec(
            "get-accessibility-tree-prompt",
            "Get Accessibility Tree Prompt",
            "Get the accessibility tree for current page or provided selector",
        ),
        PromptSpec(
            "get-dom-tree-prompt",
            "Get DOM Tree Prompt",
            "Get the DOM tree for current page or provided selector",
        ),
        PromptSpec(
            "generate-test-steps-prompt",
            "Generate Test Steps Prompt",
            "Generate test steps based on user scenario - scenario should be provided as a "
            'json object: [{step: "step", expected: "expected result"}]',
        ),
        PromptSpec(
            "generate-test-scenario-prompt",
            "Generate Test Scenario Prompt",
            "Generate a detailed test scenario based on user high level requirements - "
            "requirements should be provided as a text description",
        ),
    )
}

SERVER_CONFIG: Dict[str, Any] = {
    "name": "test-runner-proxy-server",
    "version": __version__,
    "description": "A simple MCP Test Runner Proxy server with tools, resources, and prompts",
    "tools": list(TOOL_SPECS),
    "resources": list(RESOURCE_SPECS),
    "prompts": list(PROMPT_SPECS),
}


def _bullets(entries: Dict[str, Any]) -> str:
    return "\n".join(f"- {name}: {spec.description.splitlines()[0]}" for name, spec in entries.items())


def build_server_info_text() -> str:
    """Plain-text body of the ``server-info`` resource."""
    return (
        "Test Runner MCP Server\n"
        "======================\n\n"
        "This MCP (Model Context Protocol) server provides:\n\n"
        "- Tools: tools for opening and operating test runner sessions\n"
        "- Resources: this information resource\n"
        "- Prompts: prompts for operating the server, from simple open/close session "
        "prompts to generating the steps of a full test runner test\n\n"
        "It acts as an entry point to the test runner, so agents can drive browser, "
        "mobile and API sessions step by step.\n\n"
        f"Available Tools:\n{_bullets(TOOL_SPECS)}\n\n"
        f"Available Resources:\n{_bullets(RESOURCE_SPECS)}\n\n"
        f"Available Prompts:\n{_bullets(PROMPT_SPECS)}\n\n"
        f"Server Version: {SERVER_CONFIG['version']}\n"
        "Protocol: Model Context Protocol"
    )
