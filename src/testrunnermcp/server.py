"""Main MCP Server implementation for the test runner bridge."""

import argparse
import logging
from typing import Annotated, List, Optional

from fastmcp import FastMCP
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent
from pydantic import Field

from testrunnermcp.components.engine import create_engine
from testrunnermcp.components.session_registry import SessionRegistry
from testrunnermcp.components.tool_dispatcher import ToolDispatcher
from testrunnermcp.config.capability_catalog import (
    CLOSE_SESSION,
    DO_STEP,
    GET_ACCESSIBILITY_TREE,
    GET_DOM_TREE,
    OPEN_SESSION,
    PROMPT_SPECS,
    SERVER_CONFIG,
    SERVER_INFO,
    build_server_info_text,
)
from testrunnermcp.config.settings import ServerConfig, load_server_config
from testrunnermcp.frontend.dashboard import install_dashboard_routes
from testrunnermcp.models.tool_models import (
    BrowserName,
    OpenableSessionType,
    OptionalSelectorList,
    ToolResponse,
)
from testrunnermcp.prompt import templates

logger = logging.getLogger(__name__)

SERVER_INSTRUCTIONS = (
    "Bridge to a local test runner. Open a session with open-session, inspect the page "
    "with get-accessibility-tree or get-dom-tree, act with do-step, and close the session "
    "with close-session. Only one session is tracked at a time."
)


def to_tool_result(response: ToolResponse) -> ToolResult:
    """Convert a dispatcher response into FastMCP's tool result."""
    return ToolResult(
        content=[TextContent(type="text", text=text) for text in response.texts],
        structured_content=response.structured_content,
    )


def _register_tools(mcp: FastMCP, dispatcher: ToolDispatcher) -> None:
    @mcp.tool(
        name=OPEN_SESSION.name,
        title=OPEN_SESSION.title,
        description=OPEN_SESSION.description,
        output_schema=OPEN_SESSION.output_schema,
    )
    async def open_session(
        type: Annotated[
            OpenableSessionType,
            Field(description="Type of session to open (web, mobile or api)"),
        ] = "web",
        url: Annotated[Optional[str], Field(description="URL to open in browser")] = None,
        browser: Annotated[
            Optional[BrowserName],
            Field(description="Browser to use for the session (e.g., chrome, firefox, edge)"),
        ] = None,
    ) -> ToolResult:
        return to_tool_result(await dispatcher.open_session(type=type, url=url, browser=browser))

    @mcp.tool(
        name=CLOSE_SESSION.name,
        title=CLOSE_SESSION.title,
        description=CLOSE_SESSION.description,
        output_schema=None,
    )
    async def close_session(
        sessionId: Annotated[str, Field(description="ID of the session to close")],
    ) -> ToolResult:
        return to_tool_result(await dispatcher.close_session(sessionId))

    @mcp.tool(
        name=GET_ACCESSIBILITY_TREE.name,
        title=GET_ACCESSIBILITY_TREE.title,
        description=GET_ACCESSIBILITY_TREE.description,
        output_schema=GET_ACCESSIBILITY_TREE.output_schema,
    )
    async def get_accessibility_tree(
        sessionId: Annotated[
            str, Field(description="ID of the session to get accessibility tree from")
        ],
        selector: Annotated[
            Optional[str],
            Field(description="Optional selector to narrow down the accessibility tree"),
        ] = None,
    ) -> ToolResult:
        return to_tool_result(await dispatcher.get_accessibility_tree(sessionId, selector))

    @mcp.tool(
        name=GET_DOM_TREE.name,
        title=GET_DOM_TREE.title,
        description=GET_DOM_TREE.description,
        output_schema=GET_DOM_TREE.output_schema,
    )
    async def get_dom_tree(
        sessionId: Annotated[str, Field(description="ID of the session to get DOM tree from")],
        depth: Annotated[
            int, Field(description="Optional depth to limit the DOM tree levels retrieved")
        ] = 30,
        selector: Annotated[
            Optional[str], Field(description="Optional selector to narrow down the DOM tree")
        ] = None,
    ) -> ToolResult:
        return to_tool_result(await dispatcher.get_dom_tree(sessionId, depth, selector))

    @mcp.tool(
        name=DO_STEP.name,
        title=DO_STEP.title,
        description=DO_STEP.description,
        output_schema=DO_STEP.output_schema,
    )
    async def do_step(
        sessionId: Annotated[str, Field(description="ID of the session to perform step in")],
        command: Annotated[
            str,
            Field(description="Step command to perform (e.g., click, item-select, etc...)"),
        ],
        selectors: Annotated[
            OptionalSelectorList,
            Field(description="Array of potential selectors for the element to perform action on"),
        ] = None,
        position: Annotated[
            Optional[int],
            Field(
                description=(
                    "Optional position index for the selector in case it could match "
                    "several elements (-1 for none)"
                )
            ),
        ] = None,
        value: Annotated[
            Optional[str], Field(description="Optional value for the step (e.g., text input)")
        ] = None,
        operator: Annotated[
            Optional[str],
            Field(description="Optional operator for the step (e.g. type of comparison operator)"),
        ] = None,
    ) -> ToolResult:
        return to_tool_result(
            await dispatcher.do_step(
                sessionId,
                command,
                selectors=selectors,
                position=position,
                value=value,
                operator=operator,
            )
        )


def _register_resources(mcp: FastMCP) -> None:
    @mcp.resource(
        SERVER_INFO.uri,
        name=SERVER_INFO.name,
        title=SERVER_INFO.title,
        description=SERVER_INFO.description,
        mime_type=SERVER_INFO.mime_type,
    )
    def server_info() -> str:
        return build_server_info_text()


def _register_prompts(mcp: FastMCP) -> None:
    def spec(name: str) -> dict:
        prompt = PROMPT_SPECS[name]
        return {"name": prompt.name, "title": prompt.title, "description": prompt.description}

    @mcp.prompt(**spec("open-session-prompt"))
    def open_session_prompt(
        url: Annotated[str, Field(description="URL to open in browser")],
        browser: Annotated[
            Optional[str],
            Field(description="Browser to use for the session (e.g., chrome, firefox, edge)"),
        ] = None,
    ) -> str:
        return templates.build_open_session_prompt(url, browser)

    @mcp.prompt(**spec("close-session-prompt"))
    def close_session_prompt(
        sessionId: Annotated[str, Field(description="ID of the session to close")],
    ) -> str:
        return templates.build_close_session_prompt(sessionId)

    @mcp.prompt(**spec("get-accessibility-tree-prompt"))
    def get_accessibility_tree_prompt(
        sessionId: Annotated[
            str, Field(description="ID of the session to get accessibility tree from")
        ],
        selector: Annotated[
            Optional[str],
            Field(
                description="CSS or XPATH selector to get accessibility tree for a specific element"
            ),
        ] = None,
    ) -> str:
        return templates.build_accessibility_tree_prompt(sessionId, selector)

    @mcp.prompt(**spec("get-dom-tree-prompt"))
    def get_dom_tree_prompt(
        sessionId: Annotated[str, Field(description="ID of the session to get DOM tree from")],
        selector: Annotated[
            Optional[str],
            Field(description="CSS selector to get DOM tree for a specific element"),
        ] = None,
    ) -> str:
        return templates.build_dom_tree_prompt(sessionId, selector)

    @mcp.prompt(**spec("generate-test-steps-prompt"))
    def generate_test_steps_prompt(
        scenario: Annotated[
            str,
            Field(
                description=(
                    "User scenario as a JSON string representing an array of steps and "
                    "expected results"
                )
            ),
        ],
    ) -> str:
        return templates.build_test_steps_prompt(scenario)

    @mcp.prompt(**spec("generate-test-scenario-prompt"))
    def generate_test_scenario_prompt(
        requirements: Annotated[
            str, Field(description="high level requirements for a test scenario")
        ],
    ) -> str:
        return templates.build_test_scenario_prompt(requirements)


def create_mcp_server(
    dispatcher: Optional[ToolDispatcher] = None,
    config: Optional[ServerConfig] = None,
) -> FastMCP:
    """Create and configure the FastMCP server.

    Args:
        dispatcher: Tool handlers to expose. Built from ``config`` (a fresh
            empty registry plus the HTTP test runner client) when omitted.
        config: Server settings; loaded from the environment when omitted.

    Returns:
        Configured FastMCP server instance.
    """
    config = config or load_server_config()
    if dispatcher is None:
        dispatcher = ToolDispatcher(SessionRegistry(), create_engine(config))

    mcp = FastMCP(SERVER_CONFIG["name"], instructions=SERVER_INSTRUCTIONS)
    _register_tools(mcp, dispatcher)
    _register_resources(mcp)
    _register_prompts(mcp)
    install_dashboard_routes(mcp, config)
    return mcp


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Test Runner MCP server entry point."
    )
    parser.add_argument(
        "--transport",
        dest="transport",
        choices=["stdio", "http", "sse"],
        help="Transport to use for the MCP server (default: stdio).",
    )
    parser.add_argument(
        "--host",
        dest="host",
        help="Host/interface for HTTP transport (default 127.0.0.1).",
    )
    parser.add_argument(
        "--port",
        dest="port",
        type=int,
        help="Port for HTTP transport (default 3000).",
    )
    parser.add_argument(
        "--path",
        dest="path",
        help="Path for the MCP HTTP endpoint (default '/mcp').",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        help="Log level for the MCP server (e.g., INFO, DEBUG).",
    )
    parser.add_argument(
        "--engine-url",
        dest="engine_url",
        help="Base URL of the test runner service (default http://127.0.0.1:7373).",
    )
    return parser


def main(argv: List[str] | None = None) -> None:
    """Start the Test Runner MCP server."""

    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    config = load_server_config(
        engine_url=args.engine_url,
        host=args.host,
        port=args.port,
        path=args.path,
        log_level=args.log_level,
    )

    logging.basicConfig(level=config.log_level)

    server = create_mcp_server(config=config)

    # Default to stdio when no transport is provided
    transport = args.transport or "stdio"
    run_kwargs = {"transport": transport, "log_level": config.log_level}

    # Only pass host/port/path when using HTTP/SSE transports
    if transport != "stdio":
        run_kwargs["host"] = config.host
        run_kwargs["port"] = config.port
        run_kwargs["path"] = config.path
        logger.info("Starting Test Runner MCP server at %s", config.http_url)
        logger.info("Dashboard: http://%s:%s/", config.host, config.port)
    else:
        logger.info("Starting Test Runner MCP server on stdio")
    logger.info("Test runner endpoint: %s", config.engine_url)

    try:
        server.run(**run_kwargs)
    except KeyboardInterrupt:
        logger.info("Test Runner MCP server interrupted by user")


if __name__ == "__main__":
    main()
