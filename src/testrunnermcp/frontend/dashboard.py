"""HTTP-only routes: health check, server info and a small dashboard page.

FastMCP serves custom routes next to the MCP endpoint when running on the
HTTP transport; under stdio they are registered but never reached.
"""

from __future__ import annotations

import html
import json
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict

from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse

from testrunnermcp.config.capability_catalog import SERVER_CONFIG

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from testrunnermcp.config.settings import ServerConfig

logger = logging.getLogger(__name__)


def build_health_payload() -> Dict[str, Any]:
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "server": SERVER_CONFIG["name"],
        "version": SERVER_CONFIG["version"],
    }


def build_info_payload(mcp_path: str = "/mcp") -> Dict[str, Any]:
    return {
        "server": SERVER_CONFIG,
        "endpoints": {
            "mcp": mcp_path,
            "health": "/health",
            "info": "/api/info",
            "dashboard": "/",
        },
    }


def _list_items(names) -> str:
    return "".join(f"<li><strong>{html.escape(name)}</strong></li>" for name in names)


def render_dashboard(config: "ServerConfig", started_at: datetime) -> str:
    client_config = json.dumps(
        {"mcpServers": {"test-runner-proxy": {"type": "http", "url": config.http_url}}},
        indent=2,
    )
    path = html.escape(config.path)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>MCP Test Runner Proxy Server</title>
    <style>
        body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
               max-width: 800px; margin: 0 auto; padding: 2rem; background: #f5f5f5; }}
        .container {{ background: white; border-radius: 8px; padding: 2rem;
                     box-shadow: 0 2px 4px rgba(0,0,0,0.1); }}
        h1 {{ color: #333; border-bottom: 2px solid #007acc; padding-bottom: 0.5rem; }}
        .status {{ padding: 1rem; background: #e8f5e8; border-radius: 4px; margin: 1rem 0; }}
        .endpoint {{ background: #f8f9fa; padding: 1rem; border-radius: 4px; margin: 0.5rem 0;
                    font-family: monospace; white-space: pre-wrap; }}
        .list {{ background: #f0f8ff; padding: 1rem; border-radius: 4px; margin: 1rem 0; }}
    </style>
</head>
<body>
    <div class="container">
        <h1>Test Runner MCP Server</h1>
        <div class="status">
            <strong>Server Status:</strong> Running on port {config.port}
            <br><strong>Started:</strong> {started_at.strftime("%Y-%m-%d %H:%M:%S %Z")}
            <br><strong>Version:</strong> {html.escape(str(SERVER_CONFIG["version"]))}
        </div>
        <h2>API Endpoints</h2>
        <div class="endpoint">POST {path} - MCP Protocol Endpoint</div>
        <div class="endpoint">GET /health - Health Check</div>
        <div class="endpoint">GET /api/info - Server Information</div>
        <div class="endpoint">GET / - This Dashboard</div>
        <h2>Available Tools</h2>
        <div class="list"><ul>{_list_items(SERVER_CONFIG["tools"])}</ul></div>
        <h2>Available Resources</h2>
        <div class="list"><ul>{_list_items(SERVER_CONFIG["resources"])}</ul></div>
        <h2>Available Prompts</h2>
        <div class="list"><ul>{_list_items(SERVER_CONFIG["prompts"])}</ul></div>
        <h2>Client Integration</h2>
        <p>To connect an MCP client to this server over HTTP:</p>
        <div class="endpoint">{html.escape(client_config)}</div>
        <p>For stdio transport, run <code>testrunner-mcp</code> without <code>--transport</code>.</p>
    </div>
</body>
</html>
"""


def install_dashboard_routes(mcp: "FastMCP", config: "ServerConfig") -> None:
    """Register ``/health``, ``/api/info`` and ``/`` on the server."""

    started_at = datetime.now(timezone.utc)

    @mcp.custom_route("/health", methods=["GET"])
    async def _health_check(request: Request) -> JSONResponse:
        return JSONResponse(build_health_payload())

    @mcp.custom_route("/api/info", methods=["GET"])
    async def _server_info(request: Request) -> JSONResponse:
        return JSONResponse(build_info_payload(config.path))

    @mcp.custom_route("/", methods=["GET"])
    async def _dashboard(request: Request) -> HTMLResponse:
        return HTMLResponse(render_dashboard(config, started_at))

    logger.debug("Dashboard routes installed (MCP endpoint at %s)", config.path)
