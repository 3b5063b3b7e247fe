from __future__ import annotations

import asyncio
import http.client
import json
import logging
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlsplit

from testrunnermcp.components.engine.interface import (
    DEFAULT_DOM_DEPTH,
    EngineConnectionError,
    EngineProtocolError,
)
from testrunnermcp.models.session_models import EngineResult

logger = logging.getLogger(__name__)


class TestRunnerHttpClient:
    """Minimal client for a test runner service speaking JSON over HTTP.

    Each entry point is a POST to ``<base>/session/<action>`` whose response
    body is the runner's ``{success, sessionId?, tree?, message?}`` envelope.
    Blocking ``http.client`` calls run on the default executor so the event
    loop keeps serving other requests.
    """

    __test__ = False  # Not a pytest test class

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:7373",
        token: Optional[str] = None,
        timeout: float = 300.0,
    ) -> None:
        parts = urlsplit(base_url)
        if parts.scheme not in ("http", "https") or not parts.hostname:
            raise ValueError(f"Invalid test runner URL: {base_url!r}")
        self.base_url = base_url
        self.scheme = parts.scheme
        self.host = parts.hostname
        self.port = parts.port or (443 if parts.scheme == "https" else 80)
        self.base_path = parts.path.rstrip("/")
        self.token = token
        self.timeout = float(timeout)

    def _connection_class(self) -> Callable[..., http.client.HTTPConnection]:
        if self.scheme == "https":
            return http.client.HTTPSConnection
        return http.client.HTTPConnection

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        body = json.dumps(payload).encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "Content-Length": str(len(body)),
        }
        if self.token:
            headers["X-Test-Runner-Token"] = self.token
        full_path = f"{self.base_path}{path}"

        try:
            conn = self._connection_class()(self.host, self.port, timeout=self.timeout)
        except Exception as e:
            raise EngineConnectionError(f"connection error: {e}") from e
        try:
            try:
                conn.request("POST", full_path, body, headers)
                resp = conn.getresponse()
                data = resp.read()
            except (OSError, http.client.HTTPException) as e:
                raise EngineConnectionError(
                    f"connection error calling {full_path}: {e}"
                ) from e
        finally:
            conn.close()

        try:
            parsed = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise EngineProtocolError(
                f"invalid response from {full_path}: {data[:200]!r}"
            ) from e
        if not isinstance(parsed, dict):
            raise EngineProtocolError(
                f"unexpected response type from {full_path}: {type(parsed).__name__}"
            )
        return parsed

    async def _call(self, path: str, payload: Dict[str, Any]) -> EngineResult:
        logger.debug("POST %s%s", self.base_url, path)
        loop = asyncio.get_running_loop()
        raw = await loop.run_in_executor(None, lambda: self._post(path, payload))
        result = EngineResult.from_payload(raw)
        if not result.success:
            logger.warning("Test runner reported failure on %s: %s", path, result.message)
        return result

    async def open_session(self, run_data: Dict[str, Any]) -> EngineResult:
        return await self._call("/session/open", {"runData": run_data})

    async def close_session(self, session_id: str) -> EngineResult:
        return await self._call("/session/close", {"sessionId": session_id})

    async def run_session(self, session_id: str, run_data: Dict[str, Any]) -> EngineResult:
        return await self._call(
            "/session/run", {"sessionId": session_id, "runData": run_data}
        )

    async def get_ax_tree(
        self, session_id: str, selector: Optional[str] = None
    ) -> EngineResult:
        payload: Dict[str, Any] = {"sessionId": session_id}
        if selector:
            payload["selector"] = selector
        return await self._call("/session/axtree", payload)

    async def get_dom_tree(
        self,
        session_id: str,
        depth: int = DEFAULT_DOM_DEPTH,
        selector: Optional[str] = None,
    ) -> EngineResult:
        payload: Dict[str, Any] = {"sessionId": session_id, "depth": depth}
        if selector:
            payload["selector"] = selector
        return await self._call("/session/domtree", payload)
