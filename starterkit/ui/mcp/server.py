"""
MCP tool server — newline-delimited JSON-RPC 2.0 over stdio.

Every operation in the catalog is exposed as a tool. stdout carries
only protocol messages; all logging goes to stderr.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, TextIO

from starterkit import __version__
from starterkit.core.router import Router

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "nextjs-starterkit"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


def _result(request_id: Any, result: dict[str, Any]) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def _error(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}}


class MCPServer:
    """Maps JSON-RPC methods onto a Router."""

    def __init__(self, router: Router | None = None):
        self.router = router or Router()

    def handle(self, request: Any) -> dict[str, Any] | None:
        """Handle one decoded message. Returns None for notifications."""
        if not isinstance(request, dict):
            return _error(None, INVALID_REQUEST, "Invalid request")

        method = request.get("method", "")
        params = request.get("params") or {}
        request_id = request.get("id")
        is_notification = "id" not in request

        if method == "notifications/initialized" or (is_notification and method.startswith("notifications/")):
            logger.debug("Notification: %s", method)
            return None

        if method == "initialize":
            return _result(request_id, {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {}},
                "serverInfo": {"name": SERVER_NAME, "version": __version__},
            })
        if method == "ping":
            return _result(request_id, {})
        if method == "tools/list":
            return _result(request_id, {"tools": self.router.list_operations()})
        if method == "tools/call":
            if not isinstance(params, dict) or not params.get("name"):
                return _error(request_id, INVALID_PARAMS, "tools/call requires a tool name")
            arguments = params.get("arguments") or {}
            if not isinstance(arguments, dict):
                return _error(request_id, INVALID_PARAMS, "arguments must be an object")
            response = self.router.dispatch(params["name"], arguments)
            return _result(request_id, response.to_mcp())

        return _error(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")

    def handle_line(self, line: str) -> dict[str, Any] | None:
        try:
            request = json.loads(line)
        except json.JSONDecodeError:
            return _error(None, PARSE_ERROR, "Parse error")
        try:
            return self.handle(request)
        except Exception as e:
            logger.exception("Unhandled error for %s", line[:200])
            request_id = request.get("id") if isinstance(request, dict) else None
            return _error(request_id, INTERNAL_ERROR, str(e))

    def serve(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        """Read requests until EOF."""
        stdin = stdin or sys.stdin
        stdout = stdout or sys.stdout
        logger.info("%s MCP server %s running on stdio", SERVER_NAME, __version__)
        for line in stdin:
            line = line.strip()
            if not line:
                continue
            response = self.handle_line(line)
            if response is not None:
                stdout.write(json.dumps(response, ensure_ascii=False) + "\n")
                stdout.flush()
        logger.info("stdin closed, shutting down")
