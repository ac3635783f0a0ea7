"""
Tests for the MCP stdio server — JSON-RPC framing and tool dispatch.
"""

import io
import json

import pytest

from starterkit.ui.mcp.server import (
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    PROTOCOL_VERSION,
    SERVER_NAME,
    MCPServer,
)


@pytest.fixture
def server(router) -> MCPServer:
    return MCPServer(router)


def _call(server, name, arguments=None, request_id=1):
    return server.handle({
        "jsonrpc": "2.0",
        "id": request_id,
        "method": "tools/call",
        "params": {"name": name, "arguments": arguments or {}},
    })


class TestHandshake:
    def test_initialize(self, server):
        response = server.handle({"jsonrpc": "2.0", "id": 0, "method": "initialize", "params": {}})
        result = response["result"]
        assert result["protocolVersion"] == PROTOCOL_VERSION
        assert result["serverInfo"]["name"] == SERVER_NAME
        assert "tools" in result["capabilities"]

    def test_initialized_notification(self, server):
        assert server.handle({"jsonrpc": "2.0", "method": "notifications/initialized"}) is None

    def test_ping(self, server):
        assert server.handle({"jsonrpc": "2.0", "id": 7, "method": "ping"}) == {"jsonrpc": "2.0", "id": 7, "result": {}}


class TestTools:
    def test_list(self, server):
        response = server.handle({"jsonrpc": "2.0", "id": 1, "method": "tools/list"})
        tools = response["result"]["tools"]
        assert len(tools) == 17
        assert all({"name", "description", "inputSchema"} <= set(t) for t in tools)

    def test_call_success(self, server, project):
        response = _call(server, "setup_nextjs_project_wizard", {"projectPath": str(project)})
        result = response["result"]
        assert result["isError"] is False
        assert result["content"][0]["type"] == "text"

    def test_call_unknown_tool_is_a_tool_error(self, server):
        result = _call(server, "nope")["result"]
        assert result["isError"] is True
        assert result["content"][0]["text"] == "Error: Unknown tool: nope"

    def test_call_validation_error(self, server):
        result = _call(server, "setup_drizzle_orm", {})["result"]
        assert result["isError"] is True
        assert result["content"][0]["text"].startswith("❌ Validation failed")

    def test_call_without_name(self, server):
        response = server.handle({"jsonrpc": "2.0", "id": 3, "method": "tools/call", "params": {}})
        assert response["error"]["code"] == INVALID_PARAMS

    def test_arguments_must_be_object(self, server):
        response = server.handle({
            "jsonrpc": "2.0", "id": 3, "method": "tools/call",
            "params": {"name": "analyze_token_usage", "arguments": [1, 2]},
        })
        assert response["error"]["code"] == INVALID_PARAMS


class TestErrors:
    def test_unknown_method(self, server):
        response = server.handle({"jsonrpc": "2.0", "id": 9, "method": "resources/list"})
        assert response["error"]["code"] == METHOD_NOT_FOUND
        assert response["id"] == 9

    def test_non_object_request(self, server):
        assert server.handle([1, 2])["error"]["code"] == INVALID_REQUEST

    def test_parse_error(self, server):
        response = server.handle_line("{not json")
        assert response["error"]["code"] == PARSE_ERROR
        assert response["id"] is None


class TestServeLoop:
    def test_round_trip_over_streams(self, server):
        stdin = io.StringIO(
            "\n".join([
                json.dumps({"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {}}),
                json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"}),
                "",
                json.dumps({"jsonrpc": "2.0", "id": 2, "method": "tools/list"}),
            ]) + "\n"
        )
        stdout = io.StringIO()
        server.serve(stdin=stdin, stdout=stdout)

        lines = stdout.getvalue().splitlines()
        assert len(lines) == 2
        assert [json.loads(line)["id"] for line in lines] == [1, 2]
