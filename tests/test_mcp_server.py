"""
Tests for the MCP HTTP endpoint

Tests cover:
- Health and root endpoints
- initialize / ping
- Tool listing and execution
- Resource listing and reading
- JSON-RPC envelope guarantees (id echo, parse errors, invalid requests)
"""

import json

import pytest
from fastapi.testclient import TestClient

# Import the MCP server app
from http_mcp_server.server import app, create_app

# Create test client
client = TestClient(app)


def rpc(method, params=None, request_id=1, test_client=None):
    """Post a JSON-RPC request and return the decoded envelope."""
    message = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        message["params"] = params
    response = (test_client or client).post("/mcp", json=message)
    assert response.status_code == 200
    return response.json()


def assert_single_outcome(envelope):
    assert envelope["jsonrpc"] == "2.0"
    assert ("result" in envelope) != ("error" in envelope)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def fresh_client():
    """Client over a newly built app with its own user directory."""
    return TestClient(create_app())


# ============================================================================
# Health Check Tests
# ============================================================================

def test_health_check():
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "MCP Server"


def test_root_endpoint():
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert "service" in data
    assert "tools/call" in data["endpoints"]["methods"]


# ============================================================================
# Lifecycle Tests
# ============================================================================

def test_initialize():
    """Test initialize returns capabilities and server identity."""
    data = rpc("initialize")
    result = data["result"]
    assert result["protocolVersion"] == "2024-11-05"
    assert result["capabilities"]["tools"] == {"list": True, "call": True}
    assert result["capabilities"]["resources"] == {"list": True, "read": True}
    assert result["capabilities"]["roots"] == {"list": True, "read": True}
    assert result["serverInfo"]["name"]
    assert result["serverInfo"]["version"]


def test_ping_is_idempotent():
    """Test repeated pings return the same empty result."""
    first = rpc("ping", request_id="a")
    second = rpc("ping", request_id="b")
    assert first["result"] == {}
    assert second["result"] == {}


def test_unknown_method():
    """Test an unknown method yields method-not-found naming the method."""
    data = rpc("foo/bar")
    assert data["error"]["code"] == -32601
    assert "foo/bar" in data["error"]["message"]
    assert "result" not in data


# ============================================================================
# Tool Endpoint Tests
# ============================================================================

def test_list_tools():
    """Test listing tools."""
    data = rpc("tools/list")
    tools = data["result"]["tools"]
    assert [tool["name"] for tool in tools] == ["search_users", "create_user", "get_weather"]
    for tool in tools:
        assert tool["description"]
        assert tool["inputSchema"]["type"] == "object"

    weather = tools[2]
    assert weather["outputSchema"]["required"] == ["forecast", "today"]
    assert "outputSchema" not in tools[0]


def test_list_tools_is_stable():
    """Test repeated tools/list calls return identical descriptors."""
    assert rpc("tools/list")["result"] == rpc("tools/list")["result"]


def test_every_listed_tool_is_callable():
    """Test no listed tool is reported as unknown."""
    tools = rpc("tools/list")["result"]["tools"]
    for tool in tools:
        data = rpc("tools/call", {"name": tool["name"], "arguments": {}})
        if "error" in data:
            assert data["error"]["code"] != -32601


def test_call_search_users_without_query():
    """Test search_users with no arguments returns recent users."""
    data = rpc("tools/call", {"name": "search_users", "arguments": {}})
    text = data["result"]["content"][0]["text"]
    assert data["result"]["content"][0]["type"] == "text"
    assert "recent users" in text.lower()
    assert "3 total" in text


def test_call_search_users_with_query():
    """Test search_users filters by name."""
    data = rpc("tools/call", {"name": "search_users", "arguments": {"query": "bob"}})
    text = data["result"]["content"][0]["text"]
    assert text == "Found 1 users: Bob Li"


def test_call_tool_without_arguments_field():
    """Test a missing arguments field is treated as an empty mapping."""
    data = rpc("tools/call", {"name": "search_users"})
    assert "result" in data


def test_call_get_weather():
    """Test get_weather returns structured content matching its output schema."""
    data = rpc("tools/call", {"name": "get_weather", "arguments": {"city": "beijing"}})
    result = data["result"]
    structured = result["structuredContent"]
    assert len(structured["forecast"]) > 0
    for day in structured["forecast"]:
        assert set(day) >= {"date", "high", "low", "condition"}
    assert set(structured["today"]) >= {"high", "low", "condition"}
    assert json.loads(result["content"][0]["text"]) == structured


def test_call_get_weather_missing_city():
    """Test get_weather reports a missing city as invalid params."""
    data = rpc("tools/call", {"name": "get_weather", "arguments": {}})
    assert data["error"]["code"] == -32602
    assert "city" in data["error"]["message"]


def test_call_create_user(fresh_client):
    """Test create_user adds a user visible in system stats."""
    before = rpc("resources/read", {"uri": "system://stats"}, test_client=fresh_client)
    before_count = json.loads(before["result"]["contents"][0]["text"])["total_users"]

    data = rpc(
        "tools/call",
        {"name": "create_user", "arguments": {"name": "Dan", "email": "dan@example.com"}},
        test_client=fresh_client
    )
    assert data["result"]["content"][0]["text"] == "User created: Dan (dan@example.com) - role: user"

    after = rpc("resources/read", {"uri": "system://stats"}, test_client=fresh_client)
    assert json.loads(after["result"]["contents"][0]["text"])["total_users"] == before_count + 1


def test_call_create_user_invalid_role(fresh_client):
    """Test create_user rejects a role outside the declared enum."""
    data = rpc(
        "tools/call",
        {"name": "create_user", "arguments": {"name": "Dan", "email": "dan@example.com", "role": "root"}},
        test_client=fresh_client
    )
    assert data["error"]["code"] == -32602
    assert "role" in data["error"]["message"]


def test_call_tool_invalid_name():
    """Test calling a non-existent tool."""
    data = rpc("tools/call", {"name": "invalid_tool", "arguments": {}})
    assert data["error"]["code"] == -32601
    assert data["error"]["message"] == "unknown tool: invalid_tool"


def test_call_tool_missing_name():
    """Test tools/call without a name is invalid params."""
    data = rpc("tools/call", {"arguments": {}})
    assert data["error"]["code"] == -32602


# ============================================================================
# Resource Endpoint Tests
# ============================================================================

def test_list_resources():
    """Test listing resources."""
    data = rpc("resources/list")
    resources = data["result"]["resources"]
    assert [r["uri"] for r in resources] == ["user://recent", "system://stats"]
    assert resources[1]["mimeType"] == "application/json"


def test_read_resource_recent_users():
    """Test reading the recent users resource."""
    data = rpc("resources/read", {"uri": "user://recent"})
    content = data["result"]["contents"][0]
    assert content["type"] == "text"
    assert content["text"].startswith("Recent users:")


def test_read_resource_stats():
    """Test system stats is JSON with a user count."""
    data = rpc("resources/read", {"uri": "system://stats"})
    stats = json.loads(data["result"]["contents"][0]["text"])
    assert isinstance(stats["total_users"], int)
    assert stats["active_today"] == 42


def test_read_resource_not_found():
    """Test reading a URI that is not listed."""
    data = rpc("resources/read", {"uri": "mcp://resource/nonexistent"})
    assert data["error"]["code"] == -32602
    assert data["error"]["message"] == "resource not found: mcp://resource/nonexistent"


# ============================================================================
# Envelope Tests
# ============================================================================

@pytest.mark.parametrize("request_id", [7, "req-7", 0, None])
def test_id_is_echoed(request_id):
    """Test the response id equals the request id."""
    data = rpc("ping", request_id=request_id)
    assert data["id"] == request_id
    assert_single_outcome(data)


def test_id_is_echoed_on_error():
    """Test the id is echoed on error responses too."""
    data = rpc("foo/bar", request_id="abc")
    assert data["id"] == "abc"
    assert_single_outcome(data)


def test_missing_id_is_null():
    """Test a request without an id gets id null."""
    response = client.post("/mcp", json={"jsonrpc": "2.0", "method": "ping"})
    data = response.json()
    assert data["id"] is None
    assert data["result"] == {}


def test_malformed_json_is_parse_error():
    """Test undecodable bodies yield a parse error with id null."""
    response = client.post(
        "/mcp",
        content=b'{"jsonrpc": "2.0", "id": 1,',
        headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["id"] is None
    assert data["error"]["code"] == -32700


def test_non_object_payload_is_parse_error():
    """Test a top-level payload that is not an object yields a parse error."""
    response = client.post("/mcp", json=[1, 2, 3])
    data = response.json()
    assert data["id"] is None
    assert data["error"]["code"] == -32700


def test_wrong_jsonrpc_version_is_invalid_request():
    """Test a request with jsonrpc other than 2.0."""
    response = client.post("/mcp", json={"jsonrpc": "1.0", "id": 3, "method": "ping"})
    data = response.json()
    assert data["id"] == 3
    assert data["error"]["code"] == -32600


def test_missing_method_is_invalid_request():
    """Test a request without a method."""
    response = client.post("/mcp", json={"jsonrpc": "2.0", "id": 4})
    data = response.json()
    assert data["id"] == 4
    assert data["error"]["code"] == -32600


# ============================================================================
# Integration Tests
# ============================================================================

def test_full_workflow(fresh_client):
    """Test a full session: initialize, list, call, read."""
    assert "result" in rpc("initialize", test_client=fresh_client)

    tools = rpc("tools/list", test_client=fresh_client)["result"]["tools"]
    assert len(tools) > 0

    created = rpc(
        "tools/call",
        {"name": "create_user", "arguments": {"name": "Erin Zhou", "email": "erin@example.com", "role": "guest"}},
        test_client=fresh_client
    )
    assert "role: guest" in created["result"]["content"][0]["text"]

    found = rpc("tools/call", {"name": "search_users", "arguments": {"query": "zho"}}, test_client=fresh_client)
    assert "Erin Zhou" in found["result"]["content"][0]["text"]

    recent = rpc("resources/read", {"uri": "user://recent"}, test_client=fresh_client)
    assert recent["result"]["contents"][0]["text"].startswith("Recent users: Erin Zhou")
