"""Tests for the MCP tool server."""

from __future__ import annotations

import json
import sys
from unittest.mock import MagicMock, patch

from ndc_codec.protocol.framing import FS


def _get_server_module():
    """Import server module with FastMCP mocked to avoid init issues."""
    mock_fastmcp_cls = MagicMock()
    mock_fastmcp_instance = MagicMock()
    # Make the @mcp.tool() decorator a no-op that returns the function unchanged
    mock_fastmcp_instance.tool.return_value = lambda fn: fn
    mock_fastmcp_instance.resource.return_value = lambda fn: fn
    mock_fastmcp_cls.return_value = mock_fastmcp_instance

    with patch("mcp.server.fastmcp.FastMCP", mock_fastmcp_cls):
        # Remove cached server module so it re-imports with our mock
        sys.modules.pop("ndc_codec.server", None)
        import ndc_codec.server as server_mod

    return server_mod


def _hex(*tokens: str) -> str:
    return FS.join(tokens).encode("latin-1").hex()


def test_decode_with_session(monkeypatch):
    """Decoding through a session assigns traces from that session."""
    monkeypatch.delenv("NDC_CODEC_CONFIG", raising=False)
    server = _get_server_module()
    session_id = server.open_session()["session_id"]

    first = server.decode_message(session_id, _hex("22", "000", "", "9"))
    second = server.decode_message(session_id, _hex("22", "000", "", "9"))

    assert first["ok"]
    assert first["meta"] == {
        "mtid": "response", "method": "solicitedStatus", "trace": "req:1",
    }
    assert first["message"]["descriptor"] == "ready"
    assert second["meta"]["trace"] == "req:2"


def test_decode_text_input(monkeypatch):
    monkeypatch.delenv("NDC_CODEC_CONFIG", raising=False)
    server = _get_server_module()
    session_id = server.open_session()["session_id"]
    result = server.decode_message(session_id, "22\x1c000\x1c\x1cC\x1cA", encoding="text")
    assert not result["ok"]
    assert result["meta"]["mtid"] == "error"
    assert result["message"]["type"] == "specificCommandReject"


def test_decode_invalid_hex(monkeypatch):
    monkeypatch.delenv("NDC_CODEC_CONFIG", raising=False)
    server = _get_server_module()
    session_id = server.open_session()["session_id"]
    assert "error" in server.decode_message(session_id, "zz")


def test_decode_unknown_input_encoding(monkeypatch):
    monkeypatch.delenv("NDC_CODEC_CONFIG", raising=False)
    server = _get_server_module()
    session_id = server.open_session()["session_id"]
    result = server.decode_message(session_id, "22", encoding="base64")
    assert "error" in result
    assert "meta" not in result


def test_unknown_session(monkeypatch):
    monkeypatch.delenv("NDC_CODEC_CONFIG", raising=False)
    server = _get_server_module()
    result = server.decode_message("nope", _hex("22", "000", "", "9"))
    assert "open_session" in result["error"]
    assert "error" in server.encode_message("nope", "goInService")


def test_encode_updates_session(monkeypatch):
    """Key changes encoded in one session are visible in its resource."""
    monkeypatch.delenv("NDC_CODEC_CONFIG", raising=False)
    server = _get_server_module()
    session_id = server.open_session()["session_id"]

    result = server.encode_message(session_id, "keyChangeTak", {"tak": "ABCD"})
    assert result["meta"]["trace"] == "keys:1"
    assert bytes.fromhex(result["hex"]).endswith(b"ABCD")

    state = json.loads(server.resource_session(session_id))
    assert state["session"] == {"tak": "ABCD"}
    assert state["counters"] == {"traceCentralKeys": 2}


def test_encode_unknown_method(monkeypatch):
    monkeypatch.delenv("NDC_CODEC_CONFIG", raising=False)
    server = _get_server_module()
    session_id = server.open_session()["session_id"]
    assert server.encode_message(session_id, "noSuchMethod") == {
        "error": "Unknown method 'noSuchMethod'",
    }


def test_sessions_are_independent(monkeypatch):
    monkeypatch.delenv("NDC_CODEC_CONFIG", raising=False)
    server = _get_server_module()
    a = server.open_session()["session_id"]
    b = server.open_session()["session_id"]
    server.encode_message(a, "goInService")
    assert server.encode_message(b, "goInService")["meta"]["trace"] == "req:1"


def test_close_session(monkeypatch):
    monkeypatch.delenv("NDC_CODEC_CONFIG", raising=False)
    server = _get_server_module()
    session_id = server.open_session()["session_id"]
    assert server.close_session(session_id) == {"closed": True}
    assert server.close_session(session_id) == {"closed": False}
    assert "error" in json.loads(server.resource_session(session_id))


def test_list_methods(monkeypatch):
    monkeypatch.delenv("NDC_CODEC_CONFIG", raising=False)
    server = _get_server_module()
    methods = {m["method"]: m for m in server.list_methods()["methods"]}
    assert methods["solicitedStatus"]["classification"] == "22"
    assert methods["solicitedStatus"]["mtid"] == "response"

    catalog = json.loads(server.resource_methods())
    assert catalog["goInService"]["values"]["commandCode"] == "1"
