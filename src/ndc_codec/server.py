"""MCP server entry point for the NDC codec.

Exposes decode/encode tools and catalog resources via the Model Context
Protocol using the official Python MCP SDK with stdio transport. Each
session id stands for one terminal connection and owns its own trace
counters and session values.
"""

from __future__ import annotations

import json
import logging
import threading
import uuid
from typing import Any

from mcp.server.fastmcp import FastMCP

from .codec import NDCCodec
from .config import CodecConfig
from .models import Context, Meta

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "ndc-codec",
    instructions="Decode and encode NDC terminal/host protocol messages",
)

# Global codec and per-connection state
_codec: NDCCodec | None = None
_contexts: dict[str, Context] = {}
_lock = threading.Lock()


def _get_codec() -> NDCCodec:
    """Get the codec, building it from the environment on first use."""
    global _codec
    if _codec is None:
        _codec = NDCCodec(CodecConfig.from_env())
    return _codec


def _get_context(session_id: str) -> Context:
    """Get the context of an open session, raising if there is none."""
    context = _contexts.get(session_id)
    if context is None:
        raise KeyError(
            f"Unknown session '{session_id}'. Use the 'open_session' tool first."
        )
    return context


def _to_bytes(data: str, encoding: str) -> bytes:
    if encoding == "hex":
        return bytes.fromhex(data)
    if encoding != "text":
        raise ValueError("encoding must be 'hex' or 'text'")
    return data.encode(_get_codec().config.encoding)


# ─── SESSION TOOLS ────────────────────────────────────────────────────

@mcp.tool()
def open_session() -> dict[str, Any]:
    """Start tracking a terminal connection.

    Returns a session id to pass to the decode and encode tools. Trace
    counters start at 1 and negotiated keys and cassettes are empty.
    """
    session_id = uuid.uuid4().hex
    with _lock:
        _contexts[session_id] = Context()
    logger.info("Opened session %s", session_id)
    return {"session_id": session_id}


@mcp.tool()
def close_session(session_id: str) -> dict[str, Any]:
    """Discard a terminal connection's counters and session values."""
    with _lock:
        removed = _contexts.pop(session_id, None)
    if removed is not None:
        logger.info("Closed session %s", session_id)
    return {"closed": removed is not None}


# ─── CODEC TOOLS ──────────────────────────────────────────────────────

@mcp.tool()
def decode_message(
    session_id: str, data: str, encoding: str = "hex"
) -> dict[str, Any]:
    """Decode a message received from the terminal.

    Args:
        session_id: Session returned by open_session.
        data: The message bytes as hex, or as text with FS (0x1C) separators.
        encoding: "hex" (default) or "text".
    """
    try:
        buffer = _to_bytes(data, encoding)
    except ValueError as e:
        return {"error": f"Invalid {encoding} data: {e}"}

    meta = Meta()
    try:
        with _lock:
            result = _get_codec().decode(buffer, meta, _get_context(session_id))
    except KeyError as e:
        return {"error": str(e.args[0])}

    return {
        "meta": meta.to_dict(),
        "ok": result.ok,
        "message": result.to_dict(),
    }


@mcp.tool()
def encode_message(
    session_id: str, method: str, fields: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Encode a message for the terminal.

    Args:
        session_id: Session returned by open_session.
        method: Message format name, e.g. "goInService" or "transactionReply".
        fields: Field values; format defaults fill the rest.
    """
    meta = Meta(method=method)
    try:
        with _lock:
            buffer = _get_codec().encode(fields or {}, meta, _get_context(session_id))
    except KeyError as e:
        return {"error": str(e.args[0])}

    if buffer is None:
        return {"error": f"Unknown method '{method}'"}

    return {
        "meta": meta.to_dict(),
        "hex": buffer.hex(),
        "length": len(buffer),
    }


@mcp.tool()
def list_methods() -> dict[str, Any]:
    """List the message formats known to the codec."""
    catalog = _get_codec().catalog
    return {
        "methods": [
            {
                "method": fmt.method,
                "classification": fmt.classification,
                "mtid": fmt.mtid.value,
            }
            for fmt in sorted(catalog, key=lambda f: f.method)
        ]
    }


# ─── RESOURCES ────────────────────────────────────────────────────────

@mcp.resource("ndc://catalog/methods")
def resource_methods() -> str:
    """Message format catalog as JSON."""
    catalog = _get_codec().catalog
    return json.dumps(
        {
            fmt.method: {
                "classification": fmt.classification,
                "mtid": fmt.mtid.value,
                "fields": list(fmt.fields),
                "values": dict(fmt.values),
            }
            for fmt in catalog
        },
        indent=2,
    )


@mcp.resource("ndc://session/{session_id}")
def resource_session(session_id: str) -> str:
    """Counters and session values of an open session as JSON."""
    with _lock:
        context = _contexts.get(session_id)
        if context is None:
            return json.dumps({"error": f"Unknown session '{session_id}'"})
        return json.dumps(context.to_dict(), indent=2)


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    _get_codec()
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
