"""JSON-RPC wire constants."""

from __future__ import annotations

JSONRPC_VERSION = "2.0"

KEY_JSONRPC = "jsonrpc"
KEY_ID = "id"
KEY_METHOD = "method"
KEY_PARAMS = "params"
KEY_RESULT = "result"
KEY_ERROR = "error"

# Invalid Request (JSON-RPC 2.0 reserved range).
ERROR_INVALID_REQUEST = -32600
ERROR_MESSAGE_INVALID_ID = "Missing or invalid id"
ERROR_MESSAGE_DUPLICATE_ID = "Duplicate or in-flight id"

# Largest integer that survives a round trip through a JSON number on every peer.
MAX_SAFE_ID = 2**53 - 1

# MCP methods used by the convenience routes.
METHOD_TOOLS_LIST = "tools/list"
METHOD_TOOLS_CALL = "tools/call"

__all__ = [
    "ERROR_INVALID_REQUEST",
    "ERROR_MESSAGE_DUPLICATE_ID",
    "ERROR_MESSAGE_INVALID_ID",
    "JSONRPC_VERSION",
    "KEY_ERROR",
    "KEY_ID",
    "KEY_JSONRPC",
    "KEY_METHOD",
    "KEY_PARAMS",
    "KEY_RESULT",
    "MAX_SAFE_ID",
    "METHOD_TOOLS_CALL",
    "METHOD_TOOLS_LIST",
]
