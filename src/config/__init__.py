"""Configuration module exports (env names, defaults and wire constants only)."""

from .jsonrpc import JSONRPC_VERSION, ERROR_INVALID_REQUEST
from .http import DEFAULT_PORT
from .limits import DEFAULT_MAX_BATCH_SIZE, DEFAULT_MAX_CONCURRENT_STREAMS

__all__ = [
    "DEFAULT_MAX_BATCH_SIZE",
    "DEFAULT_MAX_CONCURRENT_STREAMS",
    "DEFAULT_PORT",
    "ERROR_INVALID_REQUEST",
    "JSONRPC_VERSION",
]
