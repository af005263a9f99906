"""HTTP surface configuration and constants."""

from __future__ import annotations

ENV_HOST = "HOST"
ENV_PORT = "PORT"
ENV_STREAM_DISCONNECT_POLL_S = "STREAM_DISCONNECT_POLL_S"

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 6277
# How often an idle SSE stream checks whether its client went away.
DEFAULT_STREAM_DISCONNECT_POLL_S = 1.0

SSE_MEDIA_TYPE = "text/event-stream"
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
}

# Error bodies
HTTP_ERROR_EXECUTE_BODY = "Body must have { tool: string, args: object }"
HTTP_ERROR_RPC_BODY = "Body must have { method: string, params?: object }"
HTTP_ERROR_STREAM_BODY = "Body must be a JSON-RPC request object or a non-empty list of them"
HTTP_ERROR_BACKEND_UNAVAILABLE = "backend unavailable"
HTTP_ERROR_AT_CAPACITY = "server cannot accept new streams, try again later"
HTTP_ERROR_BATCH_TOO_LARGE = "batch too large"

__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_STREAM_DISCONNECT_POLL_S",
    "ENV_HOST",
    "ENV_PORT",
    "ENV_STREAM_DISCONNECT_POLL_S",
    "HTTP_ERROR_AT_CAPACITY",
    "HTTP_ERROR_BACKEND_UNAVAILABLE",
    "HTTP_ERROR_BATCH_TOO_LARGE",
    "HTTP_ERROR_EXECUTE_BODY",
    "HTTP_ERROR_RPC_BODY",
    "HTTP_ERROR_STREAM_BODY",
    "SSE_HEADERS",
    "SSE_MEDIA_TYPE",
]
