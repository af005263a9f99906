"""Single-response routes: one HTTP request, one backend call."""

from __future__ import annotations

import logging
from typing import Any

from fastapi.responses import ORJSONResponse

from src.state import RuntimeDeps
from src.errors import RpcError, TransportClosedError
from src.config.http import HTTP_ERROR_BACKEND_UNAVAILABLE

from .errors import error_response

logger = logging.getLogger(__name__)


async def call_backend(runtime_deps: RuntimeDeps, method: str, params: Any) -> ORJSONResponse:
    """Forward one call and map the outcome onto an HTTP response.

    A backend error is returned as 500 with the error payload; a broken
    transport is 502.
    """
    try:
        result = await runtime_deps.bridge.call(method, params)
    except RpcError as exc:
        return error_response(500, exc.error)
    except TransportClosedError as exc:
        logger.error("backend call %s failed: %s", method, exc.reason)
        return error_response(502, HTTP_ERROR_BACKEND_UNAVAILABLE)
    return ORJSONResponse(result)


__all__ = ["call_backend"]
