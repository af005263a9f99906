"""All-or-nothing admission of streaming batches."""

from __future__ import annotations

from typing import Any
from collections.abc import Sequence

from src.errors import InvalidBatchError
from src.config.jsonrpc import (
    KEY_ID,
    KEY_ERROR,
    KEY_JSONRPC,
    JSONRPC_VERSION,
    ERROR_INVALID_REQUEST,
    ERROR_MESSAGE_DUPLICATE_ID,
    ERROR_MESSAGE_INVALID_ID,
)

from .frames import is_numeric_id


def echo_id(value: Any) -> Any:
    """Return ``value`` if it can be echoed back in an error frame, else None."""
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return value
    return None


def validate_batch(requests: Sequence[Any]) -> list[dict[str, Any]]:
    """Check every request carries a numeric id, unique within the batch.

    Raises ``InvalidBatchError`` for the first offending request; nothing in the
    batch is admitted in that case.
    """
    seen: set[int] = set()
    for request in requests:
        if not isinstance(request, dict):
            raise InvalidBatchError(request_id=None, code=ERROR_INVALID_REQUEST, message=ERROR_MESSAGE_INVALID_ID)
        request_id = request.get(KEY_ID)
        if not is_numeric_id(request_id):
            raise InvalidBatchError(
                request_id=echo_id(request_id),
                code=ERROR_INVALID_REQUEST,
                message=ERROR_MESSAGE_INVALID_ID,
            )
        if request_id in seen:
            raise InvalidBatchError(request_id=request_id, code=ERROR_INVALID_REQUEST, message=ERROR_MESSAGE_DUPLICATE_ID)
        seen.add(request_id)
    return list(requests)


def build_error_frame(exc: InvalidBatchError) -> dict[str, Any]:
    return {
        KEY_JSONRPC: JSONRPC_VERSION,
        KEY_ID: exc.request_id,
        KEY_ERROR: {"code": exc.code, "message": exc.message},
    }


__all__ = ["build_error_frame", "echo_id", "validate_batch"]
