"""Request body parsing/validation for the HTTP routes."""

from __future__ import annotations

from typing import Any

import orjson

from src.config.http import HTTP_ERROR_RPC_BODY, HTTP_ERROR_STREAM_BODY, HTTP_ERROR_EXECUTE_BODY


def _load_json(raw: bytes) -> Any:
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON: {exc}") from exc


def parse_execute_body(raw: bytes) -> tuple[str, dict[str, Any]]:
    try:
        body = _load_json(raw)
    except ValueError as exc:
        raise ValueError(HTTP_ERROR_EXECUTE_BODY) from exc
    if not isinstance(body, dict):
        raise ValueError(HTTP_ERROR_EXECUTE_BODY)

    tool = body.get("tool")
    args = body.get("args")
    if not isinstance(tool, str) or not isinstance(args, dict):
        raise ValueError(HTTP_ERROR_EXECUTE_BODY)
    return tool, args


def parse_rpc_body(raw: bytes) -> tuple[str, Any]:
    try:
        body = _load_json(raw)
    except ValueError as exc:
        raise ValueError(HTTP_ERROR_RPC_BODY) from exc
    if not isinstance(body, dict):
        raise ValueError(HTTP_ERROR_RPC_BODY)

    method = body.get("method")
    if not isinstance(method, str) or not method.strip():
        raise ValueError(HTTP_ERROR_RPC_BODY)
    params = body.get("params", {})
    if params is None:
        params = {}
    if not isinstance(params, (dict, list)):
        raise ValueError(HTTP_ERROR_RPC_BODY)
    return method.strip(), params


def parse_stream_body(raw: bytes) -> list[Any]:
    """Return the submitted requests as a list.

    Only the shape of the body is checked here; per-request id validation is
    part of batch admission.
    """
    try:
        body = _load_json(raw)
    except ValueError as exc:
        raise ValueError(HTTP_ERROR_STREAM_BODY) from exc
    if isinstance(body, dict):
        return [body]
    if isinstance(body, list) and body:
        return body
    raise ValueError(HTTP_ERROR_STREAM_BODY)


__all__ = ["parse_execute_body", "parse_rpc_body", "parse_stream_body"]
