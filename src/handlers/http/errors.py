"""Error helpers for the HTTP routes."""

from __future__ import annotations

from typing import Any

from fastapi.responses import ORJSONResponse


def error_response(status_code: int, error: Any) -> ORJSONResponse:
    return ORJSONResponse({"error": error}, status_code=status_code)


__all__ = ["error_response"]
