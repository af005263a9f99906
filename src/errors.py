"""Shared error types for the MCP HTTP bridge."""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RpcError(Exception):
    """Raised to a single-request caller when the backend answered with an error."""

    error: Any


@dataclass(frozen=True, slots=True)
class InvalidBatchError(Exception):
    """Raised when a streaming batch fails admission.

    ``request_id`` is the offending request's submitted id when it can be echoed
    back (a JSON scalar), otherwise None.
    """

    request_id: Any
    code: int
    message: str


@dataclass(frozen=True, slots=True)
class TransportClosedError(Exception):
    """Raised when writing to a backend transport that is closed or broken."""

    reason: str


@dataclass(frozen=True, slots=True)
class IdExhaustedError(Exception):
    """Raised when the correlation id space is used up. Fatal."""

    limit: int


__all__ = ["IdExhaustedError", "InvalidBatchError", "RpcError", "TransportClosedError"]
