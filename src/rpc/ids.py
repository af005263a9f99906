"""Correlation id allocation."""

from __future__ import annotations

from src.errors import IdExhaustedError
from src.config.jsonrpc import MAX_SAFE_ID


class IdAllocator:
    """Hand out strictly increasing positive ids, starting at ``start``.

    Never wraps: once ``limit`` has been issued the allocator is spent and every
    further call raises ``IdExhaustedError``.
    """

    def __init__(self, *, start: int = 1, limit: int = MAX_SAFE_ID) -> None:
        if start < 1:
            raise ValueError("start must be a positive integer")
        self._next = int(start)
        self._limit = int(limit)

    def next(self) -> int:
        value = self._next
        if value > self._limit:
            raise IdExhaustedError(limit=self._limit)
        self._next = value + 1
        return value

    @property
    def last_issued(self) -> int:
        return self._next - 1


__all__ = ["IdAllocator"]
