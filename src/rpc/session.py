"""Fan-out sessions: one output sink shared by a set of outstanding ids."""

from __future__ import annotations

import uuid
import asyncio
from typing import Any
from collections.abc import AsyncIterator, Sequence


class FanoutSession:
    """A batch of requests whose responses are written to one event sink.

    The sink is an unbounded queue so the frame reader never blocks on a slow
    consumer. ``None`` on the queue marks the end of the stream. Once closed,
    nothing else is ever enqueued.
    """

    def __init__(self, requests: Sequence[dict[str, Any]]) -> None:
        self.session_id = uuid.uuid4().hex[:12]
        self.requests: list[dict[str, Any]] = list(requests)
        self.ids: tuple[int, ...] = tuple(r["id"] for r in self.requests)
        self.remaining: set[int] = set(self.ids)
        self._queue: asyncio.Queue[dict[str, Any] | None] = asyncio.Queue()
        self._closed = False

    @classmethod
    def rejected(cls, error_frame: dict[str, Any]) -> FanoutSession:
        """A session that carries a single error frame and is already closed."""
        session = cls([])
        session._emit(error_frame)
        session.close()
        return session

    @property
    def closed(self) -> bool:
        return self._closed

    def _emit(self, event: dict[str, Any]) -> bool:
        if self._closed:
            return False
        self._queue.put_nowait(event)
        return True

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(None)

    def deliver(self, request_id: int, frame: dict[str, Any]) -> bool:
        """Write one resolved member; returns True when this completed the session."""
        if self._closed or request_id not in self.remaining:
            return False
        self._emit(frame)
        self.remaining.discard(request_id)
        if not self.remaining:
            self.close()
            return True
        return False

    def cancel(self) -> set[int]:
        """Stop the session early; returns the ids that were still outstanding."""
        outstanding = set(self.remaining)
        self.remaining.clear()
        self.close()
        return outstanding

    async def next_event(self) -> dict[str, Any] | None:
        return await self._queue.get()

    async def events(self) -> AsyncIterator[dict[str, Any]]:
        while True:
            event = await self._queue.get()
            if event is None:
                return
            yield event


__all__ = ["FanoutSession"]
