"""Correlation registry: one table from id to its waiting destination.

Single-response callers and fan-out session members share the table, so an id
can never be registered for both at once. Every read-modify-write of the table
happens under one lock, shared by HTTP handlers (register/cancel) and the frame
reader (resolve).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from dataclasses import dataclass

from src.errors import RpcError, InvalidBatchError
from src.config.jsonrpc import ERROR_INVALID_REQUEST, ERROR_MESSAGE_DUPLICATE_ID

from .frames import ResponseFrame, is_numeric_id
from .session import FanoutSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SinglePending:
    future: asyncio.Future[Any]


@dataclass(frozen=True, slots=True)
class FanoutPending:
    session: FanoutSession


PendingEntry = SinglePending | FanoutPending


class CorrelationRegistry:
    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._entries: dict[int, PendingEntry] = {}
        self._sessions: set[FanoutSession] = set()
        self.orphaned_frames = 0

    async def register_single(self, request_id: int, future: asyncio.Future[Any]) -> bool:
        """Register a single-response destination; False if the id is taken."""
        async with self._lock:
            if request_id in self._entries:
                return False
            self._entries[request_id] = SinglePending(future)
            return True

    async def register_session(self, session: FanoutSession) -> None:
        """Register every member id of ``session`` or none of them."""
        async with self._lock:
            for request_id in session.ids:
                if request_id in self._entries:
                    raise InvalidBatchError(
                        request_id=request_id,
                        code=ERROR_INVALID_REQUEST,
                        message=ERROR_MESSAGE_DUPLICATE_ID,
                    )
            entry = FanoutPending(session)
            for request_id in session.ids:
                self._entries[request_id] = entry
            if session.remaining:
                self._sessions.add(session)

    async def resolve(self, frame: ResponseFrame) -> bool:
        """Deliver ``frame`` to whoever waits on its id and drop the entry.

        Returns False when nobody is waiting (unknown, already resolved or
        cancelled id).
        """
        if not is_numeric_id(frame.id):
            self.orphaned_frames += 1
            return False

        async with self._lock:
            entry = self._entries.pop(frame.id, None)
            if entry is None:
                self.orphaned_frames += 1
                return False

            if isinstance(entry, SinglePending):
                future = entry.future
                if future.done():
                    # Caller gave up between the lookup and now.
                    return False
                if frame.is_error:
                    future.set_exception(RpcError(frame.error))
                else:
                    future.set_result(frame.result)
                return True

            session = entry.session
            if session.deliver(frame.id, frame.raw):
                self._sessions.discard(session)
                logger.debug("stream %s complete (%d ids)", session.session_id, len(session.ids))
            return True

    async def cancel(self, request_id: int, *, future: asyncio.Future[Any] | None = None) -> bool:
        """Remove a registration without delivering anything.

        With ``future`` given, only removes the entry if it still belongs to that
        single-response caller.
        """
        async with self._lock:
            entry = self._entries.get(request_id)
            if entry is None:
                return False
            if future is not None and not (isinstance(entry, SinglePending) and entry.future is future):
                return False
            del self._entries[request_id]
            if isinstance(entry, SinglePending):
                if not entry.future.done():
                    entry.future.cancel()
            else:
                entry.session.remaining.discard(request_id)
                if not entry.session.remaining:
                    entry.session.close()
                    self._sessions.discard(entry.session)
            return True

    async def cancel_session(self, session: FanoutSession) -> set[int]:
        """Drop every still-outstanding member of ``session`` and close its sink."""
        async with self._lock:
            outstanding = session.cancel()
            removed: set[int] = set()
            for request_id in outstanding:
                entry = self._entries.get(request_id)
                if isinstance(entry, FanoutPending) and entry.session is session:
                    del self._entries[request_id]
                    removed.add(request_id)
            self._sessions.discard(session)
            return removed

    def contains(self, request_id: int) -> bool:
        return request_id in self._entries

    def pending_count(self) -> int:
        return len(self._entries)

    def session_count(self) -> int:
        return len(self._sessions)


__all__ = ["CorrelationRegistry", "FanoutPending", "PendingEntry", "SinglePending"]
