"""Admission control for SSE fan-out streams.

A slot is reserved before anything reaches the backend and released exactly
once when the stream ends, however it ends. Reserved slots are bound to their
fan-out session once it exists so `/health` can list what is live.
"""

from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass

from src.rpc.session import FanoutSession


@dataclass(slots=True)
class StreamSlot:
    slot_id: int
    session_id: str | None = None


class StreamAdmission:
    def __init__(self, *, max_streams: int) -> None:
        self._capacity = max(1, int(max_streams))
        self._lock = asyncio.Lock()
        self._slots: dict[int, StreamSlot] = {}
        self._counter = itertools.count(1)
        self.rejected = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    async def reserve(self) -> StreamSlot | None:
        """Take a slot, or return None when every slot is in use."""
        async with self._lock:
            if len(self._slots) >= self._capacity:
                self.rejected += 1
                return None
            slot = StreamSlot(next(self._counter))
            self._slots[slot.slot_id] = slot
            return slot

    def bind(self, slot: StreamSlot, session: FanoutSession) -> None:
        slot.session_id = session.session_id

    async def release(self, slot: StreamSlot) -> bool:
        async with self._lock:
            return self._slots.pop(slot.slot_id, None) is not None

    def active_count(self) -> int:
        return len(self._slots)

    def active_session_ids(self) -> list[str]:
        return [s.session_id for s in self._slots.values() if s.session_id is not None]


__all__ = ["StreamAdmission", "StreamSlot"]
