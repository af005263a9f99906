"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from src.rpc.bridge import RpcBridge
    from src.rpc.demux import FrameReader
    from src.state.settings import AppSettings
    from src.runtime.process import BackendProcess
    from src.handlers.streams import StreamAdmission


@dataclass(slots=True)
class RuntimeDeps:
    streams: StreamAdmission
    bridge: RpcBridge
    settings: AppSettings
    reader: FrameReader
    process: BackendProcess

    async def shutdown(self) -> None:
        try:
            await self.reader.stop()
        except Exception:
            logger.exception("frame reader shutdown failed")
        try:
            await self.process.stop()
        except Exception:
            logger.exception("backend shutdown failed")


__all__ = ["RuntimeDeps"]
