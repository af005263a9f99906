"""Runtime dependency construction (backend process + correlation core)."""

from __future__ import annotations

import os
import logging

from src.state import RuntimeDeps
from src.rpc.bridge import RpcBridge
from src.rpc.demux import FrameReader
from src.rpc.writer import StreamWriter
from src.state.settings import AppSettings
from src.rpc.registry import CorrelationRegistry
from src.handlers.streams import StreamAdmission

from .process import BackendProcess
from .settings import load_settings

logger = logging.getLogger(__name__)


async def build_runtime_deps(settings: AppSettings | None = None) -> RuntimeDeps:
    settings = settings or load_settings()

    process = BackendProcess(
        settings.backend.command,
        env=dict(os.environ),
        shutdown_timeout_s=settings.backend.shutdown_timeout_s,
    )
    await process.start()

    registry = CorrelationRegistry()
    bridge = RpcBridge(StreamWriter(process.stdin), registry)
    reader = FrameReader(process.stdout, registry, chunk_bytes=settings.backend.read_chunk_bytes)
    reader.start()

    streams = StreamAdmission(max_streams=settings.limits.max_concurrent_streams)

    return RuntimeDeps(
        streams=streams,
        bridge=bridge,
        settings=settings,
        reader=reader,
        process=process,
    )


__all__ = ["RuntimeDeps", "build_runtime_deps"]
