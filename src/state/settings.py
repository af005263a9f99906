"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BackendSettings:
    command: tuple[str, ...]
    read_chunk_bytes: int
    shutdown_timeout_s: float


@dataclass(frozen=True, slots=True)
class HttpSettings:
    host: str
    port: int
    stream_disconnect_poll_s: float


@dataclass(frozen=True, slots=True)
class LimitsSettings:
    max_concurrent_streams: int
    max_batch_size: int


@dataclass(frozen=True, slots=True)
class AppSettings:
    backend: BackendSettings
    http: HttpSettings
    limits: LimitsSettings


__all__ = [
    "AppSettings",
    "BackendSettings",
    "HttpSettings",
    "LimitsSettings",
]
