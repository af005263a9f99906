"""Admission limits for streaming sessions (env names and defaults only)."""

from __future__ import annotations

ENV_MAX_CONCURRENT_STREAMS = "MAX_CONCURRENT_STREAMS"
ENV_MAX_BATCH_SIZE = "MAX_BATCH_SIZE"

DEFAULT_MAX_CONCURRENT_STREAMS = 100
DEFAULT_MAX_BATCH_SIZE = 256

__all__ = [
    "DEFAULT_MAX_BATCH_SIZE",
    "DEFAULT_MAX_CONCURRENT_STREAMS",
    "ENV_MAX_BATCH_SIZE",
    "ENV_MAX_CONCURRENT_STREAMS",
]
