"""Logging configuration (env-resolved constants only)."""

from __future__ import annotations

import os

LOG_LEVEL: str = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
LOG_FORMAT: str = (os.getenv("LOG_FORMAT") or "").strip() or "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Uvicorn logs every /health check at INFO. Keep it quiet unless explicitly enabled.
SHOW_ACCESS_LOGS: bool = (os.getenv("SHOW_ACCESS_LOGS") or "").strip().lower() in {"1", "true", "yes"}

# Malformed backend lines are logged with a bounded preview.
LOG_LINE_PREVIEW_CHARS = 200

__all__ = ["LOG_FORMAT", "LOG_LEVEL", "LOG_LINE_PREVIEW_CHARS", "SHOW_ACCESS_LOGS"]
