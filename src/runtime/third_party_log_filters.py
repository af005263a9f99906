"""Log noise filters for third-party libraries.

Only adjusts a few logger levels to keep steady-state logs readable.
"""

from __future__ import annotations

import logging

from src.config.logging import SHOW_ACCESS_LOGS


def configure() -> None:
    # Health checks hit the server constantly; one access line each drowns the backend stderr.
    if not SHOW_ACCESS_LOGS:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


__all__ = ["configure"]
