"""Secrets configuration."""

from __future__ import annotations

import os

ENV_GITHUB_PERSONAL_ACCESS_TOKEN = "GITHUB_PERSONAL_ACCESS_TOKEN"

# Optional dotenv file read before settings resolve; real env vars win.
ENV_DOTENV_PATH = "DOTENV_PATH"
DEFAULT_DOTENV_PATH = ".env"


def get_github_token() -> str:
    return (os.getenv(ENV_GITHUB_PERSONAL_ACCESS_TOKEN) or "").strip()


__all__ = [
    "ENV_GITHUB_PERSONAL_ACCESS_TOKEN",
    "ENV_DOTENV_PATH",
    "DEFAULT_DOTENV_PATH",
    "get_github_token",
]
