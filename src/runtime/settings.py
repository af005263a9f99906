"""Load runtime settings.

Env names and defaults live in `src/config/*`; this module resolves them from
the environment into the structured dataclasses used by the rest of the server.
"""

from __future__ import annotations

import os
import shlex
import logging

from dotenv import load_dotenv

from src.config.secrets import (
    ENV_DOTENV_PATH,
    DEFAULT_DOTENV_PATH,
    ENV_GITHUB_PERSONAL_ACCESS_TOKEN,
    get_github_token,
)
from src.state.settings import AppSettings, HttpSettings, LimitsSettings, BackendSettings
from src.config.http import (
    ENV_HOST,
    ENV_PORT,
    DEFAULT_HOST,
    DEFAULT_PORT,
    ENV_STREAM_DISCONNECT_POLL_S,
    DEFAULT_STREAM_DISCONNECT_POLL_S,
)
from src.config.limits import (
    ENV_MAX_BATCH_SIZE,
    DEFAULT_MAX_BATCH_SIZE,
    ENV_MAX_CONCURRENT_STREAMS,
    DEFAULT_MAX_CONCURRENT_STREAMS,
)
from src.config.backend import (
    ENV_BACKEND_COMMAND,
    ENV_GITHUB_TOOLSETS,
    ENV_MCP_DOCKER_IMAGE,
    DEFAULT_GITHUB_TOOLSETS,
    DEFAULT_MCP_DOCKER_IMAGE,
    ENV_BACKEND_READ_CHUNK_BYTES,
    ENV_BACKEND_SHUTDOWN_TIMEOUT_S,
    DEFAULT_BACKEND_READ_CHUNK_BYTES,
    DEFAULT_BACKEND_SHUTDOWN_TIMEOUT_S,
)

logger = logging.getLogger(__name__)


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def build_docker_command(*, token: str, image: str, toolsets: str) -> tuple[str, ...]:
    # The image's default entrypoint already speaks MCP over stdio.
    return (
        "docker",
        "run",
        "-i",
        "--rm",
        "-e",
        f"{ENV_GITHUB_PERSONAL_ACCESS_TOKEN}={token}",
        "-e",
        f"{ENV_GITHUB_TOOLSETS}={toolsets}",
        image,
    )


def _load_backend_command() -> tuple[str, ...]:
    override = _str_env(ENV_BACKEND_COMMAND, "")
    if override:
        return tuple(shlex.split(override))

    token = get_github_token()
    if not token:
        raise ValueError(f"{ENV_GITHUB_PERSONAL_ACCESS_TOKEN} is not set")
    return build_docker_command(
        token=token,
        image=_str_env(ENV_MCP_DOCKER_IMAGE, DEFAULT_MCP_DOCKER_IMAGE),
        toolsets=_str_env(ENV_GITHUB_TOOLSETS, DEFAULT_GITHUB_TOOLSETS),
    )


def _load_backend_settings() -> BackendSettings:
    chunk_bytes = _int_env(ENV_BACKEND_READ_CHUNK_BYTES, DEFAULT_BACKEND_READ_CHUNK_BYTES)
    if chunk_bytes <= 0:
        chunk_bytes = DEFAULT_BACKEND_READ_CHUNK_BYTES
    shutdown_timeout = _float_env(ENV_BACKEND_SHUTDOWN_TIMEOUT_S, DEFAULT_BACKEND_SHUTDOWN_TIMEOUT_S)
    if shutdown_timeout <= 0:
        shutdown_timeout = DEFAULT_BACKEND_SHUTDOWN_TIMEOUT_S

    return BackendSettings(
        command=_load_backend_command(),
        read_chunk_bytes=chunk_bytes,
        shutdown_timeout_s=shutdown_timeout,
    )


def _load_http_settings() -> HttpSettings:
    poll_s = _float_env(ENV_STREAM_DISCONNECT_POLL_S, DEFAULT_STREAM_DISCONNECT_POLL_S)
    if poll_s <= 0:
        poll_s = DEFAULT_STREAM_DISCONNECT_POLL_S

    return HttpSettings(
        host=_str_env(ENV_HOST, DEFAULT_HOST),
        port=_int_env(ENV_PORT, DEFAULT_PORT),
        stream_disconnect_poll_s=poll_s,
    )


def _load_limits_settings() -> LimitsSettings:
    max_streams = _int_env(ENV_MAX_CONCURRENT_STREAMS, DEFAULT_MAX_CONCURRENT_STREAMS)
    max_batch = _int_env(ENV_MAX_BATCH_SIZE, DEFAULT_MAX_BATCH_SIZE)

    return LimitsSettings(
        max_concurrent_streams=max(1, max_streams),
        max_batch_size=max(1, max_batch),
    )


def load_env_file() -> bool:
    """Merge the dotenv file into the process env without overriding set vars."""
    path = _str_env(ENV_DOTENV_PATH, DEFAULT_DOTENV_PATH)
    loaded = load_dotenv(path, override=False)
    if loaded:
        logger.info("loaded env file %s", path)
    return loaded


def load_settings() -> AppSettings:
    load_env_file()
    return AppSettings(
        backend=_load_backend_settings(),
        http=_load_http_settings(),
        limits=_load_limits_settings(),
    )


__all__ = ["build_docker_command", "load_env_file", "load_settings"]
