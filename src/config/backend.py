"""Backend process configuration (env names and defaults only)."""

from __future__ import annotations

ENV_MCP_DOCKER_IMAGE = "MCP_DOCKER_IMAGE"
ENV_GITHUB_TOOLSETS = "GITHUB_TOOLSETS"
# Full command line override (shell-style). Skips the docker defaults entirely.
ENV_BACKEND_COMMAND = "BACKEND_COMMAND"
ENV_BACKEND_READ_CHUNK_BYTES = "BACKEND_READ_CHUNK_BYTES"
ENV_BACKEND_SHUTDOWN_TIMEOUT_S = "BACKEND_SHUTDOWN_TIMEOUT_S"

DEFAULT_MCP_DOCKER_IMAGE = "ghcr.io/github/github-mcp-server"
DEFAULT_GITHUB_TOOLSETS = "repos,issues"
DEFAULT_BACKEND_READ_CHUNK_BYTES = 64 * 1024
DEFAULT_BACKEND_SHUTDOWN_TIMEOUT_S = 5.0

# Prefix for backend stderr lines forwarded to the log.
BACKEND_STDERR_LOG_PREFIX = "[backend stderr]"

__all__ = [
    "BACKEND_STDERR_LOG_PREFIX",
    "DEFAULT_BACKEND_READ_CHUNK_BYTES",
    "DEFAULT_BACKEND_SHUTDOWN_TIMEOUT_S",
    "DEFAULT_GITHUB_TOOLSETS",
    "DEFAULT_MCP_DOCKER_IMAGE",
    "ENV_BACKEND_COMMAND",
    "ENV_BACKEND_READ_CHUNK_BYTES",
    "ENV_BACKEND_SHUTDOWN_TIMEOUT_S",
    "ENV_GITHUB_TOOLSETS",
    "ENV_MCP_DOCKER_IMAGE",
]
