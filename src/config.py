"""Configuration and environment helpers for the project.

Provides small helpers to read typed environment variables and exposes
project-level configuration constants used across the codebase (the
Forgejo URL and token, HTTP settings, compat mode and log level).
"""

from __future__ import annotations

import os

from core.errors import ConfigError


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


# Forgejo / Gitea instance
FORGEJO_REMOTE_URL = os.environ.get("FORGEJO_REMOTE_URL", "").strip()
FORGEJO_AUTH_TOKEN = os.environ.get("FORGEJO_AUTH_TOKEN", "").strip()
FORGEJO_TIMEOUT = _env_float("FORGEJO_TIMEOUT", 20.0)

# Network / HTTP
HTTP_VERIFY = _env_bool("HTTP_VERIFY", True)

# Output: detailed list text for older clients
FORGEJO_COMPAT_MODE = _env_bool("FORGEJO_COMPAT_MODE", False)

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"


def validate_config(remote_url: str = FORGEJO_REMOTE_URL, auth_token: str = FORGEJO_AUTH_TOKEN) -> None:
    if not remote_url:
        raise ConfigError("FORGEJO_REMOTE_URL environment variable is required")
    if not auth_token:
        raise ConfigError("FORGEJO_AUTH_TOKEN environment variable is required")
