"""Configuration and environment helpers for the cache.

Provides small helpers to read typed environment variables and exposes
the defaults new caches pick up when the caller does not pass them
explicitly (debug flag, scheduler kind, logging level).
"""

from __future__ import annotations

import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_str(name: str, default: str) -> str:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


# Cache defaults
CACHE_DEBUG = _env_bool("CACHE_DEBUG", False)
CACHE_SCHEDULER = _env_str("CACHE_SCHEDULER", "thread")

# Logging
CACHE_LOG_LEVEL = _env_str("CACHE_LOG_LEVEL", "INFO").upper()
