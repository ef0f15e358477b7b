"""Configuration and environment helpers for the project.

Provides small helpers to read typed environment variables and exposes
project-level configuration constants used across the codebase (cache
defaults, monitoring cadence, document-database connection settings and
logging level).
"""

from __future__ import annotations

import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


# Registry default cache config (seconds)
CACHE_MAX_SIZE = _env_int("CACHE_MAX_SIZE", 1000)
CACHE_DEFAULT_TTL = _env_float("CACHE_DEFAULT_TTL", 300.0)
CACHE_CLEANUP_INTERVAL = _env_float("CACHE_CLEANUP_INTERVAL", 60.0)
CACHE_EVICTION_POLICY = os.environ.get("CACHE_EVICTION_POLICY", "lru").strip().lower()

# Periodic metrics log; 0 disables
CACHE_MONITOR_INTERVAL = _env_float("CACHE_MONITOR_INTERVAL", 600.0)

# Hosted document database
DATABASE_URL = os.environ.get("DATABASE_URL", "").strip()
DATABASE_ADMIN_KEY = os.environ.get("DATABASE_ADMIN_KEY", "").strip()
DATABASE_TIMEOUT = _env_float("DATABASE_TIMEOUT", 20.0)
HTTP_VERIFY = _env_bool("HTTP_VERIFY", True)

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").strip().upper()
