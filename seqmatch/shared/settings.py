"""
SEQMATCH — Shared Settings

Central configuration for the engine and its host adapters.
Load from environment variables with sensible defaults.
"""

import os

from .errors import InvalidSettingError


def _env_int(name: str, default: str) -> int:
    raw = os.environ.get(name, default)
    try:
        return int(raw)
    except ValueError:
        raise InvalidSettingError(name, raw) from None


def _env_bool(name: str, default: str) -> bool:
    raw = os.environ.get(name, default).strip().lower()
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off"):
        return False
    raise InvalidSettingError(name, raw)


# =============================================================================
# Project Identity
# =============================================================================
PROJECT_NAME: str = "SEQMATCH"
VERSION: str = "1.0.0"


# =============================================================================
# Logging
# =============================================================================
LOG_LEVEL: str = os.environ.get("SEQMATCH_LOG_LEVEL", "INFO")
LOG_DIR: str = os.environ.get("SEQMATCH_LOG_DIR", "logs")

# Log every completed sequence at INFO
LOG_RESOLUTIONS: bool = _env_bool("SEQMATCH_LOG_RESOLUTIONS", "true")


# =============================================================================
# Host Adapters
# =============================================================================
BUS_MAX_QUEUE_SIZE: int = _env_int("SEQMATCH_BUS_MAX_QUEUE_SIZE", "1000")

# Only feed well-formed events to the engine from the dispatch middleware
REQUIRE_VALID_EVENTS: bool = _env_bool("SEQMATCH_REQUIRE_VALID_EVENTS", "true")
