"""Environment-driven settings for family-connect.

Environment Variables:
    FAMILY_CONNECT_LOG_LEVEL: Log level for the CLI (default WARNING)
    FAMILY_CONNECT_LOG_JSON: Render log events as JSON lines; otherwise
        as human-readable console lines (default true)
    FAMILY_CONNECT_STRICT_LOAD: Validate every relation when loading a
        family document (default true)

Example:
    >>> from family_connect.config import load_settings
    >>> load_settings().strict_load
    True
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}
_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _b(name: str, default: bool) -> bool:
    """Parse bool from environment variable with fallback."""
    value = os.getenv(name, "").strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    return default


def _level(name: str, default: str) -> str:
    """Parse a log level name from environment variable with fallback."""
    value = os.getenv(name, default).strip().upper()
    return value if value in _LEVELS else default


@dataclass(frozen=True)
class Settings:
    """Runtime settings, read from the environment at construction."""

    log_level: str = field(default_factory=lambda: _level("FAMILY_CONNECT_LOG_LEVEL", "WARNING"))
    log_json: bool = field(default_factory=lambda: _b("FAMILY_CONNECT_LOG_JSON", True))
    strict_load: bool = field(default_factory=lambda: _b("FAMILY_CONNECT_STRICT_LOAD", True))


def load_settings() -> Settings:
    """Re-read settings from the current environment."""
    return Settings()
