"""Configuration management for the channel registry.

This module provides centralized configuration loading from environment variables.
Values that are fixed for the life of the process are cached.

Environment Variables:
    DATABASE_URL: SQLAlchemy URL of the persistent channel store
        (default: sqlite:///notification_channels.db)
    DATABASE_ECHO: "true" to echo SQL statements
    MANAGED_CHANNEL_PREFIX: Id prefix of channels issued by the remote service (default: "OS_")
    DEVICE_LANGUAGE: Language used to pick localized channel text (default: "en")
    CHANNEL_DEFAULTS_FILE: Optional YAML file overriding channel default values
    SOUNDS_DIR: Optional directory holding named notification sounds
    LOG_LEVEL: Logging level (default: INFO)
    LOG_FORMAT: "json" or "console" (default: json)

Usage:
    from notification_channels.config import get_database_url, get_managed_channel_prefix

    prefix = get_managed_channel_prefix()  # "OS_" unless overridden
"""

import os
from functools import lru_cache
from pathlib import Path

import structlog

from notification_channels.constants import DEFAULT_MANAGED_CHANNEL_PREFIX

log = structlog.get_logger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///notification_channels.db"

# Legacy ISO 639 codes some platforms still report
LEGACY_LANGUAGE_CODES: dict[str, str] = {
    "iw": "he",
    "in": "id",
    "ji": "yi",
}


@lru_cache
def get_database_url() -> str:
    """Get database URL from environment.

    Environment Variable:
        DATABASE_URL: SQLAlchemy database URL

    Returns:
        Database URL, falling back to a SQLite file in the working directory.
    """
    return os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL


def get_database_echo() -> bool:
    """Return True when DATABASE_ECHO is set to "true" (any case)."""
    return os.getenv("DATABASE_ECHO", "").lower() == "true"


def get_managed_channel_prefix() -> str:
    """Get the id prefix that marks channels as managed by this system.

    Only channels whose id starts with this prefix are eligible for deletion
    when they disappear from a channel list. An empty string makes every
    unlisted channel (except the fallback) eligible.

    Environment Variable:
        MANAGED_CHANNEL_PREFIX: Prefix string (default: "OS_")

    Returns:
        Prefix string, possibly empty.
    """
    return os.getenv("MANAGED_CHANNEL_PREFIX", DEFAULT_MANAGED_CHANNEL_PREFIX)


def normalize_language(raw: str) -> str:
    """Normalize a locale string to the language key used in channel payloads.

    Args:
        raw: Locale such as "en", "en_US", "iw", "zh_TW" or "zh-CN".

    Returns:
        Lowercase language code. Legacy codes are mapped to their current
        form, and Chinese keeps its region ("zh-TW") since the remote
        service localizes per script.

    Example:
        >>> normalize_language("pt_BR")
        'pt'
        >>> normalize_language("zh_tw")
        'zh-TW'
    """
    parts = raw.strip().replace("-", "_").split("_")
    language = parts[0].lower()
    language = LEGACY_LANGUAGE_CODES.get(language, language)
    if language == "zh" and len(parts) > 1 and parts[1]:
        return f"zh-{parts[1].upper()}"
    return language


def get_device_language() -> str:
    """Get the device language used for localized channel names.

    Environment Variable:
        DEVICE_LANGUAGE: Locale string (default: "en")

    Returns:
        Normalized language key (see normalize_language).
    """
    raw = os.getenv("DEVICE_LANGUAGE", "en")
    if not raw.strip():
        return "en"
    return normalize_language(raw)


def get_channel_defaults_file() -> Path | None:
    """Get path of the optional YAML file overriding channel defaults.

    Environment Variable:
        CHANNEL_DEFAULTS_FILE: Path to a YAML mapping of ChannelDefaults fields

    Returns:
        Path, or None when not configured.
    """
    value = os.getenv("CHANNEL_DEFAULTS_FILE")
    return Path(value) if value else None


def get_sounds_dir() -> Path | None:
    """Get directory searched for named notification sounds.

    Environment Variable:
        SOUNDS_DIR: Directory path

    Returns:
        Path, or None when not configured (named sounds then resolve to the
        default notification sound).
    """
    value = os.getenv("SOUNDS_DIR")
    return Path(value) if value else None


def get_log_level() -> str:
    """Get logging level name from environment.

    Environment Variable:
        LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL (default: INFO)

    Returns:
        Uppercase level name. Unknown values fall back to INFO.
    """
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        log.warning("invalid_log_level", value=level, using_default="INFO")
        return "INFO"
    return level


def get_log_format() -> str:
    """Get log renderer ("json" or "console") from LOG_FORMAT."""
    value = os.getenv("LOG_FORMAT", "json").lower()
    return "console" if value == "console" else "json"
