"""Central configuration for servereye_helper."""

from __future__ import annotations

import logging
import os
from typing import Set

from .models.settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.server-eye.de/2"


def _split_ints(s: str) -> Set[int]:
    """Parse comma-separated string into a set of integers.

    Args:
        s: Comma-separated string of integers (e.g., "123,456,789")

    Returns:
        Set of parsed integers. Invalid entries are silently skipped.

    Example:
        >>> _split_ints("123,456,invalid,789")
        {123, 456, 789}
    """
    out = set()
    for part in (s or "").split(","):
        p = part.strip()
        if p.isdigit():
            out.add(int(p))
    return out


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, str(default)) or default)
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    raw = (os.environ.get(name) or "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


def _read_settings() -> Settings:
    """Read all configuration from environment variables.

    Returns:
        Settings object with all configuration values.

    Note:
        Invalid numeric values fall back to sensible defaults.
    """
    api_key = os.environ.get("SE_API_KEY") or None
    base_url = (os.environ.get("SE_BASE_URL") or DEFAULT_BASE_URL).rstrip("/")
    timeout = _float_env("SE_TIMEOUT_S", 12.0)
    max_retries = max(0, _int_env("SE_MAX_RETRIES", 2))
    retry_delay = _float_env("SE_RETRY_DELAY_S", 0.5)

    # Telegram
    token = os.environ.get("BOT_TOKEN") or None
    allowed = _split_ints(os.environ.get("ALLOWED_CHAT_IDS", ""))
    rate_limit = _float_env("RATE_LIMIT_S", 1.0)

    return Settings(
        SE_API_KEY=api_key,
        SE_BASE_URL=base_url,
        SE_TIMEOUT_S=timeout,
        SE_MAX_RETRIES=max_retries,
        SE_RETRY_DELAY_S=retry_delay,
        BOT_TOKEN=token,
        ALLOWED_CHAT_IDS=allowed,
        RATE_LIMIT_S=rate_limit,
    )


settings = _read_settings()


def validate_settings() -> None:
    """Validate critical configuration and log warnings for issues."""
    if settings.SE_API_KEY is None:
        logger.warning(
            "SE_API_KEY is not set; callers must connect() or pass a credential."
        )
    if settings.BOT_TOKEN is None:
        logger.debug("BOT_TOKEN is not set; the Telegram bot cannot start.")
    if settings.BOT_TOKEN and not settings.ALLOWED_CHAT_IDS:
        logger.warning(
            "ALLOWED_CHAT_IDS is empty; guarded commands will be unauthorized."
        )


# Exported constants
SE_API_KEY: str | None = settings.SE_API_KEY
SE_BASE_URL: str = settings.SE_BASE_URL
SE_TIMEOUT_S: float = settings.SE_TIMEOUT_S
SE_MAX_RETRIES: int = settings.SE_MAX_RETRIES
SE_RETRY_DELAY_S: float = settings.SE_RETRY_DELAY_S
TOKEN: str | None = settings.BOT_TOKEN
ALLOWED: set[int] = settings.ALLOWED_CHAT_IDS
RATE_LIMIT_S: float = settings.RATE_LIMIT_S

validate_settings()
