"""Configuration dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Set


@dataclass
class Settings:
    """Configuration settings for servereye_helper."""

    SE_API_KEY: str | None
    SE_BASE_URL: str
    SE_TIMEOUT_S: float
    SE_MAX_RETRIES: int
    SE_RETRY_DELAY_S: float
    BOT_TOKEN: str | None
    ALLOWED_CHAT_IDS: Set[int]
    RATE_LIMIT_S: float
