"""Compatibility exports for BotState and debug helpers."""

from __future__ import annotations

from .models.bot_state import BOT_STATE_KEY, BotState
from .models.debug import DebugRecorder

__all__ = ["BOT_STATE_KEY", "BotState", "DebugRecorder"]
