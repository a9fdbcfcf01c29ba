"""Debug cache dataclasses and helpers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class DebugEntry:
    timestamp: float
    message: str
    details: str | None = None
    error_type: str | None = None


class DebugRecorder:
    """Write failed lookups into the bot state's debug cache."""

    def __init__(self, state) -> None:
        self._state = state

    def record_exception(self, command: str, message: str, exc: Exception) -> None:
        self._state.add_debug(command, message, str(exc), type(exc).__name__)
