"""Bot runtime state (Server-Eye session, entity cache, metrics, debug)."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from .. import config
from ..api import ServerEyeClient
from ..auth import Credential
from ..cache import EntityCache
from .debug import DebugEntry, DebugRecorder
from .metrics import CommandMetrics

logger = logging.getLogger(__name__)

_DEBUG_TTL_S = 60 * 60
_DEBUG_MAX_PER_CMD = 50


@dataclass
class BotState:
    """Runtime state for the bot.

    The client, credential and entity cache live here so that the cache is
    scoped to the bot's Server-Eye session rather than to the process.
    """

    client: ServerEyeClient | None = None
    credential: Credential | None = None
    cache: EntityCache | None = None

    command_metrics: dict[str, CommandMetrics] = field(default_factory=dict)
    debug_cache: dict[str, list[DebugEntry]] = field(default_factory=dict)

    _debug_recorder: DebugRecorder | None = field(default=None, init=False, repr=False)

    def servereye(self) -> tuple[ServerEyeClient, EntityCache, Credential | None]:
        """Return (client, cache, credential), creating them on first use.

        The credential comes from ``SE_API_KEY``; when it is unset the services
        fall back to a session established with ``auth.connect``.
        """
        if self.client is None:
            self.client = ServerEyeClient()
        if self.credential is None and config.SE_API_KEY:
            self.credential = Credential(api_key=config.SE_API_KEY)
        if self.cache is None:
            self.cache = EntityCache(self.client)
        return self.client, self.cache, self.credential

    def reset_cache(self) -> int:
        """Drop all cached entities. Returns how many were dropped."""
        if self.cache is None:
            return 0
        dropped = len(self.cache)
        self.cache.clear()
        logger.info("Entity cache cleared (%d entries)", dropped)
        return dropped

    def _prune_debug(self, command: str) -> None:
        entries = self.debug_cache.get(command, [])
        if not entries:
            return
        cutoff = time.time() - _DEBUG_TTL_S
        kept = [entry for entry in entries if entry.timestamp >= cutoff]
        if kept:
            self.debug_cache[command] = kept[-_DEBUG_MAX_PER_CMD:]
        else:
            self.debug_cache.pop(command, None)

    def add_debug(
        self,
        command: str,
        message: str,
        details: str | None = None,
        error_type: str | None = None,
    ) -> None:
        if not command:
            return
        self._prune_debug(command)
        entry = DebugEntry(
            timestamp=time.time(),
            message=message,
            details=details,
            error_type=error_type,
        )
        self.debug_cache.setdefault(command, []).append(entry)
        self.debug_cache[command] = self.debug_cache[command][-_DEBUG_MAX_PER_CMD:]

    def get_debug(self, command: str | None = None) -> dict[str, list[DebugEntry]]:
        if command:
            self._prune_debug(command)
            entries = list(self.debug_cache.get(command, []))
            return {command: entries} if entries else {}
        for key in list(self.debug_cache.keys()):
            self._prune_debug(key)
        return {
            key: list(entries) for key, entries in self.debug_cache.items() if entries
        }

    def debug_recorder(self) -> DebugRecorder:
        if self._debug_recorder is None:
            self._debug_recorder = DebugRecorder(self)
        return self._debug_recorder

    def metrics_for(self, name: str) -> CommandMetrics:
        return self.command_metrics.setdefault(name, CommandMetrics())

    def record_command(
        self, name: str, latency_s: float, ok: bool, error_msg: str | None
    ) -> None:
        self.metrics_for(name).observe(latency_s, ok, error_msg)

    def record_rate_limited(self, name: str) -> None:
        metrics = self.metrics_for(name)
        metrics.rate_limited += 1


BOT_STATE_KEY = "state"
