"""Per-session cache of Server-Eye entities.

Resolving a sensor's parent chain (sensor, sensorhub, connector, customer)
touches the same sensorhubs and customers over and over. ``EntityCache``
memoizes those lookups by ``(kind, id)`` for the lifetime of one session.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING, Any, Callable

from .auth import Credential
from .errors import AuthError, ConfigError
from .models.cache import CacheEntry, CacheStats, EntityKind

if TYPE_CHECKING:
    from .api import ServerEyeClient

__all__ = ["EntityCache", "EntityKind"]

logger = logging.getLogger(__name__)


def _entity_kind(kind: EntityKind | str) -> EntityKind:
    try:
        return EntityKind(kind)
    except ValueError:
        raise ConfigError(f"unknown entity kind: {kind!r}") from None


def _entity_id(entity_id: str) -> str:
    return str(entity_id or "").strip()


class EntityCache:
    """Memoize entity lookups against one ``ServerEyeClient``.

    Failed lookups are never stored. The cache binds itself to the first
    credential whose lookup succeeds; using it with another credential raises ``AuthError``
    instead of handing out entities fetched under a different session.
    """

    def __init__(self, client: "ServerEyeClient") -> None:
        self._client = client
        self._entries: dict[tuple[EntityKind, str], CacheEntry] = {}
        self._lock = threading.Lock()
        self._owner: str | None = None
        self._hits = 0
        self._misses = 0

    def _fetcher(self, kind: EntityKind) -> Callable[[str, Credential], Any]:
        fetchers = {
            EntityKind.AGENT: self._client.fetch_agent,
            EntityKind.CONTAINER: self._client.fetch_container,
            EntityKind.CUSTOMER: self._client.fetch_customer,
            EntityKind.DISPATCH_TIMES: self._client.list_dispatch_times,
        }
        return fetchers[kind]

    def _check_owner(self, fingerprint: str) -> None:
        # Caller holds self._lock.
        if self._owner is not None and self._owner != fingerprint:
            raise AuthError(
                "entity cache belongs to another session; create a new cache"
            )

    def _store(
        self, kind: EntityKind, key_id: str, value: Any, auth: Credential, replace: bool
    ) -> None:
        """Store a value fetched with ``auth``; the first stored value binds the owner."""
        fingerprint = auth.fingerprint
        entry = CacheEntry(
            kind=kind, entity_id=key_id, value=value, fetched_at=time.time()
        )
        with self._lock:
            self._check_owner(fingerprint)
            self._owner = fingerprint
            if replace:
                self._entries[(kind, key_id)] = entry
            else:
                self._entries.setdefault((kind, key_id), entry)

    def get(self, kind: EntityKind | str, entity_id: str, auth: Credential) -> Any:
        """Return the cached entity, fetching it on the first lookup.

        The cache is bound to a credential only once a fetch made with it
        succeeds, so a rejected credential leaves the cache unbound.

        Raises:
            ConfigError: ``kind`` is unknown or ``entity_id`` is empty.
            NotFound, AuthError, PermissionDenied: propagated from the client.
        """
        kind = _entity_kind(kind)
        key_id = _entity_id(entity_id)
        if not key_id:
            raise ConfigError(f"{kind.value} id must not be empty")
        key = (kind, key_id)
        with self._lock:
            self._check_owner(auth.fingerprint)
            entry = self._entries.get(key)
            if entry is not None:
                self._hits += 1
                return entry.value
            self._misses += 1

        logger.debug("cache miss for %s %s", kind.value, key_id)
        value = self._fetcher(kind)(key_id, auth)
        self._store(kind, key_id, value, auth, replace=True)
        return value

    def prime(
        self, kind: EntityKind | str, entity_id: str, value: Any, auth: Credential
    ) -> None:
        """Store an entity that arrived through a list call."""
        kind = _entity_kind(kind)
        key_id = _entity_id(entity_id)
        if not key_id:
            return
        self._store(kind, key_id, value, auth, replace=False)

    def agent(self, agent_id: str, auth: Credential) -> dict[str, Any]:
        return self.get(EntityKind.AGENT, agent_id, auth)

    def container(self, container_id: str, auth: Credential) -> dict[str, Any]:
        return self.get(EntityKind.CONTAINER, container_id, auth)

    def customer(self, customer_id: str, auth: Credential) -> dict[str, Any]:
        return self.get(EntityKind.CUSTOMER, customer_id, auth)

    def dispatch_times(
        self, customer_id: str, auth: Credential
    ) -> list[dict[str, Any]]:
        return self.get(EntityKind.DISPATCH_TIMES, customer_id, auth)

    def contains(self, kind: EntityKind | str, entity_id: str) -> bool:
        key = (_entity_kind(kind), _entity_id(entity_id))
        with self._lock:
            return key in self._entries

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._owner = None
            self._hits = 0
            self._misses = 0

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits, misses=self._misses, entries=len(self._entries)
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
