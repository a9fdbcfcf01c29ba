"""Cache-related dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class EntityKind(str, Enum):
    AGENT = "agent"
    CONTAINER = "container"
    CUSTOMER = "customer"
    # Per-customer list of dispatch (defer) times, keyed by customer id.
    DISPATCH_TIMES = "dispatch_times"


@dataclass
class CacheEntry:
    """Last fetched representation of one entity."""

    kind: EntityKind
    entity_id: str
    value: Any
    fetched_at: float


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    entries: int = 0
