"""
Catalog cache — a key/value store with per-entry expiry.

The provider only depends on the `CatalogCache` protocol; the in-memory
implementation is the default and takes an injectable clock for tests.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class CatalogCache(Protocol):
    def get(self, key: str) -> Optional[Any]: ...

    def put(self, key: str, value: Any, ttl_seconds: float) -> None: ...


class InMemoryTTLCache:
    """Process-local TTL cache. Last writer wins; no locking."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            logger.debug(f"[CACHE] Entry expired: {key}")
            self._entries.pop(key, None)
            return None
        return value

    def put(self, key: str, value: Any, ttl_seconds: float) -> None:
        self._entries[key] = (self._clock() + ttl_seconds, value)

    def clear(self) -> None:
        self._entries.clear()
