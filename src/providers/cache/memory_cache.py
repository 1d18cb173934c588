"""In-memory cache provider using cachetools.TTLCache.

Suitable for a single-process deployment.  The ``TTLCache`` enforces the
default lifetime and the size bound; a shorter per-entry ``ttl`` is honoured
by storing an explicit expiry next to the value.
"""

from __future__ import annotations

import time
from typing import Any

import structlog
from cachetools import TTLCache

from src.interfaces.cache_provider import ICacheProvider

logger = structlog.get_logger(logger_name=__name__)


class MemoryCacheProvider(ICacheProvider):
    """In-memory TTL cache backed by ``cachetools.TTLCache``.

    Parameters
    ----------
    max_size:
        Maximum number of entries before the least-recently-used entry
        is evicted.
    ttl:
        Default (and maximum) time-to-live in seconds.
    """

    def __init__(self, max_size: int = 1000, ttl: int = 86400) -> None:
        self._default_ttl = ttl
        # value -> (expires_at, payload)
        self._cache: TTLCache[str, tuple[float, Any]] = TTLCache(maxsize=max_size, ttl=ttl)

    # ------------------------------------------------------------------
    # ICacheProvider implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Any | None:
        """Retrieve the cached value for *key*, or ``None`` if missing/expired."""
        entry = self._cache.get(key)
        if entry is None:
            logger.debug("cache_miss", key=key)
            return None
        expires_at, value = entry
        if time.monotonic() >= expires_at:
            self._cache.pop(key, None)
            logger.debug("cache_expired", key=key)
            return None
        logger.debug("cache_hit", key=key)
        return value

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store *value* under *key* for *ttl* seconds (capped at the default)."""
        lifetime = self._default_ttl if ttl is None else min(ttl, self._default_ttl)
        self._cache[key] = (time.monotonic() + lifetime, value)
        logger.debug("cache_set", key=key, ttl=lifetime)

    async def delete(self, key: str) -> None:
        """Remove *key* from the cache (no-op if absent)."""
        self._cache.pop(key, None)
        logger.debug("cache_delete", key=key)

    async def exists(self, key: str) -> bool:
        """Return ``True`` if *key* is present and not expired."""
        return await self.get(key) is not None
