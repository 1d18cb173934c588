"""Cache providers.

In-memory TTL-based cache for short-lived lookups: root-role detection
results and per-pair collaboration details.  Persisted networks do not
live here; they sit on the artist record in the identity store.

MemoryCacheProvider is not shared across processes.  For multi-worker
deployments, swap in a Redis adapter implementing ICacheProvider without
changing any business logic.
"""

from src.providers.cache.memory_cache import MemoryCacheProvider

__all__ = ["MemoryCacheProvider"]
