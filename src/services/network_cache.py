"""Persisted network documents, one per canonical artist record.

The cache is a thin policy layer over :class:`IIdentityStore`:

- only complete :class:`NetworkResult` values are written, whole;
- every write replaces the previous document (last writer wins);
- invalidation is explicit (:meth:`NetworkCache.invalidate`), never by age;
- a configured set of known-ambiguous names always bypasses the cache.

Artists known only by name (no canonical id) have nowhere to store a
document, so they are neither read nor written.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import ValidationError

from src.interfaces.identity_store import IIdentityStore
from src.models.network import ArtistIdentity, NetworkResult
from src.utils.logging import get_logger
from src.utils.text_normalizer import casefold_key

logger = get_logger(__name__)


class NetworkCache:
    """Reads and writes finished networks on the artist's identity record."""

    def __init__(
        self,
        identity_store: IIdentityStore,
        force_regenerate: list[str] | None = None,
    ) -> None:
        self._store = identity_store
        self._forced = {casefold_key(n) for n in force_regenerate or [] if n.strip()}

    def is_forced(self, identity: ArtistIdentity) -> bool:
        """True if *identity* must always be regenerated."""
        return casefold_key(identity.name) in self._forced

    async def read(self, identity: ArtistIdentity) -> NetworkResult | None:
        if not identity.canonical_id:
            return None
        document = await self._store.read_network(identity.canonical_id)
        if not document:
            logger.debug("network_cache_miss", artist=identity.name)
            return None
        try:
            result = NetworkResult.model_validate(
                {k: v for k, v in document.items() if k != "cached_at"}
            )
        except ValidationError as exc:
            logger.warning(
                "network_cache_entry_invalid",
                artist=identity.name,
                canonical_id=identity.canonical_id,
                error=str(exc),
            )
            return None
        logger.info(
            "network_cache_hit",
            artist=identity.name,
            nodes=len(result.nodes),
            links=len(result.links),
        )
        return result.model_copy(update={"cached": True})

    async def write(self, identity: ArtistIdentity, result: NetworkResult) -> bool:
        """Persist *result*.  Returns ``False`` if there was nowhere to write.

        Raises
        ------
        src.utils.errors.CacheWriteFailedError
            Propagated from the identity store.
        """
        if not identity.canonical_id:
            logger.debug("network_cache_write_skipped", artist=identity.name, reason="no_canonical_id")
            return False
        document = result.model_dump(mode="json", exclude={"cached"})
        document["cached_at"] = datetime.now(timezone.utc).isoformat()
        written = await self._store.write_network(identity.canonical_id, document)
        logger.info("network_cache_written", artist=identity.name, written=written)
        return written

    async def invalidate(self, canonical_id: str) -> bool:
        cleared = await self._store.clear_network(canonical_id)
        logger.info("network_cache_invalidated", canonical_id=canonical_id, cleared=cleared)
        return cleared
