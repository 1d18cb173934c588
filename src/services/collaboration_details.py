"""On-demand detail lookup for one network edge.

Independent of network generation but built from the same adapters, in
the same fallback spirit: each source's ``fetch_collaboration_details``
is tried in order and the first non-empty answer wins.  When nothing is
known, an empty ``unknown`` record is returned rather than an error.
"""

from __future__ import annotations

from src.interfaces.cache_provider import ICacheProvider
from src.interfaces.collaborator_source import ICollaboratorSource
from src.models.network import CollaborationDetails
from src.utils.logging import get_logger
from src.utils.text_normalizer import clean_name

logger = get_logger(__name__)


class CollaborationDetailsService:
    """Tries each source in order; caches results per ordered name pair."""

    def __init__(
        self,
        sources: list[ICollaboratorSource],
        cache: ICacheProvider | None = None,
        ttl: int = 3600,
    ) -> None:
        self._sources = list(sources)
        self._cache = cache
        self._ttl = ttl

    async def get_details(self, artist1: str, artist2: str) -> CollaborationDetails:
        artist1, artist2 = clean_name(artist1), clean_name(artist2)
        cache_key = f"details:{artist1}|{artist2}"
        if self._cache is not None:
            cached = await self._cache.get(cache_key)
            if cached is not None:
                return CollaborationDetails.model_validate(cached)

        details = await self._lookup(artist1, artist2)
        if self._cache is not None:
            await self._cache.set(cache_key, details.model_dump(mode="json"), ttl=self._ttl)
        return details

    async def _lookup(self, artist1: str, artist2: str) -> CollaborationDetails:
        for source in self._sources:
            name = source.get_provider_name()
            if not source.is_available():
                continue
            try:
                found = await source.fetch_collaboration_details(artist1, artist2)
            except Exception as exc:
                logger.warning(
                    "collaboration_details_source_failed",
                    adapter=name,
                    pair=f"{artist1}|{artist2}",
                    error=str(exc),
                )
                continue
            if found is not None and not found.is_empty():
                logger.info("collaboration_details_found", adapter=name, artist1=artist1, artist2=artist2)
                return found

        logger.info("collaboration_details_unknown", artist1=artist1, artist2=artist2)
        return CollaborationDetails(artist1=artist1, artist2=artist2)
