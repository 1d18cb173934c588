"""Best-effort per-node metadata: image and canonical identity.

Each node gets two independent lookups, an image search and an identity
store lookup by name.  Nodes are processed concurrently under a bounded
semaphore.  Any single failure leaves that field ``None`` and is logged;
enrichment never raises.
"""

from __future__ import annotations

from src.interfaces.identity_store import IIdentityStore
from src.interfaces.image_provider import ArtistImage, IImageProvider
from src.models.network import NetworkNode
from src.utils.concurrency import throttled_gather
from src.utils.logging import get_logger

logger = get_logger(__name__)


class MetadataEnricher:
    """Attaches ``image_url``, ``spotify_id`` and ``canonical_id`` to nodes.

    Either collaborator may be ``None``, in which case that half of the
    enrichment is skipped.
    """

    def __init__(
        self,
        image_provider: IImageProvider | None = None,
        identity_store: IIdentityStore | None = None,
        concurrency: int = 5,
    ) -> None:
        self._images = image_provider
        self._identities = identity_store
        self._concurrency = concurrency

    async def enrich(self, nodes: list[NetworkNode]) -> list[NetworkNode]:
        """Return enriched copies of *nodes*, in the same order."""
        if not nodes:
            return []
        results = await throttled_gather(
            [self._enrich_one(node) for node in nodes],
            limit=self._concurrency,
        )
        enriched: list[NetworkNode] = []
        for node, result in zip(nodes, results):
            if isinstance(result, BaseException):
                logger.warning("metadata_enrichment_failed", node=node.id, error=str(result))
                enriched.append(node)
            else:
                enriched.append(result)

        with_images = sum(1 for n in enriched if n.image_url)
        logger.info("metadata_enriched", nodes=len(enriched), with_images=with_images)
        return enriched

    async def _enrich_one(self, node: NetworkNode) -> NetworkNode:
        update: dict[str, object] = {}

        image = await self._find_image(node.name)
        if image is not None:
            if image.image_url and not node.image_url:
                update["image_url"] = image.image_url
            if image.provider_id and not node.spotify_id:
                update["spotify_id"] = image.provider_id

        if not node.canonical_id:
            canonical_id = await self._find_canonical_id(node.name)
            if canonical_id:
                update["canonical_id"] = canonical_id

        return node.model_copy(update=update) if update else node

    async def _find_image(self, name: str) -> ArtistImage | None:
        if self._images is None or not self._images.is_available():
            return None
        try:
            return await self._images.find_artist_image(name)
        except Exception as exc:
            logger.warning(
                "metadata_lookup_failed",
                lookup="image",
                provider=self._images.get_provider_name(),
                node=name,
                error=str(exc),
            )
            return None

    async def _find_canonical_id(self, name: str) -> str | None:
        if self._identities is None:
            return None
        try:
            identity = await self._identities.get_by_name(name)
        except Exception as exc:
            logger.warning("metadata_lookup_failed", lookup="identity", node=name, error=str(exc))
            return None
        return identity.canonical_id if identity else None
