"""Orchestrator for collaboration-network generation.

Composes the identity store, source chain, fake filter, consolidator,
branch expander, metadata enricher and network cache into one public
operation, :meth:`NetworkBuilder.build_network`.

STATE MACHINE:

    RESOLVE_IDENTITY ─► CHECK_CACHE ─┬─► CACHE_HIT ─────────────────────► DONE
                                     │
                                     └─► RUN_SOURCE_CHAIN ─► FILTER_FAKES ─► CONSOLIDATE
                                           ─► EXPAND_BRANCHES ─► ENRICH ─► WRITE_CACHE ─► DONE

Decision points:
    - An unknown artist stops the build in RESOLVE_IDENTITY with
      :class:`NotFoundError`.  Identities are never invented.
    - A failing identity store is not an unknown artist: the lookup error
      is raised as :class:`PipelineError`.  A name-only identity handed to
      :meth:`NetworkBuilder.build_network` gets its canonical id attached
      from the store when one exists.
    - A cached single-node network is a *prompt*, not an answer: without
      ``allow_hallucinations`` it is returned as
      :class:`NoCollaboratorsResult`; with it, the build regenerates.
    - An empty source chain ends in :class:`NoCollaboratorsResult`.  When
      the caller opted into hallucinated networks, the generative adapter's
      creative pass is tried first.
    - Adapter, enrichment and cache-write failures are logged and absorbed.
      Only an unexpected exception from the build itself degrades to a
      root-only network, which is not cached.

Each build owns its node map and link list; nothing is shared between
requests.  Two concurrent builds for one artist both run, and the last
cache write wins.
"""

from __future__ import annotations

from enum import Enum
from typing import Awaitable, Callable, Union

import structlog

from src.interfaces.identity_store import IIdentityStore
from src.models.network import (
    ArtistIdentity,
    BuildOptions,
    CollaboratorCandidate,
    NetworkNode,
    NetworkResult,
    NoCollaboratorsResult,
    Role,
)
from src.providers.sources.generative_source import GenerativeCollaboratorSource
from src.services.branch_expander import BranchExpander
from src.services.fake_entry_filter import filter_candidates
from src.services.metadata_enricher import MetadataEnricher
from src.services.network_cache import NetworkCache
from src.services.node_consolidator import NodeConsolidator
from src.services.role_detection import RoleDetectionService
from src.services.source_chain import SourceChain
from src.utils.errors import CollabNetworkError, NotFoundError, PipelineError
from src.utils.logging import get_logger

NetworkOutcome = Union[NetworkResult, NoCollaboratorsResult]


class BuildPhase(str, Enum):  # noqa: UP042 — StrEnum requires Python 3.11+
    """Named states of one build, used in log events."""

    RESOLVE_IDENTITY = "RESOLVE_IDENTITY"
    CHECK_CACHE = "CHECK_CACHE"
    CACHE_HIT = "CACHE_HIT"
    RUN_SOURCE_CHAIN = "RUN_SOURCE_CHAIN"
    FILTER_FAKES = "FILTER_FAKES"
    CONSOLIDATE = "CONSOLIDATE"
    EXPAND_BRANCHES = "EXPAND_BRANCHES"
    ENRICH = "ENRICH"
    WRITE_CACHE = "WRITE_CACHE"
    DONE = "DONE"


class NetworkBuilder:
    """Builds (or returns cached) collaboration networks.

    All collaborators are injected.  ``role_detector`` and
    ``creative_source`` are optional: without the first the root is an
    ``artist``; without the second, hallucinated filling is unavailable
    and opting in has no effect.
    """

    def __init__(
        self,
        identity_store: IIdentityStore,
        source_chain: SourceChain,
        consolidator: NodeConsolidator,
        branch_expander: BranchExpander,
        enricher: MetadataEnricher,
        cache: NetworkCache,
        role_detector: RoleDetectionService | None = None,
        creative_source: GenerativeCollaboratorSource | None = None,
    ) -> None:
        self._identity_store = identity_store
        self._source_chain = source_chain
        self._consolidator = consolidator
        self._branch_expander = branch_expander
        self._enricher = enricher
        self._cache = cache
        self._role_detector = role_detector
        self._creative_source = creative_source
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def build_for_name(
        self, artist_name: str, options: BuildOptions | None = None
    ) -> NetworkOutcome:
        """Resolve *artist_name* in the identity store, then build."""
        self._enter(BuildPhase.RESOLVE_IDENTITY, artist_name)
        identity = await self._lookup(self._identity_store.get_by_name, artist_name)
        if identity is None:
            raise NotFoundError(message=f"Artist '{artist_name}' not found")
        return await self.build_network(identity, options)

    async def build_for_id(
        self, canonical_id: str, options: BuildOptions | None = None
    ) -> NetworkOutcome:
        """Resolve a canonical id in the identity store, then build."""
        self._enter(BuildPhase.RESOLVE_IDENTITY, canonical_id)
        identity = await self._lookup(self._identity_store.get_by_id, canonical_id)
        if identity is None:
            raise NotFoundError(message=f"Artist id '{canonical_id}' not found")
        return await self.build_network(identity, options)

    async def build_network(
        self, identity: ArtistIdentity, options: BuildOptions | None = None
    ) -> NetworkOutcome:
        options = options or BuildOptions()
        identity = await self._attach_canonical_id(identity)

        self._enter(BuildPhase.CHECK_CACHE, identity.name)
        cached = await self._read_cache(identity, options)
        if cached is not None:
            if not cached.is_single_node():
                self._enter(BuildPhase.CACHE_HIT, identity.name)
                return cached
            if not options.allow_hallucinations:
                self._enter(BuildPhase.CACHE_HIT, identity.name, single_node=True)
                return NoCollaboratorsResult(
                    artist_name=identity.name,
                    artist_canonical_id=identity.canonical_id,
                    single_node_network=cached,
                )
            self._logger.info("cached_single_node_regenerating", artist=identity.name)

        try:
            return await self._generate(identity, options)
        except Exception as exc:
            self._logger.error(
                "network_build_failed",
                artist=identity.name,
                error=str(exc),
                error_type=type(exc).__name__,
                exc_info=True,
            )
            root = self._root_node(identity, [Role.ARTIST])
            return NetworkResult(nodes=[root], links=[])

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    async def _generate(self, identity: ArtistIdentity, options: BuildOptions) -> NetworkOutcome:
        self._enter(BuildPhase.RUN_SOURCE_CHAIN, identity.name)
        outcome = await self._source_chain.run(identity.name)
        candidates: list[CollaboratorCandidate] = list(outcome.candidates)
        source = outcome.source
        hallucinated = False

        if outcome.is_empty and options.allow_hallucinations:
            candidates = await self._creative_candidates(identity.name)
            if candidates:
                source = self._creative_source.get_provider_name()
                hallucinated = True

        self._enter(BuildPhase.FILTER_FAKES, identity.name, candidates=len(candidates))
        candidates = filter_candidates(candidates)

        root_roles = await self._root_roles(identity.name)

        if not candidates:
            single = await self._single_node_network(identity, root_roles)
            await self._write_cache(identity, single)
            self._enter(BuildPhase.DONE, identity.name, outcome="no_collaborators")
            return NoCollaboratorsResult(
                artist_name=identity.name,
                artist_canonical_id=identity.canonical_id,
                single_node_network=single,
            )

        self._enter(BuildPhase.CONSOLIDATE, identity.name, candidates=len(candidates))
        nodes = self._consolidator.consolidate(identity.name, candidates, root_roles)
        root = self._root_node(identity, root_roles)
        nodes[root.id] = root
        links = self._consolidator.root_links(root.id, nodes)

        self._enter(BuildPhase.EXPAND_BRANCHES, identity.name, first_ring=len(nodes) - 1)
        await self._branch_expander.fill_missing_top_collaborations(nodes, root.id)
        self._branch_expander.expand(nodes, links, root.id)

        self._enter(BuildPhase.ENRICH, identity.name, nodes=len(nodes))
        enriched = await self._enricher.enrich(list(nodes.values()))

        result = NetworkResult(
            nodes=enriched,
            links=links,
            source=source,
            hallucinated=hallucinated,
        )
        await self._write_cache(identity, result)
        self._enter(
            BuildPhase.DONE,
            identity.name,
            nodes=result.node_names(),
            links=len(result.links),
            source=source,
        )
        return result

    async def _creative_candidates(self, artist_name: str) -> list[CollaboratorCandidate]:
        creative = self._creative_source
        if creative is None or not creative.is_available():
            self._logger.info("creative_pass_unavailable", artist=artist_name)
            return []
        try:
            return await creative.fetch_creative_collaborators(artist_name)
        except CollabNetworkError as exc:
            self._logger.warning("creative_pass_failed", artist=artist_name, error=str(exc))
            return []

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _enter(self, phase: BuildPhase, artist: str, **context: object) -> None:
        self._logger.debug("network_build_phase", phase=phase.value, artist=artist, **context)

    async def _lookup(
        self, find: Callable[[str], Awaitable[ArtistIdentity | None]], key: str
    ) -> ArtistIdentity | None:
        """Run one identity-store lookup; a broken store is not a missing artist."""
        try:
            return await find(key)
        except Exception as exc:
            self._logger.error("identity_lookup_failed", key=key, error=str(exc), exc_info=True)
            raise PipelineError(message=f"Identity lookup failed for '{key}'") from exc

    async def _attach_canonical_id(self, identity: ArtistIdentity) -> ArtistIdentity:
        """Give a name-only identity its store id so the network cache applies."""
        if identity.canonical_id:
            return identity
        try:
            known = await self._identity_store.get_by_name(identity.name)
        except Exception as exc:
            self._logger.warning("canonical_id_lookup_failed", artist=identity.name, error=str(exc))
            return identity
        if known is None or not known.canonical_id:
            return identity
        return identity.with_canonical_id(known.canonical_id)

    async def _read_cache(
        self, identity: ArtistIdentity, options: BuildOptions
    ) -> NetworkResult | None:
        if options.force_refresh:
            self._logger.info("network_cache_bypassed", artist=identity.name, reason="refresh")
            return None
        if self._cache.is_forced(identity):
            self._logger.info("network_cache_bypassed", artist=identity.name, reason="forced")
            return None
        try:
            return await self._cache.read(identity)
        except Exception as exc:
            self._logger.warning("network_cache_read_failed", artist=identity.name, error=str(exc))
            return None

    async def _write_cache(self, identity: ArtistIdentity, result: NetworkResult) -> None:
        self._enter(BuildPhase.WRITE_CACHE, identity.name)
        try:
            await self._cache.write(identity, result)
        except CollabNetworkError as exc:
            self._logger.warning("network_cache_write_failed", artist=identity.name, error=str(exc))

    async def _root_roles(self, artist_name: str) -> list[Role]:
        if self._role_detector is None:
            return [Role.ARTIST]
        return await self._role_detector.detect_roles(artist_name)

    def _root_node(self, identity: ArtistIdentity, roles: list[Role]) -> NetworkNode:
        root = self._consolidator.root_node(identity.name, roles)
        if identity.canonical_id:
            root = root.model_copy(update={"canonical_id": identity.canonical_id})
        return root

    async def _single_node_network(
        self, identity: ArtistIdentity, roles: list[Role]
    ) -> NetworkResult:
        nodes = await self._enricher.enrich([self._root_node(identity, roles)])
        return NetworkResult(nodes=nodes, links=[])
