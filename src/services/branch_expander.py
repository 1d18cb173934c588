"""Second-ring expansion of a consolidated network.

For every first-ring node, up to ``branch_cap`` names from its top
collaborations become ring-2 nodes linked to it.  Expansion never:

- links back to the root,
- creates a second link for a pair that is already connected,
- turns a placeholder name into a node,
- recurses past ring 2.

A branch name that is already a node is reused; it gains the ``artist``
role if it lacked it.  New branch nodes are ``BRANCH`` weight artists.

First-ring nodes that arrived without top collaborations can be filled
first with :meth:`BranchExpander.fill_missing_top_collaborations`, which
spends one lookup per node, concurrently, with failures isolated per node.
"""

from __future__ import annotations

from typing import Awaitable, Callable

from src.models.network import NetworkLink, NetworkNode, NodeWeight, Role
from src.services.fake_entry_filter import is_fake
from src.services.node_consolidator import merge_unique
from src.utils.concurrency import throttled_gather
from src.utils.logging import get_logger
from src.utils.text_normalizer import identity_key

logger = get_logger(__name__)

TopCollaboratorLookup = Callable[[str], Awaitable[list[str]]]

_CROSS_LINK_SCOPE = 6


class BranchExpander:
    """Adds the second ring to a node map and its link list in place.

    Parameters
    ----------
    branch_cap:
        Maximum top-collaboration names taken from each first-ring node.
    cross_links:
        Also link first-ring nodes that list each other.
    top_collaborator_lookup:
        Optional ``async (name) -> [names]`` used to fill empty top
        collaborations before expansion.
    concurrency:
        Maximum lookups in flight while filling.
    """

    def __init__(
        self,
        branch_cap: int = 3,
        cross_links: bool = False,
        top_collaborator_lookup: TopCollaboratorLookup | None = None,
        concurrency: int = 5,
    ) -> None:
        self._branch_cap = branch_cap
        self._cross_links = cross_links
        self._lookup = top_collaborator_lookup
        self._concurrency = concurrency

    async def fill_missing_top_collaborations(
        self, nodes: dict[str, NetworkNode], root_id: str
    ) -> None:
        if self._lookup is None:
            return
        targets = [
            node
            for node in nodes.values()
            if node.weight == NodeWeight.SECONDARY and not node.top_collaborations
        ]
        if not targets:
            return

        results = await throttled_gather(
            [self._lookup(node.name) for node in targets],
            limit=self._concurrency,
        )
        filled = 0
        for node, result in zip(targets, results):
            if isinstance(result, BaseException):
                logger.warning(
                    "top_collaborator_lookup_failed",
                    node=node.id,
                    error=str(result),
                )
                continue
            names = [identity_key(n) for n in result or []]
            names = [n for n in names if n and n not in (node.id, root_id)]
            if names:
                nodes[node.id] = node.model_copy(
                    update={"top_collaborations": merge_unique([], names)}
                )
                filled += 1
        logger.debug("top_collaborations_filled", requested=len(targets), filled=filled)

    def expand(
        self,
        nodes: dict[str, NetworkNode],
        links: list[NetworkLink],
        root_id: str,
    ) -> None:
        """Mutate *nodes* and *links* to add ring 2."""
        connected = {link.pair_key() for link in links}
        first_ring = [n for n in nodes.values() if n.weight == NodeWeight.SECONDARY]
        added_nodes = 0

        for parent in first_ring:
            for raw_name in parent.top_collaborations[: self._branch_cap]:
                key = identity_key(raw_name)
                if not key or key in (root_id, parent.id) or is_fake(key):
                    continue

                existing = nodes.get(key)
                if existing is None:
                    nodes[key] = NetworkNode(
                        id=key,
                        name=key,
                        roles=[Role.ARTIST],
                        weight=NodeWeight.BRANCH,
                    )
                    added_nodes += 1
                elif Role.ARTIST not in existing.roles:
                    nodes[key] = existing.model_copy(
                        update={"roles": [*existing.roles, Role.ARTIST]}
                    )

                pair = frozenset((parent.id, key))
                if pair not in connected:
                    connected.add(pair)
                    links.append(NetworkLink(source=parent.id, target=key))

        if self._cross_links:
            self._add_cross_links(first_ring, links, connected)

        logger.info(
            "branches_expanded",
            root=root_id,
            first_ring=len(first_ring),
            branch_nodes=added_nodes,
            links=len(links),
        )

    def _add_cross_links(
        self,
        first_ring: list[NetworkNode],
        links: list[NetworkLink],
        connected: set[frozenset[str]],
    ) -> None:
        scoped = first_ring[:_CROSS_LINK_SCOPE]
        for i, a in enumerate(scoped):
            for b in scoped[i + 1 :]:
                if b.id not in a.top_collaborations and a.id not in b.top_collaborations:
                    continue
                pair = frozenset((a.id, b.id))
                if pair not in connected:
                    connected.add(pair)
                    links.append(NetworkLink(source=a.id, target=b.id))
