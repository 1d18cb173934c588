"""Multi-role node consolidation.

One real-world person can arrive several times: once per role from the
same adapter ("Bo" as producer, then "Bo" as songwriter), or from several
contexts.  :class:`NodeConsolidator` folds every mention into exactly one
:class:`NetworkNode` keyed by :func:`~src.utils.text_normalizer.identity_key`.

Merge rules for an existing node:

- a role is appended only if not already held (order = first seen);
- top collaborations are unioned, first-seen order, no duplicates.

The returned map is a fresh value owned by the caller for one build.
"""

from __future__ import annotations

from src.models.network import (
    CollaboratorCandidate,
    NetworkLink,
    NetworkNode,
    NodeWeight,
    Role,
)
from src.utils.logging import get_logger
from src.utils.text_normalizer import identity_key

logger = get_logger(__name__)


def merge_unique(existing: list, additions: list) -> list:
    """Return *existing* followed by the new items of *additions*, in order."""
    merged = list(existing)
    for item in additions:
        if item not in merged:
            merged.append(item)
    return merged


class NodeConsolidator:
    """Folds collaborator candidates into one node per distinct name."""

    def root_node(self, root_name: str, root_roles: list[Role] | None = None) -> NetworkNode:
        key = identity_key(root_name)
        return NetworkNode(
            id=key,
            name=key,
            roles=merge_unique([], root_roles or [Role.ARTIST]),
            weight=NodeWeight.PRIMARY,
        )

    def consolidate(
        self,
        root_name: str,
        candidates: list[CollaboratorCandidate],
        root_roles: list[Role] | None = None,
    ) -> dict[str, NetworkNode]:
        """Build the ring-1 node map for *root_name*.

        The root is always present under its own key.  Candidates naming
        the root itself are ignored.
        """
        root = self.root_node(root_name, root_roles)
        nodes: dict[str, NetworkNode] = {root.id: root}

        for candidate in candidates:
            key = identity_key(candidate.name)
            if not key or key == root.id:
                continue
            top = [identity_key(t) for t in candidate.top_collaborator_names]
            top = [t for t in top if t and t != key]

            current = nodes.get(key)
            if current is None:
                nodes[key] = NetworkNode(
                    id=key,
                    name=key,
                    roles=[candidate.role],
                    weight=NodeWeight.SECONDARY,
                    top_collaborations=merge_unique([], top),
                )
                continue

            roles = merge_unique(current.roles, [candidate.role])
            top_merged = merge_unique(current.top_collaborations, top)
            if roles != current.roles or top_merged != current.top_collaborations:
                nodes[key] = current.model_copy(
                    update={"roles": roles, "top_collaborations": top_merged}
                )

        logger.debug(
            "nodes_consolidated",
            root=root.id,
            candidates=len(candidates),
            nodes=len(nodes),
        )
        return nodes

    def root_links(self, root_id: str, nodes: dict[str, NetworkNode]) -> list[NetworkLink]:
        """One root -> collaborator link per ring-1 node, in map order."""
        return [
            NetworkLink(source=root_id, target=node_id)
            for node_id in nodes
            if node_id != root_id
        ]
