"""Conversion of domain results into API response bodies.

Sizes and colours come from ``config/config.yaml`` (``node_sizes`` and
``role_colors``); profile links are built from ``PROFILE_BASE_URL`` and
the node's canonical id.
"""

from __future__ import annotations

from typing import Any

from src.api.schemas import LinkResponse, NetworkResponse, NodeResponse
from src.models.network import NetworkNode, NetworkResult, NoCollaboratorsResult

_NO_COLLABORATORS_MESSAGE = (
    "No verified collaborators were found for {name}. "
    "Retry with allow_hallucinations=true to generate a speculative network."
)


class NetworkPresenter:
    """Renders networks for the HTTP and CLI surfaces."""

    def __init__(self, config: dict[str, Any], profile_base_url: str) -> None:
        self._sizes = {k.upper(): int(v) for k, v in config.get("node_sizes", {}).items()}
        self._colors = dict(config.get("role_colors", {}))
        self._profile_base_url = profile_base_url.rstrip("/")

    def node(self, node: NetworkNode) -> NodeResponse:
        role = node.primary_role.value
        return NodeResponse(
            id=node.id,
            name=node.name,
            type=role,
            types=[r.value for r in node.roles],
            size=self._sizes.get(node.weight.value, 15),
            color=self._colors.get(role, "#999999"),
            image_url=node.image_url,
            spotify_id=node.spotify_id,
            artist_id=node.canonical_id,
            profile_url=self.profile_url(node.canonical_id),
            top_collaborations=list(node.top_collaborations),
        )

    def profile_url(self, canonical_id: str | None) -> str | None:
        if not canonical_id:
            return None
        return f"{self._profile_base_url}/artist/{canonical_id}"

    def network(
        self,
        outcome: NetworkResult | NoCollaboratorsResult,
        artist_name: str,
    ) -> NetworkResponse:
        """Render *outcome*.  The root is the first node of a network."""
        if isinstance(outcome, NoCollaboratorsResult):
            network = outcome.single_node_network
            return NetworkResponse(
                status="no_collaborators",
                artist_name=outcome.artist_name,
                artist_id=outcome.artist_canonical_id,
                cached=network.cached,
                nodes=[self.node(n) for n in network.nodes],
                links=[],
                message=_NO_COLLABORATORS_MESSAGE.format(name=outcome.artist_name),
            )

        root = outcome.nodes[0] if outcome.nodes else None
        return NetworkResponse(
            status="ok",
            artist_name=root.name if root else artist_name,
            artist_id=root.canonical_id if root else None,
            cached=outcome.cached,
            source=outcome.source,
            hallucinated=outcome.hallucinated,
            nodes=[self.node(n) for n in outcome.nodes],
            links=[LinkResponse(source=l.source, target=l.target) for l in outcome.links],
        )
