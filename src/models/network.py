"""Domain models for artist collaboration networks.

Defines the enums and Pydantic v2 models that flow through network
generation:

    ArtistIdentity ──► source adapters ──► CollaboratorCandidate[]
                                              │
                          NodeConsolidator ◄──┘
                                │
                      dict[name, NetworkNode] + NetworkLink[]
                                │
                        BranchExpander / MetadataEnricher
                                │
                     NetworkResult  or  NoCollaboratorsResult

All models are frozen.  Components that "update" a node (consolidation
accumulating roles, enrichment attaching an image) replace it with
``model_copy(update={...})`` in the map they own, so a node handed to a
caller can never change underneath it.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Role(str, Enum):  # noqa: UP042 — StrEnum requires Python 3.11+
    """What a person did on a collaboration.  A node may hold several."""

    ARTIST = "artist"
    PRODUCER = "producer"
    SONGWRITER = "songwriter"

    @classmethod
    def parse(cls, value: object, default: Role | None = None) -> Role | None:
        """Map loose adapter text (``"Producer"``, ``" songwriter "``) to a Role."""
        if isinstance(value, Role):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for role in cls:
                if role.value == key:
                    return role
        return default


class NodeWeight(str, Enum):  # noqa: UP042 — StrEnum requires Python 3.11+
    """Visual weight of a node, derived from its ring.

    PRIMARY:   the root artist (ring 0)
    SECONDARY: direct collaborators (ring 1)
    BRANCH:    collaborators of collaborators (ring 2)
    """

    PRIMARY = "PRIMARY"
    SECONDARY = "SECONDARY"
    BRANCH = "BRANCH"


class CollaborationType(str, Enum):  # noqa: UP042 — StrEnum requires Python 3.11+
    """Nature of the relationship on one network edge."""

    PRODUCTION = "production"
    SONGWRITING = "songwriting"
    PERFORMANCE = "performance"
    REMIX = "remix"
    UNKNOWN = "unknown"


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------

class ArtistIdentity(BaseModel):
    """An artist as known to the identity store.

    ``canonical_id`` is the store's stable key.  ``None`` means the artist
    is known only by name; a later lookup may attach the id with
    :meth:`with_canonical_id`, which is the only change ever made.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    canonical_id: str | None = None

    def with_canonical_id(self, canonical_id: str) -> ArtistIdentity:
        if self.canonical_id:
            return self
        return self.model_copy(update={"canonical_id": canonical_id})


class ArtistOption(BaseModel):
    """One entry of a disambiguation list for an ambiguous search term."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    bio: str | None = None


# ---------------------------------------------------------------------------
# Adapter output
# ---------------------------------------------------------------------------

class CollaboratorCandidate(BaseModel):
    """Raw, normalized output of one source adapter.

    Ephemeral: consumed by the consolidator and then discarded.
    ``relation_label`` keeps the provider's own wording ("mix engineer",
    "recording credit", "produced by") for logs and debugging.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    role: Role
    relation_label: str = ""
    top_collaborator_names: list[str] = Field(default_factory=list)
    source: str = ""


# ---------------------------------------------------------------------------
# Graph
# ---------------------------------------------------------------------------

class NetworkNode(BaseModel):
    """One person in a collaboration network.

    ``id`` equals ``name``; identity is the display name, compared
    case-sensitively (see ``src.utils.text_normalizer.identity_key``).
    ``roles`` is non-empty, ordered by first sighting, and never shrinks.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    roles: list[Role] = Field(min_length=1)
    weight: NodeWeight
    image_url: str | None = None
    spotify_id: str | None = None
    canonical_id: str | None = None
    top_collaborations: list[str] = Field(default_factory=list)

    @property
    def primary_role(self) -> Role:
        return self.roles[0]


class NetworkLink(BaseModel):
    """An edge between two node ids.

    Stored directed (root → collaborator, collaborator → branch) but
    undirected in meaning: ``A→B`` and ``B→A`` are the same pair.
    """

    model_config = ConfigDict(frozen=True)

    source: str
    target: str

    def pair_key(self) -> frozenset[str]:
        return frozenset((self.source, self.target))


class NetworkResult(BaseModel):
    """A finished collaboration network."""

    model_config = ConfigDict(frozen=True)

    nodes: list[NetworkNode] = Field(default_factory=list)
    links: list[NetworkLink] = Field(default_factory=list)
    source: str | None = None
    hallucinated: bool = False
    cached: bool = False

    def is_single_node(self) -> bool:
        """True for a root-only network (one node, no links)."""
        return len(self.nodes) <= 1 and not self.links

    def node_names(self) -> list[str]:
        return [n.id for n in self.nodes]


class NoCollaboratorsResult(BaseModel):
    """Sentinel: the artist exists but no authentic collaborators were found.

    This is a prompt to the caller, not a final answer: it may retry with
    ``allow_hallucinations=True`` to get a generated network instead.
    """

    model_config = ConfigDict(frozen=True)

    artist_name: str
    artist_canonical_id: str | None = None
    single_node_network: NetworkResult


class CollaborationDetails(BaseModel):
    """What two people made together, for one edge of the network."""

    model_config = ConfigDict(frozen=True)

    artist1: str
    artist2: str
    songs: list[str] = Field(default_factory=list)
    albums: list[str] = Field(default_factory=list)
    collaboration_type: CollaborationType = CollaborationType.UNKNOWN
    details: str = ""
    source: str | None = None

    def is_empty(self) -> bool:
        return not (self.songs or self.albums or self.details)


# ---------------------------------------------------------------------------
# Build options
# ---------------------------------------------------------------------------

class BuildOptions(BaseModel):
    """Caller choices for one network build.

    allow_hallucinations:
        Accept a generated ("creative") network when no authentic
        collaborators exist.
    force_refresh:
        Ignore any persisted network and regenerate.
    """

    model_config = ConfigDict(frozen=True)

    allow_hallucinations: bool = False
    force_refresh: bool = False
