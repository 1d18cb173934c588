"""collabNetwork domain models, re-exported from :mod:`src.models.network`.

Other parts of the codebase may import from ``src.models`` directly
(e.g. ``from src.models import NetworkNode``).
"""

from __future__ import annotations

from src.models.network import (
    ArtistIdentity,
    ArtistOption,
    BuildOptions,
    CollaborationDetails,
    CollaborationType,
    CollaboratorCandidate,
    NetworkLink,
    NetworkNode,
    NetworkResult,
    NoCollaboratorsResult,
    NodeWeight,
    Role,
)

__all__ = [
    "ArtistIdentity",
    "ArtistOption",
    "BuildOptions",
    "CollaborationDetails",
    "CollaborationType",
    "CollaboratorCandidate",
    "NetworkLink",
    "NetworkNode",
    "NetworkResult",
    "NoCollaboratorsResult",
    "NodeWeight",
    "Role",
]
