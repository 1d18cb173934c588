"""Abstract base class for the artist identity store.

The identity store is the authority on which artists exist.  It resolves a
display name or a canonical id to an :class:`ArtistIdentity`, offers a
fuzzy disambiguation list, and holds one persisted network document per
artist record (the network cache lives *on* the canonical record).

The network builder never invents an identity: a name the store does not
know is a :class:`~src.utils.errors.NotFoundError`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from src.models.network import ArtistIdentity, ArtistOption


# Concrete implementation: SQLiteIdentityStore (src/providers/identity/)
class IIdentityStore(ABC):
    """Contract for artist identity lookups and per-artist document storage."""

    @abstractmethod
    async def initialize(self) -> None:
        """Create backing tables or connections.  Safe to call repeatedly."""

    @abstractmethod
    async def get_by_name(self, name: str) -> ArtistIdentity | None:
        """Resolve *name*: exact match first, then case-insensitive."""

    @abstractmethod
    async def get_by_id(self, canonical_id: str) -> ArtistIdentity | None:
        """Resolve a canonical id."""

    @abstractmethod
    async def search_options(self, query: str, limit: int = 10) -> list[ArtistOption]:
        """Return artists whose names resemble *query*, best match first."""

    @abstractmethod
    async def read_network(self, canonical_id: str) -> dict[str, Any] | None:
        """Return the persisted network document for an artist, if any."""

    @abstractmethod
    async def write_network(self, canonical_id: str, document: dict[str, Any]) -> bool:
        """Replace the persisted network document for an existing artist.

        Returns
        -------
        bool
            ``False`` when no artist record has *canonical_id*; nothing is
            written in that case.

        Raises
        ------
        src.utils.errors.CacheWriteFailedError
            If the backing store rejected the write.
        """

    @abstractmethod
    async def clear_network(self, canonical_id: str) -> bool:
        """Drop the persisted network document.  Returns ``True`` if one existed."""
