"""Abstract base class for collaborator source adapters.

A source adapter turns one external provider (a language model, the
MusicBrainz relation graph, a Wikipedia intro, a curated table) into the
normalized :class:`~src.models.network.CollaboratorCandidate` shape.

Adapters are queried one at a time, in a fixed priority order, by
:class:`src.services.source_chain.SourceChain`.  An adapter may raise or
return ``[]``; the chain treats both as "try the next one".
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.network import CollaborationDetails, CollaboratorCandidate


# Concrete implementations: GenerativeCollaboratorSource, MusicBrainzCollaboratorSource,
# WikipediaCollaboratorSource, KnownCollaborationsSource
# Located in: src/providers/sources/
class ICollaboratorSource(ABC):
    """Contract for anything that can name an artist's collaborators."""

    @abstractmethod
    async def fetch_collaborators(self, artist_name: str) -> list[CollaboratorCandidate]:
        """Return collaborators of *artist_name*.

        Parameters
        ----------
        artist_name:
            Display name of the artist, exactly as resolved by the
            identity store.

        Returns
        -------
        list[CollaboratorCandidate]
            Zero or more candidates.  Placeholder names may be present;
            filtering is the caller's job.

        Raises
        ------
        src.utils.errors.AdapterUnavailableError
            The source is unconfigured or unreachable.
        src.utils.errors.MalformedAdapterOutputError
            The provider answered but the payload could not be parsed.
        """

    @abstractmethod
    async def fetch_collaboration_details(
        self, artist_name: str, collaborator_name: str
    ) -> CollaborationDetails | None:
        """Describe what *artist_name* and *collaborator_name* made together.

        Returns ``None`` when this source has nothing to say about the pair.
        Raises the same errors as :meth:`fetch_collaborators`.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier used in logs and ``NetworkResult.source``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the source is configured.  No network call."""
