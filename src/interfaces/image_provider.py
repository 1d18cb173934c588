"""Abstract base class for artist image providers.

Used by the metadata enricher to attach a picture to each network node.
Lookups are best-effort: a miss returns ``None`` and a failure raises
:class:`~src.utils.errors.MetadataLookupFailedError`, which the enricher
absorbs per node.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ArtistImage:
    """An image found for an artist.

    Attributes
    ----------
    image_url:
        URL of a medium-sized image suitable for a graph node.
    provider_id:
        The provider's own id for the matched artist (e.g. a Spotify id).
    matched_name:
        The artist name as the provider spells it.
    """

    image_url: str | None
    provider_id: str
    matched_name: str = ""


class IImageProvider(ABC):
    """Contract for artist image lookups."""

    @abstractmethod
    async def find_artist_image(self, artist_name: str) -> ArtistImage | None:
        """Return the best image for *artist_name*, or ``None`` if not found.

        Raises
        ------
        src.utils.errors.MetadataLookupFailedError
            If the provider could not be queried.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier, e.g. ``"spotify"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if credentials are configured."""
