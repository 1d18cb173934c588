"""Spotify artist image provider implementing IImageProvider.

Uses the client-credentials flow: an app token is fetched from the
accounts service and reused until one minute before it expires; concurrent
lookups share a single refresh.  HTTP 429 from either endpoint raises
``RateLimitError`` rather than the generic lookup failure.  Artist
search returns the top hit only; its images are sorted by width and the
middle one is used as the "medium" node picture.

The ``httpx.AsyncClient`` is injected for testability.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import httpx

from src.config.settings import Settings
from src.interfaces.image_provider import ArtistImage, IImageProvider
from src.utils.errors import MetadataLookupFailedError, RateLimitError
from src.utils.logging import get_logger

_TOKEN_URL = "https://accounts.spotify.com/api/token"
_SEARCH_URL = "https://api.spotify.com/v1/search"
_TOKEN_EXPIRY_MARGIN = 60.0


def pick_image_url(images: list[dict[str, Any]], size: str = "medium") -> str | None:
    """Choose an image URL from a Spotify ``images`` array."""
    if not images:
        return None
    ordered = sorted(images, key=lambda img: img.get("width") or 0, reverse=True)
    if size == "large":
        return ordered[0].get("url")
    if size == "small":
        return ordered[-1].get("url") or ordered[0].get("url")
    return ordered[len(ordered) // 2].get("url") or ordered[0].get("url")


class SpotifyImageProvider(IImageProvider):
    """Artist images from the Spotify Web API."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient) -> None:
        self._client_id = settings.spotify_client_id
        self._client_secret = settings.spotify_client_secret
        self._http = http_client
        self._access_token: str | None = None
        self._token_expires_at: float = 0.0
        self._token_lock = asyncio.Lock()
        self._logger = get_logger(__name__)

    async def _get_access_token(self) -> str:
        if self._token_is_fresh():
            return self._access_token

        async with self._token_lock:
            # Another lookup may have refreshed the token while we waited.
            if self._token_is_fresh():
                return self._access_token

            try:
                response = await self._http.post(
                    _TOKEN_URL,
                    data={"grant_type": "client_credentials"},
                    auth=(self._client_id, self._client_secret),
                )
                self._check_rate_limit(response, "token")
                response.raise_for_status()
                payload = response.json()
            except httpx.HTTPError as exc:
                self._logger.warning("spotify_token_failed", error=str(exc))
                raise MetadataLookupFailedError(
                    message="Spotify authentication failed",
                    provider_name=self.get_provider_name(),
                ) from exc

            self._access_token = payload["access_token"]
            expires_in = float(payload.get("expires_in", 3600))
            self._token_expires_at = time.monotonic() + expires_in - _TOKEN_EXPIRY_MARGIN
            self._logger.debug("spotify_token_refreshed", expires_in=expires_in)
            return self._access_token

    def _token_is_fresh(self) -> bool:
        return bool(self._access_token) and time.monotonic() < self._token_expires_at

    def _check_rate_limit(self, response: httpx.Response, endpoint: str) -> None:
        if response.status_code != 429:
            return
        retry_after = response.headers.get("Retry-After")
        self._logger.warning("spotify_rate_limited", endpoint=endpoint, retry_after=retry_after)
        raise RateLimitError(
            message=f"Spotify rate limit hit on {endpoint} (retry after {retry_after or '?'}s)",
            provider_name=self.get_provider_name(),
        )

    # -- IImageProvider implementation -----------------------------------------

    async def find_artist_image(self, artist_name: str) -> ArtistImage | None:
        if not self.is_available():
            return None

        token = await self._get_access_token()
        try:
            response = await self._http.get(
                _SEARCH_URL,
                params={"q": artist_name, "type": "artist", "limit": 1},
                headers={"Authorization": f"Bearer {token}"},
            )
            self._check_rate_limit(response, "search")
            response.raise_for_status()
            items = response.json().get("artists", {}).get("items", [])
        except httpx.HTTPError as exc:
            self._logger.warning("spotify_search_failed", artist=artist_name, error=str(exc))
            raise MetadataLookupFailedError(
                message=f"Spotify search failed for {artist_name}",
                provider_name=self.get_provider_name(),
            ) from exc

        if not items:
            return None
        artist = items[0]
        return ArtistImage(
            image_url=pick_image_url(artist.get("images") or []),
            provider_id=artist.get("id", ""),
            matched_name=artist.get("name", ""),
        )

    def get_provider_name(self) -> str:
        return "spotify"

    def is_available(self) -> bool:
        return bool(self._client_id and self._client_secret)
