"""Artist image providers (IImageProvider implementations)."""

from src.providers.image.spotify_provider import SpotifyImageProvider

__all__ = ["SpotifyImageProvider"]
