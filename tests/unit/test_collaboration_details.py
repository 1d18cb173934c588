"""Unit tests for on-demand collaboration details."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.interfaces.collaborator_source import ICollaboratorSource
from src.models.network import CollaborationDetails, CollaborationType
from src.providers.cache.memory_cache import MemoryCacheProvider
from src.services.collaboration_details import CollaborationDetailsService


def _source(name: str, details: CollaborationDetails | None = None, error: Exception | None = None) -> MagicMock:
    source = MagicMock(spec=ICollaboratorSource)
    source.get_provider_name.return_value = name
    source.is_available.return_value = True
    if error is not None:
        source.fetch_collaboration_details = AsyncMock(side_effect=error)
    else:
        source.fetch_collaboration_details = AsyncMock(return_value=details)
    return source


def _details(source: str) -> CollaborationDetails:
    return CollaborationDetails(
        artist1="Taylor Swift",
        artist2="Max Martin",
        songs=["Shake It Off"],
        collaboration_type=CollaborationType.PRODUCTION,
        source=source,
    )


class TestCollaborationDetailsService:
    @pytest.mark.asyncio
    async def test_first_non_empty_wins(self) -> None:
        failing = _source("generative", error=RuntimeError("boom"))
        empty = _source("musicbrainz", CollaborationDetails(artist1="a", artist2="b"))
        found = _source("wikipedia", _details("wikipedia"))
        never = _source("known", _details("known"))

        service = CollaborationDetailsService([failing, empty, found, never])
        result = await service.get_details("Taylor Swift", "Max Martin")

        assert result.source == "wikipedia"
        never.fetch_collaboration_details.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_nothing_known_returns_empty_unknown(self) -> None:
        service = CollaborationDetailsService([_source("known", None)])
        result = await service.get_details(" Ada ", "Bob")

        assert result.artist1 == "Ada"
        assert result.collaboration_type == CollaborationType.UNKNOWN
        assert result.is_empty()

    @pytest.mark.asyncio
    async def test_cached_per_pair(self) -> None:
        source = _source("known", _details("known"))
        service = CollaborationDetailsService([source], cache=MemoryCacheProvider())

        first = await service.get_details("Taylor Swift", "Max Martin")
        second = await service.get_details("Taylor Swift", "Max Martin")

        assert first == second
        assert source.fetch_collaboration_details.await_count == 1
