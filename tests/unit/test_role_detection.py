"""Unit tests for root-artist role detection."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.models.network import Role
from src.providers.cache.memory_cache import MemoryCacheProvider
from src.services.role_detection import RoleDetectionService
from src.utils.errors import LLMError


class TestRoleDetectionService:
    @pytest.mark.asyncio
    async def test_artist_moved_to_front(self, mock_llm: MagicMock) -> None:
        mock_llm.complete = AsyncMock(return_value='["songwriter", "artist"]')
        roles = await RoleDetectionService(mock_llm).detect_roles("Ed Sheeran")
        assert roles == [Role.ARTIST, Role.SONGWRITER]

    @pytest.mark.asyncio
    async def test_producer_only(self, mock_llm: MagicMock) -> None:
        mock_llm.complete = AsyncMock(return_value='["Producer", "producer", "dj"]')
        roles = await RoleDetectionService(mock_llm).detect_roles("Max Martin")
        assert roles == [Role.PRODUCER]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reply", ["no idea", "[]", '["drummer"]', '{"roles": "artist"}'])
    async def test_unusable_reply_defaults(self, mock_llm: MagicMock, reply: str) -> None:
        mock_llm.complete = AsyncMock(return_value=reply)
        assert await RoleDetectionService(mock_llm).detect_roles("Ada") == [Role.ARTIST]

    @pytest.mark.asyncio
    async def test_llm_error_defaults(self, mock_llm: MagicMock) -> None:
        mock_llm.complete = AsyncMock(side_effect=LLMError("down"))
        assert await RoleDetectionService(mock_llm).detect_roles("Ada") == [Role.ARTIST]

    @pytest.mark.asyncio
    async def test_no_llm_defaults(self) -> None:
        assert await RoleDetectionService(None).detect_roles("Ada") == [Role.ARTIST]

    @pytest.mark.asyncio
    async def test_unavailable_llm_not_called(self, mock_llm: MagicMock) -> None:
        mock_llm.is_available.return_value = False
        assert await RoleDetectionService(mock_llm).detect_roles("Ada") == [Role.ARTIST]
        mock_llm.complete.assert_not_called()

    @pytest.mark.asyncio
    async def test_cached_per_lowercase_name(self, mock_llm: MagicMock) -> None:
        mock_llm.complete = AsyncMock(return_value='["producer"]')
        service = RoleDetectionService(mock_llm, cache=MemoryCacheProvider())

        first = await service.detect_roles("Max Martin")
        second = await service.detect_roles("max martin")

        assert first == second == [Role.PRODUCER]
        assert mock_llm.complete.await_count == 1
