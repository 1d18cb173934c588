"""Unit tests for the curated known-collaborations table."""

from __future__ import annotations

import pytest

from src.models.network import Role
from src.providers.sources.known_collaborations import (
    KNOWN_COLLABORATIONS,
    KnownCollaborationsSource,
    lookup,
)
from src.services.fake_entry_filter import is_fake


class TestLookup:
    def test_exact(self) -> None:
        assert lookup("Taylor Swift") is KNOWN_COLLABORATIONS["Taylor Swift"]

    def test_case_insensitive(self) -> None:
        assert lookup("taylor swift") is KNOWN_COLLABORATIONS["Taylor Swift"]

    def test_spacing_and_case_ignored(self) -> None:
        assert lookup("  taylor   SWIFT ") is KNOWN_COLLABORATIONS["Taylor Swift"]

    def test_unknown_artist(self) -> None:
        assert lookup("Nobody Here") == []

    def test_table_contains_no_placeholders(self) -> None:
        for rows in KNOWN_COLLABORATIONS.values():
            for name, _role, top in rows:
                assert not is_fake(name)
                assert not any(is_fake(t) for t in top)


class TestKnownCollaborationsSource:
    @pytest.mark.asyncio
    async def test_candidates_carry_top_collaborators(self) -> None:
        result = await KnownCollaborationsSource().fetch_collaborators("Drake")
        boi = next(c for c in result if c.name == "Boi-1da")
        assert boi.role == Role.PRODUCER
        assert "Eminem" in boi.top_collaborator_names
        assert boi.source == "known"

    @pytest.mark.asyncio
    async def test_multi_role_person_listed_twice(self) -> None:
        result = await KnownCollaborationsSource().fetch_collaborators("Billie Eilish")
        roles = [c.role for c in result if c.name == "FINNEAS"]
        assert roles == [Role.PRODUCER, Role.SONGWRITER]

    @pytest.mark.asyncio
    async def test_unknown_artist_empty(self) -> None:
        assert await KnownCollaborationsSource().fetch_collaborators("Nobody Here") == []

    @pytest.mark.asyncio
    async def test_collaboration_details(self) -> None:
        details = await KnownCollaborationsSource().fetch_collaboration_details("Billie Eilish", "FINNEAS")
        assert details is not None
        assert "producer and songwriter" in details.details

    @pytest.mark.asyncio
    async def test_collaboration_details_missing(self) -> None:
        source = KnownCollaborationsSource()
        assert await source.fetch_collaboration_details("Drake", "Adele") is None

    def test_always_available(self) -> None:
        source = KnownCollaborationsSource()
        assert source.is_available() is True
        assert source.get_provider_name() == "known"
