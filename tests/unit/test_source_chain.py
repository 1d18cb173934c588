"""Unit tests for the ordered collaborator-source fallback loop."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.interfaces.collaborator_source import ICollaboratorSource
from src.models.network import CollaboratorCandidate, Role
from src.services.source_chain import SourceChain
from src.utils.errors import AdapterUnavailableError


def _source(
    name: str,
    candidates: list[CollaboratorCandidate] | None = None,
    *,
    available: bool = True,
    error: Exception | None = None,
) -> MagicMock:
    source = MagicMock(spec=ICollaboratorSource)
    source.get_provider_name.return_value = name
    source.is_available.return_value = available
    if error is not None:
        source.fetch_collaborators = AsyncMock(side_effect=error)
    else:
        source.fetch_collaborators = AsyncMock(return_value=list(candidates or []))
    return source


def _candidate(name: str) -> CollaboratorCandidate:
    return CollaboratorCandidate(name=name, role=Role.PRODUCER)


class TestSourceChain:
    @pytest.mark.asyncio
    async def test_first_non_empty_wins_and_later_not_called(self) -> None:
        first = _source("generative", [_candidate("Max Martin")])
        second = _source("musicbrainz", [_candidate("Shellback")])

        outcome = await SourceChain([first, second]).run("Taylor Swift")

        assert outcome.source == "generative"
        assert [c.name for c in outcome.candidates] == ["Max Martin"]
        second.fetch_collaborators.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_and_failing_adapters_fall_through(self) -> None:
        empty = _source("generative", [])
        failing = _source("musicbrainz", error=AdapterUnavailableError("down"))
        crashing = _source("wikipedia", error=RuntimeError("unexpected"))
        last = _source("known", [_candidate("Jack Antonoff")])

        outcome = await SourceChain([empty, failing, crashing, last]).run("Taylor Swift")

        assert outcome.source == "known"
        assert outcome.attempted == ["generative", "musicbrainz", "wikipedia", "known"]

    @pytest.mark.asyncio
    async def test_unavailable_adapter_skipped(self) -> None:
        offline = _source("generative", [_candidate("Max Martin")], available=False)
        online = _source("musicbrainz", [_candidate("Shellback")])

        outcome = await SourceChain([offline, online]).run("Taylor Swift")

        offline.fetch_collaborators.assert_not_awaited()
        assert outcome.source == "musicbrainz"
        assert outcome.attempted == ["musicbrainz"]

    @pytest.mark.asyncio
    async def test_only_placeholders_counts_as_empty(self) -> None:
        fakes = _source("generative", [_candidate("Producer X"), _candidate("John Doe")])
        real = _source("musicbrainz", [_candidate("Shellback")])

        outcome = await SourceChain([fakes, real]).run("Taylor Swift")

        assert outcome.source == "musicbrainz"

    @pytest.mark.asyncio
    async def test_all_empty(self) -> None:
        outcome = await SourceChain([_source("a", []), _source("b", [])]).run("Nobody")
        assert outcome.source is None
        assert outcome.is_empty
        assert outcome.attempted == ["a", "b"]

    @pytest.mark.asyncio
    async def test_calls_are_sequential_in_order(self) -> None:
        order: list[str] = []

        def _tracking(name: str) -> MagicMock:
            source = _source(name)

            async def _fetch(artist: str) -> list[CollaboratorCandidate]:
                order.append(name)
                return []

            source.fetch_collaborators = AsyncMock(side_effect=_fetch)
            return source

        await SourceChain([_tracking("a"), _tracking("b"), _tracking("c")]).run("X Y")
        assert order == ["a", "b", "c"]

    def test_sources_property_is_a_copy(self) -> None:
        chain = SourceChain([_source("a")])
        chain.sources.clear()
        assert len(chain.sources) == 1
