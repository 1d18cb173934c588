"""Unit tests for the MusicBrainz collaborator source."""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock, patch

import musicbrainzngs
import pytest

from src.config.settings import Settings
from src.models.network import CollaborationType, Role
from src.providers.sources.musicbrainz_source import (
    MusicBrainzCollaboratorSource,
    _iter_credits,
    classify_relation,
)
from src.utils.errors import AdapterUnavailableError

_PATCH = "src.providers.sources.musicbrainz_source.musicbrainzngs"


def _settings() -> Settings:
    return Settings(
        musicbrainz_app_name="collabNetwork-test",
        musicbrainz_app_version="0.1.0",
        musicbrainz_contact="test@test.com",
        _env_file=None,
    )


def _provider() -> MusicBrainzCollaboratorSource:
    provider = MusicBrainzCollaboratorSource(_settings())
    provider._MIN_REQUEST_INTERVAL = 0.0
    return provider


def _configure(mock_mb: MagicMock) -> None:
    mock_mb.WebServiceError = musicbrainzngs.WebServiceError
    mock_mb.get_work_by_id.return_value = {"work": {}}
    mock_mb.browse_recordings.return_value = {"recording-list": []}


class TestClassification:
    @pytest.mark.parametrize(
        ("relation", "role"),
        [
            ("producer", Role.PRODUCER),
            ("Mix", Role.PRODUCER),
            ("mastering", Role.PRODUCER),
            ("composer", Role.SONGWRITER),
            ("lyricist", Role.SONGWRITER),
            ("writer", Role.SONGWRITER),
            ("member of band", Role.ARTIST),
            ("featured artist", Role.ARTIST),
            ("remixer", Role.ARTIST),
        ],
    )
    def test_relation_table(self, relation: str, role: Role) -> None:
        assert classify_relation(relation) == role

    def test_unmapped_relation(self) -> None:
        assert classify_relation("teacher") is None

    def test_iter_credits_interleaved_join_phrases(self) -> None:
        credits = [
            {"artist": {"name": "Taylor Swift"}},
            " feat. ",
            {"artist": {"name": "Kendrick Lamar"}},
        ]
        assert _iter_credits(credits) == [("Taylor Swift", " feat. "), ("Kendrick Lamar", "")]

    def test_iter_credits_joinphrase_key(self) -> None:
        credits = [{"artist": {"name": "Max Martin"}, "joinphrase": " produced by "}]
        assert _iter_credits(credits) == [("Max Martin", " produced by ")]


class TestResolveArtist:
    @pytest.mark.asyncio
    async def test_exact_match_preferred(self) -> None:
        with patch(_PATCH) as mock_mb:
            _configure(mock_mb)
            mock_mb.search_artists.return_value = {
                "artist-list": [
                    {"id": "1", "name": "adele"},
                    {"id": "2", "name": "Adele"},
                ]
            }
            artist = await _provider().resolve_artist("Adele")
        assert artist["id"] == "2"

    @pytest.mark.asyncio
    async def test_case_insensitive_fallback(self) -> None:
        with patch(_PATCH) as mock_mb:
            _configure(mock_mb)
            mock_mb.search_artists.return_value = {"artist-list": [{"id": "9", "name": "LORDE"}]}
            artist = await _provider().resolve_artist("Lorde")
        assert artist["id"] == "9"

    @pytest.mark.asyncio
    async def test_hand_coded_disambiguation(self) -> None:
        with patch(_PATCH) as mock_mb:
            _configure(mock_mb)
            mock_mb.search_artists.return_value = {
                "artist-list": [
                    {"id": "a", "name": "Lisa Loeb"},
                    {"id": "b", "name": "Lalisa", "disambiguation": "BLACKPINK member"},
                ]
            }
            artist = await _provider().resolve_artist("LISA")
        assert artist["id"] == "b"

    @pytest.mark.asyncio
    async def test_three_strategies_then_none(self) -> None:
        with patch(_PATCH) as mock_mb:
            _configure(mock_mb)
            mock_mb.search_artists.return_value = {"artist-list": []}
            assert await _provider().resolve_artist("Nobody Here") is None
        assert mock_mb.search_artists.call_count == 3

    @pytest.mark.asyncio
    async def test_web_service_error_becomes_adapter_unavailable(self) -> None:
        with patch(_PATCH) as mock_mb:
            _configure(mock_mb)
            mock_mb.search_artists.side_effect = musicbrainzngs.WebServiceError("503")
            with pytest.raises(AdapterUnavailableError):
                await _provider().resolve_artist("Adele")


class TestFetchCollaborators:
    @pytest.mark.asyncio
    async def test_relations_works_and_credits(self) -> None:
        with patch(_PATCH) as mock_mb:
            _configure(mock_mb)
            mock_mb.search_artists.return_value = {"artist-list": [{"id": "ts", "name": "Taylor Swift"}]}
            mock_mb.get_artist_by_id.return_value = {
                "artist": {
                    "artist-relation-list": [
                        {"type": "producer", "artist": {"name": "Jack Antonoff"}},
                        {"type": "teacher", "artist": {"name": "Some Teacher"}},
                        {"type": "member of band", "artist": {"name": "Taylor Swift"}},
                    ],
                    "work-relation-list": [{"work": {"id": "w1"}}],
                }
            }
            mock_mb.get_work_by_id.return_value = {
                "work": {
                    "artist-relation-list": [
                        {"type": "lyricist", "artist": {"name": "Liz Rose"}},
                        {"type": "composer", "artist": {"name": "Jack Antonoff"}},
                    ]
                }
            }
            mock_mb.browse_recordings.return_value = {
                "recording-list": [
                    {
                        "title": "Everything Has Changed",
                        "artist-credit": [
                            {"artist": {"name": "Taylor Swift"}},
                            " feat. ",
                            {"artist": {"name": "Ed Sheeran"}},
                        ],
                    }
                ]
            }

            result = await _provider().fetch_collaborators("Taylor Swift")

        assert [(c.name, c.role) for c in result] == [
            ("Jack Antonoff", Role.PRODUCER),
            ("Liz Rose", Role.SONGWRITER),
            ("Ed Sheeran", Role.ARTIST),
        ]
        assert all(c.source == "musicbrainz" for c in result)

    @pytest.mark.asyncio
    async def test_unresolved_artist_returns_empty(self) -> None:
        with patch(_PATCH) as mock_mb:
            _configure(mock_mb)
            mock_mb.search_artists.return_value = {"artist-list": []}
            assert await _provider().fetch_collaborators("Nobody Here") == []
        mock_mb.get_artist_by_id.assert_not_called()

    @pytest.mark.asyncio
    async def test_caps_producers_at_five(self) -> None:
        relations = [
            {"type": "producer", "artist": {"name": f"Producer Name{chr(65 + i)}"}}
            for i in range(8)
        ]
        with patch(_PATCH) as mock_mb:
            _configure(mock_mb)
            mock_mb.search_artists.return_value = {"artist-list": [{"id": "x", "name": "Adele"}]}
            mock_mb.get_artist_by_id.return_value = {"artist": {"artist-relation-list": relations}}
            result = await _provider().fetch_collaborators("Adele")
        assert len([c for c in result if c.role == Role.PRODUCER]) == 5


class TestCollaborationDetails:
    @pytest.mark.asyncio
    async def test_shared_recordings(self) -> None:
        with patch(_PATCH) as mock_mb:
            _configure(mock_mb)
            mock_mb.search_artists.return_value = {"artist-list": [{"id": "ts", "name": "Taylor Swift"}]}
            mock_mb.browse_recordings.return_value = {
                "recording-list": [
                    {"title": "End Game", "artist-credit": [
                        {"artist": {"name": "Taylor Swift"}}, " feat. ",
                        {"artist": {"name": "Ed Sheeran"}},
                    ]},
                    {"title": "Style", "artist-credit": [{"artist": {"name": "Taylor Swift"}}]},
                ]
            }
            details = await _provider().fetch_collaboration_details("Taylor Swift", "Ed Sheeran")

        assert details is not None
        assert details.songs == ["End Game"]
        assert details.collaboration_type == CollaborationType.PERFORMANCE

    def test_provider_name_and_availability(self) -> None:
        with patch(_PATCH):
            provider = _provider()
        assert provider.get_provider_name() == "musicbrainz"
        assert provider.is_available() is True


# ======================================================================
# Request gate
# ======================================================================


class _FakeClock:
    """Monotonic clock that only moves when the gate sleeps."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def monotonic(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.now += seconds


class TestRequestGate:
    @pytest.mark.asyncio
    async def test_concurrent_calls_spaced_by_interval(self) -> None:
        clock = _FakeClock()
        started: list[float] = []

        with patch(_PATCH):
            provider = MusicBrainzCollaboratorSource(_settings())

        with patch("src.providers.sources.musicbrainz_source.time") as mock_time, \
                patch("src.providers.sources.musicbrainz_source.asyncio.sleep", new=clock.sleep):
            mock_time.monotonic.side_effect = clock.monotonic
            await asyncio.gather(*(provider._call(lambda: started.append(clock.now)) for _ in range(3)))

        assert len(started) == 3
        gaps = [later - earlier for earlier, later in zip(started, started[1:])]
        assert all(gap >= 1.0 for gap in gaps)

    @pytest.mark.asyncio
    async def test_call_after_idle_period_does_not_wait(self) -> None:
        clock = _FakeClock()
        slept: list[float] = []

        async def _sleep(seconds: float) -> None:
            slept.append(seconds)
            await clock.sleep(seconds)

        with patch(_PATCH):
            provider = MusicBrainzCollaboratorSource(_settings())

        with patch("src.providers.sources.musicbrainz_source.time") as mock_time, \
                patch("src.providers.sources.musicbrainz_source.asyncio.sleep", new=_sleep):
            mock_time.monotonic.side_effect = clock.monotonic
            await provider._call(lambda: None)
            clock.now += 5.0
            await provider._call(lambda: None)

        assert slept == []
