"""MusicBrainz collaborator source.

Second adapter in the fallback chain, and the only authoritative one.
Uses the musicbrainzngs library to:

1. **Resolve** the artist: three search strategies (quoted field query,
   unquoted field query, plain text), accepting an exact name match, then a
   case-insensitive match, then a hand-coded disambiguation for a few
   known-ambiguous names.
2. **Walk relations**: direct artist-to-artist relations on the artist,
   plus artist relations attached to the first few related works.  Each
   relation type is classified through :data:`RELATION_ROLE_MAP`;
   unmapped types are skipped.
3. **Read recording credits**: browse recordings and treat every other
   credited artist as a collaborator, using the credit's join phrase
   ("produced by", "written by") to pick the role.

MusicBrainz rejects bursts.  Every outbound call goes through
:meth:`_call`, which holds an ``asyncio.Lock`` and enforces a hard
1-second gap on the monotonic clock before running the (blocking)
musicbrainzngs call in a worker thread.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Callable

import musicbrainzngs
import structlog

from src.config.settings import Settings
from src.interfaces.collaborator_source import ICollaboratorSource
from src.models.network import (
    CollaborationDetails,
    CollaborationType,
    CollaboratorCandidate,
    Role,
)
from src.utils.errors import AdapterUnavailableError

logger = structlog.get_logger(logger_name=__name__)

# ---------------------------------------------------------------------------
# Relation classification
# ---------------------------------------------------------------------------

RELATION_ROLE_MAP: dict[str, Role] = {
    # artist
    "member": Role.ARTIST,
    "member of band": Role.ARTIST,
    "collaboration": Role.ARTIST,
    "supporting musician": Role.ARTIST,
    "vocalist": Role.ARTIST,
    "performance": Role.ARTIST,
    "featured artist": Role.ARTIST,
    "guest": Role.ARTIST,
    "remixer": Role.ARTIST,
    # producer
    "producer": Role.PRODUCER,
    "engineer": Role.PRODUCER,
    "recording engineer": Role.PRODUCER,
    "mix engineer": Role.PRODUCER,
    "mastering engineer": Role.PRODUCER,
    "mix": Role.PRODUCER,
    "mastering": Role.PRODUCER,
    "executive producer": Role.PRODUCER,
    "co-producer": Role.PRODUCER,
    # songwriter
    "composer": Role.SONGWRITER,
    "lyricist": Role.SONGWRITER,
    "writer": Role.SONGWRITER,
    "arranger": Role.SONGWRITER,
    "songwriter": Role.SONGWRITER,
    "co-writer": Role.SONGWRITER,
    "additional songwriter": Role.SONGWRITER,
    "librettist": Role.SONGWRITER,
}

# Exact requested name -> predicate picking the intended search result.
_DISAMBIGUATIONS: dict[str, Callable[[dict[str, Any]], bool]] = {
    "LISA": lambda a: a.get("name") == "LISA"
    or "blackpink" in (a.get("disambiguation") or "").lower(),
    "Kanye West": lambda a: a.get("name") == "Ye"
    or "formerly kanye west" in (a.get("disambiguation") or "").lower(),
}

_SEARCH_LIMIT = 10
_RECORDING_BROWSE_LIMIT = 50
_RECORDINGS_INSPECTED = 10
_WORKS_INSPECTED = 3
_PER_ROLE_CAP = 5


def classify_relation(relation_type: str) -> Role | None:
    """Map a MusicBrainz relation type to a Role, or ``None`` if unmapped."""
    return RELATION_ROLE_MAP.get((relation_type or "").strip().lower())


def _credit_role(join_phrase: str) -> Role:
    phrase = (join_phrase or "").lower()
    if "produc" in phrase:
        return Role.PRODUCER
    if "wrote" in phrase or "written" in phrase:
        return Role.SONGWRITER
    return Role.ARTIST


def _iter_credits(artist_credit: list[Any]) -> list[tuple[str, str]]:
    """Flatten a musicbrainzngs ``artist-credit`` list to (name, join phrase).

    musicbrainzngs interleaves credit dicts with bare join-phrase strings;
    the JSON web service puts a ``joinphrase`` key on each dict instead.
    Both layouts are accepted.
    """
    pairs: list[tuple[str, str]] = []
    for index, item in enumerate(artist_credit or []):
        if not isinstance(item, dict):
            continue
        artist = item.get("artist") or {}
        name = artist.get("name") or item.get("name") or ""
        join_phrase = item.get("joinphrase", "")
        if not join_phrase and index + 1 < len(artist_credit):
            following = artist_credit[index + 1]
            if isinstance(following, str):
                join_phrase = following
        if name:
            pairs.append((name, join_phrase))
    return pairs


class MusicBrainzCollaboratorSource(ICollaboratorSource):
    """Collaborator source backed by the MusicBrainz relation graph.

    Attributes
    ----------
    _last_request_time : float
        Monotonic timestamp of the most recent outbound call.
    """

    _MIN_REQUEST_INTERVAL: float = 1.0  # seconds between requests

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._last_request_time: float = 0.0
        self._lock = asyncio.Lock()

        musicbrainzngs.set_useragent(
            settings.musicbrainz_app_name,
            settings.musicbrainz_app_version,
            settings.musicbrainz_contact or None,
        )
        logger.info(
            "musicbrainz_source_initialized",
            app_name=settings.musicbrainz_app_name,
            app_version=settings.musicbrainz_app_version,
        )

    # ------------------------------------------------------------------
    # Rate-limited call gate
    # ------------------------------------------------------------------

    async def _throttle(self) -> None:
        """Sleep until at least ``_MIN_REQUEST_INTERVAL`` has passed."""
        elapsed = time.monotonic() - self._last_request_time
        if elapsed < self._MIN_REQUEST_INTERVAL:
            await asyncio.sleep(self._MIN_REQUEST_INTERVAL - elapsed)
        self._last_request_time = time.monotonic()

    async def _call(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Run one musicbrainzngs call, serialized and spaced."""
        async with self._lock:
            await self._throttle()
            try:
                return await asyncio.to_thread(fn, *args, **kwargs)
            except musicbrainzngs.WebServiceError as exc:
                raise AdapterUnavailableError(
                    message=f"MusicBrainz request failed: {exc}",
                    provider_name=self.get_provider_name(),
                ) from exc

    # ------------------------------------------------------------------
    # Artist resolution
    # ------------------------------------------------------------------

    async def resolve_artist(self, artist_name: str) -> dict[str, Any] | None:
        """Find the MusicBrainz artist record for *artist_name*."""
        strategies = [f'artist:"{artist_name}"', f"artist:{artist_name}", artist_name]
        lowered = artist_name.lower()
        pick_special = _DISAMBIGUATIONS.get(artist_name)

        for query in strategies:
            response = await self._call(
                musicbrainzngs.search_artists, query=query, limit=_SEARCH_LIMIT
            )
            results = response.get("artist-list", []) if response else []
            if not results:
                continue

            for artist in results:
                if artist.get("name") == artist_name:
                    logger.debug("musicbrainz_exact_match", artist=artist_name, mbid=artist.get("id"))
                    return artist
            for artist in results:
                if (artist.get("name") or "").lower() == lowered:
                    logger.debug("musicbrainz_casefold_match", artist=artist_name, mbid=artist.get("id"))
                    return artist
            if pick_special is not None:
                for artist in results:
                    if pick_special(artist):
                        logger.debug(
                            "musicbrainz_disambiguated_match",
                            artist=artist_name,
                            matched=artist.get("name"),
                            mbid=artist.get("id"),
                        )
                        return artist

        logger.info("musicbrainz_artist_not_found", artist=artist_name)
        return None

    # ------------------------------------------------------------------
    # ICollaboratorSource implementation
    # ------------------------------------------------------------------

    async def fetch_collaborators(self, artist_name: str) -> list[CollaboratorCandidate]:
        artist = await self.resolve_artist(artist_name)
        if artist is None:
            return []

        mbid = artist["id"]
        resolved_name = artist.get("name") or artist_name
        excluded = {artist_name, resolved_name}
        seen: set[str] = set()
        found: list[CollaboratorCandidate] = []

        def _add(name: str, role: Role, relation_label: str) -> None:
            if not name or name in excluded or name in seen:
                return
            seen.add(name)
            found.append(
                CollaboratorCandidate(
                    name=name,
                    role=role,
                    relation_label=relation_label,
                    source=self.get_provider_name(),
                )
            )

        detail = await self._call(
            musicbrainzngs.get_artist_by_id,
            mbid,
            includes=["artist-rels", "recording-rels", "work-rels"],
        )
        record = (detail or {}).get("artist", {})

        # -- Direct artist-to-artist relations --
        for relation in record.get("artist-relation-list", []):
            role = classify_relation(relation.get("type", ""))
            if role is None:
                logger.debug("musicbrainz_unmapped_relation", relation=relation.get("type"))
                continue
            _add((relation.get("artist") or {}).get("name", ""), role, relation.get("type", ""))

        # -- Artist relations attached to related works --
        works = [r.get("work") or {} for r in record.get("work-relation-list", [])]
        for work in [w for w in works if w.get("id")][:_WORKS_INSPECTED]:
            work_detail = await self._call(
                musicbrainzngs.get_work_by_id, work["id"], includes=["artist-rels"]
            )
            for relation in (work_detail or {}).get("work", {}).get("artist-relation-list", []):
                role = classify_relation(relation.get("type", ""))
                if role is not None:
                    _add((relation.get("artist") or {}).get("name", ""), role, relation.get("type", ""))

        # -- Recording credits --
        recordings = await self._browse_recordings(mbid)
        for recording in recordings[:_RECORDINGS_INSPECTED]:
            for name, join_phrase in _iter_credits(recording.get("artist-credit", [])):
                _add(name, _credit_role(join_phrase), "recording credit")

        candidates = _cap_per_role(found)
        logger.info(
            "musicbrainz_source_collaborators",
            artist=artist_name,
            mbid=mbid,
            found=len(found),
            kept=len(candidates),
        )
        return candidates

    async def fetch_collaboration_details(
        self, artist_name: str, collaborator_name: str
    ) -> CollaborationDetails | None:
        """Recordings on which both people are credited."""
        artist = await self.resolve_artist(artist_name)
        if artist is None:
            return None

        songs: list[str] = []
        for recording in await self._browse_recordings(artist["id"]):
            credited = {name for name, _ in _iter_credits(recording.get("artist-credit", []))}
            title = recording.get("title")
            if collaborator_name in credited and title and title not in songs:
                songs.append(title)

        if not songs:
            return None
        return CollaborationDetails(
            artist1=artist_name,
            artist2=collaborator_name,
            songs=songs,
            collaboration_type=CollaborationType.PERFORMANCE,
            details=f"Credited together on {len(songs)} recording(s) in MusicBrainz.",
            source=self.get_provider_name(),
        )

    def get_provider_name(self) -> str:
        return "musicbrainz"

    def is_available(self) -> bool:
        """MusicBrainz needs no API key, only a user agent."""
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _browse_recordings(self, mbid: str) -> list[dict[str, Any]]:
        response = await self._call(
            musicbrainzngs.browse_recordings,
            artist=mbid,
            includes=["artist-credits"],
            limit=_RECORDING_BROWSE_LIMIT,
        )
        return (response or {}).get("recording-list", [])


def _cap_per_role(candidates: list[CollaboratorCandidate]) -> list[CollaboratorCandidate]:
    """Keep every artist, but at most five producers and five songwriters."""
    counts = {Role.PRODUCER: 0, Role.SONGWRITER: 0}
    kept: list[CollaboratorCandidate] = []
    for candidate in candidates:
        if candidate.role in counts:
            if counts[candidate.role] >= _PER_ROLE_CAP:
                continue
            counts[candidate.role] += 1
        kept.append(candidate)
    return kept
