"""Wikipedia collaborator source.

Third adapter in the fallback chain.  Finds the artist's page through the
MediaWiki search API, pulls the plain-text intro, and mines it with a
handful of phrase patterns ("produced by X", "featuring X", ...).  The
phrase that matched decides the role.

Coverage is thin and noisy, so the output is capped and aggressively
filtered.  No API key is required.
"""

from __future__ import annotations

import re
from typing import Any

import httpx

from src.interfaces.collaborator_source import ICollaboratorSource
from src.models.network import CollaborationDetails, CollaboratorCandidate, Role
from src.utils.errors import AdapterUnavailableError
from src.utils.logging import get_logger
from src.utils.text_normalizer import casefold_key

_USER_AGENT = "collabNetwork/0.1.0 (+https://musicnerd.xyz)"
_MAX_COLLABORATORS = 6
_MIN_NAME_LENGTH = 3
_MAX_NAME_LENGTH = 30

# Lazy capture: the first whitespace ends the match, so "Jack Antonoff"
# yields "Jack".  Only single-word credits come out whole.
_NAME = r"([A-Z][a-zA-Z\s]+?)(?:\s|,|\.|;)"

_PHRASE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"produced by " + _NAME),
    re.compile(r"producers?\s+" + _NAME),
    re.compile(r"working with producers?\s+" + _NAME),
    re.compile(r"co-written (?:with|by)\s+" + _NAME),
    re.compile(r"written (?:with|by)\s+" + _NAME),
    re.compile(r"songwriters?\s+" + _NAME),
    re.compile(r"collaborated with\s+" + _NAME),
    re.compile(r"featuring\s+" + _NAME),
    re.compile(r"duet with\s+" + _NAME),
]

_PRODUCER_CONTEXT = re.compile(r"produc|mix|engineer", re.IGNORECASE)
_SONGWRITER_CONTEXT = re.compile(r"writ|compos|lyric", re.IGNORECASE)

_BLACKLIST = frozenset({
    "the", "and", "with", "by", "for", "in", "on", "at", "to", "from",
    "album", "song", "track", "single", "ep", "record", "label", "studio",
    "music", "band", "group", "artist", "singer", "musician",
})


def _role_for_context(context: str) -> Role:
    if _PRODUCER_CONTEXT.search(context):
        return Role.PRODUCER
    if _SONGWRITER_CONTEXT.search(context):
        return Role.SONGWRITER
    return Role.ARTIST


def _acceptable(name: str, artist_name: str) -> bool:
    if casefold_key(name) == casefold_key(artist_name):
        return False
    if not _MIN_NAME_LENGTH <= len(name) <= _MAX_NAME_LENGTH:
        return False
    if any(ch.isdigit() for ch in name) or "(" in name:
        return False
    if not name[:1].isupper():
        return False
    return name.lower() not in _BLACKLIST


def extract_collaborators(artist_name: str, text: str) -> list[tuple[str, Role, str]]:
    """Mine *text* for ``(name, role, matched phrase)`` triples.

    Patterns are applied in order; the first spelling of a name wins and
    later case-insensitive repeats are dropped.  At most six results.
    """
    found: list[tuple[str, Role, str]] = []
    seen: set[str] = set()
    for pattern in _PHRASE_PATTERNS:
        for match in pattern.finditer(text):
            name = match.group(1).strip()
            if not _acceptable(name, artist_name):
                continue
            key = casefold_key(name)
            if key in seen:
                continue
            seen.add(key)
            context = match.group(0)
            found.append((name, _role_for_context(context), context.strip()))
    return found[:_MAX_COLLABORATORS]


class WikipediaCollaboratorSource(ICollaboratorSource):
    """Collaborator source that mines Wikipedia article intros.

    The ``httpx.AsyncClient`` is injected for testability.
    """

    def __init__(self, http_client: httpx.AsyncClient, api_url: str) -> None:
        self._http = http_client
        self._api_url = api_url
        self._logger = get_logger(__name__)

    async def _query(self, params: dict[str, Any]) -> dict[str, Any]:
        params = {"format": "json", **params}
        try:
            response = await self._http.get(
                self._api_url, params=params, headers={"User-Agent": _USER_AGENT}
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as exc:
            self._logger.warning("wikipedia_request_failed", error=str(exc))
            raise AdapterUnavailableError(
                message=f"Wikipedia request failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        except ValueError as exc:
            raise AdapterUnavailableError(
                message="Wikipedia returned a non-JSON body",
                provider_name=self.get_provider_name(),
            ) from exc

    async def find_page_title(self, artist_name: str) -> str | None:
        data = await self._query({
            "action": "query",
            "list": "search",
            "srsearch": f"{artist_name} musician singer",
            "srlimit": 1,
        })
        hits = (data.get("query") or {}).get("search") or []
        return hits[0].get("title") if hits else None

    async def fetch_intro(self, title: str) -> str | None:
        data = await self._query({
            "action": "query",
            "prop": "extracts",
            "exintro": 1,
            "explaintext": 1,
            "titles": title,
        })
        pages = (data.get("query") or {}).get("pages") or {}
        for page in pages.values():
            extract = page.get("extract")
            if extract:
                return extract
        return None

    # -- ICollaboratorSource implementation ------------------------------------

    async def fetch_collaborators(self, artist_name: str) -> list[CollaboratorCandidate]:
        title = await self.find_page_title(artist_name)
        if not title:
            self._logger.info("wikipedia_page_not_found", artist=artist_name)
            return []
        intro = await self.fetch_intro(title)
        if not intro:
            self._logger.info("wikipedia_intro_empty", artist=artist_name, title=title)
            return []

        candidates = [
            CollaboratorCandidate(
                name=name,
                role=role,
                relation_label=context,
                source=self.get_provider_name(),
            )
            for name, role, context in extract_collaborators(artist_name, intro)
        ]
        self._logger.info(
            "wikipedia_source_collaborators",
            artist=artist_name,
            title=title,
            candidates=len(candidates),
        )
        return candidates

    async def fetch_collaboration_details(
        self, artist_name: str, collaborator_name: str
    ) -> CollaborationDetails | None:
        """Sentences of the artist's intro that mention the collaborator."""
        title = await self.find_page_title(artist_name)
        if not title:
            return None
        intro = await self.fetch_intro(title)
        if not intro or collaborator_name.lower() not in intro.lower():
            return None

        sentences = [
            s.strip()
            for s in re.split(r"(?<=[.!?])\s+", intro)
            if collaborator_name.lower() in s.lower()
        ]
        return CollaborationDetails(
            artist1=artist_name,
            artist2=collaborator_name,
            details=" ".join(sentences[:3]),
            source=self.get_provider_name(),
        )

    def get_provider_name(self) -> str:
        return "wikipedia"

    def is_available(self) -> bool:
        return True
