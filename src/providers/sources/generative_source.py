"""Generative collaborator source backed by an LLM.

First adapter in the fallback chain.  The model is asked for real
producers and songwriters who worked with an artist, in a fixed JSON
shape, together with each person's own frequent collaborators (used for
the second ring of the network).

Two passes exist:

- **factual** (:meth:`fetch_collaborators`) -- temperature 0.1, JSON
  mode, verified credits only.  Used by the normal fallback chain.
- **creative** (:meth:`fetch_creative_collaborators`) -- higher
  temperature and an instruction to propose plausible names.  Only the
  network builder calls it, and only when the caller opted into
  hallucinated networks and nothing authentic was found.

Accepted reply shapes::

    {"collaborators": [{"name": "...", "roles": ["producer"], "topCollaborators": ["..."]}]}
    {"artists":       [{"name": "...", "type": "songwriter", "topCollaborators": ["..."]}]}

One candidate is produced per kept role.  Only ``producer`` and
``songwriter`` are kept; an entry without any recognisable role is treated
as a producer.
"""

from __future__ import annotations

from typing import Any

import structlog

from src.interfaces.collaborator_source import ICollaboratorSource
from src.interfaces.llm_provider import ILLMProvider
from src.models.network import (
    CollaborationDetails,
    CollaborationType,
    CollaboratorCandidate,
    Role,
)
from src.utils.errors import AdapterUnavailableError, LLMError, MalformedAdapterOutputError
from src.utils.json_extract import extract_json_object
from src.utils.text_normalizer import clean_name

logger = structlog.get_logger(logger_name=__name__)

_FACTUAL_TEMPERATURE = 0.1
_CREATIVE_TEMPERATURE = 0.7
_DETAILS_TEMPERATURE = 0.1
_MAX_TOKENS = 2000

_KEPT_ROLES = (Role.PRODUCER, Role.SONGWRITER)

# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

_SYSTEM_PROMPT = (
    "You are a music industry expert with detailed knowledge of production "
    "and songwriting credits. Only name real people with real, verifiable "
    "credits. Always respond with valid JSON and nothing else."
)

_FACTUAL_PROMPT = """\
List up to {limit} real producers and songwriters who have worked with the artist "{artist}".
For each person also list up to 3 other artists they have worked with most often.

Return JSON in exactly this shape:
{{"collaborators": [{{"name": "Full Name", "roles": ["producer", "songwriter"], "topCollaborators": ["Artist 1", "Artist 2", "Artist 3"]}}]}}

Rules:
- Only include people with verifiable credits on {artist}'s music.
- "roles" may only contain "producer" and/or "songwriter".
- Never use placeholder names such as "Producer X" or "John Doe".
- If you do not know any real collaborators, return {{"collaborators": []}}.
"""

_CREATIVE_PROMPT = """\
There is no verified collaboration data for the artist "{artist}".
Suggest 5 producers and 5 songwriters who would plausibly have worked with
them, judging by their genre, era and scene. Prefer real, active industry
professionals. For each person list up to 3 artists they are known for.

Return JSON in exactly this shape:
{{"collaborators": [{{"name": "Full Name", "roles": ["producer"], "topCollaborators": ["Artist 1", "Artist 2", "Artist 3"]}}]}}

Never use placeholder names such as "Producer X" or "John Doe".
"""

_DETAILS_PROMPT = """\
Describe the collaboration between "{artist}" and "{collaborator}".

Return JSON in exactly this shape:
{{"songs": ["Song title"], "albums": ["Album title"], "collaborationType": "production", "details": "One or two sentences."}}

"collaborationType" must be one of: production, songwriting, performance, remix, unknown.
Only list songs and albums you are certain they worked on together.
If you know of no collaboration, return empty lists and "unknown".
"""

_TOP_COLLABORATORS_PROMPT = """\
Name up to {limit} artists that the producer or songwriter "{person}" has worked with most often.

Return JSON in exactly this shape:
{{"artists": ["Artist 1", "Artist 2"]}}

Only list real artists with verifiable credits. If you do not know, return {{"artists": []}}.
"""


class GenerativeCollaboratorSource(ICollaboratorSource):
    """Collaborator source that asks an LLM.

    Parameters
    ----------
    llm:
        Any :class:`ILLMProvider`.
    max_collaborators:
        Upper bound on people requested and accepted per reply.
    """

    def __init__(self, llm: ILLMProvider, max_collaborators: int = 10) -> None:
        self._llm = llm
        self._max_collaborators = max_collaborators

    # ------------------------------------------------------------------
    # ICollaboratorSource implementation
    # ------------------------------------------------------------------

    async def fetch_collaborators(self, artist_name: str) -> list[CollaboratorCandidate]:
        """Factual pass: verified producers and songwriters."""
        prompt = _FACTUAL_PROMPT.format(artist=artist_name, limit=self._max_collaborators)
        payload = await self._ask(prompt, _FACTUAL_TEMPERATURE)
        candidates = self._parse_candidates(payload, artist_name, relation_label="llm credit")
        logger.info(
            "generative_source_collaborators",
            artist=artist_name,
            candidates=len(candidates),
        )
        return candidates

    async def fetch_creative_collaborators(self, artist_name: str) -> list[CollaboratorCandidate]:
        """Creative pass: plausible but unverified collaborators."""
        prompt = _CREATIVE_PROMPT.format(artist=artist_name)
        payload = await self._ask(prompt, _CREATIVE_TEMPERATURE)
        candidates = self._parse_candidates(payload, artist_name, relation_label="generated")
        logger.info(
            "generative_source_creative_collaborators",
            artist=artist_name,
            candidates=len(candidates),
        )
        return candidates

    async def fetch_collaboration_details(
        self, artist_name: str, collaborator_name: str
    ) -> CollaborationDetails | None:
        prompt = _DETAILS_PROMPT.format(artist=artist_name, collaborator=collaborator_name)
        payload = await self._ask(prompt, _DETAILS_TEMPERATURE)

        songs = _string_list(payload.get("songs"))
        albums = _string_list(payload.get("albums"))
        raw_type = str(payload.get("collaborationType") or "unknown").strip().lower()
        try:
            collaboration_type = CollaborationType(raw_type)
        except ValueError:
            collaboration_type = CollaborationType.UNKNOWN
        details = str(payload.get("details") or "").strip()

        result = CollaborationDetails(
            artist1=artist_name,
            artist2=collaborator_name,
            songs=songs,
            albums=albums,
            collaboration_type=collaboration_type,
            details=details,
            source=self.get_provider_name(),
        )
        return None if result.is_empty() else result

    async def fetch_top_collaborators(self, person_name: str, limit: int = 3) -> list[str]:
        """Artists *person_name* worked with most, for the second ring."""
        prompt = _TOP_COLLABORATORS_PROMPT.format(person=person_name, limit=limit)
        payload = await self._ask(prompt, _FACTUAL_TEMPERATURE)
        names = [n for n in _string_list(payload.get("artists")) if n != person_name]
        return names[:limit]

    def get_provider_name(self) -> str:
        return f"generative:{self._llm.get_provider_name()}"

    def is_available(self) -> bool:
        return self._llm.is_available()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _ask(self, prompt: str, temperature: float) -> dict[str, Any]:
        """Send *prompt* and return the recovered JSON object."""
        if not self.is_available():
            raise AdapterUnavailableError(
                message="No LLM credentials configured",
                provider_name=self.get_provider_name(),
            )
        try:
            reply = await self._llm.complete(
                system_prompt=_SYSTEM_PROMPT,
                user_prompt=prompt,
                temperature=temperature,
                max_tokens=_MAX_TOKENS,
                json_mode=True,
            )
        except LLMError as exc:
            raise AdapterUnavailableError(
                message=f"LLM call failed: {exc.message}",
                provider_name=self.get_provider_name(),
            ) from exc

        try:
            return extract_json_object(reply)
        except ValueError as exc:
            logger.warning(
                "generative_source_malformed_reply",
                error=str(exc),
                preview=reply[:200],
            )
            raise MalformedAdapterOutputError(
                message=f"Could not parse LLM reply: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    def _parse_candidates(
        self,
        payload: dict[str, Any],
        artist_name: str,
        relation_label: str,
    ) -> list[CollaboratorCandidate]:
        entries = payload.get("collaborators")
        if entries is None:
            entries = payload.get("artists", [])
        if not isinstance(entries, list):
            raise MalformedAdapterOutputError(
                message="'collaborators' is not a list",
                provider_name=self.get_provider_name(),
            )

        candidates: list[CollaboratorCandidate] = []
        accepted_people = 0
        for entry in entries:
            if accepted_people >= self._max_collaborators:
                break
            if not isinstance(entry, dict):
                continue
            name = clean_name(str(entry.get("name") or ""))
            if not name or name == artist_name:
                continue

            roles = _entry_roles(entry)
            if not roles:
                continue

            top = [t for t in _string_list(entry.get("topCollaborators")) if t != name]
            for role in roles:
                candidates.append(
                    CollaboratorCandidate(
                        name=name,
                        role=role,
                        relation_label=relation_label,
                        top_collaborator_names=top,
                        source=self.get_provider_name(),
                    )
                )
            accepted_people += 1

        return candidates


def _entry_roles(entry: dict[str, Any]) -> list[Role]:
    """Kept roles of one reply entry, in order, without duplicates.

    Missing or unrecognised roles default to producer; an entry whose only
    recognised roles fall outside producer/songwriter yields nothing.
    """
    raw = entry.get("roles")
    if raw is None:
        raw = [entry.get("type")]
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        raw = []

    parsed = [r for r in (Role.parse(v) for v in raw) if r is not None]
    if not parsed:
        return [Role.PRODUCER]

    kept: list[Role] = []
    for role in parsed:
        if role in _KEPT_ROLES and role not in kept:
            kept.append(role)
    return kept


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    out: list[str] = []
    for item in value:
        if isinstance(item, str):
            cleaned = clean_name(item)
            if cleaned and cleaned not in out:
                out.append(cleaned)
    return out
