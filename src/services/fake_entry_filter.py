"""Placeholder-name detection.

Language models (and, rarely, scraped text) produce obvious stand-ins --
"John Doe", "Producer X", "Artist A", "Unknown".  None of these may ever
become a node.  Matching is deliberately blunt: a lowercase substring hit
against a fixed list, plus two shape patterns.

A genuine person whose name contains a listed fragment ("Various
Cruelties", "Bo Unknown") is dropped too.  That is accepted.
"""

from __future__ import annotations

import re

from src.models.network import CollaboratorCandidate
from src.utils.logging import get_logger
from src.utils.text_normalizer import clean_name

logger = get_logger(__name__)

FAKE_NAME_FRAGMENTS: tuple[str, ...] = (
    "john doe",
    "jane doe",
    "john smith",
    "jane smith",
    "producer x",
    "songwriter y",
    "artist a",
    "artist b",
    "unknown",
    "anonymous",
    "various",
    "n/a",
    "tbd",
    "placeholder",
    "example",
    "sample",
)

# "Producer 1", "songwriter 22"
_ROLE_NUMBER_RE = re.compile(r"\b(?:artist|producer|songwriter)\s*\d+\b", re.IGNORECASE)
# "Artist Q", "producer z"
_ROLE_LETTER_RE = re.compile(r"^(?:artist|producer|songwriter)\s+[a-z]$", re.IGNORECASE)
# "X", "ab"
_TOO_SHORT_RE = re.compile(r"^[a-z]{1,2}$", re.IGNORECASE)


def is_fake(name: str) -> bool:
    """Return ``True`` if *name* looks like a placeholder rather than a person."""
    cleaned = clean_name(name)
    if not cleaned:
        return True
    lowered = cleaned.lower()
    if any(fragment in lowered for fragment in FAKE_NAME_FRAGMENTS):
        return True
    if _ROLE_NUMBER_RE.search(cleaned):
        return True
    return bool(_ROLE_LETTER_RE.match(cleaned) or _TOO_SHORT_RE.match(cleaned))


def filter_candidates(candidates: list[CollaboratorCandidate]) -> list[CollaboratorCandidate]:
    """Drop fake candidates and scrub fake names from their top collaborators.

    Order is preserved.  Candidate objects are replaced only when their
    top-collaborator list actually changes.
    """
    kept: list[CollaboratorCandidate] = []
    dropped: list[str] = []
    for candidate in candidates:
        if is_fake(candidate.name):
            dropped.append(candidate.name)
            continue
        top = [t for t in candidate.top_collaborator_names if not is_fake(t)]
        if len(top) != len(candidate.top_collaborator_names):
            candidate = candidate.model_copy(update={"top_collaborator_names": top})
        kept.append(candidate)

    if dropped:
        logger.info("fake_candidates_dropped", count=len(dropped), names=dropped[:10])
    return kept
