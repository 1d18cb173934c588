"""Name normalization helpers shared by sources, consolidation and search.

Three concerns live here:

1. **Node identity** -- :func:`identity_key` decides when two mentions are
   the same node.  Today that is the trimmed display name, compared
   case-sensitively.  Two different people with one stage name collide,
   and "Jack Antonoff" / "jack antonoff" stay apart.  Both behaviours are
   known limitations; the key is isolated here so a canonical-id based
   key can replace it without touching consolidation or branch logic.

2. **Loose comparison** -- :func:`casefold_key` for the places that
   compare case-insensitively: forced-regeneration names in the network
   cache, known-table lookups, and the root check and dedup of
   encyclopedic extraction.

3. **Fuzzy ranking** -- :func:`rank_by_similarity` orders artist-option
   candidates with rapidfuzz so "the weeknd" surfaces "The Weeknd" before
   "The Weeknd Tribute Band".
"""

import re

from rapidfuzz import fuzz, process

_WHITESPACE_RE = re.compile(r"\s+")


def clean_name(name: str) -> str:
    """Strip surrounding whitespace and collapse internal runs of spaces."""
    return _WHITESPACE_RE.sub(" ", name or "").strip()


def identity_key(name: str) -> str:
    """Return the key under which a person is stored in a network.

    Case-sensitive on purpose: ``identity_key("Bo") != identity_key("bo")``.
    """
    return clean_name(name)


def casefold_key(name: str) -> str:
    """Return a case-insensitive comparison key for *name*."""
    return clean_name(name).casefold()


def rank_by_similarity(
    query: str,
    candidates: list[str],
    limit: int = 10,
    score_cutoff: float = 0.0,
) -> list[tuple[str, float]]:
    """Rank *candidates* by similarity to *query*.

    Uses rapidfuzz ``WRatio`` which copes with partial and reordered
    tokens.  Scores are returned on a 0.0--1.0 scale.

    Args:
        query: The user's search text.
        candidates: Names to rank.
        limit: Maximum number of results.
        score_cutoff: Minimum similarity (0.0--1.0) to keep.

    Returns:
        ``(candidate, score)`` pairs, best first.
    """
    if not query or not candidates:
        return []

    matches = process.extract(
        query,
        candidates,
        scorer=fuzz.WRatio,
        processor=str.casefold,
        limit=limit,
        score_cutoff=score_cutoff * 100,
    )
    return [(match, score / 100.0) for match, score, _index in matches]
