"""Ordered fallback over collaborator source adapters.

Adapters are tried one at a time, in the order given, by a single loop.
The first adapter that yields at least one usable candidate wins and no
later adapter is called.  An adapter that raises, returns nothing, or
returns only placeholder names counts as "nothing"; the loop moves on.

Adapters are never fanned out in parallel: each one further down the
list is slower or more rate-limited than the last.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from src.interfaces.collaborator_source import ICollaboratorSource
from src.models.network import CollaboratorCandidate
from src.services.fake_entry_filter import is_fake
from src.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ChainOutcome:
    """What the chain produced for one artist.

    ``source`` is ``None`` when every adapter came back empty.
    ``attempted`` lists adapter names in the order they were called.
    """

    source: str | None
    candidates: list[CollaboratorCandidate] = field(default_factory=list)
    attempted: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.candidates


class SourceChain:
    """First-non-empty-wins loop over :class:`ICollaboratorSource` adapters."""

    def __init__(
        self,
        sources: list[ICollaboratorSource],
        entry_filter: Callable[[str], bool] = is_fake,
    ) -> None:
        self._sources = list(sources)
        self._is_fake = entry_filter

    @property
    def sources(self) -> list[ICollaboratorSource]:
        return list(self._sources)

    async def run(self, artist_name: str) -> ChainOutcome:
        attempted: list[str] = []
        for source in self._sources:
            name = source.get_provider_name()
            if not source.is_available():
                logger.debug("source_chain_adapter_skipped", adapter=name, reason="unavailable")
                continue

            attempted.append(name)
            try:
                candidates = await source.fetch_collaborators(artist_name)
            except Exception as exc:
                logger.warning(
                    "source_chain_adapter_failed",
                    adapter=name,
                    artist=artist_name,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                continue

            usable = [c for c in candidates or [] if not self._is_fake(c.name)]
            if usable:
                logger.info(
                    "source_chain_adapter_succeeded",
                    adapter=name,
                    artist=artist_name,
                    candidates=len(candidates),
                    usable=len(usable),
                )
                return ChainOutcome(source=name, candidates=list(candidates), attempted=attempted)

            logger.info("source_chain_adapter_empty", adapter=name, artist=artist_name)

        logger.info("source_chain_exhausted", artist=artist_name, attempted=attempted)
        return ChainOutcome(source=None, attempted=attempted)
