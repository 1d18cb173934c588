"""Collaborator source adapters, in fallback-chain order.

    - GenerativeCollaboratorSource   — LLM-reported credits
    - MusicBrainzCollaboratorSource  — MusicBrainz relations and recording credits
    - WikipediaCollaboratorSource    — phrase mining of article intros
    - KnownCollaborationsSource      — curated static table
"""

from src.providers.sources.generative_source import GenerativeCollaboratorSource
from src.providers.sources.known_collaborations import KnownCollaborationsSource
from src.providers.sources.musicbrainz_source import MusicBrainzCollaboratorSource
from src.providers.sources.wikipedia_source import WikipediaCollaboratorSource

__all__ = [
    "GenerativeCollaboratorSource",
    "KnownCollaborationsSource",
    "MusicBrainzCollaboratorSource",
    "WikipediaCollaboratorSource",
]
