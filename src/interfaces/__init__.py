"""Public interface definitions for all external service providers.

Every external API the network pipeline touches is reached through one of
the abstract base classes below.  Concrete adapters live in
``src/providers/`` and are wired together in ``src/main.py``; services and
the network builder only ever see the interfaces, so tests inject
``MagicMock(spec=I...)`` objects instead of real clients.

CONCRETE PROVIDER MAP:
    Interface                  →  Concrete implementations (in src/providers/)
    ─────────────────────────────────────────────────────────────────────
    ICollaboratorSource        →  GenerativeCollaboratorSource,
                                  MusicBrainzCollaboratorSource,
                                  WikipediaCollaboratorSource,
                                  KnownCollaborationsSource
    ILLMProvider               →  OpenAILLMProvider, AnthropicLLMProvider
    IImageProvider             →  SpotifyImageProvider
    IIdentityStore             →  SQLiteIdentityStore
    ICacheProvider             →  MemoryCacheProvider
"""

from src.interfaces.cache_provider import ICacheProvider
from src.interfaces.collaborator_source import ICollaboratorSource
from src.interfaces.identity_store import IIdentityStore
from src.interfaces.image_provider import ArtistImage, IImageProvider
from src.interfaces.llm_provider import ILLMProvider

__all__ = [
    "ArtistImage",
    "ICacheProvider",
    "ICollaboratorSource",
    "IIdentityStore",
    "IImageProvider",
    "ILLMProvider",
]
