"""collabNetwork FastAPI application entry point.

Wires together all providers, services, and routes via dependency injection.
Loads configuration from ``.env`` and ``config/config.yaml`` and configures
structured logging.

:func:`build_components` is also used by the CLI (``python -m src.cli build``)
to run the same pipeline outside the web server.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from src.api.presenter import NetworkPresenter
from src.api.routes import router as api_router
from src.config.loader import load_config
from src.config.settings import Settings
from src.interfaces.collaborator_source import ICollaboratorSource
from src.interfaces.llm_provider import ILLMProvider
from src.pipeline.network_builder import NetworkBuilder
from src.providers.cache.memory_cache import MemoryCacheProvider
from src.providers.identity.sqlite_identity_store import SQLiteIdentityStore
from src.providers.image.spotify_provider import SpotifyImageProvider
from src.providers.llm.anthropic_provider import AnthropicLLMProvider
from src.providers.llm.openai_provider import OpenAILLMProvider
from src.providers.sources.generative_source import GenerativeCollaboratorSource
from src.providers.sources.known_collaborations import KnownCollaborationsSource
from src.providers.sources.musicbrainz_source import MusicBrainzCollaboratorSource
from src.providers.sources.wikipedia_source import WikipediaCollaboratorSource
from src.services.branch_expander import BranchExpander
from src.services.collaboration_details import CollaborationDetailsService
from src.services.metadata_enricher import MetadataEnricher
from src.services.network_cache import NetworkCache
from src.services.node_consolidator import NodeConsolidator
from src.services.role_detection import RoleDetectionService
from src.services.source_chain import SourceChain
from src.utils.logging import configure_logging, get_logger

_VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# LLM provider selection
# ---------------------------------------------------------------------------


def _build_llm_provider(app_settings: Settings) -> ILLMProvider:
    """Select the first LLM provider with a configured API key.

    Priority order: OpenAI (native JSON mode) -> Anthropic.  With no key at
    all an unconfigured OpenAI provider is returned; it reports itself
    unavailable and every LLM-backed step is skipped.
    """
    if app_settings.openai_api_key:
        return OpenAILLMProvider(settings=app_settings)
    if app_settings.anthropic_api_key:
        return AnthropicLLMProvider(settings=app_settings)
    return OpenAILLMProvider(settings=app_settings)


# ---------------------------------------------------------------------------
# Full DI assembly
# ---------------------------------------------------------------------------


def build_components(
    app_settings: Settings,
    app_config: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    app_config = app_config or load_config(settings=app_settings)
    pipeline_cfg = app_config["pipeline"]
    cache_cfg = app_config["cache"]

    # -- Shared resources --
    http_client = httpx.AsyncClient(timeout=20.0)
    cache = MemoryCacheProvider(ttl=max(int(cache_cfg["role_ttl"]), int(cache_cfg["details_ttl"])))
    identity_store = SQLiteIdentityStore(db_path=app_settings.identity_db_path)

    # -- LLM --
    primary_llm = _build_llm_provider(app_settings)

    # -- Collaborator sources, in fallback order --
    generative = GenerativeCollaboratorSource(
        llm=primary_llm,
        max_collaborators=int(pipeline_cfg["max_collaborators"]),
    )
    musicbrainz = MusicBrainzCollaboratorSource(settings=app_settings)
    wikipedia = WikipediaCollaboratorSource(
        http_client=http_client,
        api_url=app_settings.wikipedia_api_url,
    )
    known = KnownCollaborationsSource()
    sources: list[ICollaboratorSource] = [generative, musicbrainz, wikipedia, known]

    # -- Metadata --
    spotify = SpotifyImageProvider(settings=app_settings, http_client=http_client)
    concurrency = int(pipeline_cfg["enrichment_concurrency"])

    # -- Services --
    network_cache = NetworkCache(
        identity_store=identity_store,
        force_regenerate=list(cache_cfg["force_regenerate"]),
    )
    role_detector = RoleDetectionService(
        llm=primary_llm,
        cache=cache,
        ttl=int(cache_cfg["role_ttl"]),
    )
    branch_expander = BranchExpander(
        branch_cap=int(pipeline_cfg["branch_cap"]),
        cross_links=bool(pipeline_cfg["cross_links"]),
        top_collaborator_lookup=generative.fetch_top_collaborators if generative.is_available() else None,
        concurrency=concurrency,
    )
    enricher = MetadataEnricher(
        image_provider=spotify,
        identity_store=identity_store,
        concurrency=concurrency,
    )
    details_service = CollaborationDetailsService(
        sources=[generative, musicbrainz, wikipedia, known],
        cache=cache,
        ttl=int(cache_cfg["details_ttl"]),
    )

    network_builder = NetworkBuilder(
        identity_store=identity_store,
        source_chain=SourceChain(sources),
        consolidator=NodeConsolidator(),
        branch_expander=branch_expander,
        enricher=enricher,
        cache=network_cache,
        role_detector=role_detector,
        creative_source=generative,
    )

    presenter = NetworkPresenter(
        config=app_config,
        profile_base_url=app_settings.profile_base_url,
    )

    # -- Provider registry for /health --
    provider_registry: dict[str, bool] = {
        "llm": primary_llm.is_available(),
        "musicbrainz": musicbrainz.is_available(),
        "wikipedia": wikipedia.is_available(),
        "known_table": True,
        "spotify": spotify.is_available(),
        "cache": True,
    }

    # -- Provider list for /providers --
    provider_list: list[dict[str, Any]] = [
        {"name": llm, "type": "llm", "available": True}
        for llm in app_settings.get_available_llm_providers()
    ]
    for position, source in enumerate(sources, start=1):
        provider_list.append({
            "name": source.get_provider_name(),
            "type": "collaborator_source",
            "priority": position,
            "available": source.is_available(),
        })
    provider_list.append({"name": "spotify", "type": "image", "available": spotify.is_available()})
    provider_list.append({"name": "sqlite", "type": "identity_store", "available": True})

    return {
        "http_client": http_client,
        "identity_store": identity_store,
        "network_builder": network_builder,
        "network_cache": network_cache,
        "details_service": details_service,
        "presenter": presenter,
        "provider_registry": provider_registry,
        "provider_list": provider_list,
        "primary_llm_name": primary_llm.get_provider_name(),
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    components = build_components(settings, config)

    for key, value in components.items():
        setattr(application.state, key, value)

    await components["identity_store"].initialize()

    _logger.info(
        "app_startup",
        version=_VERSION,
        environment=settings.app_env,
        primary_llm=components["primary_llm_name"],
        providers=len(components["provider_list"]),
    )

    yield

    # -- Shutdown: close shared httpx client --
    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="collabNetwork API",
        version=_VERSION,
        description=(
            "Build a two-ring collaboration network for a music artist: the "
            "producers, songwriters and artists they worked with, and the "
            "people those collaborators worked with."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    # -- API routes --
    application.include_router(api_router)

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
