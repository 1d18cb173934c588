"""FastAPI API routes for the collaboration-network service.

Thin handlers over the network builder, identity store and collaboration
details service.  Service dependencies are resolved from ``app.state`` via
FastAPI's ``Depends`` using the ``Annotated`` pattern.

# ─── API ROUTE MAP ────────────────────────────────────────────────────
#
# Endpoint                                    Method  Description
# ─────────────────────────────────────────────────────────────────────
# /api/v1/network/{artist_name}               GET     Build or fetch a network by name
# /api/v1/network-by-id/{artist_id}           GET     Same, by canonical id
# /api/v1/artist-options/{query}              GET     Disambiguation list
# /api/v1/collaboration/{name1}/{name2}       GET     Details for one edge
# /api/v1/network-cache/{artist_id}           DELETE  Drop a persisted network
# /api/v1/health                              GET     Health check + provider status
# /api/v1/providers                           GET     List all configured providers
#
# DEPENDENCY INJECTION PATTERN:
# Each route declares its dependencies as type-annotated params.  FastAPI
# resolves these via Depends() helpers that read from app.state (populated
# at startup in main.py's build_components).
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from src.api.presenter import NetworkPresenter
from src.api.schemas import (
    ArtistOptionResponse,
    ArtistOptionsResponse,
    CollaborationDetailsResponse,
    ErrorResponse,
    HealthResponse,
    InvalidateResponse,
    NetworkResponse,
    ProvidersResponse,
)
from src.interfaces.identity_store import IIdentityStore
from src.models.network import BuildOptions
from src.pipeline.network_builder import NetworkBuilder
from src.services.collaboration_details import CollaborationDetailsService
from src.services.network_cache import NetworkCache
from src.utils.errors import NotFoundError
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api/v1")

_VERSION = "0.1.0"
_MAX_OPTIONS = 10


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def _get_network_builder(request: Request) -> NetworkBuilder:
    """Return the network builder from application state."""
    return request.app.state.network_builder


def _get_identity_store(request: Request) -> IIdentityStore:
    """Return the identity store from application state."""
    return request.app.state.identity_store


def _get_network_cache(request: Request) -> NetworkCache:
    return request.app.state.network_cache


def _get_details_service(request: Request) -> CollaborationDetailsService:
    return request.app.state.details_service


def _get_presenter(request: Request) -> NetworkPresenter:
    return request.app.state.presenter


BuilderDep = Annotated[NetworkBuilder, Depends(_get_network_builder)]
IdentityStoreDep = Annotated[IIdentityStore, Depends(_get_identity_store)]
NetworkCacheDep = Annotated[NetworkCache, Depends(_get_network_cache)]
DetailsDep = Annotated[CollaborationDetailsService, Depends(_get_details_service)]
PresenterDep = Annotated[NetworkPresenter, Depends(_get_presenter)]


# ---------------------------------------------------------------------------
# Networks
# ---------------------------------------------------------------------------


@router.get(
    "/network/{artist_name}",
    response_model=NetworkResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Collaboration network for an artist name",
)
async def get_network(
    artist_name: str,
    builder: BuilderDep,
    presenter: PresenterDep,
    allow_hallucinations: bool = Query(default=False),
    refresh: bool = Query(default=False),
) -> NetworkResponse:
    """Return the network for *artist_name*, from cache when possible.

    404 if the name is not a known artist.
    """
    options = BuildOptions(allow_hallucinations=allow_hallucinations, force_refresh=refresh)
    try:
        outcome = await builder.build_for_name(artist_name, options)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
    return presenter.network(outcome, artist_name)


@router.get(
    "/network-by-id/{artist_id}",
    response_model=NetworkResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Collaboration network for a canonical artist id",
)
async def get_network_by_id(
    artist_id: str,
    builder: BuilderDep,
    presenter: PresenterDep,
    allow_hallucinations: bool = Query(default=False),
    refresh: bool = Query(default=False),
) -> NetworkResponse:
    options = BuildOptions(allow_hallucinations=allow_hallucinations, force_refresh=refresh)
    try:
        outcome = await builder.build_for_id(artist_id, options)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
    return presenter.network(outcome, artist_id)


@router.delete(
    "/network-cache/{artist_id}",
    response_model=InvalidateResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Invalidate a persisted network",
)
async def invalidate_network(
    artist_id: str,
    identity_store: IdentityStoreDep,
    cache: NetworkCacheDep,
) -> InvalidateResponse:
    if await identity_store.get_by_id(artist_id) is None:
        raise HTTPException(status_code=404, detail=f"Artist id '{artist_id}' not found")
    cleared = await cache.invalidate(artist_id)
    return InvalidateResponse(artist_id=artist_id, cleared=cleared)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


@router.get(
    "/artist-options/{query}",
    response_model=ArtistOptionsResponse,
    summary="Disambiguation options for a search term",
)
async def artist_options(query: str, identity_store: IdentityStoreDep) -> ArtistOptionsResponse:
    options = await identity_store.search_options(query, limit=_MAX_OPTIONS)
    _logger.info("artist_options_lookup", query=query, options=len(options))
    return ArtistOptionsResponse(
        options=[ArtistOptionResponse(id=o.id, name=o.name, bio=o.bio) for o in options]
    )


@router.get(
    "/collaboration/{name1}/{name2}",
    response_model=CollaborationDetailsResponse,
    summary="Details of one collaboration edge",
)
async def collaboration_details(
    name1: str,
    name2: str,
    details_service: DetailsDep,
) -> CollaborationDetailsResponse:
    details = await details_service.get_details(name1, name2)
    return CollaborationDetailsResponse(
        artist1=details.artist1,
        artist2=details.artist2,
        songs=details.songs,
        albums=details.albums,
        collaboration_type=details.collaboration_type.value,
        details=details.details,
        source=details.source,
    )


# ---------------------------------------------------------------------------
# Health / providers
# ---------------------------------------------------------------------------


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Return application health, version, and provider availability."""
    providers: dict[str, Any] = {}
    if hasattr(request.app.state, "provider_registry"):
        providers = dict(request.app.state.provider_registry)

    database = "connected"
    identity_store = getattr(request.app.state, "identity_store", None)
    if identity_store is None:
        database = "unavailable"
    else:
        try:
            await identity_store.get_by_id("__health__")
        except Exception as exc:
            _logger.warning("health_database_check_failed", error=str(exc))
            database = "error"

    if database != "connected":
        status = "unhealthy"
    elif providers.get("llm", False):
        status = "healthy"
    else:
        status = "degraded"

    return HealthResponse(
        status=status,
        version=_VERSION,
        database=database,
        providers=providers,
    )


@router.get(
    "/providers",
    response_model=ProvidersResponse,
    summary="List configured providers",
)
async def list_providers(request: Request) -> ProvidersResponse:
    """List all configured providers, their types, and availability status."""
    providers: list[dict[str, Any]] = []
    if hasattr(request.app.state, "provider_list"):
        providers = request.app.state.provider_list

    return ProvidersResponse(providers=providers)
