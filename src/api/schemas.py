"""Pydantic response schemas for the collaboration-network API.

Defines the public contract for every REST endpoint: network graphs,
artist disambiguation options, per-edge collaboration details, cache
invalidation, health, and provider listing.

# ─── HOW SCHEMAS WORK ─────────────────────────────────────────────────
#
# These models define the *shape* of every HTTP response body.  FastAPI
# uses them for validation of outgoing data (response_model=...) and to
# generate the OpenAPI docs at /docs.
#
# Convention: response schemas end with "Response".  Domain models from
# src/models/ never leave the API directly; routes convert them here so
# presentation fields (size, color, profile_url) stay out of the core.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class NodeResponse(BaseModel):
    """One person in a rendered network."""

    id: str
    name: str
    type: str = Field(description="Primary (first-seen) role")
    types: list[str] = Field(description="All roles, first-seen order")
    size: int
    color: str
    image_url: str | None = None
    spotify_id: str | None = None
    artist_id: str | None = Field(default=None, description="Canonical identity id")
    profile_url: str | None = None
    top_collaborations: list[str] = Field(default_factory=list)


class LinkResponse(BaseModel):
    """An undirected edge between two node ids."""

    source: str
    target: str


class NetworkResponse(BaseModel):
    """A network, or the "no collaborators found" prompt.

    ``status`` is ``ok`` for a real network and ``no_collaborators`` when
    only the root was found; in that case the caller may retry with
    ``allow_hallucinations=true``.
    """

    status: str
    artist_name: str
    artist_id: str | None = None
    cached: bool = False
    source: str | None = None
    hallucinated: bool = False
    nodes: list[NodeResponse] = Field(default_factory=list)
    links: list[LinkResponse] = Field(default_factory=list)
    message: str | None = None


class ArtistOptionResponse(BaseModel):
    """One disambiguation candidate."""

    id: str
    name: str
    bio: str | None = None


class ArtistOptionsResponse(BaseModel):
    """Disambiguation list for an ambiguous search term."""

    options: list[ArtistOptionResponse] = Field(default_factory=list)


class CollaborationDetailsResponse(BaseModel):
    """What two people made together."""

    artist1: str
    artist2: str
    songs: list[str] = Field(default_factory=list)
    albums: list[str] = Field(default_factory=list)
    collaboration_type: str = "unknown"
    details: str = ""
    source: str | None = None


class InvalidateResponse(BaseModel):
    """Result of an explicit network cache invalidation."""

    artist_id: str
    cleared: bool


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    database: str
    providers: dict[str, Any]


class ProvidersResponse(BaseModel):
    """List of configured service providers and their availability."""

    providers: list[dict[str, Any]]


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
