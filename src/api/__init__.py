"""Collaboration-network API layer: routes, schemas, presenter, and middleware."""

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from src.api.presenter import NetworkPresenter
from src.api.routes import router
from src.api.schemas import (
    ArtistOptionsResponse,
    CollaborationDetailsResponse,
    ErrorResponse,
    HealthResponse,
    NetworkResponse,
    ProvidersResponse,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "router",
    "NetworkPresenter",
    "ArtistOptionsResponse",
    "CollaborationDetailsResponse",
    "ErrorResponse",
    "HealthResponse",
    "NetworkResponse",
    "ProvidersResponse",
]
