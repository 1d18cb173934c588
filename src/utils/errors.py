"""Custom exception hierarchy for the collaboration-network service.

All application exceptions inherit from :class:`CollabNetworkError`, which
carries an optional ``provider_name`` so handlers and log lines can say
which external service (e.g. "openai", "musicbrainz", "spotify") was
involved.

The hierarchy mirrors how each failure is recovered:

    CollabNetworkError  (base)
    +-- NotFoundError                (artist absent from identity store -> 404)
    +-- AdapterUnavailableError      (source unconfigured / unreachable -> next adapter)
    +-- MalformedAdapterOutputError  (unparseable adapter payload -> empty result)
    +-- MetadataLookupFailedError    (image / identity enrichment -> field left null)
    +-- CacheWriteFailedError        (persisting a network failed -> logged only)
    +-- LLMError                     (any LLM SDK call failure)
    +-- RateLimitError               (provider answered HTTP 429)
    +-- PipelineError                (orchestrator itself failed)
    +-- ConfigurationError           (startup / missing config)

Only ``NotFoundError`` and ``PipelineError`` are meant to reach an HTTP
client; everything else degrades to "fewer collaborators".
"""


class CollabNetworkError(Exception):
    """Base exception for all collaboration-network errors.

    The ``__str__`` method prefixes the provider name in brackets,
    e.g. ``[musicbrainz] Artist lookup failed``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Identity errors
# ---------------------------------------------------------------------------

class NotFoundError(CollabNetworkError):
    """Raised when an artist name or id is not present in the identity store.

    This is the one fatal condition of network generation; the API layer
    turns it into a 404.
    """

    def __init__(
        self,
        message: str = "Artist not found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Source adapter errors (recovered by the fallback chain)
# ---------------------------------------------------------------------------

class AdapterUnavailableError(CollabNetworkError):
    """Raised when a collaborator source is unconfigured or unreachable.

    The source chain catches this and moves on to the next adapter.
    """

    def __init__(
        self,
        message: str = "Collaborator source is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class MalformedAdapterOutputError(CollabNetworkError):
    """Raised when an adapter's payload cannot be parsed into candidates."""

    def __init__(
        self,
        message: str = "Adapter returned malformed output",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class RateLimitError(CollabNetworkError):
    """Raised when an external API rejects a request with HTTP 429."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class LLMError(CollabNetworkError):
    """Raised when an LLM API call fails or returns an empty response."""

    def __init__(
        self,
        message: str = "LLM API call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Enrichment / persistence errors (logged, never surfaced)
# ---------------------------------------------------------------------------

class MetadataLookupFailedError(CollabNetworkError):
    """Raised when an image or canonical-id lookup for a node fails."""

    def __init__(
        self,
        message: str = "Metadata lookup failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class CacheWriteFailedError(CollabNetworkError):
    """Raised when a finished network could not be persisted."""

    def __init__(
        self,
        message: str = "Network cache write failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Orchestration / configuration errors
# ---------------------------------------------------------------------------

class PipelineError(CollabNetworkError):
    """Raised when the network builder fails in a way it cannot degrade from."""

    def __init__(
        self,
        message: str = "Network generation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(CollabNetworkError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
