"""Utility modules for the collaboration-network service.

- **errors** -- exception hierarchy rooted at CollabNetworkError; each
  recoverable condition has its own subclass so the pipeline can degrade
  precisely instead of catching everything.
- **concurrency** -- semaphore-bounded ``asyncio.gather`` for per-node
  lookups that must not cancel each other on failure.
- **logging** -- structlog setup: coloured console in development,
  JSON in production.
- **text_normalizer** -- node identity key, case-insensitive keys and
  rapidfuzz ranking of artist names.
"""

# -- Domain exception hierarchy --------------------------------------------
from src.utils.errors import (
    AdapterUnavailableError,
    CacheWriteFailedError,
    CollabNetworkError,
    ConfigurationError,
    LLMError,
    MalformedAdapterOutputError,
    MetadataLookupFailedError,
    NotFoundError,
    PipelineError,
    RateLimitError,
)

# -- Async concurrency helpers ---------------------------------------------
from src.utils.concurrency import throttled_gather

# -- Structured logging setup ----------------------------------------------
from src.utils.logging import configure_logging, get_logger

# -- Name normalization ----------------------------------------------------
from src.utils.text_normalizer import (
    casefold_key,
    clean_name,
    identity_key,
    rank_by_similarity,
)

__all__ = [
    "AdapterUnavailableError",
    "CacheWriteFailedError",
    "CollabNetworkError",
    "ConfigurationError",
    "LLMError",
    "MalformedAdapterOutputError",
    "MetadataLookupFailedError",
    "NotFoundError",
    "PipelineError",
    "RateLimitError",
    "casefold_key",
    "clean_name",
    "configure_logging",
    "get_logger",
    "identity_key",
    "rank_by_similarity",
    "throttled_gather",
]
