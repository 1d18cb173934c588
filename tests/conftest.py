"""Shared pytest fixtures for the collabNetwork test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.config.settings import Settings
from src.interfaces.identity_store import IIdentityStore
from src.interfaces.llm_provider import ILLMProvider
from src.models.network import ArtistIdentity


# ---------------------------------------------------------------------------
# Settings / config
# ---------------------------------------------------------------------------


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings with every remote credential blank and a temp database."""
    return Settings(
        openai_api_key="",
        anthropic_api_key="",
        spotify_client_id="",
        spotify_client_secret="",
        identity_db_path=str(tmp_path / "artists.db"),
        force_regenerate_artists="",
        _env_file=None,
    )


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Return a minimal resolved configuration for presenter / wiring tests."""
    return {
        "pipeline": {
            "max_collaborators": 10,
            "branch_cap": 3,
            "enrichment_concurrency": 5,
            "cross_links": False,
        },
        "node_sizes": {"primary": 30, "secondary": 20, "branch": 15},
        "role_colors": {
            "artist": "#FF69B4",
            "producer": "#8A2BE2",
            "songwriter": "#00CED1",
        },
        "cache": {"role_ttl": 86400, "details_ttl": 3600, "force_regenerate": []},
    }


# ---------------------------------------------------------------------------
# Mock collaborators
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_llm() -> MagicMock:
    """A configured LLM provider whose ``complete`` returns an empty object."""
    llm = MagicMock(spec=ILLMProvider)
    llm.complete = AsyncMock(return_value="{}")
    llm.get_provider_name.return_value = "openai"
    llm.is_available.return_value = True
    return llm


@pytest.fixture
def mock_identity_store() -> MagicMock:
    store = MagicMock(spec=IIdentityStore)
    store.initialize = AsyncMock()
    store.get_by_name = AsyncMock(return_value=None)
    store.get_by_id = AsyncMock(return_value=None)
    store.search_options = AsyncMock(return_value=[])
    store.read_network = AsyncMock(return_value=None)
    store.write_network = AsyncMock(return_value=True)
    store.clear_network = AsyncMock(return_value=True)
    return store


@pytest.fixture
def ada() -> ArtistIdentity:
    return ArtistIdentity(name="Ada", canonical_id="id-ada")
