"""Unit tests for factory functions in src/main.py.

Covers LLM provider selection, build_components assembly and the
create_app factory, with every credential blank so no real network calls
are made.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi import FastAPI

from src.config.settings import Settings


# ======================================================================
# Shared helpers
# ======================================================================


def _settings(tmp_path: Path, **overrides) -> Settings:
    defaults = {
        "openai_api_key": "",
        "openai_base_url": "",
        "anthropic_api_key": "",
        "spotify_client_id": "",
        "spotify_client_secret": "",
        "identity_db_path": str(tmp_path / "artists.db"),
        "app_env": "test",
    }
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)


# ======================================================================
# _build_llm_provider
# ======================================================================


class TestBuildLLMProvider:

    def test_openai_priority(self, tmp_path: Path) -> None:
        from src.main import _build_llm_provider

        llm = _build_llm_provider(_settings(tmp_path, openai_api_key="sk-x", anthropic_api_key="ak-y"))
        assert llm.get_provider_name() == "openai"

    def test_anthropic_fallback(self, tmp_path: Path) -> None:
        from src.main import _build_llm_provider

        llm = _build_llm_provider(_settings(tmp_path, anthropic_api_key="ak-y"))
        assert llm.get_provider_name() == "anthropic"

    def test_no_keys_returns_unavailable_provider(self, tmp_path: Path) -> None:
        from src.main import _build_llm_provider

        llm = _build_llm_provider(_settings(tmp_path))
        assert llm.is_available() is False


# ======================================================================
# build_components
# ======================================================================


class TestBuildComponents:

    @pytest.mark.asyncio
    async def test_all_components_present(self, tmp_path: Path, mock_config: dict) -> None:
        from src.main import build_components

        components = build_components(_settings(tmp_path), mock_config)
        try:
            for key in (
                "http_client",
                "identity_store",
                "network_builder",
                "network_cache",
                "details_service",
                "presenter",
                "provider_registry",
                "provider_list",
            ):
                assert key in components
            assert components["provider_registry"]["llm"] is False
            assert components["provider_registry"]["known_table"] is True
        finally:
            await components["http_client"].aclose()

    @pytest.mark.asyncio
    async def test_source_priority_order(self, tmp_path: Path, mock_config: dict) -> None:
        from src.main import build_components

        components = build_components(_settings(tmp_path, openai_api_key="sk-x"), mock_config)
        try:
            sources = [p for p in components["provider_list"] if p["type"] == "collaborator_source"]
            assert [p["priority"] for p in sources] == [1, 2, 3, 4]
            assert sources[0]["name"] == "generative:openai"
            assert sources[-1]["name"] == "known"
        finally:
            await components["http_client"].aclose()


# ======================================================================
# create_app
# ======================================================================


class TestCreateApp:

    def test_routes_registered(self) -> None:
        from src.main import create_app

        app = create_app()
        assert isinstance(app, FastAPI)
        paths = set(app.openapi()["paths"])
        assert "/api/v1/network/{artist_name}" in paths
        assert "/api/v1/collaboration/{name1}/{name2}" in paths
        assert "/api/v1/health" in paths
