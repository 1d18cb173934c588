"""Unit tests for Settings and the YAML configuration loader."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.config.loader import _deep_merge, load_config
from src.config.settings import Settings
from src.utils.errors import ConfigurationError


# ======================================================================
# Settings
# ======================================================================


class TestSettings:

    def test_defaults(self) -> None:
        s = Settings(_env_file=None)
        assert s.identity_db_path == "data/artists.db"
        assert s.app_port == 8000
        assert s.musicbrainz_app_name == "collabNetwork"

    def test_available_llm_providers(self, settings: Settings) -> None:
        assert settings.get_available_llm_providers() == []
        both = Settings(openai_api_key="sk-x", anthropic_api_key="ak-y", _env_file=None)
        assert both.get_available_llm_providers() == ["openai", "anthropic"]

    def test_force_regenerate_split(self) -> None:
        s = Settings(force_regenerate_artists=" LISA , ,Kanye West,", _env_file=None)
        assert s.get_force_regenerate_artists() == ["LISA", "Kanye West"]

    def test_env_override(self, monkeypatch) -> None:
        monkeypatch.setenv("SPOTIFY_CLIENT_ID", "client-123")
        assert Settings(_env_file=None).spotify_client_id == "client-123"


# ======================================================================
# load_config
# ======================================================================


class TestLoadConfig:

    def test_missing_file_uses_defaults(self, tmp_path: Path, settings: Settings) -> None:
        config = load_config(str(tmp_path / "absent.yaml"), settings=settings)
        assert config["pipeline"]["branch_cap"] == 3
        assert config["node_sizes"]["primary"] == 30
        assert config["cache"]["force_regenerate"] == []
        assert config["llm"]["available_providers"] == []

    def test_yaml_overrides_defaults(self, tmp_path: Path, settings: Settings) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("pipeline:\n  branch_cap: 5\nrole_colors:\n  artist: '#000000'\n")

        config = load_config(str(path), settings=settings)

        assert config["pipeline"]["branch_cap"] == 5
        assert config["pipeline"]["max_collaborators"] == 10
        assert config["role_colors"]["artist"] == "#000000"
        assert config["role_colors"]["producer"] == "#8A2BE2"

    def test_forced_names_union(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("cache:\n  force_regenerate:\n    - LISA\n")
        settings = Settings(force_regenerate_artists="LISA,Drake", _env_file=None)

        config = load_config(str(path), settings=settings)

        assert config["cache"]["force_regenerate"] == ["LISA", "Drake"]

    def test_env_sections(self, tmp_path: Path) -> None:
        settings = Settings(app_port=9000, log_level="DEBUG", _env_file=None)
        config = load_config(str(tmp_path / "absent.yaml"), settings=settings)
        assert config["app"]["port"] == 9000
        assert config["logging"]["level"] == "DEBUG"

    def test_repo_config_loads(self, project_root: Path, settings: Settings) -> None:
        config = load_config(str(project_root / "config" / "config.yaml"), settings=settings)
        assert "LISA" in config["cache"]["force_regenerate"]

    def test_defaults_not_mutated(self, tmp_path: Path, settings: Settings) -> None:
        first = load_config(str(tmp_path / "absent.yaml"), settings=settings)
        first["pipeline"]["branch_cap"] = 99
        second = load_config(str(tmp_path / "absent.yaml"), settings=settings)
        assert second["pipeline"]["branch_cap"] == 3


class TestConfigValidation:

    def test_non_mapping_root_rejected(self, tmp_path: Path, settings: Settings) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(str(path), settings=settings)

    @pytest.mark.parametrize("value", ["0", "-2", "three", "true"])
    def test_bad_branch_cap_rejected(self, tmp_path: Path, settings: Settings, value: str) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(f"pipeline:\n  branch_cap: {value}\n")
        with pytest.raises(ConfigurationError, match="pipeline.branch_cap"):
            load_config(str(path), settings=settings)

    def test_pipeline_must_be_mapping(self, tmp_path: Path, settings: Settings) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("pipeline: 5\n")
        with pytest.raises(ConfigurationError):
            load_config(str(path), settings=settings)


class TestDeepMerge:

    def test_nested_merge_and_list_replace(self) -> None:
        base = {"a": {"b": 1, "c": [1, 2]}, "d": 1}
        _deep_merge(base, {"a": {"c": [3]}, "e": 2})
        assert base == {"a": {"b": 1, "c": [3]}, "d": 1, "e": 2}
