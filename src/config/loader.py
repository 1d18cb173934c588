"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ──────────────────────────────────────────
#
# Layers, later wins:
#
#   1. config/config.yaml  — pipeline knobs checked into the repo
#   2. .env file           — local developer overrides (not committed)
#   3. Environment vars    — deployment values
#
# load_config() reads the YAML first, then deep-merges the env-derived
# values from Settings on top:
#   base      = {"cache": {"role_ttl": 86400}}
#   overrides = {"cache": {"force_regenerate": ["LISA"]}}
#   result    = {"cache": {"role_ttl": 86400, "force_regenerate": ["LISA"]}}
#
# Lists are replaced, not concatenated, except cache.force_regenerate
# which is the union of the YAML list and FORCE_REGENERATE_ARTISTS.
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path
from typing import Any

import yaml

from src.config.settings import Settings
from src.utils.errors import ConfigurationError

_DEFAULT_CONFIG: dict[str, Any] = {
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
    "cache": {
        "role_ttl": 86400,
        "details_ttl": 3600,
        "force_regenerate": [],
    },
}

_POSITIVE_INT_KEYS = ("max_collaborators", "branch_cap", "enrichment_concurrency")


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.  A missing file is not
            an error; built-in defaults are used instead.
        settings: Settings instance to read env overrides from.  A fresh
            ``Settings()`` is created when omitted.

    Returns:
        Fully resolved configuration dictionary.

    Raises:
        ConfigurationError: If the YAML root is not a mapping or a
            pipeline count is not a positive integer.
    """
    config: dict[str, Any] = {}
    _deep_merge(config, _copy(_DEFAULT_CONFIG))

    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
        if not isinstance(yaml_config, dict):
            raise ConfigurationError(
                message=f"{config_path}: top level must be a mapping, got {type(yaml_config).__name__}"
            )
        _deep_merge(config, yaml_config)
        _validate_pipeline(config, config_path)

    settings = settings or Settings()
    yaml_forced = list(config.get("cache", {}).get("force_regenerate") or [])
    forced = yaml_forced + [
        name for name in settings.get_force_regenerate_artists() if name not in yaml_forced
    ]

    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "llm": {
            "available_providers": settings.get_available_llm_providers(),
        },
        "cache": {
            "force_regenerate": forced,
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(config, env_overrides)
    return config


def _validate_pipeline(config: dict, source: Path) -> None:
    pipeline = config.get("pipeline")
    if not isinstance(pipeline, dict):
        raise ConfigurationError(message=f"{source}: 'pipeline' must be a mapping")
    for key in _POSITIVE_INT_KEYS:
        value = pipeline.get(key)
        # YAML `true` loads as bool, an int subclass.
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigurationError(
                message=f"{source}: pipeline.{key} must be a positive integer, got {value!r}"
            )


def _copy(value: Any) -> Any:
    """Deep-copy plain dict/list config values so defaults are never mutated."""
    if isinstance(value, dict):
        return {k: _copy(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_copy(v) for v in value]
    return value


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
