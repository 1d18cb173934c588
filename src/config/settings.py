"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# Values are read from two places, highest priority first:
#
#   1. Environment variables, e.g. OPENAI_API_KEY=sk-abc123
#   2. The .env file in the project root (local development only)
#
# Field ``spotify_client_id`` maps to env var ``SPOTIFY_CLIENT_ID``.
# An empty string means "not configured": the matching provider reports
# ``is_available() == False`` and the pipeline skips it.
#
# Static pipeline knobs (branch cap, node sizes, colours) live in
# config/config.yaml instead; see src/config/loader.py.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Collaboration-network service settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === LLM Providers ===
    openai_api_key: str = ""
    openai_base_url: str = ""  # OpenAI-compatible endpoints (TogetherAI, Groq, ...)
    openai_text_model: str = ""  # defaults to gpt-4o when empty
    anthropic_api_key: str = ""
    anthropic_model: str = ""  # defaults to the adapter's built-in model when empty

    # === MusicBrainz (no key, but a user agent is mandatory) ===
    musicbrainz_app_name: str = "collabNetwork"
    musicbrainz_app_version: str = "0.1.0"
    musicbrainz_contact: str = ""

    # === Wikipedia ===
    wikipedia_api_url: str = "https://en.wikipedia.org/w/api.php"

    # === Spotify (client-credentials flow, images only) ===
    spotify_client_id: str = ""
    spotify_client_secret: str = ""

    # === Identity store / persisted networks ===
    identity_db_path: str = "data/artists.db"
    profile_base_url: str = "https://musicnerd.xyz"

    # Comma-separated artist names whose cached network is never trusted
    # (known-ambiguous names whose disambiguation was fixed after caching).
    force_regenerate_artists: str = ""

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    def get_available_llm_providers(self) -> list[str]:
        """Return LLM provider names that have non-empty API keys configured."""
        providers: list[str] = []
        if self.openai_api_key:
            providers.append("openai")
        if self.anthropic_api_key:
            providers.append("anthropic")
        return providers

    def get_force_regenerate_artists(self) -> list[str]:
        """Split ``force_regenerate_artists`` into a clean list of names."""
        return [n.strip() for n in self.force_regenerate_artists.split(",") if n.strip()]
