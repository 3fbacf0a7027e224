"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# Values are read from two sources (in priority order):
#
#   1. **Environment variables** — e.g., API_BASE_URL=https://example.test
#   2. **.env file** — key=value lines in the project root .env file
#
# Field `recommendations_db_path` maps to env var `RECOMMENDATIONS_DB_PATH`.
# Defaults below apply when neither source sets a value.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """showrec runtime settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Catalog / enrichment backend ===
    # Serves /api/artist-genre and /api/event-description-embeddings.
    api_base_url: str = "https://showlist-proxy.aasim-ss.workers.dev"
    http_timeout: float = 10.0

    # === Persistence ===
    recommendations_db_path: str = "data/recommendations.db"

    # === Score model ===
    # When False the heuristic scorer is always selected.
    learned_model_enabled: bool = True
    learned_model_seed: int = 42

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"
    config_path: str = "config/config.yaml"
