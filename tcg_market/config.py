"""
tcg_market/config.py – application settings loaded from environment variables.
"""
from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Upstream card API ─────────────────────────────────────────────────────
    pokemon_tcg_api_key: str = ""
    upstream_base_url: str = "https://api.pokemontcg.io/v2/cards"
    upstream_user_agent: str = "Mozilla/5.0 Pokemon TCG Market App"
    upstream_api_key_header: str = "X-Api-Key"

    # ── Retry ─────────────────────────────────────────────────────────────────
    fetch_max_attempts: int = 3
    fetch_timeout_seconds: float = 60.0
    fetch_backoff_seconds: float = 1.0

    # ── Cache ─────────────────────────────────────────────────────────────────
    cache_ttl_seconds: float = 300
    cache_max_entries: int = 100

    # ── Server ────────────────────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 3000
    static_dir: str = "public"
    cors_origins: list[str] = ["*"]

    # ── App ───────────────────────────────────────────────────────────────────
    app_name: str = "Pokemon TCG Market API"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"


settings = Settings()
