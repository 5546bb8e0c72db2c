"""
Centralized configuration via Pydantic BaseSettings + python-dotenv.
All environment variables are loaded from .env (or system env) and validated.

The Darija weights and thresholds below are calibration defaults tuned against
a labelled corpus; re-validate them before relying on them for a new corpus.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application-wide settings — never hard-code values; use .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Application ---
    app_name: str = "DarijaLangID"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    json_logs: bool = True

    # --- API Server ---
    host: str = "0.0.0.0"
    port: int = 8000

    # --- Input validation ---
    min_text_length: int = 3

    # --- Darija scorer ---
    darija_threshold: float = 0.65
    weight_keywords: float = 0.45
    weight_code_switching: float = 0.30
    weight_morphological: float = 0.15
    weight_idiomatic: float = 0.08
    weight_script_mixing: float = 0.02
    max_indicators: int = 10

    # --- Decision merger ---
    indicator_boost: float = 0.08
    indicator_boost_cap: int = 5

    # --- In-process result cache ---
    cache_max_size: int = 1000
    cache_ttl_seconds: float = 300.0

    # --- General classifier (local) ---
    langdetect_seed: int = 0

    # --- Remote tier ---
    remote_enabled: bool = False
    darija_model_url: str = ""
    general_model_url: str = ""
    remote_api_key: str = ""
    remote_timeout_ms: float = 400.0
    remote_confidence_threshold: float = 0.85
    remote_general_override: float = 0.95

    # --- Persistent cross-process cache ---
    redis_url: str = ""
    persistent_cache_ttl_seconds: int = 86400
    persistent_cache_prefix: str = "lang-detect:"

    # --- Telemetry ---
    telemetry_buffer_size: int = 256

    @property
    def remote_configured(self) -> bool:
        return self.remote_enabled and bool(self.darija_model_url and self.general_model_url)


def get_settings() -> Settings:
    """Factory — allows easy overriding in tests."""
    return Settings()
