"""
Application configuration via environment variables (12-factor).
Pydantic BaseSettings validates and coerces all values at startup.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ------------------------------------------------------------------
    # Upstream LLM providers
    # ------------------------------------------------------------------
    # Keys are optional: every endpoint also accepts a per-request api_key,
    # which takes precedence over the configured one.
    nvidia_api_key:    str = ""
    nvidia_base_url:   str = "https://integrate.api.nvidia.com/v1"

    openai_api_key:    str = ""
    openai_base_url:   str = "https://api.openai.com/v1"

    anthropic_api_key: str = ""
    anthropic_version: str = "2023-06-01"

    gemini_api_key:    str = ""

    llm_request_timeout: float = 60.0   # seconds, passed to the provider SDKs

    # ------------------------------------------------------------------
    # Request limits
    # ------------------------------------------------------------------
    max_input_chars:    int = 4_000
    max_history_messages: int = 8     # chat turns forwarded upstream

    # ------------------------------------------------------------------
    # Application
    # ------------------------------------------------------------------
    app_env: str = "development"   # development | staging | production
    debug: bool = False

    cors_origins: list[str] = ["http://localhost:3000"]

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
