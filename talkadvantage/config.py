from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # Completion provider: "openrouter" (OpenAI-compatible) or "anthropic"
    llm_provider: str = "openrouter"

    # API Keys
    openrouter_api_key: str = ""
    openai_api_key: str = ""
    anthropic_api_key: str = ""

    # Supabase (optional; analysis results are only persisted when set)
    supabase_url: str = ""
    supabase_key: str = ""

    # Upstream endpoints and models
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    llm_model: str = "mistralai/mistral-7b-instruct"
    anthropic_model: str = "claude-sonnet-4-20250514"
    drift_model: str = "anthropic/claude-3-opus-20240229"
    embedding_model: str = "text-embedding-3-small"
    llm_temperature: float = 0.7
    llm_timeout_seconds: float = 120.0
    max_concurrent_requests: int = 8

    # Sent to OpenRouter as HTTP-Referer / X-Title
    app_url: str = "http://localhost:3000"
    app_title: str = "TalkAdvantage"

    # App config
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"
    chunk_size: int = 450
    search_k: int = 3
    hotlink_cooldown_seconds: float = 10.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
