from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from . import __version__


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "Weekly Developer Chronicle"
    app_version: str = __version__

    # Upstream APIs
    github_token: str | None = None
    github_api_base_url: str | None = None
    zenn_api_base_url: str | None = None
    cache_ttl: int = 300
    no_cache: bool = False

    # AI commentary
    openai_api_key: str | None = None
    anthropic_api_key: str | None = None
    gemini_api_key: str | None = None
    commentary_provider: str = "openai"
    commentary_model: str = "gpt-4.1-nano"
    commentary_daily_limit: int = 3


@lru_cache
def get_settings() -> Settings:
    return Settings()
