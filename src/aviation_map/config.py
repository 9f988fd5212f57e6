"""Application configuration using Pydantic settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from ``AVIATION_MAP_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(env_prefix="AVIATION_MAP_", env_file=".env", extra="ignore")

    # Path or http(s) URL of the aviation data document
    data_source: str = "aviation_data.json"

    # Home view (Ulsan Airport)
    home_lon: float = 129.3518
    home_lat: float = 35.5934
    initial_height: float = 25_000
    home_height: float = 15_000

    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
