# app/config.py

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Facility Reporting API"
    app_env: str = "development"
    debug: bool = True
    frontend_url: str = "http://localhost:3000"

    # Supabase
    supabase_url: str
    supabase_service_role_key: str

    # Comparison config
    comparison_history_limit: int = 100
    use_ndwh_master: bool = True  # NDWH holds the complete master list for both systems

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
