"""
Configuration settings for the Patient Dashboard.
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Record store (any SQLAlchemy URL; postgresql:// is routed through psycopg)
    database_url: str = "sqlite:///./patients.db"
    database_echo: bool = False

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"
    json_logs: bool = False

    # API Settings
    api_prefix: str = "/api"
    project_name: str = "Patient Dashboard"
    cors_origins: list = ["http://localhost:5173", "http://127.0.0.1:5173"]

    # Listing
    default_page_limit: int = 10
    max_page_limit: int = 100

    # Dashboard client
    api_base_url: str = "http://localhost:8000/api"
    client_timeout: float = 10.0
    refetch_delay: float = 0.1  # seconds between a mutation and the refetch

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
