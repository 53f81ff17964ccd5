from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    DB_BACKEND: str = "sqlite"
    SQLITE_PATH: str = "./data/observatory.db"
    CORS_ORIGINS: str = ""  # Comma-separated origins, empty = same-origin only

    # Load the demo schools and reports on startup when the database is empty
    SEED_DEMO_DATA: bool = False

    # Number of schools listed in the dashboard's top-readiness table
    TOP_SCHOOLS_LIMIT: int = 5

    # Reject requests without an X-User-Role header.  When off, such requests
    # act as super_admin (local development behind no gateway).
    AUTH_ENABLED: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()
