from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings

_PROJECT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _PROJECT_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Flour Mill Ledger API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["http://localhost:5173"]

    # Record storage: "remote" uses the relational database, "local" keeps
    # all records as one JSON blob in a key-value store on disk.
    record_backend: Literal["remote", "local"] = "remote"
    database_url: str = "sqlite:///./flour_mill.db"
    database_echo: bool = False
    local_storage_dir: str = "data/local_storage"
    local_storage_key: str = "wheatStore_customerRecords"

    # Name matching used by search when the caller does not pick one
    search_mode: Literal["exact", "contains"] = "exact"

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine — SQL queries
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_store: str = "INFO"            # record service + storage adapters

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
