"""
Configuration settings for userdb.

Uses Pydantic Settings to load environment variables for the database file,
the insertion worker pool, dataset generation, and logging. CLI flags take
precedence over anything loaded here.
"""
from __future__ import annotations

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    db_path: str = Field("test.db", alias="USERDB_DB_PATH")

    # Insertion
    workers: int = Field(4, alias="USERDB_WORKERS", ge=1)
    dataset_size: int = Field(10_000, alias="USERDB_DATASET_SIZE", ge=0)
    name_length: int = Field(15, alias="USERDB_NAME_LENGTH", ge=1)

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    json_logs: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
