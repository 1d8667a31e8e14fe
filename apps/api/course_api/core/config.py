"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    storage_backend: Literal["memory", "sqlite"] = "memory"
    database_path: str = "courses.db"
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)
    auth_realm: str = "courses"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="COURSES_", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
