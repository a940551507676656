"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ALLOWED_UPLOAD_TYPES = (
    "application/pdf",
    "image/jpeg",
    "image/png",
    "image/gif",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    environment: Literal["development", "production", "test"] = "development"
    auth_provider: Literal["mock", "jwt"] = "jwt"
    jwt_secret: str | None = None
    jwt_algorithm: str = "HS256"
    max_file_size: int = 10 * 1024 * 1024
    allowed_upload_types: tuple[str, ...] = DEFAULT_ALLOWED_UPLOAD_TYPES
    frontend_url: str = "http://localhost:3000"

    model_config = SettingsConfigDict(env_prefix="ASSUREME_", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
