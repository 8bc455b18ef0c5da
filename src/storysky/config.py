"""StorySky configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Environment
    environment: str = "development"

    # Storage
    storage_backend: str = "file"  # "file" or "memory"
    data_file: str = "data.json"
    activity_file: str = "userActivity.json"

    # Web push
    vapid_file: str = "vapid.json"
    vapid_subject: str = "mailto:admin@storysky.local"

    # HTTP
    cors_origins: list[str] = ["*"]
    host: str = "0.0.0.0"
    port: int = 4000

    @field_validator("storage_backend")
    @classmethod
    def _check_backend(cls, value: str) -> str:
        value = value.lower()
        if value not in ("file", "memory"):
            raise ValueError("storage_backend must be 'file' or 'memory'")
        return value

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def uses_file_storage(self) -> bool:
        return self.storage_backend == "file"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
