"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Any

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shortshift.youtube.schemas import PrivacyStatus


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "ShortShift"
    app_env: str = "development"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # YouTube OAuth (long-lived refresh token flow)
    youtube_client_id: str = ""
    youtube_client_secret: SecretStr = SecretStr("")
    youtube_refresh_token: SecretStr = SecretStr("")
    youtube_token_uri: str = "https://oauth2.googleapis.com/token"
    youtube_scopes: str = "https://www.googleapis.com/auth/youtube.upload"
    youtube_default_privacy: PrivacyStatus = PrivacyStatus.PRIVATE

    # Intake form
    next_public_default_hashtags: str = ""

    # Uploads
    max_file_size: int = 1024 * 1024 * 1024  # 1GiB
    upload_chunk_size: int = 10 * 1024 * 1024  # 10MB
    max_upload_duration_seconds: float = 120

    @field_validator("youtube_default_privacy", mode="before")
    @classmethod
    def _blank_privacy_is_private(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return PrivacyStatus.PRIVATE
        return value

    @property
    def scopes_list(self) -> list[str]:
        """Return YouTube scopes as a list."""
        return self.youtube_scopes.split()

    @property
    def has_youtube_credentials(self) -> bool:
        """Check whether every value needed for a token refresh is set."""
        return bool(
            self.youtube_client_id
            and self.youtube_client_secret.get_secret_value()
            and self.youtube_refresh_token.get_secret_value()
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
