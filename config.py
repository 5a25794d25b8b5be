"""
Configuration module for the SAML programmatic access service.
"""
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # AWS Configuration
    aws_region: str = "us-east-1"
    sts_endpoint_url: str | None = None  # Optional, e.g. a regional STS endpoint

    # Per-role session duration overrides, role ARN -> seconds.
    # Set as JSON: SESSION_DURATION_OVERRIDES='{"arn:aws:iam::123456789012:role/RoleName": 14400}'
    # Each role has its own MaxSessionDuration (15 minutes to 12 hours); asking for
    # more than that makes STS reject the request.
    session_duration_overrides: dict[str, int] = {}

    # Preference Storage
    preferences_file: str = str(Path.home() / ".saml-access" / "preferences.json")

    # Application Configuration
    app_name: str = "SAML Programmatic Access"
    app_version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"

    # CORS Configuration
    cors_origins: list[str] = ["https://signin.aws.amazon.com"]

    @property
    def duration_overrides(self) -> Mapping[str, int]:
        """Get a read-only view of the session duration overrides."""
        return MappingProxyType(dict(self.session_duration_overrides))


# Global settings instance
settings = Settings()
