"""
Application configuration using pydantic-settings.
All environment variables are validated and typed.
"""

import os
from pydantic_settings import BaseSettings
from pydantic import field_validator

from buildqueue.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Codeship credentials
    codeship_username: str = ""
    codeship_password: str = ""
    codeship_organization: str = ""

    # Provided by Codeship inside every build
    ci_project_id: str = ""
    ci_build_id: str = ""

    # Constants with defaults
    codeship_api_url: str = "https://api.codeship.com/v2"
    log_level: str = "INFO"

    @field_validator(
        "codeship_username",
        "codeship_organization",
        "ci_project_id",
        "ci_build_id",
        mode="before",
    )
    @classmethod
    def _strip(cls, value: str | None) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("codeship_api_url", mode="before")
    @classmethod
    def _normalize_api_url(cls, value: str | None) -> str:
        cleaned = str(value or "").strip().rstrip("/")
        return cleaned or "https://api.codeship.com/v2"

    def require(self) -> None:
        """
        Ensure every required setting is present.

        Raises:
            ConfigurationError: Naming the first missing environment variable
        """
        required = (
            ("codeship_username", "CODESHIP_USERNAME"),
            ("codeship_password", "CODESHIP_PASSWORD"),
            ("codeship_organization", "CODESHIP_ORGANIZATION"),
            ("ci_project_id", "CI_PROJECT_ID"),
            ("ci_build_id", "CI_BUILD_ID"),
        )
        for field, env_name in required:
            if not getattr(self, field):
                raise ConfigurationError(f"{env_name} required")

    model_config = {
        "env_file": os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), ".env"),
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

