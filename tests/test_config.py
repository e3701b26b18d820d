"""
Tests for core.config module.
"""

import pytest


class TestSettings:
    """Tests for Settings class."""

    def test_values_loaded(self):
        """Test that settings are loaded from environment."""
        from buildqueue.core.config import Settings

        settings = Settings()
        assert settings.codeship_username == "ci-user"
        assert settings.codeship_password == "secret"
        assert settings.codeship_organization == "acme"
        assert settings.ci_project_id == "project-uuid"
        assert settings.ci_build_id == "build-uuid"

    def test_default_values(self, monkeypatch):
        """Test that default values are set correctly."""
        monkeypatch.delenv("CODESHIP_API_URL", raising=False)
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        from buildqueue.core.config import Settings
        settings = Settings()

        assert settings.codeship_api_url == "https://api.codeship.com/v2"
        assert settings.log_level == "INFO"

    def test_api_url_trailing_slash_stripped(self, monkeypatch):
        """Test CODESHIP_API_URL is normalized."""
        monkeypatch.setenv("CODESHIP_API_URL", "http://localhost:8080/v2/")

        from buildqueue.core.config import Settings
        settings = Settings()

        assert settings.codeship_api_url == "http://localhost:8080/v2"

    def test_require_passes(self):
        """Test require() accepts a full environment."""
        from buildqueue.core.config import Settings

        Settings().require()

    @pytest.mark.parametrize(
        "env_name",
        ["CODESHIP_USERNAME", "CODESHIP_PASSWORD", "CODESHIP_ORGANIZATION", "CI_PROJECT_ID", "CI_BUILD_ID"],
    )
    def test_require_names_missing_variable(self, monkeypatch, env_name):
        """Test require() reports which variable is missing."""
        monkeypatch.setenv(env_name, "")

        from buildqueue.core.config import Settings
        from buildqueue.core.exceptions import ConfigurationError

        with pytest.raises(ConfigurationError, match=f"{env_name} required"):
            Settings().require()

    def test_require_reports_first_missing(self, monkeypatch):
        """Test the first missing variable in order is reported."""
        monkeypatch.setenv("CODESHIP_ORGANIZATION", "")
        monkeypatch.setenv("CI_BUILD_ID", "  ")

        from buildqueue.core.config import Settings
        from buildqueue.core.exceptions import ConfigurationError

        with pytest.raises(ConfigurationError, match="CODESHIP_ORGANIZATION required"):
            Settings().require()
