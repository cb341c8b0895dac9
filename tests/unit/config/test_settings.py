"""Tests for settings configuration."""

import pydantic
import pytest

from teamcity_testkit.config.settings import Settings, get_settings


class TestSettings:
    """Test settings loading and validation."""

    def test_defaults(self, clean_env: None) -> None:
        """
        Given: No TESTKIT_* variables and no .env file
        When: Settings is created
        Then: Defaults point at a local server in lenient mode
        """
        settings = Settings(_env_file=None)

        assert settings.base_url == "http://localhost:8111"
        assert settings.login_path == "/login.html"
        assert settings.api_max_attempts == 3
        assert settings.page_fixture == "page"
        assert settings.strict_fixture_holder is False
        assert settings.deprovision_users is False

    def test_settings_loads_from_env(
        self, clean_env: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("TESTKIT_BASE_URL", "https://ci.example.com/")
        monkeypatch.setenv("TESTKIT_SUPERUSER_TOKEN", "1234567890")
        monkeypatch.setenv("TESTKIT_STRICT_FIXTURE_HOLDER", "true")
        monkeypatch.setenv("TESTKIT_UI_TIMEOUT_MS", "30000")

        settings = get_settings()

        assert settings.base_url == "https://ci.example.com"
        assert settings.superuser_token.get_secret_value() == "1234567890"
        assert settings.strict_fixture_holder is True
        assert settings.ui_timeout_ms == 30_000

    def test_get_settings_is_cached(self, clean_env: None) -> None:
        assert get_settings() is get_settings()

    @pytest.mark.parametrize("url", ["localhost:8111", "ftp://teamcity", ""])
    def test_base_url_requires_http_scheme(self, clean_env: None, url: str) -> None:
        with pytest.raises(pydantic.ValidationError, match="http:// or https://"):
            Settings(_env_file=None, base_url=url)

    def test_login_path_must_be_absolute(self, clean_env: None) -> None:
        with pytest.raises(pydantic.ValidationError, match="must start with /"):
            Settings(_env_file=None, login_path="login.html")

    def test_max_attempts_bounds(self, clean_env: None) -> None:
        with pytest.raises(pydantic.ValidationError):
            Settings(_env_file=None, api_max_attempts=0)

    def test_token_is_hidden(self, clean_env: None) -> None:
        settings = Settings(_env_file=None, superuser_token="1234567890")
        assert "1234567890" not in repr(settings)


class TestAdminAuth:
    def test_super_user_token_with_empty_username(self, clean_env: None) -> None:
        settings = Settings(_env_file=None, superuser_token="1234567890")
        assert settings.admin_auth == ("", "1234567890")

    def test_explicit_credentials_take_precedence(self, clean_env: None) -> None:
        settings = Settings(
            _env_file=None,
            superuser_token="1234567890",
            admin_username="admin",
            admin_password="adminpass",
        )
        assert settings.admin_auth == ("admin", "adminpass")

    def test_username_without_password(self, clean_env: None) -> None:
        settings = Settings(_env_file=None, admin_username="admin")
        assert settings.admin_auth == ("admin", "")
