"""Harness settings using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """TeamCity test harness configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TESTKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server under test
    base_url: str = Field(
        default="http://localhost:8111", description="TeamCity server base URL"
    )

    # Administrative access
    superuser_token: SecretStr = Field(
        default=SecretStr(""), description="TeamCity super user authentication token"
    )
    admin_username: str | None = Field(
        default=None, description="Admin username (used instead of the super user token)"
    )
    admin_password: SecretStr | None = Field(default=None, description="Admin password")
    api_timeout: float = Field(default=10.0, gt=0, description="REST request timeout (s)")
    api_max_attempts: int = Field(
        default=3, ge=1, le=10, description="Attempts per REST request before failing"
    )

    # UI
    login_path: str = Field(default="/login.html", description="Login page path")
    ui_timeout_ms: int = Field(
        default=15_000, ge=1_000, description="Timeout for UI login actions (ms)"
    )
    page_fixture: str = Field(
        default="page", description="Fixture providing the Playwright page"
    )

    # Fixture data
    username_prefix: str = Field(default="user_", min_length=1)
    default_role: str = Field(default="SYSTEM_ADMIN", description="Role granted to generated users")
    default_role_scope: str = Field(default="g", description="Scope of the granted role")

    # Session lifecycle
    strict_fixture_holder: bool = Field(
        default=False,
        description="Fail tests whose class cannot hold fixture data instead of warning",
    )
    deprovision_users: bool = Field(
        default=False, description="Delete provisioned users after each test"
    )

    # Logging
    debug: bool = Field(default=False, description="Pretty console logs")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate server URL format and drop the trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("TeamCity URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("login_path")
    @classmethod
    def validate_login_path(cls, v: str) -> str:
        """Login path must be absolute."""
        if not v.startswith("/"):
            raise ValueError("Login path must start with /")
        return v

    @property
    def admin_auth(self) -> tuple[str, str]:
        """Basic auth pair for administrative requests.

        TeamCity accepts the super user token as a password with an empty
        username. Explicit admin credentials take precedence.
        """
        if self.admin_username:
            password = self.admin_password.get_secret_value() if self.admin_password else ""
            return (self.admin_username, password)
        return ("", self.superuser_token.get_secret_value())


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
