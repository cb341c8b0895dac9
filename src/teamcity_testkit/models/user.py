"""User-related Pydantic models.

This module defines the user identity exchanged with the TeamCity REST API
(`/app/rest/users`) and handed to the login flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Role(BaseModel):
    """A single TeamCity role assignment.

    Example:
        role = Role(role_id="SYSTEM_ADMIN", scope="g")
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    role_id: str = Field(alias="roleId", description="Role identifier, e.g. SYSTEM_ADMIN")
    scope: str = Field(default="g", description="Role scope: g (global) or p:<project>")


class Roles(BaseModel):
    """Role container as the REST API serializes it: ``{"role": [...]}``."""

    model_config = ConfigDict(frozen=True)

    role: list[Role] = Field(default_factory=list)


class User(BaseModel):
    """User identity used for provisioning and login.

    Synthetic values come from the fixture data generator; ``id`` and any
    server-side role normalization are filled in by the admin client after
    the account is created.

    Attributes:
        username: Login name, unique per fixture bundle, never empty.
        password: Plain password (needed for the UI login, excluded from repr).
        name: Display name.
        email: Email address.
        id: Server-assigned identifier (None until provisioned).
        roles: Role assignments.

    Example:
        user = User(username="user_7f3a", password="s3cret", roles=Roles(role=[Role(role_id="SYSTEM_ADMIN")]))
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    username: str = Field(description="Login name")
    password: str | None = Field(default=None, repr=False, description="Plain password")
    name: str | None = Field(default=None, description="Display name")
    email: str | None = Field(default=None, description="Email address")
    id: int | None = Field(default=None, description="Server-assigned id")
    roles: Roles | None = Field(default=None, description="Role assignments")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Username must not be blank."""
        if not v or not v.strip():
            raise ValueError("Username must not be empty")
        return v

    @property
    def is_provisioned(self) -> bool:
        """True once the server has assigned an id."""
        return self.id is not None

    @property
    def locator(self) -> str:
        """REST locator of the account (``id:<n>`` or ``username:<name>``)."""
        if self.id is not None:
            return f"id:{self.id}"
        return f"username:{self.username}"

    def to_payload(self) -> dict[str, Any]:
        """Render the REST request body for user creation."""
        return self.model_dump(by_alias=True, exclude_none=True)
