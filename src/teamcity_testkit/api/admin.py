"""Administrative client for TeamCity account provisioning.

All calls run with super user privileges. One instance is created per test
run by the pytest plugin and shared by every test in the worker process.
"""

from typing import Any

import structlog

from teamcity_testkit.api.base import BaseAPIClient
from teamcity_testkit.api.endpoints import Endpoint
from teamcity_testkit.config.settings import Settings
from teamcity_testkit.core.exceptions import (
    ExternalServiceError,
    ProvisioningError,
    ValidationError,
)
from teamcity_testkit.models.user import User

log = structlog.get_logger(__name__)


class AdminClient(BaseAPIClient):
    """Creates and removes user accounts through the TeamCity REST API.

    Endpoints used:
        - GET /app/rest/server - server version, credentials check
        - POST /app/rest/users - create a user
        - DELETE /app/rest/users/{locator} - delete a user

    Example:
        with AdminClient.from_settings(get_settings()) as admin:
            created = admin.create_user(bundle.user)
            assert created.id is not None
    """

    SERVICE_NAME = "teamcity"

    @classmethod
    def from_settings(cls, settings: Settings) -> "AdminClient":
        """Build a client from harness settings."""
        return cls(
            base_url=settings.base_url,
            timeout=settings.api_timeout,
            auth=settings.admin_auth,
            max_attempts=settings.api_max_attempts,
        )

    def server_info(self) -> dict[str, Any]:
        """Server description from /app/rest/server.

        Needs valid admin credentials, so it doubles as a credentials check.

        Raises:
            ExternalServiceError: If the server is unreachable or rejects the call.
        """
        return self.get(Endpoint.SERVER.value).json()

    def create_user(self, user: User | None) -> User:
        """Create ``user`` on the server.

        Args:
            user: Identity to create.

        Returns:
            The identity with server-assigned fields populated. The password
            of the request is kept since the server never returns it.

        Raises:
            ValidationError: If user is None.
            ProvisioningError: If the server rejects the request or cannot be reached.
        """
        if user is None:
            raise ValidationError("User cannot be None")

        log.info("user_create_started", username=user.username)
        try:
            response = self.post(Endpoint.USERS.value, json=user.to_payload())
        except ExternalServiceError as e:
            log.error(
                "user_create_failed",
                username=user.username,
                status_code=e.status_code,
            )
            raise ProvisioningError(
                service=self.SERVICE_NAME,
                message=f"Cannot create user {user.username}: {e}",
                status_code=e.status_code,
            ) from e

        try:
            body = response.json()
            if not isinstance(body, dict):
                raise ValueError(f"expected a JSON object, got {type(body).__name__}")
            created = User.model_validate({**user.to_payload(), **body})
        except ValueError as e:
            raise ProvisioningError(
                service=self.SERVICE_NAME,
                message=f"Unexpected response creating user {user.username}: {e}",
                status_code=response.status_code,
            ) from e

        log.info("user_created", username=created.username, user_id=created.id)
        return created

    def delete_user(self, user: User | None) -> None:
        """Delete ``user`` from the server.

        A user that no longer exists counts as deleted.

        Raises:
            ValidationError: If user is None.
            ProvisioningError: If the server rejects the request.
        """
        if user is None:
            raise ValidationError("User cannot be None")

        try:
            self.delete(Endpoint.USERS.item(user.locator))
        except ExternalServiceError as e:
            if e.status_code == 404:
                log.debug("user_already_deleted", username=user.username)
                return
            raise ProvisioningError(
                service=self.SERVICE_NAME,
                message=f"Cannot delete user {user.username}: {e}",
                status_code=e.status_code,
            ) from e

        log.info("user_deleted", username=user.username, user_id=user.id)
