"""Harness exception hierarchy.

This module defines the base exception class and specialized exceptions
for the failures a session fixture can run into before a test body starts.
"""


class HarnessError(Exception):
    """Base exception for all harness errors.

    All custom exceptions in the harness inherit from this class so a test
    report can tell harness failures apart from assertion failures.
    """

    pass


class ConfigurationError(HarnessError):
    """Raised when configuration is invalid or missing.

    Example:
        raise ConfigurationError("No super user token configured")
    """

    pass


class ValidationError(HarnessError):
    """Raised when a required input is missing or empty.

    Never substituted with a default: the caller gets this immediately.

    Example:
        raise ValidationError("User cannot be None")
    """

    pass


class ExternalServiceError(HarnessError):
    """Raised when a call to the server under test fails.

    Attributes:
        service: Name or base URL of the service that failed.
        status_code: HTTP status code if available, None otherwise.

    Example:
        raise ExternalServiceError(service="teamcity", message="Bad gateway", status_code=502)
    """

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        self.service = service
        self.status_code = status_code
        super().__init__(f"{service}: {message}")


class ProvisioningError(ExternalServiceError):
    """Raised when the admin API rejects or cannot create an account.

    Covers conflicts (user already exists), authorization errors of the
    super user and transport failures.

    Example:
        raise ProvisioningError(service="teamcity", message="Duplicate user", status_code=409)
    """

    pass


class AuthenticationError(HarnessError):
    """Raised when a session cannot be established for a provisioned user.

    Attributes:
        username: The user the login was attempted for.
    """

    def __init__(self, message: str, username: str | None = None) -> None:
        super().__init__(message)
        self.username = username


class ContextNotInitializedError(HarnessError):
    """Raised when fixture data is read before it was stored.

    Signals a marker/hook ordering bug, e.g. reading the bundle of a test
    that is not marked with ``user_session``.

    Attributes:
        activity_id: Token of the test activity that was asked.
    """

    def __init__(self, message: str, activity_id: str | None = None) -> None:
        super().__init__(message)
        self.activity_id = activity_id


class StructuralIncompatibilityError(HarnessError):
    """Raised when a test object cannot hold fixture data.

    Only raised in strict mode. By default the coordinator logs a warning
    and runs the test without a session.

    Attributes:
        type_name: Qualified name of the incompatible test class.
    """

    def __init__(self, type_name: str) -> None:
        super().__init__(
            f"Test instance {type_name} does not implement FixtureHolder; "
            "derive the test class from teamcity_testkit.BaseTest"
        )
        self.type_name = type_name
