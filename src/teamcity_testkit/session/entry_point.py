"""Session entry points: turn a provisioned user into a logged-in session."""

from typing import TYPE_CHECKING, Protocol

import structlog

from teamcity_testkit.config.settings import Settings
from teamcity_testkit.core.exceptions import AuthenticationError, ValidationError
from teamcity_testkit.models.user import User
from teamcity_testkit.ui.pages.login_page import LoginPage

if TYPE_CHECKING:
    from teamcity_testkit.session.coordinator import TestActivity

log = structlog.get_logger(__name__)


class SessionEntryPoint(Protocol):
    """Authentication flow run after the user has been provisioned.

    ``required_fixtures`` names the fixtures the flow reads from
    ``activity.resources``; the plugin makes marked tests request them.
    """

    required_fixtures: tuple[str, ...]

    def login(self, user: User, activity: "TestActivity") -> None: ...


class UiLoginEntryPoint:
    """Logs in through the TeamCity login form with Playwright.

    The browser page is the one pytest-playwright hands to the test, so the
    test body continues in the authenticated browser context.
    """

    def __init__(self, settings: Settings) -> None:
        self.base_url = settings.base_url
        self.login_path = settings.login_path
        self.timeout_ms = settings.ui_timeout_ms
        self.page_fixture = settings.page_fixture
        self.required_fixtures: tuple[str, ...] = (settings.page_fixture,)

    def login(self, user: User | None, activity: "TestActivity") -> None:
        """Open the login page of the activity's browser and sign in.

        Raises:
            ValidationError: If user is None.
            AuthenticationError: If no page is available or the login fails.
        """
        if user is None:
            raise ValidationError("User cannot be None")

        page = activity.resources.get(self.page_fixture)
        if page is None:
            raise AuthenticationError(
                f"Fixture '{self.page_fixture}' is not available for {activity.name}",
                username=user.username,
            )

        log.info("ui_login_started", username=user.username, test=activity.name)
        LoginPage.open(
            page,
            self.base_url,
            timeout_ms=self.timeout_ms,
            path=self.login_path,
        ).login(user)
        log.info("ui_login_succeeded", username=user.username, test=activity.name)
