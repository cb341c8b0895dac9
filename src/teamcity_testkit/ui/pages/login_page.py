"""Login page object.

Usage:
    LoginPage.open(page, "http://localhost:8111").login(user)
"""

import structlog
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from teamcity_testkit.core.exceptions import AuthenticationError, ValidationError
from teamcity_testkit.models.user import User
from teamcity_testkit.ui.pages.base_page import BasePage

log = structlog.get_logger(__name__)


class LoginPage(BasePage):
    """TeamCity login form."""

    path = "/login.html"

    USERNAME_INPUT = "#username"
    PASSWORD_INPUT = "#password"
    SUBMIT_BUTTON = ".loginButton"
    ERROR_MESSAGE = "#errorMessage"

    def __init__(
        self,
        page: Page,
        base_url: str,
        timeout_ms: int = 15_000,
        path: str | None = None,
    ) -> None:
        super().__init__(page, base_url, timeout_ms)
        if path is not None:
            self.path = path

    @classmethod
    def open(
        cls,
        page: Page,
        base_url: str,
        timeout_ms: int = 15_000,
        path: str | None = None,
    ) -> "LoginPage":
        """Navigate to the login page and return its page object."""
        login_page = cls(page, base_url, timeout_ms=timeout_ms, path=path)
        login_page.goto()
        return login_page

    def login(self, user: User | None) -> None:
        """Submit the credentials of ``user`` and wait to leave the login page.

        Raises:
            ValidationError: If user is None or has no password.
            AuthenticationError: If the server shows an error or the
                navigation does not happen within the timeout.
        """
        if user is None:
            raise ValidationError("User cannot be None")
        if not user.password:
            raise ValidationError(f"User {user.username} has no password")

        log.debug("login_form_submit", username=user.username)
        try:
            self.page.fill(self.USERNAME_INPUT, user.username, timeout=self.timeout_ms)
            self.page.fill(self.PASSWORD_INPUT, user.password, timeout=self.timeout_ms)
            self.page.click(self.SUBMIT_BUTTON, timeout=self.timeout_ms)
            self.page.wait_for_url(
                lambda url: self.path not in url,
                timeout=self.timeout_ms,
            )
        except PlaywrightTimeoutError as e:
            raise AuthenticationError(
                self._failure_reason(default=f"Login timed out after {self.timeout_ms} ms"),
                username=user.username,
            ) from e
        except PlaywrightError as e:
            raise AuthenticationError(
                f"Login page error: {e.message}", username=user.username
            ) from e

    def _failure_reason(self, default: str) -> str:
        """Text of the login error banner, or ``default`` when none is shown."""
        error = self.page.locator(self.ERROR_MESSAGE)
        try:
            if not error.is_visible():
                return default
            return f"Login rejected: {error.inner_text().strip()}"
        except PlaywrightError:
            # page closed while reading the banner
            return default
