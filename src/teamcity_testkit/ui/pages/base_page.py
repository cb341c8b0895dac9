"""Base page object for the TeamCity web UI."""

from playwright.sync_api import Page


class BasePage:
    """Common state of all page objects.

    Attributes:
        page: The Playwright page driven by this object.
        base_url: Server base URL without trailing slash.
        timeout_ms: Default timeout for waits on this page.
    """

    path = "/"

    def __init__(self, page: Page, base_url: str, timeout_ms: int = 15_000) -> None:
        self.page = page
        self.base_url = base_url.rstrip("/")
        self.timeout_ms = timeout_ms

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.path}"

    def goto(self) -> "BasePage":
        """Navigate to this page and wait for the DOM to load."""
        self.page.goto(self.url, wait_until="domcontentloaded", timeout=self.timeout_ms)
        return self
