"""Playwright E2E fixtures for tests against a live TeamCity server.

This module provides:
- Browser context and launch configuration for pytest-playwright
- A reachability check that skips E2E tests when no server is running
  or the admin credentials are rejected

The server and admin credentials come from TESTKIT_* variables, e.g.:

    TESTKIT_BASE_URL=http://localhost:8111 \\
    TESTKIT_SUPERUSER_TOKEN=1234567890 \\
    pytest tests/e2e -m e2e
"""

import os
import socket
from typing import Any

import httpx
import pytest

from teamcity_testkit.api import AdminClient
from teamcity_testkit.config.settings import Settings, get_settings
from teamcity_testkit.core.exceptions import ExternalServiceError

# =============================================================================
# Server Availability
# =============================================================================


def server_available(settings: Settings, timeout: float = 2.0) -> bool:
    """True if the TeamCity port accepts connections."""
    url = httpx.URL(settings.base_url)
    port = url.port or (443 if url.scheme == "https" else 80)
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.settimeout(timeout)
    try:
        return sock.connect_ex((url.host, port)) == 0
    finally:
        sock.close()


def admin_access_problem(settings: Settings) -> str | None:
    """Why the admin API is unusable, or None if it answers."""
    with AdminClient.from_settings(settings) as admin:
        try:
            admin.server_info()
        except ExternalServiceError as e:
            return f"TeamCity admin API unavailable: {e}"
    return None


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    e2e_items = [item for item in items if item.get_closest_marker("e2e")]
    if not e2e_items:
        return

    settings = get_settings()
    reason = None
    if not server_available(settings):
        reason = f"TeamCity not reachable at {settings.base_url}"
    elif not any(settings.admin_auth):
        reason = "No TESTKIT_SUPERUSER_TOKEN or TESTKIT_ADMIN_USERNAME configured"
    else:
        reason = admin_access_problem(settings)

    if reason is None:
        return
    skip = pytest.mark.skip(reason=reason)
    for item in e2e_items:
        item.add_marker(skip)


# =============================================================================
# pytest-playwright Configuration
# =============================================================================


@pytest.fixture(scope="session")
def browser_context_args(browser_context_args: dict[str, Any]) -> dict[str, Any]:
    """Configure browser context for the TeamCity UI."""
    return {
        **browser_context_args,
        "viewport": {"width": 1920, "height": 1080},
        "ignore_https_errors": True,
    }


@pytest.fixture(scope="session")
def browser_type_launch_args(browser_type_launch_args: dict[str, Any]) -> dict[str, Any]:
    """Configure browser launch arguments."""
    return {
        **browser_type_launch_args,
        "headless": os.environ.get("HEADED", "0") != "1",
        "slow_mo": int(os.environ.get("SLOW_MO", "0")),
    }
