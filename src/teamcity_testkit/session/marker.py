"""The ``user_session`` marker.

Attach it to a test, a test class or a module (``pytestmark``); any of
them is enough for the test to get a provisioned user and a logged-in
browser before its body runs.

Usage:
    from teamcity_testkit import user_session

    @user_session
    class TestDashboard(BaseTest):
        def test_can_view_dashboard(self, page): ...
"""

import pytest

MARKER_NAME = "user_session"
MARKER_HELP = (
    f"{MARKER_NAME}: provision a fresh TeamCity user and log in before the test "
    "(applies to tests, classes and modules)"
)

user_session = getattr(pytest.mark, MARKER_NAME)


def requires_session(item: pytest.Item) -> bool:
    """True if the marker is on the item or on any node enclosing it."""
    return item.get_closest_marker(MARKER_NAME) is not None
