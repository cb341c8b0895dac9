"""TeamCity UI test harness.

Marks tests that need a freshly provisioned, logged-in TeamCity user:

    from teamcity_testkit import BaseTest, user_session

    @user_session
    class TestDashboard(BaseTest):
        def test_can_view_dashboard(self, page):
            assert self.user.is_provisioned
"""

from teamcity_testkit.models import FixtureBundle, Project, User
from teamcity_testkit.session import BaseTest, FixtureContext, user_session

__version__ = "0.1.0"

__all__ = [
    "BaseTest",
    "FixtureBundle",
    "FixtureContext",
    "Project",
    "User",
    "__version__",
    "user_session",
]
