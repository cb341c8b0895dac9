"""Fixture holder capability for class-based tests."""

from typing import Protocol, runtime_checkable

from teamcity_testkit.core.exceptions import ContextNotInitializedError
from teamcity_testkit.models.fixture import FixtureBundle
from teamcity_testkit.models.user import User
from teamcity_testkit.session.context import FixtureContext


@runtime_checkable
class FixtureHolder(Protocol):
    """A test object the coordinator can bind a fixture context to."""

    fixture_context: FixtureContext | None


class BaseTest:
    """Base class for UI test classes using ``@user_session``.

    Example:
        @user_session
        class TestDashboard(BaseTest):
            def test_shows_username(self, page):
                expect(page.locator(".userName")).to_have_text(self.user.username)
    """

    fixture_context: FixtureContext | None = None

    @property
    def fixture_bundle(self) -> FixtureBundle:
        """Bundle provisioned for the running test."""
        if self.fixture_context is None:
            raise ContextNotInitializedError(
                f"{type(self).__name__} has no fixture context; "
                "is the test marked with @user_session?"
            )
        return self.fixture_context.get()

    @property
    def user(self) -> User:
        """Provisioned user of the running test."""
        return self.fixture_bundle.user
