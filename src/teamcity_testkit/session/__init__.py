"""Session fixture lifecycle: marker, context store and coordinator."""

from teamcity_testkit.session.context import ContextStore, FixtureContext
from teamcity_testkit.session.coordinator import SessionCoordinator, TestActivity
from teamcity_testkit.session.entry_point import SessionEntryPoint, UiLoginEntryPoint
from teamcity_testkit.session.holder import BaseTest, FixtureHolder
from teamcity_testkit.session.marker import MARKER_NAME, requires_session, user_session

__all__ = [
    "MARKER_NAME",
    "BaseTest",
    "ContextStore",
    "FixtureContext",
    "FixtureHolder",
    "SessionCoordinator",
    "SessionEntryPoint",
    "TestActivity",
    "UiLoginEntryPoint",
    "requires_session",
    "user_session",
]
