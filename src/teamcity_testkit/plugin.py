"""pytest plugin wiring the session coordinator into the test run.

Registered through the ``pytest11`` entry point, so installing the package
is enough. For every test the plugin opens a fixture context, runs the
coordinator after the test's fixtures are set up, and registers its
cleanup as an item finalizer so it runs before they are torn down. Only
tests carrying ``@user_session`` (directly, on their class or on their
module) are provisioned.

A conftest can replace the coordinator, e.g. to run against fakes:

    def pytest_configure(config):
        config.stash[coordinator_key] = SessionCoordinator(...)
"""

from functools import partial
from uuid import uuid4

import pytest
import structlog

from teamcity_testkit.api.admin import AdminClient
from teamcity_testkit.config.logging import configure_logging
from teamcity_testkit.config.settings import Settings, get_settings
from teamcity_testkit.generators.fixture_data import FixtureDataGenerator
from teamcity_testkit.session.context import ContextStore, FixtureContext
from teamcity_testkit.session.coordinator import SessionCoordinator, TestActivity
from teamcity_testkit.session.entry_point import UiLoginEntryPoint
from teamcity_testkit.session.marker import MARKER_HELP, requires_session

log = structlog.get_logger(__name__)

coordinator_key = pytest.StashKey[SessionCoordinator]()
plugin_key = pytest.StashKey["UserSessionPlugin"]()
activity_key = pytest.StashKey[str]()
requires_session_key = pytest.StashKey[bool]()


def build_coordinator(settings: Settings) -> SessionCoordinator:
    """Coordinator with the real TeamCity collaborators."""
    return SessionCoordinator(
        generator=FixtureDataGenerator(
            username_prefix=settings.username_prefix,
            role_id=settings.default_role,
            role_scope=settings.default_role_scope,
        ),
        provisioner=AdminClient.from_settings(settings),
        entry_point=UiLoginEntryPoint(settings),
        store=ContextStore(),
        strict_holder=settings.strict_fixture_holder,
        deprovision=settings.deprovision_users,
    )


def load_settings(config: pytest.Config) -> Settings:
    """Cached settings with command line overrides applied."""
    settings = get_settings()
    overrides: dict[str, object] = {}
    if config.getoption("teamcity_url"):
        overrides["base_url"] = config.getoption("teamcity_url")
    if config.getoption("user_session_strict"):
        overrides["strict_fixture_holder"] = True
    if config.getoption("user_session_deprovision"):
        overrides["deprovision_users"] = True
    if not overrides:
        return settings
    return Settings(**{**settings.model_dump(), **overrides})


class UserSessionPlugin:
    """Hook implementations bound to one coordinator for the whole run."""

    def __init__(self, config: pytest.Config, settings: Settings) -> None:
        self.settings = settings
        self._owns_coordinator = coordinator_key not in config.stash
        if self._owns_coordinator:
            config.stash[coordinator_key] = build_coordinator(settings)
        self.coordinator = config.stash[coordinator_key]

    def close(self) -> None:
        """Release collaborators created by the plugin."""
        if self._owns_coordinator:
            close = getattr(self.coordinator.provisioner, "close", None)
            if close is not None:
                close()

    def activity(self, item: pytest.Item) -> TestActivity:
        flag = item.stash.get(requires_session_key, None)
        if flag is None:
            flag = requires_session(item)
        return TestActivity(
            activity_id=item.stash.get(activity_key, item.nodeid),
            name=item.nodeid,
            instance=getattr(item, "instance", None),
            requires_session=flag,
            resources=getattr(item, "funcargs", {}),
        )

    def pytest_report_header(self, config: pytest.Config) -> str:
        mode = "strict" if self.coordinator.strict_holder else "lenient"
        return f"teamcity: {self.settings.base_url} (user sessions: {mode})"

    def pytest_collection_modifyitems(
        self, config: pytest.Config, items: list[pytest.Item]
    ) -> None:
        required = self.coordinator.required_fixtures
        marked = 0
        for item in items:
            flag = requires_session(item)
            item.stash[requires_session_key] = flag
            if not flag:
                continue
            marked += 1
            fixturenames = getattr(item, "fixturenames", None)
            if fixturenames is None:
                continue
            for name in required:
                if name not in fixturenames:
                    fixturenames.append(name)
        log.debug("user_session_collected", marked=marked, total=len(items))

    @pytest.hookimpl(hookwrapper=True)
    def pytest_runtest_protocol(self, item: pytest.Item, nextitem: pytest.Item | None):
        activity_id = f"{item.nodeid}#{uuid4().hex[:8]}"
        item.stash[activity_key] = activity_id
        store = self.coordinator.store
        store.open(activity_id)
        try:
            with store.activate(activity_id):
                yield
        finally:
            store.close(activity_id)

    # trylast: runs once the test's fixtures (and the browser page) exist
    @pytest.hookimpl(trylast=True)
    def pytest_runtest_setup(self, item: pytest.Item) -> None:
        activity = self.activity(item)
        if not self.coordinator.evaluate(activity):
            return
        # Finalizers run LIFO, so cleanup sees the page still alive. A cleanup
        # error is reported by SetupState, which still tears down the fixtures.
        item.addfinalizer(partial(self.coordinator.cleanup, activity))
        self.coordinator.prepare(activity)


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("teamcity", "TeamCity user sessions")
    group.addoption(
        "--teamcity-url",
        dest="teamcity_url",
        default=None,
        help="TeamCity server URL (overrides TESTKIT_BASE_URL)",
    )
    group.addoption(
        "--user-session-strict",
        dest="user_session_strict",
        action="store_true",
        default=False,
        help="Fail @user_session tests whose class does not derive from BaseTest",
    )
    group.addoption(
        "--user-session-deprovision",
        dest="user_session_deprovision",
        action="store_true",
        default=False,
        help="Delete provisioned users after each test",
    )


# trylast: a conftest may have put its own coordinator into the stash
@pytest.hookimpl(trylast=True)
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", MARKER_HELP)
    settings = load_settings(config)
    configure_logging(settings)
    plugin = UserSessionPlugin(config, settings)
    config.stash[plugin_key] = plugin
    config.pluginmanager.register(plugin, "teamcity_testkit_session")


def pytest_unconfigure(config: pytest.Config) -> None:
    plugin = config.stash.get(plugin_key, None)
    if plugin is not None:
        plugin.close()


@pytest.fixture
def fixture_context(request: pytest.FixtureRequest) -> FixtureContext:
    """Fixture slot of the running test.

    Filled by the time the test body runs; call ``.get()`` there:

        @user_session
        def test_profile(page, fixture_context):
            user = fixture_context.get().user
    """
    plugin: UserSessionPlugin = request.config.stash[plugin_key]
    return plugin.coordinator.store.slot(request.node.stash[activity_key])


@pytest.fixture(scope="session")
def teamcity_settings(pytestconfig: pytest.Config) -> Settings:
    """Harness settings in effect for this run."""
    plugin: UserSessionPlugin = pytestconfig.stash[plugin_key]
    return plugin.settings


@pytest.fixture(scope="session")
def teamcity_admin(teamcity_settings: Settings):
    """Admin client for tests that provision extra entities themselves."""
    with AdminClient.from_settings(teamcity_settings) as admin:
        yield admin
