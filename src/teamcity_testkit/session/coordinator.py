"""Session fixture lifecycle coordinator.

This module provides:
- TestActivity, the host-independent description of one test execution
- Collaborator protocols (data provider, provisioning client)
- SessionCoordinator, which prepares and cleans up the session of a test

For a marked test, ``prepare`` runs strictly in order:
generate data -> store in context -> provision the user -> log in.
Nothing is retried here; provisioning and login errors propagate and fail
the test before its body runs.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

import structlog

from teamcity_testkit.core.exceptions import StructuralIncompatibilityError
from teamcity_testkit.models.fixture import FixtureBundle
from teamcity_testkit.models.user import User
from teamcity_testkit.session.context import ContextStore
from teamcity_testkit.session.entry_point import SessionEntryPoint
from teamcity_testkit.session.holder import FixtureHolder

log = structlog.get_logger(__name__)


class FixtureDataProvider(Protocol):
    def generate(self) -> FixtureBundle: ...


class ProvisioningClient(Protocol):
    def create_user(self, user: User) -> User: ...

    def delete_user(self, user: User) -> None: ...


@dataclass
class TestActivity:
    """One execution of one test.

    Attributes:
        activity_id: Token generated for this execution; the context key.
        name: Human readable test id (the pytest node id).
        instance: The test class instance, None for plain test functions.
        requires_session: Marker decision, resolved at collection time.
        resources: Fixture values collaborators may use (e.g. the page).
    """

    __test__ = False

    activity_id: str
    name: str
    instance: object | None = None
    requires_session: bool = False
    resources: Mapping[str, Any] = field(default_factory=dict)


class SessionCoordinator:
    """Prepares a provisioned, logged-in session for marked tests.

    Collaborators are injected so the coordinator can run against fakes.

    Attributes:
        generator: Produces a fresh fixture bundle per test.
        provisioner: Creates (and optionally deletes) the user account.
        entry_point: Establishes the authenticated session.
        store: Per-activity fixture contexts.
        strict_holder: Raise instead of warning when a test class cannot
            hold fixture data.
        deprovision: Delete the provisioned user in ``cleanup``.
    """

    def __init__(
        self,
        generator: FixtureDataProvider,
        provisioner: ProvisioningClient,
        entry_point: SessionEntryPoint,
        store: ContextStore | None = None,
        *,
        strict_holder: bool = False,
        deprovision: bool = False,
    ) -> None:
        self.generator = generator
        self.provisioner = provisioner
        self.entry_point = entry_point
        self.store = store if store is not None else ContextStore()
        self.strict_holder = strict_holder
        self.deprovision = deprovision

    @property
    def required_fixtures(self) -> tuple[str, ...]:
        return tuple(getattr(self.entry_point, "required_fixtures", ()))

    def evaluate(self, activity: TestActivity) -> bool:
        """Whether the test asked for a session (marker on test or its group)."""
        return activity.requires_session

    def prepare(self, activity: TestActivity) -> None:
        """Generate, store, provision and log in, in that order.

        Preconditions: ``evaluate(activity)`` is true and the store has an
        open, empty slot for ``activity.activity_id``.

        Raises:
            StructuralIncompatibilityError: Strict mode only, when the test
                instance cannot hold fixture data.
            ProvisioningError: If the account cannot be created.
            AuthenticationError: If the login fails.
        """
        holder = activity.instance
        if holder is not None and not isinstance(holder, FixtureHolder):
            type_name = f"{type(holder).__module__}.{type(holder).__qualname__}"
            if self.strict_holder:
                raise StructuralIncompatibilityError(type_name)
            log.warning(
                "fixture_holder_unsupported",
                test=activity.name,
                instance_type=type_name,
                hint="derive the test class from teamcity_testkit.BaseTest",
            )
            return

        slot = self.store.slot(activity.activity_id)
        if holder is not None:
            holder.fixture_context = slot

        bundle = self.generator.generate()
        slot.set(bundle)
        log.info(
            "fixture_data_generated",
            test=activity.name,
            username=bundle.user.username,
        )

        provisioned = self.provisioner.create_user(bundle.user)
        slot.set(bundle.with_user(provisioned))
        log.info(
            "user_provisioned",
            test=activity.name,
            username=provisioned.username,
            user_id=provisioned.id,
        )

        self.entry_point.login(provisioned, activity)
        log.info("session_ready", test=activity.name, username=provisioned.username)

    def cleanup(self, activity: TestActivity) -> None:
        """Runs after the test, pass or fail.

        Nothing is required by default. With ``deprovision`` enabled the
        provisioned user is deleted.
        """
        if not self.evaluate(activity) or not self.deprovision:
            log.debug("session_cleanup_skipped", test=activity.name)
            return

        if activity.activity_id not in self.store:
            return
        slot = self.store.slot(activity.activity_id)
        if not slot.is_initialized:
            return

        user = slot.get().user
        if user.is_provisioned:
            self.provisioner.delete_user(user)
            log.info("user_deprovisioned", test=activity.name, username=user.username)
