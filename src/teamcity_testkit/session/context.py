"""Per-test fixture context.

Each running test activity owns exactly one FixtureContext slot, keyed by
a token generated for that activity. The store hands out slots by explicit
token; the key-less ``get()`` / ``set()`` resolve the token bound to the
caller through a ContextVar, which is private to each thread and asyncio
task.

Usage:
    store = ContextStore()
    store.open("tests/test_ui.py::test_login#3fa2c1d0")
    with store.activate("tests/test_ui.py::test_login#3fa2c1d0"):
        store.set(bundle)
        store.get().user
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

import structlog

from teamcity_testkit.core.exceptions import (
    ContextNotInitializedError,
    HarnessError,
    ValidationError,
)
from teamcity_testkit.models.fixture import FixtureBundle

log = structlog.get_logger(__name__)

_current_activity: ContextVar[str | None] = ContextVar(
    "teamcity_testkit_activity", default=None
)


class FixtureContext:
    """Slot holding the fixture bundle of one test activity."""

    def __init__(self, activity_id: str) -> None:
        self.activity_id = activity_id
        self._bundle: FixtureBundle | None = None

    def __repr__(self) -> str:
        state = "set" if self.is_initialized else "empty"
        return f"FixtureContext({self.activity_id!r}, {state})"

    @property
    def is_initialized(self) -> bool:
        return self._bundle is not None

    def set(self, bundle: FixtureBundle | None) -> None:
        """Store ``bundle``, replacing any previous one."""
        if bundle is None:
            raise ValidationError("Fixture bundle cannot be None")
        self._bundle = bundle

    def get(self) -> FixtureBundle:
        """Return the stored bundle.

        Raises:
            ContextNotInitializedError: If nothing was stored for this activity.
        """
        if self._bundle is None:
            raise ContextNotInitializedError(
                f"No fixture data stored for {self.activity_id}; "
                "is the test marked with @user_session?",
                activity_id=self.activity_id,
            )
        return self._bundle

    def clear(self) -> None:
        self._bundle = None


class ContextStore:
    """Thread-safe registry of fixture slots, one per running test activity."""

    def __init__(self) -> None:
        self._slots: dict[str, FixtureContext] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._slots)

    def __contains__(self, activity_id: object) -> bool:
        with self._lock:
            return activity_id in self._slots

    def open(self, activity_id: str) -> FixtureContext:
        """Create the empty slot of a starting activity.

        Raises:
            HarnessError: If the activity already has a slot.
        """
        with self._lock:
            if activity_id in self._slots:
                raise HarnessError(f"Fixture context already open for {activity_id}")
            slot = FixtureContext(activity_id)
            self._slots[activity_id] = slot
        log.debug("fixture_context_opened", activity=activity_id)
        return slot

    def close(self, activity_id: str) -> None:
        """Discard the slot of a finished activity. Unknown ids are ignored."""
        with self._lock:
            slot = self._slots.pop(activity_id, None)
        if slot is not None:
            slot.clear()
            log.debug("fixture_context_closed", activity=activity_id)

    @contextmanager
    def activate(self, activity_id: str) -> Iterator[FixtureContext]:
        """Bind ``activity_id`` to the calling thread or task.

        The slot must be open. Key-less store calls made inside the block
        resolve to this activity, and log events carry its id.
        """
        slot = self.slot(activity_id)
        token = _current_activity.set(activity_id)
        try:
            with structlog.contextvars.bound_contextvars(test_activity=activity_id):
                yield slot
        finally:
            _current_activity.reset(token)

    def current_activity(self) -> str:
        """Id of the activity bound to the caller.

        Raises:
            ContextNotInitializedError: If the caller runs outside any activity.
        """
        activity_id = _current_activity.get()
        if activity_id is None:
            raise ContextNotInitializedError("No test activity is active in this context")
        return activity_id

    def slot(self, activity_id: str | None = None) -> FixtureContext:
        """Return the slot of ``activity_id`` or of the calling activity.

        Raises:
            ContextNotInitializedError: If no slot is open for the activity.
        """
        if activity_id is None:
            activity_id = self.current_activity()
        with self._lock:
            slot = self._slots.get(activity_id)
        if slot is None:
            raise ContextNotInitializedError(
                f"No fixture context open for {activity_id}",
                activity_id=activity_id,
            )
        return slot

    def set(self, bundle: FixtureBundle | None, activity_id: str | None = None) -> None:
        """Store ``bundle`` for ``activity_id`` or for the calling activity."""
        self.slot(activity_id).set(bundle)

    def get(self, activity_id: str | None = None) -> FixtureBundle:
        """Read the bundle of ``activity_id`` or of the calling activity."""
        return self.slot(activity_id).get()
