"""Shared pytest fixtures for harness tests.

This module provides fixtures for:
- Isolated settings (no .env, no TESTKIT_* variables leaking in)
- Test data factories
- Recording fakes of the coordinator's collaborators

Usage:
    @pytest.mark.unit
    def test_something(coordinator, fake_provisioner):
        ...
"""

from collections.abc import Generator

import pytest

from teamcity_testkit.config.settings import Settings, get_settings
from teamcity_testkit.generators import FixtureBundleFactory, FixtureDataGenerator
from teamcity_testkit.session import ContextStore, SessionCoordinator
from tests.support.fakes import (
    CallRecorder,
    FakeEntryPoint,
    FakeGenerator,
    FakeProvisioner,
)

pytest_plugins = ["pytester"]


# =============================================================================
# Environment Configuration
# =============================================================================


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Remove TESTKIT_* variables and reset the settings cache."""
    import os

    for key in list(os.environ):
        if key.startswith("TESTKIT_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(clean_env: None) -> Settings:
    """Settings built from defaults only."""
    return Settings(_env_file=None, base_url="http://teamcity.test")


# =============================================================================
# Factory Fixtures
# =============================================================================


@pytest.fixture
def bundle_factory() -> type[FixtureBundleFactory]:
    """Provide fixture bundle factory."""
    return FixtureBundleFactory


@pytest.fixture
def generator() -> FixtureDataGenerator:
    return FixtureDataGenerator()


# =============================================================================
# Collaborator Fakes
# =============================================================================


@pytest.fixture
def recorder() -> CallRecorder:
    return CallRecorder()


@pytest.fixture
def fake_generator(recorder: CallRecorder) -> FakeGenerator:
    return FakeGenerator(recorder)


@pytest.fixture
def fake_provisioner(recorder: CallRecorder) -> FakeProvisioner:
    return FakeProvisioner(recorder)


@pytest.fixture
def fake_entry_point(recorder: CallRecorder) -> FakeEntryPoint:
    return FakeEntryPoint(recorder)


@pytest.fixture
def store() -> ContextStore:
    return ContextStore()


@pytest.fixture
def coordinator(
    fake_generator: FakeGenerator,
    fake_provisioner: FakeProvisioner,
    fake_entry_point: FakeEntryPoint,
    store: ContextStore,
) -> SessionCoordinator:
    """Coordinator wired to recording fakes."""
    return SessionCoordinator(fake_generator, fake_provisioner, fake_entry_point, store)
