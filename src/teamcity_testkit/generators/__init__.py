"""Fixture data generators."""

from teamcity_testkit.generators.fixture_data import (
    FixtureBundleFactory,
    FixtureDataGenerator,
    ProjectFactory,
    UserFactory,
)

__all__ = [
    "FixtureBundleFactory",
    "FixtureDataGenerator",
    "ProjectFactory",
    "UserFactory",
]
