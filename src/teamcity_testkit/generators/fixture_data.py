"""Fixture data generation.

Factory-boy based factories for the entities a session fixture needs.
Follows the pattern: Faker + overrides.

Usage:
    from teamcity_testkit.generators import FixtureDataGenerator

    bundle = FixtureDataGenerator().generate()
    bundle.user.username  # "user_7f3a09c2"

    # Direct factory use with overrides
    user = UserFactory(prefix="qa_", role_id="PROJECT_VIEWER", role_scope="p:_Root")
"""

from __future__ import annotations

import factory
import structlog
from faker import Faker

from teamcity_testkit.models.fixture import FixtureBundle, Project
from teamcity_testkit.models.user import Role, Roles, User

log = structlog.get_logger(__name__)

fake = Faker()


def _token(faker: Faker) -> str:
    return faker.hexify(text="^" * 8)


class UserFactory(factory.Factory):
    """Factory for a not-yet-provisioned User."""

    class Meta:
        model = User

    class Params:
        faker = fake
        prefix = "user_"
        role_id = "SYSTEM_ADMIN"
        role_scope = "g"

    username = factory.LazyAttribute(lambda o: f"{o.prefix}{_token(o.faker)}")
    password = factory.LazyAttribute(
        lambda o: o.faker.password(length=14, special_chars=False, digits=True)
    )
    name = factory.LazyAttribute(lambda o: o.faker.name())
    email = factory.LazyAttribute(lambda o: f"{o.username}@example.com")
    roles = factory.LazyAttribute(
        lambda o: Roles(role=[Role(role_id=o.role_id, scope=o.role_scope)])
    )


class ProjectFactory(factory.Factory):
    """Factory for a project description."""

    class Meta:
        model = Project

    class Params:
        faker = fake

    id = factory.LazyAttribute(lambda o: f"project_{_token(o.faker)}")
    name = factory.LazyAttribute(lambda o: f"{o.faker.word().title()} {o.id}")
    parent_project_id = "_Root"


class FixtureBundleFactory(factory.Factory):
    """Factory for a complete fixture bundle."""

    class Meta:
        model = FixtureBundle

    user = factory.SubFactory(UserFactory)
    project = factory.SubFactory(ProjectFactory)


class FixtureDataGenerator:
    """Produces a fresh fixture bundle per call.

    Stateless apart from the configured defaults; safe to share between
    concurrently running tests.

    Example:
        generator = FixtureDataGenerator(username_prefix="qa_")
        bundle = generator.generate()
    """

    def __init__(
        self,
        username_prefix: str = "user_",
        role_id: str = "SYSTEM_ADMIN",
        role_scope: str = "g",
    ) -> None:
        self.username_prefix = username_prefix
        self.role_id = role_id
        self.role_scope = role_scope

    def generate(self, seed: int | None = None) -> FixtureBundle:
        """Generate a bundle with a syntactically valid, unused identity.

        Args:
            seed: Optional Faker seed for reproducible bundles.

        Returns:
            A FixtureBundle whose user has no server-assigned fields.
        """
        faker = fake
        if seed is not None:
            # private instance: the shared one keeps producing fresh values
            faker = Faker()
            faker.seed_instance(seed)

        bundle: FixtureBundle = FixtureBundleFactory(
            user__faker=faker,
            project__faker=faker,
            user__prefix=self.username_prefix,
            user__role_id=self.role_id,
            user__role_scope=self.role_scope,
        )
        log.debug(
            "fixture_bundle_generated",
            username=bundle.user.username,
            project_id=bundle.project.id,
        )
        return bundle
