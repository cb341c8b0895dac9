"""Fixture bundle models.

A bundle is produced once per test: it is created by the fixture data
generator, its user is replaced by the provisioned one, and it is then
read by the test body until the test ends.
"""

from pydantic import BaseModel, ConfigDict, Field

from teamcity_testkit.models.user import User


class Project(BaseModel):
    """Synthetic project description for tests that create projects.

    Not provisioned by the session coordinator.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Project external id")
    name: str = Field(description="Project display name")
    parent_project_id: str = Field(default="_Root", description="Parent project id")


class FixtureBundle(BaseModel):
    """Generated entities for a single test execution.

    Attributes:
        user: The user identity the session is established for.
        project: A project description the test body may use.
    """

    model_config = ConfigDict(frozen=True)

    user: User
    project: Project

    def with_user(self, user: User) -> "FixtureBundle":
        """Return a copy of the bundle holding ``user`` instead of the current one."""
        return self.model_copy(update={"user": user})
