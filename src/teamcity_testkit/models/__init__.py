"""Pydantic models for fixture data and REST payloads."""

from teamcity_testkit.models.fixture import FixtureBundle, Project
from teamcity_testkit.models.user import Role, Roles, User

__all__ = [
    "FixtureBundle",
    "Project",
    "Role",
    "Roles",
    "User",
]
