"""TeamCity REST clients."""

from teamcity_testkit.api.admin import AdminClient
from teamcity_testkit.api.base import BaseAPIClient
from teamcity_testkit.api.endpoints import Endpoint

__all__ = ["AdminClient", "BaseAPIClient", "Endpoint"]
