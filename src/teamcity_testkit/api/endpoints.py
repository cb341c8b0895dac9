"""TeamCity REST endpoints used by the harness."""

from enum import Enum


class Endpoint(str, Enum):
    """REST resource paths, relative to the server base URL."""

    USERS = "/app/rest/users"
    SERVER = "/app/rest/server"

    def item(self, locator: str) -> str:
        """Path of a single resource, e.g. ``/app/rest/users/id:42``."""
        return f"{self.value}/{locator}"
