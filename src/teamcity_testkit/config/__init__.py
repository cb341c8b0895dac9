"""Configuration module for the TeamCity test harness.

Usage:
    from teamcity_testkit.config import get_settings

    settings = get_settings()  # Cached singleton
    print(settings.base_url)

Note:
    Command line options of the pytest plugin are validated into a new
    Settings built from the cached one; the cached object is never mutated.
"""

from teamcity_testkit.config.logging import configure_logging
from teamcity_testkit.config.settings import Settings, get_settings

__all__ = ["Settings", "configure_logging", "get_settings"]
