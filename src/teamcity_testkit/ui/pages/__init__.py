"""Page objects for the TeamCity web UI."""

from teamcity_testkit.ui.pages.base_page import BasePage
from teamcity_testkit.ui.pages.login_page import LoginPage

__all__ = ["BasePage", "LoginPage"]
