"""Exception hierarchy for report generation."""

from __future__ import annotations


class WakamonthError(Exception):
    """Base exception for wakamonth."""


class ConfigurationError(WakamonthError):
    """Invalid settings; raised before any computation begins."""


class AuthenticationFailure(WakamonthError):
    """The activity API rejected our credentials (401/403)."""


class FetchError(WakamonthError):
    """The activity API answered with a non-2xx status or unreadable body."""


class NoDataFound(WakamonthError):
    """A day or a whole month produced no branches."""


class EmptyResultError(NoDataFound):
    """A single day produced no branches."""

    def __init__(self, day):
        super().__init__(f"No branches recorded on {day}")
        self.day = day
