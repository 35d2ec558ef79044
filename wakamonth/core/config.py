"""Central configuration, constants, and allocation defaults."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

# =============================================================================
# Activity API Connection Settings
# =============================================================================
WAKATIME_CONFIG_PATH = Path.home() / ".wakatime.cfg"
WAKAMONTH_RC_PATH = Path.home() / ".wakamonthrc"
TIMEZONE = "Europe/Amsterdam"

# Backend flavours and the path prefix each one puts in front of the
# WakaTime v1 API.
BACKEND_WAKATIME = "wakatime"
BACKEND_WAKAPI = "wakapi"
BACKEND_PREFIXES: dict[str, str] = {
    BACKEND_WAKATIME: "",
    BACKEND_WAKAPI: "/compat/wakatime",
}
DEFAULT_BACKEND = BACKEND_WAKATIME

REQUEST_HEADERS: dict[str, str] = {
    "Accept": "application/json, text/*",
    "Accept-Encoding": "gzip, deflate, br",
    "Content-Type": "application/json; charset=UTF-8",
    "X-Requested-With": "XMLHttpRequest",
}
REQUEST_TIMEOUT_SECONDS = 30.0

# Parallel day fetch tuning
# One HTTP round-trip per calendar day; threads because requests is
# synchronous. Keep worker count moderate to stay under API rate limits.
FETCH_MAX_WORKERS = 6
FETCH_MIN_PARALLEL = 4  # below this, stay sequential to reduce overhead

# =============================================================================
# Allocation Defaults
# =============================================================================
# Branch name the activity API uses for time it cannot attribute.
UNKNOWN_BRANCH_NAME = "unknown"

DEFAULT_PRECISION_MINUTES: int = 60  # round up to whole hours
DEFAULT_SPREAD_UNALLOCATED: bool = True

# Fill-day mode
DAY_FILL_TARGET_MINUTES: int = 8 * 60
SMALL_TICKET_MINUTES: int = 60  # floor for tickets below one hour
FILL_INCREMENT_MINUTES: int = 30  # half-hour increments
FILL_REMAINDER_EPSILON = 0.001
FILL_SUM_TOLERANCE = 0.01

# Branches matching this pattern are maintenance (non-declarable) work.
DEFAULT_IGNORE_REGEX = r"^(main|master|develop|release.*|hotfix.*)$"

CATEGORY_DEVELOPMENT = "development"
CATEGORY_MAINTENANCE = "maintenance"
CATEGORIES: Sequence[str] = (CATEGORY_DEVELOPMENT, CATEGORY_MAINTENANCE)

# =============================================================================
# Presentation
# =============================================================================
EXPORT_FORMATS: Sequence[str] = ("xlsx",)
BRANCH_NAME_MIN_WIDTH = 42
REPORT_LABEL = "wakamonth 🕠"

AUTOLINK_PROJECT_PLACEHOLDER = "{{project}}"
AUTOLINK_ISSUE_PLACEHOLDER = "{{issue}}"

# Fixed leading columns of the hours sheet; day columns follow.
SHEET_LEADING_COLUMNS: Sequence[str] = (
    "Branch",
    "Month Total",
    "Development",
    "Maintenance",
)
SHEET_DAY_FORMAT = "%b %d"
SHEET_HOURS_FORMAT = "#,##0.00;(#,##0.00);-"
