"""Billing precision rounding (pure functions)."""

from __future__ import annotations

import math

from wakamonth.core.errors import ConfigurationError

# Float noise from seconds / 60 must not push an exact multiple into the
# next increment (e.g. 3600.0000001 s).
_CEIL_TOLERANCE = 1e-9


def _check_precision(precision: int) -> None:
    if precision <= 0:
        raise ConfigurationError(f"precision must be positive, got {precision}")


def round_minutes(minutes: float, precision: int) -> float:
    """Round ``minutes`` up to the next multiple of ``precision``."""
    _check_precision(precision)
    steps = math.ceil(minutes / precision - _CEIL_TOLERANCE)
    return float(steps * precision)


def to_billable_hours(minutes: float, precision: int) -> float:
    """Minutes rounded up to ``precision`` and expressed in hours.

    >>> to_billable_hours(61, 15)
    1.25
    """
    return round_minutes(minutes, precision) / 60


def to_hours(minutes: float) -> float:
    return minutes / 60
