"""Domain data models for branches, day buckets, and month reports."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date

from .config import (
    DEFAULT_IGNORE_REGEX,
    DEFAULT_PRECISION_MINUTES,
    DEFAULT_SPREAD_UNALLOCATED,
    FILL_INCREMENT_MINUTES,
    SMALL_TICKET_MINUTES,
)
from .errors import ConfigurationError


@dataclass(slots=True, frozen=True)
class BranchRecord:
    name: str
    total_minutes: float
    is_unallocated: bool = False


@dataclass(slots=True, frozen=True)
class DayBucket:
    day: date
    branches: dict[str, BranchRecord] = field(default_factory=dict)

    @property
    def unallocated(self) -> BranchRecord | None:
        for record in self.branches.values():
            if record.is_unallocated:
                return record
        return None

    @property
    def allocated(self) -> dict[str, BranchRecord]:
        return {name: rec for name, rec in self.branches.items() if not rec.is_unallocated}


@dataclass(slots=True, frozen=True)
class DayAllocation:
    """Branch minutes for one day after unallocated time has been handled."""

    day: date
    branches: dict[str, float]
    unknown_minutes: float = 0.0
    spread_share: float = 0.0
    spread_count: int = 0
    # True when unknown time existed but there was no branch to spread it on.
    unallocated: bool = False


@dataclass(slots=True, frozen=True)
class FillResult:
    branches: dict[str, float]
    largest: str | None = None
    overflow: bool = False

    @property
    def total(self) -> float:
        return sum(self.branches.values())


@dataclass(slots=True, frozen=True)
class DayReport:
    day: date
    hours: dict[str, float]
    unknown_minutes: float = 0.0
    unknown_hours: float = 0.0
    spread_share: float = 0.0
    spread_count: int = 0
    unallocated: bool = False
    filled: bool = False
    overflow: bool = False

    @property
    def total_hours(self) -> float:
        return sum(self.hours.values())


@dataclass(slots=True, frozen=True)
class MonthReport:
    year: int
    month: int
    days: list[DayReport]
    total_hours: float
    development_hours: float
    maintenance_hours: float
    unknown_hours: float
    spread_unallocated: bool
    empty_days: list[date] = field(default_factory=list)
    unallocated_days: list[date] = field(default_factory=list)

    @property
    def branch_names(self) -> list[str]:
        """Distinct branch names in first-seen day order."""
        seen: dict[str, None] = {}
        for day in self.days:
            for name in day.hours:
                seen.setdefault(name, None)
        return list(seen)


@dataclass(slots=True, frozen=True)
class UserModel:
    id: str
    username: str


@dataclass(slots=True, frozen=True)
class AllocationConfig:
    precision_minutes: int = DEFAULT_PRECISION_MINUTES
    spread_unallocated: bool = DEFAULT_SPREAD_UNALLOCATED
    ignore_pattern: re.Pattern = field(default_factory=lambda: re.compile(DEFAULT_IGNORE_REGEX))
    fill_day_target_minutes: int | None = None
    small_ticket_minutes: int = SMALL_TICKET_MINUTES
    fill_increment_minutes: int = FILL_INCREMENT_MINUTES

    def __post_init__(self):
        if isinstance(self.precision_minutes, bool) or not isinstance(self.precision_minutes, int):
            raise ConfigurationError(f"precision must be an integer, got {self.precision_minutes!r}")
        if self.precision_minutes <= 0:
            raise ConfigurationError(f"precision must be positive, got {self.precision_minutes}")
        if isinstance(self.ignore_pattern, str):
            object.__setattr__(self, "ignore_pattern", compile_ignore_pattern(self.ignore_pattern))
        if self.fill_day_target_minutes is not None and self.fill_day_target_minutes <= 0:
            raise ConfigurationError(
                f"fill-day target must be positive, got {self.fill_day_target_minutes}"
            )
        if self.fill_increment_minutes <= 0:
            raise ConfigurationError(f"fill increment must be positive, got {self.fill_increment_minutes}")
        if self.small_ticket_minutes < 0:
            raise ConfigurationError(
                f"small ticket floor must not be negative, got {self.small_ticket_minutes}"
            )

    @property
    def fill_day(self) -> bool:
        return self.fill_day_target_minutes is not None


def compile_ignore_pattern(pattern: str | None) -> re.Pattern:
    try:
        return re.compile(pattern if pattern is not None else DEFAULT_IGNORE_REGEX)
    except re.error as exc:
        raise ConfigurationError(f"Malformed ignore pattern {pattern!r}: {exc}") from exc
