"""Day pipeline and month-level report aggregation."""

from __future__ import annotations

import logging
from collections.abc import Iterable

import pandas as pd

from wakamonth.analytics.allocation.fill_day import fill_day
from wakamonth.analytics.allocation.unknown import allocate_unknown
from wakamonth.analytics.metrics.rounding import to_billable_hours, to_hours
from wakamonth.analytics.segments.classification import Classifier, regex_classifier
from wakamonth.core.config import CATEGORIES, CATEGORY_DEVELOPMENT
from wakamonth.core.errors import NoDataFound
from wakamonth.core.models import AllocationConfig, DayBucket, DayReport, MonthReport

logger = logging.getLogger(__name__)

FRAME_COLUMNS = ["day", "branch", "hours", "category"]


def build_day_report(bucket: DayBucket, config: AllocationConfig) -> DayReport:
    """Run allocation, optional fill-day, and rounding for one day."""
    allocation = allocate_unknown(bucket, spread=config.spread_unallocated)
    minutes = allocation.branches
    overflow = False
    if config.fill_day and minutes:
        filled = fill_day(
            minutes,
            target=config.fill_day_target_minutes,
            floor=config.small_ticket_minutes,
            increment=config.fill_increment_minutes,
        )
        hours = {name: to_hours(value) for name, value in filled.branches.items()}
        overflow = filled.overflow
    else:
        hours = {name: to_billable_hours(value, config.precision_minutes) for name, value in minutes.items()}
    unknown_hours = 0.0
    if allocation.unknown_minutes:
        unknown_hours = to_billable_hours(allocation.unknown_minutes, config.precision_minutes)
    return DayReport(
        day=bucket.day,
        hours=hours,
        unknown_minutes=allocation.unknown_minutes,
        unknown_hours=unknown_hours,
        spread_share=allocation.spread_share,
        spread_count=allocation.spread_count,
        unallocated=allocation.unallocated,
        filled=config.fill_day and bool(minutes),
        overflow=overflow,
    )


def _checked(classify: Classifier, name: str) -> str:
    category = classify(name)
    if category not in CATEGORIES:
        raise ValueError(f"Classifier returned {category!r} for {name!r}; expected one of {list(CATEGORIES)}")
    return category


def build_month_report(
    year: int,
    month: int,
    buckets: Iterable[DayBucket],
    config: AllocationConfig,
    *,
    classify: Classifier | None = None,
    empty_days: Iterable | None = None,
) -> MonthReport:
    """Fold day buckets (any order) into a ``MonthReport`` in date order.

    Raises ``NoDataFound`` when no bucket holds a single branch.
    """
    classify = classify or regex_classifier(config.ignore_pattern)
    ordered = sorted(buckets, key=lambda b: b.day)
    if not any(b.branches for b in ordered):
        raise NoDataFound(f"No branches found for {year}-{month:02d}")

    days: list[DayReport] = []
    total = development = unknown = 0.0
    for bucket in ordered:
        report = build_day_report(bucket, config)
        days.append(report)
        unknown += report.unknown_hours
        for name, hours in report.hours.items():
            total += hours
            if _checked(classify, name) == CATEGORY_DEVELOPMENT:
                development += hours

    unallocated_days = [d.day for d in days if d.unallocated]
    if unallocated_days:
        logger.warning("Unknown time left unallocated on %d day(s)", len(unallocated_days))
    return MonthReport(
        year=year,
        month=month,
        days=days,
        total_hours=total,
        development_hours=development,
        maintenance_hours=total - development,
        unknown_hours=unknown,
        spread_unallocated=config.spread_unallocated,
        empty_days=sorted(empty_days or []),
        unallocated_days=unallocated_days,
    )


def report_to_frame(report: MonthReport, classify: Classifier) -> pd.DataFrame:
    """Flatten a report into one row per (day, branch)."""
    rows = [
        {"day": day.day, "branch": name, "hours": hours, "category": _checked(classify, name)}
        for day in report.days
        for name, hours in day.hours.items()
    ]
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def aggregate_by_branch(df: pd.DataFrame) -> pd.DataFrame:
    """Month totals per branch, keeping first-seen branch order."""
    if df.empty:
        return pd.DataFrame(columns=["branch", "category", "hours", "days"])
    agg = (
        df.groupby("branch", sort=False)
        .agg(
            category=("category", "first"),
            hours=("hours", "sum"),
            days=("day", "nunique"),
        )
        .reset_index()
    )
    return agg


def pivot_hours(df: pd.DataFrame) -> pd.DataFrame:
    """Branch x day matrix of hours (NaN where a branch has no time)."""
    if df.empty:
        return pd.DataFrame()
    return df.pivot_table(index="branch", columns="day", values="hours", aggfunc="sum", sort=False)
