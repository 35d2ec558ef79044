"""Per-day branch aggregation (raw seconds -> minutes per branch)."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import Any

from wakamonth.core.errors import EmptyResultError
from wakamonth.core.mappers import iter_branch_entries
from wakamonth.core.models import BranchRecord, DayBucket


def aggregate_day(day: date, result_sets: Iterable[dict[str, Any]]) -> DayBucket:
    """Merge every result-set of a day into one bucket keyed by branch name.

    Names are compared exactly; a branch listed in several result-sets is
    summed. Zero-second branches are kept. Raises ``EmptyResultError`` when
    the day carries no branch at all.
    """
    minutes: dict[str, float] = {}
    unallocated: dict[str, bool] = {}
    for name, seconds, is_unallocated in iter_branch_entries(result_sets):
        minutes[name] = minutes.get(name, 0.0) + seconds / 60
        unallocated[name] = unallocated.get(name, False) or is_unallocated
    if not minutes:
        raise EmptyResultError(day)
    branches = {
        name: BranchRecord(name=name, total_minutes=total, is_unallocated=unallocated[name])
        for name, total in minutes.items()
    }
    return DayBucket(day=day, branches=branches)

