"""ReportService: orchestrates fetching, aggregation, and the allocation pipeline."""

from __future__ import annotations

import calendar
import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import date, timedelta
from typing import Any

from wakamonth.analytics.aggregations.branches import aggregate_day
from wakamonth.analytics.aggregations.month import build_month_report
from wakamonth.analytics.segments.classification import Classifier

from .config import FETCH_MAX_WORKERS, FETCH_MIN_PARALLEL
from .errors import EmptyResultError
from .mappers import extract_result_sets, map_user
from .models import AllocationConfig, DayBucket, MonthReport, UserModel
from .waka_client import WakaAPI

ProgressCallback = Callable[[str, int | None, int | None], None]

logger = logging.getLogger(__name__)


def month_days(year: int, month: int) -> list[date]:
    """Every calendar day of ``year``-``month``."""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be 1-12, got {month}")
    first = date(year, month, 1)
    count = calendar.monthrange(year, month)[1]
    return [first + timedelta(days=offset) for offset in range(count)]


class ReportService:
    def __init__(self, api: WakaAPI, max_workers: int = FETCH_MAX_WORKERS):
        self.api = api
        self.max_workers = max(1, int(max_workers))

    def resolve_user(self, identifier: str = "current") -> UserModel:
        return map_user(self.api.fetch_user(identifier))

    # ------------------ Fetch Methods ------------------
    def fetch_month(
        self,
        user: UserModel,
        year: int,
        month: int,
        project: str = "",
        *,
        progress: ProgressCallback | None = None,
    ) -> dict[date, dict[str, Any]]:
        """Fetch one summaries payload per calendar day, keyed by date.

        Any failing day (unauthorized, non-2xx) aborts the whole month.
        """
        days = month_days(year, month)
        label = f"Fetching {year}-{month:02d} for {user.username}"
        results: dict[date, dict[str, Any]] = {}

        # Sequential short-circuit
        if self.max_workers == 1 or len(days) < FETCH_MIN_PARALLEL:
            if progress:
                progress(label, 0, len(days))
            for idx, day in enumerate(days, start=1):
                results[day] = self.api.fetch_day(user.id, day, project)
                if progress:
                    progress(label, idx, len(days))
            return results

        # Parallel fetch using threads (I/O bound HTTP calls)
        if progress:
            progress(label, 0, len(days))
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = {pool.submit(self.api.fetch_day, user.id, day, project): day for day in days}
            completed = 0
            try:
                for fut in as_completed(futures):
                    results[futures[fut]] = fut.result()
                    completed += 1
                    if progress:
                        progress(label, completed, len(days))
            except Exception:
                for pending in futures:
                    pending.cancel()
                raise
        logger.debug("Fetched %d day summaries for %s", len(results), user.username)
        return results

    # ------------------ Aggregation Pipeline ------------------
    def to_buckets(self, payloads: dict[date, dict[str, Any]]) -> tuple[list[DayBucket], list[date]]:
        """Aggregate raw payloads into day buckets; days without branches are returned apart."""
        buckets: list[DayBucket] = []
        empty: list[date] = []
        for day in sorted(payloads):
            try:
                buckets.append(aggregate_day(day, extract_result_sets(payloads[day])))
            except EmptyResultError as exc:
                logger.debug("%s", exc)
                empty.append(exc.day)
        return buckets, empty

    def build_report(
        self,
        user: UserModel,
        year: int,
        month: int,
        config: AllocationConfig,
        project: str = "",
        *,
        classify: Classifier | None = None,
        progress: ProgressCallback | None = None,
    ) -> MonthReport:
        payloads = self.fetch_month(user, year, month, project, progress=progress)
        buckets, empty = self.to_buckets(payloads)
        if progress:
            progress("Allocating hours", None, None)
        return build_month_report(year, month, buckets, config, classify=classify, empty_days=empty)
