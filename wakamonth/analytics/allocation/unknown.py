"""Unallocated ("unknown") time handling for a single day."""

from __future__ import annotations

import logging
import math

from wakamonth.core.models import DayAllocation, DayBucket

logger = logging.getLogger(__name__)


def allocate_unknown(bucket: DayBucket, spread: bool) -> DayAllocation:
    """Take the unallocated record out of ``bucket`` and optionally spread it.

    When spreading, every other branch receives
    ``ceil(unknown_minutes / other_branch_count)`` extra minutes. A day that
    only holds unallocated time cannot be spread; it is flagged
    ``unallocated`` and its minutes stay in ``unknown_minutes``.
    """
    branches = {name: rec.total_minutes for name, rec in bucket.allocated.items()}
    unknown = bucket.unallocated
    if unknown is None:
        return DayAllocation(day=bucket.day, branches=branches)

    unknown_minutes = unknown.total_minutes
    count = len(branches)
    if count == 0:
        logger.info("%s: %.1f unknown minutes and no branch to spread them on", bucket.day, unknown_minutes)
        return DayAllocation(
            day=bucket.day,
            branches=branches,
            unknown_minutes=unknown_minutes,
            unallocated=True,
        )

    share = float(math.ceil(unknown_minutes / count))
    if spread:
        branches = {name: minutes + share for name, minutes in branches.items()}
        logger.debug("%s: spread %.0f unknown minutes per branch over %d branches", bucket.day, share, count)
    return DayAllocation(
        day=bucket.day,
        branches=branches,
        unknown_minutes=unknown_minutes,
        spread_share=share if spread else 0.0,
        spread_count=count if spread else 0,
    )
