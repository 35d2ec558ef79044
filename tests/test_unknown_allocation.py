import math
from datetime import date

import pytest

from wakamonth.analytics.allocation import allocate_unknown
from wakamonth.core.models import BranchRecord, DayBucket

DAY = date(2024, 3, 4)


def _bucket(minutes: dict[str, float], unknown: float | None = None) -> DayBucket:
    branches = {name: BranchRecord(name, value) for name, value in minutes.items()}
    if unknown is not None:
        branches["unknown"] = BranchRecord("unknown", unknown, is_unallocated=True)
    return DayBucket(day=DAY, branches=branches)


def test_spreads_ceil_share_over_other_branches():
    out = allocate_unknown(_bucket({"A": 30, "B": 90}, unknown=60), spread=True)
    assert out.branches == {"A": 60, "B": 120}
    assert out.unknown_minutes == 60
    assert out.spread_share == 30
    assert out.spread_count == 2
    assert not out.unallocated


def test_share_is_rounded_up_to_whole_minutes():
    out = allocate_unknown(_bucket({"A": 10, "B": 10, "C": 10}, unknown=10), spread=True)
    assert out.spread_share == 4
    assert out.branches == {"A": 14, "B": 14, "C": 14}


def test_no_spreading_leaves_branches_alone():
    out = allocate_unknown(_bucket({"A": 30, "B": 90}, unknown=60), spread=False)
    assert out.branches == {"A": 30, "B": 90}
    assert out.unknown_minutes == 60
    assert out.spread_share == 0
    assert out.spread_count == 0


def test_only_unknown_is_flagged_without_division():
    out = allocate_unknown(_bucket({}, unknown=45), spread=True)
    assert out.branches == {}
    assert out.unallocated
    assert out.unknown_minutes == 45
    assert out.spread_count == 0


def test_day_without_unknown_passes_through():
    out = allocate_unknown(_bucket({"A": 12.5}), spread=True)
    assert out.branches == {"A": 12.5}
    assert out.unknown_minutes == 0
    assert not out.unallocated


def test_branch_named_unknown_without_flag_is_a_regular_ticket():
    bucket = DayBucket(day=DAY, branches={"unknown": BranchRecord("unknown", 30), "A": BranchRecord("A", 30)})
    out = allocate_unknown(bucket, spread=True)
    assert out.branches == {"unknown": 30, "A": 30}
    assert out.unknown_minutes == 0


def test_input_bucket_is_not_mutated():
    bucket = _bucket({"A": 30, "B": 90}, unknown=60)
    allocate_unknown(bucket, spread=True)
    assert bucket.branches["A"].total_minutes == 30
    assert "unknown" in bucket.branches


@pytest.mark.parametrize(
    "minutes,unknown",
    [({"A": 30, "B": 90}, 60), ({"A": 1, "B": 2, "C": 3}, 100), ({"A": 7}, 13.5)],
)
def test_time_is_conserved_up_to_the_ceiling_share(minutes, unknown):
    out = allocate_unknown(_bucket(minutes, unknown=unknown), spread=True)
    before = sum(minutes.values()) + unknown
    after = sum(out.branches.values())
    assert after >= before
    assert after - before < len(minutes)
    assert out.spread_share == math.ceil(unknown / len(minutes))
