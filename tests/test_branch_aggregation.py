from datetime import date

import pytest

from wakamonth.analytics.aggregations.branches import aggregate_day
from wakamonth.core.errors import EmptyResultError, NoDataFound

DAY = date(2024, 3, 1)


def _result_sets():
    return [
        {"branches": [{"name": "PROJ-1", "total_seconds": 1800}, {"name": "unknown", "total_seconds": 600}]},
        {"branches": [{"name": "PROJ-1", "total_seconds": 1200}, {"name": "PROJ-2", "total_seconds": 0}]},
        {"branches": [{"name": "proj-1", "total_seconds": 60}]},
    ]


def test_sums_same_name_across_result_sets():
    bucket = aggregate_day(DAY, _result_sets())
    assert bucket.day == DAY
    assert bucket.branches["PROJ-1"].total_minutes == pytest.approx(50.0)
    # Names are case-sensitive
    assert bucket.branches["proj-1"].total_minutes == pytest.approx(1.0)


def test_zero_second_branch_is_kept():
    bucket = aggregate_day(DAY, _result_sets())
    assert "PROJ-2" in bucket.branches
    assert bucket.branches["PROJ-2"].total_minutes == 0.0


def test_unknown_branch_is_tagged_unallocated():
    bucket = aggregate_day(DAY, _result_sets())
    assert bucket.branches["unknown"].is_unallocated
    assert not bucket.branches["PROJ-1"].is_unallocated
    assert bucket.unallocated.total_minutes == pytest.approx(10.0)
    assert "unknown" not in bucket.allocated


def test_accumulation_order_does_not_matter():
    forward = aggregate_day(DAY, _result_sets())
    backward = aggregate_day(DAY, list(reversed(_result_sets())))
    assert {n: r.total_minutes for n, r in forward.branches.items()} == pytest.approx(
        {n: r.total_minutes for n, r in backward.branches.items()}
    )


def test_empty_day_raises():
    with pytest.raises(EmptyResultError) as info:
        aggregate_day(DAY, [{"branches": []}, {}])
    assert info.value.day == DAY
    assert isinstance(info.value, NoDataFound)


def test_malformed_entries_are_skipped():
    bucket = aggregate_day(DAY, [{"branches": [None, {"total_seconds": 60}, {"name": "PROJ-3"}]}])
    assert list(bucket.branches) == ["PROJ-3"]
    assert bucket.branches["PROJ-3"].total_minutes == 0.0
