import pytest

from wakamonth.analytics.allocation import apply_floor_and_scale, fill_day, round_to_target, small_tickets
from wakamonth.core.config import FILL_SUM_TOLERANCE


def test_small_ticket_floor_and_proportional_fill():
    out = fill_day({"X": 20, "Y": 200, "Z": 260}, target=480)
    assert out.branches == {"X": 60, "Y": 180, "Z": 240}
    assert out.largest == "Z"
    assert not out.overflow
    assert out.total == pytest.approx(480)


def test_scaling_uses_pre_floor_large_share():
    scaled = apply_floor_and_scale({"X": 20, "Y": 200, "Z": 260}, target=480, floor=60)
    assert scaled["X"] == 60
    assert scaled["Y"] == pytest.approx(200 / 460 * 420)
    assert scaled["Z"] == pytest.approx(260 / 460 * 420)


def test_ties_for_largest_go_to_first_branch():
    out = fill_day({"A": 100, "B": 100})
    assert out.largest == "A"
    assert out.branches == {"A": 240, "B": 240}


def test_all_small_tickets_largest_absorbs_rest():
    out = fill_day({"A": 50, "B": 10, "C": 30})
    assert out.largest == "A"
    assert out.branches == {"A": 360, "B": 60, "C": 60}


def test_single_ticket_gets_whole_day():
    out = fill_day({"A": 10})
    assert out.branches == {"A": 480}


def test_remainder_moves_to_next_largest_when_target_is_off_increment():
    out = fill_day({"A": 300, "B": 200}, target=465)
    assert out.branches == {"A": 300, "B": 165}
    assert out.total == pytest.approx(465)


def test_lone_ticket_keeps_residual_when_target_is_off_increment():
    filled, largest = round_to_target({"A": 465.0}, target=465, increment=30)
    assert largest == "A"
    assert filled == {"A": 465.0}


def test_overflow_splits_evenly_when_small_floors_exceed_target():
    minutes = {"BIG": 900, **{f"T-{i}": 10 for i in range(9)}}
    out = fill_day(minutes, target=480, floor=60)
    assert out.overflow
    assert all(v == pytest.approx(480 / 10) for v in out.branches.values())
    assert out.total == pytest.approx(480, abs=FILL_SUM_TOLERANCE)


def test_many_large_tickets_are_scaled_not_split():
    out = fill_day({"A": 600, **{f"T-{i}": 60 for i in range(8)}})
    assert not out.overflow
    assert out.largest == "A"
    assert out.branches["A"] == 240
    assert all(out.branches[f"T-{i}"] == 30 for i in range(8))
    assert out.total == pytest.approx(480)


def test_largest_never_goes_below_floor_when_others_round_up():
    scaled = apply_floor_and_scale({"BIG": 125, **{f"T-{i}": 75 for i in range(9)}})
    filled, largest = round_to_target(scaled)
    assert largest == "BIG"
    assert filled["BIG"] == 60
    assert [filled[f"T-{i}"] for i in range(9)] == [30, 30, 30, 30, 60, 60, 60, 60, 60]
    assert sum(filled.values()) == pytest.approx(480)


def test_remainder_is_not_pushed_onto_an_empty_ticket():
    out = fill_day({"A": 3000, "B": 60}, target=465)
    assert out.branches == {"A": 465, "B": 0}


def test_small_tickets_lists_only_those_below_floor():
    assert small_tickets({"A": 59.9, "B": 60, "C": 0}) == ["A", "C"]


def test_empty_day_stays_empty():
    out = fill_day({})
    assert out.branches == {}
    assert out.largest is None


def test_input_order_is_kept():
    out = fill_day({"c": 100, "a": 20, "b": 300})
    assert list(out.branches) == ["c", "a", "b"]


@pytest.mark.parametrize(
    "minutes",
    [
        {"A": 1},
        {"A": 13, "B": 17, "C": 19, "D": 23},
        {"A": 600, "B": 5, "C": 95.5},
        {"A": 61, "B": 62, "C": 63, "D": 64, "E": 65, "F": 66, "G": 67},
        {"A": 0, "B": 0},
        {"A": 1000, "B": 999.9, "C": 3.3},
        {"A": 600, **{f"T-{i}": 60 for i in range(8)}},
        {"BIG": 125, **{f"T-{i}": 75 for i in range(9)}},
        {f"T-{i}": 60 for i in range(10)},
    ],
)
@pytest.mark.parametrize("target", [480, 450, 465, 240])
def test_sums_to_target(minutes, target):
    out = fill_day(minutes, target=target)
    assert out.total == pytest.approx(target, abs=FILL_SUM_TOLERANCE)
    assert all(value >= 0 for value in out.branches.values())
