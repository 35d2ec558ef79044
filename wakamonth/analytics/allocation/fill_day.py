"""Fill-day normalization: rescale a day's branches to an exact target.

The day is filled in three passes:

1. Tickets below ``floor`` minutes are raised to exactly ``floor``.
2. What is left of ``target`` is spread over the remaining (large) tickets in
   proportion to their share of the large-ticket subtotal.
3. Every ticket except the largest is rounded to the nearest ``increment``;
   the largest absorbs the residual so the day sums to ``target``. When the
   largest can itself be snapped to an increment, it is, and the leftover
   delta moves to the next-largest ticket.

The largest ticket is picked after pass 2 and before rounding; ties go to the
ticket seen first. When rounding the other tickets up leaves the largest below
``floor``, increments are taken back one at a time from the largest of the
other tickets until it reaches ``floor`` (or nothing is left to take), so no
ticket ever ends up negative.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping

from wakamonth.core.config import (
    DAY_FILL_TARGET_MINUTES,
    FILL_INCREMENT_MINUTES,
    FILL_REMAINDER_EPSILON,
    FILL_SUM_TOLERANCE,
    SMALL_TICKET_MINUTES,
)
from wakamonth.core.models import FillResult

logger = logging.getLogger(__name__)


def _round_half_up(value: float, increment: float) -> float:
    return math.floor(value / increment + 0.5) * increment


def _first_largest(values: Mapping[str, float]) -> str | None:
    best: str | None = None
    for name, minutes in values.items():
        if best is None or minutes > values[best]:
            best = name
    return best


def small_tickets(minutes: Mapping[str, float], floor: float = SMALL_TICKET_MINUTES) -> list[str]:
    """Names of the tickets that get raised to ``floor``, in input order."""
    return [name for name, value in minutes.items() if value < floor]


def apply_floor_and_scale(
    minutes: Mapping[str, float],
    target: float = DAY_FILL_TARGET_MINUTES,
    floor: float = SMALL_TICKET_MINUTES,
) -> dict[str, float]:
    """Passes 1 and 2: floor small tickets, scale large ones into the rest."""
    small = set(small_tickets(minutes, floor))
    large_total = sum(value for name, value in minutes.items() if name not in small)
    remaining = target - floor * len(small)
    scaled: dict[str, float] = {}
    for name, value in minutes.items():
        if name in small:
            scaled[name] = float(floor)
        elif large_total > 0:
            scaled[name] = value / large_total * remaining
        else:
            scaled[name] = float(value)
    return scaled


def round_to_target(
    scaled: Mapping[str, float],
    target: float = DAY_FILL_TARGET_MINUTES,
    increment: float = FILL_INCREMENT_MINUTES,
    floor: float = SMALL_TICKET_MINUTES,
) -> tuple[dict[str, float], str | None]:
    """Pass 3: round to increments while keeping the exact target sum."""
    largest = _first_largest(scaled)
    if largest is None:
        return {}, None

    rounded: dict[str, float] = {}
    for name, value in scaled.items():
        if name != largest:
            rounded[name] = _round_half_up(value, increment)

    forced = target - sum(rounded.values())
    # Rounded values are non-negative multiples of the increment.
    while forced < min(floor, target):
        donor = _first_largest(rounded)
        if donor is None or rounded[donor] < increment:
            break
        rounded[donor] -= increment
        forced += increment

    snapped = _round_half_up(forced, increment)
    largest_value = forced
    remainder = forced - snapped
    if abs(snapped - forced) <= increment / 2:
        next_largest = _first_largest(rounded)
        # A lone ticket has nobody to hand the remainder to; it keeps the
        # residual-forced value.
        if abs(remainder) <= FILL_REMAINDER_EPSILON:
            largest_value = snapped
        elif next_largest is not None and rounded[next_largest] + remainder >= 0:
            largest_value = snapped
            rounded[next_largest] += remainder

    out = {name: (largest_value if name == largest else rounded[name]) for name in scaled}
    return out, largest


def fill_day(
    minutes: Mapping[str, float],
    target: int = DAY_FILL_TARGET_MINUTES,
    floor: int = SMALL_TICKET_MINUTES,
    increment: int = FILL_INCREMENT_MINUTES,
) -> FillResult:
    """Rescale ``minutes`` (branch -> minutes) so they sum to ``target``.

    Parameters
    ----------
    minutes : Mapping[str, float]
        Branch minutes for one day, unallocated time already handled.
    target : int
        Minutes the day must add up to (8 hours by default).
    floor : int
        Minimum minutes a small ticket receives.
    increment : int
        Rounding increment for every ticket but the largest.

    Returns
    -------
    FillResult
        New branch minutes (input order kept), the largest branch, and an
        ``overflow`` flag set when the floors of the small tickets alone
        exceed ``target``. In that case every branch gets an equal share of
        ``target`` and no rounding is applied.
    """
    if not minutes:
        return FillResult(branches={})

    small = small_tickets(minutes, floor)
    if floor * len(small) > target:
        count = len(minutes)
        logger.warning(
            "Fill-day overflow: %d small tickets x %d min floor exceeds %d min target; splitting evenly",
            len(small),
            floor,
            target,
        )
        share = target / count
        first = next(iter(minutes))
        return FillResult(branches={name: share for name in minutes}, largest=first, overflow=True)

    scaled = apply_floor_and_scale(minutes, target=target, floor=floor)
    filled, largest = round_to_target(scaled, target=target, increment=increment, floor=floor)
    result = FillResult(branches=filled, largest=largest)
    if abs(result.total - target) > FILL_SUM_TOLERANCE:
        raise RuntimeError(f"Fill-day produced {result.total:.3f} min for a {target} min target: {filled}")
    return result
