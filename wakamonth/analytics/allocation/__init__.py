"""Hour allocation stages: unallocated time spreading and fill-day."""

from wakamonth.analytics.allocation.fill_day import (
    apply_floor_and_scale,
    fill_day,
    round_to_target,
    small_tickets,
)
from wakamonth.analytics.allocation.unknown import allocate_unknown

__all__ = [
    "allocate_unknown",
    "apply_floor_and_scale",
    "fill_day",
    "round_to_target",
    "small_tickets",
]
