"""Console tree rendering of a month report (rich)."""

from __future__ import annotations

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from wakamonth.core.config import BRANCH_NAME_MIN_WIDTH, REPORT_LABEL
from wakamonth.core.models import DayReport, MonthReport


def format_hours(hours: float) -> str:
    return f"{round(hours, 2):g}".rjust(5) + "h"


def _line(label: str, hours: float, width: int, style: str = "white") -> Text:
    text = Text(label.ljust(width), style=style)
    text.append(" " + format_hours(hours))
    return text


def _name_width(report: MonthReport) -> int:
    names = report.branch_names
    return max([BRANCH_NAME_MIN_WIDTH, *(len(n) for n in names)])


def _day_node(parent: Tree, day: DayReport, width: int, spread: bool) -> None:
    label = Text(day.day.isoformat(), style="blue")
    if day.overflow:
        label.append("  fill-day overflow: even split", style="yellow")
    node = parent.add(label)
    if spread and day.spread_count:
        node.add(
            _line(
                f"allocated unknown / branch ({day.spread_count})",
                day.unknown_hours / day.spread_count,
                width,
            )
        )
    if day.unallocated:
        node.add(_line("unknown (unallocated, no branches)", day.unknown_hours, width, style="yellow"))
    for name, hours in day.hours.items():
        node.add(_line(name, hours, width))


def build_tree(report: MonthReport) -> Tree:
    width = _name_width(report)
    root = Tree(REPORT_LABEL)

    daily = root.add(Text("daily", style="green"))
    for day in report.days:
        _day_node(daily, day, width, report.spread_unallocated)

    overview = root.add(Text("overview", style="green"))
    overview.add(_line("total", report.total_hours, width))
    overview.add(_line("development", report.development_hours, width))
    overview.add(_line("maintenance", report.maintenance_hours, width))
    unknown_label = "unknown (allocated)" if report.spread_unallocated else "unknown (unallocated)"
    overview.add(_line(unknown_label, report.unknown_hours, width))
    return root


def print_report(report: MonthReport, console: Console | None = None) -> None:
    (console or Console()).print(build_tree(report))
