"""Spreadsheet export of a month report (openpyxl)."""

from __future__ import annotations

import logging
import re
from pathlib import Path

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from wakamonth.analytics.aggregations.month import aggregate_by_branch, pivot_hours, report_to_frame
from wakamonth.analytics.segments.classification import Classifier, is_development
from wakamonth.core.config import (
    AUTOLINK_ISSUE_PLACEHOLDER,
    AUTOLINK_PROJECT_PLACEHOLDER,
    SHEET_DAY_FORMAT,
    SHEET_HOURS_FORMAT,
    SHEET_LEADING_COLUMNS,
)
from wakamonth.core.models import MonthReport, UserModel
from wakamonth.core.settings import AutolinkSettings

logger = logging.getLogger(__name__)

DEFAULT_FONT = Font(color="000000", size=12)
LINK_FONT = Font(color="0563C1", size=12, underline="single")
HEADER_FONT = Font(color="000000", size=12, bold=True)
HEADER_FILL = PatternFill(fill_type="solid", fgColor="E0E0E0")
TOTAL_FILL = PatternFill(fill_type="solid", fgColor="C0C0C0")
CENTER_ALIGN = Alignment(horizontal="center", vertical="center", wrap_text=True)
THIN = Side(style="thin", color="000000")
HEADER_BORDER = Border(left=THIN, right=THIN, top=THIN, bottom=THIN)
TOTAL_BORDER = Border(left=THIN, right=THIN, top=Side(style="double", color="000000"), bottom=THIN)

FIRST_DAY_COLUMN = len(SHEET_LEADING_COLUMNS) + 1
_SHEET_TITLE_INVALID = re.compile(r"[\\/*?:\[\]]")


def sheet_title(report: MonthReport, project: str = "") -> str:
    period = f"{report.year}-{report.month:02d}"
    title = f"Hours {project} {period}" if project else f"Hours {period}"
    # Excel caps sheet titles at 31 characters and forbids a few symbols.
    return _SHEET_TITLE_INVALID.sub("-", title)[:31]


def export_path(export_dir: str | Path, report: MonthReport, user: UserModel) -> Path:
    return Path(export_dir) / f"{report.year}-{report.month:02d}-{user.username}.xlsx"


def branch_link(branch: str, project: str, autolink: AutolinkSettings | None) -> str | None:
    if autolink is None or not autolink.enabled:
        return None
    match = re.search(autolink.issue_regex, branch)
    if not match:
        return None
    return autolink.url.replace(AUTOLINK_PROJECT_PLACEHOLDER, project).replace(
        AUTOLINK_ISSUE_PLACEHOLDER, match.group(0)
    )


def _style_header(cell) -> None:
    cell.font = HEADER_FONT
    cell.fill = HEADER_FILL
    cell.alignment = CENTER_ALIGN
    cell.border = HEADER_BORDER


def _style_total(cell) -> None:
    cell.font = HEADER_FONT
    cell.fill = TOTAL_FILL
    cell.alignment = CENTER_ALIGN
    cell.border = TOTAL_BORDER
    cell.number_format = SHEET_HOURS_FORMAT


def build_workbook(
    report: MonthReport,
    classify: Classifier,
    *,
    project: str = "",
    autolink: AutolinkSettings | None = None,
) -> Workbook:
    """Lay out one row per branch and one column per fetched day.

    Month Total, the totals row and the Development / Maintenance sums are
    spreadsheet formulas so edits in the sheet stay consistent.
    """
    frame = report_to_frame(report, classify)
    branches = aggregate_by_branch(frame)
    matrix = pivot_hours(frame)
    # Days without branches still get a (blank) column so the month reads as a calendar.
    days = sorted({d.day for d in report.days} | set(report.empty_days))

    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title(report, project)

    for col, header in enumerate(SHEET_LEADING_COLUMNS, start=1):
        _style_header(ws.cell(row=1, column=col, value=header))
    ws.column_dimensions["A"].width = 60
    for col in range(2, FIRST_DAY_COLUMN):
        ws.column_dimensions[get_column_letter(col)].width = 15
    for offset, day in enumerate(days):
        col = FIRST_DAY_COLUMN + offset
        _style_header(ws.cell(row=1, column=col, value=day.strftime(SHEET_DAY_FORMAT)))
        ws.column_dimensions[get_column_letter(col)].width = 12

    last_day_col = FIRST_DAY_COLUMN + len(days) - 1
    row = 2
    for name in branches["branch"]:
        name_cell = ws.cell(row=row, column=1, value=name)
        url = branch_link(name, project, autolink)
        if url:
            name_cell.hyperlink = url
            name_cell.font = LINK_FONT
        else:
            name_cell.font = DEFAULT_FONT
        flag_col = 3 if is_development(classify, name) else 4
        ws.cell(row=row, column=flag_col, value="x").font = DEFAULT_FONT

        for offset, day in enumerate(days):
            hours = matrix.at[name, day] if day in matrix.columns else None
            if hours is None or pd.isna(hours):
                continue
            cell = ws.cell(row=row, column=FIRST_DAY_COLUMN + offset, value=float(hours))
            cell.font = DEFAULT_FONT
            cell.number_format = SHEET_HOURS_FORMAT

        if days:
            first = f"{get_column_letter(FIRST_DAY_COLUMN)}{row}"
            last = f"{get_column_letter(last_day_col)}{row}"
            total_cell = ws.cell(row=row, column=2, value=f"=SUM({first}:{last})")
        else:
            total_cell = ws.cell(row=row, column=2, value=0)
        total_cell.font = DEFAULT_FONT
        total_cell.number_format = SHEET_HOURS_FORMAT
        row += 1

    last_row = row - 1
    _style_total(ws.cell(row=row, column=1, value="Total:"))
    if last_row >= 2:
        _style_total(ws.cell(row=row, column=2, value=f"=SUM(B2:B{last_row})"))
        _style_total(ws.cell(row=row, column=3, value=f'=SUMIF(C2:C{last_row},"x",B2:B{last_row})'))
        _style_total(ws.cell(row=row, column=4, value=f'=SUMIF(D2:D{last_row},"x",B2:B{last_row})'))
        for offset in range(len(days)):
            letter = get_column_letter(FIRST_DAY_COLUMN + offset)
            formula = f"=SUM({letter}2:{letter}{last_row})"
            cell = ws.cell(row=row, column=FIRST_DAY_COLUMN + offset, value=formula)
            _style_total(cell)
    return wb


def write_workbook(
    report: MonthReport,
    path: str | Path,
    classify: Classifier,
    *,
    project: str = "",
    autolink: AutolinkSettings | None = None,
) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    wb = build_workbook(report, classify, project=project, autolink=autolink)
    wb.save(path)
    logger.info("excel export: %s", path)
    return path
