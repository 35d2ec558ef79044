"""Command line entry point: ``wakamonth report``."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

import pytz
from rich.console import Console
from rich.text import Text

from wakamonth.analytics.segments.classification import regex_classifier
from wakamonth.core.config import EXPORT_FORMATS, FETCH_MAX_WORKERS, WAKAMONTH_RC_PATH, WAKATIME_CONFIG_PATH
from wakamonth.core.errors import AuthenticationFailure, ConfigurationError, FetchError, NoDataFound
from wakamonth.core.service import ReportService
from wakamonth.core.settings import load_settings
from wakamonth.core.waka_client import WakaAPI
from wakamonth.visual.tree import print_report
from wakamonth.visual.workbook import export_path, write_workbook

logger = logging.getLogger("wakamonth")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wakamonth", description="Monthly hour reports from WakaTime / Wakapi branches."
    )
    parser.add_argument(
        "--config", type=Path, default=WAKAMONTH_RC_PATH, help="Path to the wakamonth rc file (YAML)."
    )
    parser.add_argument(
        "--wakatime-config",
        type=Path,
        default=WAKATIME_CONFIG_PATH,
        help="Path to the WakaTime client config holding api_url / api_key.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output.")
    sub = parser.add_subparsers(dest="command", required=True)

    report = sub.add_parser("report", help="Make an hour report (month).")
    report.add_argument(
        "-m",
        "--month",
        type=int,
        choices=range(1, 13),
        metavar="1-12",
        default=None,
        help="Report month number.",
    )
    report.add_argument("-y", "--year", type=int, default=None, help="Year to report on.")
    report.add_argument("-u", "--user", type=str, default="current", help="User to report on.")
    report.add_argument("-p", "--project", type=str, default="", help="Project to filter on.")
    report.add_argument(
        "-f",
        "--fill-day",
        action="store_true",
        help="Fill each day to 8 hours by proportionally increasing hours on tickets.",
    )
    report.add_argument("-e", "--export", choices=list(EXPORT_FORMATS), default=None, help="Export to.")
    report.add_argument(
        "--jobs", type=int, default=FETCH_MAX_WORKERS, help="Parallel day fetches (1 = sequential)."
    )
    return parser


def _progress(message: str, done: int | None, total: int | None) -> None:
    if done is not None and total:
        logger.debug("%s (%d/%d)", message, done, total)
    else:
        logger.debug("%s", message)


def run_report(args: argparse.Namespace, console: Console) -> int:
    settings = load_settings(args.config, args.wakatime_config)
    config = settings.allocation_config(fill_day=args.fill_day)
    classify = regex_classifier(config.ignore_pattern)

    now = datetime.now(pytz.timezone(settings.timezone))
    year = args.year or now.year
    month = args.month or now.month

    api = WakaAPI(settings.api_url, settings.api_key, settings.backend)
    service = ReportService(api, max_workers=args.jobs)
    user = service.resolve_user(args.user)
    try:
        report = service.build_report(
            user, year, month, config, args.project, classify=classify, progress=_progress
        )
    except NoDataFound:
        console.print(Text(f"No results found for {args.project or '*'}/{user.id}-{year}/{month}"))
        return 1

    print_report(report, console)
    if args.export == "xlsx":
        path = write_workbook(
            report,
            export_path(settings.export_dir, report, user),
            classify,
            project=args.project,
            autolink=settings.autolink,
        )
        console.print(Text.assemble(("excel export: ", "green"), str(path)))
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console = Console()
    try:
        return run_report(args, console)
    except (ConfigurationError, AuthenticationFailure, FetchError) as exc:
        logger.debug("Report aborted", exc_info=True)
        console.print(Text.assemble(("error: ", "red"), str(exc)))
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
