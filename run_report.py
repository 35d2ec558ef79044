"""Convenience launcher for the report CLI.

Usage:
  python run_report.py report --month 3 --export xlsx

Same as the ``wakamonth`` console script, for checkouts without an install.
"""

from wakamonth.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
