"""AWS Account Cost Trends

Prints daily unblended cost per linked account for the last N days, with a
trend arrow and a color per cell showing how much the cost moved since the
previous day.

Run with --dry-run to avoid AWS calls and print sample data.
"""
from __future__ import annotations

import argparse
import datetime
import logging
import sys
from typing import List, Optional, Tuple

import pandas as pd
from rich.console import Console

from account_cost_trends.aws import (
    CostExplorerSource,
    OrganizationsNameLookup,
    SampleCostSource,
    SampleNameLookup,
    check_credentials,
    get_boto_session,
)
from account_cost_trends.cache import NameCache
from account_cost_trends.errors import CostReportError
from account_cost_trends.models import ZERO, AccountRow, DailyTotal, build_cost_table, build_rows, daily_totals
from account_cost_trends.report import PLAIN, ColorScheme, render

LOG = logging.getLogger("account_cost_trends")

DEFAULT_DAYS = 8
MAX_DAYS = 365

EPILOG = """\
Examples:
  %(prog)s              # Analyze last 8 days
  %(prog)s -d 30        # Analyze last 30 days
  %(prog)s --no-color   # Disable color output
  %(prog)s --no-cache   # Disable caching

Note: All amounts are in USD
"""


class ReportArgumentParser(argparse.ArgumentParser):
    """Exits with status 1 on bad arguments instead of argparse's 2."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def days_type(value: str) -> int:
    days = int(value) if value.isascii() and value.isdigit() else 0
    if not 1 <= days <= MAX_DAYS:
        raise argparse.ArgumentTypeError(f"Days must be between 1 and {MAX_DAYS}")
    return days


def build_parser() -> argparse.ArgumentParser:
    p = ReportArgumentParser(
        prog="account-cost-trends",
        description="AWS Cost Analysis: daily cost per linked account with day-over-day trends",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("--days", "-d", type=days_type, default=DEFAULT_DAYS,
                   help=f"Number of days to analyze (default: {DEFAULT_DAYS})")
    p.add_argument("--no-color", action="store_true", help="Disable color output")
    p.add_argument("--no-cache", action="store_true", help="Disable account name caching")
    p.add_argument("--profile", default=None, help="AWS CLI profile to use from your credentials file")
    p.add_argument("--dry-run", action="store_true", help="Do not call AWS; use sample data")
    p.add_argument("--csv", default=None, help="Also write the account x date cost matrix to this CSV path")
    p.add_argument("--verbose", "-v", action="store_true", help="Show debug logs")
    return p


def parse_args(argv=None) -> argparse.Namespace:
    argv = sys.argv[1:] if argv is None else list(argv)
    p = build_parser()
    # help wins over any other (possibly invalid) argument
    if "-h" in argv or "--help" in argv:
        p.print_help()
        p.exit(0)
    return p.parse_args(argv)


def cost_window(days: int, today: Optional[datetime.date] = None) -> Tuple[str, str]:
    end = today or datetime.date.today()
    start = end - datetime.timedelta(days=days)
    return start.isoformat(), end.isoformat()


def export_csv(path: str, dates: List[str], rows: List[AccountRow], totals: List[DailyTotal]) -> None:
    df = pd.DataFrame(
        [[ZERO if p.amount is None else p.amount for p in row.points] for row in rows] + [[t.amount for t in totals]],
        index=pd.Index([row.display_name for row in rows] + ["TOTAL"], name="Account"),
        columns=dates,
    )
    df.to_csv(path)


def analyze(args, source, cache: NameCache, console: Console, use_cache: bool = True,
            today: Optional[datetime.date] = None) -> None:
    start, end = cost_window(args.days, today)
    data = source.fetch(start, end)
    LOG.debug("Fetched %d cost records over %d dates", len(data.records), len(data.dates))

    table = build_cost_table(data)
    names = {account: cache.resolve(account, use_cache=use_cache) for account in table.index}
    rows = build_rows(table, names)
    totals = daily_totals(data.dates, rows)

    colors = PLAIN if args.no_color else ColorScheme()
    console.print(f"\nAWS Cost Analysis Report\nPeriod: {start} to {end}\nAll amounts in USD\n")
    console.print(render(data.dates, rows, totals, colors))

    if args.csv:
        try:
            export_csv(args.csv, data.dates, rows, totals)
            LOG.info("Cost matrix written to %s", args.csv)
        except OSError as e:
            LOG.error("Failed to write CSV %s: %s", args.csv, e)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s: %(message)s")

    try:
        if args.dry_run:
            source, lookup = SampleCostSource(), SampleNameLookup()
        else:
            session = get_boto_session(args.profile)
            check_credentials(session)
            source, lookup = CostExplorerSource(session), OrganizationsNameLookup(session)

        cache = NameCache(lookup)
        use_cache = not args.no_cache and cache.init()
        console = Console(no_color=args.no_color, highlight=False, markup=False, emoji=False, soft_wrap=True)
        analyze(args, source, cache, console, use_cache=use_cache)
    except CostReportError as e:
        LOG.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
