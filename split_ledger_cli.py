"""
SplitLedger command line
- List groups, show balances and the transfers that settle them.
- Export a group's report to Excel or its expenses to CSV.

Run:
  splitledger groups
  splitledger balances GROUP_ID
  splitledger export-excel GROUP_ID report.xlsx --start 2024-01-01

State is read from $SPLITLEDGER_HOME (or the platform data directory) unless
--data-dir is given.
"""
from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

from main_app import SplitLedgerApp
from models import ValidationError
from storage import JsonFileStorage
from logging_setup import setup_logging
from utils import app_dir, parse_date

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="splitledger", description="Shared group expenses")
    parser.add_argument("--data-dir", help="directory holding groups/expenses/payments JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("groups", help="list groups with totals")

    p = sub.add_parser("balances", help="balances and proposed settlements of a group")
    p.add_argument("group_id")

    p = sub.add_parser("export-excel", help="write a group report workbook")
    p.add_argument("group_id")
    p.add_argument("path")
    p.add_argument("--start", type=parse_date, help="YYYY-MM-DD, inclusive")
    p.add_argument("--end", type=parse_date, help="YYYY-MM-DD, inclusive")

    p = sub.add_parser("export-csv", help="write a group's expenses as CSV")
    p.add_argument("group_id")
    p.add_argument("path")
    return parser


def _print_groups(app: SplitLedgerApp) -> None:
    dash = app.dashboard()
    print(f"{dash['group_count']} groups, {dash['expense_count']} expenses, "
          f"total spent {dash['total_spent']:.2f}")
    for g in app.groups():
        o = app.overview(g.id)
        state = "settled" if o["settled"] else "open"
        print(f"{g.id}  {g.name}  members={o['member_count']}  "
              f"expenses={o['expense_count']}  spent={o['total_spent']:.2f}  {state}")


def _print_balances(app: SplitLedgerApp, group_id: str) -> None:
    group = app.store.get_group(group_id)
    balances = app.balances(group_id)
    for m in group.members:
        print(f"{m.name:<20} {balances[m.id]:>10.2f}")
    settlements = app.settlements(group_id)
    if not settlements:
        print("All settled up")
    for s in settlements:
        print(f"{s.from_name} pays {s.to_name} {s.amount:.2f}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the command line"""
    args = build_parser().parse_args(argv)
    data_dir = args.data_dir or app_dir()
    setup_logging(console_level=logging.DEBUG if args.verbose else logging.WARNING)

    app = SplitLedgerApp(JsonFileStorage(data_dir))
    try:
        if args.command == "groups":
            _print_groups(app)
        elif args.command == "balances":
            _print_balances(app, args.group_id)
        elif args.command == "export-excel":
            app.export_excel(args.group_id, args.path, args.start, args.end)
            print(f"Exported: {args.path}")
        elif args.command == "export-csv":
            count = app.export_csv(args.group_id, args.path)
            print(f"Exported {count} expenses to: {args.path}")
    except ValidationError as ex:
        logger.debug("Command %s rejected", args.command, exc_info=True)
        print(f"error: {ex}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
