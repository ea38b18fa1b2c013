"""
SharedLedger
- Shared legal expenses, other expenses and rental income for a small fixed group.
- Prints who owes whom and suggests the payments that settle everyone.

Run:
  shared-ledger entries.csv [--members members.json] [--kind income_rent] [--excel report.xlsx]
"""
from __future__ import annotations
import argparse
import sys
from typing import List, Optional

from computations import compute_report, filter_entries_by_kind, sort_entries_for_display
from config import ENTRY_KINDS, get_default_ledger, kind_label, load_members
from csv_handler import import_entries_from_csv
from excel_export import export_excel
from logging_config import configure_logging, get_logger
from models import Ledger
from utils import describe_balance, describe_instruction, format_currency

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shared-ledger",
        description="Balances and suggested settlements for a shared expense/rent ledger",
    )
    parser.add_argument("entries", help="CSV file with ledger entries")
    parser.add_argument("--members", help="JSON file with the ordered member list")
    parser.add_argument(
        "--kind",
        default="all",
        choices=["all"] + list(ENTRY_KINDS),
        help="Only list entries of this kind (balances always use all entries)",
    )
    parser.add_argument("--excel", help="Also write an Excel report to this path")
    parser.add_argument("--log-level", default="WARNING")
    return parser


def render_report(ledger: Ledger, kind: Optional[str] = None) -> str:
    """Plain-text report: balances, suggested settlements, entries"""
    labels = ledger.label_map()
    balances, settlements = compute_report(ledger.entries, ledger.member_ids)

    lines = ["Balances (who is owed / who owes)"]
    for m in ledger.members:
        lines.append(f"  {m.label}: {describe_balance(balances[m.id])}")

    lines.append("")
    lines.append("Suggested settlements")
    if not settlements:
        lines.append("  All settled.")
    for s in settlements:
        lines.append(f"  {describe_instruction(s, labels)}")

    lines.append("")
    lines.append("Ledger")
    shown = sort_entries_for_display(filter_entries_by_kind(ledger.entries, kind))
    if not shown:
        lines.append("  No entries yet.")
    for e in shown:
        status = "Paid" if e.settled else "Open"
        lines.append(
            f"  {e.date}  {kind_label(e.kind):<14} {labels.get(e.payer, e.payer):<12} "
            f"{format_currency(e.amount):>12}  [{status}] {e.note}".rstrip()
        )
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the command line"""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if args.members:
        try:
            members = load_members(args.members)
        except (OSError, ValueError, KeyError) as exc:
            logger.error("members_unreadable", path=args.members, error=str(exc))
            return 1
        if not members:
            logger.error("members_unreadable", path=args.members, error="no members found")
            return 1
        ledger = Ledger(members=members, entries=[])
    else:
        ledger = get_default_ledger()
    try:
        ledger.entries = import_entries_from_csv(args.entries)
    except OSError as exc:
        logger.error("entries_unreadable", path=args.entries, error=str(exc))
        return 1

    print(render_report(ledger, args.kind))

    if args.excel:
        try:
            export_excel(ledger, args.excel, kind=args.kind)
        except OSError as exc:
            logger.error("excel_export_failed", path=args.excel, error=str(exc))
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
