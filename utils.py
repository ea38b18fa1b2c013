"""
Utility functions for SharedLedger
"""
from __future__ import annotations
import math
from datetime import date, datetime
from typing import Dict, Optional

from models import SettlementInstruction

RUPEE = "₹"


def today_str() -> str:
    """Get today's date as ISO string"""
    return date.today().isoformat()


def parse_date(s: str) -> date:
    """Parse YYYY-MM-DD date string"""
    return datetime.strptime(s.strip(), "%Y-%m-%d").date()


def safe_float(x, default: float = 0.0) -> float:
    """Convert value to float safely, returning default on error"""
    try:
        return float(x)
    except (TypeError, ValueError):
        return default


def _group_indian(digits: str) -> str:
    """Group an integer digit string the en-IN way: 12,34,567"""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(x) -> str:
    """
    Format an amount as whole rupees with Indian digit grouping.
    Non-numeric or non-finite values render as zero.
    """
    v = safe_float(x, 0.0)
    if not math.isfinite(v):
        v = 0.0
    n = int(math.floor(abs(v) + 0.5))
    sign = "-" if v < 0 and n != 0 else ""
    return f"{sign}{RUPEE}{_group_indian(str(n))}"


def describe_balance(value: float) -> str:
    """Owed/Owes wording for a member balance"""
    label = "Owed" if value >= 0 else "Owes"
    return f"{label} {format_currency(abs(value))}"


def describe_instruction(
    instr: SettlementInstruction,
    labels: Optional[Dict[str, str]] = None
) -> str:
    """Human-readable settlement line, e.g. 'Brother 2 pays Brother 1 ₹10,000'"""
    labels = labels or {}
    src = labels.get(instr.from_member, instr.from_member)
    dst = labels.get(instr.to_member, instr.to_member)
    return f"{src} pays {dst} {format_currency(instr.amount)}"
