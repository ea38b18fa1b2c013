"""
Configuration, constants and record conversion for SharedLedger
"""
from __future__ import annotations
import json
from dataclasses import asdict
from typing import Dict, List, Optional

from models import LedgerEntry, Ledger, Member
from utils import safe_float

# Balances within one currency unit of zero are treated as settled
SETTLE_EPSILON = 1.0
# Allowed deviation of a split ratio's total from 1.0
SPLIT_TOLERANCE = 0.0001
# Tolerance for the sum of all balances (conservation checks)
SUM_TOLERANCE = 1e-6
CURRENCY_CODE = "INR"

DEFAULT_MEMBERS: List[Member] = [
    Member("b1", "Brother 1"),
    Member("b2", "Brother 2"),
    Member("b3", "Brother 3"),
]

ENTRY_KINDS: Dict[str, str] = {
    "expense_legal": "Legal expense",
    "expense_other": "Other expense",
    "income_rent": "Rental income",
}


def default_member_ids() -> List[str]:
    return [m.id for m in DEFAULT_MEMBERS]


def kind_label(kind: str) -> str:
    return ENTRY_KINDS.get(kind, kind)


def load_members(path: str) -> List[Member]:
    """
    Load the ordered member list from JSON file.
    Accepts {"members": [{"id": "b1", "label": "Brother 1"}, "b2", ...]}
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return []
    if not isinstance(data, dict):
        raise ValueError("members file must hold a JSON object")
    members = []
    for m in data.get("members", []):
        if isinstance(m, str):
            members.append(Member(m, m))
        elif not isinstance(m, dict):
            raise ValueError(f"Invalid member record: {m!r}")
        else:
            members.append(Member(str(m["id"]), str(m.get("label", m["id"]))))
    return members


def get_default_ledger(path: Optional[str] = None) -> Ledger:
    """Create an empty ledger with the configured (or default) members"""
    members = load_members(path) if path else []
    if not members:
        members = list(DEFAULT_MEMBERS)
    return Ledger(members=members, entries=[])


def entry_to_dict(e: LedgerEntry) -> dict:
    """Convert LedgerEntry to a plain record"""
    d = asdict(e)
    d["split"] = dict(e.split)
    return d


def dict_to_entry(d: dict) -> LedgerEntry:
    """
    Convert a record from the storage layer to a LedgerEntry.
    Understands the sync layer's field names ("shares", "markedPaid").
    The amount is kept as delivered when it is not numeric; the aggregator
    ignores it.
    """
    split = d.get("split")
    if split is None:
        split = d.get("shares") or {}
    settled = d.get("settled")
    if settled is None:
        settled = d.get("markedPaid", False)
    amount = d.get("amount", 0.0)
    if isinstance(amount, str):
        amount = safe_float(amount, 0.0)
    return LedgerEntry(
        id=str(d.get("id", "")),
        kind=str(d.get("kind", "expense_other")),
        date=str(d.get("date", "")),
        amount=amount,
        payer=str(d.get("payer", "")),
        split=dict(split),
        note=d.get("note") or "",
        settled=bool(settled),
        created_by=d.get("created_by", d.get("createdBy")),
    )


def ledger_to_dict(ledger: Ledger) -> dict:
    """Convert Ledger object to dictionary for JSON serialization"""
    return {
        "version": ledger.version,
        "members": [asdict(m) for m in ledger.members],
        "entries": [entry_to_dict(e) for e in ledger.entries],
    }


def dict_to_ledger(d: dict) -> Ledger:
    """Convert dictionary from JSON to Ledger object"""
    members = [Member(**m) for m in d.get("members", [])] or list(DEFAULT_MEMBERS)
    return Ledger(
        version=d.get("version", 1),
        members=members,
        entries=[dict_to_entry(e) for e in d.get("entries", [])],
    )
