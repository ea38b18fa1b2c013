"""
Business logic and computations for SharedLedger

aggregate() and plan() are pure: they take a snapshot of entries (or
balances) and return fresh results, and are recomputed in full whenever
the snapshot changes.
"""
from __future__ import annotations
import math
import uuid
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from config import SETTLE_EPSILON, SPLIT_TOLERANCE, default_member_ids
from logging_config import get_logger
from models import (
    BalanceMap,
    InvalidEntryError,
    LedgerEntry,
    SettlementInstruction,
    SplitRatio,
)
from utils import parse_date, today_str

logger = get_logger(__name__)


# ---------- Admission ----------

def equal_split(member_ids: Sequence[str]) -> SplitRatio:
    """Equal shares for all members"""
    n = max(1, len(member_ids))
    return {m: 1.0 / n for m in member_ids}


def validate_split(
    split: SplitRatio,
    member_ids: Sequence[str],
    tolerance: float = SPLIT_TOLERANCE
) -> SplitRatio:
    """Check a split ratio before it is admitted; returns a float copy"""
    out = {}
    for k, v in split.items():
        if k not in member_ids:
            raise InvalidEntryError(f"Unknown member in split: {k}")
        try:
            share = float(v)
        except (TypeError, ValueError):
            raise InvalidEntryError(f"Share for {k} is not a number") from None
        if not math.isfinite(share) or share < 0:
            raise InvalidEntryError(f"Share for {k} must be a non-negative number")
        out[k] = share
    total = sum(out.values())
    if abs(total - 1.0) > tolerance:
        raise InvalidEntryError("Split ratio must total 1.00")
    return out


def validate_amount(amount) -> float:
    """Amount must be a positive finite number"""
    try:
        amt = float(amount)
    except (TypeError, ValueError):
        raise InvalidEntryError("Enter a valid amount") from None
    if not math.isfinite(amt) or amt <= 0:
        raise InvalidEntryError("Enter a valid amount")
    return amt


def make_entry(
    kind: str,
    amount,
    payer: str,
    member_ids: Sequence[str],
    split: Optional[SplitRatio] = None,
    date: Optional[str] = None,
    note: str = "",
    entry_id: Optional[str] = None,
    created_by: Optional[str] = None,
) -> LedgerEntry:
    """Build a LedgerEntry, rejecting anything the aggregator should never see"""
    amt = validate_amount(amount)
    if payer not in member_ids:
        raise InvalidEntryError(f"Unknown payer: {payer}")
    shares = validate_split(split if split else equal_split(member_ids), member_ids)
    d = date or today_str()
    try:
        parse_date(d)
    except ValueError:
        raise InvalidEntryError(f"Invalid date: {d}") from None
    return LedgerEntry(
        id=entry_id or uuid.uuid4().hex,
        kind=kind,
        date=d,
        amount=amt,
        payer=payer,
        split=shares,
        note=note,
        created_by=created_by,
    )


# ---------- Core ----------

def _usable_amount(e: LedgerEntry) -> float:
    """Amount contribution of an entry; malformed amounts contribute nothing"""
    if isinstance(e.amount, bool):
        return 0.0
    try:
        amount = float(e.amount)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(amount) or amount <= 0:
        return 0.0
    return amount


def _share(split: SplitRatio, member: str, entry_id: str) -> float:
    v = split.get(member, 0.0)
    try:
        share = float(v)
    except (TypeError, ValueError):
        share = math.nan
    if not math.isfinite(share):
        logger.warning("malformed_share", entry_id=entry_id, member=member)
        return 0.0
    return share


def aggregate(
    entries: Iterable[LedgerEntry],
    members: Optional[Sequence[str]] = None
) -> BalanceMap:
    """
    Reduce entries to a net balance per member.
    Positive -> is owed money; negative -> owes money.

    Every kind uses the same rule: the payer (or income receiver) is credited
    the full amount, then each member is debited amount * share. For income
    this leaves the receiver holding only their own share and the others
    owed theirs.
    """
    member_ids = list(members) if members is not None else default_member_ids()
    bal = {m: 0.0 for m in member_ids}

    for e in entries:
        amount = _usable_amount(e)
        if not amount:
            if e.amount != 0:
                logger.warning("malformed_amount", entry_id=e.id, amount=repr(e.amount))
            continue
        if e.payer not in bal:
            logger.warning("unknown_payer", entry_id=e.id, payer=e.payer)
            continue

        split = e.split or equal_split(member_ids)
        unknown = [k for k in split if k not in bal]
        if unknown:
            logger.warning("unknown_split_members", entry_id=e.id, members=unknown)

        bal[e.payer] += amount
        for m in member_ids:
            bal[m] -= amount * _share(split, m, e.id)

    return bal


def plan(
    balances: BalanceMap,
    members: Optional[Sequence[str]] = None,
    epsilon: float = SETTLE_EPSILON
) -> List[SettlementInstruction]:
    """
    Greedy settlement: the largest debtor pays the largest creditor.
    Ties keep the configured member order; balances within epsilon of zero
    are treated as settled.
    """
    order = list(members) if members is not None else list(balances)
    order += [k for k in balances if k not in order]

    debtors = []
    creditors = []
    for m in order:
        v = balances.get(m, 0.0)
        if not isinstance(v, (int, float)) or not math.isfinite(v):
            logger.warning("malformed_balance", member=m, balance=repr(v))
            continue
        if v < -epsilon:
            debtors.append([m, -v])
        elif v > epsilon:
            creditors.append([m, v])
    # list.sort is stable, so equal amounts stay in member order
    debtors.sort(key=lambda x: x[1], reverse=True)
    creditors.sort(key=lambda x: x[1], reverse=True)

    pays = []
    i = j = 0
    while i < len(debtors) and j < len(creditors):
        d = debtors[i]
        c = creditors[j]
        x = min(d[1], c[1])
        pays.append(SettlementInstruction(d[0], c[0], x))
        d[1] -= x
        c[1] -= x
        if d[1] <= epsilon:
            i += 1
        if c[1] <= epsilon:
            j += 1
    return pays


# ---------- Reporting helpers ----------

def settle_balances(
    balances: BalanceMap,
    instructions: Iterable[SettlementInstruction]
) -> BalanceMap:
    """Balances after every instruction is paid"""
    out = dict(balances)
    for s in instructions:
        out[s.from_member] = out.get(s.from_member, 0.0) + s.amount
        out[s.to_member] = out.get(s.to_member, 0.0) - s.amount
    return out


def compute_report(
    entries: Iterable[LedgerEntry],
    members: Optional[Sequence[str]] = None
) -> Tuple[BalanceMap, List[SettlementInstruction]]:
    """Balances and suggested settlements for one snapshot"""
    balances = aggregate(entries, members)
    return balances, plan(balances, members)


def compute_summary(
    entries: Iterable[LedgerEntry],
    members: Optional[Sequence[str]] = None
) -> Dict[str, dict]:
    """
    Per-member breakdown.
    Returns dict mapping member -> {paid, share, net}; net equals aggregate().
    """
    member_ids = list(members) if members is not None else default_member_ids()
    entries = list(entries)
    paid = {m: 0.0 for m in member_ids}
    for e in entries:
        amount = _usable_amount(e)
        if amount and e.payer in paid:
            paid[e.payer] += amount
    net = aggregate(entries, member_ids)
    return {
        m: {
            "paid": paid[m],
            "share": paid[m] - net[m],
            "net": net[m],
        } for m in member_ids
    }


def filter_entries_by_kind(
    entries: Iterable[LedgerEntry],
    kind: Optional[str]
) -> List[LedgerEntry]:
    """Filter entries by kind; None or "all" keeps everything"""
    if kind in (None, "all"):
        return list(entries)
    return [e for e in entries if e.kind == kind]


def filter_entries_by_date(
    entries: Iterable[LedgerEntry],
    start: Optional[date],
    end: Optional[date]
) -> List[LedgerEntry]:
    """Filter entries by date range (inclusive); undated entries are dropped when a bound is set"""
    out = []
    for e in entries:
        if start is None and end is None:
            out.append(e)
            continue
        try:
            ed = parse_date(e.date)
        except ValueError:
            continue
        if start and ed < start:
            continue
        if end and ed > end:
            continue
        out.append(e)
    return out


def sort_entries_for_display(entries: Iterable[LedgerEntry]) -> List[LedgerEntry]:
    """Newest first; same-day entries keep their snapshot order"""
    return sorted(entries, key=lambda e: e.date, reverse=True)
