"""
Data models for SharedLedger
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional

SplitRatio = Dict[str, float]  # member id -> share (sum to 1)
BalanceMap = Dict[str, float]  # member id -> net; positive is owed, negative owes


class InvalidEntryError(ValueError):
    """Entry rejected at admission time (bad amount, split or payer)"""


@dataclass(frozen=True)
class Member:
    """Fixed participant of the shared ledger"""
    id: str
    label: str


@dataclass(frozen=True)
class LedgerEntry:
    """Single dated financial event: an expense paid or an income received"""
    id: str
    kind: str  # expense_legal, expense_other, income_rent, ...
    date: str  # YYYY-MM-DD
    amount: float
    payer: str  # paid (expense) or received (income)
    split: SplitRatio = field(default_factory=dict)
    note: str = ""
    settled: bool = False  # informational only
    created_by: Optional[str] = None


@dataclass(frozen=True)
class SettlementInstruction:
    """from_member should pay to_member the amount"""
    from_member: str
    to_member: str
    amount: float


@dataclass
class Ledger:
    """Configured members plus the current snapshot of entries"""
    members: List[Member]
    entries: List[LedgerEntry]
    version: int = 1

    @property
    def member_ids(self) -> List[str]:
        return [m.id for m in self.members]

    def label_map(self) -> Dict[str, str]:
        return {m.id: m.label for m in self.members}
