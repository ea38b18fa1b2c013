"""
Snapshot feed for SharedLedger

The storage/sync layer publishes the complete list of entries on every
change; balances and settlements are recomputed from scratch and handed
to subscribers.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from computations import aggregate, plan
from config import SETTLE_EPSILON, default_member_ids
from logging_config import get_logger
from models import BalanceMap, LedgerEntry, SettlementInstruction

logger = get_logger(__name__)


@dataclass(frozen=True)
class LedgerState:
    """Entries of one snapshot with the balances and settlements derived from it"""
    entries: Tuple[LedgerEntry, ...] = ()
    balances: BalanceMap = field(default_factory=dict)
    settlements: Tuple[SettlementInstruction, ...] = ()


Subscriber = Callable[[LedgerState], None]


class LedgerFeed:
    """Recomputes the ledger state for each published snapshot"""

    def __init__(
        self,
        members: Optional[Sequence[str]] = None,
        epsilon: float = SETTLE_EPSILON
    ):
        self.members: List[str] = list(members) if members is not None else default_member_ids()
        self.epsilon = epsilon
        self._subscribers: List[Subscriber] = []
        self._state = LedgerState(balances={m: 0.0 for m in self.members})

    @property
    def state(self) -> LedgerState:
        return self._state

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback; returns a function that unregisters it"""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, entries: Iterable[LedgerEntry]) -> LedgerState:
        """Take a full snapshot, recompute and notify subscribers"""
        snapshot = tuple(entries)
        balances = aggregate(snapshot, self.members)
        settlements = tuple(plan(balances, self.members, self.epsilon))
        self._state = LedgerState(snapshot, balances, settlements)
        logger.debug("snapshot_published", entries=len(snapshot), settlements=len(settlements))

        for cb in list(self._subscribers):
            try:
                cb(self._state)
            except Exception:
                logger.exception("subscriber_failed", subscriber=getattr(cb, "__name__", repr(cb)))
        return self._state
