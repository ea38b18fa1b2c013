"""
conftest.py - Shared pytest fixtures for SharedLedger tests
"""

import pytest
import structlog

from computations import equal_split
from config import DEFAULT_MEMBERS
from models import Ledger, LedgerEntry

MEMBERS = ["b1", "b2", "b3"]


def entry(amount, payer, split=None, kind="expense_legal", date="2026-01-15",
          entry_id=None, note="", settled=False):
    """Build an entry without admission checks (snapshot data)."""
    return LedgerEntry(
        id=entry_id or f"{kind}-{payer}-{amount}",
        kind=kind,
        date=date,
        amount=amount,
        payer=payer,
        split=split if split is not None else equal_split(MEMBERS),
        note=note,
        settled=settled,
    )


@pytest.fixture
def legal_expense():
    """Scenario 1: 30000 paid by b1, equal split."""
    return entry(30000, "b1", entry_id="e1")


@pytest.fixture
def rent_income():
    """Scenario 2: rent 9000 received by b3, equal split."""
    return entry(9000, "b3", kind="income_rent", date="2026-02-01", entry_id="r1")


@pytest.fixture
def sample_ledger(legal_expense, rent_income):
    uneven = entry(10000, "b2", split={"b1": 0.5, "b2": 0.25, "b3": 0.25},
                   kind="expense_other", date="2026-01-20", entry_id="o1",
                   note="Registry fees", settled=True)
    return Ledger(members=list(DEFAULT_MEMBERS), entries=[legal_expense, rent_income, uneven])


@pytest.fixture(autouse=True)
def _reset_structlog():
    """The CLI configures structlog globally; undo it between tests."""
    yield
    structlog.reset_defaults()
