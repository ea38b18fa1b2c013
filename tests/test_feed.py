"""
test_feed.py - Snapshot delivery and full recomputation
"""

import pytest
from structlog.testing import capture_logs

from feed import LedgerFeed, LedgerState
from models import SettlementInstruction
from conftest import MEMBERS, entry


class TestLedgerFeed:

    def test_initial_state(self):
        feed = LedgerFeed(MEMBERS)
        assert feed.state.entries == ()
        assert feed.state.balances == {"b1": 0.0, "b2": 0.0, "b3": 0.0}
        assert feed.state.settlements == ()

    def test_publish_recomputes(self, legal_expense):
        feed = LedgerFeed(MEMBERS)
        state = feed.publish([legal_expense])
        assert isinstance(state, LedgerState)
        assert state.balances["b1"] == pytest.approx(20000)
        assert state.settlements == (
            SettlementInstruction("b2", "b1", 10000),
            SettlementInstruction("b3", "b1", 10000),
        )
        assert feed.state is state

    def test_each_snapshot_replaces_previous(self, legal_expense, rent_income):
        feed = LedgerFeed(MEMBERS)
        feed.publish([legal_expense, rent_income])
        state = feed.publish([rent_income])
        assert state.entries == (rent_income,)
        assert state.balances == pytest.approx({"b1": -3000, "b2": -3000, "b3": 6000})

    def test_subscribers_receive_state(self, legal_expense):
        feed = LedgerFeed(MEMBERS)
        seen = []
        feed.subscribe(seen.append)
        feed.publish([legal_expense])
        feed.publish([])
        assert len(seen) == 2
        assert seen[1].settlements == ()

    def test_unsubscribe(self, legal_expense):
        feed = LedgerFeed(MEMBERS)
        seen = []
        unsubscribe = feed.subscribe(seen.append)
        unsubscribe()
        unsubscribe()
        feed.publish([legal_expense])
        assert seen == []

    def test_failing_subscriber_does_not_block_others(self, legal_expense):
        feed = LedgerFeed(MEMBERS)
        seen = []

        def broken(state):
            raise RuntimeError("render failed")

        feed.subscribe(broken)
        feed.subscribe(seen.append)
        with capture_logs() as logs:
            feed.publish([legal_expense])
        assert len(seen) == 1
        assert any(log["event"] == "subscriber_failed" for log in logs)

    def test_snapshot_is_decoupled_from_caller_list(self, legal_expense, rent_income):
        feed = LedgerFeed(MEMBERS)
        entries = [legal_expense]
        feed.publish(entries)
        entries.append(rent_income)
        assert feed.state.entries == (legal_expense,)

    def test_custom_epsilon(self):
        feed = LedgerFeed(["a", "b"], epsilon=100)
        state = feed.publish([entry(150, "a", split={"a": 0.5, "b": 0.5})])
        assert state.settlements == ()
