"""
test_admission.py - Entry admission checks (amount, split, payer, date)
"""

import math

import pytest

from computations import equal_split, make_entry, validate_amount, validate_split
from models import InvalidEntryError
from conftest import MEMBERS


class TestValidateAmount:

    @pytest.mark.parametrize("amount", [0, -1, math.nan, math.inf, None, "", "abc"])
    def test_rejects_bad_amounts(self, amount):
        with pytest.raises(InvalidEntryError, match="valid amount"):
            validate_amount(amount)

    def test_accepts_numeric_string(self):
        assert validate_amount("25000") == 25000.0


class TestValidateSplit:

    def test_equal_thirds_pass(self):
        assert validate_split(equal_split(MEMBERS), MEMBERS) == pytest.approx(
            {"b1": 1 / 3, "b2": 1 / 3, "b3": 1 / 3}
        )

    def test_rounded_thirds_within_tolerance(self):
        validate_split({"b1": 0.33333, "b2": 0.33333, "b3": 0.33334}, MEMBERS)

    def test_total_off_by_more_than_tolerance(self):
        with pytest.raises(InvalidEntryError, match="total 1.00"):
            validate_split({"b1": 0.33, "b2": 0.33, "b3": 0.33}, MEMBERS)

    def test_negative_share(self):
        with pytest.raises(InvalidEntryError, match="non-negative"):
            validate_split({"b1": 1.5, "b2": -0.5}, MEMBERS)

    def test_non_numeric_share(self):
        with pytest.raises(InvalidEntryError, match="not a number"):
            validate_split({"b1": "half", "b2": 0.5}, MEMBERS)

    def test_unknown_member(self):
        with pytest.raises(InvalidEntryError, match="Unknown member"):
            validate_split({"b1": 0.5, "b9": 0.5}, MEMBERS)

    def test_missing_member_is_allowed(self):
        assert validate_split({"b1": 0.5, "b2": 0.5}, MEMBERS) == {"b1": 0.5, "b2": 0.5}


class TestMakeEntry:

    def test_defaults(self):
        e = make_entry("expense_legal", 30000, "b1", MEMBERS)
        assert e.amount == 30000.0
        assert e.split == pytest.approx(equal_split(MEMBERS))
        assert e.settled is False
        assert len(e.id) == 32
        assert len(e.date) == 10

    def test_explicit_fields(self):
        e = make_entry(
            "income_rent", "9000", "b3", MEMBERS,
            split={"b1": 0.5, "b2": 0.25, "b3": 0.25},
            date="2026-02-01", note="Rent Feb 2026", entry_id="r1", created_by="uid-1",
        )
        assert e.id == "r1"
        assert e.date == "2026-02-01"
        assert e.note == "Rent Feb 2026"
        assert e.created_by == "uid-1"

    def test_unknown_payer(self):
        with pytest.raises(InvalidEntryError, match="Unknown payer"):
            make_entry("expense_other", 100, "b4", MEMBERS)

    def test_bad_date(self):
        with pytest.raises(InvalidEntryError, match="Invalid date"):
            make_entry("expense_other", 100, "b1", MEMBERS, date="01/02/2026")

    def test_entries_are_immutable(self):
        e = make_entry("expense_other", 100, "b1", MEMBERS)
        with pytest.raises(AttributeError):
            e.amount = 200

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            make_entry("expense_other", -5, "b1", MEMBERS)
