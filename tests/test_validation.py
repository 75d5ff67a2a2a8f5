from __future__ import annotations

import math

import pytest

from errors import InvalidInputError, LedgerError, ValidationError
from models import EqualSplit, ExactSplit, Expense, Member, PercentageSplit, Settlement, SplitDetail
from validation import (
    make_equal_expense,
    make_exact_expense,
    make_percentage_expense,
    make_settlement,
    validate_expense,
    validate_references,
    validate_settlement,
)


def test_equal_expense_defaults():
    e = make_equal_expense("g", "Pizza", 24.0, "m1", ["m1", "m2"], category="Food", date="2024-05-01")
    assert e.split == EqualSplit()
    assert e.split_type == "equal"
    assert e.split_among == ["m1", "m2"]
    assert e.id
    assert e.date == "2024-05-01"


def test_equal_expense_needs_participants():
    with pytest.raises(ValidationError, match="at least one member"):
        make_equal_expense("g", "Pizza", 24.0, "m1", [])


@pytest.mark.parametrize("amount", [0, -5.0])
def test_amount_must_be_positive(amount):
    with pytest.raises(ValidationError, match="positive"):
        make_equal_expense("g", "Pizza", amount, "m1", ["m1"])


def test_nan_amount_is_invalid_input():
    with pytest.raises(InvalidInputError):
        make_equal_expense("g", "Pizza", math.nan, "m1", ["m1"])


def test_exact_expense_derives_participants():
    e = make_exact_expense("g", "Taxi", 40.0, "m1", [("m1", 15.0), SplitDetail("m2", 25.0)])
    assert e.split == ExactSplit((SplitDetail("m1", 15.0), SplitDetail("m2", 25.0)))
    assert e.split_among == ["m1", "m2"]


def test_exact_split_within_tolerance_is_accepted():
    e = make_exact_expense("g", "Taxi", 100.0, "m1", [("m1", 50.0), ("m2", 50.009)])
    assert e.amount == 100.0


def test_exact_split_outside_tolerance_is_rejected():
    with pytest.raises(ValidationError, match="must equal total"):
        make_exact_expense("g", "Taxi", 100.0, "m1", [("m1", 50.0), ("m2", 50.011)])


def test_exact_split_needs_details():
    with pytest.raises(ValidationError, match="split detail"):
        make_exact_expense("g", "Taxi", 100.0, "m1", [])


def test_percentage_split_must_sum_to_100():
    e = make_percentage_expense("g", "Hotel", 300.0, "m1", [("m1", 50.0), ("m2", 50.0)])
    assert e.split == PercentageSplit((SplitDetail("m1", 50.0), SplitDetail("m2", 50.0)))
    with pytest.raises(ValidationError, match="sum to 100"):
        make_percentage_expense("g", "Hotel", 300.0, "m1", [("m1", 50.0), ("m2", 49.0)])


def test_percentage_split_within_tolerance_is_accepted():
    e = make_percentage_expense("g", "Hotel", 300.0, "m1", [("m1", 50.0), ("m2", 50.009)])
    assert e.split_details[1].value == 50.009


def test_percentage_split_outside_tolerance_is_rejected():
    with pytest.raises(ValidationError, match="sum to 100"):
        make_percentage_expense("g", "Hotel", 300.0, "m1", [("m1", 50.0), ("m2", 50.011)])


def test_settlement_rules():
    s = make_settlement("g", "m2", "m1", 12.5, settled_at="2024-05-02")
    assert (s.from_member, s.to_member, s.amount) == ("m2", "m1", 12.5)
    with pytest.raises(ValidationError, match="yourself"):
        make_settlement("g", "m1", "m1", 12.5)
    with pytest.raises(ValidationError):
        make_settlement("g", "m2", "m1", 0)


def test_validate_existing_records():
    good = Expense("e", "g", "Taxi", 40.0, "m1", ["m1", "m2"],
                   ExactSplit((SplitDetail("m1", 15.0), SplitDetail("m2", 25.0))))
    validate_expense(good)

    bad = Expense("e", "g", "Taxi", 40.0, "m1", ["m1", "m2"],
                  ExactSplit((SplitDetail("m1", 15.0),)))
    with pytest.raises(ValidationError):
        validate_expense(bad)

    with pytest.raises(ValidationError):
        validate_settlement(Settlement("s", "g", "m1", "m1", 5.0))


def test_validate_references(caplog):
    members = [Member("m1", "Alice"), Member("m2", "Bob")]
    expenses = [Expense("e", "g", "Taxi", 40.0, "m1", ["m1", "x"])]
    settlements = [Settlement("s", "g", "y", "m2", 5.0)]

    assert validate_references(members, expenses, settlements) == ["x", "y"]
    assert "Unresolved" in caplog.text
    assert validate_references(members, [], []) == []


def test_error_hierarchy():
    assert issubclass(ValidationError, LedgerError)
    assert issubclass(InvalidInputError, LedgerError)
    assert issubclass(ValidationError, ValueError)
    assert issubclass(InvalidInputError, ValueError)
