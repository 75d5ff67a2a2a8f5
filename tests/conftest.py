from __future__ import annotations

import pytest

from models import (
    EqualSplit,
    ExactSplit,
    Expense,
    Group,
    GroupInfo,
    Member,
    PercentageSplit,
    Settlement,
    SplitDetail,
)


@pytest.fixture
def members():
    return [
        Member("m1", "Alice", group_id="g1"),
        Member("m2", "Bob", group_id="g1"),
        Member("m3", "Cara", group_id="g1"),
    ]


@pytest.fixture
def dinner():
    """100 paid by Alice, split equally three ways"""
    return Expense("e1", "g1", "Dinner", 100.0, "m1", ["m1", "m2", "m3"], EqualSplit(),
                   category="Food", date="2024-03-01")


@pytest.fixture
def group(members, dinner):
    taxi = Expense(
        "e2", "g1", "Taxi", 40.0, "m2", ["m2", "m3"],
        ExactSplit((SplitDetail("m2", 15.0), SplitDetail("m3", 25.0))),
        category="Transport", date="2024-03-02",
    )
    hotel = Expense(
        "e3", "g1", "Hotel", 300.0, "m3", ["m1", "m2", "m3"],
        PercentageSplit((SplitDetail("m1", 50.0), SplitDetail("m2", 25.0), SplitDetail("m3", 25.0))),
        date="2024-03-03", notes="two nights",
    )
    payback = Settlement("s1", "g1", "m2", "m1", 20.0, settled_at="2024-03-04")
    return Group(
        info=GroupInfo("g1", "Lisbon trip", created_by="alice"),
        members=members,
        expenses=[dinner, taxi, hotel],
        settlements=[payback],
    )
