"""
Group summaries and per-member breakdowns for GroupLedger
"""
from __future__ import annotations
from datetime import date
from typing import Dict, List, Optional, Sequence, Union

from computations import share_owed
from config import DEFAULT_CATEGORY
from models import (
    CategoryTotal,
    Expense,
    GroupInfo,
    GroupSummary,
    GroupTotal,
    Member,
    MemberBreakdown,
    OwedExpense,
    PaidExpense,
    Settlement,
)
from utils import ensure_finite, in_date_range


def filter_expenses_by_date(
    expenses: Sequence[Expense],
    start: Optional[date],
    end: Optional[date]
) -> List[Expense]:
    """Filter expenses by date range"""
    return [e for e in expenses if in_date_range(e.date, start, end)]


def filter_settlements_by_date(
    settlements: Sequence[Settlement],
    start: Optional[date],
    end: Optional[date]
) -> List[Settlement]:
    """Filter settlements by date range"""
    return [s for s in settlements if in_date_range(s.settled_at, start, end)]


def category_of(e: Expense) -> str:
    return e.category or DEFAULT_CATEGORY


def expenses_by_category(expenses: Sequence[Expense], category: str) -> List[Expense]:
    """Expenses filed under category; uncategorized ones match DEFAULT_CATEGORY"""
    return [e for e in expenses if category_of(e) == category]


def settlements_between(settlements: Sequence[Settlement], a: str, b: str) -> List[Settlement]:
    """Settlements between two members, in either direction"""
    return [
        s for s in settlements
        if (s.from_member == a and s.to_member == b) or (s.from_member == b and s.to_member == a)
    ]


def group_total(records: Sequence[Union[Expense, Settlement]]) -> GroupTotal:
    """Total amount and count of expenses or settlements"""
    total = sum(ensure_finite(r.amount) for r in records)
    return GroupTotal(total=total, count=len(records))


def category_breakdown(expenses: Sequence[Expense]) -> List[CategoryTotal]:
    """Per-category totals with their share of all spending, in first-seen order"""
    totals: Dict[str, float] = {}
    for e in expenses:
        cat = category_of(e)
        totals[cat] = totals.get(cat, 0.0) + ensure_finite(e.amount)
    grand = sum(totals.values())
    return [
        CategoryTotal(
            category=cat,
            total=total,
            percentage=(total / grand) * 100 if grand > 0 else 0.0,
        ) for cat, total in totals.items()
    ]


def group_summary(
    info: GroupInfo,
    members: Sequence[Member],
    expenses: Sequence[Expense],
    settlements: Sequence[Settlement],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> GroupSummary:
    """
    Compute summary statistics for a group.
    Averages fall back to 0 when there is nothing to divide by; the per-person
    average counts active members only.
    """
    exps = filter_expenses_by_date(expenses, start, end)
    sets = filter_settlements_by_date(settlements, start, end)

    expense_total = group_total(exps)
    settled_total = group_total(sets)
    active = sum(1 for m in members if m.is_active)

    return GroupSummary(
        group_name=info.name,
        member_count=active,
        total_members=len(members),
        expense_count=expense_total.count,
        total_expenses=expense_total.total,
        settlement_count=settled_total.count,
        total_settled=settled_total.total,
        average_expense=expense_total.total / expense_total.count if expense_total.count else 0.0,
        per_person_average=expense_total.total / active if active else 0.0,
        category_breakdown=category_breakdown(exps),
    )


def member_breakdown(member: Member, expenses: Sequence[Expense]) -> MemberBreakdown:
    """What a member paid for and their share of every expense they are part of"""
    paid = [e for e in expenses if e.paid_by == member.id]
    owed = [e for e in expenses if member.id in e.split_among]

    owed_rows = [
        OwedExpense(
            description=e.description,
            total_amount=e.amount,
            your_share=share_owed(e, member.id),
            date=e.date,
        ) for e in owed
    ]
    return MemberBreakdown(
        member_name=member.name,
        total_paid=sum(ensure_finite(e.amount) for e in paid),
        total_owed=sum(r.your_share for r in owed_rows),
        paid_expenses=[PaidExpense(e.description, e.amount, e.date) for e in paid],
        owed_expenses=owed_rows,
    )
