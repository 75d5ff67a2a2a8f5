"""
Write-path rules for expenses and settlements.

The computations assume records already passed these checks; whatever stores
the records calls the builders here before saving them.
"""
from __future__ import annotations
import logging
import uuid
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from config import PERCENT_TOTAL
from errors import ValidationError
from models import (
    EqualSplit,
    ExactSplit,
    Expense,
    Member,
    PercentageSplit,
    Settlement,
    SplitDetail,
)
from utils import amounts_close, ensure_finite, today_str

logger = logging.getLogger(__name__)

DetailInput = Union[SplitDetail, Tuple[str, float]]


def _new_id() -> str:
    return str(uuid.uuid4())


def _positive_amount(amount: float) -> float:
    amount = ensure_finite(amount)
    if amount <= 0:
        raise ValidationError("Amount must be positive")
    return amount


def _details(details: Iterable[DetailInput]) -> Tuple[SplitDetail, ...]:
    out = []
    for d in details:
        if not isinstance(d, SplitDetail):
            member_id, value = d
            d = SplitDetail(str(member_id), value)
        out.append(SplitDetail(d.member_id, ensure_finite(d.value, "split detail value")))
    if not out:
        raise ValidationError("Must have at least one split detail")
    return tuple(out)


def _check_detail_total(split: Union[ExactSplit, PercentageSplit], amount: float) -> None:
    total = sum(d.value for d in split.details)
    if isinstance(split, ExactSplit) and not amounts_close(total, amount):
        raise ValidationError(
            f"Split amounts must equal total expense amount ({total:.2f} != {amount:.2f})"
        )
    if isinstance(split, PercentageSplit) and not amounts_close(total, PERCENT_TOTAL):
        raise ValidationError(f"Percentages must sum to 100 (got {total:.2f})")


def make_equal_expense(
    group_id: str,
    description: str,
    amount: float,
    paid_by: str,
    split_among: Sequence[str],
    category: Optional[str] = None,
    date: Optional[str] = None,
    notes: str = "",
    expense_id: Optional[str] = None,
) -> Expense:
    """Create an expense split equally among split_among"""
    amount = _positive_amount(amount)
    if not split_among:
        raise ValidationError("Must split among at least one member")
    return Expense(
        id=expense_id or _new_id(),
        group_id=group_id,
        description=description,
        amount=amount,
        paid_by=paid_by,
        split_among=list(split_among),
        split=EqualSplit(),
        category=category,
        date=date or today_str(),
        notes=notes,
    )


def make_exact_expense(
    group_id: str,
    description: str,
    amount: float,
    paid_by: str,
    details: Iterable[DetailInput],
    category: Optional[str] = None,
    date: Optional[str] = None,
    notes: str = "",
    expense_id: Optional[str] = None,
) -> Expense:
    """Create an expense where each participant owes a fixed amount; amounts must add up to the total"""
    amount = _positive_amount(amount)
    split = ExactSplit(_details(details))
    _check_detail_total(split, amount)
    return Expense(
        id=expense_id or _new_id(),
        group_id=group_id,
        description=description,
        amount=amount,
        paid_by=paid_by,
        split_among=[d.member_id for d in split.details],
        split=split,
        category=category,
        date=date or today_str(),
        notes=notes,
    )


def make_percentage_expense(
    group_id: str,
    description: str,
    amount: float,
    paid_by: str,
    details: Iterable[DetailInput],
    category: Optional[str] = None,
    date: Optional[str] = None,
    notes: str = "",
    expense_id: Optional[str] = None,
) -> Expense:
    """Create an expense split by percentage; percentages must add up to 100"""
    amount = _positive_amount(amount)
    split = PercentageSplit(_details(details))
    _check_detail_total(split, amount)
    return Expense(
        id=expense_id or _new_id(),
        group_id=group_id,
        description=description,
        amount=amount,
        paid_by=paid_by,
        split_among=[d.member_id for d in split.details],
        split=split,
        category=category,
        date=date or today_str(),
        notes=notes,
    )


def make_settlement(
    group_id: str,
    from_member: str,
    to_member: str,
    amount: float,
    settled_at: Optional[str] = None,
    notes: str = "",
    settlement_id: Optional[str] = None,
) -> Settlement:
    """Record a payment between two members"""
    amount = _positive_amount(amount)
    if from_member == to_member:
        raise ValidationError("Cannot settle with yourself")
    return Settlement(
        id=settlement_id or _new_id(),
        group_id=group_id,
        from_member=from_member,
        to_member=to_member,
        amount=amount,
        settled_at=settled_at or today_str(),
        notes=notes,
    )


def validate_expense(expense: Expense) -> None:
    """Re-check an existing expense against the write-path rules"""
    _positive_amount(expense.amount)
    if not expense.split_among:
        raise ValidationError(f"Expense {expense.id} is not split among anyone")
    if isinstance(expense.split, (ExactSplit, PercentageSplit)):
        _details(expense.split.details)
        _check_detail_total(expense.split, expense.amount)


def validate_settlement(settlement: Settlement) -> None:
    """Re-check an existing settlement against the write-path rules"""
    _positive_amount(settlement.amount)
    if settlement.from_member == settlement.to_member:
        raise ValidationError(f"Settlement {settlement.id} pays its own sender")


def validate_references(
    members: Sequence[Member],
    expenses: Sequence[Expense],
    settlements: Sequence[Settlement],
) -> List[str]:
    """Member ids referenced by expenses or settlements but missing from members, sorted"""
    known = {m.id for m in members}
    referenced = set()
    for e in expenses:
        referenced.add(e.paid_by)
        referenced.update(e.split_among)
    for s in settlements:
        referenced.update((s.from_member, s.to_member))
    missing = sorted(referenced - known)
    if missing:
        logger.warning("Unresolved member references: %s", missing)
    return missing
