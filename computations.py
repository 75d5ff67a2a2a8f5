"""
Balance, debt and settlement computations for GroupLedger.

Every function here is pure: inputs are never mutated and results are freshly
allocated on each call.
"""
from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Sequence, Set, Tuple

from config import MONEY_EPSILON, PERCENT_TOTAL
from errors import InvalidInputError
from models import (
    DirectedDebt,
    EqualSplit,
    ExactSplit,
    Expense,
    Member,
    MemberBalance,
    NetBalance,
    PercentageSplit,
    Settlement,
    SettlementSuggestion,
)
from utils import ensure_finite, is_settled_amount, round2

logger = logging.getLogger(__name__)

# (debtor id, creditor id) -> amount owed, not yet netted
DebtMatrix = Dict[Tuple[str, str], float]


def _detail_value(expense: Expense, member_id: str) -> float:
    """Value of member's split detail, 0.0 when the detail list has no entry for them"""
    for d in expense.split.details:
        if d.member_id == member_id:
            return ensure_finite(d.value, "split detail value")
    return 0.0


def _check_expense(expense: Expense) -> float:
    """Reject malformed expenses; returns the finite amount"""
    amount = ensure_finite(expense.amount, "expense amount")
    split = expense.split
    if not isinstance(split, (EqualSplit, ExactSplit, PercentageSplit)):
        raise InvalidInputError(f"Expense {expense.id} has unrecognized split {split!r}")
    if isinstance(split, EqualSplit) and not expense.split_among:
        raise InvalidInputError(f"Expense {expense.id} has an equal split with no participants")
    return amount


def share_owed(expense: Expense, member_id: str) -> float:
    """Amount member_id owes for a single expense"""
    amount = _check_expense(expense)
    split = expense.split

    if member_id not in expense.split_among:
        return 0.0
    if isinstance(split, EqualSplit):
        return amount / len(expense.split_among)
    if isinstance(split, ExactSplit):
        return _detail_value(expense, member_id)
    return amount * _detail_value(expense, member_id) / PERCENT_TOTAL


def _warn_unknown_members(
    known: Set[str],
    expenses: Iterable[Expense],
    settlements: Iterable[Settlement],
) -> None:
    """Log expense/settlement references to members outside the given list"""
    for e in expenses:
        unknown = sorted({e.paid_by, *e.split_among} - known)
        if unknown:
            logger.warning("Expense %s references unknown members %s", e.id, unknown)
    for s in settlements:
        unknown = sorted({s.from_member, s.to_member} - known)
        if unknown:
            logger.warning("Settlement %s references unknown members %s", s.id, unknown)


def member_balances(
    members: Sequence[Member],
    expenses: Sequence[Expense],
    settlements: Sequence[Settlement],
) -> List[MemberBalance]:
    """
    Fold expenses and settlements into one MemberBalance per member (input order).

    A settlement counts as paid for its sender and as owed for its receiver, so
    reimbursements and expenses share one signed ledger. No rounding here.
    """
    _warn_unknown_members({m.id for m in members}, expenses, settlements)

    paid = {m.id: 0.0 for m in members}
    owed = {m.id: 0.0 for m in members}

    for e in expenses:
        amount = _check_expense(e)
        if e.paid_by in paid:
            paid[e.paid_by] += amount
        for mid in owed:
            owed[mid] += share_owed(e, mid)

    for s in settlements:
        amount = ensure_finite(s.amount, "settlement amount")
        if s.from_member in paid:
            paid[s.from_member] += amount
        if s.to_member in owed:
            owed[s.to_member] += amount

    return [
        MemberBalance(
            member_id=m.id,
            member_name=m.name,
            total_paid=paid[m.id],
            total_owed=owed[m.id],
            balance=paid[m.id] - owed[m.id],
        ) for m in members
    ]


def build_debt_matrix(
    members: Sequence[Member],
    expenses: Sequence[Expense],
    settlements: Sequence[Settlement],
) -> DebtMatrix:
    """
    Build the directional debtor -> creditor matrix.
    Every ordered member pair (self pairs included) is present; entries for
    ids outside `members` are created on demand. Dense: O(members^2) entries.
    """
    _warn_unknown_members({m.id for m in members}, expenses, settlements)

    matrix: DebtMatrix = {(a.id, b.id): 0.0 for a in members for b in members}

    for e in expenses:
        _check_expense(e)
        for p in e.split_among:
            if p == e.paid_by:
                continue
            key = (p, e.paid_by)
            matrix[key] = matrix.get(key, 0.0) + share_owed(e, p)

    for s in settlements:
        key = (s.from_member, s.to_member)
        matrix[key] = matrix.get(key, 0.0) - ensure_finite(s.amount, "settlement amount")

    return matrix


def simplify_debts(matrix: DebtMatrix, members: Sequence[Member]) -> List[DirectedDebt]:
    """Net each unordered member pair into at most one directed debt"""
    debts: List[DirectedDebt] = []
    processed: Set[Tuple[str, str]] = set()

    for a in members:
        for b in members:
            if a.id == b.id:
                continue
            pair = tuple(sorted((a.id, b.id)))
            if pair in processed:
                continue
            processed.add(pair)

            net = matrix.get((a.id, b.id), 0.0) - matrix.get((b.id, a.id), 0.0)
            ensure_finite(net, "debt")
            if is_settled_amount(net):
                continue
            if net > 0:
                debts.append(DirectedDebt(a.id, a.name, b.id, b.name, round2(net)))
            else:
                debts.append(DirectedDebt(b.id, b.name, a.id, a.name, round2(-net)))

    return debts


def debts_to_matrix(debts: Iterable[DirectedDebt], members: Sequence[Member]) -> DebtMatrix:
    """Rebuild a debt matrix from simplified debts"""
    matrix: DebtMatrix = {(a.id, b.id): 0.0 for a in members for b in members}
    for d in debts:
        key = (d.from_member, d.to_member)
        matrix[key] = matrix.get(key, 0.0) + d.amount
    return matrix


def net_balances(balances: Iterable[MemberBalance]) -> List[NetBalance]:
    """Cent-rounded balances, dropping members that are already settled"""
    out = []
    for b in balances:
        balance = round2(b.balance)
        if not is_settled_amount(balance):
            out.append(NetBalance(b.member_id, b.member_name, balance))
    return out


def optimize_settlements(balances: Iterable[NetBalance]) -> List[SettlementSuggestion]:
    """
    Greedy settlement plan: debtors pay creditors.
    Largest debtor is matched with largest creditor; each step clears at least
    one side, so the plan has at most len(debtors) + len(creditors) - 1 payments.
    Returns list of SettlementSuggestion.
    """
    entries = [NetBalance(b.member_id, b.name, ensure_finite(b.balance, "balance")) for b in balances]

    creditors = [b for b in entries if b.balance > MONEY_EPSILON]
    debtors = [b for b in entries if b.balance < -MONEY_EPSILON]
    creditors.sort(key=lambda b: b.balance, reverse=True)
    debtors.sort(key=lambda b: b.balance)

    suggestions = []
    i = j = 0
    for _ in range(len(debtors) + len(creditors)):
        if i >= len(debtors) or j >= len(creditors):
            break
        debtor = debtors[i]
        creditor = creditors[j]

        amount = min(-debtor.balance, creditor.balance)
        if amount > MONEY_EPSILON:
            suggestions.append(SettlementSuggestion(
                from_member=debtor.member_id,
                from_name=debtor.name,
                to_member=creditor.member_id,
                to_name=creditor.name,
                amount=round2(amount),
            ))

        debtor.balance += amount
        creditor.balance -= amount

        if abs(debtor.balance) < MONEY_EPSILON:
            i += 1
        if abs(creditor.balance) < MONEY_EPSILON:
            j += 1

    # allow a cent of rounding drift per member
    residual = sum(b.balance for b in debtors[i:]) + sum(b.balance for b in creditors[j:])
    if not is_settled_amount(residual, MONEY_EPSILON * max(1, len(entries))):
        logger.warning("Balances do not sum to zero; %.2f left unsettled", residual)

    return suggestions


def detailed_debts(
    members: Sequence[Member],
    expenses: Sequence[Expense],
    settlements: Sequence[Settlement],
) -> List[DirectedDebt]:
    """Simplified pairwise debts straight from a group's records"""
    return simplify_debts(build_debt_matrix(members, expenses, settlements), members)


def suggest_settlements(
    members: Sequence[Member],
    expenses: Sequence[Expense],
    settlements: Sequence[Settlement],
) -> List[SettlementSuggestion]:
    """Minimal-transaction settlement plan straight from a group's records"""
    return optimize_settlements(net_balances(member_balances(members, expenses, settlements)))
