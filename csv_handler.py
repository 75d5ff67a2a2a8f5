"""
CSV export and import functionality for GroupLedger
"""
from __future__ import annotations
import csv
import logging
from typing import List

from config import split_details_to_list, split_from_parts
from models import Expense, Settlement

logger = logging.getLogger(__name__)

EXPENSE_COLUMNS = [
    'id', 'group_id', 'date', 'description', 'category', 'amount',
    'paid_by', 'split_type', 'split_among', 'split_details', 'notes',
]
SETTLEMENT_COLUMNS = ['id', 'group_id', 'settled_at', 'from_member', 'to_member', 'amount', 'notes']


def _format_details(e: Expense) -> str:
    details = split_details_to_list(e.split) or []
    return ';'.join([f"{d['memberId']}:{d['value']}" for d in details])


def _parse_details(raw: str) -> List[dict]:
    details = []
    for pair in raw.split(';'):
        if ':' in pair:
            k, v = pair.rsplit(':', 1)
            details.append({"memberId": k.strip(), "value": float(v.strip())})
    return details


def export_expenses_to_csv(expenses: List[Expense], filepath: str) -> None:
    """
    Export expenses list to CSV file
    split_among is ';'-joined member ids, split_details is 'member:value;member:value'
    """
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(EXPENSE_COLUMNS)

        for e in expenses:
            writer.writerow([
                e.id,
                e.group_id,
                e.date,
                e.description,
                e.category or '',
                e.amount,
                e.paid_by,
                e.split_type,
                ';'.join(e.split_among),
                _format_details(e),
                e.notes
            ])
    logger.info("Exported %d expenses to %s", len(expenses), filepath)


def import_expenses_from_csv(filepath: str) -> List[Expense]:
    """
    Import expenses list from CSV file
    Returns list of Expense objects
    """
    expenses = []

    with open(filepath, 'r', encoding='utf-8') as f:
        reader = csv.DictReader(f)

        for row in reader:
            split_among = [m.strip() for m in (row.get('split_among') or '').split(';') if m.strip()]
            expense = Expense(
                id=row['id'],
                group_id=row.get('group_id') or '',
                description=row['description'],
                amount=float(row['amount']),
                paid_by=row['paid_by'],
                split_among=split_among,
                split=split_from_parts(row['split_type'], _parse_details(row.get('split_details') or '')),
                category=row.get('category') or None,
                date=row.get('date') or '',
                notes=row.get('notes') or ''
            )
            expenses.append(expense)

    return expenses


def export_settlements_to_csv(settlements: List[Settlement], filepath: str) -> None:
    """Export settlements list to CSV file"""
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(SETTLEMENT_COLUMNS)
        for s in settlements:
            writer.writerow([s.id, s.group_id, s.settled_at, s.from_member, s.to_member, s.amount, s.notes])
    logger.info("Exported %d settlements to %s", len(settlements), filepath)


def import_settlements_from_csv(filepath: str) -> List[Settlement]:
    """Import settlements list from CSV file"""
    with open(filepath, 'r', encoding='utf-8') as f:
        return [
            Settlement(
                id=row['id'],
                group_id=row.get('group_id') or '',
                from_member=row['from_member'],
                to_member=row['to_member'],
                amount=float(row['amount']),
                settled_at=row.get('settled_at') or '',
                notes=row.get('notes') or ''
            ) for row in csv.DictReader(f)
        ]
