"""
Configuration and snapshot loading/saving for GroupLedger
"""
from __future__ import annotations
import json
import logging
import os
from typing import List, Optional

from errors import InvalidInputError
from models import (
    EqualSplit,
    ExactSplit,
    Expense,
    Group,
    GroupInfo,
    Member,
    PercentageSplit,
    Settlement,
    Split,
    SplitDetail,
)

# Money values closer than this are equal; balances this close to zero are settled.
MONEY_EPSILON = 0.01
PERCENT_TOTAL = 100.0
DEFAULT_CATEGORY = "Uncategorized"
DATE_FORMAT = "%Y-%m-%d"

LOG_LEVEL_ENV = "GROUPLEDGER_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    """Set up root logging; level falls back to $GROUPLEDGER_LOG_LEVEL, then WARNING"""
    level = (level or os.environ.get(LOG_LEVEL_ENV) or "WARNING").upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)


# ---------- Split variants ----------

def split_from_parts(split_type: str, details: Optional[List[dict]]) -> Split:
    """Build a split variant from its wire tag and optional detail list"""
    parsed = tuple(SplitDetail(str(d["memberId"]), float(d["value"])) for d in (details or []))
    if split_type == EqualSplit.kind:
        return EqualSplit()
    if split_type == ExactSplit.kind:
        return ExactSplit(parsed)
    if split_type == PercentageSplit.kind:
        return PercentageSplit(parsed)
    raise InvalidInputError(f"Unknown split type: {split_type!r}")


def split_details_to_list(split: Split) -> Optional[List[dict]]:
    """Wire form of a split's details; None for an equal split"""
    if isinstance(split, EqualSplit):
        return None
    return [{"memberId": d.member_id, "value": d.value} for d in split.details]


# ---------- Records ----------

def member_to_dict(m: Member) -> dict:
    return {
        "id": m.id,
        "groupId": m.group_id,
        "name": m.name,
        "email": m.email,
        "phone": m.phone,
        "joinedAt": m.joined_at,
        "isActive": m.is_active,
    }


def dict_to_member(d: dict) -> Member:
    return Member(
        id=str(d["id"]),
        name=d.get("name", ""),
        group_id=str(d.get("groupId", "")),
        is_active=bool(d.get("isActive", True)),
        email=d.get("email") or "",
        phone=d.get("phone") or "",
        joined_at=d.get("joinedAt") or "",
    )


def expense_to_dict(e: Expense) -> dict:
    return {
        "id": e.id,
        "groupId": e.group_id,
        "description": e.description,
        "amount": e.amount,
        "paidBy": e.paid_by,
        "splitAmong": list(e.split_among),
        "splitType": e.split_type,
        "splitDetails": split_details_to_list(e.split),
        "category": e.category,
        "date": e.date,
        "notes": e.notes,
    }


def dict_to_expense(d: dict) -> Expense:
    return Expense(
        id=str(d["id"]),
        group_id=str(d.get("groupId", "")),
        description=d.get("description", ""),
        amount=float(d["amount"]),
        paid_by=str(d["paidBy"]),
        split_among=[str(m) for m in d.get("splitAmong", [])],
        split=split_from_parts(d.get("splitType", EqualSplit.kind), d.get("splitDetails")),
        category=d.get("category"),
        date=d.get("date") or "",
        notes=d.get("notes") or "",
    )


def settlement_to_dict(s: Settlement) -> dict:
    return {
        "id": s.id,
        "groupId": s.group_id,
        "fromMember": s.from_member,
        "toMember": s.to_member,
        "amount": s.amount,
        "settledAt": s.settled_at,
        "notes": s.notes,
    }


def dict_to_settlement(d: dict) -> Settlement:
    return Settlement(
        id=str(d["id"]),
        group_id=str(d.get("groupId", "")),
        from_member=str(d["fromMember"]),
        to_member=str(d["toMember"]),
        amount=float(d["amount"]),
        settled_at=d.get("settledAt") or "",
        notes=d.get("notes") or "",
    )


# ---------- Group snapshot ----------

def group_to_dict(group: Group) -> dict:
    """Convert Group snapshot to dictionary for JSON serialization"""
    info = group.info
    return {
        "version": group.version,
        "group": {
            "id": info.id,
            "name": info.name,
            "description": info.description,
            "createdBy": info.created_by,
            "archived": info.archived,
        },
        "members": [member_to_dict(m) for m in group.members],
        "expenses": [expense_to_dict(e) for e in group.expenses],
        "settlements": [settlement_to_dict(s) for s in group.settlements],
    }


def dict_to_group(d: dict) -> Group:
    """Convert dictionary from JSON to Group snapshot"""
    g = d.get("group", {})
    info = GroupInfo(
        id=str(g.get("id", "")),
        name=g.get("name", ""),
        description=g.get("description") or "",
        created_by=g.get("createdBy") or "",
        archived=bool(g.get("archived", False)),
    )
    return Group(
        info=info,
        members=[dict_to_member(m) for m in d.get("members", [])],
        expenses=[dict_to_expense(e) for e in d.get("expenses", [])],
        settlements=[dict_to_settlement(s) for s in d.get("settlements", [])],
        version=d.get("version", 1),
    )


def load_group(path: str) -> Group:
    """Load group snapshot from JSON file"""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    group = dict_to_group(data)
    logger.debug(
        "Loaded group %s from %s: %d members, %d expenses, %d settlements",
        group.info.id, path, len(group.members), len(group.expenses), len(group.settlements),
    )
    return group


def save_group(group: Group, path: str) -> None:
    """Write group snapshot to JSON file"""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(group_to_dict(group), f, ensure_ascii=False, indent=2)
