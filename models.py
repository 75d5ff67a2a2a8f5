"""
Data models for GroupLedger
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import ClassVar, List, Optional, Tuple, Union


@dataclass(frozen=True)
class SplitDetail:
    """Per-member value of an exact (money) or percentage split"""
    member_id: str
    value: float


@dataclass(frozen=True)
class EqualSplit:
    """Cost divided evenly among split_among"""
    kind: ClassVar[str] = "equal"


@dataclass(frozen=True)
class ExactSplit:
    """Each participant owes a fixed amount"""
    details: Tuple[SplitDetail, ...] = ()
    kind: ClassVar[str] = "exact"


@dataclass(frozen=True)
class PercentageSplit:
    """Each participant owes a percentage (0-100) of the amount"""
    details: Tuple[SplitDetail, ...] = ()
    kind: ClassVar[str] = "percentage"


Split = Union[EqualSplit, ExactSplit, PercentageSplit]


@dataclass
class Member:
    """Group member"""
    id: str
    name: str
    group_id: str = ""
    is_active: bool = True
    email: str = ""
    phone: str = ""
    joined_at: str = ""  # YYYY-MM-DD


@dataclass
class Expense:
    """Single shared expense"""
    id: str
    group_id: str
    description: str
    amount: float
    paid_by: str
    split_among: List[str]
    split: Split = field(default_factory=EqualSplit)
    category: Optional[str] = None
    date: str = ""  # YYYY-MM-DD
    notes: str = ""

    @property
    def split_type(self) -> str:
        return self.split.kind

    @property
    def split_details(self) -> Tuple[SplitDetail, ...]:
        return getattr(self.split, "details", ())


@dataclass
class Settlement:
    """Direct reimbursement from one member to another"""
    id: str
    group_id: str
    from_member: str
    to_member: str
    amount: float
    settled_at: str = ""  # YYYY-MM-DD
    notes: str = ""


@dataclass
class GroupInfo:
    """Group header record"""
    id: str
    name: str
    description: str = ""
    created_by: str = ""
    archived: bool = False


@dataclass
class Group:
    """Snapshot of one group: everything the core reads"""
    info: GroupInfo
    members: List[Member] = field(default_factory=list)
    expenses: List[Expense] = field(default_factory=list)
    settlements: List[Settlement] = field(default_factory=list)
    version: int = 1


# ---------- Derived ----------

@dataclass
class MemberBalance:
    """Paid/owed totals for one member; balance > 0 means the group owes them"""
    member_id: str
    member_name: str
    total_paid: float
    total_owed: float
    balance: float


@dataclass
class NetBalance:
    """Cent-rounded balance fed to the settlement optimizer"""
    member_id: str
    name: str
    balance: float


@dataclass(frozen=True)
class DirectedDebt:
    """from_member owes to_member amount"""
    from_member: str
    from_name: str
    to_member: str
    to_name: str
    amount: float


@dataclass(frozen=True)
class SettlementSuggestion:
    """Suggested payment from a debtor to a creditor"""
    from_member: str
    from_name: str
    to_member: str
    to_name: str
    amount: float


@dataclass
class CategoryTotal:
    category: str
    total: float
    percentage: float


@dataclass
class GroupSummary:
    """Group-level statistics"""
    group_name: str
    member_count: int
    total_members: int
    expense_count: int
    total_expenses: float
    settlement_count: int
    total_settled: float
    average_expense: float
    per_person_average: float
    category_breakdown: List[CategoryTotal] = field(default_factory=list)


@dataclass
class PaidExpense:
    description: str
    amount: float
    date: str


@dataclass
class OwedExpense:
    description: str
    total_amount: float
    your_share: float
    date: str


@dataclass
class MemberBreakdown:
    """What one member paid for and what they owe, expense by expense"""
    member_name: str
    total_paid: float
    total_owed: float
    paid_expenses: List[PaidExpense] = field(default_factory=list)
    owed_expenses: List[OwedExpense] = field(default_factory=list)


@dataclass
class GroupTotal:
    total: float
    count: int
