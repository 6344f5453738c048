"""
Data models for SplitLedger application
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple


class ValidationError(ValueError):
    """Rejected mutation input; the ledger is left unchanged"""


class SplitType:
    """How an expense amount is divided between group members"""
    EQUAL = "equal"
    CUSTOM = "custom"

    ALL = (EQUAL, CUSTOM)


@dataclass(frozen=True)
class Member:
    """Group member; identity is the id, the name is display-only"""
    id: str
    name: str


@dataclass(frozen=True)
class Group:
    """Group of people sharing expenses"""
    id: str
    name: str
    members: Tuple[Member, ...]
    created_at: str  # ISO-8601 timestamp

    @property
    def member_ids(self) -> Tuple[str, ...]:
        return tuple(m.id for m in self.members)


@dataclass(frozen=True)
class Split:
    """One member's share of an expense"""
    member_id: str
    amount: float


@dataclass(frozen=True)
class Expense:
    """Single expense paid by one member and shared by splits"""
    id: str
    group_id: str
    description: str
    amount: float
    paid_by: str  # member id
    split_type: str  # SplitType value
    splits: Tuple[Split, ...]
    date: str  # ISO-8601 timestamp


@dataclass(frozen=True)
class Payment:
    """Settling transfer recorded outside of any expense"""
    id: str
    group_id: str
    from_id: str
    to_id: str
    amount: float
    date: str  # ISO-8601 timestamp


@dataclass(frozen=True)
class Settlement:
    """Proposed transfer from a debtor to a creditor (never stored directly)"""
    from_id: str
    from_name: str
    to_id: str
    to_name: str
    amount: float


@dataclass(frozen=True)
class Ledger:
    """Immutable snapshot of every group, expense and payment"""
    groups: Tuple[Group, ...] = ()
    expenses: Tuple[Expense, ...] = ()
    payments: Tuple[Payment, ...] = ()

    def find_group(self, group_id: str):
        return next((g for g in self.groups if g.id == group_id), None)
