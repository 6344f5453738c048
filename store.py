"""
In-memory ledger store for SplitLedger

Append-only collections keyed by id plus per-group indexes. Only the mutation
functions in ledger_api append to it; computations work on snapshots.
"""
from __future__ import annotations
import logging
import threading
from typing import Dict, List, Optional, Tuple

from models import Expense, Group, Ledger, Member, Payment

logger = logging.getLogger(__name__)


class LedgerStore:
    """Groups, members, expenses and payments with lookups by id and by group"""

    def __init__(self):
        self._groups: Dict[str, Group] = {}
        self._expenses: Dict[str, Expense] = {}
        self._payments: Dict[str, Payment] = {}
        # member id -> (member, owning group id)
        self._members: Dict[str, Tuple[Member, str]] = {}
        self._expenses_by_group: Dict[str, List[str]] = {}
        self._payments_by_group: Dict[str, List[str]] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    @classmethod
    def from_ledger(cls, ledger: Ledger) -> "LedgerStore":
        """
        Rebuild a store from a loaded snapshot.
        Records that clash with earlier ones or point at a missing group are
        skipped with a warning; loading never fails.
        """
        store = cls()
        for adder, records in (
            (store.add_group, ledger.groups),
            (store.add_expense, ledger.expenses),
            (store.add_payment, ledger.payments),
        ):
            for r in records:
                try:
                    adder(r)
                except ValueError as ex:
                    logger.warning("Skipping stored record %s: %s", r.id, ex)
        return store

    def _group_lock(self, group_id: str) -> threading.Lock:
        with self._registry_lock:
            return self._locks.setdefault(group_id, threading.Lock())

    # ---------- Appends ----------
    def add_group(self, group: Group) -> None:
        with self._registry_lock:
            if group.id in self._groups:
                raise ValueError(f"Duplicate group id: {group.id}")
            for m in group.members:
                if m.id in self._members:
                    raise ValueError(f"Duplicate member id: {m.id}")
            self._groups[group.id] = group
            for m in group.members:
                self._members[m.id] = (m, group.id)
            self._expenses_by_group[group.id] = []
            self._payments_by_group[group.id] = []

    def add_expense(self, expense: Expense) -> None:
        self._append(expense, self._expenses, self._expenses_by_group, "expense")

    def add_payment(self, payment: Payment) -> None:
        self._append(payment, self._payments, self._payments_by_group, "payment")

    def _append(self, entry, table, index, kind):
        if entry.group_id not in self._groups:
            raise ValueError(f"Unknown group id for {kind}: {entry.group_id}")
        with self._group_lock(entry.group_id):
            if entry.id in table:
                raise ValueError(f"Duplicate {kind} id: {entry.id}")
            table[entry.id] = entry
            index[entry.group_id].append(entry.id)

    # ---------- Lookups ----------
    def get_group(self, group_id: str) -> Optional[Group]:
        return self._groups.get(group_id)

    def get_expense(self, expense_id: str) -> Optional[Expense]:
        return self._expenses.get(expense_id)

    def get_payment(self, payment_id: str) -> Optional[Payment]:
        return self._payments.get(payment_id)

    def get_member(self, member_id: str) -> Optional[Member]:
        found = self._members.get(member_id)
        return found[0] if found else None

    def is_member(self, group_id: str, member_id: str) -> bool:
        found = self._members.get(member_id)
        return found is not None and found[1] == group_id

    def groups(self) -> List[Group]:
        return list(self._groups.values())

    def expenses_for_group(self, group_id: str) -> List[Expense]:
        return [self._expenses[i] for i in self._expenses_by_group.get(group_id, [])]

    def payments_for_group(self, group_id: str) -> List[Payment]:
        return [self._payments[i] for i in self._payments_by_group.get(group_id, [])]

    # ---------- Snapshots ----------
    def snapshot(self) -> Ledger:
        """Immutable copy of everything in the store"""
        return Ledger(
            groups=tuple(self._groups.values()),
            expenses=tuple(self._expenses.values()),
            payments=tuple(self._payments.values()),
        )

    def group_snapshot(self, group_id: str) -> Optional[Ledger]:
        """Immutable copy of one group and its history; None if unknown"""
        group = self._groups.get(group_id)
        if group is None:
            return None
        with self._group_lock(group_id):
            return Ledger(
                groups=(group,),
                expenses=tuple(self.expenses_for_group(group_id)),
                payments=tuple(self.payments_for_group(group_id)),
            )
