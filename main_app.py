"""
Application session for SplitLedger

Holds the in-memory store for a presentation layer: loads state once, applies
mutations, and saves after each one on a best-effort basis. A failed save is
logged and the in-memory change stays applied.
"""
from __future__ import annotations
import logging
from datetime import date
from typing import Dict, List, Optional, Sequence, Union

from models import Expense, Group, Payment, Settlement, Split, ValidationError
from config import get_default_storage, load_ledger, save_ledger
from store import LedgerStore
from storage import KeyValueStorage, MemoryStorage
from computations import (
    compute_balances,
    compute_dashboard,
    compute_group_overview,
    compute_member_summary,
    compute_settlements,
    expense_history,
    payment_history,
    transaction_history,
)
from ledger_api import create_group, import_expenses, record_expense, record_payment, record_settlement
from csv_handler import export_expenses_to_csv, export_payments_to_csv, import_expenses_from_csv
from excel_export import export_excel

logger = logging.getLogger(__name__)


class SplitLedgerApp:
    """Session over one storage"""

    def __init__(self, storage: Optional[KeyValueStorage] = None):
        if storage is None:
            storage = MemoryStorage()
        self.storage = storage
        self.store = LedgerStore.from_ledger(load_ledger(storage))
        self.last_save_ok: Optional[bool] = None

    @classmethod
    def open_default(cls) -> "SplitLedgerApp":
        """Session backed by the JSON files in the application data directory"""
        return cls(get_default_storage())

    # ---------- Persistence ----------
    def save(self) -> bool:
        self.last_save_ok = save_ledger(self.storage, self.store.snapshot())
        return self.last_save_ok

    # ---------- Mutations ----------
    def add_group(self, name: str, member_names: Sequence[str]) -> Group:
        group = create_group(self.store, name, member_names)
        self.save()
        return group

    def add_expense(
        self,
        group_id: str,
        description: str,
        amount: float,
        paid_by: str,
        split_type: str,
        custom_splits: Optional[Sequence[Split]] = None
    ) -> Expense:
        expense = record_expense(self.store, group_id, description, amount, paid_by, split_type, custom_splits)
        self.save()
        return expense

    def record_payment(self, group_id: str, from_id: str, to_id: str, amount: float) -> Payment:
        payment = record_payment(self.store, group_id, from_id, to_id, amount)
        self.save()
        return payment

    def settle(self, group_id: str, settlement: Settlement) -> Payment:
        """Record a proposed settlement as paid"""
        payment = record_settlement(self.store, group_id, settlement)
        self.save()
        return payment

    # ---------- Views ----------
    def _group(self, group_id: str) -> Group:
        group = self.store.get_group(group_id)
        if group is None:
            raise ValidationError(f"Unknown group: {group_id}")
        return group

    def groups(self) -> List[Group]:
        return self.store.groups()

    def balances(self, group_id: str) -> Dict[str, float]:
        snap = self.store.group_snapshot(group_id)
        if snap is None:
            raise ValidationError(f"Unknown group: {group_id}")
        return compute_balances(snap.groups[0], snap.expenses, snap.payments)

    def settlements(self, group_id: str) -> List[Settlement]:
        return compute_settlements(self.balances(group_id), self._group(group_id))

    def member_summary(self, group_id: str) -> Dict[str, dict]:
        snap = self.store.group_snapshot(group_id)
        if snap is None:
            raise ValidationError(f"Unknown group: {group_id}")
        return compute_member_summary(snap.groups[0], snap.expenses, snap.payments)

    def overview(self, group_id: str) -> dict:
        self._group(group_id)
        return compute_group_overview(self.store.group_snapshot(group_id), group_id)

    def dashboard(self) -> dict:
        return compute_dashboard(self.store.snapshot())

    def expense_history(self, group_id: str) -> List[Expense]:
        return expense_history(self.store.expenses_for_group(group_id))

    def payment_history(self, group_id: str) -> List[Payment]:
        return payment_history(self.store.payments_for_group(group_id))

    def transaction_history(self, group_id: str) -> List[Union[Expense, Payment]]:
        """Expenses and payments of a group in one list, newest first"""
        return transaction_history(
            self.store.expenses_for_group(group_id),
            self.store.payments_for_group(group_id),
        )

    # ---------- Import/Export ----------
    def export_csv(self, group_id: str, filepath: str) -> int:
        """Export a group's expenses to CSV file"""
        self._group(group_id)
        count = export_expenses_to_csv(self.store.expenses_for_group(group_id), filepath)
        logger.info("Exported %d expenses to %s", count, filepath)
        return count

    def export_payments_csv(self, group_id: str, filepath: str) -> int:
        """Export a group's payments to CSV file"""
        self._group(group_id)
        count = export_payments_to_csv(self.store.payments_for_group(group_id), filepath)
        logger.info("Exported %d payments to %s", count, filepath)
        return count

    def import_csv(self, group_id: str, filepath: str) -> List[Expense]:
        """Append expenses from a CSV file; nothing is added if any row is invalid"""
        try:
            rows = import_expenses_from_csv(filepath, group_id)
        except (KeyError, ValueError) as ex:
            raise ValidationError(f"Unreadable CSV {filepath}: {ex}") from ex
        imported = import_expenses(self.store, group_id, rows)
        if imported:
            self.save()
        return imported

    def export_excel(
        self,
        group_id: str,
        filepath: str,
        start: Optional[date] = None,
        end: Optional[date] = None
    ) -> None:
        """Export a group's report to an Excel workbook"""
        self._group(group_id)
        export_excel(self.store.snapshot(), group_id, filepath, start, end)
        logger.info("Exported group %s report to %s", group_id, filepath)
