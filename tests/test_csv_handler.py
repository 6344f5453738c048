"""
CSV export/import tests
"""
import csv

from csv_handler import (
    EXPENSE_COLUMNS,
    PAYMENT_COLUMNS,
    export_expenses_to_csv,
    export_payments_to_csv,
    import_expenses_from_csv,
)
from ledger_api import record_expense, record_payment
from models import Split, SplitType


class TestExpensesCsv:
    """export_expenses_to_csv() / import_expenses_from_csv()"""

    def test_export_then_import(self, tmp_path, store, trio) -> None:
        a, b, c = trio.members
        expense = record_expense(store, trio.id, "Fuel, tolls", 100.0, a.id, SplitType.CUSTOM,
                                 [Split(b.id, 100.0 / 3), Split(c.id, 200.0 / 3)])
        path = str(tmp_path / "out.csv")

        assert export_expenses_to_csv([expense], path) == 1
        [loaded] = import_expenses_from_csv(path, "target")

        assert loaded.group_id == "target"
        assert loaded.description == "Fuel, tolls"
        assert loaded.splits == expense.splits
        assert (loaded.id, loaded.amount, loaded.paid_by, loaded.date) == (
            expense.id, expense.amount, expense.paid_by, expense.date,
        )

    def test_header(self, tmp_path) -> None:
        path = tmp_path / "empty.csv"
        assert export_expenses_to_csv([], str(path)) == 0
        with open(path, newline="", encoding="utf-8") as f:
            assert next(csv.reader(f)) == EXPENSE_COLUMNS
        assert import_expenses_from_csv(str(path)) == []


class TestPaymentsCsv:
    """export_payments_to_csv()"""

    def test_rows(self, tmp_path, store, trio) -> None:
        a, b, _ = trio.members
        payment = record_payment(store, trio.id, b.id, a.id, 7.25)
        path = tmp_path / "payments.csv"

        assert export_payments_to_csv([payment], str(path)) == 1
        with open(path, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))

        assert rows[0] == PAYMENT_COLUMNS
        assert rows[1] == [payment.id, payment.date, b.id, a.id, "7.25"]
