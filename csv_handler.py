"""
CSV export and import functionality for SplitLedger
"""
from __future__ import annotations
import csv
from typing import Iterable, List

from models import Expense, Payment, Split

EXPENSE_COLUMNS = ['id', 'date', 'description', 'amount', 'paid_by', 'split_type', 'splits']
PAYMENT_COLUMNS = ['id', 'date', 'from_id', 'to_id', 'amount']


def export_expenses_to_csv(expenses: Iterable[Expense], filepath: str) -> int:
    """
    Export expenses to CSV file, returns number of rows written
    CSV columns: id, date, description, amount, paid_by, split_type, splits
    """
    count = 0
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(EXPENSE_COLUMNS)
        for e in expenses:
            # splits as "member_id:amount;member_id:amount"
            splits_str = ';'.join([f"{s.member_id}:{s.amount!r}" for s in e.splits])
            writer.writerow([
                e.id,
                e.date,
                e.description,
                repr(e.amount),
                e.paid_by,
                e.split_type,
                splits_str
            ])
            count += 1
    return count


def import_expenses_from_csv(filepath: str, group_id: str = "") -> List[Expense]:
    """
    Import expenses list from CSV file
    Rows are not validated here; pass them through ledger_api.import_expenses.
    """
    expenses = []

    with open(filepath, 'r', encoding='utf-8', newline='') as f:
        reader = csv.DictReader(f)

        for row in reader:
            splits = []
            if row.get('splits'):
                for pair in row['splits'].split(';'):
                    if ':' in pair:
                        k, v = pair.rsplit(':', 1)
                        splits.append(Split(member_id=k.strip(), amount=float(v.strip())))

            expenses.append(Expense(
                id=row.get('id', ''),
                group_id=group_id,
                description=row.get('description', ''),
                amount=float(row['amount']),
                paid_by=row['paid_by'],
                split_type=row.get('split_type', ''),
                splits=tuple(splits),
                date=row.get('date', '')
            ))

    return expenses


def export_payments_to_csv(payments: Iterable[Payment], filepath: str) -> int:
    """
    Export payments to CSV file, returns number of rows written
    CSV columns: id, date, from_id, to_id, amount
    """
    count = 0
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(PAYMENT_COLUMNS)
        for p in payments:
            writer.writerow([p.id, p.date, p.from_id, p.to_id, repr(p.amount)])
            count += 1
    return count
