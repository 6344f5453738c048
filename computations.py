"""
Business logic and computations for SplitLedger

Everything here is a pure function of the snapshot it is given; nothing reads
or mutates a LedgerStore.
"""
from __future__ import annotations
import logging
from datetime import date
from typing import Dict, Iterable, List, Optional, Union

from models import Expense, Group, Ledger, Payment, Settlement
from utils import parse_date

logger = logging.getLogger(__name__)

# Currency rounding band: balances inside it count as settled and split sums
# inside it count as matching the expense amount.
TOLERANCE = 0.01


def compute_balances(
    group: Group,
    expenses: Iterable[Expense],
    payments: Iterable[Payment]
) -> Dict[str, float]:
    """
    Reduce a group's history to member id -> signed net balance.
    Positive: the member is owed money. Negative: the member owes money.
    Entries belonging to other groups are ignored.
    """
    balances = {m.id: 0.0 for m in group.members}

    def add(member_id: str, value: float) -> None:
        if member_id not in balances:
            logger.warning("Group %s: unknown member id %s in history", group.id, member_id)
            balances[member_id] = 0.0
        balances[member_id] += value

    for e in expenses:
        if e.group_id != group.id:
            continue
        add(e.paid_by, float(e.amount))
        for s in e.splits:
            add(s.member_id, -float(s.amount))

    # a payer parted with cash (owes less), the receiver got cash (is owed less)
    for p in payments:
        if p.group_id != group.id:
            continue
        add(p.from_id, float(p.amount))
        add(p.to_id, -float(p.amount))

    return balances


def is_settled(balances: Dict[str, float], tolerance: float = TOLERANCE) -> bool:
    """True when every balance is within tolerance of zero"""
    return all(abs(v) <= tolerance for v in balances.values())


def compute_settlements(
    balances: Dict[str, float],
    group: Group,
    tolerance: float = TOLERANCE
) -> List[Settlement]:
    """
    Compute transfers that bring every balance back to zero.

    Greedy largest-first matching: creditors and debtors are each sorted by
    amount descending and walked with one cursor apiece, each step moving
    min(creditor remaining, debtor remaining). This yields at most
    creditors + debtors - 1 transfers. It is not a proven global minimum for
    every balance distribution.
    """
    creditors = []
    debtors = []
    # walk member order so equal amounts keep a stable, reproducible order
    for m in group.members:
        bal = balances.get(m.id, 0.0)
        if bal > tolerance:
            creditors.append([m, bal])
        elif bal < -tolerance:
            debtors.append([m, -bal])

    stray = set(balances) - set(group.member_ids)
    if stray:
        logger.warning("Group %s: ignoring balances of non-members %s", group.id, sorted(stray))

    creditors.sort(key=lambda x: x[1], reverse=True)
    debtors.sort(key=lambda x: x[1], reverse=True)

    settlements = []
    i = j = 0
    while i < len(creditors) and j < len(debtors):
        creditor = creditors[i]
        debtor = debtors[j]
        amount = min(creditor[1], debtor[1])
        settlements.append(Settlement(
            from_id=debtor[0].id,
            from_name=debtor[0].name,
            to_id=creditor[0].id,
            to_name=creditor[0].name,
            amount=amount,
        ))

        creditor[1] -= amount
        debtor[1] -= amount

        if creditor[1] < tolerance:
            i += 1
        if debtor[1] < tolerance:
            j += 1

    return settlements


def compute_member_summary(
    group: Group,
    expenses: Iterable[Expense],
    payments: Iterable[Payment]
) -> Dict[str, dict]:
    """
    Compute summary statistics for each member of a group.
    Returns dict mapping member id -> {name, paid, consumed, sent, received, net}
    """
    expenses = [e for e in expenses if e.group_id == group.id]
    payments = [p for p in payments if p.group_id == group.id]

    paid = {m.id: 0.0 for m in group.members}
    consumed = {m.id: 0.0 for m in group.members}
    sent = {m.id: 0.0 for m in group.members}
    received = {m.id: 0.0 for m in group.members}

    for e in expenses:
        if e.paid_by in paid:
            paid[e.paid_by] += float(e.amount)
        for s in e.splits:
            if s.member_id in consumed:
                consumed[s.member_id] += float(s.amount)
    for p in payments:
        if p.from_id in sent:
            sent[p.from_id] += float(p.amount)
        if p.to_id in received:
            received[p.to_id] += float(p.amount)

    net = compute_balances(group, expenses, payments)
    return {
        m.id: {
            "name": m.name,
            "paid": paid[m.id],
            "consumed": consumed[m.id],
            "sent": sent[m.id],
            "received": received[m.id],
            "net": net[m.id],
        } for m in group.members
    }


def group_total_spent(expenses: Iterable[Expense]) -> float:
    return sum(float(e.amount) for e in expenses)


def compute_group_overview(ledger: Ledger, group_id: str) -> Optional[dict]:
    """Totals shown on a group card; None when the group is unknown"""
    group = ledger.find_group(group_id)
    if group is None:
        return None
    expenses = [e for e in ledger.expenses if e.group_id == group_id]
    payments = [p for p in ledger.payments if p.group_id == group_id]
    return {
        "name": group.name,
        "member_count": len(group.members),
        "expense_count": len(expenses),
        "payment_count": len(payments),
        "total_spent": group_total_spent(expenses),
        "settled": is_settled(compute_balances(group, expenses, payments)),
    }


def compute_dashboard(ledger: Ledger) -> dict:
    """Headline numbers across every group"""
    return {
        "group_count": len(ledger.groups),
        "expense_count": len(ledger.expenses),
        "total_spent": group_total_spent(ledger.expenses),
    }


def filter_expenses_by_date(
    expenses: Iterable[Expense],
    start: Optional[date],
    end: Optional[date]
) -> List[Expense]:
    """Filter expenses by inclusive date range"""
    return _filter_by_date(expenses, start, end)


def filter_payments_by_date(
    payments: Iterable[Payment],
    start: Optional[date],
    end: Optional[date]
) -> List[Payment]:
    """Filter payments by inclusive date range"""
    return _filter_by_date(payments, start, end)


def _filter_by_date(items, start, end):
    if start is None and end is None:
        return list(items)
    out = []
    for x in items:
        try:
            d = parse_date(x.date)
        except ValueError:
            logger.warning("Skipping %s with unreadable date %r", x.id, x.date)
            continue
        if start and d < start:
            continue
        if end and d > end:
            continue
        out.append(x)
    return out


def expense_history(expenses: Iterable[Expense]) -> List[Expense]:
    """Expenses newest first"""
    return sorted(expenses, key=lambda e: e.date, reverse=True)


def payment_history(payments: Iterable[Payment]) -> List[Payment]:
    """Payments newest first"""
    return sorted(payments, key=lambda p: p.date, reverse=True)


def transaction_history(
    expenses: Iterable[Expense],
    payments: Iterable[Payment]
) -> List[Union[Expense, Payment]]:
    """Expenses and payments merged into one list, newest first"""
    return sorted([*expenses, *payments], key=lambda t: t.date, reverse=True)
