"""
Ledger mutations for SplitLedger

Each operation validates its input completely before appending, so a
ValidationError never leaves a partial write behind.
"""
from __future__ import annotations
import logging
import math
from typing import Iterable, List, Optional, Sequence

from computations import TOLERANCE
from models import Expense, Group, Member, Payment, Settlement, Split, SplitType, ValidationError
from store import LedgerStore
from utils import clean_names, new_id, now_iso, parse_date

logger = logging.getLogger(__name__)


def _require_group(store: LedgerStore, group_id: str) -> Group:
    group = store.get_group(group_id)
    if group is None:
        raise ValidationError(f"Unknown group: {group_id}")
    return group


def _require_amount(amount, what: str = "Amount") -> float:
    try:
        value = float(amount)
    except (TypeError, ValueError):
        raise ValidationError(f"{what} must be a number, got {amount!r}") from None
    if not math.isfinite(value) or value <= 0:
        raise ValidationError(f"{what} must be greater than 0")
    return value


def create_group(store: LedgerStore, name: str, member_names: Iterable[str]) -> Group:
    """Create a group with fresh ids for it and each member"""
    name = (name or "").strip()
    if not name:
        raise ValidationError("Group name is required")
    names = clean_names(member_names)
    if len(names) < 2:
        raise ValidationError("A group needs at least 2 members")

    group = Group(
        id=new_id(),
        name=name,
        members=tuple(Member(id=new_id(), name=n) for n in names),
        created_at=now_iso(),
    )
    store.add_group(group)
    logger.info("Created group %s (%s) with %d members", group.name, group.id, len(names))
    return group


def build_splits(
    group: Group,
    amount: float,
    split_type: str,
    custom_splits: Optional[Sequence[Split]] = None
) -> tuple:
    """Derive (equal) or check (custom) the splits of an expense amount"""
    if split_type == SplitType.EQUAL:
        # not rounded per member; the residual stays inside TOLERANCE
        per_member = amount / len(group.members)
        return tuple(Split(member_id=m.id, amount=per_member) for m in group.members)

    if split_type != SplitType.CUSTOM:
        raise ValidationError(f"Unknown split type: {split_type!r}")

    splits = []
    for s in custom_splits or ():
        if s.member_id not in group.member_ids:
            raise ValidationError(f"Split member {s.member_id} is not in group {group.name}")
        splits.append(Split(member_id=s.member_id, amount=_require_amount(s.amount, "Split amount")))
    if not splits:
        raise ValidationError("Custom split needs at least one share")

    total = sum(s.amount for s in splits)
    if abs(total - amount) > TOLERANCE:
        raise ValidationError(f"Split amounts ({total:.2f}) must equal total ({amount:.2f})")
    return tuple(splits)


def _validate_expense(
    group: Group,
    description: str,
    amount,
    paid_by: str,
    split_type: str,
    custom_splits: Optional[Sequence[Split]]
):
    description = (description or "").strip()
    if not description:
        raise ValidationError("Description is required")
    amount = _require_amount(amount)
    if paid_by not in group.member_ids:
        raise ValidationError(f"Payer {paid_by} is not in group {group.name}")
    splits = build_splits(group, amount, split_type, custom_splits)
    return description, amount, splits


def record_expense(
    store: LedgerStore,
    group_id: str,
    description: str,
    amount: float,
    paid_by: str,
    split_type: str,
    custom_splits: Optional[Sequence[Split]] = None
) -> Expense:
    """Validate and append one expense"""
    group = _require_group(store, group_id)
    description, amount, splits = _validate_expense(
        group, description, amount, paid_by, split_type, custom_splits
    )
    expense = Expense(
        id=new_id(),
        group_id=group.id,
        description=description,
        amount=amount,
        paid_by=paid_by,
        split_type=split_type,
        splits=splits,
        date=now_iso(),
    )
    store.add_expense(expense)
    logger.info("Recorded expense %r of %.2f in group %s", description, amount, group.id)
    return expense


def record_payment(
    store: LedgerStore,
    group_id: str,
    from_id: str,
    to_id: str,
    amount: float
) -> Payment:
    """Validate and append one settling payment"""
    group = _require_group(store, group_id)
    if from_id not in group.member_ids:
        raise ValidationError(f"Payer {from_id} is not in group {group.name}")
    if to_id not in group.member_ids:
        raise ValidationError(f"Receiver {to_id} is not in group {group.name}")
    if from_id == to_id:
        raise ValidationError("Payer and receiver must be different members")
    amount = _require_amount(amount)

    payment = Payment(
        id=new_id(),
        group_id=group.id,
        from_id=from_id,
        to_id=to_id,
        amount=amount,
        date=now_iso(),
    )
    store.add_payment(payment)
    logger.info("Recorded payment of %.2f from %s to %s in group %s", amount, from_id, to_id, group.id)
    return payment


def record_settlement(store: LedgerStore, group_id: str, settlement: Settlement) -> Payment:
    """Materialize a proposed settlement as a payment"""
    return record_payment(store, group_id, settlement.from_id, settlement.to_id, settlement.amount)


def import_expenses(store: LedgerStore, group_id: str, expenses: Iterable[Expense]) -> List[Expense]:
    """
    Validate a batch of externally loaded expenses and append all of them,
    or none when any is invalid. Each is re-homed to group_id with a fresh id;
    its original date is kept.
    """
    group = _require_group(store, group_id)
    accepted = []
    for e in expenses:
        description, amount, splits = _validate_expense(
            group, e.description, e.amount, e.paid_by, e.split_type, e.splits
        )
        when = e.date or now_iso()
        try:
            parse_date(when)
        except ValueError:
            raise ValidationError(f"Expense {description!r} has an unreadable date: {when!r}") from None
        accepted.append(Expense(
            id=new_id(),
            group_id=group.id,
            description=description,
            amount=amount,
            paid_by=e.paid_by,
            split_type=e.split_type,
            splits=splits,
            date=when,
        ))
    for e in accepted:
        store.add_expense(e)
    logger.info("Imported %d expenses into group %s", len(accepted), group.id)
    return accepted
