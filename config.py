"""
Configuration and data loading/saving for SplitLedger

State lives under three independent keys of a key-value storage, each holding
a JSON list of records.
"""
from __future__ import annotations
import json
import logging
from typing import Callable, List

from models import Expense, Group, Ledger, Member, Payment, Split
from storage import JsonFileStorage, KeyValueStorage
from utils import app_dir

logger = logging.getLogger(__name__)

GROUPS_KEY = "groups"
EXPENSES_KEY = "expenses"
PAYMENTS_KEY = "payments"


def get_default_storage() -> JsonFileStorage:
    """Create file storage in the application data directory"""
    return JsonFileStorage(app_dir())


# ---------- Records ----------
def group_to_dict(g: Group) -> dict:
    return {
        "id": g.id,
        "name": g.name,
        "members": [{"id": m.id, "name": m.name} for m in g.members],
        "createdAt": g.created_at,
    }


def dict_to_group(d: dict) -> Group:
    return Group(
        id=d["id"],
        name=d["name"],
        members=tuple(Member(id=m["id"], name=m["name"]) for m in d.get("members", [])),
        created_at=d.get("createdAt", ""),
    )


def expense_to_dict(e: Expense) -> dict:
    return {
        "id": e.id,
        "groupId": e.group_id,
        "description": e.description,
        "amount": e.amount,
        "paidBy": e.paid_by,
        "splits": [{"memberId": s.member_id, "amount": s.amount} for s in e.splits],
        "splitType": e.split_type,
        "date": e.date,
    }


def dict_to_expense(d: dict) -> Expense:
    return Expense(
        id=d["id"],
        group_id=d["groupId"],
        description=d.get("description", ""),
        amount=float(d["amount"]),
        paid_by=d["paidBy"],
        split_type=d.get("splitType", ""),
        splits=tuple(Split(member_id=s["memberId"], amount=float(s["amount"])) for s in d.get("splits", [])),
        date=d.get("date", ""),
    )


def payment_to_dict(p: Payment) -> dict:
    return {
        "id": p.id,
        "groupId": p.group_id,
        "fromId": p.from_id,
        "toId": p.to_id,
        "amount": p.amount,
        "date": p.date,
    }


def dict_to_payment(d: dict) -> Payment:
    return Payment(
        id=d["id"],
        group_id=d["groupId"],
        from_id=d["fromId"],
        to_id=d["toId"],
        amount=float(d["amount"]),
        date=d.get("date", ""),
    )


def ledger_to_dict(ledger: Ledger) -> dict:
    """Convert Ledger snapshot to the three serializable collections"""
    return {
        GROUPS_KEY: [group_to_dict(g) for g in ledger.groups],
        EXPENSES_KEY: [expense_to_dict(e) for e in ledger.expenses],
        PAYMENTS_KEY: [payment_to_dict(p) for p in ledger.payments],
    }


# ---------- Storage ----------
def _load_records(storage: KeyValueStorage, key: str, convert: Callable[[dict], object]) -> List:
    try:
        raw = storage.get(key)
    except Exception:
        logger.warning("Could not read %r from storage, starting empty", key, exc_info=True)
        return []
    if not raw:
        return []
    try:
        return [convert(r) for r in json.loads(raw)]
    except (ValueError, TypeError, KeyError):
        logger.error("Stored %r is malformed, starting empty", key, exc_info=True)
        return []


def load_ledger(storage: KeyValueStorage) -> Ledger:
    """Load all collections; anything unreadable starts empty instead of raising"""
    ledger = Ledger(
        groups=tuple(_load_records(storage, GROUPS_KEY, dict_to_group)),
        expenses=tuple(_load_records(storage, EXPENSES_KEY, dict_to_expense)),
        payments=tuple(_load_records(storage, PAYMENTS_KEY, dict_to_payment)),
    )
    logger.debug(
        "Loaded %d groups, %d expenses, %d payments",
        len(ledger.groups), len(ledger.expenses), len(ledger.payments),
    )
    return ledger


def save_ledger(storage: KeyValueStorage, ledger: Ledger) -> bool:
    """Best-effort save of all collections; returns False if any write failed"""
    ok = True
    for key, records in ledger_to_dict(ledger).items():
        try:
            stored = storage.set(key, json.dumps(records, ensure_ascii=False))
        except Exception:
            logger.error("Failed to save %r; changes are kept in memory only", key, exc_info=True)
            ok = False
            continue
        if not stored:
            logger.warning("Storage did not accept %r; changes are kept in memory only", key)
            ok = False
    return ok
