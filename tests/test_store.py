"""
LedgerStore tests
"""
import dataclasses

import pytest

from ledger_api import create_group, record_expense, record_payment
from models import Ledger, SplitType
from store import LedgerStore


class TestLedgerStore:
    """Indexes, lookups and snapshots"""

    def test_history_is_indexed_by_group(self, store: LedgerStore, trio) -> None:
        other = create_group(store, "Other", ["X", "Y"])
        e1 = record_expense(store, trio.id, "Dinner", 30.0, trio.members[0].id, SplitType.EQUAL)
        e2 = record_expense(store, other.id, "Lunch", 10.0, other.members[0].id, SplitType.EQUAL)
        p1 = record_payment(store, other.id, other.members[1].id, other.members[0].id, 5.0)

        assert store.expenses_for_group(trio.id) == [e1]
        assert store.expenses_for_group(other.id) == [e2]
        assert store.payments_for_group(trio.id) == []
        assert store.payments_for_group(other.id) == [p1]
        assert store.get_expense(e1.id) == e1
        assert store.get_payment(p1.id) == p1
        assert store.expenses_for_group("missing") == []

    def test_membership(self, store: LedgerStore, trio) -> None:
        other = create_group(store, "Other", ["X", "Y"])

        assert store.is_member(trio.id, trio.members[0].id)
        assert not store.is_member(trio.id, other.members[0].id)
        assert store.get_member("missing") is None

    def test_duplicate_ids_are_refused(self, store: LedgerStore, trio) -> None:
        expense = record_expense(store, trio.id, "Dinner", 30.0, trio.members[0].id, SplitType.EQUAL)

        with pytest.raises(ValueError):
            store.add_group(trio)
        with pytest.raises(ValueError):
            store.add_expense(expense)
        assert store.expenses_for_group(trio.id) == [expense]

    def test_entries_need_a_known_group(self, store: LedgerStore, trio) -> None:
        expense = record_expense(store, trio.id, "Dinner", 30.0, trio.members[0].id, SplitType.EQUAL)
        with pytest.raises(ValueError):
            LedgerStore().add_expense(expense)

    def test_snapshot_is_frozen(self, store: LedgerStore, trio) -> None:
        snap = store.snapshot()
        record_expense(store, trio.id, "Dinner", 30.0, trio.members[0].id, SplitType.EQUAL)

        assert snap.expenses == ()
        assert len(store.snapshot().expenses) == 1
        with pytest.raises(dataclasses.FrozenInstanceError):
            snap.groups[0].name = "Renamed"

    def test_group_snapshot(self, store: LedgerStore, trio) -> None:
        create_group(store, "Other", ["X", "Y"])
        record_expense(store, trio.id, "Dinner", 30.0, trio.members[0].id, SplitType.EQUAL)

        snap = store.group_snapshot(trio.id)

        assert snap.groups == (trio,)
        assert len(snap.expenses) == 1
        assert store.group_snapshot("missing") is None

    def test_from_ledger_rebuilds_indexes(self, store: LedgerStore, trio) -> None:
        record_expense(store, trio.id, "Dinner", 30.0, trio.members[0].id, SplitType.EQUAL)
        record_payment(store, trio.id, trio.members[1].id, trio.members[0].id, 10.0)

        rebuilt = LedgerStore.from_ledger(store.snapshot())

        assert rebuilt.snapshot() == store.snapshot()
        assert rebuilt.is_member(trio.id, trio.members[2].id)
        assert LedgerStore.from_ledger(Ledger()).groups() == []

    def test_from_ledger_skips_records_that_do_not_fit(self, store: LedgerStore, trio) -> None:
        expense = record_expense(store, trio.id, "Dinner", 30.0, trio.members[0].id, SplitType.EQUAL)
        snap = store.snapshot()
        stray = dataclasses.replace(expense, id="stray", group_id="gone")

        rebuilt = LedgerStore.from_ledger(Ledger(
            groups=snap.groups + snap.groups,
            expenses=snap.expenses + (expense, stray),
        ))

        assert rebuilt.snapshot() == snap
        assert rebuilt.get_expense("stray") is None
