"""
Shared pytest fixtures
"""
from typing import Optional

import pytest

from ledger_api import create_group
from main_app import SplitLedgerApp
from models import Group
from storage import MemoryStorage
from store import LedgerStore


class FailingStorage:
    """Storage whose every call blows up"""

    def __init__(self):
        self.set_calls = 0

    def get(self, key: str) -> Optional[str]:
        raise OSError("storage offline")

    def set(self, key: str, value: str) -> bool:
        self.set_calls += 1
        raise OSError("storage offline")


@pytest.fixture
def store() -> LedgerStore:
    return LedgerStore()


@pytest.fixture
def trio(store: LedgerStore) -> Group:
    """Group of A, B and C"""
    return create_group(store, "Trip", ["A", "B", "C"])


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def app(memory_storage: MemoryStorage) -> SplitLedgerApp:
    return SplitLedgerApp(memory_storage)


@pytest.fixture
def failing_storage() -> FailingStorage:
    return FailingStorage()
