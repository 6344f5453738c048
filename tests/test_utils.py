"""
Utility tests
"""
from datetime import date

import pytest

from utils import app_dir, clean_names, new_id, parse_date


def test_clean_names_keeps_first_seen_order() -> None:
    assert clean_names([" Bo", "Ann ", "Bo", "", None, "  "]) == ["Bo", "Ann"]


def test_parse_date_accepts_timestamps() -> None:
    assert parse_date("2024-02-29T23:10:00+00:00") == date(2024, 2, 29)
    assert parse_date(" 2024-02-29 ") == date(2024, 2, 29)
    with pytest.raises(ValueError):
        parse_date("29/02/2024")


def test_new_id_is_unique() -> None:
    assert len({new_id() for _ in range(100)}) == 100


def test_app_dir_from_environment(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("SPLITLEDGER_HOME", str(tmp_path / "x"))
    assert app_dir() == str(tmp_path / "x")
