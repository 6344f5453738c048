"""
Utility functions for SplitLedger application
"""
from __future__ import annotations
import os
import sys
import uuid
from datetime import date, datetime, timezone
from typing import Iterable, List


def new_id() -> str:
    """Generate a fresh opaque identifier"""
    return uuid.uuid4().hex


def now_iso() -> str:
    """Get current UTC time as ISO string"""
    return datetime.now(timezone.utc).isoformat()


def parse_date(s: str) -> date:
    """Parse YYYY-MM-DD date string (a full ISO timestamp is cut to its date)"""
    return datetime.strptime(s.strip()[:10], "%Y-%m-%d").date()


def clean_names(names: Iterable[str]) -> List[str]:
    """Trim names, drop blanks and exact duplicates, keeping first-seen order"""
    out = []
    for n in names:
        n = (n or "").strip()
        if n and n not in out:
            out.append(n)
    return out


def app_dir() -> str:
    """
    Get application data directory.
    $SPLITLEDGER_HOME wins; otherwise ~/Library/Application Support/SplitLedger
    on macOS and ~/.local/share/SplitLedger elsewhere.
    Creates directory if it doesn't exist.
    """
    path = os.environ.get("SPLITLEDGER_HOME")
    if not path:
        if sys.platform == "darwin":
            base = os.path.expanduser("~/Library/Application Support")
        else:
            base = os.path.expanduser("~/.local/share")
        path = os.path.join(base, "SplitLedger")
    os.makedirs(path, exist_ok=True)
    return path
