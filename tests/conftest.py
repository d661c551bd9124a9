"""
conftest.py - Shared pytest fixtures for cashbook tests

Provides common fixtures used across unit, conformance and functional tests:
- Petty cash sample records in the upstream JSON shape
- The approved history that backs the wallet's current balance
- A Cashbook anchored at that balance
- JSON input files for the CLI
"""

import json
import pytest
from datetime import datetime

from cashbook import Cashbook, from_legacy_record
from cashbook.logging_setup import reset_logging


# =============================================================================
# SAMPLE DATA
# =============================================================================

STARTING_FLOAT = 150000

# Upstream records (report data feed shape: date, addition/expense, description).
PETTY_CASH_RECORDS = [
    {"id": "TXN000-A", "date": "2024-05-28", "type": "addition", "amount": 80000,
     "description": "Float top-up", "category": "Cash Addition",
     "status": "approved", "payee": "Finance Department"},
    {"id": "TXN000-B", "date": "2024-06-01", "type": "expense", "amount": 12000,
     "description": "Stationery before month start", "category": "Office Supplies",
     "status": "approved", "payee": "Office Depot Uganda"},
    {"id": "TXN001", "date": "2024-06-12", "type": "expense", "amount": 2500,
     "description": "Office supplies - printer paper", "category": "Office Supplies",
     "status": "approved", "payee": "Office Depot Uganda"},
    {"id": "TXN002", "date": "2024-06-11", "type": "addition", "amount": 50000,
     "description": "Monthly petty cash addition", "category": "Cash Addition",
     "status": "approved", "payee": "Finance Department"},
    {"id": "TXN003", "date": "2024-06-10", "type": "expense", "amount": 5000,
     "description": "Transport for office errands", "category": "Travel & Transport",
     "status": "pending_approval", "payee": "Uber Uganda"},
    {"id": "TXN004", "date": "2024-06-09", "type": "expense", "amount": 1200,
     "description": "Tea and coffee for meeting", "category": "Meals & Entertainment",
     "status": "approved", "payee": "Java House"},
    {"id": "TXN005", "date": "2024-06-08", "type": "expense", "amount": 15000,
     "description": "Maintenance and repairs", "category": "Maintenance",
     "status": "approved", "payee": "Fix-It Services"},
]

# 150000 + 80000 - 12000 - 2500 + 50000 - 1200 - 15000
APPROVED_BALANCE = 249300

NOW = datetime(2024, 6, 30, 18, 0)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture(autouse=True)
def _isolate_logging():
    """Each test starts with an unconfigured package logger."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def approved_balance():
    return APPROVED_BALANCE


@pytest.fixture
def petty_cash_records():
    """Upstream records, including one pending expense."""
    return [dict(r) for r in PETTY_CASH_RECORDS]


@pytest.fixture
def petty_cash_transactions(petty_cash_records):
    """All sample records as Transactions."""
    return [from_legacy_record(r) for r in petty_cash_records]


@pytest.fixture
def approved_history(petty_cash_transactions):
    """Approved transactions only: the history that backs APPROVED_BALANCE."""
    return [t for t in petty_cash_transactions if t.status == "approved"]


@pytest.fixture
def petty_cash_book(approved_history):
    """Cashbook anchored at the approved balance at NOW."""
    return Cashbook(approved_history, APPROVED_BALANCE, NOW, name="petty_cash")


@pytest.fixture
def records_file(tmp_path, petty_cash_records):
    """JSON input for the CLI: approved records plus the current balance."""
    path = tmp_path / "wallet.json"
    document = {
        "current_balance": APPROVED_BALANCE,
        "transactions": [r for r in petty_cash_records if r["status"] == "approved"],
    }
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


@pytest.fixture
def bare_records_file(tmp_path, petty_cash_records):
    """JSON input without a current balance (a plain list of records)."""
    path = tmp_path / "records.json"
    path.write_text(json.dumps(petty_cash_records), encoding="utf-8")
    return path
