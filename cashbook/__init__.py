"""
cashbook - Petty Cash Ledger Replay

Reconstructs historical wallet balances from a current balance and the
transaction history, and replays filtered windows to produce running balances.

Usage:
    from datetime import date, datetime
    from cashbook import Cashbook, Transaction, ReportQuery

    history = [
        Transaction("T1", datetime(2025, 1, 1, 9), "credit", 50000, category="Cash Addition"),
        Transaction("T2", datetime(2025, 1, 2, 14), "debit", 12000, category="Office Supplies"),
    ]
    book = Cashbook(history, current_balance=138000, now=datetime(2025, 1, 31))

    book.balance_at(datetime(2025, 1, 2))       # 150000 (T2 reversed out)
    report = book.report(ReportQuery(from_date=date(2025, 1, 2), status="approved"))
    report.opening_balance, report.closing_balance
"""

# Core types
from .core import (
    Transaction,
    BalancedTransaction,
    Totals,
    Direction,
    Category,
    CashbookError,
    InvalidTransaction,
    InvalidTimestamp,
    InvalidBalance,
    InvalidQuery,
    parse_timestamp,
    STATUS_PENDING_APPROVAL,
    STATUS_APPROVED,
    STATUS_REJECTED,
    ALL,
)

# Engine
from .replay import (
    reconstruct_balance_at,
    replay,
    chronological,
    closing_balance_of,
)
from .filters import (
    ReportQuery,
    filter_transactions,
    aggregate,
    matches_text,
    backing_transactions,
    categories_in,
    date_range_of,
    start_of_day,
    end_of_day,
)
from .report import LedgerReport, build_report
from .cashbook import Cashbook

# Boundary adapters and export
from .adapters import from_legacy_record, load_transactions, load_json, split_title, to_legacy_record
from .export import EXPORT_COLUMNS, export_row, export_rows, signed_amount, to_csv, write_csv

# Reconciliation and overview
from .reconciliation import Reconciliation, ReconciliationStatus, reconcile
from .overview import WalletOverview, summarize_wallet

# Configuration and logging
from .config import CashbookConfig, load_config
from .logging_setup import configure_logging, get_logger


__all__ = [
    # Core
    'Transaction', 'BalancedTransaction', 'Totals', 'Direction', 'Category',
    'CashbookError', 'InvalidTransaction', 'InvalidTimestamp', 'InvalidBalance', 'InvalidQuery',
    'parse_timestamp',
    'STATUS_PENDING_APPROVAL', 'STATUS_APPROVED', 'STATUS_REJECTED', 'ALL',
    # Engine
    'reconstruct_balance_at', 'replay', 'chronological', 'closing_balance_of',
    'ReportQuery', 'filter_transactions', 'aggregate', 'matches_text', 'backing_transactions',
    'categories_in', 'date_range_of', 'start_of_day', 'end_of_day',
    'LedgerReport', 'build_report', 'Cashbook',
    # Adapters and export
    'from_legacy_record', 'load_transactions', 'load_json', 'split_title', 'to_legacy_record',
    'EXPORT_COLUMNS', 'export_row', 'export_rows', 'signed_amount', 'to_csv', 'write_csv',
    # Reconciliation and overview
    'Reconciliation', 'ReconciliationStatus', 'reconcile',
    'WalletOverview', 'summarize_wallet',
    # Config and logging
    'CashbookConfig', 'load_config', 'configure_logging', 'get_logger',
]
