"""
replay.py - Balance reconstruction and chronological replay

The two reconstruction methods:

1. reconstruct_balance_at(target_time) - BACKWARD RECONSTRUCTION (UNWIND)
   - Starts from the CURRENT balance (the only anchor supplied upstream)
   - Reverses the effect of every transaction at or after target_time
   - Order of reversal does not matter, so no sort is needed

2. replay(transactions, opening_balance) - FORWARD REPLAY
   - Starts from a known opening balance
   - Applies transactions in chronological order (stable sort)
   - Annotates each transaction with its opening and closing balance

Boundary convention: a transaction whose created_at equals target_time counts
as happening at or after the boundary. It is reversed out of the balance "at"
target_time, and therefore belongs to a window that starts at target_time.

All functions here are pure. They receive the current balance explicitly and
never consult a clock.
"""

from __future__ import annotations
from datetime import datetime
from typing import Iterable, List, Sequence

from .core import BalancedTransaction, Transaction, parse_timestamp, require_balance
from .logging_setup import get_logger

logger = get_logger(__name__)


def reconstruct_balance_at(
    target_time: datetime,
    transactions: Iterable[Transaction],
    current_balance: int,
) -> int:
    """
    Reconstruct the wallet balance as it stood at target_time.

    Walks backward from current_balance, reversing every transaction with
    created_at >= target_time: credits are subtracted, debits added back.

    Args:
        target_time: Instant to reconstruct (boundary transactions are reversed)
        transactions: Complete, unfiltered history of the wallet
        current_balance: Balance as of now, in minor units

    Returns:
        Balance immediately before target_time

    Raises:
        InvalidBalance: If current_balance is not an integer
        InvalidTimestamp: If target_time cannot be parsed
    """
    balance = require_balance(current_balance, "current_balance")
    target = parse_timestamp(target_time)
    reversed_count = 0
    for txn in transactions:
        if txn.created_at >= target:
            balance -= txn.effect
            reversed_count += 1
    logger.debug(
        "reconstructed balance at %s: %d (reversed %d transactions from %d)",
        target.isoformat(), balance, reversed_count, current_balance,
    )
    return balance


def chronological(transactions: Iterable[Transaction]) -> List[Transaction]:
    """Stable ascending sort by created_at; ties keep their input order."""
    return sorted(transactions, key=lambda t: t.created_at)


def replay(
    transactions: Iterable[Transaction],
    opening_balance: int,
) -> List[BalancedTransaction]:
    """
    Replay transactions forward and assign running balances.

    Rows are always returned oldest first. Reversing for display must happen
    after replay.

    Args:
        transactions: Transactions to replay (any order; duplicates allowed)
        opening_balance: Balance before the first transaction

    Returns:
        One BalancedTransaction per input transaction, ascending by created_at

    Raises:
        InvalidBalance: If opening_balance is not an integer
    """
    running = require_balance(opening_balance, "opening_balance")
    rows: List[BalancedTransaction] = []
    for txn in chronological(transactions):
        before = running
        running += txn.effect
        rows.append(BalancedTransaction(txn, opening_balance=before, closing_balance=running))
    logger.debug("replayed %d transactions: %d -> %d", len(rows), opening_balance, running)
    return rows


def closing_balance_of(rows: Sequence[BalancedTransaction], opening_balance: int) -> int:
    """Closing balance of a replayed window (the opening balance when empty)."""
    if not rows:
        return opening_balance
    return rows[-1].closing_balance
