"""
cashbook.py - Read-only view over one wallet's transaction history

The Cashbook bundles the three inputs every computation needs - the complete
history, the current balance and the present instant - so callers do not have
to thread them through each call. It holds no other state: every method is a
pure computation over those inputs, and nothing is cached between calls.

Key responsibilities:
    - Temporal queries: balance_at(), as_of()
    - Forward replay of the full history or a window: replay(), report()
    - Self-check of the replay invariants: verify()
"""

from __future__ import annotations
from datetime import datetime
from typing import Any, Collection, Dict, Iterable, List, Optional, Tuple

from .core import (
    BalancedTransaction, Totals, Transaction,
    parse_timestamp, require_balance,
)
from .filters import ReportQuery, aggregate, backing_transactions
from .logging_setup import get_logger
from .replay import chronological, closing_balance_of, reconstruct_balance_at, replay
from .report import LedgerReport, build_report

logger = get_logger(__name__)


class Cashbook:
    """
    A wallet's history anchored at its current balance.

    Example:
        book = Cashbook(transactions, current_balance=1000, now=datetime(2025, 3, 1))
        book.balance_at(datetime(2025, 1, 1))
        report = book.report(ReportQuery(from_date=date(2025, 1, 1), status="approved"))

    Thread Safety:
        Immutable after construction; safe to share.
    """

    def __init__(
        self,
        transactions: Iterable[Transaction],
        current_balance: int,
        now: datetime,
        name: str = "petty_cash",
        balance_statuses: Optional[Collection[str]] = None,
    ):
        """
        Create a cashbook.

        Args:
            transactions: The wallet's history
            current_balance: Balance as of now, in minor units
            now: The present instant (explicit; never read from a clock)
            name: Wallet label used in logs
            balance_statuses: Statuses whose transactions are reflected in
                current_balance, e.g. ("approved",). None means every
                transaction has moved the balance.

        Raises:
            InvalidBalance: If current_balance is not an integer
            InvalidTimestamp: If now cannot be parsed
        """
        self.name = name
        self._current_balance = require_balance(current_balance, "current_balance")
        self._now = parse_timestamp(now)
        self._transactions: Tuple[Transaction, ...] = tuple(transactions)
        for txn in self._transactions:
            if not isinstance(txn, Transaction):
                raise TypeError(f"Expected Transaction, got {type(txn).__name__}")
        self._balance_statuses = None if balance_statuses is None else frozenset(balance_statuses)
        self._backing: Tuple[Transaction, ...] = tuple(
            backing_transactions(self._transactions, self._balance_statuses)
        )

    # ========================================================================
    # READ-ONLY ACCESS
    # ========================================================================

    @property
    def current_time(self) -> datetime:
        return self._now

    @property
    def current_balance(self) -> int:
        return self._current_balance

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return self._transactions

    def __len__(self) -> int:
        return len(self._transactions)

    def __repr__(self) -> str:
        return (f"Cashbook({self.name}: {len(self._transactions)} transactions, "
                f"balance={self._current_balance} at {self._now.isoformat()})")

    def totals(self, query: Optional[ReportQuery] = None) -> Totals:
        """Inflows and outflows over the transactions matching query."""
        if query is None:
            return aggregate(self._transactions)
        return aggregate(t for t in self._transactions if query.matches(t))

    # ========================================================================
    # TEMPORAL OPERATIONS
    # ========================================================================

    def balance_at(self, target_time: datetime) -> int:
        """
        Reconstruct the balance as it stood at target_time.

        Transactions at exactly target_time are treated as happening at or
        after it and are reversed out.

        Args:
            target_time: A past or present instant

        Returns:
            Balance immediately before target_time

        Raises:
            ValueError: If target_time is after now
        """
        target = parse_timestamp(target_time)
        if target > self._now:
            raise ValueError(f"Target time {target} is in the future (now is {self._now})")
        return reconstruct_balance_at(target, self._backing, self._current_balance)

    def as_of(self, target_time: datetime) -> Cashbook:
        """
        The cashbook as it existed at target_time.

        The returned cashbook holds only transactions before target_time, and
        its current balance is the reconstructed balance at that instant.

        Raises:
            ValueError: If target_time is after now
        """
        target = parse_timestamp(target_time)
        balance = self.balance_at(target)
        earlier = [t for t in self._transactions if t.created_at < target]
        return Cashbook(earlier, balance, target, name=self.name,
                        balance_statuses=self._balance_statuses)

    @property
    def backing_transactions(self) -> Tuple[Transaction, ...]:
        """Transactions reflected in current_balance (all of them unless balance_statuses was given)."""
        return self._backing

    def opening_balance(self) -> int:
        """Balance before the earliest backing transaction (the current balance when none)."""
        if not self._backing:
            return self._current_balance
        earliest = min(t.created_at for t in self._backing)
        return reconstruct_balance_at(earliest, self._backing, self._current_balance)

    def replay(self) -> List[BalancedTransaction]:
        """Replay the backing history from its opening balance, oldest first."""
        return replay(self._backing, self.opening_balance())

    def report(self, query: Optional[ReportQuery] = None) -> LedgerReport:
        """Build the report for a filtered window (see report.build_report)."""
        return build_report(self._transactions, self._current_balance, query, now=self._now,
                            balance_statuses=self._balance_statuses)

    # ========================================================================
    # VERIFICATION
    # ========================================================================

    def verify(self, rows: Optional[List[BalancedTransaction]] = None) -> Dict[str, Any]:
        """
        Check the running balance invariants over a replay.

        Checks:
        1. Each row: closing_balance == opening_balance + effect
        2. Adjacent rows: next opening_balance == previous closing_balance
        3. Rows are in ascending created_at order
        4. For a full-history replay (rows=None), the final closing balance
           equals the current balance

        Args:
            rows: Replayed rows to check (default: replay of the full history)

        Returns:
            Dict with keys:
            - 'valid': bool - True if every check passed
            - 'discrepancies': List[Dict] - one entry per failed check
        """
        full_history = rows is None
        if full_history:
            rows = self.replay()
        discrepancies: List[Dict[str, Any]] = []

        for i, row in enumerate(rows):
            expected = row.opening_balance + row.transaction.effect
            if row.closing_balance != expected:
                discrepancies.append({
                    'check': 'row_arithmetic',
                    'id': row.id,
                    'expected': expected,
                    'actual': row.closing_balance,
                })
            if i > 0:
                prev = rows[i - 1]
                if row.opening_balance != prev.closing_balance:
                    discrepancies.append({
                        'check': 'continuity',
                        'id': row.id,
                        'expected': prev.closing_balance,
                        'actual': row.opening_balance,
                    })
                if row.created_at < prev.created_at:
                    discrepancies.append({
                        'check': 'ordering',
                        'id': row.id,
                        'expected': prev.created_at,
                        'actual': row.created_at,
                    })

        if full_history:
            closing = closing_balance_of(rows, self.opening_balance())
            if closing != self._current_balance:
                discrepancies.append({
                    'check': 'current_balance',
                    'id': None,
                    'expected': self._current_balance,
                    'actual': closing,
                })

        if discrepancies:
            logger.warning("%s: %d replay discrepancies", self.name, len(discrepancies))
        return {
            'valid': not discrepancies,
            'discrepancies': discrepancies,
        }

    def sorted_transactions(self) -> List[Transaction]:
        """History in replay order."""
        return chronological(self._transactions)
