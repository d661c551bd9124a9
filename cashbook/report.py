"""
report.py - The computed report view for a filtered window

A report is produced fresh for every query and never cached:

    history + current balance (+ the statuses that back the balance)
        -> filter rows by the query
        -> reconstruct the opening balance at the window start (every
           transaction backing the balance, whether selected or not)
        -> replay the filtered rows from that opening balance
        -> aggregate inflows / outflows over the filtered rows

Invariant: closing_balance - opening_balance == inflows - outflows.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Collection, Dict, Iterable, List, Optional, Tuple

from .core import BalancedTransaction, Transaction, parse_timestamp, require_balance
from .filters import ReportQuery, aggregate, backing_transactions, filter_transactions
from .logging_setup import get_logger
from .replay import closing_balance_of, reconstruct_balance_at, replay

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class LedgerReport:
    """
    Balances, totals and annotated rows for one report window.

    Attributes:
        opening_balance: Balance immediately before the window
        closing_balance: Balance immediately after the last row
        inflows: Sum of credits in the window
        outflows: Sum of debits in the window
        rows: Replayed rows, oldest first
        query: The criteria that selected the rows
    """
    opening_balance: int
    closing_balance: int
    inflows: int
    outflows: int
    rows: Tuple[BalancedTransaction, ...] = ()
    query: ReportQuery = field(default_factory=ReportQuery)

    @property
    def net_movement(self) -> int:
        return self.inflows - self.outflows

    def newest_first(self) -> List[BalancedTransaction]:
        """Rows in display order (most recent first). Balances are unchanged."""
        return list(reversed(self.rows))

    def as_dict(self) -> Dict[str, Any]:
        return {
            "opening_balance": self.opening_balance,
            "closing_balance": self.closing_balance,
            "inflows": self.inflows,
            "outflows": self.outflows,
            "net_movement": self.net_movement,
            "rows": [row.as_dict() for row in self.rows],
        }


def window_anchor(
    query: ReportQuery,
    selected: List[Transaction],
    now: Optional[datetime],
) -> Optional[datetime]:
    """
    Instant whose reconstructed balance opens the window.

    The start of from_date when given, else the earliest selected row, else
    now. None means "now" with no explicit clock: the current balance itself.
    """
    if query.window_start is not None:
        return query.window_start
    if selected:
        return min(t.created_at for t in selected)
    return now


def build_report(
    transactions: Iterable[Transaction],
    current_balance: int,
    query: Optional[ReportQuery] = None,
    now: Optional[datetime] = None,
    balance_statuses: Optional[Collection[str]] = None,
) -> LedgerReport:
    """
    Compute the report for a filtered window of a wallet's history.

    Args:
        transactions: Wallet history
        current_balance: Wallet balance as of now, in minor units
        query: Row criteria (default: every transaction)
        now: Explicit present instant, used as the anchor when the window
            has neither a from_date nor any rows
        balance_statuses: Statuses whose transactions are reflected in
            current_balance (default: all of them). Only these are reversed
            when reconstructing the opening balance.

    Returns:
        LedgerReport

    Raises:
        InvalidBalance: If current_balance is not an integer
    """
    require_balance(current_balance, "current_balance")
    history = list(transactions)
    query = query or ReportQuery()
    if now is not None:
        now = parse_timestamp(now)

    selected = filter_transactions(history, query)
    anchor = window_anchor(query, selected, now)
    if anchor is None:
        opening = current_balance
    else:
        backing = backing_transactions(history, balance_statuses)
        opening = reconstruct_balance_at(anchor, backing, current_balance)

    rows = replay(selected, opening)
    totals = aggregate(selected)
    closing = closing_balance_of(rows, opening)

    logger.debug(
        "report: %d of %d transactions selected, opening=%d closing=%d net=%d",
        len(selected), len(history), opening, closing, totals.net,
    )
    return LedgerReport(
        opening_balance=opening,
        closing_balance=closing,
        inflows=totals.inflows,
        outflows=totals.outflows,
        rows=tuple(rows),
        query=query,
    )
