"""
filters.py - Report criteria, filtering and aggregation

Filtering selects which transactions appear as rows of a report. It never
changes balance arithmetic: the opening balance of a window is reconstructed
from every transaction backing the current balance, selected or not (see
backing_transactions() and replay.py).

Criteria are optional and AND-combined:
    - from_date / to_date: inclusive calendar dates. from_date is widened to
      the start of its day and to_date to the end of its day (23:59:59.999999).
      Day boundaries are UTC for timestamps that carried an offset (they are
      normalised to naive UTC on parse) and wall-clock for naive timestamps.
    - status / category: equality. The "all" sentinel disables the criterion.
    - search_text: case-insensitive substring over id, title and payee.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Collection, Iterable, List, Optional, Tuple, Union

from .core import (
    ALL, Category, Direction, InvalidQuery, Totals, Transaction,
)


def start_of_day(d: date) -> datetime:
    """First instant of a calendar date."""
    return datetime.combine(d, time.min)


def end_of_day(d: date) -> datetime:
    """Last representable instant of a calendar date."""
    return datetime.combine(d, time.max)


def _as_date(value: Optional[Union[date, str]], name: str) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as e:
            raise InvalidQuery(f"{name} must be a YYYY-MM-DD date, got {value!r}") from e
    raise InvalidQuery(f"{name} must be a date, got {type(value).__name__}")


@dataclass(frozen=True, slots=True)
class ReportQuery:
    """
    Filter criteria for a report window.

    Attributes:
        from_date: First calendar date of the window (inclusive)
        to_date: Last calendar date of the window (inclusive)
        status: Required status, or None / "all" for any
        category: Required category (Category or label), or None / "all" for any
        search_text: Free text matched against id, title and payee
    """
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    status: Optional[str] = None
    category: Optional[Category] = None
    search_text: Optional[str] = None

    def __post_init__(self):
        from_date = _as_date(self.from_date, "from_date")
        to_date = _as_date(self.to_date, "to_date")
        if from_date and to_date and from_date > to_date:
            raise InvalidQuery(f"from_date {from_date} is after to_date {to_date}")
        object.__setattr__(self, 'from_date', from_date)
        object.__setattr__(self, 'to_date', to_date)

        status = self.status
        if status is not None and (not status.strip() or status.strip().lower() == ALL):
            status = None
        object.__setattr__(self, 'status', status)

        category = self.category
        if isinstance(category, str):
            category = None if not category.strip() or category.strip().lower() == ALL \
                else Category.from_label(category)
        object.__setattr__(self, 'category', category)

        text = self.search_text.strip() if self.search_text else None
        object.__setattr__(self, 'search_text', text or None)

    @property
    def window_start(self) -> Optional[datetime]:
        return start_of_day(self.from_date) if self.from_date else None

    @property
    def window_end(self) -> Optional[datetime]:
        return end_of_day(self.to_date) if self.to_date else None

    def matches(self, txn: Transaction) -> bool:
        start, end = self.window_start, self.window_end
        if start is not None and txn.created_at < start:
            return False
        if end is not None and txn.created_at > end:
            return False
        if self.status is not None and txn.status != self.status:
            return False
        if self.category is not None and txn.category is not self.category:
            return False
        if self.search_text is not None and not matches_text(txn, self.search_text):
            return False
        return True


def matches_text(txn: Transaction, needle: str) -> bool:
    """Case-insensitive substring match over id, title and payee."""
    needle = needle.lower()
    return any(needle in field.lower() for field in (txn.id, txn.title, txn.payee))


def filter_transactions(
    transactions: Iterable[Transaction],
    query: Optional[ReportQuery] = None,
) -> List[Transaction]:
    """
    Select the transactions matching every criterion of the query.

    Input order is preserved; chronological ordering is replay's job.

    Args:
        transactions: Transactions to filter
        query: Criteria (None selects everything)

    Returns:
        List of matching transactions
    """
    if query is None:
        return list(transactions)
    return [t for t in transactions if query.matches(t)]


def aggregate(transactions: Iterable[Transaction]) -> Totals:
    """
    Sum credits and debits over a set of transactions.

    Returns:
        Totals with inflows (credits), outflows (debits) and net
    """
    inflows = 0
    outflows = 0
    for t in transactions:
        if t.direction is Direction.CREDIT:
            inflows += t.amount
        else:
            outflows += t.amount
    return Totals(inflows=inflows, outflows=outflows)


def categories_in(transactions: Iterable[Transaction]) -> List[Category]:
    """Distinct categories present in the history, sorted by label."""
    return sorted({t.category for t in transactions}, key=lambda c: c.label)


def date_range_of(transactions: Iterable[Transaction]) -> Optional[Tuple[date, date]]:
    """(earliest, latest) calendar date in the history, or None when empty."""
    dates = [t.created_at.date() for t in transactions]
    if not dates:
        return None
    return min(dates), max(dates)


def backing_transactions(
    transactions: Iterable[Transaction],
    balance_statuses: Optional[Collection[str]] = None,
) -> List[Transaction]:
    """
    The transactions whose movements are reflected in the current balance.

    Upstream balances only move when a transaction settles, so a history that
    still carries pending or rejected records must be narrowed to the settled
    statuses before walking back from the balance.

    Args:
        transactions: Wallet history
        balance_statuses: Statuses that move the balance (None: every record)

    Returns:
        List of backing transactions, input order preserved
    """
    if balance_statuses is None:
        return list(transactions)
    return [t for t in transactions if t.status in balance_statuses]
