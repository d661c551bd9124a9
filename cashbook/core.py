"""
Core types and validation for the cashbook system.

This module provides the foundational data structures for petty cash ledgers:
1. Enums: Direction, Category
2. Immutable data structures: Transaction, BalancedTransaction, Totals
3. Exceptions: CashbookError and input validation error types
4. Helpers: strict timestamp parsing and balance checks

All amounts and balances are integers in minor currency units. Nothing in this
module performs floating point arithmetic on money.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
import re


# ============================================================================
# CONSTANTS
# ============================================================================

# Status values produced by the upstream approval workflow. Status is kept as a
# free string on Transaction; these are the values the workflow is known to emit.
STATUS_PENDING_APPROVAL = "pending_approval"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"

# Filter sentinel used by report screens for "no filter".
ALL = "all"

# YYYY-MM-DD with optional time part; fromisoformat() does the real parsing.
_ISO_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}([T ].+)?$")


# ============================================================================
# EXCEPTIONS
# ============================================================================

class CashbookError(Exception):
    """Base exception for all cashbook errors."""
    pass


class InvalidTransaction(CashbookError, ValueError):
    """Raised when a transaction record has a missing or malformed field."""
    pass


class InvalidTimestamp(InvalidTransaction):
    """Raised when a timestamp is missing, not a datetime, or not ISO-8601."""
    pass


class InvalidBalance(CashbookError, ValueError):
    """Raised when a balance input is not an integer amount of minor units."""
    pass


class InvalidQuery(CashbookError, ValueError):
    """Raised when report filter criteria are inconsistent."""
    pass


# ============================================================================
# ENUMS
# ============================================================================

class Direction(Enum):
    """
    Direction of a movement relative to the wallet.

    CREDIT: money into the wallet (increases the balance).
    DEBIT: money out of the wallet (decreases the balance).
    """
    CREDIT = "credit"
    DEBIT = "debit"

    @property
    def sign(self) -> int:
        return 1 if self is Direction.CREDIT else -1

    @classmethod
    def parse(cls, value: Any) -> Direction:
        """
        Resolve a Direction from an enum member or its string value.

        Raises:
            InvalidTransaction: If the value is not a known direction
        """
        if isinstance(value, Direction):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidTransaction(f"Unknown direction {value!r} (expected 'credit' or 'debit')")


class Category(Enum):
    """
    Known petty cash categories.

    UNCATEGORIZED is an explicit variant for records that carry no category or
    an unrecognised one. It is never substituted by a free-text default.
    """
    CASH_ADDITION = "Cash Addition"
    OFFICE_SUPPLIES = "Office Supplies"
    TRAVEL_AND_TRANSPORT = "Travel & Transport"
    MEALS_AND_ENTERTAINMENT = "Meals & Entertainment"
    MAINTENANCE = "Maintenance"
    UTILITIES = "Utilities"
    COMMUNICATION = "Communication"
    UNCATEGORIZED = "Uncategorized"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: Optional[Any]) -> Category:
        """
        Resolve a category from a display label.

        Matching is case-insensitive and accepts the short aliases used by the
        older history screen ("Travel", "Meals"). Blank or unknown labels
        resolve to UNCATEGORIZED.
        """
        if isinstance(label, Category):
            return label
        if label is None:
            return cls.UNCATEGORIZED
        key = str(label).strip().lower()
        if not key:
            return cls.UNCATEGORIZED
        return _CATEGORY_LOOKUP.get(key, cls.UNCATEGORIZED)


_CATEGORY_LOOKUP = {c.value.lower(): c for c in Category}
_CATEGORY_LOOKUP.update({
    "travel": Category.TRAVEL_AND_TRANSPORT,
    "transport": Category.TRAVEL_AND_TRANSPORT,
    "meals": Category.MEALS_AND_ENTERTAINMENT,
    "general": Category.UNCATEGORIZED,
})


# ============================================================================
# HELPERS
# ============================================================================

def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_timestamp(value: Any) -> datetime:
    """
    Parse a timestamp strictly.

    Accepts datetime instances and ISO-8601 strings (a trailing "Z" is read as
    UTC). Aware values are converted to naive UTC so every timestamp in a
    computation compares with every other.

    Raises:
        InvalidTimestamp: If the value is missing or cannot be parsed exactly
    """
    if isinstance(value, datetime):
        return _to_naive_utc(value)
    if not isinstance(value, str):
        raise InvalidTimestamp(f"Timestamp must be a datetime or ISO-8601 string, got {type(value).__name__}")
    text = value.strip()
    if not _ISO_PREFIX.match(text):
        raise InvalidTimestamp(f"Malformed timestamp {value!r}")
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise InvalidTimestamp(f"Malformed timestamp {value!r}: {e}") from e
    return _to_naive_utc(parsed)


def require_balance(value: Any, name: str = "balance") -> int:
    """
    Check that a balance is an integer number of minor units.

    Raises:
        InvalidBalance: If value is not an int (bool and float are rejected)
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidBalance(f"{name} must be an integer in minor units, got {value!r}")
    return value


# ============================================================================
# CORE DATA STRUCTURES
# ============================================================================

@dataclass(frozen=True, slots=True)
class Transaction:
    """
    A single credit or debit against a wallet - an immutable FACT.

    Transactions are owned by the upstream ledger service. The engine only
    reads them; approval and rejection happen upstream.

    Attributes:
        id: Opaque unique identifier.
        created_at: When the movement happened. The only ordering key.
        direction: CREDIT increases the balance, DEBIT decreases it.
        amount: Non-negative integer amount in minor units.
        status: Workflow status (pending_approval, approved, rejected, ...).
            Used for filtering only, never for arithmetic.
        category: Category of the movement (UNCATEGORIZED when unknown).
        title: Display title.
        payee: Display payee.

    created_at, direction and category are normalised in __post_init__, so
    strings may be passed for them. Everything else is validated as given.
    """
    id: str
    created_at: datetime
    direction: Direction
    amount: int
    status: str = STATUS_APPROVED
    category: Category = Category.UNCATEGORIZED
    title: str = ""
    payee: str = ""

    def __post_init__(self):
        if not isinstance(self.id, str) or not self.id.strip():
            raise InvalidTransaction("Transaction id cannot be empty")
        object.__setattr__(self, 'created_at', parse_timestamp(self.created_at))
        object.__setattr__(self, 'direction', Direction.parse(self.direction))
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise InvalidTransaction(
                f"Transaction {self.id}: amount must be an integer in minor units, got {self.amount!r}"
            )
        if self.amount < 0:
            raise InvalidTransaction(f"Transaction {self.id}: amount must be non-negative, got {self.amount}")
        if not isinstance(self.status, str):
            raise InvalidTransaction(f"Transaction {self.id}: status must be a string, got {self.status!r}")
        object.__setattr__(self, 'category', Category.from_label(self.category))
        object.__setattr__(self, 'title', self.title or "")
        object.__setattr__(self, 'payee', self.payee or "")

    @property
    def effect(self) -> int:
        """Signed change this transaction makes to the wallet balance."""
        return self.direction.sign * self.amount

    @property
    def is_credit(self) -> bool:
        return self.direction is Direction.CREDIT

    def __repr__(self) -> str:
        sign = "+" if self.is_credit else "-"
        return f"Transaction({self.id} {self.created_at.isoformat()} {sign}{self.amount} {self.status})"


@dataclass(frozen=True, slots=True)
class BalancedTransaction:
    """
    A transaction annotated with the running balance around it.

    Produced by replay. closing_balance == opening_balance + transaction.effect.

    Attributes:
        transaction: The replayed transaction.
        opening_balance: Wallet balance immediately before the transaction.
        closing_balance: Wallet balance immediately after the transaction.
    """
    transaction: Transaction
    opening_balance: int
    closing_balance: int

    @property
    def id(self) -> str:
        return self.transaction.id

    @property
    def created_at(self) -> datetime:
        return self.transaction.created_at

    def as_dict(self) -> dict:
        """Flatten to the output row shape: transaction fields plus both balances."""
        txn = self.transaction
        return {
            "id": txn.id,
            "created_at": txn.created_at.isoformat(),
            "direction": txn.direction.value,
            "amount": txn.amount,
            "status": txn.status,
            "category": txn.category.label,
            "title": txn.title,
            "payee": txn.payee,
            "opening_balance": self.opening_balance,
            "closing_balance": self.closing_balance,
        }


@dataclass(frozen=True, slots=True)
class Totals:
    """
    Aggregate movement over a set of transactions.

    Attributes:
        inflows: Sum of credit amounts.
        outflows: Sum of debit amounts.
        net: inflows - outflows.
    """
    inflows: int = 0
    outflows: int = 0

    @property
    def net(self) -> int:
        return self.inflows - self.outflows
