"""
overview.py - Wallet summary figures

Monthly spending counts approved debits in the calendar month of `now`.
Pending approvals counts transactions still awaiting approval.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from .core import (
    Direction, STATUS_APPROVED, STATUS_PENDING_APPROVAL, Transaction,
    parse_timestamp, require_balance,
)


@dataclass(frozen=True, slots=True)
class WalletOverview:
    current_balance: int
    monthly_spending: int
    pending_approvals: int
    low_balance_threshold: int

    @property
    def is_low_balance(self) -> bool:
        return self.current_balance < self.low_balance_threshold


def summarize_wallet(
    transactions: Iterable[Transaction],
    current_balance: int,
    now: datetime,
    low_balance_threshold: int,
) -> WalletOverview:
    """
    Summarise a wallet for the overview screen.

    Args:
        transactions: Wallet history
        current_balance: Balance as of now
        now: Present instant; selects the month for monthly_spending
        low_balance_threshold: Balance below which the wallet is flagged

    Returns:
        WalletOverview
    """
    require_balance(current_balance, "current_balance")
    require_balance(low_balance_threshold, "low_balance_threshold")
    now = parse_timestamp(now)

    spending = 0
    pending = 0
    for t in transactions:
        if t.status == STATUS_PENDING_APPROVAL:
            pending += 1
        if (t.direction is Direction.DEBIT
                and t.status == STATUS_APPROVED
                and t.created_at.year == now.year
                and t.created_at.month == now.month):
            spending += t.amount

    return WalletOverview(
        current_balance=current_balance,
        monthly_spending=spending,
        pending_approvals=pending,
        low_balance_threshold=low_balance_threshold,
    )
