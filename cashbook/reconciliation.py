"""
reconciliation.py - Physical cash count vs system balance
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from .core import require_balance
from .logging_setup import get_logger

logger = get_logger(__name__)


class ReconciliationStatus(Enum):
    """
    BALANCED: count is within tolerance of the system balance.
    EXCESS: more cash on hand than the system records.
    SHORTAGE: less cash on hand than the system records.
    """
    BALANCED = "balanced"
    EXCESS = "excess"
    SHORTAGE = "shortage"


@dataclass(frozen=True, slots=True)
class Reconciliation:
    system_balance: int
    physical_count: int
    tolerance: int
    status: ReconciliationStatus
    notes: str = ""

    @property
    def difference(self) -> int:
        """physical_count - system_balance (positive means excess cash)."""
        return self.physical_count - self.system_balance

    @property
    def is_balanced(self) -> bool:
        return self.status is ReconciliationStatus.BALANCED


def reconcile(
    physical_count: int,
    system_balance: int,
    tolerance: int = 0,
    notes: str = "",
) -> Reconciliation:
    """
    Compare a physical cash count with the balance the system holds.

    Args:
        physical_count: Counted cash, minor units
        system_balance: Balance per the ledger, minor units
        tolerance: Largest absolute difference still treated as balanced
        notes: Free-text notes recorded with the result

    Returns:
        Reconciliation

    Raises:
        InvalidBalance: If an amount is not an integer
        ValueError: If tolerance is negative
    """
    require_balance(physical_count, "physical_count")
    require_balance(system_balance, "system_balance")
    require_balance(tolerance, "tolerance")
    if tolerance < 0:
        raise ValueError(f"tolerance must be non-negative, got {tolerance}")

    difference = physical_count - system_balance
    if abs(difference) <= tolerance:
        status = ReconciliationStatus.BALANCED
    elif difference > 0:
        status = ReconciliationStatus.EXCESS
    else:
        status = ReconciliationStatus.SHORTAGE

    logger.info("reconciliation: system=%d counted=%d difference=%+d -> %s",
                system_balance, physical_count, difference, status.value)
    return Reconciliation(
        system_balance=system_balance,
        physical_count=physical_count,
        tolerance=tolerance,
        status=status,
        notes=notes,
    )
