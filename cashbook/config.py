"""
config.py - Runtime configuration for cashbook

Configuration is a frozen dataclass with defaults matching the petty cash
screens, optionally overridden from environment variables:

    CASHBOOK_CURRENCY               display currency code (default UGX)
    CASHBOOK_LOW_BALANCE_THRESHOLD  low balance alert level, minor units
    CASHBOOK_RECONCILE_TOLERANCE    allowed count difference, minor units
    CASHBOOK_DEFAULT_STATUS         status filter applied when none is given
    CASHBOOK_BALANCE_STATUSES       comma-separated statuses reflected in the
                                    wallet balance ("all" for every status)
    CASHBOOK_LOG_LEVEL              logging level name or number
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple
import os

from .core import ALL, STATUS_APPROVED


ENV_PREFIX = "CASHBOOK_"


@dataclass(frozen=True)
class CashbookConfig:
    currency: str = "UGX"
    # UGX 50,000 in minor units
    low_balance_threshold: int = 5_000_000
    # one currency unit
    reconcile_tolerance: int = 100
    default_status: str = STATUS_APPROVED
    # None: every transaction has moved the balance
    balance_statuses: Optional[Tuple[str, ...]] = (STATUS_APPROVED,)
    log_level: str = "INFO"


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError as e:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from e
    if value < 0:
        raise ValueError(f"{ENV_PREFIX}{name} must be non-negative, got {value}")
    return value


def _statuses_setting(
    env: Mapping[str, str],
    name: str,
    default: Optional[Tuple[str, ...]],
) -> Optional[Tuple[str, ...]]:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    if raw.strip().lower() == ALL:
        return None
    return tuple(s.strip() for s in raw.split(",") if s.strip())


def load_config(environ: Optional[Mapping[str, str]] = None) -> CashbookConfig:
    """
    Build a CashbookConfig from environment variables with defaults.

    Args:
        environ: Mapping to read from (default: os.environ)

    Returns:
        CashbookConfig

    Raises:
        ValueError: If an integer setting cannot be parsed or is negative
    """
    env = os.environ if environ is None else environ
    defaults = CashbookConfig()
    return CashbookConfig(
        currency=(env.get(ENV_PREFIX + "CURRENCY") or defaults.currency).strip(),
        low_balance_threshold=_int_setting(env, "LOW_BALANCE_THRESHOLD", defaults.low_balance_threshold),
        reconcile_tolerance=_int_setting(env, "RECONCILE_TOLERANCE", defaults.reconcile_tolerance),
        default_status=(env.get(ENV_PREFIX + "DEFAULT_STATUS") or defaults.default_status).strip(),
        balance_statuses=_statuses_setting(env, "BALANCE_STATUSES", defaults.balance_statuses),
        log_level=(env.get(ENV_PREFIX + "LOG_LEVEL") or defaults.log_level).strip().upper(),
    )
