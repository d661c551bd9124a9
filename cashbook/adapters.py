"""
adapters.py - Mapping legacy upstream records to Transactions

The organization service returns wallet transactions as JSON objects:

    {"id": "...", "created_at": "2025-01-03T10:15:00Z", "type": "debit",
     "amount": 15000, "status": "approved", "title": "Office Supplies - Stationers Ltd"}

Older payloads carry no structured category or payee; both are packed into the
title as "<category> - <payee>". Splitting the title is confined to this
module: the engine only sees Transaction.category and Transaction.payee.

Accepted "type" values: credit / debit, plus addition / expense from the report
data feed.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union
from os import PathLike
import json

from .core import Category, Direction, InvalidTransaction, Transaction
from .logging_setup import get_logger

logger = get_logger(__name__)

TITLE_SEPARATOR = " - "

_DIRECTION_ALIASES = {
    "credit": Direction.CREDIT,
    "addition": Direction.CREDIT,
    "debit": Direction.DEBIT,
    "expense": Direction.DEBIT,
}


def _clean_text(value: Any) -> str:
    if value is None:
        return ""
    return " ".join(str(value).split())


def split_title(title: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Split a legacy "<category> - <payee>" title.

    Returns:
        (category_label, payee); both None when the title has no separator
    """
    if TITLE_SEPARATOR not in title:
        return None, None
    head, tail = title.split(TITLE_SEPARATOR, 1)
    return head.strip() or None, tail.strip() or None


def _direction(record: Mapping[str, Any]) -> Direction:
    raw = record.get("direction", record.get("type"))
    if isinstance(raw, str) and raw.strip().lower() in _DIRECTION_ALIASES:
        return _DIRECTION_ALIASES[raw.strip().lower()]
    raise InvalidTransaction(f"Unknown transaction type {raw!r}")


def _amount(raw: Any) -> int:
    """Integer minor units from an int, an integral float, or an integral numeric string."""
    if isinstance(raw, bool):
        raise InvalidTransaction(f"Amount must be numeric, got {raw!r}")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if raw.is_integer():
            return int(raw)
        raise InvalidTransaction(f"Amount must be a whole number of minor units, got {raw!r}")
    if isinstance(raw, str):
        text = raw.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            as_float = float(text)
        except ValueError:
            raise InvalidTransaction(f"Amount must be numeric, got {raw!r}") from None
        if as_float.is_integer():
            return int(as_float)
        raise InvalidTransaction(f"Amount must be a whole number of minor units, got {raw!r}")
    if raw is None:
        raise InvalidTransaction("Amount is missing")
    raise InvalidTransaction(f"Amount must be numeric, got {raw!r}")


def from_legacy_record(record: Mapping[str, Any]) -> Transaction:
    """
    Build a Transaction from an upstream wallet-transaction record.

    Mapping rules:
    - id: "id" (stringified)
    - created_at: "created_at", falling back to "date"
    - direction: "direction" or "type" (credit/debit/addition/expense)
    - amount: "amount" as integer minor units
    - status: "status" (default "approved")
    - title: "title", falling back to "description"
    - category / payee: structured fields when present, else split from title

    Raises:
        InvalidTransaction: If a required field is missing or malformed
    """
    if not isinstance(record, Mapping):
        raise InvalidTransaction(f"Record must be a mapping, got {type(record).__name__}")

    raw_id = record.get("id")
    if raw_id is None:
        raise InvalidTransaction("Record has no id")
    title = _clean_text(record.get("title") or record.get("description"))

    category_label = record.get("category")
    payee = _clean_text(record.get("payee")) or None
    if not category_label or payee is None:
        split_category, split_payee = split_title(title)
        category_label = category_label or split_category
        payee = payee or split_payee

    created_at = record.get("created_at", record.get("date"))
    if created_at is None:
        raise InvalidTransaction(f"Record {raw_id} has no created_at")

    return Transaction(
        id=str(raw_id),
        created_at=created_at,
        direction=_direction(record),
        amount=_amount(record.get("amount")),
        status=_clean_text(record.get("status")) or "approved",
        category=Category.from_label(category_label),
        title=title,
        payee=payee or "",
    )


def load_transactions(records: Iterable[Mapping[str, Any]]) -> List[Transaction]:
    """
    Convert upstream records, failing on the first invalid one.

    Raises:
        InvalidTransaction: With the offending record's index in the message
    """
    transactions = []
    for idx, record in enumerate(records):
        try:
            transactions.append(from_legacy_record(record))
        except InvalidTransaction as e:
            logger.warning("rejected record #%d: %s", idx, e)
            raise type(e)(f"record #{idx}: {e}") from e
    return transactions


def load_json(path: Union[str, PathLike]) -> Tuple[List[Transaction], Optional[int]]:
    """
    Read transactions (and optionally the current balance) from a JSON file.

    The document is either a list of records, or an object:
        {"current_balance": 150000, "transactions": [...]}

    Returns:
        (transactions, current_balance or None)

    Raises:
        InvalidTransaction: If the document shape or any record is invalid
        OSError: If the file cannot be read
        ValueError: If the file is not UTF-8 or not valid JSON
    """
    with open(path, encoding="utf-8") as f:
        document = json.load(f)

    current_balance: Optional[int] = None
    if isinstance(document, list):
        records = document
    elif isinstance(document, dict):
        records = document.get("transactions")
        if not isinstance(records, list):
            raise InvalidTransaction("JSON object must contain a 'transactions' list")
        if "current_balance" in document:
            current_balance = _amount(document["current_balance"])
    else:
        raise InvalidTransaction("JSON document must be a list or an object")

    transactions = load_transactions(records)
    logger.info("loaded %d transactions from %s", len(transactions), path)
    return transactions, current_balance


def to_legacy_record(txn: Transaction) -> Dict[str, Any]:
    """Inverse mapping, used for fixtures and round-tripping exports."""
    return {
        "id": txn.id,
        "created_at": txn.created_at.isoformat(),
        "type": txn.direction.value,
        "amount": txn.amount,
        "status": txn.status,
        "title": txn.title,
        "category": txn.category.label,
        "payee": txn.payee,
    }
