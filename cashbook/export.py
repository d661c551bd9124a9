"""
export.py - Delimited text projection of report rows

Column projection:
    Date, ID, Type, Description, Category, Status, Payee, Amount

Amount is signed: debits are written as negative numbers. This is the only
place the sign convention becomes visible outside the engine.
"""

from __future__ import annotations
from typing import Dict, IO, Iterable, List, Union
import csv
import io

from .core import BalancedTransaction, Transaction

EXPORT_COLUMNS = ("Date", "ID", "Type", "Description", "Category", "Status", "Payee", "Amount")
BALANCE_COLUMNS = ("Opening Balance", "Closing Balance")

Row = Union[Transaction, BalancedTransaction]


def signed_amount(txn: Transaction) -> int:
    """Amount with the debit sign applied (negative for debits)."""
    return txn.effect


def _unwrap(row: Row) -> Transaction:
    return row.transaction if isinstance(row, BalancedTransaction) else row


def export_row(row: Row, include_balances: bool = False) -> Dict[str, object]:
    """
    Project one row to the export columns.

    Args:
        row: A Transaction or a replayed BalancedTransaction
        include_balances: Append opening/closing balance columns (replayed rows only)

    Raises:
        TypeError: If balances are requested for a row that was not replayed
    """
    txn = _unwrap(row)
    out: Dict[str, object] = {
        "Date": txn.created_at.date().isoformat(),
        "ID": txn.id,
        "Type": txn.direction.value,
        "Description": txn.title,
        "Category": txn.category.label,
        "Status": txn.status,
        "Payee": txn.payee,
        "Amount": signed_amount(txn),
    }
    if include_balances:
        if not isinstance(row, BalancedTransaction):
            raise TypeError("Balance columns require replayed rows")
        out["Opening Balance"] = row.opening_balance
        out["Closing Balance"] = row.closing_balance
    return out


def export_rows(rows: Iterable[Row], include_balances: bool = False) -> List[Dict[str, object]]:
    return [export_row(r, include_balances) for r in rows]


def write_csv(rows: Iterable[Row], stream: IO[str], include_balances: bool = False) -> int:
    """
    Write rows as CSV (header first) to a text stream.

    Fields containing commas, quotes or newlines are quoted, with embedded
    quotes doubled.

    Returns:
        Number of data rows written
    """
    columns = EXPORT_COLUMNS + (BALANCE_COLUMNS if include_balances else ())
    writer = csv.DictWriter(stream, fieldnames=columns, lineterminator="\n")
    writer.writeheader()
    count = 0
    for record in export_rows(rows, include_balances):
        writer.writerow(record)
        count += 1
    return count


def to_csv(rows: Iterable[Row], include_balances: bool = False) -> str:
    buf = io.StringIO()
    write_csv(rows, buf, include_balances)
    return buf.getvalue()
