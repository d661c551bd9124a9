"""
petty_cash_example.py - Month-End Petty Cash Walkthrough

This walkthrough shows the cashbook's two reconstruction directions on a small
office float, then produces the month-end statement and cash count.

THE TWO DIRECTIONS:
==================

1. balance_at(t) - BACKWARD
   - Starts from the CURRENT balance (the only balance the system stores)
   - Reverses every transaction at or after t
   - Use when: "what was in the tin on the 1st?"

2. replay() / report() - FORWARD
   - Starts from a reconstructed opening balance
   - Walks the rows oldest first, assigning opening and closing balances
   - Use when: statements, exports, audit trails

SCENARIO: June close at the Kampala office
=========================================

The cashier must hand Finance a June statement, a CSV export for the
accounts team, and the result of the physical count on the 30th.

Run:
    python petty_cash_example.py
"""

from datetime import date, datetime

from cashbook import (
    Cashbook, ReportQuery,
    categories_in, configure_logging, load_transactions,
    reconcile, summarize_wallet, to_csv,
)
from cashbook.cli import format_money


RECORDS = [
    {"id": "PC-0001", "date": "2024-05-28", "type": "addition", "amount": 80000,
     "description": "Float top-up", "category": "Cash Addition", "payee": "Finance Department"},
    {"id": "PC-0002", "date": "2024-06-01", "type": "expense", "amount": 12000,
     "description": "Stationery", "category": "Office Supplies", "payee": "Office Depot Uganda"},
    {"id": "PC-0003", "date": "2024-06-08", "type": "expense", "amount": 15000,
     "description": "Door lock repair", "category": "Maintenance", "payee": "Fix-It Services"},
    {"id": "PC-0004", "date": "2024-06-09", "type": "expense", "amount": 1200,
     "description": "Tea and coffee for meeting", "category": "Meals & Entertainment", "payee": "Java House"},
    {"id": "PC-0005", "date": "2024-06-10", "type": "expense", "amount": 5000,
     "description": "Transport for office errands", "category": "Travel & Transport",
     "payee": "Uber Uganda", "status": "pending_approval"},
    {"id": "PC-0006", "date": "2024-06-11", "type": "addition", "amount": 50000,
     "description": "Monthly petty cash addition", "category": "Cash Addition", "payee": "Finance Department"},
    {"id": "PC-0007", "date": "2024-06-12", "type": "expense", "amount": 2500,
     "description": "Printer paper", "category": "Office Supplies", "payee": "Office Depot Uganda"},
]

CURRENT_BALANCE = 249300
NOW = datetime(2024, 6, 30, 18, 0)
CURRENCY = "UGX"


def ugx(amount: int) -> str:
    return format_money(amount, CURRENCY)


# =============================================================================
# BACKWARD: BALANCES AT PAST INSTANTS
# =============================================================================

def show_balances_at(book: Cashbook):
    print("\n" + "=" * 70)
    print("BACKWARD RECONSTRUCTION")
    print("=" * 70)

    for when in (datetime(2024, 5, 28), datetime(2024, 6, 1), datetime(2024, 6, 11), NOW):
        print(f"  {when.isoformat():<22} {ugx(book.balance_at(when)):>16}")


# =============================================================================
# FORWARD: THE JUNE STATEMENT
# =============================================================================

def show_june_statement(book: Cashbook) -> str:
    print("\n" + "=" * 70)
    print("JUNE STATEMENT (approved only)")
    print("=" * 70)

    query = ReportQuery(from_date=date(2024, 6, 1), to_date=date(2024, 6, 30), status="approved")
    report = book.report(query)

    print(f"  Opening balance: {ugx(report.opening_balance):>16}")
    print(f"  Inflows:         {ugx(report.inflows):>16}")
    print(f"  Outflows:        {ugx(report.outflows):>16}")
    print(f"  Closing balance: {ugx(report.closing_balance):>16}")
    print()
    for row in report.newest_first():
        txn = row.transaction
        print(f"  {txn.created_at.date()}  {txn.id:<8} {ugx(txn.effect):>14}  "
              f"{ugx(row.closing_balance):>14}  {txn.category.label}")

    check = book.verify(list(report.rows))
    print(f"\n  Running balances consistent: {'YES' if check['valid'] else 'NO'}")
    return to_csv(report.newest_first(), include_balances=True)


# =============================================================================
# MONTH END
# =============================================================================

def show_month_end(book: Cashbook, pending_history):
    print("\n" + "=" * 70)
    print("MONTH-END COUNT")
    print("=" * 70)

    summary = summarize_wallet(pending_history, book.current_balance, NOW, low_balance_threshold=5_000_000)
    print(f"  Monthly spending:  {ugx(summary.monthly_spending)}")
    print(f"  Pending approvals: {summary.pending_approvals}")
    if summary.is_low_balance:
        print(f"  Balance is below {ugx(summary.low_balance_threshold)}: request a top-up")

    result = reconcile(244300, book.current_balance, tolerance=100, notes="Counted with supervisor")
    print(f"\n  Counted {ugx(result.physical_count)} against {ugx(result.system_balance)}")
    print(f"  Difference {ugx(result.difference)} -> {result.status.value}")


def main():
    configure_logging("WARNING")

    everything = load_transactions(RECORDS)
    approved = [t for t in everything if t.status == "approved"]
    book = Cashbook(approved, CURRENT_BALANCE, NOW, name="kampala_office")

    print("=" * 70)
    print(f"    {book!r}")
    print("=" * 70)
    print("  Categories: " + ", ".join(c.label for c in categories_in(everything)))

    show_balances_at(book)
    export = show_june_statement(book)
    show_month_end(book, everything)

    print("\n" + "=" * 70)
    print("CSV EXPORT")
    print("=" * 70)
    print(export)

    return book.verify()['valid']


if __name__ == "__main__":
    success = main()
    exit(0 if success else 1)
