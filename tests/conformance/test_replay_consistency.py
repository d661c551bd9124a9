"""
Replay Consistency Conformance Tests

INVARIANT: Running balances chain without gaps.

    ∀ i: rows[i].closing = rows[i].opening + effect(rows[i])
    ∀ i: rows[i+1].opening = rows[i].closing

This ensures:
- No balance jump is unexplained by a transaction
- Replay order is ascending by time regardless of input order
- Every input transaction yields exactly one row
"""

from datetime import datetime

from hypothesis import given, settings
from hypothesis import strategies as st

from cashbook import Cashbook, Transaction, replay

from .strategies import balances, history


class TestReplayChain:
    """Property-based tests for running balance continuity."""

    @given(history(), balances)
    @settings(max_examples=100)
    def test_adjacent_rows_chain(self, txns, opening):
        """
        PROPERTY: Each row opens where the previous row closed.
        """
        rows = replay(txns, opening)
        for prev, row in zip(rows, rows[1:]):
            assert row.opening_balance == prev.closing_balance

    @given(history(), balances)
    @settings(max_examples=100)
    def test_row_arithmetic(self, txns, opening):
        """
        PROPERTY: closing = opening + amount for credits, - amount for debits.
        """
        for row in replay(txns, opening):
            txn = row.transaction
            if txn.is_credit:
                assert row.closing_balance == row.opening_balance + txn.amount
            else:
                assert row.closing_balance == row.opening_balance - txn.amount

    @given(history(), balances)
    @settings(max_examples=100)
    def test_first_row_opens_at_opening_balance(self, txns, opening):
        rows = replay(txns, opening)
        if rows:
            assert rows[0].opening_balance == opening
            assert rows[-1].closing_balance == opening + sum(t.effect for t in txns)

    @given(history(), balances)
    @settings(max_examples=100)
    def test_one_row_per_input(self, txns, opening):
        """
        PROPERTY: Replay neither drops nor deduplicates transactions.
        """
        rows = replay(txns, opening)
        assert len(rows) == len(txns)
        assert sorted(id(r.transaction) for r in rows) == sorted(id(t) for t in txns)

    @given(history(), balances)
    @settings(max_examples=100)
    def test_rows_ascending(self, txns, opening):
        rows = replay(txns, opening)
        times = [r.created_at for r in rows]
        assert times == sorted(times)

    @given(history(min_size=1), balances, st.randoms(use_true_random=False))
    @settings(max_examples=50)
    def test_input_order_does_not_change_closing(self, txns, opening, rnd):
        """
        PROPERTY: Shuffling the input never changes the final balance.
        """
        shuffled = list(txns)
        rnd.shuffle(shuffled)
        assert replay(txns, opening)[-1].closing_balance == replay(shuffled, opening)[-1].closing_balance

    @given(history(), balances)
    @settings(max_examples=50)
    def test_cashbook_verify_accepts_every_replay(self, txns, current):
        """
        PROPERTY: A full-history replay always passes the built-in self-check.
        """
        book = Cashbook(txns, current, datetime(2025, 6, 30))
        result = book.verify()
        assert result['valid'], result['discrepancies']


class TestStableOrdering:
    """Ties on created_at keep their input order."""

    def test_ties_preserve_input_order(self):
        t = datetime(2025, 2, 1, 12, 0)
        txns = [
            Transaction("B", t, "debit", 300),
            Transaction("A", t, "credit", 100),
            Transaction("C", t, "debit", 50),
        ]
        rows = replay(txns, 1000)
        assert [r.id for r in rows] == ["B", "A", "C"]
        assert [(r.opening_balance, r.closing_balance) for r in rows] == [
            (1000, 700), (700, 800), (800, 750),
        ]

    def test_duplicates_replayed_as_distinct_movements(self):
        t = datetime(2025, 2, 1, 12, 0)
        dup = Transaction("DUP", t, "debit", 100)
        rows = replay([dup, dup], 500)
        assert len(rows) == 2
        assert rows[1].closing_balance == 300
