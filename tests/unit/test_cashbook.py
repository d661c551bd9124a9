"""
test_cashbook.py - Unit tests for the Cashbook view

Tests:
- Construction and read-only access
- balance_at / as_of temporal queries
- Full-history replay and its verification
"""

import pytest
from datetime import date, datetime

from cashbook import (
    BalancedTransaction, Cashbook, InvalidBalance, ReportQuery, Transaction,
)


class TestConstruction:

    def test_rejects_non_transactions(self, now):
        with pytest.raises(TypeError, match="Expected Transaction"):
            Cashbook([{"id": "T1"}], 0, now)

    def test_rejects_float_balance(self, now):
        with pytest.raises(InvalidBalance):
            Cashbook([], 10.5, now)

    def test_now_accepts_iso_string(self):
        book = Cashbook([], 0, "2024-06-30T18:00:00Z")
        assert book.current_time == datetime(2024, 6, 30, 18, 0)

    def test_read_only_access(self, petty_cash_book, approved_balance):
        assert petty_cash_book.current_balance == approved_balance
        assert isinstance(petty_cash_book.transactions, tuple)
        assert len(petty_cash_book) == 6

    def test_repr(self, petty_cash_book):
        assert repr(petty_cash_book) == (
            "Cashbook(petty_cash: 6 transactions, balance=249300 at 2024-06-30T18:00:00)"
        )


class TestTemporalQueries:

    def test_balance_at(self, petty_cash_book):
        assert petty_cash_book.balance_at(datetime(2024, 6, 10)) == 201800
        assert petty_cash_book.balance_at(datetime(2024, 6, 9)) == 203000

    def test_balance_at_now_is_current(self, petty_cash_book, now, approved_balance):
        assert petty_cash_book.balance_at(now) == approved_balance

    def test_balance_at_future_rejected(self, petty_cash_book):
        with pytest.raises(ValueError, match="future"):
            petty_cash_book.balance_at(datetime(2024, 7, 1))

    def test_as_of(self, petty_cash_book):
        past = petty_cash_book.as_of(datetime(2024, 6, 10))
        assert past.current_balance == 201800
        assert past.current_time == datetime(2024, 6, 10)
        assert [t.id for t in past.sorted_transactions()] == ["TXN000-A", "TXN000-B", "TXN005", "TXN004"]
        assert past.verify()['valid']

    def test_as_of_does_not_change_original(self, petty_cash_book, approved_balance):
        petty_cash_book.as_of(datetime(2024, 6, 1))
        assert petty_cash_book.current_balance == approved_balance
        assert len(petty_cash_book) == 6

    def test_opening_balance(self, petty_cash_book):
        assert petty_cash_book.opening_balance() == 150000


class TestReplayAndTotals:

    def test_replay_ends_at_current_balance(self, petty_cash_book, approved_balance):
        rows = petty_cash_book.replay()
        assert rows[0].id == "TXN000-A"
        assert rows[0].opening_balance == 150000
        assert rows[-1].closing_balance == approved_balance

    def test_totals(self, petty_cash_book):
        totals = petty_cash_book.totals()
        assert totals.inflows == 130000
        assert totals.outflows == 30700

    def test_totals_with_query(self, petty_cash_book):
        totals = petty_cash_book.totals(ReportQuery(from_date=date(2024, 6, 1)))
        assert totals.inflows == 50000

    def test_report_uses_own_clock(self, petty_cash_book, approved_balance):
        report = petty_cash_book.report(ReportQuery(search_text="no such row"))
        assert report.opening_balance == approved_balance


class TestVerify:

    def test_consistent_history_is_valid(self, petty_cash_book):
        result = petty_cash_book.verify()
        assert result == {'valid': True, 'discrepancies': []}

    def test_row_arithmetic_detected(self, petty_cash_book):
        rows = petty_cash_book.replay()
        bad = rows[0]
        rows[0] = BalancedTransaction(bad.transaction, bad.opening_balance, bad.closing_balance + 1)
        checks = {d['check'] for d in petty_cash_book.verify(rows)['discrepancies']}
        assert checks == {'row_arithmetic', 'continuity'}

    def test_ordering_detected(self, now):
        t1 = Transaction("A", datetime(2024, 6, 2), "credit", 10)
        t2 = Transaction("B", datetime(2024, 6, 1), "credit", 10)
        rows = [BalancedTransaction(t1, 0, 10), BalancedTransaction(t2, 10, 20)]
        result = Cashbook([t1, t2], 20, now).verify(rows)
        assert not result['valid']
        assert [d['check'] for d in result['discrepancies']] == ['ordering']

    def test_current_balance_checked_only_for_full_history(self, petty_cash_book):
        rows = petty_cash_book.replay()[:2]
        assert petty_cash_book.verify(rows)['valid']


class TestBalanceStatuses:

    @pytest.fixture
    def mixed_book(self, petty_cash_transactions, approved_balance, now):
        return Cashbook(petty_cash_transactions, approved_balance, now, balance_statuses={"approved"})

    def test_backing_excludes_pending(self, mixed_book):
        assert len(mixed_book) == 7
        assert "TXN003" not in [t.id for t in mixed_book.backing_transactions]

    def test_balance_at_ignores_pending(self, mixed_book):
        # TXN003 (pending, 2024-06-10) would add 5000 back if it were reversed
        assert mixed_book.balance_at(datetime(2024, 6, 10)) == 201800

    def test_full_replay_closes_at_current_balance(self, mixed_book, approved_balance):
        assert mixed_book.opening_balance() == 150000
        assert mixed_book.replay()[-1].closing_balance == approved_balance
        assert mixed_book.verify()['valid']

    def test_report_closes_at_current_balance(self, mixed_book, approved_balance):
        report = mixed_book.report(ReportQuery(status="approved"))
        assert report.closing_balance == approved_balance

    def test_as_of_keeps_statuses(self, mixed_book):
        past = mixed_book.as_of(datetime(2024, 6, 11))
        assert [t.id for t in past.backing_transactions] == ["TXN000-A", "TXN000-B", "TXN004", "TXN005"]
        assert past.verify()['valid']
