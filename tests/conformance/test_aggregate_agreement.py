"""
Aggregate Agreement Conformance Tests

INVARIANT: For every filtered window W,

    closing(W) - opening(W) = inflows(W) - outflows(W)

and when W selects the whole history up to now,

    closing(W) = current_balance
"""

from datetime import datetime

from hypothesis import given, settings

from cashbook import ReportQuery, aggregate, build_report, filter_transactions

from .strategies import balances, history, report_query

NOW = datetime(2025, 6, 30)


class TestAggregateAgreement:
    """Totals and replay describe the same movement."""

    @given(history(), balances, report_query())
    @settings(max_examples=150)
    def test_net_equals_balance_movement(self, txns, current, query):
        """
        PROPERTY: closing - opening == inflows - outflows for any query.
        """
        report = build_report(txns, current, query, now=NOW)
        assert report.closing_balance - report.opening_balance == report.inflows - report.outflows
        assert report.net_movement == report.inflows - report.outflows

    @given(history(), balances, report_query())
    @settings(max_examples=100)
    def test_totals_cover_filtered_rows_only(self, txns, current, query):
        report = build_report(txns, current, query, now=NOW)
        selected = filter_transactions(txns, query)
        totals = aggregate(selected)
        assert (report.inflows, report.outflows) == (totals.inflows, totals.outflows)
        assert len(report.rows) == len(selected)

    @given(history(), balances)
    @settings(max_examples=100)
    def test_unfiltered_window_closes_at_current_balance(self, txns, current):
        """
        PROPERTY: A window covering all history ends at the current balance.
        """
        report = build_report(txns, current, ReportQuery(), now=NOW)
        assert report.closing_balance == current

    @given(history(), balances)
    @settings(max_examples=100)
    def test_open_ended_window_closes_at_current_balance(self, txns, current):
        """A window with only a start date extends to now."""
        query = ReportQuery(from_date=datetime(2025, 2, 1).date())
        report = build_report(txns, current, query, now=NOW)
        assert report.closing_balance == current

    @given(history(), balances, report_query())
    @settings(max_examples=100)
    def test_rows_chain_inside_window(self, txns, current, query):
        report = build_report(txns, current, query, now=NOW)
        expected = report.opening_balance
        for row in report.rows:
            assert row.opening_balance == expected
            expected = row.closing_balance
        assert expected == report.closing_balance
