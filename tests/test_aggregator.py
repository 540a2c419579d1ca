"""Tests for the transaction aggregator."""

from decimal import Decimal

import pytest

from statement_analyzer.engine.aggregator import TransactionAggregator
from statement_analyzer.engine.models import Transaction, TransactionType


def make_txn(
    client: str,
    amount: str,
    type: str = "credit",
    date: str = "2024-07-01",
) -> Transaction:
    """Helper to create test transactions."""
    return Transaction(
        client_name=client,
        amount=Decimal(amount),
        type=TransactionType(type),
        date=date,
    )


@pytest.fixture
def ledger():
    return [
        make_txn("Acme", "500.00", "credit", "2024-07-02"),
        make_txn("Bank Fee", "12.50", "debit", "2024-07-05"),
        make_txn("Acme", "200.00", "debit", "2024-07-10"),
        make_txn("Zed Traders", "75.00", "credit", "2024-08-01"),
        make_txn("Acme", "300.00", "credit", "2024-08-15"),
        make_txn("bravo ltd", "40.00", "credit", "2024-08-20"),
    ]


class TestClientSummaries:
    """Test per-client summaries."""

    def test_empty_input(self):
        summaries, trends = TransactionAggregator().aggregate([])
        assert summaries == []
        assert trends == []

    def test_totals_and_counts(self, ledger):
        summaries, _ = TransactionAggregator().aggregate(ledger)
        acme = next(s for s in summaries if s.client_name == "Acme")

        assert acme.total_credit == Decimal("800.00")
        assert acme.credit_count == 2
        assert acme.total_debit == Decimal("200.00")
        assert acme.debit_count == 1
        assert acme.net_total == Decimal("600.00")

    def test_one_summary_per_client(self, ledger):
        summaries, _ = TransactionAggregator().aggregate(ledger)
        assert len(summaries) == 4

    def test_sorted_by_client_name_ignoring_case(self, ledger):
        summaries, _ = TransactionAggregator().aggregate(ledger)
        names = [s.client_name for s in summaries]
        assert names == ["Acme", "Bank Fee", "bravo ltd", "Zed Traders"]

    def test_accented_names_sort_with_base_letter(self):
        ledger = [make_txn("Zed Traders", "1"), make_txn("Émile Dupont", "1"), make_txn("Bravo", "1")]
        summaries, _ = TransactionAggregator().aggregate(ledger)
        assert [s.client_name for s in summaries] == ["Bravo", "Émile Dupont", "Zed Traders"]

    def test_zero_amount_still_counted(self):
        summaries, trends = TransactionAggregator().aggregate([make_txn("Acme", "0")])
        assert summaries[0].credit_count == 1
        assert summaries[0].total_credit == Decimal("0")
        assert len(trends) == 1

    def test_negative_amount_treated_as_magnitude(self):
        summaries, _ = TransactionAggregator().aggregate([make_txn("Acme", "-50.00", "debit")])
        assert summaries[0].total_debit == Decimal("50.00")
        assert summaries[0].net_total == Decimal("-50.00")

    def test_additivity_over_partition(self, ledger):
        aggregator = TransactionAggregator()
        full, _ = aggregator.aggregate(ledger)
        first, _ = aggregator.aggregate(ledger[:3])
        second, _ = aggregator.aggregate(ledger[3:])

        combined = {}
        for s in first + second:
            credit, credits, debit, debits = combined.get(
                s.client_name, (Decimal("0"), 0, Decimal("0"), 0)
            )
            combined[s.client_name] = (
                credit + s.total_credit,
                credits + s.credit_count,
                debit + s.total_debit,
                debits + s.debit_count,
            )

        for s in full:
            assert combined[s.client_name] == (
                s.total_credit, s.credit_count, s.total_debit, s.debit_count,
            )

    def test_order_independent(self, ledger):
        aggregator = TransactionAggregator()
        forward, _ = aggregator.aggregate(ledger)
        backward, _ = aggregator.aggregate(list(reversed(ledger)))
        assert forward == backward


class TestMonthlyTrends:
    """Test per-client monthly trends."""

    def test_grouped_by_client_and_month(self, ledger):
        _, trends = TransactionAggregator().aggregate(ledger)
        keys = {(t.client_name, t.month) for t in trends}

        assert keys == {
            ("Acme", "2024-07"),
            ("Acme", "2024-08"),
            ("Bank Fee", "2024-07"),
            ("Zed Traders", "2024-08"),
            ("bravo ltd", "2024-08"),
        }

    def test_net_change(self, ledger):
        _, trends = TransactionAggregator().aggregate(ledger)
        july = next(t for t in trends if t.client_name == "Acme" and t.month == "2024-07")

        assert july.total_credit == Decimal("500.00")
        assert july.total_debit == Decimal("200.00")
        assert july.net_change == Decimal("300.00")

    def test_invalid_date_excluded_from_trends_only(self):
        txn = make_txn("X", "10", "credit", "not-a-date")
        summaries, trends = TransactionAggregator().aggregate([txn])

        assert summaries[0].total_credit == Decimal("10")
        assert trends == []

    @pytest.mark.parametrize("date", ["2024-7-01", "01/07/2024", "2024-07-01T10:00", "", "2024-07"])
    def test_malformed_dates(self, date):
        _, trends = TransactionAggregator().aggregate([make_txn("X", "10", date=date)])
        assert trends == []
