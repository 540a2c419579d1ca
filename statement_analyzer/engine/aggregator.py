"""Fold a transaction ledger into client summaries and monthly trends."""

import logging
import unicodedata
from collections import defaultdict
from decimal import Decimal
from typing import Dict, List, Tuple

from statement_analyzer.engine.models import (
    ClientMonthlyTrend,
    ClientSummary,
    Transaction,
)

logger = logging.getLogger(__name__)


def client_sort_key(name: str) -> Tuple[str, str]:
    """
    Collation key for client names.

    Accents and case are ignored first (so "Émile" sorts with "E"), the exact
    name breaks ties.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), name


class _Bucket:
    """Running credit/debit totals for one grouping key."""

    __slots__ = ("total_credit", "credit_count", "total_debit", "debit_count")

    def __init__(self) -> None:
        self.total_credit = Decimal("0")
        self.credit_count = 0
        self.total_debit = Decimal("0")
        self.debit_count = 0

    def add(self, txn: Transaction) -> None:
        if txn.is_credit:
            self.total_credit += txn.abs_amount
            self.credit_count += 1
        else:
            self.total_debit += txn.abs_amount
            self.debit_count += 1


class TransactionAggregator:
    """
    Aggregate transactions per client and per client-month.

    Every transaction counts towards its client's summary. Only transactions
    with a well-formed ``YYYY-MM-DD`` date contribute to the monthly trends.
    """

    def aggregate(
        self, transactions: List[Transaction]
    ) -> Tuple[List[ClientSummary], List[ClientMonthlyTrend]]:
        """
        Aggregate a transaction list.

        Args:
            transactions: Normalized transactions, in any order.

        Returns:
            Tuple of (summaries sorted by client name, trends in first-seen order).
        """
        by_client: Dict[str, _Bucket] = defaultdict(_Bucket)
        by_month: Dict[Tuple[str, str], _Bucket] = defaultdict(_Bucket)
        undated = 0

        for txn in transactions:
            by_client[txn.client_name].add(txn)

            month = txn.month
            if month is None:
                undated += 1
                continue
            by_month[(txn.client_name, month)].add(txn)

        if undated:
            logger.debug("%d transaction(s) without a valid date left out of trends", undated)

        summaries = [
            ClientSummary(
                client_name=name,
                total_credit=bucket.total_credit,
                credit_count=bucket.credit_count,
                total_debit=bucket.total_debit,
                debit_count=bucket.debit_count,
            )
            for name, bucket in by_client.items()
        ]
        summaries.sort(key=lambda s: client_sort_key(s.client_name))

        trends = [
            ClientMonthlyTrend(
                client_name=name,
                month=month,
                total_credit=bucket.total_credit,
                total_debit=bucket.total_debit,
            )
            for (name, month), bucket in by_month.items()
        ]

        logger.debug(
            "Aggregated %d transactions into %d client summaries and %d monthly trends",
            len(transactions), len(summaries), len(trends),
        )
        return summaries, trends
