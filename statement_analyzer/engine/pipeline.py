"""End-to-end analysis of an extracted statement."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from statement_analyzer.config import AnalyzerConfig
from statement_analyzer.engine.aggregator import TransactionAggregator
from statement_analyzer.engine.dashboard import DashboardData, build_dashboard
from statement_analyzer.engine.models import (
    AnalysisResult,
    BalanceVerification,
    ClientMonthlyTrend,
    ClientSummary,
    ExpectedPayment,
    PaymentStatus,
    Totals,
)
from statement_analyzer.engine.query import apply_sort, calculate_totals, filter_by_client
from statement_analyzer.engine.reconciler import PaymentReconciler
from statement_analyzer.engine.verifier import BalanceVerifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisReport:
    """Everything derived from one analysis result."""
    analysis: AnalysisResult
    summaries: List[ClientSummary]
    trends: List[ClientMonthlyTrend]
    verification: Optional[BalanceVerification]
    filtered_summaries: List[ClientSummary]
    filtered_totals: Totals
    sorted_trends: List[ClientMonthlyTrend]
    dashboard: DashboardData
    # None when reconciliation was skipped.
    payment_statuses: Optional[List[PaymentStatus]] = None
    search_query: str = ""
    warnings: List[str] = field(default_factory=list)

    @property
    def has_transactions(self) -> bool:
        return bool(self.analysis.transactions)


class StatementAnalyzer:
    """
    Run aggregation, verification, reconciliation and the query layer.

    Verification always uses the unfiltered grand totals; the search query
    only affects the filtered views.
    """

    def __init__(self, config: Optional[AnalyzerConfig] = None):
        self.config = config or AnalyzerConfig()
        self.aggregator = TransactionAggregator()
        self.verifier = BalanceVerifier()
        self.reconciler = PaymentReconciler()

    def run(
        self,
        analysis: AnalysisResult,
        expected_payments: Optional[List[ExpectedPayment]] = None,
    ) -> AnalysisReport:
        """
        Analyse a statement.

        Args:
            analysis: Parsed extraction result.
            expected_payments: Optional expected-payments list. Reconciliation
                is skipped when it is None or when there are no client summaries.

        Returns:
            AnalysisReport with all derived records.
        """
        warnings: List[str] = []

        summaries, trends = self.aggregator.aggregate(analysis.transactions)
        if not summaries:
            warnings.append("No client transactions were identified in the statement.")

        verification = self.verifier.verify_result(analysis, summaries)
        if verification is not None and not verification.is_match:
            logger.warning(
                "Balance mismatch: calculated closing %s vs stated %s (difference %s)",
                verification.calculated_closing,
                verification.closing_balance,
                verification.difference,
            )

        payment_statuses: Optional[List[PaymentStatus]] = None
        if expected_payments is not None and summaries:
            payment_statuses = self.reconciler.reconcile(summaries, expected_payments)
        elif expected_payments is not None:
            logger.info("Skipping payment reconciliation: no client summaries")
            warnings.append("Payment reconciliation skipped: no client transactions.")

        query = self.config.search_query
        filtered_summaries = filter_by_client(summaries, query)
        filtered_trends = filter_by_client(trends, query)

        return AnalysisReport(
            analysis=analysis,
            summaries=summaries,
            trends=trends,
            verification=verification,
            filtered_summaries=filtered_summaries,
            filtered_totals=calculate_totals(filtered_summaries),
            sorted_trends=apply_sort(filtered_trends, self.config.trend_sort),
            dashboard=build_dashboard(
                analysis.transactions, summaries, top_n=self.config.top_movers
            ),
            payment_statuses=payment_statuses,
            search_query=query,
            warnings=warnings,
        )
