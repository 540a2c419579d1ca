"""Balance verification against the statement's stated closing balance."""

import logging
from decimal import Decimal
from typing import List, Optional

from statement_analyzer.engine.models import (
    AMOUNT_TOLERANCE,
    AnalysisResult,
    BalanceVerification,
    ClientSummary,
)

logger = logging.getLogger(__name__)


class BalanceVerifier:
    """Check that opening + credits - debits lands on the closing balance."""

    def verify(
        self,
        opening: Decimal,
        closing: Decimal,
        summaries: List[ClientSummary],
    ) -> BalanceVerification:
        """
        Verify a statement's balances.

        Args:
            opening: Opening balance as stated on the statement.
            closing: Closing balance as stated on the statement.
            summaries: All client summaries. Never pass a search-filtered subset.

        Returns:
            BalanceVerification with the computed closing balance and verdict.
        """
        total_credit = sum((s.total_credit for s in summaries), Decimal("0"))
        total_debit = sum((s.total_debit for s in summaries), Decimal("0"))

        calculated_closing = opening + total_credit - total_debit
        difference = calculated_closing - closing
        is_match = abs(difference) < AMOUNT_TOLERANCE

        logger.debug(
            "Balance verification complete. Match: %s, Difference: %s", is_match, difference
        )
        return BalanceVerification(
            calculated_closing=calculated_closing,
            closing_balance=closing,
            difference=difference,
            is_match=is_match,
        )

    def verify_result(
        self,
        analysis: Optional[AnalysisResult],
        summaries: List[ClientSummary],
    ) -> Optional[BalanceVerification]:
        """Verify an analysis result; returns None when nothing has been analysed."""
        if analysis is None:
            return None
        return self.verify(analysis.opening_balance, analysis.closing_balance, summaries)
