"""Reconcile expected payments against credits received per client."""

import logging
from decimal import Decimal
from typing import Dict, List

from statement_analyzer.engine.models import (
    AMOUNT_TOLERANCE,
    ClientSummary,
    ExpectedPayment,
    PaymentStatus,
    PaymentStatusType,
)

logger = logging.getLogger(__name__)


def normalize_name(name: str) -> str:
    """Key used to match client names across sources."""
    return name.strip().lower()


def classify_payment(paid: Decimal, expected: Decimal) -> PaymentStatusType:
    """
    Classify a payment. Rules are checked in order, first match wins:

    1. nothing received -> Not Paid
    2. within tolerance of the expected amount -> Paid
    3. below the expected amount -> Partial Payment
    4. above the expected amount -> Payment Exceeded
    """
    if paid == 0:
        return PaymentStatusType.NOT_PAID

    difference = paid - expected
    if abs(difference) < AMOUNT_TOLERANCE:
        return PaymentStatusType.PAID
    if difference < 0:
        return PaymentStatusType.PARTIAL
    return PaymentStatusType.EXCEEDED


class PaymentReconciler:
    """
    Match an expected-payments list against aggregated client credits.

    Matching is by case-insensitive, whitespace-trimmed client name. Only
    credits count as payments received.
    """

    def reconcile(
        self,
        summaries: List[ClientSummary],
        expected: List[ExpectedPayment],
    ) -> List[PaymentStatus]:
        """
        Produce one PaymentStatus per expected payment, in input order.

        Args:
            summaries: Client summaries from the aggregator.
            expected: Expected payments; extra fields are copied through.

        Returns:
            List of PaymentStatus records, same length as ``expected``.
        """
        index = self._build_name_index(summaries)

        statuses: List[PaymentStatus] = []
        unmatched = 0
        for payment in expected:
            summary = index.get(normalize_name(payment.client_name))
            if summary is None:
                unmatched += 1
                paid = Decimal("0")
            else:
                paid = summary.total_credit

            statuses.append(PaymentStatus(
                client_name=payment.client_name,
                expected_amount=payment.amount,
                paid_amount=paid,
                status=classify_payment(paid, payment.amount),
                extra_fields=dict(payment.extra_fields),
            ))

        logger.debug(
            "Reconciled %d expected payments (%d without a matching client)",
            len(expected), unmatched,
        )
        return statuses

    def _build_name_index(
        self, summaries: List[ClientSummary]
    ) -> Dict[str, ClientSummary]:
        """Index summaries by normalized client name for O(1) lookup."""
        index: Dict[str, ClientSummary] = {}
        for summary in summaries:
            key = normalize_name(summary.client_name)
            if key in index:
                # Names that differ only by case or padding: the first one wins.
                logger.debug("Duplicate client key %r ignored for %r", key, summary.client_name)
                continue
            index[key] = summary
        return index
