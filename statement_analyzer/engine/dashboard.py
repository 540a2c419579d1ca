"""Headline figures for the statement dashboard."""

from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from statement_analyzer.engine.models import (
    ClientSummary,
    PaymentStatus,
    PaymentStatusType,
    Transaction,
)


@dataclass(frozen=True)
class DashboardData:
    """Statement-wide totals, top movers and the monthly net change series."""
    total_credit_amount: Decimal = Decimal("0")
    total_debit_amount: Decimal = Decimal("0")
    total_credit_count: int = 0
    total_debit_count: int = 0
    unique_clients: int = 0
    top_inflows: List[ClientSummary] = field(default_factory=list)
    top_outflows: List[ClientSummary] = field(default_factory=list)
    monthly_net_changes: List[Tuple[str, Decimal]] = field(default_factory=list)


@dataclass(frozen=True)
class PaymentProgress:
    """How much of the expected money has come in."""
    total_received: Decimal
    total_expected: Decimal
    progress_percentage: float


def build_dashboard(
    transactions: List[Transaction],
    summaries: List[ClientSummary],
    top_n: int = 5,
) -> DashboardData:
    """
    Compute dashboard figures.

    Top inflows are the clients with the highest positive net total, top
    outflows those with the lowest negative net total. The monthly series
    covers all clients and skips transactions without a valid date.
    """
    total_credit = Decimal("0")
    total_debit = Decimal("0")
    credit_count = 0
    debit_count = 0
    monthly: Dict[str, Decimal] = defaultdict(Decimal)

    for txn in transactions:
        if txn.is_credit:
            total_credit += txn.abs_amount
            credit_count += 1
        else:
            total_debit += txn.abs_amount
            debit_count += 1

        month = txn.month
        if month is not None:
            monthly[month] += txn.abs_amount if txn.is_credit else -txn.abs_amount

    by_net_desc = sorted(summaries, key=lambda s: s.net_total, reverse=True)
    by_net_asc = sorted(summaries, key=lambda s: s.net_total)

    return DashboardData(
        total_credit_amount=total_credit,
        total_debit_amount=total_debit,
        total_credit_count=credit_count,
        total_debit_count=debit_count,
        unique_clients=len(summaries),
        top_inflows=[s for s in by_net_desc[:top_n] if s.net_total > 0],
        top_outflows=[s for s in by_net_asc[:top_n] if s.net_total < 0],
        monthly_net_changes=sorted(monthly.items()),
    )


def count_statuses(statuses: Optional[List[PaymentStatus]]) -> Dict[str, int]:
    """Count payment statuses by label, plus a ``total`` entry."""
    counts = {status.value: 0 for status in PaymentStatusType}
    counts["total"] = 0
    for status in statuses or []:
        counts[status.status.value] += 1
        counts["total"] += 1
    return counts


def payment_progress(statuses: Optional[List[PaymentStatus]]) -> Optional[PaymentProgress]:
    """Overall received vs expected; None when there is nothing to report."""
    if not statuses:
        return None

    total_received = sum((s.paid_amount for s in statuses), Decimal("0"))
    total_expected = sum((s.expected_amount for s in statuses), Decimal("0"))
    if total_expected > 0:
        percentage = float(total_received / total_expected * 100)
    else:
        percentage = 0.0

    return PaymentProgress(
        total_received=total_received,
        total_expected=total_expected,
        progress_percentage=percentage,
    )


def filter_by_status(
    statuses: List[PaymentStatus],
    status: Optional[PaymentStatusType] = None,
) -> List[PaymentStatus]:
    """Keep statuses with the given outcome; None keeps all of them."""
    if status is None:
        return list(statuses)
    return [s for s in statuses if s.status == status]
