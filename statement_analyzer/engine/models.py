"""Data models for the statement analysis engine."""

import re
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

# Two amounts closer than this are treated as equal.
AMOUNT_TOLERANCE = Decimal("0.01")

ISO_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


class TransactionType(Enum):
    """Transaction type classification."""
    CREDIT = "credit"
    DEBIT = "debit"


class PaymentStatusType(Enum):
    """Outcome of reconciling an expected payment."""
    PAID = "Paid"
    NOT_PAID = "Not Paid"
    PARTIAL = "Partial Payment"
    EXCEEDED = "Payment Exceeded"


@dataclass(frozen=True)
class Transaction:
    """A single monetary movement attributed to a client."""
    client_name: str
    amount: Decimal
    type: TransactionType
    date: str = ""

    @property
    def abs_amount(self) -> Decimal:
        """Return absolute value of transaction amount."""
        return abs(self.amount)

    @property
    def month(self) -> Optional[str]:
        """Return the YYYY-MM month, or None when the date is not YYYY-MM-DD."""
        if not ISO_DATE_PATTERN.fullmatch(self.date or ""):
            return None
        return self.date[:7]

    @property
    def is_credit(self) -> bool:
        return self.type == TransactionType.CREDIT

    def __repr__(self) -> str:
        return (
            f"Transaction(client={self.client_name[:30]!r}, date={self.date!r}, "
            f"amount={self.amount}, type={self.type.value})"
        )


@dataclass(frozen=True)
class ClientSummary:
    """Credit and debit totals for one client across the statement."""
    client_name: str
    total_credit: Decimal = Decimal("0")
    credit_count: int = 0
    total_debit: Decimal = Decimal("0")
    debit_count: int = 0

    @property
    def net_total(self) -> Decimal:
        return self.total_credit - self.total_debit


@dataclass(frozen=True)
class ClientMonthlyTrend:
    """Credit and debit totals for one client within one month."""
    client_name: str
    month: str
    total_credit: Decimal = Decimal("0")
    total_debit: Decimal = Decimal("0")

    @property
    def net_change(self) -> Decimal:
        return self.total_credit - self.total_debit


@dataclass(frozen=True)
class AnalysisResult:
    """Statement header and transaction ledger returned by the extraction step."""
    statement_period: str
    opening_balance: Decimal
    closing_balance: Decimal
    transactions: List[Transaction] = field(default_factory=list)


@dataclass(frozen=True)
class ExpectedPayment:
    """
    An amount a client is expected to have paid.

    Columns other than the client name and amount are kept in
    ``extra_fields`` in their original order.
    """
    client_name: str
    amount: Decimal
    extra_fields: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PaymentStatus:
    """Result of matching an expected payment against received credits."""
    client_name: str
    expected_amount: Decimal
    paid_amount: Decimal
    status: PaymentStatusType
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    @property
    def difference(self) -> Decimal:
        """Paid minus expected; negative when the client still owes money."""
        return self.paid_amount - self.expected_amount


@dataclass(frozen=True)
class BalanceVerification:
    """Comparison between the computed and the stated closing balance."""
    calculated_closing: Decimal
    closing_balance: Decimal
    difference: Decimal
    is_match: bool


@dataclass(frozen=True)
class Totals:
    """Grand totals over a set of client summaries."""
    total_credit: Decimal = Decimal("0")
    credit_count: int = 0
    total_debit: Decimal = Decimal("0")
    debit_count: int = 0
    net_total: Decimal = Decimal("0")
