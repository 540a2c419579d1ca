"""Filtering, sorting and re-totalling of aggregated records."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from operator import attrgetter
from typing import List, Optional, Sequence, TypeVar

from statement_analyzer.engine.models import ClientMonthlyTrend, ClientSummary, Totals

T = TypeVar("T")

TREND_SORT_KEYS = ("client_name", "month", "total_credit", "total_debit", "net_change")


class SortDirection(Enum):
    """Direction of a column sort."""
    ASCENDING = "ascending"
    DESCENDING = "descending"


@dataclass(frozen=True)
class SortState:
    """Current sort of the trends table. ``key`` is None while unsorted."""
    key: Optional[str] = None
    direction: Optional[SortDirection] = None

    @property
    def is_sorted(self) -> bool:
        return self.key is not None


UNSORTED = SortState()
DEFAULT_TREND_SORT = SortState("month", SortDirection.DESCENDING)


def request_sort(state: SortState, key: str) -> SortState:
    """
    Transition the sort state after a click on column ``key``.

    Clicking the column that is currently ascending flips it to descending;
    any other click sorts ``key`` ascending.
    """
    if key not in TREND_SORT_KEYS:
        raise ValueError(f"Unknown sort key: {key!r}. Use one of {', '.join(TREND_SORT_KEYS)}")
    if state.key == key and state.direction == SortDirection.ASCENDING:
        return SortState(key, SortDirection.DESCENDING)
    return SortState(key, SortDirection.ASCENDING)


def filter_by_client(items: Sequence[T], query: str) -> List[T]:
    """Keep items whose client name contains ``query``, ignoring case."""
    if not query:
        return list(items)
    needle = query.lower()
    return [item for item in items if needle in item.client_name.lower()]


def sort_trends(
    trends: Sequence[ClientMonthlyTrend],
    key: str,
    direction: SortDirection = SortDirection.ASCENDING,
) -> List[ClientMonthlyTrend]:
    """
    Stable sort of trends on a single field.

    Equal keys keep their input order in both directions.
    """
    if key not in TREND_SORT_KEYS:
        raise ValueError(f"Unknown sort key: {key!r}. Use one of {', '.join(TREND_SORT_KEYS)}")
    return sorted(
        trends,
        key=attrgetter(key),
        reverse=direction == SortDirection.DESCENDING,
    )


def apply_sort(trends: Sequence[ClientMonthlyTrend], state: SortState) -> List[ClientMonthlyTrend]:
    """Sort trends according to a SortState; unsorted leaves the order alone."""
    if not state.is_sorted:
        return list(trends)
    return sort_trends(trends, state.key, state.direction)


def calculate_totals(summaries: Sequence[ClientSummary]) -> Totals:
    """Sum client summaries. Call it on the filtered subset for filtered totals."""
    total_credit = Decimal("0")
    credit_count = 0
    total_debit = Decimal("0")
    debit_count = 0
    net_total = Decimal("0")

    for summary in summaries:
        total_credit += summary.total_credit
        credit_count += summary.credit_count
        total_debit += summary.total_debit
        debit_count += summary.debit_count
        net_total += summary.net_total

    return Totals(
        total_credit=total_credit,
        credit_count=credit_count,
        total_debit=total_debit,
        debit_count=debit_count,
        net_total=net_total,
    )
