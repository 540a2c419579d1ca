"""Run configuration passed explicitly through the analyzer."""

from dataclasses import dataclass, field
from typing import Optional

from statement_analyzer.engine.query import (
    DEFAULT_TREND_SORT,
    TREND_SORT_KEYS,
    SortDirection,
    SortState,
)


@dataclass(frozen=True)
class AnalyzerConfig:
    """
    Settings for one analysis run.

    Attributes:
        currency: Currency code shown in reports.
        search_query: Client-name filter applied to summaries, trends and totals.
        trend_sort: Sort applied to the monthly trends table.
        top_movers: Number of clients listed as top inflows/outflows.
    """
    currency: str = "MUR"
    search_query: str = ""
    trend_sort: SortState = field(default=DEFAULT_TREND_SORT)
    top_movers: int = 5

    @classmethod
    def from_options(
        cls,
        currency: str = "MUR",
        search: str = "",
        sort_key: Optional[str] = None,
        sort_direction: Optional[str] = None,
        top_movers: int = 5,
    ) -> "AnalyzerConfig":
        """
        Build a config from command-line style values.

        Raises:
            ValueError: If the sort key or direction is not recognised.
        """
        if sort_key is None:
            trend_sort = DEFAULT_TREND_SORT
        else:
            if sort_key not in TREND_SORT_KEYS:
                raise ValueError(
                    f"Unknown sort key: {sort_key!r}. Use one of {', '.join(TREND_SORT_KEYS)}"
                )
            direction = SortDirection(sort_direction or SortDirection.ASCENDING.value)
            trend_sort = SortState(sort_key, direction)

        return cls(
            currency=currency.strip().upper() or "MUR",
            search_query=search,
            trend_sort=trend_sort,
            top_movers=top_movers,
        )
