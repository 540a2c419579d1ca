"""CSV export of summaries, trends and payment statuses."""

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from statement_analyzer.engine.models import ClientMonthlyTrend, ClientSummary, PaymentStatus

logger = logging.getLogger(__name__)

SUMMARY_VARIANTS = ("full", "credits", "debits")


def format_header(header: str) -> str:
    """Humanise a field name: ``dueDate`` -> ``Due Date``, ``invoice_no`` -> ``Invoice no``."""
    if not header:
        return ""
    spaced = re.sub(r"(?<=[a-z0-9])([A-Z])", r" \1", str(header)).replace("_", " ")
    return spaced[:1].upper() + spaced[1:]


def summary_rows(summaries: List[ClientSummary], variant: str = "full") -> List[Dict[str, Any]]:
    """Tabular rows for client summaries in one of the export variants."""
    if variant not in SUMMARY_VARIANTS:
        raise ValueError(f"Unknown summary export: {variant!r}. Use one of {', '.join(SUMMARY_VARIANTS)}")

    rows = []
    for s in summaries:
        row: Dict[str, Any] = {"Client Name": s.client_name}
        if variant in ("full", "credits"):
            row["Total Credit"] = float(s.total_credit)
            row["Credit Count"] = s.credit_count
        if variant in ("full", "debits"):
            row["Total Debit"] = float(s.total_debit)
            row["Debit Count"] = s.debit_count
        if variant == "full":
            row["Net Total"] = float(s.net_total)
        rows.append(row)
    return rows


def trend_rows(trends: List[ClientMonthlyTrend]) -> List[Dict[str, Any]]:
    return [
        {
            "Client Name": t.client_name,
            "Month": t.month,
            "Total Credit": float(t.total_credit),
            "Total Debit": float(t.total_debit),
            "Net Change": float(t.net_change),
        }
        for t in trends
    ]


PAYMENT_STATUS_COLUMNS = ("Client Name", "Expected Amount", "Paid Amount", "Status", "Difference")


def extra_columns(statuses: List[PaymentStatus]) -> List[str]:
    """Passthrough column names, in first-seen order across all statuses."""
    seen: Dict[str, None] = {}
    for s in statuses:
        for key in s.extra_fields:
            seen.setdefault(key, None)
    return list(seen)


def passthrough_headers(extras: List[str]) -> List[str]:
    """
    Display headers for passthrough columns.

    A header that clashes with a computed column or an earlier passthrough
    header gets an ``(input)`` suffix, then a number, so no value is hidden.
    """
    used = set(PAYMENT_STATUS_COLUMNS)
    headers = []
    for col in extras:
        header = format_header(col) or str(col)
        if header in used:
            header = f"{header} (input)"
        candidate, n = header, 2
        while candidate in used:
            candidate = f"{header} {n}"
            n += 1
        used.add(candidate)
        headers.append(candidate)
    return headers


def payment_status_rows(statuses: List[PaymentStatus]) -> List[Dict[str, Any]]:
    """Rows for payment statuses with passthrough columns after the client name."""
    extras = extra_columns(statuses)
    headers = passthrough_headers(extras)
    rows = []
    for s in statuses:
        row: Dict[str, Any] = {"Client Name": s.client_name}
        for col, header in zip(extras, headers):
            row[header] = s.extra_fields.get(col)
        row["Expected Amount"] = float(s.expected_amount)
        row["Paid Amount"] = float(s.paid_amount)
        row["Status"] = s.status.value
        row["Difference"] = float(s.difference)
        rows.append(row)
    return rows


class CSVExporter:
    """Write report tables to CSV files in a directory."""

    def __init__(self, output_dir: str | Path):
        self.output_dir = Path(output_dir)

    def export_summaries(
        self, summaries: List[ClientSummary], variant: str = "full"
    ) -> Optional[Path]:
        return self._write(summary_rows(summaries, variant), f"client_summary_{variant}.csv")

    def export_trends(self, trends: List[ClientMonthlyTrend]) -> Optional[Path]:
        return self._write(trend_rows(trends), "monthly_trends.csv")

    def export_payment_statuses(
        self, statuses: List[PaymentStatus], label: str = "All"
    ) -> Optional[Path]:
        filename = f"payment_status_{label.lower().replace(' ', '_')}_summary.csv"
        return self._write(payment_status_rows(statuses), filename)

    def _write(self, rows: List[Dict[str, Any]], filename: str) -> Optional[Path]:
        """Write rows to ``filename``; nothing is written for an empty table."""
        if not rows:
            logger.info("Nothing to export for %s", filename)
            return None

        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / filename
        pd.DataFrame(rows).to_csv(path, index=False)
        logger.info("Exported %d rows to %s", len(rows), path)
        return path
