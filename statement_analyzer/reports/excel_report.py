"""Excel report generator for statement analysis results."""

from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, List, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from statement_analyzer.config import AnalyzerConfig
from statement_analyzer.engine.dashboard import count_statuses, payment_progress
from statement_analyzer.engine.models import ClientSummary, PaymentStatus, PaymentStatusType
from statement_analyzer.engine.pipeline import AnalysisReport
from statement_analyzer.reports.csv_export import extra_columns, passthrough_headers


class ExcelReportGenerator:
    """Generate Excel reports from statement analysis results."""

    # Style constants
    HEADER_FILL = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
    HEADER_FONT = Font(name="Calibri", size=11, bold=True, color="FFFFFF")
    MATCHED_FILL = PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid")
    UNMATCHED_FILL = PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid")
    PARTIAL_FILL = PatternFill(start_color="FFEB9C", end_color="FFEB9C", fill_type="solid")
    EXCEEDED_FILL = PatternFill(start_color="BDD7EE", end_color="BDD7EE", fill_type="solid")
    TITLE_FONT = Font(name="Calibri", size=16, bold=True, color="1F4E79")
    SUBTITLE_FONT = Font(name="Calibri", size=12, bold=True, color="1F4E79")
    KPI_FONT = Font(name="Calibri", size=14, bold=True)
    THIN_BORDER = Border(
        left=Side(style="thin"),
        right=Side(style="thin"),
        top=Side(style="thin"),
        bottom=Side(style="thin"),
    )
    AMOUNT_FORMAT = '#,##0.00'

    STATUS_FILLS = {
        PaymentStatusType.PAID: MATCHED_FILL,
        PaymentStatusType.NOT_PAID: UNMATCHED_FILL,
        PaymentStatusType.PARTIAL: PARTIAL_FILL,
        PaymentStatusType.EXCEEDED: EXCEEDED_FILL,
    }

    def generate(
        self,
        report: AnalysisReport,
        output_path: str | Path,
        config: Optional[AnalyzerConfig] = None,
    ) -> Path:
        """
        Generate the Excel report.

        Tabs: Overview, Client Summary, Monthly Trends, Top Movers, and
        Payment Status when reconciliation ran.

        Args:
            report: Output of StatementAnalyzer.run.
            output_path: Path for the output Excel file.
            config: Run configuration (currency label).

        Returns:
            Path to the generated report.
        """
        config = config or AnalyzerConfig()
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        wb = Workbook()

        self._create_overview_tab(wb, report, config)
        self._create_summary_tab(wb, report)
        self._create_trends_tab(wb, report)
        self._create_top_movers_tab(wb, report)
        if report.payment_statuses is not None:
            self._create_payment_status_tab(wb, report.payment_statuses)

        wb.save(str(output_path))
        return output_path

    def _create_overview_tab(
        self, wb: Workbook, report: AnalysisReport, config: AnalyzerConfig
    ) -> None:
        """Create the Overview dashboard tab."""
        ws = wb.active
        ws.title = "Overview"
        ws.sheet_properties.tabColor = "1F4E79"

        # Title
        ws.merge_cells("A1:D1")
        ws["A1"] = "Bank Statement Analysis"
        ws["A1"].font = self.TITLE_FONT
        ws["A1"].alignment = Alignment(horizontal="center")

        ws.merge_cells("A2:D2")
        ws["A2"] = f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"
        ws["A2"].alignment = Alignment(horizontal="center")

        ws["A4"] = "Statement Overview"
        ws["A4"].font = self.SUBTITLE_FONT

        analysis = report.analysis
        verification = report.verification
        rows: List[tuple] = [
            ("Statement Period", analysis.statement_period or "N/A"),
            (f"Opening Balance ({config.currency})", analysis.opening_balance),
            (f"Closing Balance ({config.currency})", analysis.closing_balance),
        ]
        if verification is not None:
            rows += [
                (f"Calculated Closing ({config.currency})", verification.calculated_closing),
                (f"Difference ({config.currency})", verification.difference),
            ]
        row = self._write_pairs(ws, rows, start=5)

        ws[f"A{row}"] = "Verification"
        ws[f"A{row}"].font = Font(bold=True)
        if verification is not None and verification.is_match:
            ws[f"B{row}"] = "Balances Match"
            ws[f"B{row}"].fill = self.MATCHED_FILL
        else:
            ws[f"B{row}"] = "Mismatch Found"
            ws[f"B{row}"].fill = self.UNMATCHED_FILL
        ws[f"B{row}"].font = self.KPI_FONT
        row += 2

        ws[f"A{row}"] = "Key Figures"
        ws[f"A{row}"].font = self.SUBTITLE_FONT
        dashboard = report.dashboard
        kpis: List[tuple] = [
            ("Total Credits", dashboard.total_credit_amount),
            ("Credit Transactions", dashboard.total_credit_count),
            ("Total Debits", dashboard.total_debit_amount),
            ("Debit Transactions", dashboard.total_debit_count),
            ("Unique Clients", dashboard.unique_clients),
        ]
        row = self._write_pairs(ws, kpis, start=row + 1)

        if report.payment_statuses is not None:
            row += 1
            ws[f"A{row}"] = "Payment Status"
            ws[f"A{row}"].font = self.SUBTITLE_FONT
            counts = count_statuses(report.payment_statuses)
            status_rows: List[tuple] = [(label, counts[label]) for label in counts if label != "total"]
            progress = payment_progress(report.payment_statuses)
            if progress is not None:
                status_rows += [
                    ("Total Expected", progress.total_expected),
                    ("Total Received", progress.total_received),
                    ("Progress", f"{progress.progress_percentage:.1f}%"),
                ]
            self._write_pairs(ws, status_rows, start=row + 1)

        ws.column_dimensions["A"].width = 28
        ws.column_dimensions["B"].width = 22

    def _create_summary_tab(self, wb: Workbook, report: AnalysisReport) -> None:
        """Create the Client Summary tab with a totals row for the filtered rows."""
        ws = wb.create_sheet("Client Summary")
        ws.sheet_properties.tabColor = "00B050"

        headers = [
            "Client Name", "Total Credit", "Credit Count",
            "Total Debit", "Debit Count", "Net Total",
        ]
        self._write_headers(ws, headers)

        i = 1
        for i, summary in enumerate(report.filtered_summaries, start=2):
            self._write_row(ws, i, [
                summary.client_name,
                summary.total_credit,
                summary.credit_count,
                summary.total_debit,
                summary.debit_count,
                summary.net_total,
            ])

        totals = report.filtered_totals
        total_row = i + 1
        label = "Total (filtered)" if report.search_query else "Total"
        self._write_row(ws, total_row, [
            label,
            totals.total_credit,
            totals.credit_count,
            totals.total_debit,
            totals.debit_count,
            totals.net_total,
        ])
        for col in range(1, len(headers) + 1):
            ws.cell(row=total_row, column=col).font = Font(bold=True)
            ws.cell(row=total_row, column=col).border = self.THIN_BORDER

        self._auto_width(ws, headers)

    def _create_trends_tab(self, wb: Workbook, report: AnalysisReport) -> None:
        """Create the Monthly Trends tab in the configured sort order."""
        ws = wb.create_sheet("Monthly Trends")
        ws.sheet_properties.tabColor = "FFC000"

        headers = ["Client Name", "Month", "Total Credit", "Total Debit", "Net Change"]
        self._write_headers(ws, headers)

        for i, trend in enumerate(report.sorted_trends, start=2):
            self._write_row(ws, i, [
                trend.client_name,
                trend.month,
                trend.total_credit,
                trend.total_debit,
                trend.net_change,
            ])

        self._auto_width(ws, headers)

    def _create_top_movers_tab(self, wb: Workbook, report: AnalysisReport) -> None:
        """Create the Top Movers tab and the monthly net change series."""
        ws = wb.create_sheet("Top Movers")
        ws.sheet_properties.tabColor = "7030A0"

        headers = ["Direction", "Client Name", "Net Total"]
        self._write_headers(ws, headers)

        row = 2
        movers = [
            ("Inflow", report.dashboard.top_inflows, self.MATCHED_FILL),
            ("Outflow", report.dashboard.top_outflows, self.UNMATCHED_FILL),
        ]
        for direction, summaries, fill in movers:
            row = self._write_movers(ws, row, direction, summaries, fill)

        row += 1
        ws[f"A{row}"] = "Month"
        ws[f"B{row}"] = "Net Change"
        ws[f"A{row}"].font = Font(bold=True)
        ws[f"B{row}"].font = Font(bold=True)
        for month, net_change in report.dashboard.monthly_net_changes:
            row += 1
            ws[f"A{row}"] = month
            ws[f"B{row}"] = float(net_change)
            ws[f"B{row}"].number_format = self.AMOUNT_FORMAT

        self._auto_width(ws, headers)

    def _write_movers(
        self, ws, row: int, direction: str, summaries: List[ClientSummary], fill: PatternFill
    ) -> int:
        for summary in summaries:
            self._write_row(ws, row, [direction, summary.client_name, summary.net_total])
            for col in range(1, 4):
                ws.cell(row=row, column=col).fill = fill
            row += 1
        return row

    def _create_payment_status_tab(self, wb: Workbook, statuses: List[PaymentStatus]) -> None:
        """Create the Payment Status tab, including passthrough columns."""
        ws = wb.create_sheet("Payment Status")
        ws.sheet_properties.tabColor = "FF0000"

        extras = extra_columns(statuses)
        headers = (
            ["Client Name"]
            + passthrough_headers(extras)
            + ["Expected Amount", "Paid Amount", "Status", "Difference"]
        )
        self._write_headers(ws, headers)

        for i, status in enumerate(statuses, start=2):
            values: List[Any] = [status.client_name]
            values += [status.extra_fields.get(col) for col in extras]
            values += [
                status.expected_amount,
                status.paid_amount,
                status.status.value,
                status.difference,
            ]
            self._write_row(ws, i, values)

            fill = self.STATUS_FILLS[status.status]
            for col in range(1, len(headers) + 1):
                ws.cell(row=i, column=col).fill = fill

        self._auto_width(ws, headers)

    def _write_pairs(self, ws, pairs: List[tuple], start: int) -> int:
        """Write label/value pairs in columns A and B; returns the next free row."""
        row = start
        for label, value in pairs:
            ws[f"A{row}"] = label
            ws[f"A{row}"].font = Font(bold=True)
            self._set_value(ws.cell(row=row, column=2), value)
            row += 1
        return row

    def _write_row(self, ws, row: int, values: List[Any]) -> None:
        for col_idx, value in enumerate(values, start=1):
            self._set_value(ws.cell(row=row, column=col_idx), value)

    def _set_value(self, cell, value: Any) -> None:
        """Write a cell; Decimal amounts become formatted floats."""
        if isinstance(value, Decimal):
            cell.value = float(value)
            cell.number_format = self.AMOUNT_FORMAT
        elif isinstance(value, (str, int, float)) or value is None:
            cell.value = value
        else:
            cell.value = str(value)

    def _write_headers(self, ws, headers: List[str]) -> None:
        """Write styled header row."""
        for col_idx, header in enumerate(headers, start=1):
            cell = ws.cell(row=1, column=col_idx, value=header)
            cell.font = self.HEADER_FONT
            cell.fill = self.HEADER_FILL
            cell.alignment = Alignment(horizontal="center")
            cell.border = self.THIN_BORDER

        # Freeze top row
        ws.freeze_panes = "A2"

        # Auto-filter
        ws.auto_filter.ref = f"A1:{get_column_letter(len(headers))}1"

    def _auto_width(self, ws, headers: List[str]) -> None:
        """Auto-adjust column widths."""
        for col_idx, header in enumerate(headers, start=1):
            col_letter = get_column_letter(col_idx)
            max_len = len(header) + 4
            ws.column_dimensions[col_letter].width = min(max(max_len, 14), 35)
