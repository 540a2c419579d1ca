"""Tests for the Excel report generator."""

from decimal import Decimal

import pytest
from openpyxl import load_workbook

from statement_analyzer.config import AnalyzerConfig
from statement_analyzer.engine.models import (
    AnalysisResult,
    ExpectedPayment,
    Transaction,
    TransactionType,
)
from statement_analyzer.engine.pipeline import StatementAnalyzer
from statement_analyzer.reports.excel_report import ExcelReportGenerator


def make_txn(client: str, amount: str, type: str, date: str) -> Transaction:
    """Helper to create test transactions."""
    return Transaction(client, Decimal(amount), TransactionType(type), date)


@pytest.fixture
def analysis():
    return AnalysisResult(
        statement_period="July 2024",
        opening_balance=Decimal("1000.00"),
        closing_balance=Decimal("1300.00"),
        transactions=[
            make_txn("Acme Ltd", "500.00", "credit", "2024-07-02"),
            make_txn("Acme Ltd", "100.00", "debit", "2024-07-09"),
            make_txn("Bank Fee", "100.00", "debit", "2024-07-31"),
        ],
    )


@pytest.fixture
def report(analysis):
    payments = [
        ExpectedPayment("Acme Ltd", Decimal("500.00"), {"dueDate": "2024-07-31"}),
        ExpectedPayment("Ghost", Decimal("80.00"), {"dueDate": "2024-07-15"}),
    ]
    return StatementAnalyzer().run(analysis, payments)


class TestExcelReportGenerator:
    """Test Excel report generation functionality."""

    def test_generate_creates_file(self, tmp_path, report):
        output = tmp_path / "report.xlsx"
        result_path = ExcelReportGenerator().generate(report, output)

        assert result_path.exists()
        assert result_path.suffix == ".xlsx"

    def test_tabs(self, tmp_path, report):
        output = tmp_path / "report.xlsx"
        ExcelReportGenerator().generate(report, output)

        wb = load_workbook(output)
        assert wb.sheetnames == [
            "Overview", "Client Summary", "Monthly Trends", "Top Movers", "Payment Status",
        ]

    def test_no_payment_tab_when_skipped(self, tmp_path, analysis):
        output = tmp_path / "report.xlsx"
        ExcelReportGenerator().generate(StatementAnalyzer().run(analysis), output)

        wb = load_workbook(output)
        assert "Payment Status" not in wb.sheetnames

    def test_overview(self, tmp_path, report):
        output = tmp_path / "report.xlsx"
        ExcelReportGenerator().generate(report, output, AnalyzerConfig(currency="USD"))

        ws = load_workbook(output)["Overview"]
        labels = {ws[f"A{row}"].value: ws[f"B{row}"].value for row in range(5, 40)}

        assert ws["A1"].value == "Bank Statement Analysis"
        assert labels["Statement Period"] == "July 2024"
        assert labels["Calculated Closing (USD)"] == 1300.0
        assert labels["Verification"] == "Balances Match"
        assert labels["Unique Clients"] == 2
        assert labels["Paid"] == 1
        assert labels["Not Paid"] == 1

    def test_mismatch_shown(self, tmp_path, analysis):
        mismatched = AnalysisResult("July 2024", Decimal("0"), Decimal("1"), analysis.transactions)
        output = tmp_path / "report.xlsx"
        ExcelReportGenerator().generate(StatementAnalyzer().run(mismatched), output)

        ws = load_workbook(output)["Overview"]
        values = [ws[f"B{row}"].value for row in range(5, 20)]
        assert "Mismatch Found" in values

    def test_client_summary_with_totals(self, tmp_path, report):
        output = tmp_path / "report.xlsx"
        ExcelReportGenerator().generate(report, output)

        ws = load_workbook(output)["Client Summary"]
        assert ws["A1"].value == "Client Name"
        assert ws["A2"].value == "Acme Ltd"
        assert ws["B2"].value == 500.0
        assert ws["F2"].value == 400.0
        assert ws["B2"].number_format == '#,##0.00'
        assert ws["A4"].value == "Total"
        assert ws["F4"].value == 300.0

    def test_filtered_totals_row(self, tmp_path, analysis):
        config = AnalyzerConfig(search_query="fee")
        output = tmp_path / "report.xlsx"
        ExcelReportGenerator().generate(StatementAnalyzer(config).run(analysis), output, config)

        ws = load_workbook(output)["Client Summary"]
        assert ws["A2"].value == "Bank Fee"
        assert ws["A3"].value == "Total (filtered)"
        assert ws["D3"].value == 100.0

    def test_trends_sorted(self, tmp_path, report):
        output = tmp_path / "report.xlsx"
        ExcelReportGenerator().generate(report, output)

        ws = load_workbook(output)["Monthly Trends"]
        assert ws["B1"].value == "Month"
        assert ws.freeze_panes == "A2"
        assert [ws["A2"].value, ws["A3"].value] == ["Acme Ltd", "Bank Fee"]

    def test_payment_status_passthrough_columns(self, tmp_path, report):
        output = tmp_path / "report.xlsx"
        ExcelReportGenerator().generate(report, output)

        ws = load_workbook(output)["Payment Status"]
        headers = [cell.value for cell in ws[1]]
        assert headers == [
            "Client Name", "Due Date", "Expected Amount", "Paid Amount", "Status", "Difference",
        ]
        assert ws["B2"].value == "2024-07-31"
        assert ws["E2"].value == "Paid"
        assert ws["E3"].value == "Not Paid"
        assert ws["F3"].value == -80.0

    def test_empty_analysis(self, tmp_path):
        empty = AnalysisResult("", Decimal("0"), Decimal("0"))
        output = tmp_path / "empty.xlsx"
        ExcelReportGenerator().generate(StatementAnalyzer().run(empty), output)

        wb = load_workbook(output)
        assert wb["Client Summary"]["A2"].value == "Total"

    def test_output_directory_created(self, tmp_path, report):
        output = tmp_path / "subdir" / "nested" / "report.xlsx"
        assert ExcelReportGenerator().generate(report, output).exists()
