"""Tests for the command line interface."""

import json
from pathlib import Path

import pandas as pd
import pytest
from click.testing import CliRunner
from openpyxl import load_workbook

from statement_analyzer.main import main


@pytest.fixture
def analysis_json(tmp_path) -> Path:
    data = {
        "statementPeriod": "July 2024",
        "openingBalance": 1000,
        "closingBalance": 1300,
        "transactions": [
            {"clientName": "Acme Ltd", "date": "2024-07-02", "amount": 500, "type": "credit"},
            {"clientName": "Bank Fee", "date": "2024-07-31", "amount": 200, "type": "debit"},
        ],
    }
    path = tmp_path / "analysis.json"
    path.write_text(json.dumps(data))
    return path


@pytest.fixture
def payments_csv(tmp_path) -> Path:
    path = tmp_path / "expected.csv"
    path.write_text("Client Name,Amount,Due Date\nacme ltd,500,2024-07-31\nGhost,90,2024-07-31\n")
    return path


class TestCLI:
    """Test the statement-analyzer command."""

    def test_analysis_only(self, tmp_path, analysis_json):
        output = tmp_path / "report.xlsx"
        result = CliRunner().invoke(main, ["-a", str(analysis_json), "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert "Balances Match" in result.output
        assert output.exists()
        assert "Payment Status" not in load_workbook(output).sheetnames

    def test_with_payments_and_csv(self, tmp_path, analysis_json, payments_csv):
        output = tmp_path / "report.xlsx"
        csv_dir = tmp_path / "csv"
        result = CliRunner().invoke(main, [
            "-a", str(analysis_json),
            "-p", str(payments_csv),
            "-o", str(output),
            "--csv-dir", str(csv_dir),
        ])

        assert result.exit_code == 0, result.output
        assert "Not Paid" in result.output
        assert (csv_dir / "client_summary_full.csv").exists()
        assert (csv_dir / "monthly_trends.csv").exists()
        assert (csv_dir / "payment_status_all_summary.csv").exists()

    def test_status_filter_limits_payment_export(self, tmp_path, analysis_json, payments_csv):
        csv_dir = tmp_path / "csv"
        result = CliRunner().invoke(main, [
            "-a", str(analysis_json),
            "-p", str(payments_csv),
            "-o", str(tmp_path / "report.xlsx"),
            "--csv-dir", str(csv_dir),
            "--status", "Not Paid",
        ])

        assert result.exit_code == 0, result.output
        assert "Payment Statuses (Not Paid): 1" in result.output
        assert not (csv_dir / "payment_status_all_summary.csv").exists()
        df = pd.read_csv(csv_dir / "payment_status_not_paid_summary.csv")
        assert df["Client Name"].tolist() == ["Ghost"]

    def test_unknown_status_rejected(self, tmp_path, analysis_json):
        result = CliRunner().invoke(main, [
            "-a", str(analysis_json), "-o", str(tmp_path / "r.xlsx"), "--status", "Overdue",
        ])
        assert result.exit_code == 2

    def test_invalid_currency(self, tmp_path, analysis_json):
        result = CliRunner().invoke(main, [
            "-a", str(analysis_json), "-o", str(tmp_path / "r.xlsx"), "--currency", "rupees",
        ])
        assert result.exit_code == 2
        assert "three-letter" in result.output

    def test_invalid_analysis_file(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("not json")
        result = CliRunner().invoke(main, ["-a", str(bad), "-o", str(tmp_path / "r.xlsx")])

        assert result.exit_code == 1
        assert "ERROR" in result.output
