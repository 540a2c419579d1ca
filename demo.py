"""
Demo script for the Bank Statement Analyzer.

Runs the analyzer on a small built-in statement and expected payments list
and writes the Excel report next to this script.

Usage:
    python demo.py
"""

import logging
import sys
from pathlib import Path

import pandas as pd

# Ensure the project root is in the Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from statement_analyzer.config import AnalyzerConfig
from statement_analyzer.engine.pipeline import StatementAnalyzer
from statement_analyzer.parsers.analysis_parser import AnalysisParser
from statement_analyzer.parsers.payments_parser import ExpectedPaymentsParser
from statement_analyzer.reports.excel_report import ExcelReportGenerator


SAMPLE_ANALYSIS = {
    "statementPeriod": "01 Jul 2024 - 31 Aug 2024",
    "openingBalance": 12500.00,
    "closingBalance": 22815.00,
    "transactions": [
        {"clientName": "Salman Muddhoo", "date": "2024-07-03", "amount": 4500.00, "type": "credit"},
        {"clientName": "Island Hardware Ltd", "date": "2024-07-08", "amount": 1200.00, "type": "debit"},
        {"clientName": "Priya Ramdin", "date": "2024-07-15", "amount": 2500.00, "type": "credit"},
        {"clientName": "Bank Fee", "date": "2024-07-31", "amount": 35.00, "type": "debit"},
        {"clientName": "Salman Muddhoo", "date": "2024-08-02", "amount": 4500.00, "type": "credit"},
        {"clientName": "Priya Ramdin", "date": "2024-08-16", "amount": 1000.00, "type": "credit"},
        {"clientName": "CEB Electricity", "date": "2024-08-20", "amount": 950.00, "type": "debit"},
        {"clientName": "Standing Order", "date": "", "amount": 5000.00, "type": "debit"},
        {"clientName": "Kevin Li", "date": "2024-08-28", "amount": 5000.00, "type": "credit"},
    ],
}

SAMPLE_PAYMENTS = pd.DataFrame({
    "Client Name": ["SALMAN MUDDHOO", "Priya Ramdin", "Kevin Li", "Anil Jugnauth"],
    "Amount": [9000, 4000, 4500, 1500],
    "Due Date": ["2024-08-05", "2024-08-15", "2024-08-31", "2024-08-31"],
})


def main():
    """Run the statement analyzer demo."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    output_file = project_root / "statement_report.xlsx"

    print("=" * 60)
    print("  BANK STATEMENT ANALYZER - DEMO")
    print("=" * 60)

    analysis = AnalysisParser().parse_dict(SAMPLE_ANALYSIS)
    expected = ExpectedPaymentsParser().parse_dataframe(SAMPLE_PAYMENTS)
    print(f"\n  [1/3] Loaded {len(analysis.transactions)} transactions "
          f"and {len(expected)} expected payments")

    print("\n  [2/3] Running analyzer...")
    config = AnalyzerConfig()
    report = StatementAnalyzer(config).run(analysis, expected)

    print(f"\n  [3/3] Generating Excel report: {output_file.name}")
    output_path = ExcelReportGenerator().generate(report, output_file, config)

    print("\n" + "=" * 60)
    print("  CLIENT SUMMARY")
    print("=" * 60)
    for s in report.summaries:
        print(f"  {s.client_name[:25]:<25} {s.total_credit:>10,.2f} {s.total_debit:>10,.2f} "
              f"{s.net_total:>10,.2f}")

    verification = report.verification
    print("\n  BALANCE VERIFICATION:")
    print(f"  Calculated closing: {verification.calculated_closing:,.2f}")
    print(f"  Stated closing:     {verification.closing_balance:,.2f}")
    print(f"  Result:             {'Balances Match' if verification.is_match else 'Mismatch Found'}")

    print("\n  PAYMENT STATUS:")
    for status in report.payment_statuses:
        print(f"  [{status.status.value:>16}] {status.client_name:<20} "
              f"expected {status.expected_amount:>9,.2f}  paid {status.paid_amount:>9,.2f}")

    print(f"\n  Report saved to: {output_path.absolute()}")


if __name__ == "__main__":
    main()
