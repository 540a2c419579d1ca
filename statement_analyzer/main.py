"""CLI entry point for bank statement analysis."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from statement_analyzer.config import AnalyzerConfig
from statement_analyzer.engine.dashboard import filter_by_status
from statement_analyzer.engine.models import PaymentStatusType
from statement_analyzer.engine.pipeline import StatementAnalyzer
from statement_analyzer.engine.query import TREND_SORT_KEYS, SortDirection
from statement_analyzer.parsers.analysis_parser import AnalysisParser
from statement_analyzer.parsers.payments_parser import ExpectedPaymentsParser
from statement_analyzer.reports.csv_export import SUMMARY_VARIANTS, CSVExporter
from statement_analyzer.reports.excel_report import ExcelReportGenerator

logger = logging.getLogger(__name__)

ALL_STATUSES = "All"


def validate_top_movers(ctx, param, value):
    """Validate the top movers count is positive."""
    if value < 1:
        raise click.BadParameter("Top movers must be at least 1.")
    return value


def validate_currency(ctx, param, value):
    """Validate the currency code looks like an ISO 4217 code."""
    code = value.strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise click.BadParameter("Currency must be a three-letter code such as MUR or USD.")
    return code


@click.command()
@click.option(
    "--analysis", "-a",
    required=True,
    type=click.Path(exists=True),
    help="Path to the extracted statement analysis (JSON).",
)
@click.option(
    "--payments", "-p",
    default=None,
    type=click.Path(exists=True),
    help="Optional expected payments file (CSV or Excel) to reconcile against.",
)
@click.option(
    "--output", "-o",
    required=True,
    type=click.Path(),
    help="Path for the output Excel report.",
)
@click.option(
    "--csv-dir",
    default=None,
    type=click.Path(file_okay=False),
    help="Directory to also export the tables as CSV files.",
)
@click.option(
    "--search", "-s",
    default="",
    help="Only show clients whose name contains this text (case-insensitive).",
)
@click.option(
    "--sort-key",
    default=None,
    type=click.Choice(TREND_SORT_KEYS),
    help="Field to sort the monthly trends by (default: month, descending).",
)
@click.option(
    "--sort-direction",
    default=SortDirection.ASCENDING.value,
    type=click.Choice([d.value for d in SortDirection]),
    help="Sort direction used with --sort-key.",
)
@click.option(
    "--currency",
    default="MUR",
    callback=validate_currency,
    help="Currency code shown in the report (default: MUR).",
)
@click.option(
    "--top-movers",
    default=5,
    type=int,
    callback=validate_top_movers,
    help="Number of clients listed as top inflows and outflows (default: 5).",
)
@click.option(
    "--status",
    default=ALL_STATUSES,
    type=click.Choice([ALL_STATUSES] + [s.value for s in PaymentStatusType]),
    help="Only list and export payment statuses with this outcome (default: All).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(
    analysis: str,
    payments: Optional[str],
    output: str,
    csv_dir: Optional[str],
    search: str,
    sort_key: Optional[str],
    sort_direction: str,
    currency: str,
    top_movers: int,
    status: str,
    verbose: bool,
) -> None:
    """
    Bank Statement Analyzer

    Summarises an extracted bank statement per client and month, verifies the
    opening and closing balances, and optionally reconciles an expected
    payments list.

    Example:
        statement-analyzer --analysis result.json --payments expected.xlsx --output report.xlsx
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    click.echo("=" * 60)
    click.echo("  BANK STATEMENT ANALYZER")
    click.echo("=" * 60)

    try:
        config = AnalyzerConfig.from_options(
            currency=currency,
            search=search,
            sort_key=sort_key,
            sort_direction=sort_direction,
            top_movers=top_movers,
        )

        # Step 1: Load the analysis result
        click.echo(f"\n  Loading analysis: {analysis}...")
        result = AnalysisParser().parse(Path(analysis))
        click.echo(f"   Found {len(result.transactions)} transactions")

        # Step 2: Load expected payments
        expected = None
        if payments:
            click.echo(f"\n  Loading expected payments: {payments}...")
            expected = ExpectedPaymentsParser().parse(Path(payments))
            click.echo(f"   Found {len(expected)} expected payments")

        # Step 3: Analyse
        click.echo("\n  Aggregating and verifying...")
        report = StatementAnalyzer(config).run(result, expected)
        for warning in report.warnings:
            click.echo(f"   WARNING: {warning}")

        listed_statuses = None
        if report.payment_statuses is not None:
            wanted = None if status == ALL_STATUSES else PaymentStatusType(status)
            listed_statuses = filter_by_status(report.payment_statuses, wanted)

        # Step 4: Generate reports
        click.echo(f"\n  Generating report: {output}...")
        output_path = ExcelReportGenerator().generate(report, output, config)

        if csv_dir:
            exporter = CSVExporter(csv_dir)
            for variant in SUMMARY_VARIANTS:
                exporter.export_summaries(report.filtered_summaries, variant)
            exporter.export_trends(report.sorted_trends)
            if listed_statuses is not None:
                exporter.export_payment_statuses(listed_statuses, status)
            click.echo(f"   CSV files written to {csv_dir}")

        # Step 5: Print summary
        verification = report.verification
        totals = report.filtered_totals
        click.echo("\n" + "=" * 60)
        click.echo("  STATEMENT SUMMARY")
        click.echo("=" * 60)
        click.echo(f"  Statement Period:     {result.statement_period or 'N/A'}")
        click.echo(f"  Opening Balance:      {result.opening_balance:,.2f} {config.currency}")
        click.echo(f"  Closing Balance:      {result.closing_balance:,.2f} {config.currency}")
        if verification is not None:
            click.echo(f"  Calculated Closing:   {verification.calculated_closing:,.2f} {config.currency}")
            verdict = "Balances Match" if verification.is_match else "Mismatch Found"
            click.echo(f"  Verification:         {verdict} ({verification.difference:,.2f})")
        click.echo(f"  Clients:              {len(report.filtered_summaries)}")
        click.echo(f"  Total Credit:         {totals.total_credit:,.2f} ({totals.credit_count})")
        click.echo(f"  Total Debit:          {totals.total_debit:,.2f} ({totals.debit_count})")
        click.echo(f"  Net Total:            {totals.net_total:,.2f}")
        if listed_statuses is not None:
            click.echo(f"  Payment Statuses ({status}): {len(listed_statuses)}")
            for payment in listed_statuses:
                click.echo(
                    f"    +-- {payment.client_name[:25]:<25} {payment.status.value:<17} "
                    f"{payment.difference:>12,.2f}"
                )
        click.echo("=" * 60)
        click.echo(f"\n  Report saved to: {output_path.absolute()}")

    except FileNotFoundError as e:
        click.echo(f"\n  ERROR: {e}", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"\n  ERROR: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        logger.exception("Unexpected error during analysis")
        click.echo(f"\n  UNEXPECTED ERROR: {e}", err=True)
        sys.exit(2)


if __name__ == "__main__":
    main()
