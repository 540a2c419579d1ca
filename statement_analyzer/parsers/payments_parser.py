"""CSV/Excel expected-payments parser."""

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from statement_analyzer.engine.models import ExpectedPayment
from statement_analyzer.parsers.amounts import parse_amount_text

logger = logging.getLogger(__name__)


class ExpectedPaymentsParser:
    """Parse a spreadsheet of expected client payments into ExpectedPayment objects."""

    # Header candidates, compared case-insensitively and ignoring spaces/underscores
    NAME_COLUMNS: Sequence[str] = (
        "clientname", "client", "name", "customername", "customer", "payer", "tenant",
    )
    AMOUNT_COLUMNS: Sequence[str] = (
        "amount", "expectedamount", "amountdue", "due", "expected", "fee", "total",
    )

    def __init__(self, column_mapping: Optional[Dict[str, str]] = None):
        """
        Initialize parser with optional explicit columns.

        Args:
            column_mapping: Dict mapping "client_name"/"amount" to spreadsheet
                          headers. Unmapped fields are detected from the header.
                          Example: {"client_name": "Tenant", "amount": "Rent"}
        """
        self.column_mapping = column_mapping or {}

    def parse(self, file_path: str | Path, **kwargs) -> List[ExpectedPayment]:
        """
        Parse a CSV or Excel file into ExpectedPayment objects.

        Args:
            file_path: Path to the CSV/Excel file.
            **kwargs: Additional arguments passed to pandas read function.

        Returns:
            List of ExpectedPayment objects in file order.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ValueError: If the format is unsupported or columns can't be found.
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        df = self._read_file(file_path, **kwargs)
        return self.parse_dataframe(df)

    def parse_dataframe(self, df: pd.DataFrame) -> List[ExpectedPayment]:
        """Convert an already-loaded DataFrame."""
        df = df.rename(columns=lambda c: str(c).strip())
        name_col = self._resolve_column(df, "client_name", self.NAME_COLUMNS)
        amount_col = self._resolve_column(df, "amount", self.AMOUNT_COLUMNS)
        return self._convert_dataframe(df, name_col, amount_col)

    def _read_file(self, file_path: Path, **kwargs) -> pd.DataFrame:
        """Read file based on extension."""
        suffix = file_path.suffix.lower()

        if suffix == ".csv":
            return pd.read_csv(file_path, **kwargs)
        elif suffix in (".xlsx", ".xls"):
            return pd.read_excel(file_path, **kwargs)
        else:
            raise ValueError(f"Unsupported file format: {suffix}. Use .csv, .xlsx, or .xls")

    def _resolve_column(self, df: pd.DataFrame, field: str, candidates: Sequence[str]) -> str:
        """
        Find the column for ``field``.

        Raises:
            ValueError: If the column is missing.
        """
        mapped = self.column_mapping.get(field)
        if mapped is not None:
            if mapped not in df.columns:
                raise ValueError(
                    f"Missing required column: {field} (expected column: '{mapped}'). "
                    f"Available columns: {', '.join(map(str, df.columns))}."
                )
            return mapped

        by_key = {self._header_key(col): col for col in df.columns}
        for candidate in candidates:
            if candidate in by_key:
                return by_key[candidate]

        available = ", ".join(map(str, df.columns))
        raise ValueError(
            f"Could not find a {field} column. Available columns: {available}. "
            f"Use column_mapping parameter to map your columns."
        )

    @staticmethod
    def _header_key(header: Any) -> str:
        return str(header).lower().replace(" ", "").replace("_", "").replace("-", "")

    def _convert_dataframe(
        self, df: pd.DataFrame, name_col: str, amount_col: str
    ) -> List[ExpectedPayment]:
        """Convert a DataFrame to a list of ExpectedPayment objects."""
        payments: List[ExpectedPayment] = []
        extra_cols = [c for c in df.columns if c not in (name_col, amount_col)]

        for idx, row in df.iterrows():
            try:
                payments.append(self._convert_row(row, name_col, amount_col, extra_cols))
            except (ValueError, InvalidOperation) as e:
                logger.warning("Skipping row %s: %s", idx, e)

        logger.info("Loaded %d expected payments from %d rows", len(payments), len(df))
        return payments

    def _convert_row(
        self,
        row: pd.Series,
        name_col: str,
        amount_col: str,
        extra_cols: List[str],
    ) -> ExpectedPayment:
        """Convert a single row to an ExpectedPayment object."""
        raw_name = row[name_col]
        client_name = "" if pd.isna(raw_name) else str(raw_name).strip()
        if not client_name:
            raise ValueError("blank client name")

        amount = self._parse_amount(row[amount_col])
        if amount <= 0:
            raise ValueError(f"non-positive amount {amount}")

        extra_fields = {col: self._cell_value(row[col]) for col in extra_cols}

        return ExpectedPayment(
            client_name=client_name,
            amount=amount,
            extra_fields=extra_fields,
        )

    def _parse_amount(self, value) -> Decimal:
        """Parse amount handling various number formats."""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            if pd.isna(value):
                raise ValueError("missing amount")
            return Decimal(str(value))

        str_value = str(value).strip()
        if not str_value or str_value.lower() == "nan":
            raise ValueError("missing amount")

        return parse_amount_text(str_value)

    def _cell_value(self, value: Any) -> Any:
        """Plain Python value for a passthrough cell."""
        if pd.isna(value):
            return None
        if isinstance(value, pd.Timestamp):
            return value.date().isoformat() if value == value.normalize() else value.isoformat()
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        if hasattr(value, "item"):
            # numpy scalar
            return value.item()
        return value
