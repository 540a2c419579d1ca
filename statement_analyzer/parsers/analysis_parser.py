"""Parser for the JSON analysis result produced by the extraction step."""

import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List

from statement_analyzer.engine.models import AnalysisResult, Transaction, TransactionType
from statement_analyzer.parsers.amounts import parse_amount_text

logger = logging.getLogger(__name__)


class AnalysisParser:
    """
    Turn the extraction JSON into an AnalysisResult.

    Expected shape::

        {
          "statementPeriod": "July 2024",
          "openingBalance": 1000.0,
          "closingBalance": 1300.0,
          "transactions": [
            {"clientName": "Acme", "date": "2024-07-02", "amount": 500, "type": "credit"}
          ]
        }

    Missing balances default to 0 and a missing period to an empty string.
    Transactions that cannot be used are skipped with a warning.
    """

    def parse(self, file_path: str | Path) -> AnalysisResult:
        """
        Parse an analysis JSON file.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ValueError: If the file is not valid JSON or has the wrong shape.
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse analysis JSON: {e}") from e

        return self.parse_dict(data)

    def parse_text(self, text: str) -> AnalysisResult:
        """Parse an analysis result from a JSON string."""
        try:
            data = json.loads(text.strip())
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse analysis JSON: {e}") from e
        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> AnalysisResult:
        """Build an AnalysisResult from already-decoded JSON."""
        if not isinstance(data, dict):
            raise ValueError("Analysis result must be a JSON object")

        raw_transactions = data.get("transactions", [])
        if raw_transactions is None:
            raw_transactions = []
        if not isinstance(raw_transactions, list):
            raise ValueError("'transactions' must be a list")

        return AnalysisResult(
            statement_period=str(data.get("statementPeriod") or ""),
            opening_balance=self._parse_balance(data.get("openingBalance"), "openingBalance"),
            closing_balance=self._parse_balance(data.get("closingBalance"), "closingBalance"),
            transactions=self._convert_transactions(raw_transactions),
        )

    def _convert_transactions(self, raw_transactions: List[Any]) -> List[Transaction]:
        transactions: List[Transaction] = []

        for idx, raw in enumerate(raw_transactions):
            try:
                transactions.append(self._convert_transaction(raw))
            except (ValueError, InvalidOperation) as e:
                # Log warning but continue processing
                logger.warning("Skipping transaction %s: %s", idx, e)

        return transactions

    def _convert_transaction(self, raw: Any) -> Transaction:
        if not isinstance(raw, dict):
            raise ValueError(f"expected an object, got {type(raw).__name__}")

        client_name = str(raw.get("clientName") or "").strip()
        if not client_name:
            raise ValueError("missing clientName")

        return Transaction(
            client_name=client_name,
            amount=self._parse_amount(raw.get("amount")),
            type=self._parse_type(raw.get("type")),
            date=str(raw.get("date") or "").strip(),
        )

    def _parse_balance(self, value: Any, name: str) -> Decimal:
        if value is None or value == "":
            return Decimal("0")
        try:
            return self._parse_amount(value)
        except (ValueError, InvalidOperation) as e:
            raise ValueError(f"Invalid {name}: {value!r}") from e

    def _parse_amount(self, value: Any) -> Decimal:
        """Parse an amount from a JSON number or numeric string."""
        if isinstance(value, bool) or value is None:
            raise ValueError(f"Invalid amount: {value!r}")
        if not isinstance(value, (int, float)):
            return parse_amount_text(str(value))
        amount = Decimal(str(value))
        if not amount.is_finite():
            raise ValueError(f"Invalid amount: {value!r}")
        return amount

    def _parse_type(self, value: Any) -> TransactionType:
        normalized = str(value or "").lower().strip()
        try:
            return TransactionType(normalized)
        except ValueError:
            raise ValueError(f"Unknown transaction type: {value!r}") from None
