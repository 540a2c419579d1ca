"""Amount text shared by the statement and expected-payments parsers."""

from decimal import Decimal
from typing import Sequence

CURRENCY_MARKERS: Sequence[str] = ("MUR", "Rs.", "Rs", "R$", "$", "€", "£")


def parse_amount_text(text: str, markers: Sequence[str] = CURRENCY_MARKERS) -> Decimal:
    """
    Parse a formatted amount string.

    Handles currency markers, spaces, ``1,234.56`` and the European
    ``1.234,56``. With a single comma, a three-digit tail is a thousands
    separator (``1,234``) and anything else a decimal comma (``1234,5``).

    Raises:
        ValueError: If nothing is left to parse or the result is not finite.
        decimal.InvalidOperation: If the text is not a number.
    """
    str_value = str(text).strip()
    for marker in markers:
        str_value = str_value.replace(marker, "")
    str_value = str_value.replace(" ", "")
    if not str_value:
        raise ValueError(f"Invalid amount: {text!r}")

    # European format: 1.234,56
    if "," in str_value and "." in str_value:
        if str_value.rindex(",") > str_value.rindex("."):
            str_value = str_value.replace(".", "").replace(",", ".")
        else:
            str_value = str_value.replace(",", "")

    elif "," in str_value:
        head, _, tail = str_value.rpartition(",")
        if len(tail) == 3:
            str_value = str_value.replace(",", "")
        else:
            str_value = head.replace(",", "") + "." + tail

    amount = Decimal(str_value)
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {text!r}")
    return amount
