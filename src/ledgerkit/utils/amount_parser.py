"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re

CENT = Decimal("0.01")

_CURRENCY_MARKERS = re.compile(r"(?i)[$€£¥]|\bMRU\b|\bUSD\b|\bEUR\b")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal rounded to cents.

    Handles various formats:
    - "123.45"
    - "$123.45" or "MRU 123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount with two decimal places

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = amount_str.strip()

    # Parentheses mean negative
    is_negative = False
    if text.startswith("(") and text.endswith(")"):
        is_negative = True
        text = text[1:-1]

    text = _CURRENCY_MARKERS.sub("", text).replace(",", "").strip()

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if is_negative:
        amount = -amount
    return to_cents(amount)


def to_cents(amount: Decimal | int | str) -> Decimal:
    """Round an amount to two decimal places.

    Raises:
        ValueError: If amount is not a finite number
    """
    try:
        value = Decimal(amount)
    except (InvalidOperation, TypeError):
        raise ValueError(f"Invalid amount '{amount}'")
    if not value.is_finite():
        raise ValueError(f"Invalid amount '{amount}'")
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
