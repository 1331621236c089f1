"""Decimal utilities for bank feed amounts.

Bank feed cells arrive as display strings ("$1,234.56", "-$12.00", "").
All monetary comparisons use Decimal to avoid floating-point surprises.
"""

import re
from decimal import ROUND_HALF_UP, Decimal

# Everything that is not part of a plain signed decimal number
_NON_NUMERIC_PATTERN = re.compile(r"[^0-9.\-]")

# Longest signed decimal number at the start of the cleaned string
_LEADING_NUMBER_PATTERN = re.compile(r"-?\d*\.?\d+|-?\d+\.?")

ZERO = Decimal("0")


def parse_amount(raw_amount: str | None) -> Decimal:
    """Parse a currency display string into a Decimal.

    Every character other than a digit, a decimal point, or a minus sign is
    stripped, then the longest number at the start of what remains is read.
    Trailing leftovers such as a stray "." or "-" are ignored. The function
    is total: empty, missing, or malformed input yields Decimal("0")
    instead of raising.

    Examples:
        "$1,234.56"  -> Decimal("1234.56")
        "-$12.00"    -> Decimal("-12.00")
        "500.00 Cr." -> Decimal("500.00")
        "1.2.3"      -> Decimal("1.2")
        "N/A"        -> Decimal("0")

    Args:
        raw_amount: The raw amount string (may be None).

    Returns:
        Parsed amount as a finite Decimal.
    """
    if not raw_amount:
        return ZERO

    cleaned = _NON_NUMERIC_PATTERN.sub("", str(raw_amount))
    match = _LEADING_NUMBER_PATTERN.match(cleaned)
    if match is None:
        return ZERO
    return Decimal(match.group())


def format_currency(amount: Decimal, decimal_places: int = 2) -> str:
    """Format a Decimal amount for prompts and summaries.

    Args:
        amount: The amount to format.
        decimal_places: Number of decimal places (default 2).

    Returns:
        Formatted string like "1234.56" (sign preserved).
    """
    quantize_str = "0." + "0" * decimal_places if decimal_places > 0 else "0"
    rounded = amount.quantize(Decimal(quantize_str), rounding=ROUND_HALF_UP)
    if rounded == 0:
        rounded = abs(rounded)  # Normalize -0.00
    return str(rounded)
