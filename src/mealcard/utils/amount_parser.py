"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> int:
    """Parse an amount string into whole currency units.

    Handles various formats:
    - "150"
    - "₹150"
    - "1,500"
    - "150.00" (a zero fraction is accepted)

    Args:
        amount_str: Amount string

    Returns:
        Integer amount

    Raises:
        ValueError: If amount string cannot be parsed or has a fractional part
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    # Remove whitespace
    amount_str = amount_str.strip()

    # Remove currency symbols and codes
    cleaned = re.sub(r"[$€£¥₹]|\b(?:INR|Rs\.?)", "", amount_str, flags=re.IGNORECASE)

    # Remove commas
    cleaned = cleaned.replace(",", "").strip()

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if not amount.is_finite() or amount != amount.to_integral_value():
        raise ValueError(f"Amount '{amount_str}' must be a whole number of currency units")
    return int(amount)
