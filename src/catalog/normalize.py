"""
Price and rating normalization.

Prices are stored as display strings ("₹1,234", "$19.99") so every filter
and sort has to re-derive a number. The same rule is used here and by the
`discounted_price_value` generated column in sql/schema.sql: drop every
character that is not a digit or '.', then parse; empty or unparseable
text becomes 0.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

_NON_NUMERIC = re.compile(r"[^0-9.]")


def _clean(value: Any) -> str:
    return _NON_NUMERIC.sub("", str(value))


def parse_price(value: Any) -> float:
    """
    Normalize a currency-formatted price to a float.

    >>> parse_price("₹1,234")
    1234.0
    >>> parse_price(None)
    0.0
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)

    cleaned = _clean(value)
    if not cleaned:
        return 0.0
    try:
        return float(cleaned)
    except ValueError:
        # e.g. "1.2.3" after stripping
        return 0.0


def parse_rating(value: Any) -> Optional[float]:
    """
    Normalize a rating ("4.2", 4.2, " 4.2 ") to a float.

    Missing or unparseable ratings return None; callers rank them below
    every real rating.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)

    cleaned = _clean(value)
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        return None


def parse_bound(value: Optional[str]) -> Optional[float]:
    """
    Parse an optional numeric query parameter (priceMin, priceMax, rating).

    Blank input, or input with no digits at all, means "not supplied".
    """
    if value is None:
        return None
    cleaned = _clean(value)
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        return None


def parse_price_decimal(value: Any) -> Decimal:
    """
    Same rule as parse_price, as a Decimal for money arithmetic.

    >>> parse_price_decimal("₹1,299.50")
    Decimal('1299.50')
    """
    if value is None or isinstance(value, bool):
        return Decimal("0")
    cleaned = _clean(value)
    if not cleaned:
        return Decimal("0")
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return Decimal("0")
