"""Utility functions for Tickr Book."""

import logging
import math
from datetime import date, datetime, timezone
from typing import Iterable, Union

from .errors import ValidationError
from .models import parse_iso_date

logger = logging.getLogger(__name__)

CURRENCY = '₹'


def parse_choice(value: str, allowed: Iterable[str], field: str) -> str:
    """Match a trade type or strategy case-insensitively against its allowed values."""
    allowed = tuple(allowed)
    for option in allowed:
        if str(value).lower() == option.lower():
            return option
    raise ValidationError(f"Invalid {field}: {value!r} (expected one of {', '.join(allowed)})")


def parse_price(price_arg: Union[str, float, int]) -> float:
    """Convert user price input to a float."""
    if price_arg is None or str(price_arg).strip() == '':
        raise ValidationError("Price is required")
    try:
        price = float(str(price_arg).strip())
    except ValueError:
        logger.error(f"Invalid price format: {price_arg}")
        raise ValidationError(f"Price must be numeric, got {price_arg!r}")
    if not math.isfinite(price):
        raise ValidationError(f"Price must be numeric, got {price_arg!r}")
    return price


def parse_quantity(quantity_arg: Union[str, float, int]) -> int:
    """Convert user quantity input to an integer, truncating any fraction."""
    if quantity_arg is None or str(quantity_arg).strip() == '':
        raise ValidationError("Quantity is required")
    text = str(quantity_arg).strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        value = float(text)
    except ValueError:
        logger.error(f"Invalid quantity format: {quantity_arg}")
        raise ValidationError(f"Quantity must be numeric, got {quantity_arg!r}")
    if not math.isfinite(value):
        raise ValidationError(f"Quantity must be numeric, got {quantity_arg!r}")
    return int(value)


def to_iso_string(value: Union[str, date, datetime]) -> str:
    """Render a trade date as a UTC ISO-8601 string with milliseconds.

    Plain dates are stored at midnight UTC. Strings may be ``YYYY-MM-DD``
    or any ISO-8601 timestamp.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("Date is required")
    if isinstance(value, str):
        parsed = parse_iso_date(value)
        if parsed is None:
            raise ValidationError(f"Invalid date: {value!r}")
        value = parsed
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
    else:
        value = datetime(value.year, value.month, value.day)
    return value.strftime('%Y-%m-%dT%H:%M:%S.') + f"{value.microsecond // 1000:03d}Z"


def format_date(value: str) -> str:
    """Format a stored ISO date as dd/mm/yyyy."""
    parsed = parse_iso_date(value)
    if parsed is None:
        return value
    return parsed.strftime('%d/%m/%Y')


def format_money(amount: float) -> str:
    """Format an amount with the currency sign and two decimals."""
    return f"{CURRENCY}{amount:.2f}"
