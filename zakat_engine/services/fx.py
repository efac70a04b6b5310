"""Currency conversion service.

Exchange rates are supplied by the caller as "units of base currency per
unit of the entry currency". Converted amounts are kept at full precision;
rounding belongs to presentation only.
"""
from .errors import require_non_negative


def convert_amount(amount: float, exchange_rate: float) -> float:
    """Convert an amount in a foreign currency to the base currency.

    Args:
        amount: Amount in the entry's own currency
        exchange_rate: Base-currency units per unit of the entry currency

    Returns:
        amount * exchange_rate, unrounded

    Raises:
        ValidationError: If either input is negative or not finite
    """
    amount = require_non_negative(amount, 'Amount')
    exchange_rate = require_non_negative(exchange_rate, 'Exchange rate')
    return amount * exchange_rate


def format_amount(value: float, places: int = 2) -> float:
    """Round a stored value for display."""
    return round(value, places)
