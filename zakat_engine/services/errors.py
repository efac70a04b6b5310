"""Exceptions and input checks for the calculation core."""
import math


class ZakatError(Exception):
    """Base exception for calculation errors."""
    pass


class ValidationError(ZakatError, ValueError):
    """Input rejected before it reached any ledger."""
    pass


def require_number(value, label: str) -> float:
    """Return value as float, rejecting NaN, infinite or non-numeric input."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f'{label} must be a number')
    if not math.isfinite(value):
        raise ValidationError(f'{label} must be finite')
    return float(value)


def require_non_negative(value, label: str) -> float:
    """Return value as float, rejecting negative, NaN, infinite or non-numeric input."""
    value = require_number(value, label)
    if value < 0:
        raise ValidationError(f'{label} must not be negative')
    return float(value)


def require_positive(value, label: str) -> float:
    """Like require_non_negative, but zero is rejected too."""
    value = require_non_negative(value, label)
    if value == 0:
        raise ValidationError(f'{label} must be greater than zero')
    return value


def require_choice(value, choices, label: str):
    if value not in choices:
        raise ValidationError(f"Invalid {label}: {value}. Must be one of: {', '.join(map(str, choices))}")
    return value
