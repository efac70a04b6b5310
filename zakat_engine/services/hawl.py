"""Hawl (holding year) tracking and approximate Hijri dating.

The Hijri conversion is the calculator's long-standing approximation,
``floor((year - 622) * 33 / 32)``, with the month name taken from the
Gregorian month index. It labels history entries; it is not a calendar
conversion.
"""
import math
from datetime import date, timedelta
from typing import Optional

from zakat_engine.constants import DUE_SOON_DAYS, HAWL_DAYS, HIJRI_MONTHS
from .calc import meets_nisab, select_zakat_rate


def hawl_length_days(calendar_type: str) -> int:
    select_zakat_rate(calendar_type)
    return HAWL_DAYS[calendar_type]


def hawl_end_date(start_date: date, calendar_type: str = 'islamic') -> date:
    """Date zakat falls due for wealth held since start_date."""
    return start_date + timedelta(days=hawl_length_days(calendar_type))


def days_until_hawl(start_date: date, today: date, calendar_type: str = 'islamic') -> int:
    """Days left in the hawl; negative once it has passed."""
    return (hawl_end_date(start_date, calendar_type) - today).days


def zakat_status(
    net_wealth: float,
    nisab_threshold: float,
    hawl_start: Optional[date],
    today: date,
    last_payment_date: Optional[date] = None,
    calendar_type: str = 'islamic',
) -> str:
    """Classify the current hawl as 'paid', 'due_soon', 'overdue' or 'not_due'."""
    if hawl_start is None:
        return 'not_due'
    if not meets_nisab(net_wealth, nisab_threshold):
        return 'not_due'
    if last_payment_date is not None and last_payment_date >= hawl_start:
        return 'paid'

    remaining = days_until_hawl(hawl_start, today, calendar_type)
    if remaining < 0:
        return 'overdue'
    if remaining <= DUE_SOON_DAYS:
        return 'due_soon'
    return 'not_due'


def approximate_hijri_year(gregorian_year: int) -> int:
    return math.floor((gregorian_year - 622) * (33 / 32))


def approximate_hijri_date(d: date) -> str:
    return f'{HIJRI_MONTHS[d.month - 1]} {approximate_hijri_year(d.year)} AH'
