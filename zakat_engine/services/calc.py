"""Zakat calculation service.

The standard component is gated by the nisab test and charged at the
calendar rate. Extracted resources (minerals, oil, gas) are charged at a
flat 20% whether or not the standard base reaches nisab.
"""
from zakat_engine.constants import (
    CALENDAR_RATES,
    CALENDAR_TYPES,
    EXTRACTED_RESOURCES_RATE,
    NISAB_GOLD_GRAMS,
)
from .errors import ValidationError, require_non_negative
from .fx import format_amount


def select_zakat_rate(calendar_type: str) -> float:
    """2.5% for the lunar (islamic) year, 2.577% for the solar (western) year."""
    try:
        return CALENDAR_RATES[calendar_type]
    except KeyError:
        raise ValidationError(
            f"Invalid calendar type: {calendar_type}. Must be one of: {', '.join(CALENDAR_TYPES)}"
        )


def calculate_nisab_threshold(gold_price_per_gram: float) -> float:
    """Nisab is the value of 85g of gold."""
    return NISAB_GOLD_GRAMS * require_non_negative(gold_price_per_gram, 'Gold price per gram')


def meets_nisab(net_wealth: float, nisab_threshold: float) -> bool:
    """Inclusive threshold: wealth exactly at nisab owes zakat."""
    return net_wealth >= nisab_threshold


def calculate_regular_zakat(net_wealth: float, nisab_threshold: float, calendar_type: str) -> float:
    rate = select_zakat_rate(calendar_type)
    if meets_nisab(net_wealth, nisab_threshold):
        return net_wealth * rate
    return 0.0


def calculate_extracted_zakat(extracted_total: float) -> float:
    """Flat 20% on extracted resources, independent of nisab."""
    return extracted_total * EXTRACTED_RESOURCES_RATE


def calculate_zakat_due(
    net_wealth: float,
    extracted_total: float,
    nisab_threshold: float,
    calendar_type: str,
) -> dict:
    """Combine the standard and extracted-resource components.

    Args:
        net_wealth: Net wealth with extracted resources already excluded
        extracted_total: Value of minerals, oil and gas
        nisab_threshold: Threshold in the base currency
        calendar_type: 'islamic' or 'western'

    Returns:
        Dict with total, regular and extracted amounts (unrounded)
    """
    regular = calculate_regular_zakat(net_wealth, nisab_threshold, calendar_type)
    extracted = calculate_extracted_zakat(extracted_total)
    return {
        'total': regular + extracted,
        'regular': regular,
        'extracted': extracted,
    }


def build_nisab_status(net_wealth: float, nisab_threshold: float) -> dict:
    """Describe how close net wealth is to nisab, for display."""
    if nisab_threshold > 0:
        raw_ratio = net_wealth / nisab_threshold
        display_ratio = min(max(raw_ratio, 0), 1)
    else:
        raw_ratio = 0
        display_ratio = 0

    if meets_nisab(net_wealth, nisab_threshold):
        status = 'above'
    elif raw_ratio < 0.90:
        status = 'below'
    else:
        status = 'near'

    difference = float(abs(net_wealth - nisab_threshold))
    if meets_nisab(net_wealth, nisab_threshold):
        difference_text = f"{difference:.2f} above nisab"
    else:
        difference_text = f"{difference:.2f} more to reach nisab"

    return {
        'gold_grams': NISAB_GOLD_GRAMS,
        'threshold': round(nisab_threshold, 2),
        'meets_nisab': meets_nisab(net_wealth, nisab_threshold),
        'ratio': round(display_ratio, 4),
        'status': status,
        'difference': round(difference, 2),
        'difference_text': difference_text,
    }


def round_zakat_result(result: dict, places: int = 2) -> dict:
    return {key: format_amount(value, places) for key, value in result.items()}
