"""Individual zakat: asset aggregation, deductions, and the final breakdown."""
import logging
from dataclasses import replace

from zakat_engine.data.categories import ASSET_CATEGORIES, AssetField, EXTRACTED_RESOURCE_FIELDS
from .calc import (
    build_nisab_status,
    calculate_zakat_due,
    meets_nisab,
    round_zakat_result,
    select_zakat_rate,
)
from .errors import ValidationError, require_non_negative
from .ledger import field_total, resolve_field
from .metals import calculate_gold_subtotal, gold_value
from .models import (
    DEDUCTION_KEYS,
    CalculatorSettings,
    IndividualAssets,
    IndividualCalculatorState,
    IndividualDeductions,
)

logger = logging.getLogger(__name__)


def set_asset_value(assets: IndividualAssets, asset_field, value: float) -> IndividualAssets:
    """Enter a field total directly.

    Only allowed while the field has no sub-entries; once entries exist the
    total is owned by the ledger.
    """
    asset_field = resolve_field(asset_field)
    value = require_non_negative(value, asset_field.label)
    if assets.entries_for(asset_field):
        raise ValidationError(f'{asset_field.label} is itemised; edit its entries instead')
    totals = dict(assets.totals)
    totals[asset_field] = value
    return replace(assets, totals=totals)


def set_deduction_value(deductions: IndividualDeductions, key: str, value: float) -> IndividualDeductions:
    if key not in DEDUCTION_KEYS:
        raise ValidationError(f"Invalid deduction: {key}. Must be one of: {', '.join(DEDUCTION_KEYS)}")
    return replace(deductions, **{key: require_non_negative(value, key.replace('_', ' ').capitalize())})


def get_field_total(assets: IndividualAssets, asset_field) -> float:
    """Sum of a field's entries, computed fresh from the list."""
    return field_total(assets.entries_for(resolve_field(asset_field)))


def get_total_assets(assets: IndividualAssets) -> float:
    """Gross wealth: one scalar total per field plus gold.

    Sub-entry lists are already folded into the field totals and are not
    summed again.
    """
    return sum(assets.total(f) for f in AssetField) + gold_value(assets.gold)


def get_extracted_resources_total(assets: IndividualAssets) -> float:
    """Minerals + oil + gas. Also part of get_total_assets."""
    return sum(assets.total(f) for f in EXTRACTED_RESOURCE_FIELDS)


def get_total_deductions(deductions: IndividualDeductions) -> float:
    return deductions.zakat_already_paid + deductions.urgent_debts + deductions.good_receivables


def get_net_wealth(assets: IndividualAssets, deductions: IndividualDeductions) -> float:
    """Standard-rate base: extracted resources are taxed separately."""
    return get_total_assets(assets) - get_total_deductions(deductions) - get_extracted_resources_total(assets)


def get_zakat_due(
    assets: IndividualAssets,
    deductions: IndividualDeductions,
    nisab_threshold: float,
    calendar_type: str,
) -> dict:
    """Return {total, regular, extracted} at full precision."""
    return calculate_zakat_due(
        get_net_wealth(assets, deductions),
        get_extracted_resources_total(assets),
        nisab_threshold,
        calendar_type,
    )


def reset_calculator(state: IndividualCalculatorState) -> IndividualCalculatorState:
    """Clear assets and deductions, keeping the chosen base currency."""
    return IndividualCalculatorState(base_currency=state.base_currency)


def _category_subtotals(assets: IndividualAssets) -> dict:
    subtotals = {}
    for letter, label in ASSET_CATEGORIES.items():
        fields_out = []
        total = 0.0
        for f in AssetField:
            if f.category != letter:
                continue
            value = assets.total(f)
            total += value
            if value or assets.entries_for(f):
                fields_out.append({
                    'key': f.value,
                    'label': f.label,
                    'total': round(value, 2),
                    'entries': [
                        {**e.to_dict(), 'converted_amount': round(e.converted_amount, 2)}
                        for e in assets.entries_for(f)
                    ],
                })
        subtotals[letter] = {'label': label, 'fields': fields_out, 'total': round(total, 2)}
    return subtotals


def calculate_individual_zakat(state: IndividualCalculatorState, settings: CalculatorSettings) -> dict:
    """Calculate zakat for one individual session.

    Args:
        state: Assets, deductions and base currency of the session
        settings: Gold price and calendar type supplied by the caller

    Returns:
        Totals, nisab status, the {total, regular, extracted} result, and a
        per-category breakdown. Amounts are rounded here for display only.
    """
    calendar_type = settings.calendar_type
    rate = select_zakat_rate(calendar_type)
    nisab_threshold = settings.nisab_threshold

    assets = state.assets
    total_assets = get_total_assets(assets)
    total_deductions = get_total_deductions(state.deductions)
    extracted_total = get_extracted_resources_total(assets)
    net_wealth = get_net_wealth(assets, state.deductions)

    zakat = get_zakat_due(assets, state.deductions, nisab_threshold, calendar_type)
    logger.info(
        f"Individual zakat: net={net_wealth:.2f} nisab={nisab_threshold:.2f} "
        f"calendar={calendar_type} due={zakat['total']:.2f}"
    )

    return {
        'base_currency': state.base_currency,
        'calendar_type': calendar_type,
        'zakat_rate': rate,
        'total_assets': round(total_assets, 2),
        'total_deductions': round(total_deductions, 2),
        'extracted_resources_total': round(extracted_total, 2),
        'net_wealth': round(net_wealth, 2),
        'nisab': build_nisab_status(net_wealth, nisab_threshold),
        'meets_nisab': meets_nisab(net_wealth, nisab_threshold),
        'zakat': round_zakat_result(zakat),
        'zakat_due': round(zakat['total'], 2),
        'subtotals': {
            'categories': _category_subtotals(assets),
            'gold': calculate_gold_subtotal(assets.gold),
        },
        'deductions': state.deductions.to_dict(),
    }
