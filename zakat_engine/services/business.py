"""Business zakat: balance-sheet line items and the net zakatable base.

Only items classified zakatable add to the base and only deductible items
reduce it. Exempt, not_deductible and unresolved needs_clarification items
count on neither side until reclassified.
"""
import logging
from dataclasses import replace

from zakat_engine.constants import (
    CLARIFICATION_ANSWERS,
    DEDUCTIBLE,
    EXEMPT,
    NEEDS_CLARIFICATION,
    NOT_DEDUCTIBLE,
    ZAKATABLE,
    CLASSIFICATIONS,
)
from .calc import (
    build_nisab_status,
    calculate_zakat_due,
    meets_nisab,
    round_zakat_result,
    select_zakat_rate,
)
from .classifier import resolve_clarification
from .errors import ValidationError, require_choice, require_non_negative
from .models import BUSINESS_VALUE_KEYS, BusinessAssets, BusinessLineItem, CalculatorSettings

logger = logging.getLogger(__name__)

LINE_ITEM_PATCH_KEYS = (
    'name', 'amount', 'classification', 'clarification_question',
    'clarification_answer', 'market_value', 'islamic_ruling',
)


def set_company_info(assets: BusinessAssets, company_name: str, industry_type: str) -> BusinessAssets:
    return replace(assets, company_name=company_name or '', industry_type=industry_type or '')


def set_business_value(assets: BusinessAssets, key: str, value: float) -> BusinessAssets:
    """Set one of cash, receivables, inventory or investments."""
    require_choice(key, BUSINESS_VALUE_KEYS, 'business value')
    return replace(assets, **{key: require_non_negative(value, key.capitalize())})


def add_line_item(assets: BusinessAssets, item: BusinessLineItem) -> BusinessAssets:
    if any(existing.id == item.id for existing in assets.line_items):
        raise ValidationError(f'Duplicate line item id: {item.id}')
    return replace(assets, line_items=assets.line_items + (item,))


def update_line_item(assets: BusinessAssets, item_id: str, patch: dict) -> BusinessAssets:
    """Patch a line item. Unknown ids are a no-op."""
    unknown = set(patch) - set(LINE_ITEM_PATCH_KEYS)
    if unknown:
        raise ValidationError(f"Cannot update line item fields: {', '.join(sorted(unknown))}")
    cleaned = dict(patch)
    if 'classification' in cleaned:
        require_choice(cleaned['classification'], CLASSIFICATIONS, 'classification')
    if 'amount' in cleaned:
        cleaned['amount'] = require_non_negative(cleaned['amount'], 'Amount')
    if cleaned.get('market_value') is not None:
        cleaned['market_value'] = require_non_negative(cleaned['market_value'], 'Market value')

    if not any(item.id == item_id for item in assets.line_items):
        return assets
    return replace(assets, line_items=tuple(
        replace(item, **cleaned) if item.id == item_id else item
        for item in assets.line_items
    ))


def remove_line_item(assets: BusinessAssets, item_id: str) -> BusinessAssets:
    return replace(assets, line_items=tuple(item for item in assets.line_items if item.id != item_id))


def set_line_items(assets: BusinessAssets, items) -> BusinessAssets:
    items = tuple(items)
    ids = [item.id for item in items]
    if len(ids) != len(set(ids)):
        raise ValidationError('Line item ids must be unique')
    return replace(assets, line_items=items)


def answer_clarification(assets: BusinessAssets, item_id: str, answer: str, market_value=None) -> BusinessAssets:
    """Apply a clarification answer to one item. Unknown ids are a no-op.

    Raises:
        ValidationError: If the answer is not a known clarification answer
    """
    require_choice(answer, tuple(CLARIFICATION_ANSWERS), 'clarification answer')
    return replace(assets, line_items=tuple(
        resolve_clarification(item, answer, market_value) if item.id == item_id else item
        for item in assets.line_items
    ))


def _items_with(assets: BusinessAssets, classification: str):
    return [item for item in assets.line_items if item.classification == classification]


def get_total_zakatable(assets: BusinessAssets) -> float:
    """Base values plus zakatable line items (at market value when given)."""
    line_items_total = sum(item.zakatable_value for item in _items_with(assets, ZAKATABLE))
    return assets.cash + assets.receivables + assets.inventory + assets.investments + line_items_total


def get_total_deductible(assets: BusinessAssets) -> float:
    return sum(item.amount for item in _items_with(assets, DEDUCTIBLE))


def get_total_exempt(assets: BusinessAssets) -> float:
    return sum(item.amount for item in _items_with(assets, EXEMPT))


def get_total_not_deductible(assets: BusinessAssets) -> float:
    return sum(item.amount for item in _items_with(assets, NOT_DEDUCTIBLE))


def get_pending_clarifications(assets: BusinessAssets) -> list[BusinessLineItem]:
    return _items_with(assets, NEEDS_CLARIFICATION)


def get_net_zakatable(assets: BusinessAssets) -> float:
    return get_total_zakatable(assets) - get_total_deductible(assets)


def get_business_zakat_due(assets: BusinessAssets, nisab_threshold: float, calendar_type: str) -> dict:
    """Businesses have no extracted-resource component."""
    return calculate_zakat_due(get_net_zakatable(assets), 0.0, nisab_threshold, calendar_type)


def calculate_business_zakat(assets: BusinessAssets, settings: CalculatorSettings) -> dict:
    """Calculate zakat for a company balance sheet.

    Returns:
        Totals per classification, nisab status, the {total, regular,
        extracted} result and the line items grouped by classification.
    """
    calendar_type = settings.calendar_type
    rate = select_zakat_rate(calendar_type)
    nisab_threshold = settings.nisab_threshold

    total_zakatable = get_total_zakatable(assets)
    total_deductible = get_total_deductible(assets)
    net_wealth = total_zakatable - total_deductible
    pending = get_pending_clarifications(assets)

    zakat = get_business_zakat_due(assets, nisab_threshold, calendar_type)
    logger.info(
        f"Business zakat for {assets.company_name or 'unnamed company'}: net={net_wealth:.2f} "
        f"nisab={nisab_threshold:.2f} due={zakat['total']:.2f} pending={len(pending)}"
    )

    return {
        'company_name': assets.company_name,
        'industry_type': assets.industry_type,
        'calendar_type': calendar_type,
        'zakat_rate': rate,
        'total_zakatable': round(total_zakatable, 2),
        'total_deductible': round(total_deductible, 2),
        'total_exempt': round(get_total_exempt(assets), 2),
        'total_not_deductible': round(get_total_not_deductible(assets), 2),
        'net_wealth': round(net_wealth, 2),
        'nisab': build_nisab_status(net_wealth, nisab_threshold),
        'meets_nisab': meets_nisab(net_wealth, nisab_threshold),
        'zakat': round_zakat_result(zakat),
        'zakat_due': round(zakat['total'], 2),
        'pending_clarifications': len(pending),
        'line_items': {
            classification: [item.to_dict() for item in _items_with(assets, classification)]
            for classification in CLASSIFICATIONS
        },
    }
