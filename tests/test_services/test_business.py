"""Tests for the business zakat calculator."""
import pytest

from zakat_engine.constants import EXEMPT, NEEDS_CLARIFICATION, ZAKATABLE
from zakat_engine.services.business import (
    add_line_item,
    answer_clarification,
    calculate_business_zakat,
    get_business_zakat_due,
    get_net_zakatable,
    get_pending_clarifications,
    get_total_deductible,
    get_total_exempt,
    get_total_not_deductible,
    get_total_zakatable,
    remove_line_item,
    set_business_value,
    set_company_info,
    set_line_items,
    update_line_item,
)
from zakat_engine.services.classifier import create_business_line_item
from zakat_engine.services.errors import ValidationError
from zakat_engine.services.models import BusinessAssets, BusinessLineItem, CalculatorSettings


def _balance_sheet():
    assets = set_company_info(BusinessAssets(), 'Acme Trading', 'Retail')
    assets = set_business_value(assets, 'cash', 10000)
    assets = set_business_value(assets, 'inventory', 5000)
    for name, amount in (
        ('Accounts Receivable', 2000),
        ('Accounts Payable', 3000),
        ('Goodwill', 4000),
        ('Bank Loan', 6000),
        ('Equipment', 8000),
    ):
        assets = add_line_item(assets, create_business_line_item(name, amount))
    return assets


class TestBusinessValues:
    """Tests for company info and base values."""

    def test_company_info(self):
        assets = set_company_info(BusinessAssets(), 'Acme', None)
        assert assets.company_name == 'Acme'
        assert assets.industry_type == ''

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError):
            set_business_value(BusinessAssets(), 'goodwill', 10)

    def test_negative_value_rejected(self):
        with pytest.raises(ValidationError):
            set_business_value(BusinessAssets(), 'cash', -10)


class TestTotals:
    """Tests for per-classification totals."""

    def test_totals(self):
        assets = _balance_sheet()
        assert get_total_zakatable(assets) == 17000.0
        assert get_total_deductible(assets) == 3000.0
        assert get_total_exempt(assets) == 4000.0
        assert get_total_not_deductible(assets) == 6000.0
        assert get_net_zakatable(assets) == 14000.0

    def test_pending_items_count_on_neither_side(self):
        assets = _balance_sheet()
        pending = get_pending_clarifications(assets)
        assert [item.name for item in pending] == ['Equipment']

    def test_extracted_component_is_zero(self):
        result = get_business_zakat_due(_balance_sheet(), 5950, 'islamic')
        assert result['extracted'] == 0.0
        assert result['total'] == pytest.approx(350.0)

    def test_market_value_used_for_trading_items(self):
        assets = _balance_sheet()
        equipment = get_pending_clarifications(assets)[0]
        assets = answer_clarification(assets, equipment.id, 'trading', market_value=9000)
        assert get_total_zakatable(assets) == 26000.0
        assert get_pending_clarifications(assets) == []

    def test_operations_answer_makes_item_exempt(self):
        assets = _balance_sheet()
        equipment = get_pending_clarifications(assets)[0]
        assets = answer_clarification(assets, equipment.id, 'operations')
        assert get_total_exempt(assets) == 12000.0


class TestLineItemReducers:
    """Tests for add/update/remove/set of line items."""

    def test_duplicate_id_rejected(self):
        item = create_business_line_item('Inventory', 10)
        assets = add_line_item(BusinessAssets(), item)
        with pytest.raises(ValidationError):
            add_line_item(assets, item)

    def test_manual_reclassification(self):
        assets = _balance_sheet()
        goodwill = next(item for item in assets.line_items if item.name == 'Goodwill')
        assets = update_line_item(assets, goodwill.id, {'classification': ZAKATABLE})
        assert get_total_zakatable(assets) == 21000.0

    def test_invalid_classification_rejected(self):
        assets = _balance_sheet()
        with pytest.raises(ValidationError):
            update_line_item(assets, assets.line_items[0].id, {'classification': 'taxable'})

    def test_update_unknown_id_is_noop(self):
        assets = _balance_sheet()
        assert update_line_item(assets, 'missing', {'amount': 5}) is assets

    def test_invalid_answer_rejected_for_unknown_id(self):
        with pytest.raises(ValidationError, match='clarification answer'):
            answer_clarification(_balance_sheet(), 'missing', 'maybe')

    def test_valid_answer_for_unknown_id_is_noop(self):
        assets = _balance_sheet()
        assert answer_clarification(assets, 'missing', 'trading').line_items == assets.line_items

    def test_remove(self):
        assets = _balance_sheet()
        loan = next(item for item in assets.line_items if item.name == 'Bank Loan')
        assets = remove_line_item(assets, loan.id)
        assert get_total_not_deductible(assets) == 0

    def test_set_line_items_requires_unique_ids(self):
        item = BusinessLineItem(id='x', name='A', amount=1, classification=EXEMPT)
        with pytest.raises(ValidationError):
            set_line_items(BusinessAssets(), [item, item])

    def test_set_line_items_replaces(self):
        item = BusinessLineItem(id='x', name='A', amount=1, classification=NEEDS_CLARIFICATION)
        assets = set_line_items(_balance_sheet(), [item])
        assert assets.line_items == (item,)


class TestCalculateBusinessZakat:
    """Tests for calculate_business_zakat function."""

    def test_result(self):
        result = calculate_business_zakat(_balance_sheet(), CalculatorSettings(gold_price_per_gram=70))
        assert result['company_name'] == 'Acme Trading'
        assert result['net_wealth'] == 14000.0
        assert result['meets_nisab'] is True
        assert result['zakat_due'] == 350.0
        assert result['pending_clarifications'] == 1
        assert [i['name'] for i in result['line_items']['exempt']] == ['Goodwill']

    def test_below_nisab(self):
        assets = set_business_value(BusinessAssets(), 'cash', 1000)
        result = calculate_business_zakat(assets, CalculatorSettings(gold_price_per_gram=70))
        assert result['zakat_due'] == 0.0
        assert result['nisab']['status'] == 'below'
