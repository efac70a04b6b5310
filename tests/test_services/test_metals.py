"""Tests for gold valuation."""
import pytest

from zakat_engine.services.errors import ValidationError
from zakat_engine.services.metals import (
    add_gold_entry,
    calculate_gold_subtotal,
    calculate_pure_grams,
    create_gold_entry,
    gold_entry_value,
    gold_value,
    purity_multiplier,
    remove_gold_entry,
    update_gold_entry,
)
from zakat_engine.services.models import GoldEntry, IndividualAssets


class TestPurityMultiplier:
    """Tests for purity_multiplier function."""

    @pytest.mark.parametrize('karat,expected', [('24k', 1.0), ('21k', 0.875), ('18k', 0.75)])
    def test_known_karats(self, karat, expected):
        assert purity_multiplier(karat) == expected

    @pytest.mark.parametrize('karat', ['22k', '24', 24, None, ''])
    def test_unknown_karat_rejected(self, karat):
        with pytest.raises(ValidationError, match='Invalid karat'):
            purity_multiplier(karat)


class TestGoldValue:
    """Tests for gold_entry_value and gold_value."""

    def test_21k_entry(self):
        """20g of 21k at 70/g is 20 * 70 * 0.875 = 1225."""
        entry = GoldEntry(id='g1', karat='21k', weight_grams=20, price_per_gram=70)
        assert gold_entry_value(entry) == pytest.approx(1225.0)

    def test_10g_21k_at_70(self):
        entry = GoldEntry(id='g1', karat='21k', weight_grams=10, price_per_gram=70)
        assert gold_entry_value(entry) == pytest.approx(612.5)

    def test_sum_of_entries(self):
        entries = [
            GoldEntry(id='g1', karat='24k', weight_grams=10, price_per_gram=70),
            GoldEntry(id='g2', karat='18k', weight_grams=10, price_per_gram=70),
        ]
        assert gold_value(entries) == pytest.approx(700.0 + 525.0)

    def test_empty_list_is_zero(self):
        assert gold_value([]) == 0

    def test_pure_grams(self):
        assert calculate_pure_grams(10.0, '18k') == 7.5


class TestGoldReducers:
    """Tests for adding, updating and removing gold entries."""

    def test_create_validates(self):
        with pytest.raises(ValidationError):
            create_gold_entry('21k', 0, 70)
        with pytest.raises(ValidationError):
            create_gold_entry('21k', 10, -1)
        with pytest.raises(ValidationError):
            create_gold_entry('14k', 10, 70)

    def test_add_and_remove_by_id(self):
        first = create_gold_entry('24k', 10, 70)
        second = create_gold_entry('21k', 5, 70)
        assets = add_gold_entry(add_gold_entry(IndividualAssets(), first), second)
        assert [g.id for g in assets.gold] == [first.id, second.id]

        assets = remove_gold_entry(assets, first.id)
        assert [g.id for g in assets.gold] == [second.id]

    def test_remove_unknown_is_noop(self):
        assets = add_gold_entry(IndividualAssets(), create_gold_entry('24k', 10, 70))
        assert remove_gold_entry(assets, 'missing') is assets

    def test_duplicate_id_rejected(self):
        entry = create_gold_entry('24k', 10, 70)
        assets = add_gold_entry(IndividualAssets(), entry)
        with pytest.raises(ValidationError):
            add_gold_entry(assets, entry)

    def test_update_by_id_targets_one_entry(self):
        """Entries are addressed by id, not by position."""
        first = create_gold_entry('24k', 10, 70)
        second = create_gold_entry('24k', 10, 70)
        assets = add_gold_entry(add_gold_entry(IndividualAssets(), first), second)
        assets = update_gold_entry(assets, second.id, {'karat': '18k'})
        assert assets.gold[0].karat == '24k'
        assert assets.gold[1].karat == '18k'

    def test_update_rejects_bad_karat(self):
        entry = create_gold_entry('24k', 10, 70)
        assets = add_gold_entry(IndividualAssets(), entry)
        with pytest.raises(ValidationError):
            update_gold_entry(assets, entry.id, {'karat': '9k'})

    def test_update_unknown_is_noop(self):
        assets = add_gold_entry(IndividualAssets(), create_gold_entry('24k', 10, 70))
        assert update_gold_entry(assets, 'missing', {'weight_grams': 5}) is assets


class TestGoldSubtotal:
    """Tests for calculate_gold_subtotal function."""

    def test_breakdown(self):
        entries = [
            GoldEntry(id='g1', karat='24k', weight_grams=10, price_per_gram=70),
            GoldEntry(id='g2', karat='21k', weight_grams=20, price_per_gram=70),
        ]
        result = calculate_gold_subtotal(entries)
        assert len(result['items']) == 2
        assert result['items'][1]['pure_grams'] == 17.5
        assert result['total_pure_grams'] == 27.5
        assert result['total'] == pytest.approx(1925.0)

    def test_empty(self):
        assert calculate_gold_subtotal([]) == {'items': [], 'total_pure_grams': 0, 'total': 0}
