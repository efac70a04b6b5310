"""Tests for the sub-entry ledger."""
import pytest

from zakat_engine.data.categories import AssetField
from zakat_engine.services.errors import ValidationError
from zakat_engine.services.ledger import (
    add_entry,
    create_sub_entry,
    field_total,
    generate_entry_id,
    recompute_converted_amount,
    remove_entry,
    update_entry,
)
from zakat_engine.services.models import IndividualAssets


def _assets_with(*entries, asset_field=AssetField.TRADING_STOCKS):
    assets = IndividualAssets()
    for entry in entries:
        assets = add_entry(assets, asset_field, entry)
    return assets


class TestCreateSubEntry:
    """Tests for create_sub_entry function."""

    def test_converted_amount_uses_rate(self):
        """EUR 100 at 1.1 converts to 110."""
        entry = create_sub_entry('trading_stocks', 'ETF', 100, 'EUR', 1.1)
        assert entry.converted_amount == pytest.approx(110.0)
        assert entry.currency == 'EUR'

    def test_currency_is_uppercased(self):
        entry = create_sub_entry(AssetField.CASH_ON_HAND, 'Wallet', 10, 'cad', 0.73)
        assert entry.currency == 'CAD'

    def test_name_defaults_to_field_label(self):
        """A blank name falls back to the field's label."""
        entry = create_sub_entry(AssetField.GOLD_INVESTMENTS, '', 10, 'USD')
        assert entry.name == AssetField.GOLD_INVESTMENTS.label

    def test_ids_are_unique(self):
        """Two entries created back to back get different ids."""
        first = create_sub_entry('trading_stocks', 'A', 1, 'USD')
        second = create_sub_entry('trading_stocks', 'A', 1, 'USD')
        assert first.id != second.id

    @pytest.mark.parametrize('amount,rate', [(0, 1.0), (-5, 1.0), (10, 0), (10, -1.2)])
    def test_rejects_non_positive_values(self, amount, rate):
        """Amount and exchange rate must be greater than zero."""
        with pytest.raises(ValidationError):
            create_sub_entry('trading_stocks', 'Bad', amount, 'USD', rate)

    def test_rejects_unknown_field(self):
        with pytest.raises(ValidationError, match='Unknown asset field'):
            create_sub_entry('yachts', 'Boat', 100, 'USD')

    def test_rejects_missing_currency(self):
        with pytest.raises(ValidationError):
            create_sub_entry('trading_stocks', 'ETF', 100, '')


class TestAddEntry:
    """Tests for add_entry function."""

    def test_total_tracks_entries(self):
        """Field total equals the sum of converted amounts."""
        a = create_sub_entry('trading_stocks', 'A', 100, 'EUR', 1.1)
        b = create_sub_entry('trading_stocks', 'B', 50, 'USD', 1.0)
        assets = _assets_with(a, b)
        assert assets.total(AssetField.TRADING_STOCKS) == pytest.approx(160.0)
        assert len(assets.entries_for(AssetField.TRADING_STOCKS)) == 2

    def test_original_snapshot_untouched(self):
        """Reducers return a new snapshot."""
        before = IndividualAssets()
        after = add_entry(before, 'trading_stocks', create_sub_entry('trading_stocks', 'A', 100, 'USD'))
        assert before.total(AssetField.TRADING_STOCKS) == 0.0
        assert before.entries_for(AssetField.TRADING_STOCKS) == ()
        assert after.total(AssetField.TRADING_STOCKS) == 100.0

    def test_duplicate_id_rejected(self):
        entry = create_sub_entry('trading_stocks', 'A', 100, 'USD')
        assets = _assets_with(entry)
        with pytest.raises(ValidationError, match='Duplicate'):
            add_entry(assets, 'trading_stocks', entry)

    def test_other_fields_unaffected(self):
        assets = _assets_with(create_sub_entry('trading_stocks', 'A', 100, 'USD'))
        assert assets.total(AssetField.CASH_ON_HAND) == 0.0

    @pytest.mark.parametrize('order', [(0, 1, 2), (2, 1, 0), (1, 2, 0)])
    def test_total_independent_of_order(self, order):
        """Insertion order does not change the field total."""
        entries = [
            create_sub_entry('trading_stocks', 'A', 100, 'EUR', 1.1),
            create_sub_entry('trading_stocks', 'B', 33.3, 'GBP', 1.27),
            create_sub_entry('trading_stocks', 'C', 0.01, 'USD'),
        ]
        assets = _assets_with(*(entries[i] for i in order))
        assert assets.total(AssetField.TRADING_STOCKS) == pytest.approx(110.0 + 33.3 * 1.27 + 0.01)


class TestUpdateEntry:
    """Tests for update_entry function."""

    def test_amount_change_recomputes_conversion(self):
        """Patching amount rebuilds converted_amount and the total."""
        entry = create_sub_entry('trading_stocks', 'A', 100, 'EUR', 1.1)
        assets = update_entry(_assets_with(entry), 'trading_stocks', entry.id, {'amount': 200})
        updated = assets.entries_for(AssetField.TRADING_STOCKS)[0]
        assert updated.converted_amount == pytest.approx(220.0)
        assert assets.total(AssetField.TRADING_STOCKS) == pytest.approx(220.0)

    def test_rate_change_recomputes_conversion(self):
        entry = create_sub_entry('trading_stocks', 'A', 100, 'EUR', 1.1)
        assets = update_entry(_assets_with(entry), 'trading_stocks', entry.id, {'exchange_rate': 1.2})
        assert assets.total(AssetField.TRADING_STOCKS) == pytest.approx(120.0)

    def test_explicit_converted_amount_wins(self):
        entry = create_sub_entry('trading_stocks', 'A', 100, 'EUR', 1.1)
        assets = update_entry(
            _assets_with(entry), 'trading_stocks', entry.id, {'amount': 200, 'converted_amount': 205.0}
        )
        assert assets.total(AssetField.TRADING_STOCKS) == 205.0

    def test_recompute_disabled_keeps_stored_value(self):
        """With recompute=False the caller owns converted_amount."""
        entry = create_sub_entry('trading_stocks', 'A', 100, 'EUR', 1.1)
        assets = update_entry(_assets_with(entry), 'trading_stocks', entry.id, {'amount': 200}, recompute=False)
        stored = assets.entries_for(AssetField.TRADING_STOCKS)[0]
        assert stored.amount == 200
        assert stored.converted_amount == pytest.approx(110.0)
        assert assets.total(AssetField.TRADING_STOCKS) == pytest.approx(110.0)
        assert recompute_converted_amount(stored).converted_amount == pytest.approx(220.0)

    def test_name_change_keeps_total(self):
        entry = create_sub_entry('trading_stocks', 'A', 100, 'USD')
        assets = update_entry(_assets_with(entry), 'trading_stocks', entry.id, {'name': 'Renamed'})
        assert assets.entries_for(AssetField.TRADING_STOCKS)[0].name == 'Renamed'
        assert assets.total(AssetField.TRADING_STOCKS) == 100.0

    def test_unknown_id_is_noop(self):
        assets = _assets_with(create_sub_entry('trading_stocks', 'A', 100, 'USD'))
        assert update_entry(assets, 'trading_stocks', 'missing', {'amount': 5}) is assets

    def test_unknown_patch_key_rejected(self):
        entry = create_sub_entry('trading_stocks', 'A', 100, 'USD')
        with pytest.raises(ValidationError):
            update_entry(_assets_with(entry), 'trading_stocks', entry.id, {'id': 'other'})

    def test_invalid_amount_rejected(self):
        entry = create_sub_entry('trading_stocks', 'A', 100, 'USD')
        with pytest.raises(ValidationError):
            update_entry(_assets_with(entry), 'trading_stocks', entry.id, {'amount': -1})


class TestRemoveEntry:
    """Tests for remove_entry function."""

    def test_remove_rebuilds_total(self):
        a = create_sub_entry('trading_stocks', 'A', 100, 'USD')
        b = create_sub_entry('trading_stocks', 'B', 40, 'USD')
        assets = remove_entry(_assets_with(a, b), 'trading_stocks', a.id)
        assert assets.total(AssetField.TRADING_STOCKS) == 40.0
        assert [e.id for e in assets.entries_for(AssetField.TRADING_STOCKS)] == [b.id]

    def test_remove_last_entry_zeroes_total(self):
        a = create_sub_entry('trading_stocks', 'A', 100, 'USD')
        assets = remove_entry(_assets_with(a), 'trading_stocks', a.id)
        assert assets.total(AssetField.TRADING_STOCKS) == 0.0

    def test_unknown_id_is_noop(self):
        assets = _assets_with(create_sub_entry('trading_stocks', 'A', 100, 'USD'))
        assert remove_entry(assets, 'trading_stocks', 'missing') is assets


class TestHelpers:
    """Tests for field_total and generate_entry_id."""

    def test_field_total_of_empty_list(self):
        assert field_total([]) == 0

    def test_generated_id_has_prefix(self):
        assert generate_entry_id('gold').startswith('gold-')


SEQUENCE_FIELDS = (AssetField.ETFS, AssetField.TRADING_STOCKS, AssetField.SAVINGS_ACCOUNT)


class TestOperationSequences:
    """Field totals stay equal to their entries across mixed edits."""

    @pytest.mark.parametrize('steps', [
        [
            ('add', AssetField.ETFS, ('a', 100, 1.1)),
            ('add', AssetField.ETFS, ('b', 40, 1.27)),
            ('update', AssetField.ETFS, ('a', {'amount': 250})),
            ('remove', AssetField.ETFS, 'b'),
            ('add', AssetField.TRADING_STOCKS, ('c', 33.3, 0.91)),
            ('update', AssetField.TRADING_STOCKS, ('c', {'exchange_rate': 1.05})),
        ],
        [
            ('add', AssetField.SAVINGS_ACCOUNT, ('s1', 5000, 1.0)),
            ('add', AssetField.ETFS, ('e1', 12.5, 3.2)),
            ('add', AssetField.SAVINGS_ACCOUNT, ('s2', 0.01, 150)),
            ('remove', AssetField.SAVINGS_ACCOUNT, 's1'),
            ('remove', AssetField.SAVINGS_ACCOUNT, 's2'),
            ('add', AssetField.SAVINGS_ACCOUNT, ('s3', 75, 1.0)),
            ('update', AssetField.ETFS, ('e1', {'converted_amount': 41})),
            ('remove', AssetField.ETFS, 'e1'),
        ],
        [
            ('add', AssetField.TRADING_STOCKS, ('t1', 10, 2.0)),
            ('add', AssetField.TRADING_STOCKS, ('t2', 20, 2.0)),
            ('add', AssetField.TRADING_STOCKS, ('t3', 30, 2.0)),
            ('update', AssetField.TRADING_STOCKS, ('t2', {'amount': 1, 'exchange_rate': 0.5})),
            ('remove', AssetField.TRADING_STOCKS, 't1'),
            ('update', AssetField.TRADING_STOCKS, ('t3', {'name': 'renamed'})),
            ('remove', AssetField.TRADING_STOCKS, 'missing'),
            ('add', AssetField.ETFS, ('e2', 7, 1.4)),
        ],
    ])
    def test_totals_match_entries_after_every_step(self, steps):
        assets = IndividualAssets()
        ids = {'missing': 'no-such-id'}
        for kind, asset_field, arg in steps:
            if kind == 'add':
                name, amount, rate = arg
                entry = create_sub_entry(asset_field, name, amount, 'EUR', rate)
                ids[name] = entry.id
                assets = add_entry(assets, asset_field, entry)
            elif kind == 'update':
                name, patch = arg
                assets = update_entry(assets, asset_field, ids[name], patch)
            else:
                assets = remove_entry(assets, asset_field, ids[arg])

            for f in SEQUENCE_FIELDS:
                assert assets.total(f) == pytest.approx(field_total(assets.entries_for(f)))
