"""Tests for the SQLite-backed state store."""
from zakat_engine.constants import STATE_KEYS
from zakat_engine.data.categories import AssetField
from zakat_engine.services.individual import set_asset_value
from zakat_engine.services.models import (
    BusinessAssets,
    CalculatorSettings,
    IndividualAssets,
    IndividualCalculatorState,
)
from zakat_engine.services.history import add_history_entry, build_history_entry
from zakat_engine.services.state_store import (
    delete_state,
    load_business_state,
    load_history,
    load_individual_state,
    load_settings,
    load_state,
    save_business_state,
    save_history,
    save_individual_state,
    save_settings,
    save_state,
)


class TestRawState:
    """Tests for save_state/load_state."""

    def test_missing_key(self, db):
        assert load_state(db, 'zakat.nothing') is None

    def test_round_trip(self, db):
        save_state(db, 'zakat.test', {'a': 1})
        assert load_state(db, 'zakat.test') == {'a': 1}

    def test_overwrite(self, db):
        save_state(db, 'zakat.test', {'a': 1})
        save_state(db, 'zakat.test', {'b': 2})
        assert load_state(db, 'zakat.test') == {'b': 2}

    def test_corrupt_document_ignored(self, db):
        db.execute('INSERT INTO state_store (key, value) VALUES (?, ?)', ('zakat.bad', '{not json'))
        db.commit()
        assert load_state(db, 'zakat.bad') is None

    def test_non_object_document_ignored(self, db):
        save_state(db, 'zakat.list', [1, 2])
        assert load_state(db, 'zakat.list') is None

    def test_delete(self, db):
        save_state(db, 'zakat.test', {'a': 1})
        delete_state(db, 'zakat.test')
        assert load_state(db, 'zakat.test') is None


class TestTypedStores:
    """Tests for the typed store helpers."""

    def test_individual(self, db):
        state = IndividualCalculatorState(
            assets=set_asset_value(IndividualAssets(), 'cash_on_hand', 500),
            base_currency='EUR',
        )
        save_individual_state(db, state)
        loaded = load_individual_state(db)
        assert loaded == state
        assert loaded.assets.total(AssetField.CASH_ON_HAND) == 500.0

    def test_individual_defaults_when_absent(self, db):
        assert load_individual_state(db) == IndividualCalculatorState()

    def test_business(self, db):
        assets = BusinessAssets(company_name='Acme', cash=100.0)
        save_business_state(db, assets)
        assert load_business_state(db) == assets

    def test_settings(self, db):
        save_settings(db, CalculatorSettings(gold_price_per_gram=80.0, calendar_type='western'))
        loaded = load_settings(db)
        assert loaded.gold_price_per_gram == 80.0
        assert loaded.calendar_type == 'western'

    def test_settings_default(self, db):
        defaults = CalculatorSettings(gold_price_per_gram=90.0)
        assert load_settings(db, defaults) is defaults

    def test_history(self, db, frozen_time):
        entry = build_history_entry('company', 10, 0, 10, 5950, 0, 'islamic', 'USD')
        save_history(db, add_history_entry((), entry))
        assert load_history(db) == (entry,)
        assert load_state(db, STATE_KEYS['history'])['entries'][0]['id'] == entry.id

    def test_history_empty(self, db):
        assert load_history(db) == ()
