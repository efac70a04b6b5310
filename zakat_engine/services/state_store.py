"""Persistence of calculator stores as namespaced JSON documents.

Each top-level store is one row in ``state_store``. A save replaces the
whole document in a single statement. Loads go through the records'
``from_dict`` so documents written by older layouts, or missing fields,
come back with zero / empty defaults.
"""
import json
import logging
import sqlite3

from zakat_engine.constants import STATE_KEYS
from .models import (
    BusinessAssets,
    CalculatorSettings,
    IndividualCalculatorState,
    ZakatHistoryEntry,
)

logger = logging.getLogger(__name__)


def save_state(db: sqlite3.Connection, key: str, payload: dict) -> None:
    """Write one store document."""
    db.execute(
        "INSERT OR REPLACE INTO state_store (key, value, updated_at) VALUES (?, ?, datetime('now'))",
        (key, json.dumps(payload)),
    )
    db.commit()
    logger.debug(f"Saved state {key}")


def load_state(db: sqlite3.Connection, key: str) -> dict | None:
    """Read one store document, or None when absent or unreadable."""
    row = db.execute('SELECT value FROM state_store WHERE key = ?', (key,)).fetchone()
    if row is None:
        return None
    try:
        payload = json.loads(row['value'])
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"Discarding unreadable state {key}: {e}")
        return None
    if not isinstance(payload, dict):
        logger.warning(f"Discarding state {key}: expected an object, got {type(payload).__name__}")
        return None
    return payload


def delete_state(db: sqlite3.Connection, key: str) -> None:
    db.execute('DELETE FROM state_store WHERE key = ?', (key,))
    db.commit()


def load_individual_state(db: sqlite3.Connection) -> IndividualCalculatorState:
    return IndividualCalculatorState.from_dict(load_state(db, STATE_KEYS['individual']) or {})


def save_individual_state(db: sqlite3.Connection, state: IndividualCalculatorState) -> None:
    save_state(db, STATE_KEYS['individual'], state.to_dict())


def load_business_state(db: sqlite3.Connection) -> BusinessAssets:
    return BusinessAssets.from_dict(load_state(db, STATE_KEYS['business']) or {})


def save_business_state(db: sqlite3.Connection, assets: BusinessAssets) -> None:
    save_state(db, STATE_KEYS['business'], assets.to_dict())


def load_settings(db: sqlite3.Connection, defaults: CalculatorSettings | None = None) -> CalculatorSettings:
    payload = load_state(db, STATE_KEYS['settings'])
    if payload is None:
        return defaults or CalculatorSettings()
    return CalculatorSettings.from_dict(payload)


def save_settings(db: sqlite3.Connection, settings: CalculatorSettings) -> None:
    save_state(db, STATE_KEYS['settings'], settings.to_dict())


def load_history(db: sqlite3.Connection) -> tuple:
    payload = load_state(db, STATE_KEYS['history']) or {}
    entries = payload.get('entries')
    if not isinstance(entries, list):
        return ()
    return tuple(ZakatHistoryEntry.from_dict(e) for e in entries if isinstance(e, dict))


def save_history(db: sqlite3.Connection, history: tuple) -> None:
    save_state(db, STATE_KEYS['history'], {'entries': [e.to_dict() for e in history]})

