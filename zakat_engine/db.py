"""SQLite connection management for calculator state and history."""
import logging
import os
import sqlite3
from flask import current_app, g

logger = logging.getLogger(__name__)

DB_FILENAME = 'zakat.sqlite'


def get_db_path() -> str:
    """Path of the state database under DATA_DIR."""
    data_dir = current_app.config['DATA_DIR']
    os.makedirs(data_dir, exist_ok=True)
    return os.path.join(data_dir, DB_FILENAME)


def get_db() -> sqlite3.Connection:
    """Per-request connection stored on ``g``.

    Gunicorn workers share the file, so writers wait on a busy database
    instead of failing straight away.
    """
    if 'db' not in g:
        g.db = sqlite3.connect(get_db_path(), timeout=10)
        g.db.row_factory = sqlite3.Row
        g.db.execute('PRAGMA journal_mode=WAL')
    return g.db


def close_db(e=None):
    db = g.pop('db', None)
    if db is not None:
        db.close()


def init_db():
    """Create missing tables. Safe to run repeatedly."""
    db = get_db()
    db.executescript(get_schema())
    db.commit()
    logger.debug(f"Schema ready at {get_db_path()}")


def get_schema() -> str:
    return '''
-- Calculator stores, one JSON document per namespaced key:
-- zakat.individual-calculator, zakat.business-calculator,
-- zakat.history, zakat.settings
CREATE TABLE IF NOT EXISTS state_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);
'''


def init_app(app):
    """Close connections on teardown and make sure the schema exists."""
    app.teardown_appcontext(close_db)

    with app.app_context():
        init_db()
