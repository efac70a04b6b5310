"""Pytest fixtures for zakat engine tests."""
import pytest
from datetime import date, datetime, timezone

from zakat_engine import create_app
from zakat_engine.services.time_provider import TimeProvider


# Fixed instant for deterministic history stamps and hawl checks
FROZEN_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def app(tmp_path):
    """Create application for testing.

    Yields:
        Flask application with its state database under tmp_path.
    """
    app = create_app({
        'TESTING': True,
        'DATA_DIR': str(tmp_path),
        'ZAKAT_DEFAULT_GOLD_PRICE': 70.0,
        'ZAKAT_DEFAULT_CALENDAR': 'islamic',
        'ZAKAT_BASE_CURRENCY': 'USD',
    })
    yield app


@pytest.fixture
def client(app):
    """Create test client.

    Args:
        app: Flask application fixture.

    Yields:
        Flask test client for making requests.
    """
    with app.test_client() as client:
        yield client


@pytest.fixture
def db(app):
    """Database connection inside an app context."""
    from zakat_engine.db import get_db

    with app.app_context():
        yield get_db()


@pytest.fixture
def runner(app):
    """Click runner bound to the app's CLI."""
    return app.test_cli_runner()


@pytest.fixture
def frozen_time():
    """Fixture that freezes time to FROZEN_NOW (2026-01-15 12:00 UTC).

    Yields the TimeProvider for use in tests. Automatically resets
    the default TimeProvider after the test completes.
    """
    provider = TimeProvider(frozen=FROZEN_NOW)
    TimeProvider.set_default(provider)
    yield provider
    TimeProvider.reset_default()


@pytest.fixture
def frozen_today():
    """Returns the frozen date value for assertions."""
    return date(2026, 1, 15)
