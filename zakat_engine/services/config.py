"""Configuration service for calculator defaults and logging."""
import logging
import os

from zakat_engine.constants import (
    CALENDAR_TYPES,
    DEFAULT_BASE_CURRENCY,
    DEFAULT_CALENDAR_TYPE,
    DEFAULT_GOLD_PRICE_PER_GRAM,
)

logger = logging.getLogger(__name__)


def get_data_dir() -> str:
    """Directory holding the SQLite state database.

    Controlled by DATA_DIR env var (default: ./data).
    """
    return os.environ.get('DATA_DIR', './data')


def get_default_gold_price() -> float:
    """Gold price per gram used when a request does not supply one.

    Controlled by ZAKAT_DEFAULT_GOLD_PRICE env var (default: 70.0).
    """
    raw = os.environ.get('ZAKAT_DEFAULT_GOLD_PRICE')
    if not raw:
        return DEFAULT_GOLD_PRICE_PER_GRAM
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid ZAKAT_DEFAULT_GOLD_PRICE {raw!r}, using {DEFAULT_GOLD_PRICE_PER_GRAM}")
        return DEFAULT_GOLD_PRICE_PER_GRAM


def get_default_calendar_type() -> str:
    """Controlled by ZAKAT_DEFAULT_CALENDAR env var (default: islamic)."""
    value = os.environ.get('ZAKAT_DEFAULT_CALENDAR', DEFAULT_CALENDAR_TYPE).lower()
    return value if value in CALENDAR_TYPES else DEFAULT_CALENDAR_TYPE


def get_base_currency() -> str:
    """Controlled by ZAKAT_BASE_CURRENCY env var (default: USD)."""
    return os.environ.get('ZAKAT_BASE_CURRENCY', DEFAULT_BASE_CURRENCY).upper()


def get_log_level() -> str:
    """Controlled by ZAKAT_LOG_LEVEL env var (default: INFO)."""
    level = os.environ.get('ZAKAT_LOG_LEVEL', 'INFO').upper()
    return level if level in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL') else 'INFO'


def configure_logging() -> None:
    """Attach a stream handler to the package logger once."""
    package_logger = logging.getLogger('zakat_engine')
    package_logger.setLevel(get_log_level())
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s: %(message)s'))
        package_logger.addHandler(handler)
