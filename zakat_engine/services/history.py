"""Zakat history: immutable snapshots of finished calculations.

History is a tuple of ``ZakatHistoryEntry`` newest first. Entries are never
edited after creation except for the ``paid`` flag.
"""
import logging
from dataclasses import replace
from typing import Optional

from zakat_engine.constants import ENTITY_TYPES
from .calc import meets_nisab, select_zakat_rate
from .errors import require_choice
from .hawl import approximate_hijri_date, approximate_hijri_year
from .ledger import generate_entry_id
from .models import ZakatHistoryEntry
from .time_provider import TimeProvider, get_now

logger = logging.getLogger(__name__)


def build_history_entry(
    entity_type: str,
    total_assets: float,
    total_deductions: float,
    net_wealth: float,
    nisab_threshold: float,
    zakat_due: float,
    calendar_type: str,
    currency: str,
    time_provider: Optional[TimeProvider] = None,
) -> ZakatHistoryEntry:
    """Stamp a finished calculation with the current date and Hijri label."""
    require_choice(entity_type, ENTITY_TYPES, 'entity type')
    select_zakat_rate(calendar_type)
    now = get_now(time_provider)
    hijri_year = f'{approximate_hijri_year(now.year)} AH'
    return ZakatHistoryEntry(
        id=generate_entry_id('zakat'),
        date=now.isoformat(),
        year=now.year,
        hijri_year=hijri_year,
        hijri_date=approximate_hijri_date(now.date()),
        label=f'Zakat {now.year} / {hijri_year}',
        entity_type=entity_type,
        total_assets=total_assets,
        total_deductions=total_deductions,
        net_wealth=net_wealth,
        nisab_threshold=nisab_threshold,
        zakat_due=zakat_due,
        currency=currency,
        calendar_type=calendar_type,
        meets_nisab=meets_nisab(net_wealth, nisab_threshold),
    )


def add_history_entry(history: tuple, entry: ZakatHistoryEntry) -> tuple:
    logger.info(f"Recording {entry.entity_type} zakat {entry.zakat_due:.2f} {entry.currency} ({entry.id})")
    return (entry,) + tuple(history)


def remove_history_entry(history: tuple, entry_id: str) -> tuple:
    return tuple(e for e in history if e.id != entry_id)


def mark_paid(history: tuple, entry_id: str, paid: bool = True) -> tuple:
    """Set the paid flag on one entry. Unknown ids are a no-op."""
    return tuple(replace(e, paid=paid) if e.id == entry_id else e for e in history)


def entries_by_year(history: tuple, year: int) -> list[ZakatHistoryEntry]:
    return [e for e in history if e.year == year]


def clear_history(history: tuple) -> tuple:
    return ()


def get_history_entry(history: tuple, entry_id: str) -> Optional[ZakatHistoryEntry]:
    return next((e for e in history if e.id == entry_id), None)
