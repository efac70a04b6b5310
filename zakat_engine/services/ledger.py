"""Sub-entry ledger for individual asset fields.

Each reducer takes an ``IndividualAssets`` snapshot and returns a new one.
The touched field's total is always rebuilt as the exact sum of its
entries' ``converted_amount`` so it can never drift from the list.
"""
import itertools
import logging
import secrets
from dataclasses import replace

from zakat_engine.data.categories import AssetField, parse_asset_field
from .errors import ValidationError, require_non_negative, require_positive
from .fx import convert_amount
from .models import AssetSubEntry, IndividualAssets

logger = logging.getLogger(__name__)

_id_counter = itertools.count(1)

PATCHABLE_KEYS = ('name', 'description', 'amount', 'currency', 'exchange_rate', 'converted_amount')


def generate_entry_id(prefix: str) -> str:
    """Session-unique id: prefix, process-wide counter, random suffix."""
    return f'{prefix}-{next(_id_counter)}-{secrets.token_hex(4)}'


def resolve_field(asset_field) -> AssetField:
    try:
        return parse_asset_field(asset_field)
    except ValueError:
        raise ValidationError(f'Unknown asset field: {asset_field}')


def create_sub_entry(
    asset_field,
    name: str,
    amount: float,
    currency: str,
    exchange_rate: float = 1.0,
    description: str | None = None,
) -> AssetSubEntry:
    """Validate raw input and build an entry with its converted amount.

    Raises:
        ValidationError: If amount or exchange rate is not a positive finite number
    """
    asset_field = resolve_field(asset_field)
    amount = require_positive(amount, 'Amount')
    exchange_rate = require_positive(exchange_rate, 'Exchange rate')
    if not isinstance(currency, str) or not currency:
        raise ValidationError('Currency is required')
    return AssetSubEntry(
        id=generate_entry_id(asset_field.value),
        name=name or asset_field.label,
        description=description,
        amount=amount,
        currency=currency.upper(),
        exchange_rate=exchange_rate,
        converted_amount=convert_amount(amount, exchange_rate),
    )


def recompute_converted_amount(entry: AssetSubEntry) -> AssetSubEntry:
    """Return the entry with converted_amount rebuilt from amount and rate."""
    return replace(entry, converted_amount=convert_amount(entry.amount, entry.exchange_rate))


def field_total(entries) -> float:
    return sum(e.converted_amount for e in entries)


def _with_entries(assets: IndividualAssets, asset_field: AssetField, entries: tuple) -> IndividualAssets:
    new_entries = dict(assets.entries)
    new_entries[asset_field] = entries
    new_totals = dict(assets.totals)
    new_totals[asset_field] = field_total(entries)
    return replace(assets, totals=new_totals, entries=new_entries)


def add_entry(assets: IndividualAssets, asset_field, entry: AssetSubEntry) -> IndividualAssets:
    """Append an entry to a field and rebuild that field's total."""
    asset_field = resolve_field(asset_field)
    current = assets.entries_for(asset_field)
    if any(e.id == entry.id for e in current):
        raise ValidationError(f'Duplicate entry id: {entry.id}')
    logger.debug(f"Adding entry {entry.id} to {asset_field.value}")
    return _with_entries(assets, asset_field, current + (entry,))


def _validate_patch(patch: dict) -> dict:
    unknown = set(patch) - set(PATCHABLE_KEYS)
    if unknown:
        raise ValidationError(f"Cannot update entry fields: {', '.join(sorted(unknown))}")
    cleaned = dict(patch)
    if 'amount' in cleaned:
        cleaned['amount'] = require_positive(cleaned['amount'], 'Amount')
    if 'exchange_rate' in cleaned:
        cleaned['exchange_rate'] = require_positive(cleaned['exchange_rate'], 'Exchange rate')
    if 'converted_amount' in cleaned:
        cleaned['converted_amount'] = require_non_negative(cleaned['converted_amount'], 'Converted amount')
    if 'currency' in cleaned:
        if not isinstance(cleaned['currency'], str) or not cleaned['currency']:
            raise ValidationError('Currency is required')
        cleaned['currency'] = cleaned['currency'].upper()
    return cleaned


def update_entry(
    assets: IndividualAssets,
    asset_field,
    entry_id: str,
    patch: dict,
    recompute: bool = True,
) -> IndividualAssets:
    """Patch one entry and rebuild the field total.

    When ``recompute`` is set and the patch changes amount or exchange rate
    without supplying converted_amount, the converted amount is rebuilt.
    With ``recompute=False`` the stored converted amount is kept as-is and
    callers must call ``recompute_converted_amount`` themselves.

    An unknown entry id leaves the snapshot unchanged.
    """
    asset_field = resolve_field(asset_field)
    patch = _validate_patch(patch)
    current = assets.entries_for(asset_field)
    if not any(e.id == entry_id for e in current):
        logger.debug(f"Update ignored, no entry {entry_id} in {asset_field.value}")
        return assets

    updated = []
    for e in current:
        if e.id == entry_id:
            e = replace(e, **patch)
            if recompute and 'converted_amount' not in patch and ('amount' in patch or 'exchange_rate' in patch):
                e = recompute_converted_amount(e)
        updated.append(e)
    return _with_entries(assets, asset_field, tuple(updated))


def remove_entry(assets: IndividualAssets, asset_field, entry_id: str) -> IndividualAssets:
    """Drop an entry by id and rebuild the field total. Unknown ids are a no-op."""
    asset_field = resolve_field(asset_field)
    current = assets.entries_for(asset_field)
    remaining = tuple(e for e in current if e.id != entry_id)
    if len(remaining) == len(current):
        logger.debug(f"Remove ignored, no entry {entry_id} in {asset_field.value}")
        return assets
    return _with_entries(assets, asset_field, remaining)
