"""Gold valuation and gold-entry reducers."""
import logging
from dataclasses import replace

from zakat_engine.constants import KARAT_PURITY, VALID_KARATS
from .errors import ValidationError, require_positive
from .ledger import generate_entry_id
from .models import GoldEntry, IndividualAssets

logger = logging.getLogger(__name__)


def purity_multiplier(karat: str) -> float:
    """Purity fraction for a karat label. 24k=1.0, 21k=0.875, 18k=0.75."""
    try:
        return KARAT_PURITY[karat]
    except KeyError:
        raise ValidationError(f"Invalid karat: {karat}. Must be one of: {', '.join(VALID_KARATS)}")


def calculate_pure_grams(weight_grams: float, karat: str) -> float:
    return weight_grams * purity_multiplier(karat)


def gold_entry_value(entry: GoldEntry) -> float:
    return entry.weight_grams * entry.price_per_gram * purity_multiplier(entry.karat)


def gold_value(entries) -> float:
    """Total value of gold entries. Empty input is worth 0."""
    return sum(gold_entry_value(e) for e in entries)


def create_gold_entry(karat: str, weight_grams: float, price_per_gram: float) -> GoldEntry:
    """Validate and build a gold entry.

    Raises:
        ValidationError: Unknown karat, or weight/price not positive and finite
    """
    purity_multiplier(karat)
    return GoldEntry(
        id=generate_entry_id('gold'),
        karat=karat,
        weight_grams=require_positive(weight_grams, 'Weight'),
        price_per_gram=require_positive(price_per_gram, 'Price per gram'),
    )


def add_gold_entry(assets: IndividualAssets, entry: GoldEntry) -> IndividualAssets:
    if any(g.id == entry.id for g in assets.gold):
        raise ValidationError(f'Duplicate gold entry id: {entry.id}')
    logger.debug(f"Adding gold entry {entry.id} ({entry.karat}, {entry.weight_grams}g)")
    return replace(assets, gold=assets.gold + (entry,))


def update_gold_entry(assets: IndividualAssets, entry_id: str, patch: dict) -> IndividualAssets:
    """Patch karat, weight or price of a gold entry. Unknown ids are a no-op."""
    unknown = set(patch) - {'karat', 'weight_grams', 'price_per_gram'}
    if unknown:
        raise ValidationError(f"Cannot update gold fields: {', '.join(sorted(unknown))}")
    cleaned = dict(patch)
    if 'karat' in cleaned:
        purity_multiplier(cleaned['karat'])
    if 'weight_grams' in cleaned:
        cleaned['weight_grams'] = require_positive(cleaned['weight_grams'], 'Weight')
    if 'price_per_gram' in cleaned:
        cleaned['price_per_gram'] = require_positive(cleaned['price_per_gram'], 'Price per gram')

    if not any(g.id == entry_id for g in assets.gold):
        return assets
    return replace(assets, gold=tuple(
        replace(g, **cleaned) if g.id == entry_id else g for g in assets.gold
    ))


def remove_gold_entry(assets: IndividualAssets, entry_id: str) -> IndividualAssets:
    """Remove a gold entry by id. Unknown ids are a no-op."""
    remaining = tuple(g for g in assets.gold if g.id != entry_id)
    if len(remaining) == len(assets.gold):
        return assets
    return replace(assets, gold=remaining)


def calculate_gold_subtotal(entries) -> dict:
    """Per-entry breakdown for display, rounded."""
    items_out = []
    total_pure = 0.0
    total_value = 0.0
    for entry in entries:
        pure = calculate_pure_grams(entry.weight_grams, entry.karat)
        value = gold_entry_value(entry)
        items_out.append({
            'id': entry.id,
            'karat': entry.karat,
            'weight_grams': entry.weight_grams,
            'price_per_gram': entry.price_per_gram,
            'pure_grams': round(pure, 4),
            'value': round(value, 2),
        })
        total_pure += pure
        total_value += value
    return {'items': items_out, 'total_pure_grams': round(total_pure, 4), 'total': round(total_value, 2)}
