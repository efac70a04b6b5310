"""Calculator state records.

All records are frozen dataclasses. Reducers in the sibling modules build
new instances rather than mutating these, so every aggregate can be
recomputed from a consistent snapshot.

``from_dict`` loaders accept partially-missing payloads (older persisted
layouts) and fill zeros / empty lists for anything absent.
"""
import logging
import math
from dataclasses import dataclass, field, asdict, fields
from typing import Optional

from zakat_engine.constants import (
    DEFAULT_BASE_CURRENCY,
    DEFAULT_CALENDAR_TYPE,
    DEFAULT_GOLD_PRICE_PER_GRAM,
    CALENDAR_TYPES,
    CLASSIFICATIONS,
    NEEDS_CLARIFICATION,
    NISAB_GOLD_GRAMS,
    KARAT_PURITY,
)
from zakat_engine.data.categories import AssetField

logger = logging.getLogger(__name__)


def _as_float(value, default: float = 0.0) -> float:
    """Coerce a persisted number, falling back to default for junk."""
    if value is None or isinstance(value, bool):
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-numeric persisted value: {value!r}")
        return default
    if not math.isfinite(result):
        return default
    return result


def _as_str(value, default: str = '') -> str:
    return value if isinstance(value, str) else default


def _as_list(value) -> list:
    return value if isinstance(value, list) else []


def _optional_float(value) -> Optional[float]:
    return None if value is None else _as_float(value)


# ==================== INDIVIDUAL ====================

@dataclass(frozen=True)
class AssetSubEntry:
    """A named holding under one asset field, e.g. one brokerage position."""
    id: str
    name: str
    amount: float
    currency: str
    exchange_rate: float
    converted_amount: float
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'AssetSubEntry':
        amount = _as_float(data.get('amount'))
        exchange_rate = _as_float(data.get('exchange_rate'), 1.0)
        converted = data.get('converted_amount')
        return cls(
            id=_as_str(data.get('id')),
            name=_as_str(data.get('name')),
            description=data.get('description') if isinstance(data.get('description'), str) else None,
            amount=amount,
            currency=_as_str(data.get('currency'), DEFAULT_BASE_CURRENCY),
            exchange_rate=exchange_rate,
            converted_amount=amount * exchange_rate if converted is None else _as_float(converted),
        )


@dataclass(frozen=True)
class GoldEntry:
    """Gold jewellery or bullion valued by weight and purity."""
    id: str
    karat: str
    weight_grams: float
    price_per_gram: float

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'GoldEntry':
        karat = data.get('karat')
        if karat not in KARAT_PURITY:
            raise ValueError(f'Unknown karat: {karat!r}')
        return cls(
            id=_as_str(data.get('id')),
            karat=karat,
            weight_grams=_as_float(data.get('weight_grams')),
            price_per_gram=_as_float(data.get('price_per_gram')),
        )


def _empty_totals() -> dict:
    return {f: 0.0 for f in AssetField}


def _empty_entries() -> dict:
    return {f: () for f in AssetField}


@dataclass(frozen=True)
class IndividualAssets:
    """Per-field cached totals, their sub-entries, and gold holdings.

    For a field with sub-entries, ``totals[field]`` equals the sum of the
    entries' ``converted_amount``. A field with no entries holds a directly
    entered total.
    """
    totals: dict = field(default_factory=_empty_totals)
    entries: dict = field(default_factory=_empty_entries)
    gold: tuple = ()

    def total(self, asset_field: AssetField) -> float:
        return self.totals.get(asset_field, 0.0)

    def entries_for(self, asset_field: AssetField) -> tuple:
        return self.entries.get(asset_field, ())

    def to_dict(self) -> dict:
        return {
            'fields': {
                f.value: {
                    'total': self.total(f),
                    'entries': [e.to_dict() for e in self.entries_for(f)],
                }
                for f in AssetField
            },
            'gold': [g.to_dict() for g in self.gold],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'IndividualAssets':
        raw_fields = data.get('fields') if isinstance(data.get('fields'), dict) else {}
        totals = _empty_totals()
        entries = _empty_entries()
        for f in AssetField:
            raw = raw_fields.get(f.value)
            if not isinstance(raw, dict):
                continue
            field_entries = tuple(
                AssetSubEntry.from_dict(e) for e in _as_list(raw.get('entries')) if isinstance(e, dict)
            )
            entries[f] = field_entries
            if field_entries:
                # Entries are authoritative; a stale stored total is discarded
                totals[f] = sum(e.converted_amount for e in field_entries)
            else:
                totals[f] = _as_float(raw.get('total'))
        gold = []
        for raw in _as_list(data.get('gold')):
            if not isinstance(raw, dict):
                continue
            try:
                gold.append(GoldEntry.from_dict(raw))
            except ValueError as e:
                logger.warning(f"Dropping persisted gold entry {raw.get('id')!r}: {e}")
        return cls(totals=totals, entries=entries, gold=tuple(gold))


@dataclass(frozen=True)
class IndividualDeductions:
    zakat_already_paid: float = 0.0
    urgent_debts: float = 0.0
    good_receivables: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'IndividualDeductions':
        return cls(**{f.name: _as_float(data.get(f.name)) for f in fields(cls)})


DEDUCTION_KEYS = tuple(f.name for f in fields(IndividualDeductions))


@dataclass(frozen=True)
class CalculatorSettings:
    """Rate inputs supplied from outside the engine."""
    gold_price_per_gram: float = DEFAULT_GOLD_PRICE_PER_GRAM
    calendar_type: str = DEFAULT_CALENDAR_TYPE
    base_currency: str = DEFAULT_BASE_CURRENCY

    @property
    def nisab_threshold(self) -> float:
        return NISAB_GOLD_GRAMS * self.gold_price_per_gram

    def to_dict(self) -> dict:
        return {**asdict(self), 'nisab_threshold': self.nisab_threshold}

    @classmethod
    def from_dict(cls, data: dict) -> 'CalculatorSettings':
        calendar_type = data.get('calendar_type')
        return cls(
            gold_price_per_gram=_as_float(data.get('gold_price_per_gram'), DEFAULT_GOLD_PRICE_PER_GRAM),
            calendar_type=calendar_type if calendar_type in CALENDAR_TYPES else DEFAULT_CALENDAR_TYPE,
            base_currency=_as_str(data.get('base_currency'), DEFAULT_BASE_CURRENCY),
        )


@dataclass(frozen=True)
class IndividualCalculatorState:
    """Everything one individual calculation session owns."""
    assets: IndividualAssets = field(default_factory=IndividualAssets)
    deductions: IndividualDeductions = field(default_factory=IndividualDeductions)
    base_currency: str = DEFAULT_BASE_CURRENCY

    def to_dict(self) -> dict:
        return {
            'assets': self.assets.to_dict(),
            'deductions': self.deductions.to_dict(),
            'base_currency': self.base_currency,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'IndividualCalculatorState':
        assets = data.get('assets')
        deductions = data.get('deductions')
        return cls(
            assets=IndividualAssets.from_dict(assets if isinstance(assets, dict) else {}),
            deductions=IndividualDeductions.from_dict(deductions if isinstance(deductions, dict) else {}),
            base_currency=_as_str(data.get('base_currency'), DEFAULT_BASE_CURRENCY),
        )


# ==================== BUSINESS ====================

@dataclass(frozen=True)
class BusinessLineItem:
    """One balance-sheet row with its zakat treatment."""
    id: str
    name: str
    amount: float
    classification: str
    clarification_question: Optional[str] = None
    clarification_answer: Optional[str] = None
    market_value: Optional[float] = None
    islamic_ruling: Optional[str] = None

    @property
    def zakatable_value(self) -> float:
        """Market value when one was given, otherwise the book amount."""
        return self.market_value if self.market_value is not None else self.amount

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'BusinessLineItem':
        classification = data.get('classification')
        return cls(
            id=_as_str(data.get('id')),
            name=_as_str(data.get('name')),
            amount=_as_float(data.get('amount')),
            classification=classification if classification in CLASSIFICATIONS else NEEDS_CLARIFICATION,
            clarification_question=data.get('clarification_question'),
            clarification_answer=data.get('clarification_answer'),
            market_value=_optional_float(data.get('market_value')),
            islamic_ruling=data.get('islamic_ruling'),
        )


BUSINESS_VALUE_KEYS = ('cash', 'receivables', 'inventory', 'investments')


@dataclass(frozen=True)
class BusinessAssets:
    company_name: str = ''
    industry_type: str = ''
    cash: float = 0.0
    receivables: float = 0.0
    inventory: float = 0.0
    investments: float = 0.0
    line_items: tuple = ()

    def to_dict(self) -> dict:
        return {
            'company_name': self.company_name,
            'industry_type': self.industry_type,
            **{key: getattr(self, key) for key in BUSINESS_VALUE_KEYS},
            'line_items': [item.to_dict() for item in self.line_items],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'BusinessAssets':
        return cls(
            company_name=_as_str(data.get('company_name')),
            industry_type=_as_str(data.get('industry_type')),
            **{key: _as_float(data.get(key)) for key in BUSINESS_VALUE_KEYS},
            line_items=tuple(
                BusinessLineItem.from_dict(item)
                for item in _as_list(data.get('line_items')) if isinstance(item, dict)
            ),
        )


# ==================== HISTORY ====================

@dataclass(frozen=True)
class ZakatHistoryEntry:
    """Snapshot of one finished calculation. Only ``paid`` ever changes."""
    id: str
    date: str
    year: int
    entity_type: str
    total_assets: float
    total_deductions: float
    net_wealth: float
    nisab_threshold: float
    zakat_due: float
    calendar_type: str
    meets_nisab: bool
    currency: str = DEFAULT_BASE_CURRENCY
    label: str = ''
    hijri_year: Optional[str] = None
    hijri_date: Optional[str] = None
    paid: bool = False

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'ZakatHistoryEntry':
        year = data.get('year')
        calendar_type = data.get('calendar_type')
        return cls(
            id=_as_str(data.get('id')),
            date=_as_str(data.get('date')),
            year=year if isinstance(year, int) and not isinstance(year, bool) else 0,
            entity_type='company' if data.get('entity_type') == 'company' else 'personal',
            total_assets=_as_float(data.get('total_assets')),
            total_deductions=_as_float(data.get('total_deductions')),
            net_wealth=_as_float(data.get('net_wealth')),
            nisab_threshold=_as_float(data.get('nisab_threshold')),
            zakat_due=_as_float(data.get('zakat_due')),
            calendar_type=calendar_type if calendar_type in CALENDAR_TYPES else DEFAULT_CALENDAR_TYPE,
            meets_nisab=bool(data.get('meets_nisab', False)),
            currency=_as_str(data.get('currency'), DEFAULT_BASE_CURRENCY),
            label=_as_str(data.get('label')),
            hijri_year=data.get('hijri_year'),
            hijri_date=data.get('hijri_date'),
            paid=bool(data.get('paid', False)),
        )
