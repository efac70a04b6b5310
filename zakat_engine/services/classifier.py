"""Keyword classifier for business balance-sheet line items.

Rules approximate AAOIFI conventions. They are scanned in declaration
order (zakatable, deductible, exempt, not_deductible, needs_clarification)
and the first keyword found as a substring of the normalized name wins.
Order is significant: a broad keyword declared early shadows a more
specific one declared later. For example "investment in subsidiary" hits
the generic "investment" keyword of its own rule, and "land" resolves to
exempt before the real-estate clarification rule is reached.
"""
import logging
from dataclasses import dataclass, replace
from typing import Optional

from zakat_engine.constants import (
    CLARIFICATION_ANSWERS,
    DEDUCTIBLE,
    EXEMPT,
    GENERIC_CLARIFICATION_QUESTION,
    MARKET_VALUE_ANSWERS,
    NEEDS_CLARIFICATION,
    NOT_DEDUCTIBLE,
    ZAKATABLE,
)
from .errors import ValidationError, require_non_negative
from .ledger import generate_entry_id
from .models import BusinessLineItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationRule:
    keywords: tuple
    classification: str
    ruling: Optional[str] = None
    clarification_question: Optional[str] = None


ZAKATABLE_RULES = (
    ClassificationRule(
        ('cash', 'cash on hand', 'petty cash', 'cash in bank', 'bank balance'),
        ZAKATABLE,
        ruling='Cash and bank balances are always zakatable as they represent liquid assets.',
    ),
    ClassificationRule(
        ('accounts receivable', 'receivables', 'trade receivables', 'customer receivables', 'debtor'),
        ZAKATABLE,
        ruling='Receivables expected to be collected are zakatable at their recoverable value.',
    ),
    ClassificationRule(
        ('inventory', 'stock', 'merchandise', 'goods for sale', 'trading goods', 'finished goods'),
        ZAKATABLE,
        ruling='Inventory held for sale is zakatable at market value.',
    ),
    ClassificationRule(
        ('raw materials', 'work in progress', 'wip'),
        ZAKATABLE,
        ruling='Raw materials and WIP are zakatable as they will become tradeable goods.',
    ),
    ClassificationRule(
        ('short term investment', 'marketable securities', 'trading securities', 'quoted shares'),
        ZAKATABLE,
        ruling='Short-term investments held for trading are zakatable at market value.',
    ),
    ClassificationRule(
        ('sukuk', 'islamic bond', 'mudaraba', 'musharaka investment'),
        ZAKATABLE,
        ruling='Islamic financial instruments are zakatable at their current value.',
    ),
    ClassificationRule(
        ('prepaid expense', 'prepayment', 'advance payment'),
        ZAKATABLE,
        ruling='Prepaid expenses that can be recovered are zakatable.',
    ),
)

DEDUCTIBLE_RULES = (
    ClassificationRule(
        ('accounts payable', 'payables', 'trade payables', 'supplier payable', 'creditor'),
        DEDUCTIBLE,
        ruling='Amounts owed to suppliers reduce the zakat base as they are current liabilities.',
    ),
    ClassificationRule(
        ('wages payable', 'salary payable', 'employee payable', 'accrued wages', 'accrued salary'),
        DEDUCTIBLE,
        ruling='Owed wages are deductible as they are obligations to employees.',
    ),
    ClassificationRule(
        ('accrued expense', 'accrued liability', 'expenses payable'),
        DEDUCTIBLE,
        ruling='Accrued expenses represent current obligations and are deductible.',
    ),
    ClassificationRule(
        ('customer deposit', 'advance from customer', 'unearned revenue', 'deferred revenue'),
        DEDUCTIBLE,
        ruling='Deposits held from customers are liabilities and reduce the zakat base.',
    ),
    ClassificationRule(
        ('zakat payable', 'zakat provision', 'zakat liability'),
        DEDUCTIBLE,
        ruling='Previously calculated zakat not yet paid is deductible.',
    ),
    ClassificationRule(
        ('tax payable', 'income tax payable', 'vat payable', 'sales tax payable'),
        DEDUCTIBLE,
        ruling='Taxes owed to government are deductible current liabilities.',
    ),
    ClassificationRule(
        ('islamic financing', 'murabaha payable', 'ijara payable', 'islamic loan'),
        DEDUCTIBLE,
        ruling='Islamic financing obligations are deductible from the zakat base.',
    ),
)

EXEMPT_RULES = (
    ClassificationRule(
        ('fixed asset', 'property plant equipment', 'ppe', 'building', 'land', 'machinery'),
        EXEMPT,
        ruling='Fixed assets used in business operations are exempt from zakat.',
    ),
    ClassificationRule(
        ('furniture', 'fixture', 'office equipment', 'computer equipment'),
        EXEMPT,
        ruling='Office equipment and furniture used for operations are exempt.',
    ),
    ClassificationRule(
        ('vehicle', 'motor vehicle', 'company car', 'delivery truck'),
        EXEMPT,
        ruling='Vehicles used for business operations are exempt from zakat.',
    ),
    ClassificationRule(
        ('accumulated depreciation', 'depreciation', 'amortization'),
        EXEMPT,
        ruling='Depreciation is an accounting entry and is exempt.',
    ),
    ClassificationRule(
        ('goodwill', 'intangible asset', 'trademark', 'patent', 'copyright'),
        EXEMPT,
        ruling='Intangible assets not held for sale are exempt from zakat.',
    ),
    ClassificationRule(
        ('retained earnings', 'accumulated profit', 'reserve', 'share capital', 'equity'),
        EXEMPT,
        ruling='Equity items are not directly zakatable - assets are assessed instead.',
    ),
    ClassificationRule(
        ('deferred tax', 'deferred expense'),
        EXEMPT,
        ruling='Deferred items are accounting entries and exempt from direct zakat assessment.',
    ),
)

NOT_DEDUCTIBLE_RULES = (
    ClassificationRule(
        ('bank loan', 'conventional loan', 'interest loan', 'mortgage', 'bank borrowing'),
        NOT_DEDUCTIBLE,
        ruling='Interest-based loans cannot reduce the zakat base per Islamic principles.',
    ),
    ClassificationRule(
        ('long term debt', 'long term loan', 'bond payable', 'debenture'),
        NOT_DEDUCTIBLE,
        ruling='Long-term debts generally do not reduce current zakat obligations.',
    ),
    ClassificationRule(
        ('interest payable', 'finance charge', 'bank charge'),
        NOT_DEDUCTIBLE,
        ruling='Interest-related charges are not deductible under Islamic principles.',
    ),
)

NEEDS_CLARIFICATION_RULES = (
    ClassificationRule(
        ('equipment', 'plant', 'machine'),
        NEEDS_CLARIFICATION,
        clarification_question='Is this equipment for trading/selling OR for business operations?',
    ),
    ClassificationRule(
        ('real estate', 'property', 'land'),
        NEEDS_CLARIFICATION,
        clarification_question='Is this property for trading/selling OR for business operations?',
    ),
    ClassificationRule(
        ('vehicle', 'car', 'truck', 'fleet'),
        NEEDS_CLARIFICATION,
        clarification_question='Is this vehicle for trading/selling OR for business operations?',
    ),
    ClassificationRule(
        ('short term loan', 'current loan', 'borrowing'),
        NEEDS_CLARIFICATION,
        clarification_question='Is this Islamic financing OR conventional interest-based?',
    ),
    ClassificationRule(
        ('security deposit', 'deposit', 'refundable deposit'),
        NEEDS_CLARIFICATION,
        clarification_question='Did you pay this deposit OR are you holding it from customers?',
    ),
    ClassificationRule(
        ('investment', 'investment in subsidiary', 'investment in associate'),
        NEEDS_CLARIFICATION,
        clarification_question='Is this investment for trading OR long-term strategic holding?',
    ),
)

# Scan order; do not reorder or turn into a lookup table
ALL_RULES = (
    ZAKATABLE_RULES
    + DEDUCTIBLE_RULES
    + EXEMPT_RULES
    + NOT_DEDUCTIBLE_RULES
    + NEEDS_CLARIFICATION_RULES
)


def normalize_name(name: str) -> str:
    return name.lower().strip()


def classify_line_item(name: str) -> dict:
    """Classify a free-text line name.

    Returns:
        Dict with classification, ruling and clarification_question (either
        of the last two may be None). Unmatched names fall back to
        needs_clarification with a generic question.
    """
    normalized = normalize_name(name or '')
    for rule in ALL_RULES:
        for keyword in rule.keywords:
            if keyword in normalized:
                return {
                    'classification': rule.classification,
                    'ruling': rule.ruling,
                    'clarification_question': rule.clarification_question,
                }
    return {
        'classification': NEEDS_CLARIFICATION,
        'ruling': None,
        'clarification_question': GENERIC_CLARIFICATION_QUESTION,
    }


def create_business_line_item(name: str, amount: float) -> BusinessLineItem:
    """Build a line item and run it through the classifier."""
    if not isinstance(name, str) or not name.strip():
        raise ValidationError('Line item name is required')
    amount = require_non_negative(amount, 'Amount')
    result = classify_line_item(name)
    return BusinessLineItem(
        id=generate_entry_id('item'),
        name=name,
        amount=amount,
        classification=result['classification'],
        islamic_ruling=result['ruling'],
        clarification_question=result['clarification_question'],
    )


def classify_line_items(rows) -> list[BusinessLineItem]:
    """Classify imported rows of {'name', 'amount'}."""
    items = [create_business_line_item(row['name'], row['amount']) for row in rows]
    pending = sum(1 for item in items if item.classification == NEEDS_CLARIFICATION)
    logger.info(f"Classified {len(items)} line items, {pending} need clarification")
    return items


def resolve_clarification(
    item: BusinessLineItem,
    answer: str,
    market_value: Optional[float] = None,
) -> BusinessLineItem:
    """Settle a needs_clarification item from the user's answer.

    'trading' makes the item zakatable and may carry a market value that
    replaces the book amount; the other answers map straight to a
    classification.
    """
    if answer not in CLARIFICATION_ANSWERS:
        raise ValidationError(
            f"Invalid clarification answer: {answer}. Must be one of: {', '.join(CLARIFICATION_ANSWERS)}"
        )
    updates = {
        'classification': CLARIFICATION_ANSWERS[answer],
        'clarification_answer': answer,
    }
    if answer in MARKET_VALUE_ANSWERS and market_value is not None:
        updates['market_value'] = require_non_negative(market_value, 'Market value')
    return replace(item, **updates)


def clarification_kind(question: Optional[str]) -> str:
    """Group a clarification prompt by the answers it expects."""
    if not question:
        return 'other'
    if 'trading/selling' in question or 'business operations' in question:
        return 'asset'
    if 'Islamic financing' in question or 'interest-based' in question:
        return 'loan'
    if 'deposit' in question:
        return 'deposit'
    return 'other'
