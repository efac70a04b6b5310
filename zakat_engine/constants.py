"""Shared constants for zakat calculation."""

# Nisab threshold (minimum wealth for zakat obligation)
NISAB_GOLD_GRAMS = 85

# Zakat rates by calendar
ISLAMIC_ZAKAT_RATE = 0.025   # lunar year
WESTERN_ZAKAT_RATE = 0.02577  # solar year, adjusted for the 11 extra days

CALENDAR_RATES = {
    'islamic': ISLAMIC_ZAKAT_RATE,
    'western': WESTERN_ZAKAT_RATE,
}
CALENDAR_TYPES = tuple(CALENDAR_RATES)
DEFAULT_CALENDAR_TYPE = 'islamic'

# Hawl length in days per calendar
HAWL_DAYS = {
    'islamic': 354,
    'western': 365,
}
DUE_SOON_DAYS = 30

# Minerals, oil and gas: flat rate regardless of nisab
EXTRACTED_RESOURCES_RATE = 0.20

# Gold purity by karat label
KARAT_PURITY = {
    '24k': 1.0,
    '21k': 0.875,
    '18k': 0.75,
}
VALID_KARATS = tuple(KARAT_PURITY)

DEFAULT_GOLD_PRICE_PER_GRAM = 70.0
DEFAULT_BASE_CURRENCY = 'USD'

# ============================================================
# Business line items
# ============================================================

ZAKATABLE = 'zakatable'
DEDUCTIBLE = 'deductible'
EXEMPT = 'exempt'
NOT_DEDUCTIBLE = 'not_deductible'
NEEDS_CLARIFICATION = 'needs_clarification'

# Order matters: the classifier scans groups in this order
CLASSIFICATIONS = (ZAKATABLE, DEDUCTIBLE, EXEMPT, NOT_DEDUCTIBLE, NEEDS_CLARIFICATION)

GENERIC_CLARIFICATION_QUESTION = 'How should this item be treated for Zakat purposes?'

# Answers to a clarification prompt and the classification each one settles on
CLARIFICATION_ANSWERS = {
    'trading': ZAKATABLE,
    'operations': EXEMPT,
    'islamic': DEDUCTIBLE,
    'conventional': NOT_DEDUCTIBLE,
    'paid': ZAKATABLE,
    'holding': DEDUCTIBLE,
}

# Answers for which a market value replaces the book amount
MARKET_VALUE_ANSWERS = ('trading',)

# ============================================================
# History / persistence
# ============================================================

ENTITY_TYPES = ('personal', 'company')

STATE_NAMESPACE = 'zakat'
STATE_KEYS = {
    'individual': f'{STATE_NAMESPACE}.individual-calculator',
    'business': f'{STATE_NAMESPACE}.business-calculator',
    'history': f'{STATE_NAMESPACE}.history',
    'settings': f'{STATE_NAMESPACE}.settings',
}

HIJRI_MONTHS = [
    'Muharram', 'Safar', 'Rabi al-Awwal', 'Rabi al-Thani',
    'Jumada al-Awwal', 'Jumada al-Thani', 'Rajab', 'Shaban',
    'Ramadan', 'Shawwal', 'Dhul Qadah', 'Dhul Hijjah',
]
