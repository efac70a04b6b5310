"""Supported base currencies with display symbols.

Priority order puts the default currency first, then Gulf and other
regional currencies in the order the calculator offers them.
"""

DEFAULT_CURRENCY = 'USD'

# code -> (name, symbol)
SUPPORTED_CURRENCIES: dict[str, tuple[str, str]] = {
    'USD': ('US Dollar', '$'),
    'EUR': ('Euro', '€'),
    'GBP': ('British Pound', '£'),
    'AED': ('UAE Dirham', 'د.إ'),
    'SAR': ('Saudi Riyal', 'ر.س'),
    'QAR': ('Qatari Riyal', 'ر.ق'),
    'KWD': ('Kuwaiti Dinar', 'د.ك'),
    'BHD': ('Bahraini Dinar', 'د.ب'),
    'OMR': ('Omani Rial', 'ر.ع'),
    'JOD': ('Jordanian Dinar', 'د.ا'),
    'EGP': ('Egyptian Pound', 'ج.م'),
    'MAD': ('Moroccan Dirham', 'د.م'),
    'MYR': ('Malaysian Ringgit', 'RM'),
    'IDR': ('Indonesian Rupiah', 'Rp'),
    'PKR': ('Pakistani Rupee', '₨'),
    'INR': ('Indian Rupee', '₹'),
    'TRY': ('Turkish Lira', '₺'),
    'SGD': ('Singapore Dollar', 'S$'),
    'JPY': ('Japanese Yen', '¥'),
    'CNY': ('Chinese Yuan', '¥'),
    'CAD': ('Canadian Dollar', 'C$'),
    'AUD': ('Australian Dollar', 'A$'),
    'CHF': ('Swiss Franc', 'Fr'),
}


def get_ordered_currencies() -> list[dict]:
    """Return currencies with the default first, then declaration order."""
    result = []
    name, symbol = SUPPORTED_CURRENCIES[DEFAULT_CURRENCY]
    result.append({'code': DEFAULT_CURRENCY, 'name': name, 'symbol': symbol})
    for code, (name, symbol) in SUPPORTED_CURRENCIES.items():
        if code != DEFAULT_CURRENCY:
            result.append({'code': code, 'name': name, 'symbol': symbol})
    return result


def is_valid_currency(code: str) -> bool:
    """Check if a currency code is supported."""
    return isinstance(code, str) and code.upper() in SUPPORTED_CURRENCIES


def get_currency_symbol(code: str) -> str:
    """Get the display symbol for a currency, falling back to the code."""
    info = SUPPORTED_CURRENCIES.get((code or '').upper())
    return info[1] if info else code
