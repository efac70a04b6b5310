"""Common balance-sheet rows offered when entering a business manually."""

COMMON_LINE_ITEMS = [
    # Assets
    {'name': 'Cash on Hand', 'category': 'asset'},
    {'name': 'Bank Balance', 'category': 'asset'},
    {'name': 'Accounts Receivable', 'category': 'asset'},
    {'name': 'Inventory', 'category': 'asset'},
    {'name': 'Prepaid Expenses', 'category': 'asset'},
    {'name': 'Fixed Assets', 'category': 'asset'},
    {'name': 'Equipment', 'category': 'asset'},
    {'name': 'Vehicles', 'category': 'asset'},
    {'name': 'Land', 'category': 'asset'},
    {'name': 'Building', 'category': 'asset'},
    {'name': 'Short-term Investments', 'category': 'asset'},
    {'name': 'Security Deposits', 'category': 'asset'},
    # Liabilities
    {'name': 'Accounts Payable', 'category': 'liability'},
    {'name': 'Wages Payable', 'category': 'liability'},
    {'name': 'Accrued Expenses', 'category': 'liability'},
    {'name': 'Customer Deposits', 'category': 'liability'},
    {'name': 'Short-term Loan', 'category': 'liability'},
    {'name': 'Bank Loan', 'category': 'liability'},
    {'name': 'Tax Payable', 'category': 'liability'},
    {'name': 'Zakat Payable', 'category': 'liability'},
]


def get_common_line_items(category: str | None = None) -> list[dict]:
    """Return common rows, optionally filtered by 'asset' or 'liability'."""
    if category is None:
        return [dict(item) for item in COMMON_LINE_ITEMS]
    return [dict(item) for item in COMMON_LINE_ITEMS if item['category'] == category]
