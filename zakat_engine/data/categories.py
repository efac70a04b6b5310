"""Individual asset fields grouped by zakat category.

Every field holds a scalar total plus a list of named sub-entries. The
field set is closed: code addresses fields through ``AssetField`` members,
never through string concatenation.
"""
from enum import Enum


# Category letter -> display label
ASSET_CATEGORIES = {
    'A': 'Cash on Hand',
    'B': 'Bank Accounts',
    'C': 'Investments',
    'D': 'Digital Money',
    'E': 'Precious Metals',
    'F': 'Real Estate',
    'G': 'Money Owed',
    'H': 'Commodities',
    'I': 'Unique Assets',
    'J': 'Extracted Resources',
}


class AssetField(Enum):
    """Zakatable asset fields. Value is the persisted key."""

    # A - Cash on Hand
    CASH_ON_HAND = 'cash_on_hand'
    # B - Bank Accounts
    SAVINGS_ACCOUNT = 'savings_account'
    CHECKING_ACCOUNT = 'checking_account'
    CERTIFICATES_OF_DEPOSIT = 'certificates_of_deposit'
    HIGH_YIELD_ACCOUNTS = 'high_yield_accounts'
    # C - Investments
    BONDS = 'bonds'
    SUKUK = 'sukuk'
    TRADING_STOCKS = 'trading_stocks'
    MUTUAL_FUNDS = 'mutual_funds'
    ETFS = 'etfs'
    TRUST_FUNDS = 'trust_funds'
    # D - Digital Money
    PREPAID_CARDS = 'prepaid_cards'
    DIGITAL_WALLETS = 'digital_wallets'
    CRYPTOCURRENCY = 'cryptocurrency'
    REWARD_POINTS = 'reward_points'
    GAMING_WALLETS = 'gaming_wallets'
    # E - Precious Metals (gold jewellery is valued separately by weight)
    SILVER = 'silver'
    GOLD_INVESTMENTS = 'gold_investments'
    DIAMONDS = 'diamonds'
    PLATINUM = 'platinum'
    INVESTMENT_JEWELRY = 'investment_jewelry'
    # F - Real Estate
    INVESTMENT_PROPERTIES = 'investment_properties'
    PARTIAL_OWNERSHIP = 'partial_ownership'
    CONSTRUCTION_PROPERTIES = 'construction_properties'
    # G - Money Owed
    LIFE_INSURANCE_CASH_VALUE = 'life_insurance_cash_value'
    PENSION_FUNDS = 'pension_funds'
    RECEIVABLE_DEBTS = 'receivable_debts'
    # H - Commodities
    BUILDING_MATERIALS = 'building_materials'
    BULK_FOOD = 'bulk_food'
    FARMING_SUPPLIES = 'farming_supplies'
    BULK_CLOTHING = 'bulk_clothing'
    ELECTRONICS_INVENTORY = 'electronics_inventory'
    # I - Unique Assets
    ART = 'art'
    RARE_STAMPS = 'rare_stamps'
    VINTAGE_CARS = 'vintage_cars'
    DESIGNER_BAGS = 'designer_bags'
    LIMITED_SNEAKERS = 'limited_sneakers'
    CARBON_CREDITS = 'carbon_credits'
    INTELLECTUAL_PROPERTY = 'intellectual_property'
    HORSES = 'horses'
    LIVESTOCK = 'livestock'
    AIRCRAFT = 'aircraft'
    BOATS = 'boats'
    FARMLAND = 'farmland'
    CROPS = 'crops'
    # J - Extracted Resources (20% rate)
    MINERALS = 'minerals'
    OIL = 'oil'
    GAS = 'gas'

    @property
    def category(self) -> str:
        return FIELD_CATEGORIES[self]

    @property
    def is_extracted_resource(self) -> bool:
        return self in EXTRACTED_RESOURCE_FIELDS

    @property
    def label(self) -> str:
        return self.value.replace('_', ' ').title()


EXTRACTED_RESOURCE_FIELDS = frozenset({
    AssetField.MINERALS,
    AssetField.OIL,
    AssetField.GAS,
})

_CATEGORY_MEMBERS = {
    'A': ['CASH_ON_HAND'],
    'B': ['SAVINGS_ACCOUNT', 'CHECKING_ACCOUNT', 'CERTIFICATES_OF_DEPOSIT', 'HIGH_YIELD_ACCOUNTS'],
    'C': ['BONDS', 'SUKUK', 'TRADING_STOCKS', 'MUTUAL_FUNDS', 'ETFS', 'TRUST_FUNDS'],
    'D': ['PREPAID_CARDS', 'DIGITAL_WALLETS', 'CRYPTOCURRENCY', 'REWARD_POINTS', 'GAMING_WALLETS'],
    'E': ['SILVER', 'GOLD_INVESTMENTS', 'DIAMONDS', 'PLATINUM', 'INVESTMENT_JEWELRY'],
    'F': ['INVESTMENT_PROPERTIES', 'PARTIAL_OWNERSHIP', 'CONSTRUCTION_PROPERTIES'],
    'G': ['LIFE_INSURANCE_CASH_VALUE', 'PENSION_FUNDS', 'RECEIVABLE_DEBTS'],
    'H': ['BUILDING_MATERIALS', 'BULK_FOOD', 'FARMING_SUPPLIES', 'BULK_CLOTHING', 'ELECTRONICS_INVENTORY'],
    'I': [
        'ART', 'RARE_STAMPS', 'VINTAGE_CARS', 'DESIGNER_BAGS', 'LIMITED_SNEAKERS',
        'CARBON_CREDITS', 'INTELLECTUAL_PROPERTY', 'HORSES', 'LIVESTOCK',
        'AIRCRAFT', 'BOATS', 'FARMLAND', 'CROPS',
    ],
    'J': ['MINERALS', 'OIL', 'GAS'],
}

FIELD_CATEGORIES = {
    AssetField[name]: letter
    for letter, names in _CATEGORY_MEMBERS.items()
    for name in names
}


def parse_asset_field(value) -> AssetField:
    """Resolve an ``AssetField`` from a member or its persisted key.

    Raises:
        ValueError: If the key is not a known asset field.
    """
    if isinstance(value, AssetField):
        return value
    return AssetField(value)


def get_fields_by_category() -> list[dict]:
    """Get asset fields grouped by category for form rendering."""
    return [
        {
            'category': letter,
            'label': ASSET_CATEGORIES[letter],
            'fields': [
                {
                    'key': AssetField[name].value,
                    'label': AssetField[name].label,
                    'extracted_resource': AssetField[name].is_extracted_resource,
                }
                for name in names
            ],
        }
        for letter, names in _CATEGORY_MEMBERS.items()
    ]
