"""
Built-in bootstrap state.

Used when no snapshot has been stored yet or the stored one is unreadable,
and to back-fill fields missing from older snapshots.
"""

from decimal import Decimal

from nexa_ledger.models.ledger import (
    CATEGORY_COLORS,
    DEFAULT_CURRENCY,
    Account,
    Category,
    CategoryType,
    LedgerState,
    Subcategory,
)


DEFAULT_STATE = LedgerState(
    currency=DEFAULT_CURRENCY,
    accounts=(
        Account(id="wallet", name="Wallet", currency=DEFAULT_CURRENCY, balance=Decimal("8500")),
        Account(id="savings", name="Savings", currency=DEFAULT_CURRENCY, balance=Decimal("42000")),
    ),
    categories=(
        Category(id="salary", name="Salary", type=CategoryType.INCOME, color=CATEGORY_COLORS[CategoryType.INCOME]),
        Category(id="freelance", name="Freelance", type=CategoryType.INCOME, color="#0ea5e9"),
        Category(id="food", name="Food & Dining", type=CategoryType.EXPENSE, color=CATEGORY_COLORS[CategoryType.EXPENSE]),
        Category(id="bills", name="Bills & Utilities", type=CategoryType.EXPENSE, color="#a855f7"),
    ),
    subcategories=(
        Subcategory(id="food-groceries", category_id="food", name="Groceries"),
        Subcategory(id="food-restaurants", category_id="food", name="Restaurants"),
        Subcategory(id="bills-electricity", category_id="bills", name="Electricity"),
        Subcategory(id="bills-emi", category_id="bills", name="EMI"),
    ),
    transactions=(),
)


def default_state() -> LedgerState:
    """The seed state. Safe to share: ledger models are immutable."""
    return DEFAULT_STATE
