"""
Core Ledger Models for Nexa Ledger

These models define the strict schemas for every entity the ledger owns.
They are designed to:
1. Be immutable - a transition always builds new objects
2. Enforce type safety at runtime
3. Serialize to the persisted snapshot shape (camelCase keys)

DESIGN DECISION: Money is Decimal in memory and a plain JSON number on disk,
bounded to 15 digits with 2 decimal places so the number reads back exact.
Snapshots written by older clients store numbers, so we keep that shape.
"""

import datetime as dt
import math
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Optional, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
)
from pydantic.alias_generators import to_camel


DEFAULT_CURRENCY = "INR"

# Every bounded amount survives the trip through a JSON float exactly:
# a double holds any 15 significant decimal digits.
MONEY_MAX_DIGITS = 15
MONEY_DECIMAL_PLACES = 2
MONEY_LIMIT = Decimal(10) ** (MONEY_MAX_DIGITS - MONEY_DECIMAL_PLACES)
CENT = Decimal("0.01")


def _money_from_float(value: Any) -> Any:
    """
    Read a float as the digits it prints as, rounded to cents.

    JSON numbers in snapshots (including ones with float noise such as
    8179.499999999999) arrive as floats. Out-of-range values are passed
    on unrounded for the bounds check to reject.
    """
    if not isinstance(value, float) or not math.isfinite(value):
        return value
    amount = Decimal(repr(value))
    if abs(amount) >= MONEY_LIMIT:
        return amount
    return amount.quantize(CENT)


def _money_to_json(value: Decimal) -> Union[int, float]:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


# Unbounded decimal, numeric in JSON. Used for derived totals.
DecimalNumber = Annotated[Decimal, PlainSerializer(_money_to_json, when_used="json")]

# Stored amounts and balances.
Money = Annotated[
    Decimal,
    BeforeValidator(_money_from_float),
    Field(max_digits=MONEY_MAX_DIGITS, decimal_places=MONEY_DECIMAL_PLACES),
    PlainSerializer(_money_to_json, when_used="json"),
]


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Kinds of money movement the ledger records."""
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class CategoryType(str, Enum):
    """
    Category kinds.

    Transfers never carry a category, so there is no TRANSFER member.
    """
    INCOME = "income"
    EXPENSE = "expense"


CATEGORY_COLORS: dict[CategoryType, str] = {
    CategoryType.INCOME: "#22c55e",
    CategoryType.EXPENSE: "#f97316",
}


class LedgerModel(BaseModel):
    """Base for persisted ledger entities: frozen, camelCase on the wire."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# =============================================================================
# ENTITIES
# =============================================================================

class Account(LedgerModel):
    """
    A place money lives (wallet, bank account, ...).

    CRITICAL: balance is only ever replaced as the effect of a recorded
    transaction. Name and currency never change after creation.
    """
    id: str = Field(..., min_length=1)
    name: str
    currency: str = DEFAULT_CURRENCY
    balance: Money = Decimal("0")


class Category(LedgerModel):
    """An income or expense category. Type is fixed at creation."""
    id: str = Field(..., min_length=1)
    name: str
    type: CategoryType
    color: str


class Subcategory(LedgerModel):
    id: str = Field(..., min_length=1)
    category_id: str
    name: str


class Transaction(LedgerModel):
    """
    A recorded money movement.

    to_account_id only means something for transfers; category_id and
    subcategory_id only for income and expense.
    """
    id: str = Field(..., min_length=1)
    type: TransactionType
    amount: Money = Field(..., gt=0)
    account_id: str
    to_account_id: Optional[str] = None
    category_id: Optional[str] = None
    subcategory_id: Optional[str] = None
    notes: Optional[str] = None
    date: dt.date


# =============================================================================
# LEDGER STATE
# =============================================================================

class LedgerState(LedgerModel):
    """
    The complete ledger at a point in time.

    Transactions are ordered most-recent-first by insertion, which is not
    necessarily the order of their date field.
    """
    currency: str = DEFAULT_CURRENCY
    accounts: tuple[Account, ...] = ()
    categories: tuple[Category, ...] = ()
    subcategories: tuple[Subcategory, ...] = ()
    transactions: tuple[Transaction, ...] = ()

    def find_account(self, account_id: Optional[str]) -> Optional[Account]:
        if account_id is None:
            return None
        return next((a for a in self.accounts if a.id == account_id), None)

    def find_category(self, category_id: Optional[str]) -> Optional[Category]:
        if category_id is None:
            return None
        return next((c for c in self.categories if c.id == category_id), None)

    def find_subcategory(self, subcategory_id: Optional[str]) -> Optional[Subcategory]:
        if subcategory_id is None:
            return None
        return next((s for s in self.subcategories if s.id == subcategory_id), None)

    def to_snapshot(self) -> dict[str, Any]:
        """
        Convert to the persisted snapshot dictionary.

        Keys are camelCase, money is numeric and absent optional
        references are omitted.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_snapshot(cls, data: dict[str, Any]) -> "LedgerState":
        """Build a state from a snapshot dictionary (raises on bad shape)."""
        return cls.model_validate(data)
