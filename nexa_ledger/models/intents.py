"""
Ledger Intents

An intent is a requested state transition. The set of intents is closed:
Intent is a discriminated union on the `kind` tag, and the reducer handles
every member explicitly.

Stage 1 validation (shape) happens here. Names are stripped and must not be
blank, amounts must be positive. Blank optional references are treated as
absent.
"""

import datetime as dt
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
)

from nexa_ledger.models.ledger import (
    CategoryType,
    LedgerState,
    Money,
    TransactionType,
)


class BaseIntent(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        extra="forbid",
    )


class InitializeIntent(BaseIntent):
    """Replace the whole state with a loaded snapshot."""
    kind: Literal["initialize"] = "initialize"
    snapshot: LedgerState


class CreateAccountIntent(BaseIntent):
    kind: Literal["create_account"] = "create_account"
    name: str = Field(..., min_length=1, max_length=200)


class CreateCategoryIntent(BaseIntent):
    kind: Literal["create_category"] = "create_category"
    name: str = Field(..., min_length=1, max_length=200)
    type: CategoryType


class CreateSubcategoryIntent(BaseIntent):
    kind: Literal["create_subcategory"] = "create_subcategory"
    category_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)


class RecordTransactionIntent(BaseIntent):
    """
    Record an income, expense or transfer.

    The transaction id is minted by the ledger, not supplied here.
    """
    kind: Literal["record_transaction"] = "record_transaction"
    type: TransactionType
    amount: Money = Field(..., gt=0)
    account_id: str = Field(..., min_length=1)
    to_account_id: Optional[str] = None
    category_id: Optional[str] = None
    subcategory_id: Optional[str] = None
    notes: Optional[str] = Field(default=None, max_length=1000)
    date: dt.date = Field(default_factory=dt.date.today)

    @field_validator('to_account_id', 'category_id', 'subcategory_id', 'notes')
    @classmethod
    def blank_as_absent(cls, v: Optional[str]) -> Optional[str]:
        """Form fields arrive as empty strings when left untouched."""
        if v is not None and not v:
            return None
        return v


Intent = Annotated[
    Union[
        InitializeIntent,
        CreateAccountIntent,
        CreateCategoryIntent,
        CreateSubcategoryIntent,
        RecordTransactionIntent,
    ],
    Field(discriminator="kind"),
]

_intent_adapter: TypeAdapter[Intent] = TypeAdapter(Intent)


def parse_intent(data: dict[str, Any]) -> Intent:
    """
    Build the matching intent from a plain dictionary.

    Raises:
        pydantic.ValidationError: If the tag is unknown or fields are invalid
    """
    return _intent_adapter.validate_python(data)
