"""
Ledger transition function.

apply_intent(state, intent) builds a brand new LedgerState; the state it
receives is never modified, so no observer can see a half-applied intent.
The only impurity is the id factory, which is injected.
"""

from typing import assert_never

from nexa_ledger.identifiers import IdFactory, generate_id
from nexa_ledger.ledger.balances import apply_effects, signed_effects
from nexa_ledger.models.intents import (
    CreateAccountIntent,
    CreateCategoryIntent,
    CreateSubcategoryIntent,
    InitializeIntent,
    Intent,
    RecordTransactionIntent,
)
from nexa_ledger.models.ledger import (
    CATEGORY_COLORS,
    Account,
    Category,
    LedgerState,
    Subcategory,
    Transaction,
)


def apply_intent(
    state: LedgerState,
    intent: Intent,
    new_id: IdFactory = generate_id,
) -> LedgerState:
    """
    Apply one intent and return the resulting state.

    Never rejects: validation is the store's job.
    """
    if isinstance(intent, InitializeIntent):
        return intent.snapshot
    if isinstance(intent, CreateAccountIntent):
        return create_account(state, intent, new_id)
    if isinstance(intent, CreateCategoryIntent):
        return create_category(state, intent, new_id)
    if isinstance(intent, CreateSubcategoryIntent):
        return create_subcategory(state, intent, new_id)
    if isinstance(intent, RecordTransactionIntent):
        return record_transaction(state, intent, new_id)
    assert_never(intent)


def create_account(
    state: LedgerState,
    intent: CreateAccountIntent,
    new_id: IdFactory,
) -> LedgerState:
    account = Account(
        id=new_id(),
        name=intent.name,
        currency=state.currency,
    )
    return state.model_copy(update={"accounts": (*state.accounts, account)})


def create_category(
    state: LedgerState,
    intent: CreateCategoryIntent,
    new_id: IdFactory,
) -> LedgerState:
    category = Category(
        id=new_id(),
        name=intent.name,
        type=intent.type,
        color=CATEGORY_COLORS[intent.type],
    )
    return state.model_copy(update={"categories": (*state.categories, category)})


def create_subcategory(
    state: LedgerState,
    intent: CreateSubcategoryIntent,
    new_id: IdFactory,
) -> LedgerState:
    subcategory = Subcategory(
        id=new_id(),
        category_id=intent.category_id,
        name=intent.name,
    )
    return state.model_copy(update={"subcategories": (*state.subcategories, subcategory)})


def record_transaction(
    state: LedgerState,
    intent: RecordTransactionIntent,
    new_id: IdFactory,
) -> LedgerState:
    """
    Record a transaction and move money between the accounts it names.

    The transaction is prepended even when its accounts are unknown; in
    that case no balance changes.
    """
    transaction = Transaction(
        id=new_id(),
        type=intent.type,
        amount=intent.amount,
        account_id=intent.account_id,
        to_account_id=intent.to_account_id,
        category_id=intent.category_id,
        subcategory_id=intent.subcategory_id,
        notes=intent.notes,
        date=intent.date,
    )
    effects = signed_effects(transaction, {account.id for account in state.accounts})
    return state.model_copy(update={
        "accounts": apply_effects(state.accounts, effects),
        "transactions": (transaction, *state.transactions),
    })
