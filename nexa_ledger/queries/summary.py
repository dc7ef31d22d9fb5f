"""
Ledger Queries

DESIGN DECISION: Every derived figure is computed purely from a LedgerState
snapshot. Callers never do balance arithmetic themselves and never read
storage directly; they ask these functions.

GUARANTEES:
- Only reads the snapshot it is given
- Never modifies it
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from nexa_ledger.ledger.balances import replay_balances
from nexa_ledger.models.ledger import (
    Category,
    LedgerState,
    DecimalNumber,
    Subcategory,
    Transaction,
    TransactionType,
)


class LedgerSummary(BaseModel):
    """Headline totals across the whole ledger."""
    model_config = ConfigDict(frozen=True)

    currency: str
    total_income: DecimalNumber = Decimal("0")
    total_expense: DecimalNumber = Decimal("0")
    total_transfers: DecimalNumber = Decimal("0")
    net_balance: DecimalNumber = Field(
        default=Decimal("0"),
        description="Sum of all account balances"
    )
    transaction_count: int = 0


class CategoryNode(BaseModel):
    """A category together with its subcategories, in creation order."""
    model_config = ConfigDict(frozen=True)

    category: Category
    subcategories: tuple[Subcategory, ...] = ()


def summarize(state: LedgerState) -> LedgerSummary:
    """
    Compute income, expense and transfer totals plus the net balance.

    Totals cover every recorded transaction, including those whose
    accounts no longer resolve.
    """
    totals = {kind: Decimal("0") for kind in TransactionType}
    for transaction in state.transactions:
        totals[transaction.type] += transaction.amount

    return LedgerSummary(
        currency=state.currency,
        total_income=totals[TransactionType.INCOME],
        total_expense=totals[TransactionType.EXPENSE],
        total_transfers=totals[TransactionType.TRANSFER],
        net_balance=sum((account.balance for account in state.accounts), Decimal("0")),
        transaction_count=len(state.transactions),
    )


def category_hierarchy(state: LedgerState) -> list[CategoryNode]:
    """Group subcategories under their categories. Orphans are left out."""
    return [
        CategoryNode(
            category=category,
            subcategories=tuple(
                sub for sub in state.subcategories if sub.category_id == category.id
            ),
        )
        for category in state.categories
    ]


def _search_text(state: LedgerState, transaction: Transaction) -> str:
    def account_name(account_id: Optional[str]) -> str:
        account = state.find_account(account_id)
        return account.name if account else ""

    category = state.find_category(transaction.category_id)
    subcategory = state.find_subcategory(transaction.subcategory_id)
    parts = [
        account_name(transaction.account_id),
        category.name if category else "",
        subcategory.name if subcategory else "",
        transaction.notes or "",
        account_name(transaction.to_account_id),
    ]
    return " ".join(parts).lower()


def filter_transactions(
    state: LedgerState,
    type: Optional[TransactionType] = None,
    text: Optional[str] = None,
) -> list[Transaction]:
    """
    Filter transactions by type and free text.

    Text matches case-insensitively against the account name, category and
    subcategory names, notes and the transfer target's name. Order is kept
    (most recent first).
    """
    needle = (text or "").strip().lower()

    results = []
    for transaction in state.transactions:
        if type is not None and transaction.type != type:
            continue
        if needle and needle not in _search_text(state, transaction):
            continue
        results.append(transaction)
    return results


def account_balances(state: LedgerState) -> dict[str, Decimal]:
    """Current balance per account id."""
    return {account.id: account.balance for account in state.accounts}


def verify_balances(
    opening: LedgerState,
    current: LedgerState,
) -> dict[str, tuple[Decimal, Decimal]]:
    """
    Check current balances against a replay of the new transactions.

    `opening` must be an earlier state of the same ledger. Returns the
    accounts whose balance disagrees with the replay, as
    {account_id: (expected, actual)}; an empty dict means consistent.
    Accounts created after `opening` start from zero.
    """
    new_count = len(current.transactions) - len(opening.transactions)
    new_transactions = current.transactions[:max(new_count, 0)]

    starting = account_balances(opening)
    for account in current.accounts:
        starting.setdefault(account.id, Decimal("0"))

    expected = replay_balances(starting, new_transactions)
    actual = account_balances(current)
    return {
        account_id: (expected[account_id], balance)
        for account_id, balance in actual.items()
        if expected.get(account_id) != balance
    }
