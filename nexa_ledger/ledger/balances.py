"""
Balance algorithm.

One rule decides how a transaction moves money; both the reducer and
replay_balances use it, so a replayed history always agrees with the
balances the ledger holds.

    income    source += amount             (if source exists)
    expense   source -= amount             (if source exists, may go negative)
    transfer  source -= amount, target += amount
                                           (only if both exist)
"""

from collections.abc import Collection, Iterable, Mapping
from decimal import Decimal

from nexa_ledger.models.ledger import Account, Transaction, TransactionType


def signed_effects(
    transaction: Transaction,
    account_ids: Collection[str],
) -> dict[str, Decimal]:
    """
    Compute the balance change each known account receives.

    Args:
        transaction: The transaction being applied
        account_ids: Ids of the accounts that exist

    Returns:
        Mapping of account id to signed delta. Empty when the referenced
        account(s) are unknown.
    """
    source = transaction.account_id
    amount = transaction.amount

    if transaction.type == TransactionType.INCOME:
        return {source: amount} if source in account_ids else {}

    if transaction.type == TransactionType.EXPENSE:
        return {source: -amount} if source in account_ids else {}

    target = transaction.to_account_id
    if source not in account_ids or target is None or target not in account_ids:
        return {}

    effects: dict[str, Decimal] = {source: -amount}
    effects[target] = effects.get(target, Decimal("0")) + amount
    return effects


def apply_effects(
    accounts: tuple[Account, ...],
    effects: Mapping[str, Decimal],
) -> tuple[Account, ...]:
    """Return the accounts with deltas applied. Untouched accounts are reused."""
    if not effects:
        return accounts
    return tuple(
        account.model_copy(update={"balance": account.balance + effects[account.id]})
        if account.id in effects
        else account
        for account in accounts
    )


def replay_balances(
    opening: Mapping[str, Decimal],
    transactions: Iterable[Transaction],
) -> dict[str, Decimal]:
    """
    Recompute balances from opening values and a transaction history.

    Order of the history does not matter. Only accounts present in
    `opening` are tracked, exactly as the reducer only moves money for
    accounts that exist.
    """
    balances = dict(opening)
    for transaction in transactions:
        for account_id, delta in signed_effects(transaction, balances).items():
            balances[account_id] += delta
    return balances
