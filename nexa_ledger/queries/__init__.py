"""Read-side ledger queries package."""

from nexa_ledger.queries.summary import (
    CategoryNode,
    LedgerSummary,
    account_balances,
    category_hierarchy,
    filter_transactions,
    summarize,
    verify_balances,
)

__all__ = [
    "CategoryNode",
    "LedgerSummary",
    "account_balances",
    "category_hierarchy",
    "filter_transactions",
    "summarize",
    "verify_balances",
]
