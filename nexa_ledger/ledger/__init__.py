"""Ledger state management: balance rule, transition function and store."""

from nexa_ledger.ledger.balances import apply_effects, replay_balances, signed_effects
from nexa_ledger.ledger.errors import (
    LedgerClosedError,
    LedgerError,
    LedgerNotInitializedError,
    ReferentialFailure,
    ValidationFailure,
)
from nexa_ledger.ledger.reducer import apply_intent
from nexa_ledger.ledger.store import LedgerStore, Listener

__all__ = [
    # Balances
    "apply_effects",
    "replay_balances",
    "signed_effects",
    # Errors
    "LedgerClosedError",
    "LedgerError",
    "LedgerNotInitializedError",
    "ReferentialFailure",
    "ValidationFailure",
    # Transitions
    "apply_intent",
    "LedgerStore",
    "Listener",
]
