"""
Nexa Ledger - Source Package

Personal finance ledger: accounts, categories, subcategories and
transactions, with balances derived from the transaction history and the
whole state persisted between sessions.

DESIGN PRINCIPLES:
1. One owner of state - the ledger store
2. Every transition builds a new immutable state
3. Corrupted storage never crashes the app
4. Every change is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Nexa Ledger Team"
