"""Ledger exceptions."""

from typing import Optional

from nexa_ledger.models.validation import ValidationResult


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class ValidationFailure(LedgerError):
    """
    An intent was refused. The state is unchanged.

    Carries the ValidationResult so callers can show every issue.
    """

    def __init__(self, message: str, result: Optional[ValidationResult] = None):
        super().__init__(message)
        self.result = result

    @classmethod
    def from_result(cls, result: ValidationResult) -> "ValidationFailure":
        details = "; ".join(f"{issue.field}: {issue.message}" for issue in result.errors)
        return cls(f"Intent {result.intent_kind} rejected: {details}", result)


class ReferentialFailure(ValidationFailure):
    """An intent references an account, category or subcategory that does not exist."""
    pass


class LedgerNotInitializedError(LedgerError):
    """An intent other than initialize arrived before the store was opened."""
    pass


class LedgerClosedError(LedgerError):
    """The store has been closed and accepts no more intents."""
    pass
