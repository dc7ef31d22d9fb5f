"""Intent validation package."""

from nexa_ledger.validation.validator import (
    OUT_OF_RANGE,
    REFERENTIAL,
    IntentValidator,
    result_from_pydantic_error,
)

__all__ = ["OUT_OF_RANGE", "REFERENTIAL", "IntentValidator", "result_from_pydantic_error"]
