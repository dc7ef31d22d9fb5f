"""
Data Models Package

This package contains all Pydantic models used by Nexa Ledger.
All state owned by the ledger must conform to these schemas.
"""

from nexa_ledger.models.ledger import (
    CATEGORY_COLORS,
    DEFAULT_CURRENCY,
    MONEY_LIMIT,
    Account,
    Category,
    CategoryType,
    DecimalNumber,
    LedgerState,
    Money,
    Subcategory,
    Transaction,
    TransactionType,
)
from nexa_ledger.models.intents import (
    CreateAccountIntent,
    CreateCategoryIntent,
    CreateSubcategoryIntent,
    InitializeIntent,
    Intent,
    RecordTransactionIntent,
    parse_intent,
)
from nexa_ledger.models.validation import ValidationIssue, ValidationResult
from nexa_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "CATEGORY_COLORS",
    "DEFAULT_CURRENCY",
    "MONEY_LIMIT",
    "Account",
    "Category",
    "CategoryType",
    "DecimalNumber",
    "LedgerState",
    "Money",
    "Subcategory",
    "Transaction",
    "TransactionType",
    # Intents
    "CreateAccountIntent",
    "CreateCategoryIntent",
    "CreateSubcategoryIntent",
    "InitializeIntent",
    "Intent",
    "RecordTransactionIntent",
    "parse_intent",
    # Validation
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
