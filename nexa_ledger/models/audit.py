"""
Audit Models for Nexa Ledger

Every committed intent and every persistence event is logged for audit
purposes. This provides:
1. Traceability of how the ledger reached its current state
2. Debugging information when a snapshot could not be read or written
3. Visibility of tolerated referential gaps

DESIGN DECISION: Audit events are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Ledger transitions
    STATE_INITIALIZED = "state_initialized"
    ACCOUNT_CREATED = "account_created"
    CATEGORY_CREATED = "category_created"
    SUBCATEGORY_CREATED = "subcategory_created"
    TRANSACTION_RECORDED = "transaction_recorded"

    # Validation outcomes
    REFERENCE_UNRESOLVED = "reference_unresolved"
    INTENT_REJECTED = "intent_rejected"

    # Persistence
    SNAPSHOT_LOADED = "snapshot_loaded"
    SNAPSHOT_SEEDED = "snapshot_seeded"
    SNAPSHOT_CORRUPTED = "snapshot_corrupted"
    SNAPSHOT_SAVED = "snapshot_saved"
    SNAPSHOT_SAVE_FAILED = "snapshot_save_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'account', 'transaction', 'snapshot')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a collaborator intent?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.account_created(account_id, name)
        event = AuditEventBuilder.snapshot_corrupted(key, error)
    """

    @staticmethod
    def state_initialized(
        accounts: int,
        transactions: int,
        currency: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_INITIALIZED,
            entity_type="ledger",
            description=f"Ledger initialized with {accounts} accounts",
            details={
                "accounts": accounts,
                "transactions": transactions,
                "currency": currency,
            },
        )

    @staticmethod
    def account_created(account_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_CREATED,
            entity_type="account",
            entity_id=account_id,
            description=f"Account created: {name}",
            details={"name": name},
            is_user_action=True,
        )

    @staticmethod
    def category_created(category_id: str, name: str, category_type: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_CREATED,
            entity_type="category",
            entity_id=category_id,
            description=f"Category created: {name} ({category_type})",
            details={"name": name, "type": category_type},
            is_user_action=True,
        )

    @staticmethod
    def subcategory_created(subcategory_id: str, category_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUBCATEGORY_CREATED,
            entity_type="subcategory",
            entity_id=subcategory_id,
            description=f"Subcategory created: {name}",
            details={"name": name, "category_id": category_id},
            is_user_action=True,
        )

    @staticmethod
    def transaction_recorded(
        transaction_id: str,
        transaction_type: str,
        amount: Decimal,
        balance_changes: dict[str, Decimal],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_RECORDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction recorded: {transaction_type} of {amount}",
            details={
                "type": transaction_type,
                "amount": str(amount),
                "balance_changes": {k: str(v) for k, v in balance_changes.items()},
            },
            is_user_action=True,
        )

    @staticmethod
    def reference_unresolved(
        intent_kind: str,
        field: str,
        reference_id: Optional[str],
        message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REFERENCE_UNRESOLVED,
            severity=AuditSeverity.WARNING,
            entity_type="intent",
            description=message,
            details={
                "intent": intent_kind,
                "field": field,
                "reference_id": reference_id,
            },
        )

    @staticmethod
    def intent_rejected(intent_kind: str, issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INTENT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="intent",
            description=f"Intent {intent_kind} rejected with {len(issues)} issues",
            details={"intent": intent_kind, "issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def snapshot_loaded(key: str, accounts: int, transactions: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_LOADED,
            entity_type="snapshot",
            entity_id=key,
            description=f"Snapshot loaded: {transactions} transactions",
            details={"accounts": accounts, "transactions": transactions},
        )

    @staticmethod
    def snapshot_seeded(key: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_SEEDED,
            entity_type="snapshot",
            entity_id=key,
            description="No stored snapshot, starting from the default state",
        )

    @staticmethod
    def snapshot_corrupted(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_CORRUPTED,
            severity=AuditSeverity.ERROR,
            entity_type="snapshot",
            entity_id=key,
            description="Stored snapshot could not be read, using the default state",
            error_message=error_message,
        )

    @staticmethod
    def snapshot_saved(key: str, size_bytes: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_SAVED,
            severity=AuditSeverity.DEBUG,
            entity_type="snapshot",
            entity_id=key,
            description="Snapshot saved",
            details={"size_bytes": size_bytes},
        )

    @staticmethod
    def snapshot_save_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="snapshot",
            entity_id=key,
            description="Snapshot could not be saved",
            error_message=error_message,
        )
