"""
Ledger Store

The store owns the canonical LedgerState and is the only writer of it.

Flow for every intent:
1. Validate against the current state (semantic stage)
2. Reject, or apply through the pure transition function
   (rejecting if a balance would leave the storable range)
3. Commit the new state and audit the change
4. Persist the snapshot (when autosave is on)
5. Notify subscribers (a failing subscriber is logged, never raised)

DESIGN DECISION: The store is an explicit object built once at startup and
handed to whoever needs it. It has a lifecycle: open() loads the snapshot,
close() writes a final one and refuses further intents.
"""

from typing import Any, Callable, NoReturn, Optional

import structlog
from pydantic import ValidationError

from nexa_ledger.audit import AuditLogger
from nexa_ledger.config import get_settings
from nexa_ledger.identifiers import IdFactory, generate_id
from nexa_ledger.ledger.balances import signed_effects
from nexa_ledger.ledger.errors import (
    LedgerClosedError,
    LedgerNotInitializedError,
    ReferentialFailure,
    ValidationFailure,
)
from nexa_ledger.ledger.reducer import apply_intent
from nexa_ledger.models.audit import AuditEventBuilder
from nexa_ledger.models.intents import (
    BaseIntent,
    CreateAccountIntent,
    CreateCategoryIntent,
    CreateSubcategoryIntent,
    InitializeIntent,
    Intent,
    RecordTransactionIntent,
)
from nexa_ledger.models.ledger import (
    Account,
    Category,
    CategoryType,
    LedgerState,
    Subcategory,
    Transaction,
    TransactionType,
)
from nexa_ledger.models.validation import ValidationResult
from nexa_ledger.seed import default_state
from nexa_ledger.services.persistence import LedgerPersistence
from nexa_ledger.services.storage import StorageError
from nexa_ledger.validation import REFERENTIAL, IntentValidator, result_from_pydantic_error


logger = structlog.get_logger(__name__)

Listener = Callable[[LedgerState], None]


class LedgerStore:
    """
    Owns the ledger state and applies intents to it.

    Usage:
        with LedgerStore(persistence) as store:
            wallet = store.create_account("Wallet")
            store.record_transaction("income", 500, wallet.id)
            print(store.state.accounts)
    """

    def __init__(
        self,
        persistence: Optional[LedgerPersistence] = None,
        validator: Optional[IntentValidator] = None,
        id_factory: Optional[IdFactory] = None,
        audit_logger: Optional[AuditLogger] = None,
        autosave: Optional[bool] = None,
    ):
        """
        Initialize the store. Nothing is loaded until open().

        Args:
            persistence: Snapshot adapter. If None, state lives in memory only.
            validator: Semantic validator. If None, uses the configured policy.
            id_factory: Source of new entity ids.
            audit_logger: Audit logger. If None, logs locally.
            autosave: Save after every intent. If None, uses settings.
        """
        self._persistence = persistence
        self._validator = validator or IntentValidator()
        self._new_id = id_factory or generate_id
        self._audit_logger = audit_logger or AuditLogger()
        self._autosave = get_settings().ledger.autosave if autosave is None else autosave
        self._state: Optional[LedgerState] = None
        self._listeners: list[Listener] = []
        self._closed = False

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self._state is not None and not self._closed

    @property
    def is_closed(self) -> bool:
        return self._closed

    def open(self) -> LedgerState:
        """
        Load the stored snapshot (or the seed) and initialize the ledger.

        Calling open() on an already open store returns the current state.
        """
        if self._closed:
            raise LedgerClosedError("Ledger store is closed")
        if self._state is not None:
            return self._state

        snapshot = self._persistence.load() if self._persistence else default_state()
        return self.dispatch(InitializeIntent(snapshot=snapshot))

    def close(self) -> None:
        """Write a final snapshot and stop accepting intents."""
        if self._closed:
            return
        if self._state is not None and self._persistence:
            self._persist(self._state)
        self._closed = True
        self._listeners.clear()

    def __enter__(self) -> "LedgerStore":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    @property
    def state(self) -> LedgerState:
        """The current immutable snapshot."""
        if self._state is None:
            raise LedgerNotInitializedError("Ledger store has not been opened")
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Call `listener` with every committed state.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Writing
    # -------------------------------------------------------------------------

    def dispatch(self, intent: Intent) -> LedgerState:
        """
        Validate and apply one intent.

        Returns:
            The new state

        Raises:
            LedgerClosedError: If the store was closed
            LedgerNotInitializedError: If the store was never initialized
            ReferentialFailure: If references do not resolve under REJECT
            ValidationFailure: If the intent is otherwise invalid or would
                push a balance out of the storable range
        """
        if self._closed:
            raise LedgerClosedError("Ledger store is closed")
        if self._state is None and not isinstance(intent, InitializeIntent):
            raise LedgerNotInitializedError(
                f"Cannot apply {intent.kind} before the ledger is initialized"
            )

        current = self._state if self._state is not None else LedgerState()

        result = self._validator.validate(current, intent)
        if result.has_errors:
            self._reject(result)

        new_state = apply_intent(current, intent, self._new_id)
        range_result = self._validator.check_balances(intent, new_state)
        if range_result.has_errors:
            self._reject(range_result)

        for issue in result.issues_of_type(REFERENTIAL):
            self._audit_logger.log(AuditEventBuilder.reference_unresolved(
                intent.kind,
                issue.field,
                issue.reference_id,
                issue.message,
            ))

        self._state = new_state
        self._audit_commit(current, intent, new_state)

        if self._autosave and self._persistence:
            self._persist(new_state)

        self._notify(new_state)

        return new_state

    def create_account(self, name: str) -> Account:
        state = self._dispatch_fields(CreateAccountIntent, name=name)
        return state.accounts[-1]

    def create_category(self, name: str, type: CategoryType | str) -> Category:
        state = self._dispatch_fields(CreateCategoryIntent, name=name, type=type)
        return state.categories[-1]

    def create_subcategory(self, category_id: str, name: str) -> Subcategory:
        state = self._dispatch_fields(
            CreateSubcategoryIntent,
            category_id=category_id,
            name=name,
        )
        return state.subcategories[-1]

    def record_transaction(
        self,
        type: TransactionType | str,
        amount: Any,
        account_id: str,
        **optional: Any,
    ) -> Transaction:
        """
        Record a transaction.

        Optional keyword fields: to_account_id, category_id, subcategory_id,
        notes, date (defaults to today).
        """
        state = self._dispatch_fields(
            RecordTransactionIntent,
            type=type,
            amount=amount,
            account_id=account_id,
            **optional,
        )
        return state.transactions[0]

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _dispatch_fields(self, intent_cls: type[BaseIntent], **fields: Any) -> LedgerState:
        kind = intent_cls.model_fields["kind"].default
        try:
            intent = intent_cls(**fields)
        except ValidationError as e:
            result = result_from_pydantic_error(kind, e)
            self._audit_logger.log(AuditEventBuilder.intent_rejected(
                kind,
                [issue.model_dump() for issue in result.errors],
            ))
            raise ValidationFailure.from_result(result) from e
        return self.dispatch(intent)

    def _reject(self, result: ValidationResult) -> NoReturn:
        self._audit_logger.log(AuditEventBuilder.intent_rejected(
            result.intent_kind,
            [issue.model_dump() for issue in result.errors],
        ))
        if any(issue.issue_type == REFERENTIAL for issue in result.errors):
            raise ReferentialFailure.from_result(result)
        raise ValidationFailure.from_result(result)

    def _notify(self, state: LedgerState) -> None:
        # The intent is committed at this point; listener errors are only logged
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(
                    "listener_failed",
                    listener=repr(listener),
                    error=str(e),
                    exc_info=True,
                )

    def _persist(self, state: LedgerState) -> None:
        # The committed state stands even if it cannot be written
        try:
            self._persistence.save(state)
        except StorageError as e:
            self._audit_logger.log(
                AuditEventBuilder.snapshot_save_failed(self._persistence.key, str(e))
            )

    def _audit_commit(
        self,
        previous: LedgerState,
        intent: Intent,
        state: LedgerState,
    ) -> None:
        if isinstance(intent, InitializeIntent):
            event = AuditEventBuilder.state_initialized(
                accounts=len(state.accounts),
                transactions=len(state.transactions),
                currency=state.currency,
            )
        elif isinstance(intent, CreateAccountIntent):
            account = state.accounts[-1]
            event = AuditEventBuilder.account_created(account.id, account.name)
        elif isinstance(intent, CreateCategoryIntent):
            category = state.categories[-1]
            event = AuditEventBuilder.category_created(
                category.id, category.name, category.type.value
            )
        elif isinstance(intent, CreateSubcategoryIntent):
            subcategory = state.subcategories[-1]
            event = AuditEventBuilder.subcategory_created(
                subcategory.id, subcategory.category_id, subcategory.name
            )
        else:
            transaction = state.transactions[0]
            event = AuditEventBuilder.transaction_recorded(
                transaction.id,
                transaction.type.value,
                transaction.amount,
                signed_effects(transaction, {a.id for a in previous.accounts}),
            )
        self._audit_logger.log(event)
