"""
Two-Stage Intent Validation

STAGE 1 - SCHEMA VALIDATION:
- Done by the pydantic intent models themselves
- Blank names, non-positive amounts, unknown types
- result_from_pydantic_error() turns those failures into a ValidationResult

STAGE 2 - SEMANTIC VALIDATION:
- Checks an intent against the current ledger state
- Unresolved account, category and subcategory references
- Transfers without a target or onto the same account
- Category type / transaction type mismatches
- Balances pushed outside the storable range (check_balances)

Referential issues are warnings under the TOLERATE policy (the intent is
applied and the gap audited) and errors under REJECT. Out-of-range
balances are always errors. Everything else found in stage 2 is a warning.

IMPORTANT: Validation NEVER silently fixes issues. It reports them.
"""

from typing import Optional

from pydantic import ValidationError

from nexa_ledger.config import ReferentialPolicy, get_settings
from nexa_ledger.models.intents import (
    CreateSubcategoryIntent,
    Intent,
    RecordTransactionIntent,
)
from nexa_ledger.models.ledger import MONEY_LIMIT, LedgerState, TransactionType
from nexa_ledger.models.validation import ValidationIssue, ValidationResult


REFERENTIAL = "referential"
OUT_OF_RANGE = "out_of_range"


def result_from_pydantic_error(intent_kind: str, error: ValidationError) -> ValidationResult:
    """Convert a pydantic model error into error-level issues."""
    issues = [
        ValidationIssue(
            field=".".join(str(part) for part in err["loc"]) or intent_kind,
            issue_type=err["type"],
            message=err["msg"],
            severity="error",
        )
        for err in error.errors()
    ]
    return ValidationResult(intent_kind=intent_kind, issues=issues)


class IntentValidator:
    """
    Validates intents against the ledger state.

    Stage 1 already happened when the intent object was built, so only
    the semantic stage runs here.
    """

    def __init__(self, policy: Optional[ReferentialPolicy] = None):
        """
        Initialize validator.

        Args:
            policy: How to treat unresolved references.
                    If None, uses the configured ledger policy.
        """
        self._policy = policy or get_settings().ledger.referential_policy

    @property
    def policy(self) -> ReferentialPolicy:
        return self._policy

    def validate(self, state: LedgerState, intent: Intent) -> ValidationResult:
        issues: list[ValidationIssue] = []

        if isinstance(intent, CreateSubcategoryIntent):
            issues.extend(self._check_subcategory(state, intent))
        elif isinstance(intent, RecordTransactionIntent):
            issues.extend(self._check_transaction(state, intent))
        # Initialize, account and category intents reference nothing

        return ValidationResult(intent_kind=intent.kind, issues=issues)

    def check_balances(self, intent: Intent, state: LedgerState) -> ValidationResult:
        """
        Check that the balances a transition produced can still be stored.

        Runs on the state an intent would lead to, before it is committed.
        """
        issues = [
            ValidationIssue(
                field="amount",
                issue_type=OUT_OF_RANGE,
                message=f"Balance of account {account.name} would exceed {MONEY_LIMIT}",
                severity="error",
                reference_id=account.id,
            )
            for account in state.accounts
            if abs(account.balance) >= MONEY_LIMIT
        ]
        return ValidationResult(intent_kind=intent.kind, issues=issues)

    def _referential(
        self,
        field: str,
        reference_id: Optional[str],
        message: str,
    ) -> ValidationIssue:
        severity = "error" if self._policy == ReferentialPolicy.REJECT else "warning"
        return ValidationIssue(
            field=field,
            issue_type=REFERENTIAL,
            message=message,
            severity=severity,
            reference_id=reference_id,
        )

    def _check_subcategory(
        self,
        state: LedgerState,
        intent: CreateSubcategoryIntent,
    ) -> list[ValidationIssue]:
        if state.find_category(intent.category_id) is not None:
            return []
        return [self._referential(
            "category_id",
            intent.category_id,
            f"Category {intent.category_id} does not exist",
        )]

    def _check_transaction(
        self,
        state: LedgerState,
        intent: RecordTransactionIntent,
    ) -> list[ValidationIssue]:
        issues = []

        if state.find_account(intent.account_id) is None:
            issues.append(self._referential(
                "account_id",
                intent.account_id,
                f"Account {intent.account_id} does not exist",
            ))

        if intent.type == TransactionType.TRANSFER:
            issues.extend(self._check_transfer(state, intent))
        else:
            issues.extend(self._check_categorized(state, intent))

        return issues

    def _check_transfer(
        self,
        state: LedgerState,
        intent: RecordTransactionIntent,
    ) -> list[ValidationIssue]:
        issues = []

        if intent.to_account_id is None:
            issues.append(self._referential(
                "to_account_id",
                None,
                "Transfer has no target account",
            ))
        elif state.find_account(intent.to_account_id) is None:
            issues.append(self._referential(
                "to_account_id",
                intent.to_account_id,
                f"Target account {intent.to_account_id} does not exist",
            ))
        elif intent.to_account_id == intent.account_id:
            issues.append(ValidationIssue(
                field="to_account_id",
                issue_type="inconsistent",
                message="Transfer source and target are the same account",
                severity="warning",
                reference_id=intent.to_account_id,
            ))

        if intent.category_id is not None or intent.subcategory_id is not None:
            issues.append(ValidationIssue(
                field="category_id",
                issue_type="inconsistent",
                message="Transfers are not categorized; category is ignored",
                severity="warning",
                reference_id=intent.category_id or intent.subcategory_id,
            ))

        return issues

    def _check_categorized(
        self,
        state: LedgerState,
        intent: RecordTransactionIntent,
    ) -> list[ValidationIssue]:
        issues = []

        if intent.to_account_id is not None:
            issues.append(ValidationIssue(
                field="to_account_id",
                issue_type="inconsistent",
                message=f"Target account is ignored for {intent.type.value} transactions",
                severity="warning",
                reference_id=intent.to_account_id,
            ))

        category = state.find_category(intent.category_id)
        if intent.category_id is not None and category is None:
            issues.append(self._referential(
                "category_id",
                intent.category_id,
                f"Category {intent.category_id} does not exist",
            ))
        elif category is not None and category.type.value != intent.type.value:
            issues.append(ValidationIssue(
                field="category_id",
                issue_type="inconsistent",
                message=(
                    f"Category {category.name} is an {category.type.value} category "
                    f"but the transaction is {intent.type.value}"
                ),
                severity="warning",
                reference_id=category.id,
            ))

        subcategory = state.find_subcategory(intent.subcategory_id)
        if intent.subcategory_id is not None and subcategory is None:
            issues.append(self._referential(
                "subcategory_id",
                intent.subcategory_id,
                f"Subcategory {intent.subcategory_id} does not exist",
            ))
        elif subcategory is not None and subcategory.category_id != intent.category_id:
            issues.append(ValidationIssue(
                field="subcategory_id",
                issue_type="inconsistent",
                message=f"Subcategory {subcategory.name} does not belong to the given category",
                severity="warning",
                reference_id=subcategory.id,
            ))

        return issues
