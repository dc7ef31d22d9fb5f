"""
Tests for the ledger transition function and the balance rule.

Scenarios use fixed ids so expected states can be written out exactly.
"""

import datetime as dt
import random
from decimal import Decimal

import pytest

from nexa_ledger.ledger import apply_intent, replay_balances, signed_effects
from nexa_ledger.models import (
    Account,
    CategoryType,
    CreateAccountIntent,
    CreateCategoryIntent,
    CreateSubcategoryIntent,
    InitializeIntent,
    LedgerState,
    RecordTransactionIntent,
    Transaction,
    TransactionType,
)
from nexa_ledger.seed import DEFAULT_STATE


def ledger(**balances: str) -> LedgerState:
    return LedgerState(
        accounts=tuple(
            Account(id=account_id, name=account_id.upper(), balance=Decimal(balance))
            for account_id, balance in balances.items()
        )
    )


def balance_of(state: LedgerState, account_id: str) -> Decimal:
    return state.find_account(account_id).balance


class TestRecordTransaction:
    """Tests for the record transaction transition."""

    def test_income_adds_to_account(self, ids):
        """Income of 500 on an account holding 1000 leaves 1500."""
        state = ledger(a="1000")
        new_state = apply_intent(
            state,
            RecordTransactionIntent(type="income", amount=500, account_id="a"),
            ids,
        )
        assert balance_of(new_state, "a") == Decimal("1500")
        assert new_state.transactions[0].id == "id-1"
        assert new_state.transactions[0].amount == Decimal("500")

    def test_expense_may_overdraw(self, ids):
        """Expenses have no floor; balances can go negative."""
        state = ledger(a="100")
        new_state = apply_intent(
            state,
            RecordTransactionIntent(type="expense", amount=250, account_id="a"),
            ids,
        )
        assert balance_of(new_state, "a") == Decimal("-150")

    def test_transfer_moves_money(self, ids):
        """Transfer of 200 from A(500) to B(100) leaves both at 300."""
        state = ledger(a="500", b="100")
        new_state = apply_intent(
            state,
            RecordTransactionIntent(type="transfer", amount=200, account_id="a", to_account_id="b"),
            ids,
        )
        assert balance_of(new_state, "a") == Decimal("300")
        assert balance_of(new_state, "b") == Decimal("300")

    def test_unknown_account_recorded_without_effect(self, ids):
        """The transaction is kept but no balance changes."""
        state = ledger(a="500")
        new_state = apply_intent(
            state,
            RecordTransactionIntent(type="income", amount=75, account_id="ghost"),
            ids,
        )
        assert len(new_state.transactions) == 1
        assert new_state.transactions[0].account_id == "ghost"
        assert new_state.accounts == state.accounts

    def test_transfer_with_unknown_target_has_no_effect(self, ids):
        """Both sides must resolve for a transfer to move money."""
        state = ledger(a="500", b="100")
        new_state = apply_intent(
            state,
            RecordTransactionIntent(type="transfer", amount=50, account_id="a", to_account_id="ghost"),
            ids,
        )
        assert new_state.accounts == state.accounts
        assert len(new_state.transactions) == 1

    def test_transfer_without_target_has_no_effect(self, ids):
        state = ledger(a="500")
        new_state = apply_intent(
            state,
            RecordTransactionIntent(type="transfer", amount=50, account_id="a"),
            ids,
        )
        assert new_state.accounts == state.accounts
        assert new_state.transactions[0].to_account_id is None

    def test_transfer_to_same_account_nets_to_zero(self, ids):
        state = ledger(a="500")
        new_state = apply_intent(
            state,
            RecordTransactionIntent(type="transfer", amount=50, account_id="a", to_account_id="a"),
            ids,
        )
        assert balance_of(new_state, "a") == Decimal("500")

    def test_newest_transaction_first(self, ids):
        """Transactions are ordered by insertion, most recent first, regardless of date."""
        state = ledger(a="0")
        state = apply_intent(
            state,
            RecordTransactionIntent(type="income", amount=1, account_id="a", date=dt.date(2024, 6, 1)),
            ids,
        )
        state = apply_intent(
            state,
            RecordTransactionIntent(type="income", amount=2, account_id="a", date=dt.date(2024, 1, 1)),
            ids,
        )
        assert [t.id for t in state.transactions] == ["id-2", "id-1"]

    def test_optional_fields_are_carried(self, ids):
        state = DEFAULT_STATE
        new_state = apply_intent(
            state,
            RecordTransactionIntent(
                type="expense",
                amount="320.50",
                account_id="wallet",
                category_id="food",
                subcategory_id="food-groceries",
                notes="Weekly vegetables",
                date=dt.date(2024, 12, 15),
            ),
            ids,
        )
        txn = new_state.transactions[0]
        assert txn.category_id == "food"
        assert txn.subcategory_id == "food-groceries"
        assert txn.notes == "Weekly vegetables"
        assert txn.date == dt.date(2024, 12, 15)
        assert balance_of(new_state, "wallet") == Decimal("8179.50")

    def test_prior_state_is_untouched(self, ids):
        """Transitions build a new state and never mutate the old one."""
        state = ledger(a="1000", b="0")
        before = state.model_copy(deep=True)

        new_state = apply_intent(
            state,
            RecordTransactionIntent(type="transfer", amount=10, account_id="a", to_account_id="b"),
            ids,
        )

        assert new_state is not state
        assert state == before
        assert state.transactions == ()

    def test_other_fields_unchanged(self, ids):
        new_state = apply_intent(
            DEFAULT_STATE,
            RecordTransactionIntent(type="income", amount=10, account_id="savings"),
            ids,
        )
        assert new_state.categories == DEFAULT_STATE.categories
        assert new_state.subcategories == DEFAULT_STATE.subcategories
        assert new_state.currency == DEFAULT_STATE.currency
        # Accounts not involved keep their identity
        assert new_state.accounts[0] is DEFAULT_STATE.accounts[0]


class TestCreationIntents:
    """Tests for the account, category and subcategory transitions."""

    def test_create_account(self, ids):
        """New accounts have a fresh id, zero balance and the ledger currency."""
        state = LedgerState(currency="USD", accounts=(Account(id="a", name="A", currency="USD"),))
        new_state = apply_intent(state, CreateAccountIntent(name="Brokerage"), ids)

        assert len(new_state.accounts) == 2
        account = new_state.accounts[-1]
        assert account.id == "id-1"
        assert account.name == "Brokerage"
        assert account.balance == Decimal("0")
        assert account.currency == "USD"
        assert new_state.accounts[0] == state.accounts[0]

    def test_duplicate_account_names_allowed(self, ids):
        state = apply_intent(DEFAULT_STATE, CreateAccountIntent(name="Wallet"), ids)
        assert [a.name for a in state.accounts].count("Wallet") == 2

    @pytest.mark.parametrize(
        "category_type, color",
        [(CategoryType.INCOME, "#22c55e"), (CategoryType.EXPENSE, "#f97316")],
    )
    def test_create_category_color_follows_type(self, ids, category_type, color):
        new_state = apply_intent(
            DEFAULT_STATE,
            CreateCategoryIntent(name="Gifts", type=category_type),
            ids,
        )
        category = new_state.categories[-1]
        assert category.type == category_type
        assert category.color == color
        assert new_state.categories[:-1] == DEFAULT_STATE.categories

    def test_create_subcategory(self, ids):
        new_state = apply_intent(
            DEFAULT_STATE,
            CreateSubcategoryIntent(category_id="bills", name="Water"),
            ids,
        )
        subcategory = new_state.subcategories[-1]
        assert subcategory.category_id == "bills"
        assert subcategory.name == "Water"
        assert len(new_state.subcategories) == len(DEFAULT_STATE.subcategories) + 1

    def test_subcategory_for_unknown_category_still_appended(self, ids):
        """The transition itself does not check references."""
        new_state = apply_intent(
            DEFAULT_STATE,
            CreateSubcategoryIntent(category_id="nope", name="Orphan"),
            ids,
        )
        assert new_state.subcategories[-1].category_id == "nope"

    def test_every_creation_mints_unseen_id(self):
        """Ids from the default generator never collide with existing ones."""
        state = DEFAULT_STATE
        for n in range(20):
            state = apply_intent(state, CreateAccountIntent(name=f"acc {n}"))
            state = apply_intent(state, CreateCategoryIntent(name=f"cat {n}", type="expense"))
            state = apply_intent(state, CreateSubcategoryIntent(category_id="food", name=f"sub {n}"))

        all_ids = (
            [a.id for a in state.accounts]
            + [c.id for c in state.categories]
            + [s.id for s in state.subcategories]
        )
        assert len(all_ids) == len(set(all_ids))


class TestInitialize:
    def test_initialize_replaces_everything(self):
        state = ledger(a="1")
        new_state = apply_intent(state, InitializeIntent(snapshot=DEFAULT_STATE))
        assert new_state == DEFAULT_STATE


class TestBalanceProperty:
    """Final balance equals opening balance plus every signed contribution."""

    def test_random_history_matches_independent_sum(self, ids):
        rng = random.Random(20241019)
        opening = {"a": Decimal("1000"), "b": Decimal("0"), "c": Decimal("-50")}
        state = ledger(**{k: str(v) for k, v in opening.items()})
        candidates = ["a", "b", "c", "ghost", None]

        for _ in range(300):
            kind = rng.choice(["income", "expense", "transfer"])
            amount = Decimal(rng.randint(1, 100_000)) / 100
            source = rng.choice(candidates[:-1])
            target = rng.choice(candidates) if kind == "transfer" else None
            state = apply_intent(
                state,
                RecordTransactionIntent(
                    type=kind, amount=amount, account_id=source, to_account_id=target,
                ),
                ids,
            )

        expected = dict(opening)
        for txn in state.transactions:
            known_source = txn.account_id in expected
            if txn.type == TransactionType.INCOME and known_source:
                expected[txn.account_id] += txn.amount
            elif txn.type == TransactionType.EXPENSE and known_source:
                expected[txn.account_id] -= txn.amount
            elif (
                txn.type == TransactionType.TRANSFER
                and known_source
                and txn.to_account_id in expected
            ):
                expected[txn.account_id] -= txn.amount
                expected[txn.to_account_id] += txn.amount

        assert len(state.transactions) == 300
        assert {a.id: a.balance for a in state.accounts} == expected
        assert replay_balances(opening, state.transactions) == expected


class TestSignedEffects:
    def _txn(self, **fields) -> Transaction:
        return Transaction(id="t", amount=Decimal("40"), date=dt.date(2024, 1, 1), **fields)

    def test_income_and_expense(self):
        assert signed_effects(self._txn(type="income", account_id="a"), {"a"}) == {"a": Decimal("40")}
        assert signed_effects(self._txn(type="expense", account_id="a"), {"a"}) == {"a": Decimal("-40")}

    def test_unknown_source(self):
        assert signed_effects(self._txn(type="income", account_id="x"), {"a"}) == {}

    def test_transfer(self):
        effects = signed_effects(self._txn(type="transfer", account_id="a", to_account_id="b"), {"a", "b"})
        assert effects == {"a": Decimal("-40"), "b": Decimal("40")}
