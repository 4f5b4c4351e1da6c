"""Mini README: Tests for group settlement suggestions.

These tests wire the suggester to the in-memory store, check membership
enforcement, the owed/owes classification, summary totals and the
cross-group user report.
"""

from __future__ import annotations

import logging

import pytest

from splitledger.errors import ErrorKind, InvariantViolation, LedgerValidationError
from splitledger.models import Balance, Expense, ExpenseSplit, SplitParticipant, SplitPolicy, Transfer
from splitledger.settlement import SettlementSuggester, suggest_settlements
from splitledger.storage import InMemoryGroupStore


@pytest.fixture()
def store() -> InMemoryGroupStore:
    store = InMemoryGroupStore()
    store.create_group("trip", "Trip", ["A", "B", "C"])
    store.create_group("flat", "Flat", ["A", "B"])
    return store


def test_equal_scenario_end_to_end(store: InMemoryGroupStore) -> None:
    store.record_expense("trip", "A", "90", SplitPolicy.EQUAL, ["A", "B", "C"])

    suggestion = SettlementSuggester(store, store).suggest_for_group("trip", "B")

    assert suggestion.balances == [Balance("A", 6000), Balance("B", -3000), Balance("C", -3000)]
    assert [balance.balance_type for balance in suggestion.balances] == ["owed", "owes", "owes"]
    assert suggestion.transactions == [Transfer("B", "A", 3000), Transfer("C", "A", 3000)]
    assert suggestion.summary.total_owed == 6000
    assert suggestion.summary.total_owe == 6000


def test_settled_users_are_filtered_from_balances(store: InMemoryGroupStore) -> None:
    store.record_expense("trip", "A", "30", SplitPolicy.EQUAL, ["A", "B"])
    store.record_expense("trip", "B", "30", SplitPolicy.EQUAL, ["A", "B"])
    store.record_expense(
        "trip", "C", "10", SplitPolicy.EXACT, [SplitParticipant("A", amount="10")]
    )

    suggestion = SettlementSuggester(store, store).suggest_for_group("trip", "A")

    assert [balance.user_id for balance in suggestion.balances] == ["A", "C"]
    assert suggestion.transactions == [Transfer("A", "C", 1000)]


def test_non_member_is_rejected(store: InMemoryGroupStore) -> None:
    with pytest.raises(LedgerValidationError) as excinfo:
        SettlementSuggester(store, store).suggest_for_group("flat", "C")

    assert excinfo.value.kind is ErrorKind.NOT_A_MEMBER


def test_as_dict_formats_amounts(store: InMemoryGroupStore) -> None:
    store.record_expense(
        "flat",
        "A",
        "100",
        SplitPolicy.EXACT,
        [SplitParticipant("A", amount="40"), SplitParticipant("B", amount="60")],
    )

    payload = SettlementSuggester(store, store).suggest_for_group("flat", "A").as_dict()

    assert payload["balances"] == [
        {"user": "A", "amount": "60.00", "type": "owed"},
        {"user": "B", "amount": "-60.00", "type": "owes"},
    ]
    assert payload["transactions"] == [{"from": "B", "to": "A", "amount": "60.00"}]
    assert payload["summary"] == {"total_owed": "60.00", "total_owe": "60.00", "net_balance": "0.00"}


def test_suggest_settlements_without_expenses() -> None:
    suggestion = suggest_settlements("empty", [])

    assert suggestion.balances == []
    assert suggestion.transactions == []


def test_invariant_violation_is_logged_and_reraised(caplog: pytest.LogCaptureFixture) -> None:
    broken = Expense(
        expense_id="e1",
        group_id="g",
        payer_user_id="A",
        amount=1000,
        split_policy=SplitPolicy.EXACT,
        splits=[ExpenseSplit(expense_id="e1", user_id="B", amount=500)],
    )

    with caplog.at_level(logging.ERROR):
        with pytest.raises(InvariantViolation):
            suggest_settlements("g", [broken])

    assert any("group g" in record.getMessage() for record in caplog.records)


def test_user_balances_span_groups(store: InMemoryGroupStore) -> None:
    store.record_expense("trip", "A", "90", SplitPolicy.EQUAL, ["A", "B", "C"])
    store.record_expense("flat", "B", "50", SplitPolicy.EQUAL, ["A", "B"])

    report = SettlementSuggester(store, store).user_balances("A")

    assert [(position.group_id, position.net_amount) for position in report.positions] == [
        ("trip", 6000),
        ("flat", -2500),
    ]
    assert report.summary.total_owed == 6000
    assert report.summary.total_owe == 2500
    assert report.summary.net_balance == 3500
    assert report.as_dict()["balances"][1] == {"group": "flat", "amount": "-25.00", "type": "owes"}


def test_demo_store_produces_three_transfers() -> None:
    store = InMemoryGroupStore.with_demo_data()

    suggestion = SettlementSuggester(store, store).suggest_for_group("weekend_trip", "dave")

    assert suggestion.transactions == [
        Transfer("dave", "alice", 7500),
        Transfer("carol", "alice", 6500),
        Transfer("bob", "alice", 500),
    ]
