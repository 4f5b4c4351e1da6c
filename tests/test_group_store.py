"""Mini README: Tests covering the in-memory group store write path."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from splitledger.errors import ErrorKind, LedgerValidationError
from splitledger.models import SplitParticipant, SplitPolicy
from splitledger.storage import InMemoryGroupStore


@pytest.fixture()
def store() -> InMemoryGroupStore:
    store = InMemoryGroupStore()
    store.create_group("g1", members=["a", "b", "c"])
    return store


def test_record_expense_assigns_sequential_ids(store: InMemoryGroupStore) -> None:
    first = store.record_expense("g1", "a", "30", SplitPolicy.EQUAL, ["a", "b"])
    second = store.record_expense("g1", "b", "12.5", "equal", ["b", "c"], category="Food")

    assert (first.expense_id, second.expense_id) == ("exp_0001", "exp_0002")
    assert [split.expense_id for split in second.splits] == ["exp_0002", "exp_0002"]
    assert second.category == "Food"
    assert [expense.expense_id for expense in store.list_expenses("g1")] == ["exp_0001", "exp_0002"]


def test_record_expense_rejects_outsiders(store: InMemoryGroupStore) -> None:
    with pytest.raises(LedgerValidationError) as excinfo:
        store.record_expense("g1", "a", "30", SplitPolicy.EQUAL, ["a", "zed"])

    assert excinfo.value.kind is ErrorKind.NOT_A_MEMBER
    assert store.list_expenses("g1") == []


def test_invalid_policy_is_reported_before_membership(store: InMemoryGroupStore) -> None:
    with pytest.raises(LedgerValidationError) as excinfo:
        store.record_expense("g1", "a", "30", "SHARES", ["zed"])

    assert excinfo.value.kind is ErrorKind.INVALID_SPLIT_TYPE


def test_update_expense_recomputes_splits(store: InMemoryGroupStore) -> None:
    expense = store.record_expense("g1", "a", "30", SplitPolicy.EQUAL, ["a", "b", "c"])

    updated = store.update_expense(expense.expense_id, amount="31")

    assert [split.amount for split in updated.splits] == [1033, 1033, 1034]
    assert store.get_expense(expense.expense_id).amount == 3100

    switched = store.update_expense(
        expense.expense_id,
        split_policy=SplitPolicy.PERCENTAGE,
        participants=[SplitParticipant("a", percentage=25), {"user_id": "b", "percentage": "75"}],
        description="Dinner",
    )

    assert [split.amount for split in switched.splits] == [775, 2325]
    assert switched.description == "Dinner"


def test_update_exact_expense_keeps_stored_amounts(store: InMemoryGroupStore) -> None:
    expense = store.record_expense(
        "g1",
        "a",
        "10",
        SplitPolicy.EXACT,
        [SplitParticipant("a", amount="4"), SplitParticipant("b", amount="6")],
    )

    with pytest.raises(LedgerValidationError) as excinfo:
        store.update_expense(expense.expense_id, amount="11")

    assert excinfo.value.kind is ErrorKind.SPLIT_SUM_MISMATCH
    assert store.get_expense(expense.expense_id).amount == 1000


def test_delete_expense(store: InMemoryGroupStore) -> None:
    expense = store.record_expense("g1", "a", "30", SplitPolicy.EQUAL, ["a", "b"])

    store.delete_expense(expense.expense_id)

    assert store.list_expenses("g1") == []
    with pytest.raises(KeyError):
        store.get_expense(expense.expense_id)


def test_membership_queries(store: InMemoryGroupStore) -> None:
    store.create_group("g2", members=["c"])

    assert store.is_member("g1", "a")
    assert not store.is_member("g2", "a")
    assert not store.is_member("missing", "a")
    assert store.groups_for_user("c") == ["g1", "g2"]
    with pytest.raises(ValueError):
        store.create_group("g1")


def test_load_json(tmp_path: Path) -> None:
    payload = {
        "groups": [
            {
                "id": "house",
                "members": ["a", "b"],
                "expenses": [
                    {
                        "payer": "a",
                        "amount": "100",
                        "split_policy": "EXACT",
                        "participants": [
                            {"user_id": "a", "amount": "40"},
                            {"user_id": "b", "amount": "60"},
                        ],
                    }
                ],
            }
        ]
    }
    path = tmp_path / "groups.json"
    path.write_text(json.dumps(payload), encoding="utf-8")

    store = InMemoryGroupStore.load_json(path)

    (expense,) = store.list_expenses("house")
    assert expense.amount == 10000
    assert [split.amount for split in expense.splits] == [4000, 6000]


def test_update_and_delete_require_group_membership(store: InMemoryGroupStore) -> None:
    store.create_group("g2", members=["zed"])
    expense = store.record_expense("g1", "a", "30", SplitPolicy.EQUAL, ["a", "b"])

    with pytest.raises(LedgerValidationError) as excinfo:
        store.update_expense(expense.expense_id, amount="40", requesting_user_id="zed")
    assert excinfo.value.kind is ErrorKind.NOT_A_MEMBER

    with pytest.raises(LedgerValidationError):
        store.delete_expense(expense.expense_id, requesting_user_id="zed")

    assert store.get_expense(expense.expense_id).amount == 3000
    store.update_expense(expense.expense_id, amount="40", requesting_user_id="c")
    store.delete_expense(expense.expense_id, requesting_user_id="b")
    assert store.list_expenses("g1") == []


def test_record_settlement_between_members(store: InMemoryGroupStore) -> None:
    first = store.record_settlement("g1", "b", "a", "15")
    second = store.record_settlement("g1", "c", "a", "10.50", description="Dinner", method="BANK")

    assert first.settlement_id == "stl_0001"
    assert first.amount == 1500
    assert first.description == "Settlement from b to a"
    assert first.method == "CASH"
    assert second.as_dict()["amount"] == "10.50"
    assert [s.settlement_id for s in store.list_settlements("g1", "a")] == ["stl_0002", "stl_0001"]
    assert store.get_settlement("stl_0001", "c") == first


def test_record_settlement_validation(store: InMemoryGroupStore) -> None:
    with pytest.raises(LedgerValidationError) as excinfo:
        store.record_settlement("g1", "b", "a", "0")
    assert excinfo.value.kind is ErrorKind.INVALID_AMOUNT

    with pytest.raises(LedgerValidationError) as excinfo:
        store.record_settlement("g1", "b", "zed", "5")
    assert excinfo.value.kind is ErrorKind.NOT_A_MEMBER

    with pytest.raises(KeyError):
        store.record_settlement("missing", "b", "a", "5")


def test_settlements_do_not_change_expense_balances(store: InMemoryGroupStore) -> None:
    store.record_expense("g1", "a", "30", SplitPolicy.EQUAL, ["a", "b"])
    store.record_settlement("g1", "b", "a", "15")

    assert len(store.list_expenses("g1")) == 1


def test_settlement_reads_and_deletes_are_scoped(store: InMemoryGroupStore) -> None:
    store.create_group("g2", members=["a", "zed"])
    settlement = store.record_settlement("g1", "b", "a", "5")
    store.record_settlement("g2", "zed", "a", "7")

    with pytest.raises(LedgerValidationError):
        store.list_settlements("g1", "zed")
    with pytest.raises(LedgerValidationError):
        store.get_settlement(settlement.settlement_id, "zed")
    with pytest.raises(LedgerValidationError):
        store.delete_settlement(settlement.settlement_id, "zed")

    assert [s.group_id for s in store.settlements_for_user("a")] == ["g2", "g1"]
    assert store.settlements_for_user("c") == []

    store.delete_settlement(settlement.settlement_id, "b")
    assert store.list_settlements("g1", "a") == []
    with pytest.raises(KeyError):
        store.get_settlement(settlement.settlement_id, "a")
