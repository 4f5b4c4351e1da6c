"""Mini README: In-memory group and expense store.

Structure:
    * GroupRecord - members and expense ids of one group.
    * InMemoryGroupStore - implements ``MembershipProvider`` and
      ``ExpenseProvider`` plus the expense and settlement write paths.

The store is the reference collaborator used by the CLI and the tests. It
creates expenses atomically through the split calculator and replaces them
wholesale on update, so stored splits always add up to the expense amount.
Database-backed adapters can replace it without touching the engine.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ..errors import ErrorKind, LedgerValidationError
from ..logging_utils import get_logger
from ..models import Expense, Settlement, SplitParticipant, SplitPolicy
from ..money import format_minor_units, to_minor_units
from ..settlement.providers import ExpenseProvider, MembershipProvider
from ..splits import compute_splits_cents

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class GroupRecord:
    group_id: str
    name: str
    members: List[str] = field(default_factory=list)
    expense_ids: List[str] = field(default_factory=list)


def _coerce_participants(raw: Iterable[object]) -> List[SplitParticipant]:
    """Accept ``SplitParticipant`` instances, plain user ids or dict payloads."""

    participants: List[SplitParticipant] = []
    for item in raw:
        if isinstance(item, SplitParticipant):
            participants.append(item)
        elif isinstance(item, str):
            participants.append(SplitParticipant(user_id=item))
        elif isinstance(item, Mapping):
            try:
                user_id = str(item["user_id"])
            except KeyError as error:
                raise ValueError(f"Participant payload missing 'user_id': {item!r}") from error
            participants.append(
                SplitParticipant(
                    user_id=user_id,
                    amount=item.get("amount"),
                    percentage=item.get("percentage"),
                )
            )
        else:
            raise ValueError(f"Unsupported participant payload: {item!r}")
    return participants


class InMemoryGroupStore(MembershipProvider, ExpenseProvider):
    """Keep groups, expenses and recorded settlements in process memory."""

    def __init__(self) -> None:
        self._groups: Dict[str, GroupRecord] = {}
        self._expenses: Dict[str, Expense] = {}
        self._settlements: Dict[str, Settlement] = {}
        self._sequence = 0
        self._settlement_sequence = 0
        LOGGER.debug("In-memory group store initialised")

    # Groups and membership -------------------------------------------------

    def create_group(self, group_id: str, name: Optional[str] = None, members: Iterable[str] = ()) -> GroupRecord:
        if group_id in self._groups:
            raise ValueError(f"Group {group_id} already exists.")
        record = GroupRecord(group_id=group_id, name=name or group_id)
        self._groups[group_id] = record
        for member in members:
            self.add_member(group_id, member)
        LOGGER.info("Created group %s with %s members", group_id, len(record.members))
        return record

    def get_group(self, group_id: str) -> GroupRecord:
        if group_id not in self._groups:
            raise KeyError(f"Group {group_id} not found")
        return self._groups[group_id]

    def add_member(self, group_id: str, user_id: str) -> None:
        record = self.get_group(group_id)
        if user_id not in record.members:
            record.members.append(user_id)

    def is_member(self, group_id: str, user_id: str) -> bool:
        record = self._groups.get(group_id)
        return record is not None and user_id in record.members

    def groups_for_user(self, user_id: str) -> List[str]:
        return [group_id for group_id, record in self._groups.items() if user_id in record.members]

    # Expenses ---------------------------------------------------------------

    def _next_id(self) -> str:
        self._sequence += 1
        return f"exp_{self._sequence:04d}"

    def _require_members(self, group_id: str, user_ids: Sequence[str]) -> None:
        for user_id in user_ids:
            if not self.is_member(group_id, user_id):
                raise LedgerValidationError(
                    ErrorKind.NOT_A_MEMBER, f"User {user_id} is not a member of group {group_id}"
                )

    def _build_expense(
        self,
        expense_id: str,
        group_id: str,
        payer_user_id: str,
        amount: object,
        split_policy: object,
        participants: Iterable[object],
        category: str,
        description: str,
    ) -> Expense:
        # Split type is validated before group and membership checks.
        policy = SplitPolicy.from_str(split_policy)
        self.get_group(group_id)
        split_requests = _coerce_participants(participants)
        self._require_members(group_id, [payer_user_id, *(p.user_id for p in split_requests)])
        amount_cents = to_minor_units(amount)
        splits = compute_splits_cents(amount_cents, policy, split_requests, expense_id=expense_id)
        return Expense(
            expense_id=expense_id,
            group_id=group_id,
            payer_user_id=payer_user_id,
            amount=amount_cents,
            split_policy=policy,
            splits=splits,
            category=category,
            description=description,
        )

    def record_expense(
        self,
        group_id: str,
        payer_user_id: str,
        amount: object,
        split_policy: object,
        participants: Iterable[object],
        *,
        category: str = "general",
        description: str = "",
    ) -> Expense:
        """Create an expense and its splits in one step."""

        expense = self._build_expense(
            self._next_id(), group_id, payer_user_id, amount, split_policy, participants, category, description
        )
        self._expenses[expense.expense_id] = expense
        self._groups[group_id].expense_ids.append(expense.expense_id)
        LOGGER.info(
            "Recorded expense %s in group %s: %s paid %s (%s)",
            expense.expense_id,
            group_id,
            payer_user_id,
            format_minor_units(expense.amount),
            expense.split_policy.value,
        )
        return expense

    def update_expense(
        self,
        expense_id: str,
        *,
        amount: Optional[object] = None,
        split_policy: Optional[object] = None,
        participants: Optional[Iterable[object]] = None,
        category: Optional[str] = None,
        description: Optional[str] = None,
        requesting_user_id: Optional[str] = None,
    ) -> Expense:
        """Replace an expense, recomputing every split from scratch.

        Omitted split details fall back to the stored ones: an EQUAL expense
        keeps its participant list, EXACT and PERCENTAGE expenses keep their
        stored amounts and percentages. When ``requesting_user_id`` is given
        it must belong to the expense's group.
        """

        current = self.get_expense(expense_id)
        if requesting_user_id is not None:
            self._require_members(current.group_id, [requesting_user_id])
        if participants is None:
            participants = [
                SplitParticipant(
                    user_id=split.user_id,
                    amount=format_minor_units(split.amount),
                    percentage=split.percentage,
                )
                for split in current.splits
            ]
        updated = self._build_expense(
            expense_id,
            current.group_id,
            current.payer_user_id,
            amount if amount is not None else format_minor_units(current.amount),
            split_policy if split_policy is not None else current.split_policy,
            participants,
            category if category is not None else current.category,
            description if description is not None else current.description,
        )
        self._expenses[expense_id] = updated
        LOGGER.info("Updated expense %s", expense_id)
        return updated

    def delete_expense(self, expense_id: str, requesting_user_id: Optional[str] = None) -> None:
        expense = self.get_expense(expense_id)
        if requesting_user_id is not None:
            self._require_members(expense.group_id, [requesting_user_id])
        del self._expenses[expense_id]
        self._groups[expense.group_id].expense_ids.remove(expense_id)
        LOGGER.info("Deleted expense %s", expense_id)

    def get_expense(self, expense_id: str) -> Expense:
        if expense_id not in self._expenses:
            raise KeyError(f"Expense {expense_id} not found")
        return self._expenses[expense_id]

    def list_expenses(self, group_id: str) -> List[Expense]:
        record = self.get_group(group_id)
        return [self._expenses[expense_id] for expense_id in record.expense_ids]

    # Settlements --------------------------------------------------------------

    def _next_settlement_id(self) -> str:
        self._settlement_sequence += 1
        return f"stl_{self._settlement_sequence:04d}"

    def record_settlement(
        self,
        group_id: str,
        paid_by_user_id: str,
        paid_to_user_id: str,
        amount: object,
        *,
        description: Optional[str] = None,
        method: str = "CASH",
    ) -> Settlement:
        """Record a payment between two members.

        Recorded settlements are kept apart from expenses; they do not feed
        the balances the suggester computes.
        """

        amount_cents = to_minor_units(amount)
        if amount_cents <= 0:
            raise LedgerValidationError(
                ErrorKind.INVALID_AMOUNT,
                f"Settlement amount must be greater than 0, got {format_minor_units(amount_cents)}",
            )
        self.get_group(group_id)
        self._require_members(group_id, [paid_by_user_id, paid_to_user_id])
        settlement = Settlement(
            settlement_id=self._next_settlement_id(),
            group_id=group_id,
            paid_by_user_id=paid_by_user_id,
            paid_to_user_id=paid_to_user_id,
            amount=amount_cents,
            description=description or f"Settlement from {paid_by_user_id} to {paid_to_user_id}",
            method=method,
        )
        self._settlements[settlement.settlement_id] = settlement
        LOGGER.info(
            "Recorded settlement %s in group %s: %s paid %s %s",
            settlement.settlement_id,
            group_id,
            paid_by_user_id,
            paid_to_user_id,
            format_minor_units(amount_cents),
        )
        return settlement

    def get_settlement(self, settlement_id: str, requesting_user_id: str) -> Settlement:
        if settlement_id not in self._settlements:
            raise KeyError(f"Settlement {settlement_id} not found")
        settlement = self._settlements[settlement_id]
        self._require_members(settlement.group_id, [requesting_user_id])
        return settlement

    def list_settlements(self, group_id: str, requesting_user_id: str) -> List[Settlement]:
        """Return the group's settlements, most recent first."""

        self.get_group(group_id)
        self._require_members(group_id, [requesting_user_id])
        settlements = [s for s in self._settlements.values() if s.group_id == group_id]
        return list(reversed(settlements))

    def settlements_for_user(self, user_id: str) -> List[Settlement]:
        """Return settlements the user paid or received in their groups, most recent first."""

        groups = set(self.groups_for_user(user_id))
        settlements = [
            s
            for s in self._settlements.values()
            if s.group_id in groups and user_id in (s.paid_by_user_id, s.paid_to_user_id)
        ]
        return list(reversed(settlements))

    def delete_settlement(self, settlement_id: str, requesting_user_id: str) -> None:
        """Delete a settlement; allowed for its payer or any group member."""

        if settlement_id not in self._settlements:
            raise KeyError(f"Settlement {settlement_id} not found")
        settlement = self._settlements[settlement_id]
        if settlement.paid_by_user_id != requesting_user_id:
            self._require_members(settlement.group_id, [requesting_user_id])
        del self._settlements[settlement_id]
        LOGGER.info("Deleted settlement %s", settlement_id)

    # Loading ----------------------------------------------------------------

    @classmethod
    def from_dict(cls, payload: Mapping[str, object]) -> "InMemoryGroupStore":
        """Build a store from ``{"groups": [{"id", "members", "expenses"}]}``."""

        store = cls()
        groups = payload.get("groups")
        if not isinstance(groups, list):
            raise ValueError("Group payload must contain a 'groups' list.")
        for group in groups:
            group_id = str(group["id"])
            store.create_group(group_id, group.get("name"), [str(member) for member in group.get("members", [])])
            for expense in group.get("expenses", []):
                store.record_expense(
                    group_id,
                    str(expense["payer"]),
                    expense["amount"],
                    expense.get("split_policy", SplitPolicy.EQUAL.value),
                    expense.get("participants", []),
                    category=expense.get("category", "general"),
                    description=expense.get("description", ""),
                )
        return store

    @classmethod
    def load_json(cls, path: Path) -> "InMemoryGroupStore":
        LOGGER.debug("Loading group store from %s", path)
        return cls.from_dict(json.loads(Path(path).read_text(encoding="utf-8")))

    @classmethod
    def with_demo_data(cls) -> "InMemoryGroupStore":
        """Return a store seeded with a deterministic weekend trip."""

        store = cls()
        store.create_group("weekend_trip", "Weekend trip", ["alice", "bob", "carol", "dave"])
        store.record_expense(
            "weekend_trip", "alice", "240.00", SplitPolicy.EQUAL, ["alice", "bob", "carol", "dave"],
            category="Lodging", description="Cabin rental",
        )
        store.record_expense(
            "weekend_trip",
            "bob",
            "85.50",
            SplitPolicy.EXACT,
            [
                SplitParticipant("alice", amount="20.00"),
                SplitParticipant("bob", amount="30.50"),
                SplitParticipant("carol", amount="35.00"),
            ],
            category="Food",
            description="Groceries",
        )
        store.record_expense(
            "weekend_trip",
            "carol",
            "60.00",
            SplitPolicy.PERCENTAGE,
            [
                SplitParticipant("carol", percentage="50"),
                SplitParticipant("dave", percentage="25"),
                SplitParticipant("alice", percentage="25"),
            ],
            category="Transport",
            description="Fuel",
        )
        return store
