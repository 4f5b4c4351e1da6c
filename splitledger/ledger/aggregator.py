"""Mini README: Ledger aggregation folding expenses into net balances.

Structure:
    * BalanceSheet - read-only mapping ``user_id -> net cents`` with helpers.
    * aggregate - fold expenses into a ``BalanceSheet``.
    * aggregate_balances - convenience returning ``Balance`` records.

For every expense the payer is credited the full amount and each split
participant is debited their share. A payer who is also a participant gets
both entries, so their net effect is the portion paid for others. The fold
is commutative; only the order of the returned users depends on input order
(users appear in the order they were first touched).
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Mapping

from ..errors import ErrorKind, InvariantViolation
from ..logging_utils import get_logger
from ..models import Balance, Expense
from ..money import format_minor_units

LOGGER = get_logger(__name__)


class BalanceSheet(Mapping[str, int]):
    """Net balance per user within one group."""

    def __init__(self) -> None:
        self._balances: Dict[str, int] = {}

    def __getitem__(self, user_id: str) -> int:
        return self._balances[user_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._balances)

    def __len__(self) -> int:
        return len(self._balances)

    def __repr__(self) -> str:
        return f"BalanceSheet({self._balances!r})"

    def credit(self, user_id: str, amount: int) -> None:
        self._balances[user_id] = self._balances.get(user_id, 0) + amount

    def debit(self, user_id: str, amount: int) -> None:
        self._balances[user_id] = self._balances.get(user_id, 0) - amount

    def total(self) -> int:
        """Sum of all balances; zero for any consistent ledger."""

        return sum(self._balances.values())

    def as_balances(self) -> List[Balance]:
        return [Balance(user_id=user_id, net_amount=amount) for user_id, amount in self._balances.items()]


def aggregate(expenses: Iterable[Expense]) -> BalanceSheet:
    """Fold ``expenses`` into a zero-sum ``BalanceSheet``.

    Raises:
        InvariantViolation: when an expense's splits do not add up to its
            amount, which can only happen if the expense was persisted
            without going through the split calculator.
    """

    sheet = BalanceSheet()
    expense_count = 0
    for expense in expenses:
        split_total = expense.split_total()
        if split_total != expense.amount:
            raise InvariantViolation(
                ErrorKind.UNBALANCED_EXPENSE,
                f"Expense {expense.expense_id} splits total {format_minor_units(split_total)} "
                f"but the expense amount is {format_minor_units(expense.amount)}",
            )
        sheet.credit(expense.payer_user_id, expense.amount)
        for split in expense.splits:
            sheet.debit(split.user_id, split.amount)
        expense_count += 1

    if sheet.total() != 0:
        raise InvariantViolation(
            ErrorKind.NON_ZERO_SUM,
            f"Aggregated balances sum to {format_minor_units(sheet.total())} instead of zero",
        )
    LOGGER.debug("Aggregated %s expenses into %s balances", expense_count, len(sheet))
    return sheet


def aggregate_balances(expenses: Iterable[Expense]) -> List[Balance]:
    """Return one ``Balance`` per user touched by ``expenses``."""

    return aggregate(expenses).as_balances()
