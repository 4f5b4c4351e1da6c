"""Mini README: Settlement suggestions for a single group.

Structure:
    * BalanceSummary - totals of what a group (or user) is owed and owes.
    * SettlementSuggestion - balances plus the advisory transfers for a group.
    * UserPosition / UserBalanceReport - one user's net position per group.
    * suggest_settlements - pure aggregation + minimisation for an expense list.
    * SettlementSuggester - authorises the caller and fetches expenses via
      collaborators before delegating to ``suggest_settlements``.

Suggestions are advisory. Nothing here records a settlement; paying a debt
is a separate write path the caller triggers explicitly. Invariant
violations are logged at ERROR level and re-raised untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from ..errors import ErrorKind, InvariantViolation, LedgerValidationError
from ..ledger import aggregate
from ..logging_utils import get_logger
from ..models import Balance, Expense, Transfer
from ..money import format_minor_units, is_trivial
from .minimizer import minimize_debts
from .providers import ExpenseProvider, MembershipProvider

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class BalanceSummary:
    """Aggregate owed/owes totals in cents."""

    total_owed: int = 0
    total_owe: int = 0

    @property
    def net_balance(self) -> int:
        return self.total_owed - self.total_owe

    def add(self, amount: int) -> None:
        if amount > 0:
            self.total_owed += amount
        else:
            self.total_owe += -amount

    def as_dict(self) -> Dict[str, str]:
        return {
            "total_owed": format_minor_units(self.total_owed),
            "total_owe": format_minor_units(self.total_owe),
            "net_balance": format_minor_units(self.net_balance),
        }


@dataclass(slots=True)
class SettlementSuggestion:
    """User-facing settlement view for one group."""

    group_id: str
    balances: List[Balance]
    transactions: List[Transfer]
    summary: BalanceSummary = field(default_factory=BalanceSummary)

    def as_dict(self) -> Dict[str, object]:
        return {
            "group_id": self.group_id,
            "balances": [balance.as_dict() for balance in self.balances],
            "transactions": [transfer.as_dict() for transfer in self.transactions],
            "summary": self.summary.as_dict(),
        }


@dataclass(slots=True)
class UserPosition:
    group_id: str
    net_amount: int

    @property
    def balance_type(self) -> str:
        return "owed" if self.net_amount > 0 else "owes"

    def as_dict(self) -> Dict[str, str]:
        return {
            "group": self.group_id,
            "amount": format_minor_units(self.net_amount),
            "type": self.balance_type,
        }


@dataclass(slots=True)
class UserBalanceReport:
    """A user's net position across every group they belong to."""

    user_id: str
    positions: List[UserPosition]
    summary: BalanceSummary = field(default_factory=BalanceSummary)

    def as_dict(self) -> Dict[str, object]:
        return {
            "user": self.user_id,
            "balances": [position.as_dict() for position in self.positions],
            "summary": self.summary.as_dict(),
        }


def suggest_settlements(group_id: str, expenses: Iterable[Expense]) -> SettlementSuggestion:
    """Aggregate ``expenses`` and compute the canonical transfer list."""

    try:
        sheet = aggregate(expenses)
        transactions = minimize_debts(sheet)
    except InvariantViolation as error:
        LOGGER.error("Settlement invariant violated for group %s: %s", group_id, error)
        raise

    summary = BalanceSummary()
    balances: List[Balance] = []
    for balance in sheet.as_balances():
        if is_trivial(balance.net_amount):
            continue
        summary.add(balance.net_amount)
        balances.append(balance)

    LOGGER.info(
        "Suggested %s transfers for group %s across %s balances",
        len(transactions),
        group_id,
        len(balances),
    )
    return SettlementSuggestion(
        group_id=group_id,
        balances=balances,
        transactions=transactions,
        summary=summary,
    )


class SettlementSuggester:
    """Orchestrate membership checks, aggregation and minimisation."""

    def __init__(self, membership_provider: MembershipProvider, expense_provider: ExpenseProvider) -> None:
        self._membership = membership_provider
        self._expenses = expense_provider

    def _require_member(self, group_id: str, user_id: str) -> None:
        if not self._membership.is_member(group_id, user_id):
            raise LedgerValidationError(
                ErrorKind.NOT_A_MEMBER, f"User {user_id} is not a member of group {group_id}"
            )

    def suggest_for_group(self, group_id: str, requesting_user_id: str) -> SettlementSuggestion:
        """Return balances and suggested transfers for ``group_id``."""

        self._require_member(group_id, requesting_user_id)
        expenses = self._expenses.list_expenses(group_id)
        LOGGER.debug("Fetched %s expenses for group %s", len(expenses), group_id)
        return suggest_settlements(group_id, expenses)

    def user_balances(self, user_id: str) -> UserBalanceReport:
        """Return ``user_id``'s net amount in each of their groups."""

        report = UserBalanceReport(user_id=user_id, positions=[])
        for group_id in self._membership.groups_for_user(user_id):
            try:
                sheet = aggregate(self._expenses.list_expenses(group_id))
            except InvariantViolation as error:
                LOGGER.error("Balance invariant violated for group %s: %s", group_id, error)
                raise
            amount = sheet.get(user_id, 0)
            if is_trivial(amount):
                continue
            report.positions.append(UserPosition(group_id=group_id, net_amount=amount))
            report.summary.add(amount)
        return report
