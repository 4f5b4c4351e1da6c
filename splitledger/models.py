"""Mini README: Core records shared by the split, ledger and settlement layers.

Structure:
    * SplitPolicy - enum of the supported expense split policies.
    * SplitParticipant - caller supplied share request for one user.
    * ExpenseSplit - the computed portion of one expense for one user.
    * Expense - a recorded group expense with its ordered splits.
    * Balance - derived signed net position of a user within a group.
    * Transfer - derived advisory payment from a debtor to a creditor.
    * Settlement - a payment between members recorded by the caller.

All monetary fields hold integer minor units (cents). ``as_dict`` helpers
format amounts as decimal strings for JSON responses and CLI output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from .errors import ErrorKind, LedgerValidationError
from .money import format_minor_units


class SplitPolicy(str, Enum):
    """Enumerate how an expense amount is divided between participants."""

    EQUAL = "EQUAL"
    EXACT = "EXACT"
    PERCENTAGE = "PERCENTAGE"

    @classmethod
    def from_str(cls, value: object) -> "SplitPolicy":
        """Coerce arbitrary casing into a valid split policy."""

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError as error:
            raise LedgerValidationError(
                ErrorKind.INVALID_SPLIT_TYPE,
                f"Invalid split type {value!r}. Must be EQUAL, EXACT, or PERCENTAGE",
            ) from error


@dataclass(slots=True)
class SplitParticipant:
    """A participant in a split request.

    ``amount`` is only read by the EXACT policy and ``percentage`` only by
    the PERCENTAGE policy. Both are raw boundary values and are converted
    by the split calculator.
    """

    user_id: str
    amount: Optional[object] = None
    percentage: Optional[object] = None


@dataclass(slots=True)
class ExpenseSplit:
    """Portion of an expense attributed to one participant."""

    expense_id: Optional[str]
    user_id: str
    amount: int
    percentage: Optional[Decimal] = None

    def as_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "expense_id": self.expense_id,
            "user_id": self.user_id,
            "amount": format_minor_units(self.amount),
        }
        if self.percentage is not None:
            payload["percentage"] = str(self.percentage)
        return payload


@dataclass(slots=True)
class Expense:
    """A pooled group expense paid by one member."""

    expense_id: str
    group_id: str
    payer_user_id: str
    amount: int
    split_policy: SplitPolicy
    splits: List[ExpenseSplit] = field(default_factory=list)
    category: str = "general"
    description: str = ""

    def split_total(self) -> int:
        return sum(split.amount for split in self.splits)

    def as_dict(self) -> Dict[str, object]:
        return {
            "expense_id": self.expense_id,
            "group_id": self.group_id,
            "payer_user_id": self.payer_user_id,
            "amount": format_minor_units(self.amount),
            "split_policy": self.split_policy.value,
            "category": self.category,
            "description": self.description,
            "splits": [split.as_dict() for split in self.splits],
        }


@dataclass(frozen=True, slots=True)
class Balance:
    """Signed net amount: positive is owed to the user, negative is owed by them."""

    user_id: str
    net_amount: int

    @property
    def balance_type(self) -> str:
        return "owed" if self.net_amount > 0 else "owes"

    def as_dict(self) -> Dict[str, object]:
        return {
            "user": self.user_id,
            "amount": format_minor_units(self.net_amount),
            "type": self.balance_type,
        }


@dataclass(frozen=True, slots=True)
class Transfer:
    """Advisory payment that moves ``amount`` cents from a debtor to a creditor."""

    from_user_id: str
    to_user_id: str
    amount: int

    def as_dict(self) -> Dict[str, object]:
        return {
            "from": self.from_user_id,
            "to": self.to_user_id,
            "amount": format_minor_units(self.amount),
        }


@dataclass(slots=True)
class Settlement:
    """A recorded payment between two group members.

    Settlements are written explicitly by callers; the suggester never
    creates them and balances are computed from expenses alone.
    """

    settlement_id: str
    group_id: str
    paid_by_user_id: str
    paid_to_user_id: str
    amount: int
    description: str = ""
    method: str = "CASH"

    def as_dict(self) -> Dict[str, object]:
        return {
            "settlement_id": self.settlement_id,
            "group_id": self.group_id,
            "paid_by": self.paid_by_user_id,
            "paid_to": self.paid_to_user_id,
            "amount": format_minor_units(self.amount),
            "description": self.description,
            "method": self.method,
        }
