"""Mini README: Greedy debt minimisation over zero-sum net balances.

Structure:
    * minimize_debts - produce the ordered list of advisory ``Transfer`` records.
    * _WorkingEntry - mutable (user, cents) pair used while settling.

Algorithm:
    Each round pairs the largest creditor with the largest debtor (ties go to
    the entry seen first) and moves ``min(credit, |debt|)`` between them. At
    least one of the pair reaches zero and leaves the working set, so N
    non-zero balances settle in at most N - 1 transfers. The heuristic is not
    guaranteed minimum-cardinality for every multi-party cycle, but it is
    always correct and fully deterministic for a given input order.

A non-zero-sum input is a caller defect. It surfaces as ``InvariantViolation``
either through a leftover residual, a round without a creditor or debtor, or
the iteration guard.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Union

from ..errors import ErrorKind, InvariantViolation
from ..logging_utils import get_logger
from ..models import Balance, Transfer
from ..money import format_minor_units, is_trivial

LOGGER = get_logger(__name__)

BalanceInput = Union[Mapping[str, int], Iterable[Balance]]


@dataclass(slots=True)
class _WorkingEntry:
    user_id: str
    amount: int


def _working_set(balances: BalanceInput) -> List[_WorkingEntry]:
    if isinstance(balances, Mapping):
        pairs = list(balances.items())
    else:
        pairs = [(balance.user_id, balance.net_amount) for balance in balances]
    return [_WorkingEntry(user_id, amount) for user_id, amount in pairs if not is_trivial(amount)]


def _pick(entries: List[_WorkingEntry], *, largest: bool) -> _WorkingEntry:
    """Return the extreme entry, keeping the first one on ties."""

    chosen = entries[0]
    for entry in entries[1:]:
        if (entry.amount > chosen.amount) if largest else (entry.amount < chosen.amount):
            chosen = entry
    return chosen


def minimize_debts(balances: BalanceInput) -> List[Transfer]:
    """Return transfers that drive every balance in ``balances`` to zero."""

    entries = _working_set(balances)
    iteration_bound = len(entries)
    transfers: List[Transfer] = []
    iterations = 0

    while len(entries) > 1:
        iterations += 1
        if iterations > iteration_bound:
            raise InvariantViolation(
                ErrorKind.ITERATION_BOUND_EXCEEDED,
                f"Settlement did not converge within {iteration_bound} rounds",
            )

        creditor = _pick(entries, largest=True)
        debtor = _pick(entries, largest=False)
        if creditor.amount <= 0 or debtor.amount >= 0:
            raise InvariantViolation(
                ErrorKind.NON_ZERO_SUM,
                "Balances do not sum to zero: "
                + ", ".join(f"{entry.user_id}={format_minor_units(entry.amount)}" for entry in entries),
            )

        amount = min(creditor.amount, -debtor.amount)
        transfers.append(Transfer(from_user_id=debtor.user_id, to_user_id=creditor.user_id, amount=amount))
        creditor.amount -= amount
        debtor.amount += amount
        entries = [entry for entry in entries if not is_trivial(entry.amount)]

    if entries:
        residual = entries[0]
        raise InvariantViolation(
            ErrorKind.RESIDUAL_BALANCE,
            f"User {residual.user_id} keeps {format_minor_units(residual.amount)} after settlement",
        )

    LOGGER.debug("Settled %s balances with %s transfers", iteration_bound, len(transfers))
    return transfers
