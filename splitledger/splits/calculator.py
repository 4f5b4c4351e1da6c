"""Mini README: Split calculator turning an expense amount into shares.

Structure:
    * compute_splits - public entry point dispatching on ``SplitPolicy``.
    * _equal_shares / _exact_shares / _percentage_shares - policy handlers.

Every handler returns shares whose sum equals the expense amount exactly.
EQUAL lets the last listed participant absorb the rounding residual.
PERCENTAGE floors each share and hands leftover cents to the largest
fractional parts, ties going to the later participant. Participant order
supplied by the caller is therefore significant.
The module is pure: no I/O and no state beyond debug logging.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Sequence

from ..errors import ErrorKind, LedgerValidationError
from ..logging_utils import get_logger
from ..models import ExpenseSplit, SplitParticipant, SplitPolicy
from ..money import format_minor_units, to_minor_units, to_percentage

LOGGER = get_logger(__name__)

HUNDRED_PERCENT = Decimal("100")


def compute_splits(
    amount: object,
    policy: object,
    participants: Sequence[SplitParticipant],
    *,
    expense_id: Optional[str] = None,
) -> List[ExpenseSplit]:
    """Divide ``amount`` between ``participants`` according to ``policy``.

    ``amount`` is a boundary value in currency units (``"90.00"``, ``90`` or
    ``Decimal("90")``). Use :func:`compute_splits_cents` when the amount is
    already held in minor units.
    """

    return compute_splits_cents(
        to_minor_units(amount), policy, participants, expense_id=expense_id
    )


def compute_splits_cents(
    amount_cents: int,
    policy: object,
    participants: Sequence[SplitParticipant],
    *,
    expense_id: Optional[str] = None,
) -> List[ExpenseSplit]:
    """Variant of :func:`compute_splits` taking an amount already in cents."""

    split_policy = SplitPolicy.from_str(policy)
    if amount_cents <= 0:
        raise LedgerValidationError(
            ErrorKind.INVALID_AMOUNT,
            f"Expense amount must be greater than 0, got {format_minor_units(amount_cents)}",
        )
    if not participants:
        raise LedgerValidationError(
            ErrorKind.EMPTY_PARTICIPANT_SET, "At least one participant is required to split an expense"
        )
    _reject_duplicates(participants)

    if split_policy is SplitPolicy.EQUAL:
        splits = _equal_shares(amount_cents, participants, expense_id)
    elif split_policy is SplitPolicy.EXACT:
        splits = _exact_shares(amount_cents, participants, expense_id)
    else:
        splits = _percentage_shares(amount_cents, participants, expense_id)

    LOGGER.debug(
        "Computed %s split of %s cents over %s participants",
        split_policy.value,
        amount_cents,
        len(splits),
    )
    return splits


def _reject_duplicates(participants: Sequence[SplitParticipant]) -> None:
    seen = set()
    for participant in participants:
        if participant.user_id in seen:
            raise LedgerValidationError(
                ErrorKind.DUPLICATE_PARTICIPANT,
                f"User {participant.user_id} is listed more than once",
            )
        seen.add(participant.user_id)


def _equal_shares(
    amount_cents: int, participants: Sequence[SplitParticipant], expense_id: Optional[str]
) -> List[ExpenseSplit]:
    """Truncate every share but the last; the last takes the remainder."""

    share = amount_cents // len(participants)
    splits = [
        ExpenseSplit(expense_id=expense_id, user_id=participant.user_id, amount=share)
        for participant in participants[:-1]
    ]
    last_share = amount_cents - share * len(splits)
    splits.append(ExpenseSplit(expense_id=expense_id, user_id=participants[-1].user_id, amount=last_share))
    return splits


def _exact_shares(
    amount_cents: int, participants: Sequence[SplitParticipant], expense_id: Optional[str]
) -> List[ExpenseSplit]:
    splits: List[ExpenseSplit] = []
    for participant in participants:
        if participant.amount is None:
            raise LedgerValidationError(
                ErrorKind.MISSING_SHARE_VALUE,
                f"EXACT split requires an amount for user {participant.user_id}",
            )
        share = to_minor_units(participant.amount, label=f"amount for {participant.user_id}")
        if share < 0:
            raise LedgerValidationError(
                ErrorKind.NEGATIVE_SHARE,
                f"Share for user {participant.user_id} cannot be negative",
            )
        splits.append(ExpenseSplit(expense_id=expense_id, user_id=participant.user_id, amount=share))

    total = sum(split.amount for split in splits)
    if total != amount_cents:
        raise LedgerValidationError(
            ErrorKind.SPLIT_SUM_MISMATCH,
            f"The sum of exact amounts ({format_minor_units(total)}) does not equal "
            f"the total expense amount ({format_minor_units(amount_cents)})",
        )
    return splits


def _percentage_shares(
    amount_cents: int, participants: Sequence[SplitParticipant], expense_id: Optional[str]
) -> List[ExpenseSplit]:
    percentages: List[Decimal] = []
    for participant in participants:
        if participant.percentage is None:
            raise LedgerValidationError(
                ErrorKind.MISSING_SHARE_VALUE,
                f"PERCENTAGE split requires a percentage for user {participant.user_id}",
            )
        percentage = to_percentage(participant.percentage, label=f"percentage for {participant.user_id}")
        if percentage < 0:
            raise LedgerValidationError(
                ErrorKind.NEGATIVE_SHARE,
                f"Percentage for user {participant.user_id} cannot be negative",
            )
        percentages.append(percentage)

    total_percentage = sum(percentages, Decimal("0"))
    if total_percentage != HUNDRED_PERCENT:
        raise LedgerValidationError(
            ErrorKind.PERCENTAGE_SUM_MISMATCH,
            f"The sum of percentages ({total_percentage}%) must equal 100%",
        )

    shares = _largest_remainder(amount_cents, percentages)
    splits: List[ExpenseSplit] = []
    for participant, percentage, share in zip(participants, percentages, shares):
        splits.append(
            ExpenseSplit(
                expense_id=expense_id,
                user_id=participant.user_id,
                amount=share,
                percentage=percentage,
            )
        )
    return splits


def _largest_remainder(amount_cents: int, percentages: Sequence[Decimal]) -> List[int]:
    """Floor every exact share, then hand leftover cents to the largest fractions.

    Ties go to the participant listed later, so the last participant keeps
    absorbing residuals as in EQUAL splits. No share ever goes negative.
    """

    exact = [Decimal(amount_cents) * percentage / HUNDRED_PERCENT for percentage in percentages]
    shares = [int(value) for value in exact]
    leftover = amount_cents - sum(shares)
    ranked = sorted(range(len(exact)), key=lambda index: (exact[index] - shares[index], index), reverse=True)
    for index in ranked[:leftover]:
        shares[index] += 1
    return shares
