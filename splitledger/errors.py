"""Mini README: Error types raised by the ledger and settlement engine.

Structure:
    * ErrorKind - enumerates every failure the engine can report.
    * LedgerValidationError - caller input problems (map to client errors).
    * InvariantViolation - internal defects that must never be masked.

Callers branch on ``error.kind`` rather than on exception classes.
``InvariantViolation`` is deliberately not a ``LedgerValidationError``
subclass, so handlers for caller mistakes never catch internal defects.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Enumerate the error kinds surfaced by the engine."""

    SPLIT_SUM_MISMATCH = "SplitSumMismatch"
    PERCENTAGE_SUM_MISMATCH = "PercentageSumMismatch"
    INVALID_SPLIT_TYPE = "InvalidSplitType"
    EMPTY_PARTICIPANT_SET = "EmptyParticipantSet"
    NOT_A_MEMBER = "NotAMember"
    INVALID_AMOUNT = "InvalidAmount"
    DUPLICATE_PARTICIPANT = "DuplicateParticipant"
    MISSING_SHARE_VALUE = "MissingShareValue"
    NEGATIVE_SHARE = "NegativeShare"

    UNBALANCED_EXPENSE = "UnbalancedExpense"
    NON_ZERO_SUM = "NonZeroSum"
    RESIDUAL_BALANCE = "ResidualBalance"
    ITERATION_BOUND_EXCEEDED = "IterationBoundExceeded"


class LedgerValidationError(ValueError):
    """Expected, recoverable problem with caller supplied input."""

    is_client_error = True

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def as_dict(self) -> dict:
        return {"error": self.kind.value, "message": self.message}


class InvariantViolation(RuntimeError):
    """Internal defect, usually an upstream collaborator feeding bad data."""

    is_client_error = False

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(f"{kind.value}: {message}")
        self.kind = kind
        self.message = message
