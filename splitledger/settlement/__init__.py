"""Mini README: Debt minimisation and settlement suggestion package.

``minimizer`` holds the single canonical greedy pairing used by every call
site; ``suggester`` wraps it with authorisation and formatting; ``providers``
declares the collaborator interfaces the suggester depends on.
"""

from .minimizer import minimize_debts
from .providers import ExpenseProvider, MembershipProvider
from .suggester import (
    BalanceSummary,
    SettlementSuggester,
    SettlementSuggestion,
    UserBalanceReport,
    UserPosition,
    suggest_settlements,
)

__all__ = [
    "BalanceSummary",
    "ExpenseProvider",
    "MembershipProvider",
    "SettlementSuggester",
    "SettlementSuggestion",
    "UserBalanceReport",
    "UserPosition",
    "minimize_debts",
    "suggest_settlements",
]
