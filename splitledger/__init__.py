"""Mini README: Core package initializer for SplitLedger.

SplitLedger records pooled group expenses and works out who owes whom. The
public API re-exported here covers the four engine stages: splitting an
expense, aggregating net balances, minimising debts, and suggesting
settlements for a group.
"""

from .errors import ErrorKind, InvariantViolation, LedgerValidationError
from .ledger import BalanceSheet, aggregate_balances
from .logging_utils import get_logger
from .models import Balance, Expense, ExpenseSplit, Settlement, SplitParticipant, SplitPolicy, Transfer
from .settlement import SettlementSuggester, minimize_debts, suggest_settlements
from .splits import compute_splits

__all__ = [
    "Balance",
    "BalanceSheet",
    "ErrorKind",
    "Expense",
    "ExpenseSplit",
    "InvariantViolation",
    "LedgerValidationError",
    "Settlement",
    "SettlementSuggester",
    "SplitParticipant",
    "SplitPolicy",
    "Transfer",
    "aggregate_balances",
    "compute_splits",
    "get_logger",
    "minimize_debts",
    "suggest_settlements",
]
