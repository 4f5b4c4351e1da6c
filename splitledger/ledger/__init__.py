"""Mini README: Ledger aggregation package for SplitLedger.

Exposes the ``BalanceSheet`` mapping and the fold that turns a group's
expenses into one signed net balance per user.
"""

from .aggregator import BalanceSheet, aggregate, aggregate_balances

__all__ = ["BalanceSheet", "aggregate", "aggregate_balances"]
