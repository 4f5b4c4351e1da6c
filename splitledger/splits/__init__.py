"""Mini README: Split calculation package for SplitLedger.

The ``calculator`` module turns one expense amount and a split policy into
per-participant ``ExpenseSplit`` records whose total always matches the
expense exactly.
"""

from .calculator import compute_splits, compute_splits_cents

__all__ = ["compute_splits", "compute_splits_cents"]
