"""Mini README: Abstract collaborators consumed by the settlement suggester.

Structure:
    * MembershipProvider - answers whether a user belongs to a group.
    * ExpenseProvider - supplies a group's expenses with splits loaded.

Persistence and authorisation live outside the engine. Implementations
(database adapters, the in-memory store) subclass these interfaces and hand
already-fetched records to the suggester.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List

from ..models import Expense


class MembershipProvider(ABC):
    """Group membership lookups used for authorisation."""

    @abstractmethod
    def is_member(self, group_id: str, user_id: str) -> bool:
        """Return True when ``user_id`` belongs to ``group_id``."""

    @abstractmethod
    def groups_for_user(self, user_id: str) -> Iterable[str]:
        """Return identifiers of every group ``user_id`` belongs to."""


class ExpenseProvider(ABC):
    """Read access to recorded expenses."""

    @abstractmethod
    def list_expenses(self, group_id: str) -> List[Expense]:
        """Return the group's expenses with their splits populated."""
