"""Mini README: Storage adapters supplying records to the engine.

Only the in-memory store ships here. It doubles as the expense write path
used by the CLI and as a fixture for tests.
"""

from .memory_store import GroupRecord, InMemoryGroupStore

__all__ = ["GroupRecord", "InMemoryGroupStore"]
