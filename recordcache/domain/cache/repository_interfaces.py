"""
Record Cache Repository Interfaces

Abstract contracts consumed by the caching record store:
- KeyValueStore: the cache backend (get/set/delete)
- RecordStore: the authoritative data-access layer (CRUD plus queries)

Implementations are not required to subclass these; any object exposing the
same awaitable operations is accepted at bind time.
"""

import inspect
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

Record = Dict[str, Any]

KEY_VALUE_OPERATIONS: Tuple[str, ...] = ("get", "set", "delete")
RECORD_STORE_OPERATIONS: Tuple[str, ...] = (
    "create",
    "read",
    "update",
    "delete",
    "count_by",
    "list_by",
)


def missing_operations(obj: Any, operations: Tuple[str, ...]) -> List[str]:
    """
    List the operations obj does not expose as coroutine functions.

    Synchronous methods count as missing: every call site awaits them.
    """
    return [
        name
        for name in operations
        if not inspect.iscoroutinefunction(getattr(obj, name, None))
    ]


class KeyValueStore(ABC):
    """
    Abstract key-value cache backend.

    Absence is reported by returning None from get(), never by raising.
    Per-key operations are atomic from the caller's perspective.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Get cached value, None on miss."""
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Store value; ttl in seconds, None leaves expiry to the backend."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove cached value if present."""
        pass


class RecordStore(ABC):
    """
    Abstract record store (Dao).

    The source of truth for records. Identity is assigned on create().
    """

    @abstractmethod
    async def create(self, fields: Record) -> str:
        """Create record and return its id."""
        pass

    @abstractmethod
    async def read(self, id: str) -> Optional[Record]:
        """Read record by id, None if it does not exist."""
        pass

    @abstractmethod
    async def update(self, id: str, fields: Record) -> None:
        """Overwrite the given fields of a record."""
        pass

    @abstractmethod
    async def delete(self, id: str) -> None:
        """Delete record by id."""
        pass

    @abstractmethod
    async def count_by(self, **criteria: Any) -> int:
        """Count records matching criteria."""
        pass

    @abstractmethod
    async def list_by(self, **criteria: Any) -> List[Record]:
        """List records matching criteria."""
        pass
