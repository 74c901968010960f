"""
In-Memory Key-Value Store

Process-local KeyValueStore for development and tests.
Supports TTL expiration and stores copies so callers cannot mutate
cached entries in place.
"""

import asyncio
import copy
import logging
import time
from typing import Any, Dict, Optional

from ...domain.cache.repository_interfaces import KeyValueStore
from ...domain.cache.value_objects import ttl_seconds

logger = logging.getLogger(__name__)


class MemoryKeyValueStore(KeyValueStore):
    """
    In-memory key-value store.

    Features:
    - TTL support with lazy expiration on read
    - Copy-on-write isolation of stored values
    - asyncio-safe operations
    """

    def __init__(self, default_ttl: Optional[int] = None):
        """
        Initialize empty store.

        Args:
            default_ttl: Expiry applied when set() gets no ttl; None never expires
        """
        self.default_ttl = ttl_seconds(default_ttl)
        self._data: Dict[str, Any] = {}
        self._expiry: Dict[str, float] = {}  # key -> monotonic deadline
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[Any]:
        """Retrieve a copy of the value, None if missing or expired."""
        async with self._lock:
            if self._expired(key):
                self._evict(key)
                return None

            if key not in self._data:
                return None
            return copy.deepcopy(self._data[key])

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Store a copy of the value with optional TTL."""
        expiry = ttl_seconds(ttl) if ttl is not None else self.default_ttl

        async with self._lock:
            self._data[key] = copy.deepcopy(value)

            if expiry is not None:
                self._expiry[key] = time.monotonic() + expiry
            else:
                self._expiry.pop(key, None)

        logger.debug(f"Memory store set: {key}", extra={"ttl": expiry})

    async def delete(self, key: str) -> None:
        """Delete key if present."""
        async with self._lock:
            self._evict(key)

    async def clear(self) -> None:
        """Remove every entry."""
        async with self._lock:
            self._data.clear()
            self._expiry.clear()

    async def size(self) -> int:
        """Count live entries, purging expired ones."""
        async with self._lock:
            for key in [k for k in self._expiry if self._expired(k)]:
                self._evict(key)
            return len(self._data)

    def _expired(self, key: str) -> bool:
        deadline = self._expiry.get(key)
        return deadline is not None and time.monotonic() >= deadline

    def _evict(self, key: str) -> None:
        self._data.pop(key, None)
        self._expiry.pop(key, None)
