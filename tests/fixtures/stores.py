"""
Test doubles for the record cache contracts.

FakeRecordStore and RecordingKeyValueStore keep every call in order so tests
can assert call counts, arguments and sequencing without mock expectations.
"""

import copy
from collections import deque
from typing import Any, Dict, List, Optional, Tuple

from recordcache.domain.cache.repository_interfaces import KeyValueStore, RecordStore
from recordcache.repositories.caching import CachingRecordStore

Call = Tuple[str, tuple]


class FakeRecordStore(RecordStore):
    """Dict-backed record store assigning sequential or scripted ids."""

    def __init__(self, ids: Optional[List[str]] = None, start: int = 1):
        self.records: Dict[str, Dict[str, Any]] = {}
        self.calls: List[Call] = []
        self.read_results: deque = deque()
        self.failures: Dict[str, Exception] = {}
        self._ids = deque(ids or [])
        self._next = start

    def calls_to(self, method: str) -> List[tuple]:
        return [args for name, args in self.calls if name == method]

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        if method in self.failures:
            raise self.failures[method]

    async def create(self, fields):
        self._record("create", copy.deepcopy(dict(fields)))
        if self._ids:
            id = self._ids.popleft()
        else:
            id = str(self._next)
            self._next += 1
        self.records[id] = {"id": id, **fields}
        return id

    async def read(self, id):
        self._record("read", id)
        if self.read_results:
            return self.read_results.popleft()
        record = self.records.get(id)
        return copy.deepcopy(record) if record is not None else None

    async def update(self, id, fields):
        self._record("update", id, copy.deepcopy(dict(fields)))
        if id in self.records:
            self.records[id].update(fields)

    async def delete(self, id):
        self._record("delete", id)
        self.records.pop(id, None)

    async def count_by(self, **criteria):
        self._record("count_by", criteria)
        return len(self._matching(criteria))

    async def list_by(self, **criteria):
        self._record("list_by", criteria)
        return [copy.deepcopy(r) for r in self._matching(criteria)]

    def _matching(self, criteria):
        return [
            r
            for r in self.records.values()
            if all(r.get(k) == v for k, v in criteria.items())
        ]


class OtherFakeRecordStore(FakeRecordStore):
    """Distinct store type sharing FakeRecordStore behaviour."""


class RecordingKeyValueStore(KeyValueStore):
    """
    Dict-backed key-value store logging every call.

    Values queued in ``get_results`` are returned by get() in order before
    the stored data is consulted, mirroring scripted cache responses.
    """

    def __init__(self):
        self.data: Dict[str, Any] = {}
        self.calls: List[Call] = []
        self.get_results: deque = deque()
        self.failures: Dict[str, Exception] = {}

    def calls_to(self, method: str) -> List[tuple]:
        return [args for name, args in self.calls if name == method]

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        if method in self.failures:
            raise self.failures[method]

    async def get(self, key):
        self._record("get", key)
        if self.get_results:
            return self.get_results.popleft()
        return copy.deepcopy(self.data.get(key))

    async def set(self, key, value, ttl=None):
        self._record("set", key, copy.deepcopy(value), ttl)
        self.data[key] = copy.deepcopy(value)

    async def delete(self, key):
        self._record("delete", key)
        self.data.pop(key, None)


class DuckKeyValueStore:
    """Key-value store satisfying the contract without subclassing it."""

    def __init__(self):
        self.data: Dict[str, Any] = {}

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ttl=None):
        self.data[key] = value

    async def delete(self, key):
        self.data.pop(key, None)


class ArticleCache(CachingRecordStore):
    """Caching store type used across the test suites."""


class CommentCache(CachingRecordStore):
    """Second caching store type, bound independently of ArticleCache."""
