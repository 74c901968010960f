"""
Key-Value Store Infrastructure Module

Concrete KeyValueStore backends for the caching record store.

This module provides:
- MemoryKeyValueStore: In-process store for development and tests
- RedisKeyValueStore: Redis-backed store with retries and tracing
- Backend exception hierarchy
"""

from .memory_store import MemoryKeyValueStore
from .redis_store import RedisKeyValueStore, RedisKeyValueStoreConfig
from .exceptions import (
    KeyValueStoreException,
    KeyValueStoreConnectionException,
    KeyValueStoreTimeoutException,
    KeyValueStoreSerializationException,
    KeyValueStoreConfigurationException,
)

__all__ = [
    # Stores
    "MemoryKeyValueStore",
    "RedisKeyValueStore",
    "RedisKeyValueStoreConfig",
    # Exceptions
    "KeyValueStoreException",
    "KeyValueStoreConnectionException",
    "KeyValueStoreTimeoutException",
    "KeyValueStoreSerializationException",
    "KeyValueStoreConfigurationException",
]
