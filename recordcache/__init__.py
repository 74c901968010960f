"""
recordcache

Cache-aside decorator for record stores. Wraps any record store (Dao) and
keeps a shared key-value cache consistent with it on every write.
"""

from .domain.cache.domain_registry import DomainRegistry, domain_registry
from .domain.cache.exceptions import (
    CachingException,
    NotBoundError,
    DataSourceExpectedError,
    DomainNotBoundError,
    InvalidCachingDomainError,
    DomainAlreadyBoundError,
)
from .domain.cache.key_derivation import KeyDeriver, derive_key, store_identity_of
from .domain.cache.repository_interfaces import KeyValueStore, Record, RecordStore
from .domain.cache.value_objects import TTL, CacheKey, UpdateMissPolicy
from .repositories.caching import CachingRecordStore

__version__ = "0.1.0"

__all__ = [
    # Caching store
    "CachingRecordStore",
    # Contracts
    "KeyValueStore",
    "RecordStore",
    "Record",
    # Binding
    "DomainRegistry",
    "domain_registry",
    # Keys and lifetimes
    "CacheKey",
    "KeyDeriver",
    "derive_key",
    "store_identity_of",
    "TTL",
    "UpdateMissPolicy",
    # Exceptions
    "CachingException",
    "NotBoundError",
    "DataSourceExpectedError",
    "DomainNotBoundError",
    "InvalidCachingDomainError",
    "DomainAlreadyBoundError",
]
