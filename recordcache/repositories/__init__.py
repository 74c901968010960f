"""
Repository Pattern Implementation

Provides the caching record store, a drop-in decorator for any record store.
All cached data access must go through it to keep the cache consistent.
"""

from .caching import CachingRecordStore

__all__ = [
    "CachingRecordStore",
]
