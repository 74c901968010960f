"""
Cache Key Derivation

Deterministic mapping from (store type identity, record id) to a cache key.
The identity and id are joined as "<identity>-<id>" and hashed so keys have
a fixed length regardless of class names or id formats.
"""

import hashlib
from typing import Any, Optional, Union

from ...core.config import settings
from .value_objects import CacheKey


def store_identity_of(store: Any) -> str:
    """
    Get the store type identity folded into cache keys.

    Args:
        store: Store instance or store class

    Returns:
        Fully-qualified class name, e.g. "app.articles.ArticleStore"
    """
    store_type = store if isinstance(store, type) else type(store)
    return f"{store_type.__module__}.{store_type.__qualname__}"


def derive_key(
    store_identity: str,
    record_id: Union[str, int],
    algorithm: str = "md5",
    prefix: str = "",
) -> CacheKey:
    """
    Derive the cache key of a record.

    Args:
        store_identity: Store type identity (see store_identity_of)
        record_id: Record identifier; stringified before hashing
        algorithm: hashlib algorithm name
        prefix: Optional namespace prepended as "<prefix>:<digest>"

    Returns:
        CacheKey holding the hex digest

    Raises:
        ValueError: If an argument is missing or the algorithm is unknown
    """
    if not store_identity:
        raise ValueError("store_identity is required (cannot be empty)")
    if record_id is None:
        raise ValueError("record_id is required (cannot be None)")

    if algorithm.startswith("shake_"):
        raise ValueError(f"Key algorithm must have a fixed digest length: {algorithm}")

    try:
        digest = hashlib.new(algorithm)
    except (ValueError, TypeError) as e:
        raise ValueError(f"Unsupported key algorithm: {algorithm}") from e

    digest.update(f"{store_identity}-{record_id}".encode("utf-8"))
    return CacheKey(digest.hexdigest()).with_prefix(prefix)


class KeyDeriver:
    """Callable binding a hash algorithm and key prefix for key derivation."""

    def __init__(self, algorithm: Optional[str] = None, prefix: Optional[str] = None):
        algorithm = (algorithm or settings.CACHE_KEY_ALGORITHM).lower()
        prefix = settings.CACHE_KEY_PREFIX if prefix is None else prefix

        # Fail at construction rather than on the first key
        if algorithm not in hashlib.algorithms_available or algorithm.startswith("shake_"):
            raise ValueError(f"Unsupported key algorithm: {algorithm}")

        self.algorithm = algorithm
        self.prefix = prefix

    def __call__(self, store_identity: str, record_id: Union[str, int]) -> CacheKey:
        return derive_key(store_identity, record_id, self.algorithm, self.prefix)

    def __repr__(self) -> str:
        return f"KeyDeriver(algorithm={self.algorithm!r}, prefix={self.prefix!r})"
