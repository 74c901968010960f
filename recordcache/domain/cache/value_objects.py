"""
Cache Value Objects

Immutable value objects for the record cache domain.
Provides type safety and validation for cache keys and entry lifetimes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class UpdateMissPolicy(str, Enum):
    """What an update does when the record has no cache entry."""

    REFRESH = "refresh"  # re-read post-update state from the delegate
    SKIP = "skip"  # leave the entry absent until the next read


@dataclass(frozen=True)
class CacheKey:
    """
    Immutable cache key value object.

    Enforces the key constraints shared by memcache-like and Redis backends.
    """

    value: str

    # memcached rejects keys longer than this
    MAX_LENGTH = 250

    def __post_init__(self) -> None:
        """Validate cache key format."""
        if not self.value:
            raise ValueError("Cache key cannot be empty")

        if len(self.value) > self.MAX_LENGTH:
            raise ValueError(f"Cache key too long (max {self.MAX_LENGTH} characters)")

        if any(char.isspace() for char in self.value):
            raise ValueError("Cache key cannot contain whitespace")

    def with_prefix(self, prefix: str) -> "CacheKey":
        """Return the key namespaced under prefix."""
        if not prefix:
            return self
        return CacheKey(f"{prefix}:{self.value}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TTL:
    """
    Time To Live value object for cache expiration.

    Provides type-safe TTL configuration with validation.
    """

    seconds: int

    def __post_init__(self) -> None:
        """Validate TTL value."""
        if self.seconds <= 0:
            raise ValueError("TTL must be positive")
        if self.seconds > 86400 * 365:  # Max 1 year
            raise ValueError("TTL too large (max 1 year)")

    @classmethod
    def minutes(cls, minutes: int) -> "TTL":
        """Create TTL from minutes."""
        return cls(minutes * 60)

    @classmethod
    def hours(cls, hours: int) -> "TTL":
        """Create TTL from hours."""
        return cls(hours * 3600)

    @classmethod
    def days(cls, days: int) -> "TTL":
        """Create TTL from days."""
        return cls(days * 86400)

    def __str__(self) -> str:
        return f"{self.seconds}s"


def ttl_seconds(ttl: Union[int, TTL, None]) -> Optional[int]:
    """Normalize a TTL argument to whole seconds, None meaning no expiration."""
    if ttl is None:
        return None
    if isinstance(ttl, TTL):
        return ttl.seconds
    return TTL(int(ttl)).seconds
