"""
Caching Domain Registry

Associates each caching record store type with exactly one shared key-value
store. A type is bound once; rebinding requires an explicit unbind() or
reset(). The module-level ``domain_registry`` serves the common
single-process case, and separate registries can be injected for isolation.
"""

import threading
from typing import Any, Dict, Optional

import structlog

from .exceptions import (
    DomainAlreadyBoundError,
    DomainNotBoundError,
    InvalidCachingDomainError,
)
from .key_derivation import store_identity_of
from .repository_interfaces import KEY_VALUE_OPERATIONS, missing_operations

logger = structlog.get_logger()


class DomainRegistry:
    """
    Registry of caching domains keyed by store type.

    Binding is a start-up step: bind every caching store type before worker
    tasks or threads begin issuing CRUD calls. The internal lock only keeps
    the one-time-set invariant intact under concurrent registration.
    """

    def __init__(self):
        self._domains: Dict[type, Any] = {}
        self._lock = threading.Lock()

    def bind(self, store_type: type, store: Any) -> None:
        """
        Bind a key-value store as the caching domain of store_type.

        Args:
            store_type: Caching record store class
            store: Key-value store shared by all instances of store_type

        Raises:
            TypeError: If store_type is not a class
            InvalidCachingDomainError: If store lacks get/set/delete
            DomainAlreadyBoundError: If store_type already has a domain
        """
        if not isinstance(store_type, type):
            raise TypeError(
                f"store_type must be a class, got {type(store_type).__name__}"
            )

        identity = store_identity_of(store_type)
        missing = missing_operations(store, KEY_VALUE_OPERATIONS)
        if store is None or missing:
            raise InvalidCachingDomainError(identity, store, missing)

        with self._lock:
            current = self._domains.get(store_type)
            if current is not None:
                raise DomainAlreadyBoundError(identity, current)
            self._domains[store_type] = store

        logger.info(
            "Caching domain bound",
            store_type=identity,
            domain=type(store).__name__,
        )

    def unbind(self, store_type: type) -> Optional[Any]:
        """
        Remove the caching domain of store_type.

        Returns:
            The previously bound key-value store, None if there was none
        """
        with self._lock:
            store = self._domains.pop(store_type, None)

        if store is not None:
            logger.info("Caching domain unbound", store_type=store_identity_of(store_type))
        return store

    def get(self, store_type: type) -> Any:
        """
        Get the caching domain of store_type.

        Raises:
            DomainNotBoundError: If store_type was never bound
        """
        store = self._domains.get(store_type)
        if store is None:
            raise DomainNotBoundError(store_identity_of(store_type))
        return store

    def is_bound(self, store_type: type) -> bool:
        """Check if store_type has a caching domain."""
        return store_type in self._domains

    def reset(self) -> None:
        """Drop every binding."""
        with self._lock:
            count = len(self._domains)
            self._domains.clear()

        logger.debug("Caching domain registry reset", unbound=count)

    def __len__(self) -> int:
        return len(self._domains)


# Process-wide default registry
domain_registry = DomainRegistry()
