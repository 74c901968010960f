"""
Caching Record Store

Cache-aside decorator over a record store. Reads are served from the
type's shared key-value store when possible; writes go to the record store
first and then update the cached representation field by field.

RULES:
- The record store is always written before the cache
- A cache hit never reaches the record store
- count_by/list_by never touch the cache
- Backend errors propagate unchanged (no retries, no rollback)
"""

from typing import Any, List, Optional, Union
from collections.abc import Mapping

import structlog

from ..core.config import settings
from ..domain.cache.domain_registry import DomainRegistry, domain_registry
from ..domain.cache.exceptions import DataSourceExpectedError, NotBoundError
from ..domain.cache.key_derivation import KeyDeriver, store_identity_of
from ..domain.cache.repository_interfaces import (
    RECORD_STORE_OPERATIONS,
    Record,
    RecordStore,
    missing_operations,
)
from ..domain.cache.value_objects import TTL, UpdateMissPolicy, ttl_seconds

logger = structlog.get_logger()


class CachingRecordStore(RecordStore):
    """
    Record store decorator keeping a key-value cache consistent with its delegate.

    Declare one subclass per cached record type and bind its caching domain
    once at start-up:

        class ArticleCache(CachingRecordStore):
            cache_ttl = TTL.hours(1)

        ArticleCache.bind_domain(RedisKeyValueStore.from_settings())
        articles = ArticleCache(ArticleStore(session))

    All instances of a subclass share the bound key-value store; each
    instance wraps its own record store.
    """

    # Expiry passed on every cache write; None leaves it to the backend
    cache_ttl: Union[int, TTL, None] = None
    # Falls back to settings.CACHE_UPDATE_MISS_POLICY
    update_miss_policy: Optional[UpdateMissPolicy] = None
    # Falls back to the delegate's fully-qualified class name
    store_identity: Optional[str] = None

    def __init__(
        self,
        delegate: Optional[Any] = None,
        *,
        registry: Optional[DomainRegistry] = None,
        key_deriver: Optional[KeyDeriver] = None,
    ):
        """
        Initialize caching store.

        Args:
            delegate: Record store to wrap; may be bound later with bind()
            registry: Domain registry holding this type's key-value store
            key_deriver: Cache key derivation, defaults to configured algorithm

        Raises:
            DataSourceExpectedError: If delegate is not a record store
            ValueError: If the class-level cache_ttl is out of range
        """
        self._check_cache_ttl()
        self._registry = registry if registry is not None else domain_registry
        self._key_deriver = key_deriver if key_deriver is not None else KeyDeriver()
        self._delegate: Optional[Any] = None

        if delegate is not None:
            self.bind(delegate)

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------

    @classmethod
    def bind_domain(cls, store: Any, registry: Optional[DomainRegistry] = None) -> None:
        """
        Bind the key-value store shared by all instances of this class.

        Args:
            store: Key-value store exposing get/set/delete
            registry: Registry to bind in, defaults to the process-wide one

        Raises:
            InvalidCachingDomainError: If store is not a key-value store
            DomainAlreadyBoundError: If this class is already bound
            ValueError: If the class-level cache_ttl is out of range
        """
        cls._check_cache_ttl()
        registry = registry if registry is not None else domain_registry
        registry.bind(cls, store)

    @classmethod
    def unbind_domain(cls, registry: Optional[DomainRegistry] = None) -> Optional[Any]:
        """Remove this class's caching domain, returning the old store."""
        registry = registry if registry is not None else domain_registry
        return registry.unbind(cls)

    def bind(self, delegate: Any) -> "CachingRecordStore":
        """
        Bind the record store this instance wraps.

        Args:
            delegate: Record store exposing create/read/update/delete/count_by/list_by

        Returns:
            self, for chaining

        Raises:
            DataSourceExpectedError: If delegate is not a record store
        """
        if (
            delegate is None
            or delegate is self
            or missing_operations(delegate, RECORD_STORE_OPERATIONS)
        ):
            raise DataSourceExpectedError(store_identity_of(self), delegate)

        self._delegate = delegate

        logger.debug(
            "Caching store bound",
            store_type=store_identity_of(self),
            delegate=store_identity_of(delegate),
        )
        return self

    @property
    def is_bound(self) -> bool:
        """Check if a record store has been bound."""
        return self._delegate is not None

    @property
    def delegate(self) -> Any:
        """Get the wrapped record store."""
        return self._require_delegate("delegate")

    @property
    def domain(self) -> Any:
        """Get the key-value store bound to this class."""
        return self._registry.get(type(self))

    def cache_key(self, id: Union[str, int]) -> str:
        """
        Get the cache key of a record.

        Raises:
            NotBoundError: If no record store is bound
            ValueError: If id is None
        """
        if id is None:
            raise ValueError("Record id is required (cannot be None)")
        delegate = self._require_delegate("cache_key")
        identity = self.store_identity or store_identity_of(delegate)
        return self._key_deriver(identity, id).value

    # ------------------------------------------------------------------
    # Cached CRUD
    # ------------------------------------------------------------------

    async def create(self, fields: Record) -> str:
        """
        Create record in the delegate and cache its full representation.

        Args:
            fields: Field mapping of the new record

        Returns:
            Id assigned by the delegate

        Raises:
            NotBoundError: If no record store is bound
            DomainNotBoundError: If this class has no caching domain
            ValueError: If fields is not a mapping
        """
        self._require_fields(fields)
        delegate = self._require_delegate("create")
        cache = self.domain

        try:
            id = await delegate.create(fields)
            key = self.cache_key(id)

            record = {"id": id}
            record.update(fields)
            record["id"] = id

            await cache.set(key, record, ttl=self._ttl)

            logger.info(
                "Caching store: Record created",
                store_type=store_identity_of(self),
                record_id=str(id),
                cache_key=key,
            )
            return id

        except Exception as e:
            logger.error(
                "Caching store: Failed to create record",
                store_type=store_identity_of(self),
                error=str(e),
                exc_info=True,
            )
            raise

    async def read(self, id: Union[str, int]) -> Optional[Record]:
        """
        Read record, serving it from the cache when present.

        A hit returns the cached entry without calling the delegate. A miss
        reads the delegate once and caches what it returns; a record the
        delegate reports as absent (None) is not cached.

        Args:
            id: Record id

        Returns:
            Record, or None if the delegate has no such record

        Raises:
            NotBoundError: If no record store is bound
            DomainNotBoundError: If this class has no caching domain
            ValueError: If id is None
        """
        key = self.cache_key(id)
        delegate = self._require_delegate("read")
        cache = self.domain

        try:
            cached = await cache.get(key)
            if cached is not None:
                logger.debug(
                    "Caching store: Cache hit",
                    store_type=store_identity_of(self),
                    record_id=str(id),
                    cache_key=key,
                )
                return cached

            record = await delegate.read(id)
            if record is None:
                logger.debug(
                    "Caching store: Record not found",
                    store_type=store_identity_of(self),
                    record_id=str(id),
                )
                return None

            await cache.set(key, record, ttl=self._ttl)

            logger.debug(
                "Caching store: Cache populated",
                store_type=store_identity_of(self),
                record_id=str(id),
                cache_key=key,
            )
            return record

        except Exception as e:
            logger.error(
                "Caching store: Failed to read record",
                store_type=store_identity_of(self),
                record_id=str(id),
                error=str(e),
                exc_info=True,
            )
            raise

    async def update(self, id: Union[str, int], fields: Record) -> None:
        """
        Update record in the delegate and merge the fields into its cache entry.

        Fields absent from ``fields`` keep their cached values. When the
        record is not cached, the update miss policy decides: REFRESH caches
        the delegate's post-update record, SKIP leaves the entry absent.

        Args:
            id: Record id
            fields: Fields to overwrite

        Raises:
            NotBoundError: If no record store is bound
            DomainNotBoundError: If this class has no caching domain
            ValueError: If id is None or fields is not a mapping
        """
        self._require_fields(fields)
        key = self.cache_key(id)
        delegate = self._require_delegate("update")
        cache = self.domain

        try:
            await delegate.update(id, fields)

            cached = await cache.get(key)
            if not isinstance(cached, Mapping):
                await self._handle_update_miss(delegate, cache, id, key)
                return

            merged = dict(cached)
            merged.update(fields)
            if "id" in cached:
                merged["id"] = cached["id"]

            await cache.set(key, merged, ttl=self._ttl)

            logger.info(
                "Caching store: Record updated",
                store_type=store_identity_of(self),
                record_id=str(id),
                fields=sorted(fields),
            )

        except Exception as e:
            logger.error(
                "Caching store: Failed to update record",
                store_type=store_identity_of(self),
                record_id=str(id),
                error=str(e),
                exc_info=True,
            )
            raise

    async def delete(self, id: Union[str, int]) -> None:
        """
        Delete record from the delegate, then drop its cache entry.

        Raises:
            NotBoundError: If no record store is bound
            DomainNotBoundError: If this class has no caching domain
            ValueError: If id is None
        """
        key = self.cache_key(id)
        delegate = self._require_delegate("delete")
        cache = self.domain

        try:
            await delegate.delete(id)
            await cache.delete(key)

            logger.info(
                "Caching store: Record deleted",
                store_type=store_identity_of(self),
                record_id=str(id),
                cache_key=key,
            )

        except Exception as e:
            logger.error(
                "Caching store: Failed to delete record",
                store_type=store_identity_of(self),
                record_id=str(id),
                error=str(e),
                exc_info=True,
            )
            raise

    # ------------------------------------------------------------------
    # Pass-through queries
    # ------------------------------------------------------------------

    async def count_by(self, **criteria: Any) -> int:
        """Count records in the delegate; the cache is not consulted."""
        return await self._require_delegate("count_by").count_by(**criteria)

    async def list_by(self, **criteria: Any) -> List[Record]:
        """List records from the delegate; the cache is not consulted."""
        return await self._require_delegate("list_by").list_by(**criteria)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def _ttl(self) -> Optional[int]:
        return ttl_seconds(self.cache_ttl)

    @classmethod
    def _check_cache_ttl(cls) -> None:
        # Fail at configuration time, never after a delegate write
        try:
            ttl_seconds(cls.cache_ttl)
        except (TypeError, ValueError) as e:
            raise ValueError(
                f"Invalid cache_ttl on {store_identity_of(cls)}: {e}"
            ) from e

    @property
    def _update_miss_policy(self) -> UpdateMissPolicy:
        if self.update_miss_policy is not None:
            return UpdateMissPolicy(self.update_miss_policy)
        return UpdateMissPolicy(settings.CACHE_UPDATE_MISS_POLICY)

    async def _handle_update_miss(
        self, delegate: Any, cache: Any, id: Union[str, int], key: str
    ) -> None:
        policy = self._update_miss_policy

        if policy is UpdateMissPolicy.SKIP:
            logger.debug(
                "Caching store: Update missed cache, entry left absent",
                store_type=store_identity_of(self),
                record_id=str(id),
            )
            return

        record = await delegate.read(id)
        if record is None:
            logger.warning(
                "Caching store: Updated record not found on refresh",
                store_type=store_identity_of(self),
                record_id=str(id),
            )
            return

        await cache.set(key, record, ttl=self._ttl)

        logger.debug(
            "Caching store: Update missed cache, entry refreshed",
            store_type=store_identity_of(self),
            record_id=str(id),
        )

    def _require_delegate(self, operation: str) -> Any:
        if self._delegate is None:
            raise NotBoundError(store_identity_of(self), operation)
        return self._delegate

    @staticmethod
    def _require_fields(fields: Any) -> None:
        if not isinstance(fields, Mapping):
            raise ValueError(
                f"fields must be a mapping, got {type(fields).__name__}"
            )
