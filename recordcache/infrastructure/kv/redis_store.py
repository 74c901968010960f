"""
Redis Key-Value Store

KeyValueStore backed by redis.asyncio. Values are JSON documents; every
operation is bounded by a timeout, retried with exponential backoff and
traced with OpenTelemetry. Redis errors surface as KeyValueStoreException
subclasses with the original error chained.
"""

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from redis.asyncio import Redis
from redis.exceptions import (
    ConnectionError as RedisConnectionError,
    RedisError,
    TimeoutError as RedisTimeoutError,
)

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from ...core.config import settings
from ...domain.cache.repository_interfaces import KeyValueStore
from ...domain.cache.value_objects import ttl_seconds
from .exceptions import (
    KeyValueStoreConfigurationException,
    KeyValueStoreConnectionException,
    KeyValueStoreException,
    KeyValueStoreSerializationException,
    KeyValueStoreTimeoutException,
)

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


@dataclass
class RedisKeyValueStoreConfig:
    """Configuration for the Redis key-value store."""

    # Connection settings
    url: str = "redis://localhost:6379"
    max_connections: int = 10
    operation_timeout: float = 5.0

    # Retry settings
    max_retries: int = 3
    retry_delay: float = 0.1

    # Keys and expiry
    key_prefix: str = ""
    default_ttl: Optional[int] = None

    @classmethod
    def from_settings(cls) -> "RedisKeyValueStoreConfig":
        """Build configuration from application settings."""
        return cls(
            url=settings.REDIS_URL,
            max_connections=settings.REDIS_MAX_CONNECTIONS,
            operation_timeout=settings.REDIS_OPERATION_TIMEOUT,
            max_retries=settings.REDIS_MAX_RETRIES,
            retry_delay=settings.REDIS_RETRY_DELAY,
            default_ttl=settings.CACHE_DEFAULT_TTL,
        )


class RedisKeyValueStore(KeyValueStore):
    """
    Redis-backed key-value store.

    When set() receives no ttl, config.default_ttl applies; with no default
    the key never expires.
    """

    def __init__(
        self,
        client: Optional[Redis] = None,
        config: Optional[RedisKeyValueStoreConfig] = None,
    ):
        """
        Initialize store.

        Args:
            client: Existing Redis client; created from config.url on first use if None
            config: Store configuration, defaults to application settings

        Raises:
            KeyValueStoreConfigurationException: If config values are invalid
        """
        self.config = config or RedisKeyValueStoreConfig.from_settings()
        self._validate_config()
        self._client = client
        self._owns_client = client is None

    @classmethod
    def from_settings(cls) -> "RedisKeyValueStore":
        """Create store configured from application settings."""
        return cls(config=RedisKeyValueStoreConfig.from_settings())

    def _validate_config(self) -> None:
        if self.config.max_retries < 1:
            raise KeyValueStoreConfigurationException(
                "max_retries must be at least 1",
                config_key="max_retries",
                config_value=self.config.max_retries,
            )
        if self.config.operation_timeout <= 0:
            raise KeyValueStoreConfigurationException(
                "operation_timeout must be positive",
                config_key="operation_timeout",
                config_value=self.config.operation_timeout,
            )
        if any(char.isspace() for char in self.config.key_prefix):
            raise KeyValueStoreConfigurationException(
                "key_prefix cannot contain whitespace",
                config_key="key_prefix",
                config_value=self.config.key_prefix,
            )

    @property
    def client(self) -> Redis:
        """Get the Redis client, connecting lazily."""
        if self._client is None:
            self._client = Redis.from_url(
                self.config.url,
                max_connections=self.config.max_connections,
                decode_responses=True,
            )
            logger.info("Redis key-value store client created")
        return self._client

    def _full_key(self, key: str) -> str:
        if not self.config.key_prefix:
            return key
        return f"{self.config.key_prefix}:{key}"

    async def get(self, key: str) -> Optional[Any]:
        """Get and decode cached value, None on miss."""
        full_key = self._full_key(key)
        raw = await self._execute("get", full_key, lambda: self.client.get(full_key))
        if raw is None:
            return None

        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to decode cached value for {full_key}: {e}")
            raise KeyValueStoreSerializationException(
                full_key, "decode", original_error=e
            ) from e

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Encode and store value; ttl None falls back to config.default_ttl."""
        full_key = self._full_key(key)

        try:
            payload = json.dumps(value, default=str)
        except (TypeError, ValueError) as e:
            raise KeyValueStoreSerializationException(
                full_key, "encode", original_error=e
            ) from e

        expiry = ttl_seconds(ttl) if ttl is not None else self.config.default_ttl

        if expiry is not None:
            await self._execute(
                "set", full_key, lambda: self.client.set(full_key, payload, ex=expiry)
            )
        else:
            await self._execute("set", full_key, lambda: self.client.set(full_key, payload))

    async def delete(self, key: str) -> None:
        """Delete key if present."""
        full_key = self._full_key(key)
        await self._execute("delete", full_key, lambda: self.client.delete(full_key))

    async def ping(self) -> bool:
        """Check Redis connectivity."""
        try:
            return bool(await self._execute("ping", "", lambda: self.client.ping()))
        except KeyValueStoreException as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    async def close(self) -> None:
        """Close the client if this store created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
            logger.info("Redis key-value store closed")

    async def _execute(
        self, operation: str, key: str, command: Callable[[], Awaitable[Any]]
    ) -> Any:
        """
        Run a Redis command with timeout, retry and tracing.

        Args:
            operation: Operation name for spans and errors
            key: Full key the command targets
            command: Factory producing a fresh awaitable per attempt

        Returns:
            Command result

        Raises:
            KeyValueStoreTimeoutException: If every attempt timed out
            KeyValueStoreConnectionException: If the connection kept failing
            KeyValueStoreException: On any other Redis error (not retried)
        """
        with tracer.start_as_current_span(f"kv.{operation}") as span:
            span.set_attribute("kv.backend", "redis")
            span.set_attribute("kv.operation", operation)
            if key:
                span.set_attribute("kv.key", key)

            last_exception: Optional[Exception] = None

            for attempt in range(self.config.max_retries):
                try:
                    start_time = time.time()
                    result = await asyncio.wait_for(
                        command(), timeout=self.config.operation_timeout
                    )
                    span.set_attribute(
                        "kv.execution_time_ms", (time.time() - start_time) * 1000
                    )
                    span.set_status(Status(StatusCode.OK))

                    if attempt > 0:
                        logger.info(
                            f"Redis {operation} succeeded on attempt {attempt + 1}",
                            extra={"operation": operation, "attempt": attempt + 1},
                        )
                    return result

                except (asyncio.TimeoutError, RedisTimeoutError, RedisConnectionError) as e:
                    last_exception = e
                    logger.warning(
                        f"Redis {operation} failed (attempt {attempt + 1}/{self.config.max_retries}): {e}",
                        extra={"operation": operation, "attempt": attempt + 1},
                    )
                    if attempt < self.config.max_retries - 1:
                        await asyncio.sleep(self.config.retry_delay * (2**attempt))

                except RedisError as e:
                    span.record_exception(e)
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    logger.error(f"Redis {operation} failed for {key}: {e}")
                    raise KeyValueStoreException(
                        message=f"Redis {operation} failed: {e}",
                        error_code="KV_OPERATION_ERROR",
                        details={"operation": operation, "key": key},
                    ) from e

            span.set_status(Status(StatusCode.ERROR, str(last_exception)))
            logger.error(
                f"Redis {operation} failed after {self.config.max_retries} attempts"
            )

            if isinstance(last_exception, RedisConnectionError):
                raise KeyValueStoreConnectionException(
                    message=f"Redis {operation} failed after {self.config.max_retries} attempts",
                    operation=operation,
                    original_error=last_exception,
                ) from last_exception

            raise KeyValueStoreTimeoutException(
                operation, self.config.operation_timeout, key=key or None
            ) from last_exception
