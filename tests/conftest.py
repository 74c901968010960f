"""
Main pytest configuration for recordcache tests.

Fixtures and environment shared by the unit test suites.
"""

import os
import pytest

# Set test environment variables before importing package modules
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ["CACHE_KEY_ALGORITHM"] = "md5"
os.environ["CACHE_KEY_PREFIX"] = ""
os.environ["CACHE_UPDATE_MISS_POLICY"] = "refresh"
os.environ.pop("CACHE_DEFAULT_TTL", None)

from recordcache.domain.cache.domain_registry import DomainRegistry, domain_registry
from tests.fixtures.stores import ArticleCache, FakeRecordStore, RecordingKeyValueStore


@pytest.fixture(autouse=True)
def reset_default_registry():
    """Drop process-wide bindings after each test."""
    yield
    domain_registry.reset()


@pytest.fixture
def registry():
    """Provide an isolated domain registry."""
    registry = DomainRegistry()
    yield registry
    registry.reset()


@pytest.fixture
def record_store():
    """Provide a fake record store."""
    return FakeRecordStore()


@pytest.fixture
def kv_store():
    """Provide a recording key-value store."""
    return RecordingKeyValueStore()


@pytest.fixture
def article_cache(registry, record_store, kv_store):
    """Provide a bound ArticleCache over the fake stores."""
    ArticleCache.bind_domain(kv_store, registry=registry)
    return ArticleCache(record_store, registry=registry)
