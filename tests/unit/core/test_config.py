"""
Unit tests for settings validation and logging setup.
"""

import logging

import pytest
import structlog
from pydantic import ValidationError

from recordcache.core.config import Settings, get_settings, settings
from recordcache.core.logging import configure_logging


class TestSettings:
    """Test Settings validation."""

    def test_defaults(self):
        """Test test-environment defaults."""
        assert settings is get_settings()
        assert settings.ENVIRONMENT == "test"
        assert settings.CACHE_KEY_ALGORITHM == "md5"
        assert settings.CACHE_UPDATE_MISS_POLICY == "refresh"
        assert settings.CACHE_DEFAULT_TTL is None
        assert not settings.is_production

    def test_normalizes_case(self):
        """Test case-insensitive enum-like settings are normalized."""
        s = Settings(
            LOG_LEVEL="warning",
            LOG_FORMAT="JSON",
            CACHE_KEY_ALGORITHM="SHA256",
            CACHE_UPDATE_MISS_POLICY="SKIP",
        )
        assert s.LOG_LEVEL == "WARNING"
        assert s.LOG_FORMAT == "json"
        assert s.CACHE_KEY_ALGORITHM == "sha256"
        assert s.CACHE_UPDATE_MISS_POLICY == "skip"

    @pytest.mark.parametrize(
        "field,value",
        [
            ("ENVIRONMENT", "qa"),
            ("REDIS_URL", "http://localhost:6379"),
            ("CACHE_KEY_ALGORITHM", "crc32"),
            ("CACHE_KEY_ALGORITHM", "shake_128"),
            ("CACHE_KEY_PREFIX", "has space"),
            ("CACHE_UPDATE_MISS_POLICY", "invalidate"),
            ("CACHE_DEFAULT_TTL", 0),
            ("LOG_LEVEL", "TRACE"),
            ("LOG_FORMAT", "xml"),
        ],
    )
    def test_rejects_invalid_values(self, field, value):
        """Test invalid settings are rejected."""
        with pytest.raises(ValidationError):
            Settings(**{field: value})


class TestLogging:
    """Test logging configuration."""

    def test_configure_logging_sets_root_level(self):
        """Test configured level and single stdout handler."""
        root = logging.getLogger()
        previous_level, previous_handlers = root.level, list(root.handlers)

        try:
            configure_logging(log_level="warning", log_format="json")

            assert root.level == logging.WARNING
            assert len(root.handlers) == 1
            structlog.get_logger("recordcache.test").warning("configured", check=True)
        finally:
            structlog.reset_defaults()
            structlog.contextvars.clear_contextvars()
            root.handlers[:] = previous_handlers
            root.setLevel(previous_level)
