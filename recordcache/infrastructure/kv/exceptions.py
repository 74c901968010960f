"""
Key-Value Store Exceptions

Backend exceptions raised by the bundled key-value stores.
The caching record store lets these propagate unchanged.
"""

from typing import Optional, Any, Dict


class KeyValueStoreException(Exception):
    """Base exception for key-value backend errors.

    All backend operations should raise this or its subclasses.
    Never swallow backend exceptions - always preserve context.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class KeyValueStoreConnectionException(KeyValueStoreException):
    """Raised when the backend connection fails or is lost."""

    def __init__(
        self,
        message: str = "Key-value store connection failed",
        url: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        details = {}
        if url:
            details["url"] = url
        if operation:
            details["operation"] = operation
        if original_error:
            details["original_error"] = str(original_error)
            details["original_error_type"] = type(original_error).__name__

        super().__init__(
            message=message, error_code="KV_CONNECTION_ERROR", details=details
        )
        # Preserve exception context for debugging (exception chaining)
        if original_error:
            self.__cause__ = original_error


class KeyValueStoreTimeoutException(KeyValueStoreException):
    """Raised when a backend operation times out."""

    def __init__(
        self, operation: str, timeout_seconds: float, key: Optional[str] = None
    ):
        details = {"operation": operation, "timeout_seconds": timeout_seconds}
        if key:
            details["key"] = key

        super().__init__(
            message=f"Key-value operation '{operation}' timed out after {timeout_seconds}s",
            error_code="KV_TIMEOUT_ERROR",
            details=details,
        )


class KeyValueStoreSerializationException(KeyValueStoreException):
    """Raised when a value cannot be encoded for or decoded from the backend."""

    def __init__(
        self,
        key: str,
        operation: str,
        original_error: Optional[Exception] = None,
    ):
        details = {"key": key, "operation": operation}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            message=f"Cannot {operation} value for key {key}",
            error_code="KV_SERIALIZATION_ERROR",
            details=details,
        )
        if original_error:
            self.__cause__ = original_error


class KeyValueStoreConfigurationException(KeyValueStoreException):
    """Raised when key-value store configuration is invalid."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
    ):
        details = {}
        if config_key:
            details["config_key"] = config_key
        if config_value is not None:
            details["config_value"] = str(config_value)

        super().__init__(
            message=message, error_code="KV_CONFIGURATION_ERROR", details=details
        )
