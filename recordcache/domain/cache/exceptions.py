"""
Record Cache Exceptions

Binding errors raised by the caching record store and its domain registry.
Backend failures are never translated into these; they propagate unchanged.
"""

from typing import Optional, Any, Dict


class CachingException(Exception):
    """Base exception for record cache binding errors.

    Carries a machine-readable error code and structured details so callers
    can log or report the misconfiguration without parsing the message.
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


class NotBoundError(CachingException):
    """Raised when a CRUD method runs before a delegate store was bound."""

    def __init__(self, store_type: str, operation: Optional[str] = None):
        details = {"store_type": store_type}
        if operation:
            details["operation"] = operation

        super().__init__(
            message=f"{store_type} has no record store bound; call bind() first",
            error_code="CACHE_DAO_NOT_BOUND",
            details=details,
        )


class DataSourceExpectedError(CachingException):
    """Raised when bind() receives something that is not a record store."""

    def __init__(self, store_type: str, received: Any):
        received_type = type(received).__name__
        super().__init__(
            message=(
                f"{store_type} expects a record store to wrap, got {received_type}"
            ),
            error_code="CACHE_DAO_DATA_SOURCE_EXPECTED",
            details={"store_type": store_type, "received_type": received_type},
        )


class DomainNotBoundError(CachingException):
    """Raised when a caching store type is used before bind_domain()."""

    def __init__(self, store_type: str):
        super().__init__(
            message=(
                f"No key-value store bound for {store_type}; call bind_domain() first"
            ),
            error_code="CACHE_DOMAIN_NOT_BOUND",
            details={"store_type": store_type},
        )


class InvalidCachingDomainError(CachingException):
    """Raised when bind_domain() receives an object that is not a key-value store."""

    def __init__(
        self, store_type: str, received: Any, missing: Optional[list] = None
    ):
        received_type = type(received).__name__
        details = {"store_type": store_type, "received_type": received_type}
        if missing:
            details["missing_operations"] = list(missing)

        super().__init__(
            message=(
                f"{received_type} cannot serve as caching domain of {store_type}: "
                "async get, set and delete are required"
            ),
            error_code="CACHE_DOMAIN_INVALID",
            details=details,
        )


class DomainAlreadyBoundError(CachingException):
    """Raised when a caching store type is bound a second time without reset."""

    def __init__(self, store_type: str, current: Any):
        super().__init__(
            message=(
                f"{store_type} is already bound to {type(current).__name__}; "
                "unbind it before rebinding"
            ),
            error_code="CACHE_DOMAIN_ALREADY_BOUND",
            details={
                "store_type": store_type,
                "current_type": type(current).__name__,
            },
        )
