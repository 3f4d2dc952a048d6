"""
Custom exception classes for the application.

This module defines domain-specific exceptions that provide better error handling
and clearer error messages throughout the application. The HTTP layer maps each
class to a status code in utils/error_handlers.py.
"""


class ApplicationError(Exception):
    """Base exception for all application errors"""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(ApplicationError):
    """Raised when there's a configuration issue (fatal at startup)"""

    def __init__(
        self,
        message: str,
        missing_keys: list[str] | None = None,
        invalid_keys: list[str] | None = None,
    ):
        details = {}
        if missing_keys:
            details["missing_keys"] = missing_keys
        if invalid_keys:
            details["invalid_keys"] = invalid_keys
        super().__init__(message, details)


class ValidationError(ApplicationError):
    """Raised when validation fails"""

    def __init__(self, message: str, invalid_fields: dict | None = None):
        details = {"invalid_fields": invalid_fields} if invalid_fields else {}
        super().__init__(message, details)


class DatabaseError(ApplicationError):
    """Raised when database operations fail"""

    def __init__(self, operation: str, message: str):
        details = {"operation": operation}
        super().__init__(message, details)
        self.operation = operation


class DatabaseConnectionError(DatabaseError):
    """Raised when no usable connection could be obtained"""

    def __init__(self, message: str):
        super().__init__("connect", message)


class PoolExhaustedError(DatabaseConnectionError):
    """Raised when the pool has no free connection within its wait timeout"""

    def __init__(self, timeout: float, message: str | None = None):
        msg = message or f"No database connection became available within {timeout:g}s"
        super().__init__(msg)
        self.timeout = timeout
        self.details["timeout"] = timeout


class NotFoundError(ApplicationError):
    """Raised when a point lookup matches no row"""

    def __init__(self, resource: str, key):
        details = {"resource": resource, "key": key}
        super().__init__(f"{resource} '{key}' not found", details)
        self.resource = resource
        self.key = key
