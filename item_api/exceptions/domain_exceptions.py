"""
Domain-Specific Exceptions for the Item Read API

All exceptions extend the base ItemApiError. The HTTP layer maps them to
status codes:

1. Request Validation Errors  -> 400
2. Store Errors               -> 500 (cause logged, never returned)
3. Response Encoding Errors   -> 500 (cause logged)
4. Configuration Errors       -> raised at startup only
"""

from typing import Any, Dict, Optional

from .base import ItemApiError


# =============================================================================
# Request Validation Errors
# =============================================================================

class ValidationError(ItemApiError):
    """Raised when an incoming request fails validation.

    Used for:
    - Missing itemIds query parameter
    - itemIds that contain no identifiers after trimming
    """

    client_safe = True

    def __init__(self, message: str, errors: Optional[Dict[str, Any]] = None, original_error: Optional[Exception] = None):
        """Initialize validation error.

        Args:
            message: Human-readable error message, safe to return to clients
            errors: Dictionary of field-level validation errors
            original_error: The original exception that caused this error
        """
        self.errors = errors or {}
        context = {}
        if self.errors:
            context['validation_errors'] = self.errors
        super().__init__(message, original_error, context)


# =============================================================================
# Store Errors
# =============================================================================

class StoreUnavailable(ItemApiError):
    """Raised when the underlying DynamoDB call fails.

    Used for:
    - Any ClientError returned by DynamoDB
    - Network, endpoint and credential failures raised by botocore
    - Request deadline expiry
    - Calls abandoned because the client disconnected
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        error_code: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        """Initialize store error.

        Args:
            message: Detailed message, logged server-side only
            operation: DynamoDB operation that failed (e.g., "BatchGetItem")
            error_code: DynamoDB error code, when one was returned
            original_error: The original exception that caused this error
        """
        self.operation = operation
        self.error_code = error_code
        context = {}
        if operation:
            context['operation'] = operation
        if error_code:
            context['error_code'] = error_code
        super().__init__(message, original_error, context)


class ItemNotFoundError(ItemApiError):
    """Raised when a single-item lookup finds nothing."""

    def __init__(self, table_name: str, key: dict):
        self.table_name = table_name
        self.key = key
        message = f"Item not found in table '{table_name}' with key: {key}"
        super().__init__(message, None, {'table_name': table_name, 'key': key})


# =============================================================================
# Response Encoding Errors
# =============================================================================

class EncodingError(ItemApiError):
    """Raised when a response body cannot be serialized to JSON."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message, original_error)


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(ItemApiError):
    """Raised at startup when required settings are missing or invalid."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message, original_error)
