# Base exception class
from .base import INTERNAL_ERROR_DETAIL, ItemApiError

# Domain-specific exceptions
from .domain_exceptions import (
    ConfigurationError,
    EncodingError,
    ItemNotFoundError,
    StoreUnavailable,
    ValidationError,
)

__all__ = [
    # Base exception
    "ItemApiError",
    "INTERNAL_ERROR_DETAIL",

    # Domain exceptions (alphabetically ordered)
    "ConfigurationError",
    "EncodingError",
    "ItemNotFoundError",
    "StoreUnavailable",
    "ValidationError",
]
