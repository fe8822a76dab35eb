"""
Item Read API

A small HTTP read API in front of a DynamoDB items table. Requested
identifiers are resolved with BatchGetItem when a partition key is
configured and with a filtered Scan otherwise; DynamoDB's tagged attribute
values are normalized to plain JSON before they are returned.
"""

__version__ = "1.0.0"

from .config import ItemApiConfig
from .exceptions import (
    ConfigurationError,
    EncodingError,
    ItemApiError,
    ItemNotFoundError,
    StoreUnavailable,
    ValidationError,
)
from .models import ItemsQuery, ItemsView
from .core import (
    TableGateway,
    create_table_gateway,
    normalize,
    normalize_item,
)
from .handlers import ItemsReadApi
from .api import create_app

__all__ = [
    # Configuration
    "ItemApiConfig",

    # Exceptions
    "ConfigurationError",
    "EncodingError",
    "ItemApiError",
    "ItemNotFoundError",
    "StoreUnavailable",
    "ValidationError",

    # Models
    "ItemsQuery",
    "ItemsView",

    # Gateway and normalization
    "TableGateway",
    "create_table_gateway",
    "normalize",
    "normalize_item",

    # Read API and HTTP application
    "ItemsReadApi",
    "create_app",
]
