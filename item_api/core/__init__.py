"""
Core infrastructure components for DynamoDB reads.

- TableGateway: Thin wrapper over the low-level boto3 DynamoDB client
- Attribute normalization: tagged DynamoDB values to plain JSON values
"""

from .attribute_values import normalize, normalize_item, normalize_items
from .table_gateway import TableGateway, create_table_gateway, map_dynamodb_error

__all__ = [
    "TableGateway",
    "create_table_gateway",
    "map_dynamodb_error",
    "normalize",
    "normalize_item",
    "normalize_items",
]
