"""
Item Read API

Read-only access to the items table. There is no write side: the table is
populated and provisioned outside this service.

Usage:
    from .queries import ItemsReadApi

    read_api = ItemsReadApi(config)
    records = read_api.resolve(["D1", "D2"], partition_key="store-1")
"""

from .queries import ItemsReadApi

__all__ = [
    "ItemsReadApi",
]
