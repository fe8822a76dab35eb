"""
Handler Layer for the Item Read API

Handlers sit between the HTTP layer and the table gateway:
- Choose the DynamoDB access pattern for a request
- Build expressions with bound placeholders
- Normalize raw items before they leave the layer

Architecture:
api/ -> handlers/ (this layer) -> core/ (gateway) -> DynamoDB
"""

from .items.queries import ItemsReadApi

__all__ = [
    'ItemsReadApi',
]
