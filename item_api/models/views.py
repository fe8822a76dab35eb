"""
Request and Response Models for the Item Read API

ItemsQuery is the validated form of a read request; ItemsView is the JSON
body returned to clients. Both live for a single request only.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..exceptions import ValidationError
from ..utils import parse_item_ids


class ItemsQuery(BaseModel):
    """
    Validated read request.

    item_ids keeps the caller's order and duplicates; it is never empty.
    """

    item_ids: List[str] = Field(..., description="Requested item identifiers, in request order")
    partition_key: Optional[str] = Field(None, description="Partition key value scoping the lookup")

    @field_validator('item_ids')
    @classmethod
    def validate_item_ids(cls, v):
        """Reject identifier lists that are empty after trimming."""
        cleaned = [item_id.strip() for item_id in v if item_id and item_id.strip()]
        if not cleaned:
            raise ValueError("at least one item id is required")
        return cleaned

    @classmethod
    def from_query_param(cls, raw: Optional[str], partition_key: Optional[str] = None) -> 'ItemsQuery':
        """Build a query from the raw itemIds query parameter.

        Args:
            raw: Comma-separated identifiers, e.g. "D1, D2"
            partition_key: Configured partition key value, if any

        Returns:
            ItemsQuery instance

        Raises:
            ValidationError: If raw is missing or holds no identifiers
        """
        item_ids = parse_item_ids(raw)
        if not item_ids:
            raise ValidationError(
                "Missing itemIds parameter",
                errors={'itemIds': 'at least one item id is required'}
            )
        return cls(item_ids=item_ids, partition_key=partition_key)


class ItemsView(BaseModel):
    """
    Response body of GET /items.

    items may be shorter than item_ids: identifiers with no stored record
    are simply absent.
    """

    item_ids: List[str] = Field(..., alias="itemIds", description="Identifiers as requested")
    items: List[Dict[str, Any]] = Field(default_factory=list, description="Normalized records found")

    model_config = ConfigDict(
        populate_by_name=True
    )
