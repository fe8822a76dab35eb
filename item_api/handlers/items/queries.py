"""
Item Read API

Resolves requested item identifiers against the items table using one of two
access patterns:

- Partition key configured: BatchGetItem on composite keys
  (partition key value + identifier as sort key). Cost is bounded by the
  number of identifiers.
- No partition key: Scan with a server-side ``#k IN (:v0, :v1, ...)`` filter.
  Cost is O(table size); callers that need bounded cost configure a
  partition key.

Every read accepts an optional ``cancelled`` event. Once it is set no further
DynamoDB call is sent, so work abandoned by the HTTP layer stops at the next
call boundary.

Every item leaves this module normalized to plain JSON values.
"""

import logging
import threading
from typing import Any, Dict, List, Optional, Sequence

from ...config import ItemApiConfig
from ...core import TableGateway, create_table_gateway, normalize_item, normalize_items
from ...core.attribute_values import Record
from ...exceptions import StoreUnavailable, ValidationError
from ...utils import (
    MAX_BATCH_GET_KEYS,
    build_in_filter_expression,
    build_item_key,
    chunked,
    unique_in_order,
)

logger = logging.getLogger(__name__)

# BatchGetItem may hand back part of a request as UnprocessedKeys
MAX_UNPROCESSED_ROUNDS = 5


class ItemsReadApi:
    """
    Read-only API over the items table.

    Holds no per-request state; one instance is shared by all requests.
    """

    def __init__(self, config: ItemApiConfig, gateway: Optional[TableGateway] = None):
        """Initialize read API with configuration."""
        self.config = config
        self.gateway = gateway or create_table_gateway(config)

    @property
    def key_attribute(self) -> str:
        return self.config.key_attribute

    def resolve(
        self,
        item_ids: Sequence[str],
        partition_key: Optional[str] = None,
        cancelled: Optional[threading.Event] = None
    ) -> List[Record]:
        """
        Fetch the records for the requested identifiers.

        DynamoDB Operation: BatchGetItem when partition_key is given, Scan otherwise

        Args:
            item_ids: Requested identifiers (non-empty)
            partition_key: Partition key value scoping the lookup
            cancelled: Set by the caller once the result is no longer wanted

        Returns:
            Normalized records, in request order; identifiers without a
            stored record are omitted

        Raises:
            ValidationError: If item_ids is empty
            StoreUnavailable: If the DynamoDB call fails or the read was cancelled
        """
        if not item_ids:
            raise ValidationError("At least one item id is required")

        if partition_key is not None:
            records = self._batch_get(item_ids, partition_key, cancelled)
        else:
            records = self._scan_for(item_ids, cancelled)

        logger.info(f"Resolved {len(records)} of {len(item_ids)} requested items from {self.gateway.table_name}")
        return self._order_by_request(records, item_ids)

    def get_by_id(
        self,
        item_id: str,
        partition_key: Optional[str] = None,
        cancelled: Optional[threading.Event] = None
    ) -> Optional[Record]:
        """
        Get a single item by identifier.

        DynamoDB Operation: GetItem with simple or composite primary key

        Returns:
            Normalized record if found, None otherwise
        """
        key = build_item_key(
            self.key_attribute,
            item_id,
            self.config.partition_key_attribute,
            partition_key
        )
        self._raise_if_cancelled(cancelled, "GetItem")
        item = self.gateway.get_item(key)
        if item is None:
            logger.info(f"Item {item_id!r} not found in {self.gateway.table_name}")
            return None
        return normalize_item(item)

    def list_all(
        self,
        partition_key: Optional[str] = None,
        cancelled: Optional[threading.Event] = None
    ) -> List[Record]:
        """
        Return every item in the table, or every item under a partition key.

        DynamoDB Operation: Query on the partition key when given, Scan otherwise.
        Only the first result page is read.
        """
        if partition_key is not None:
            self._raise_if_cancelled(cancelled, "Query")
            response = self.gateway.query(
                KeyConditionExpression="#p = :p",
                ExpressionAttributeNames={'#p': self.config.partition_key_attribute},
                ExpressionAttributeValues={':p': {'S': partition_key}}
            )
            self._warn_if_truncated(response, "Query")
        else:
            self._raise_if_cancelled(cancelled, "Scan")
            response = self.gateway.scan()
            self._warn_if_truncated(response, "Scan")

        records = normalize_items(response.get('Items'))
        logger.info(f"Listed {len(records)} items from {self.gateway.table_name}")
        return records

    def _batch_get(
        self,
        item_ids: Sequence[str],
        partition_key: str,
        cancelled: Optional[threading.Event]
    ) -> List[Record]:
        # DynamoDB rejects a BatchGetItem that names the same key twice
        keys = [
            build_item_key(self.key_attribute, item_id, self.config.partition_key_attribute, partition_key)
            for item_id in unique_in_order(item_ids)
        ]
        table_name = self.gateway.table_name

        records = []
        for key_chunk in chunked(keys, MAX_BATCH_GET_KEYS):
            pending = {table_name: {'Keys': list(key_chunk)}}
            rounds = 0
            while pending:
                if rounds == MAX_UNPROCESSED_ROUNDS:
                    remaining = len(pending.get(table_name, {}).get('Keys', []))
                    raise StoreUnavailable(
                        f"BatchGetItem on {table_name} left {remaining} keys unprocessed "
                        f"after {MAX_UNPROCESSED_ROUNDS} rounds",
                        operation="BatchGetItem"
                    )
                self._raise_if_cancelled(cancelled, "BatchGetItem")
                response = self.gateway.batch_get_item(pending)
                records.extend(normalize_items(response.get('Responses', {}).get(table_name)))
                pending = response.get('UnprocessedKeys') or {}
                rounds += 1
                if pending:
                    logger.debug(f"BatchGetItem on {table_name} returned unprocessed keys, requesting them again")
        return records

    def _scan_for(self, item_ids: Sequence[str], cancelled: Optional[threading.Event]) -> List[Record]:
        expression, names, values = build_in_filter_expression(self.key_attribute, item_ids)
        logger.debug(f"Scanning {self.gateway.table_name} with filter {expression}")

        self._raise_if_cancelled(cancelled, "Scan")
        response = self.gateway.scan(
            FilterExpression=expression,
            ExpressionAttributeNames=names,
            ExpressionAttributeValues=values
        )
        self._warn_if_truncated(response, "Scan")
        return normalize_items(response.get('Items'))

    def _raise_if_cancelled(self, cancelled: Optional[threading.Event], operation: str) -> None:
        if cancelled is not None and cancelled.is_set():
            logger.debug(f"{operation} on {self.gateway.table_name} skipped: read was cancelled")
            raise StoreUnavailable(
                f"{operation} on {self.gateway.table_name} cancelled before it was sent",
                operation=operation
            )

    def _warn_if_truncated(self, response: Dict[str, Any], operation: str) -> None:
        # Results are not paginated; a LastEvaluatedKey means later pages were never read
        if response.get('LastEvaluatedKey'):
            logger.warning(
                f"{operation} on {self.gateway.table_name} hit the result page limit; "
                f"items beyond the first page were not read"
            )

    def _order_by_request(self, records: List[Record], item_ids: Sequence[str]) -> List[Record]:
        position = {}
        for index, item_id in enumerate(item_ids):
            position.setdefault(item_id, index)
        fallback = len(position)

        def request_position(record: Record) -> int:
            item_id = record.get(self.key_attribute)
            return position.get(item_id, fallback) if isinstance(item_id, str) else fallback

        return sorted(records, key=request_position)
