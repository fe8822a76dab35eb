"""
Thin DynamoDB Table Gateway

This module provides a lightweight wrapper around the low-level boto3
DynamoDB client. The low-level client is used on purpose: it returns items
in DynamoDB's tagged attribute format, which the read API normalizes itself
(see core.attribute_values) instead of relying on boto3's Decimal-based
deserializer.

The gateway focuses on:
- Creating the boto3 client once, with timeouts bound to the request deadline
- Exposing only the read operations the API needs (BatchGetItem, Scan, GetItem)
- Mapping every botocore failure to StoreUnavailable

Retries are disabled by default: a store failure is surfaced immediately and
the caller owns retry policy.
"""

import logging
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..config import ItemApiConfig
from ..exceptions import StoreUnavailable

logger = logging.getLogger(__name__)


# Error codes grouped only to give the logged message a useful prefix;
# every one of them surfaces to the client as the same generic 500.
_THROTTLING_CODES = {
    'ProvisionedThroughputExceededException', 'RequestLimitExceeded',
    'ThrottlingException', 'TooManyRequestsException',
}
_SERVICE_CODES = {
    'InternalServerError', 'ServiceUnavailable', 'ServiceUnavailableException',
    'InternalFailure', 'ServiceException',
}
_AUTH_CODES = {
    'UnrecognizedClientException', 'AccessDeniedException', 'ExpiredTokenException',
    'IncompleteSignatureException', 'InvalidSignatureException', 'MissingAuthenticationTokenException',
}
_TIMEOUT_CODES = {'RequestTimeoutException', 'RequestExpiredException'}


def map_dynamodb_error(
    error: ClientError,
    operation: str,
    table_name: str,
    resource_id: Optional[str] = None
) -> StoreUnavailable:
    """Map a DynamoDB ClientError to StoreUnavailable.

    The returned exception keeps the DynamoDB error code and message for
    server-side logging; the HTTP layer never returns them to clients.

    Args:
        error: The boto3 ClientError
        operation: The operation that failed (e.g., "BatchGetItem", "Scan")
        table_name: The DynamoDB table name
        resource_id: Optional resource identifier for context

    Returns:
        StoreUnavailable carrying the operation and error code
    """
    error_info = error.response.get('Error', {})
    error_code = error_info.get('Code', 'Unknown')
    error_message = error_info.get('Message', str(error))

    context = f"{operation} on {table_name}"
    if resource_id:
        context += f" (resource: {resource_id})"

    full_message = f"{context}: {error_message}"

    if error_code == 'ResourceNotFoundException':
        prefix = "Table not found"
    elif error_code == 'ValidationException':
        prefix = "Request rejected by DynamoDB"
    elif error_code in _THROTTLING_CODES:
        prefix = "Throttling"
    elif error_code in _SERVICE_CODES:
        prefix = "Service unavailable"
    elif error_code in _AUTH_CODES:
        prefix = "Authentication/authorization failed"
    elif error_code in _TIMEOUT_CODES:
        prefix = "Request timeout"
    else:
        logger.warning(f"Unknown DynamoDB error code '{error_code}' during {operation}")
        prefix = "DynamoDB operation failed"

    return StoreUnavailable(
        f"{prefix} - {full_message}",
        operation=operation,
        error_code=error_code,
        original_error=error
    )


def map_botocore_error(error: BotoCoreError, operation: str, table_name: str) -> StoreUnavailable:
    """Map a client-side botocore failure (connection, timeout, credentials)."""
    return StoreUnavailable(
        f"{operation} on {table_name} failed before a response was received: {error}",
        operation=operation,
        error_code=type(error).__name__,
        original_error=error
    )


class TableGateway:
    """
    Thin gateway for DynamoDB table reads.

    Wraps the low-level client so that every response keeps DynamoDB's
    tagged attribute format. Designed to be used by the read API rather than
    directly by HTTP handlers.
    """

    def __init__(self, config: ItemApiConfig, table_name: Optional[str] = None):
        """Initialize table gateway.

        Args:
            config: API configuration
            table_name: Name of the DynamoDB table (defaults to config.table_name)
        """
        self.config = config
        self.table_name = table_name or config.table_name
        self._client = None

    @property
    def client(self):
        """Lazy initialization of the low-level DynamoDB client."""
        if self._client is None:
            try:
                session = boto3.Session(
                    aws_access_key_id=self.config.aws_access_key_id,
                    aws_secret_access_key=self.config.aws_secret_access_key,
                    region_name=self.config.region_name
                )

                client_kwargs = {
                    'region_name': self.config.region_name
                }

                if self.config.endpoint_url:
                    client_kwargs['endpoint_url'] = self.config.endpoint_url

                # Timeouts match the request deadline so an abandoned call cannot outlive it
                client_kwargs['config'] = Config(
                    retries={'max_attempts': self.config.retries},
                    max_pool_connections=self.config.max_pool_connections,
                    read_timeout=self.config.request_timeout_seconds,
                    connect_timeout=self.config.request_timeout_seconds
                )

                self._client = session.client('dynamodb', **client_kwargs)
            except Exception as e:
                logger.error(f"Failed to create DynamoDB client: {e}")
                raise StoreUnavailable(f"Failed to connect to DynamoDB: {e}", original_error=e) from e
        return self._client

    def batch_get_item(self, request_items: Dict[str, Any]) -> Dict[str, Any]:
        """
        Execute DynamoDB BatchGetItem operation.

        Args:
            request_items: boto3 RequestItems mapping (table name -> Keys, projection)

        Returns:
            Raw DynamoDB response, including any UnprocessedKeys
        """
        try:
            return self.client.batch_get_item(RequestItems=request_items)
        except ClientError as e:
            raise map_dynamodb_error(e, "BatchGetItem", self.table_name) from e
        except BotoCoreError as e:
            raise map_botocore_error(e, "BatchGetItem", self.table_name) from e

    def scan(self, **kwargs) -> Dict[str, Any]:
        """
        Execute DynamoDB Scan operation.

        Scan reads the whole table and is O(table size). It is only used
        when no partition key is configured.

        Args:
            **kwargs: All boto3 scan parameters (TableName is filled in)

        Returns:
            Raw DynamoDB response
        """
        kwargs.setdefault('TableName', self.table_name)
        if 'FilterExpression' not in kwargs:
            logger.debug(f"Scan on {self.table_name} without FilterExpression")
        try:
            return self.client.scan(**kwargs)
        except ClientError as e:
            raise map_dynamodb_error(e, "Scan", self.table_name) from e
        except BotoCoreError as e:
            raise map_botocore_error(e, "Scan", self.table_name) from e

    def query(self, **kwargs) -> Dict[str, Any]:
        """
        Execute DynamoDB Query operation.

        Args:
            **kwargs: All boto3 query parameters (TableName is filled in)

        Returns:
            Raw DynamoDB response
        """
        kwargs.setdefault('TableName', self.table_name)
        try:
            return self.client.query(**kwargs)
        except ClientError as e:
            raise map_dynamodb_error(e, "Query", self.table_name) from e
        except BotoCoreError as e:
            raise map_botocore_error(e, "Query", self.table_name) from e

    def get_item(self, key: Dict[str, Any], **kwargs) -> Optional[Dict[str, Any]]:
        """
        Execute DynamoDB GetItem operation.

        Args:
            key: Primary key in tagged format, e.g. {'ItemId': {'S': 'D1'}}
            **kwargs: Additional boto3 get_item parameters

        Returns:
            Raw item in tagged format, or None if absent
        """
        try:
            response = self.client.get_item(TableName=self.table_name, Key=key, **kwargs)
        except ClientError as e:
            raise map_dynamodb_error(e, "GetItem", self.table_name, str(key)) from e
        except BotoCoreError as e:
            raise map_botocore_error(e, "GetItem", self.table_name) from e
        return response.get('Item')


def create_table_gateway(config: ItemApiConfig) -> TableGateway:
    """
    Factory function to create a TableGateway instance.

    Args:
        config: API configuration

    Returns:
        Configured TableGateway instance for config.table_name
    """
    return TableGateway(config, config.table_name)
