"""
Item API Utilities

Helpers shared by the read API and the HTTP layer:
- Request parsing (comma-separated identifier lists)
- Expression building with bound placeholders (no string concatenation of values)
- Key building for simple and composite primary keys
"""

from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

# DynamoDB limits
MAX_BATCH_GET_KEYS = 100
MAX_IN_OPERANDS = 100


# =============================================================================
# Request Parsing
# =============================================================================

def parse_item_ids(raw: Optional[str]) -> List[str]:
    """Split a comma-separated identifier list.

    Segments are trimmed and empty segments dropped; order and duplicates are
    kept.

    Example:
        >>> parse_item_ids("1, 2 ,3,,")
        ['1', '2', '3']
    """
    if not raw:
        return []
    return [segment.strip() for segment in raw.split(',') if segment.strip()]


# =============================================================================
# Sequence Helpers
# =============================================================================

def chunked(values: Sequence[Any], size: int) -> Iterator[Sequence[Any]]:
    """Yield consecutive slices of at most size elements."""
    if size <= 0:
        raise ValueError("Chunk size must be positive")
    for start in range(0, len(values), size):
        yield values[start:start + size]


def unique_in_order(values: Iterable[str]) -> List[str]:
    """Drop repeated values, keeping the first occurrence of each."""
    seen = set()
    unique = []
    for value in values:
        if value not in seen:
            seen.add(value)
            unique.append(value)
    return unique


# =============================================================================
# Key and Expression Building
# =============================================================================

def build_item_key(
    key_attribute: str,
    item_id: str,
    partition_key_attribute: Optional[str] = None,
    partition_key: Optional[str] = None
) -> Dict[str, Dict[str, str]]:
    """Build a primary key in DynamoDB's tagged format.

    With a partition key the key is composite: the partition key value plus
    the identifier as sort key.

    Example:
        >>> build_item_key('ItemId', 'D1', 'StoreId', 'store-1')
        {'StoreId': {'S': 'store-1'}, 'ItemId': {'S': 'D1'}}
    """
    key = {}
    if partition_key is not None:
        if not partition_key_attribute:
            raise ValueError("partition_key_attribute is required with a partition key")
        key[partition_key_attribute] = {'S': partition_key}
    key[key_attribute] = {'S': item_id}
    return key


def build_in_filter_expression(
    attribute: str,
    values: Sequence[str],
    name_placeholder: str = "#k",
    value_prefix: str = ":v"
) -> Tuple[str, Dict[str, str], Dict[str, Dict[str, str]]]:
    """Build an IN filter with every operand bound to a placeholder.

    Neither the attribute name nor any value is written into the expression
    text; both travel in ExpressionAttributeNames/ExpressionAttributeValues.
    DynamoDB accepts at most 100 operands per IN, so longer lists are split
    into groups joined with OR.

    Args:
        attribute: Attribute to compare
        values: Values the attribute may take
        name_placeholder: Placeholder bound to the attribute name
        value_prefix: Prefix of the numbered value placeholders

    Returns:
        Tuple of (FilterExpression, ExpressionAttributeNames, ExpressionAttributeValues)

    Raises:
        ValueError: If values is empty

    Example:
        >>> build_in_filter_expression('ItemId', ['D1', 'D2'])
        ('#k IN (:v0, :v1)', {'#k': 'ItemId'}, {':v0': {'S': 'D1'}, ':v1': {'S': 'D2'}})
    """
    if not values:
        raise ValueError("IN filter requires at least one value")

    expression_values = {}
    groups = []
    index = 0
    for group in chunked(list(values), MAX_IN_OPERANDS):
        placeholders = []
        for value in group:
            placeholder = f"{value_prefix}{index}"
            expression_values[placeholder] = {'S': value}
            placeholders.append(placeholder)
            index += 1
        groups.append(f"{name_placeholder} IN ({', '.join(placeholders)})")

    expression = ' OR '.join(groups)
    return expression, {name_placeholder: attribute}, expression_values
