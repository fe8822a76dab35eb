"""
DynamoDB Attribute Value Normalization

The low-level DynamoDB client returns every attribute as a single-entry
tagged wrapper, e.g. ``{'S': 'Glazed'}`` or ``{'N': '1.50'}``. This module
unwraps those wrappers into plain, JSON-serializable values.

Mapping:
- S        -> str
- N        -> str (original decimal text, never coerced to float)
- BOOL     -> bool
- SS / NS  -> list of str, in the order DynamoDB returned them
- M        -> dict, normalized recursively
- L        -> list, normalized recursively
- anything else (NULL, B, BS, unknown tags) -> None

Normalization never raises: an attribute it does not understand becomes
None instead of failing the whole response. Values that are not wrappers
pass through untouched.
"""

from typing import Any, Callable, Dict, List, Optional

Record = Dict[str, Any]


def _normalize_map(value: Any) -> Optional[Record]:
    if not isinstance(value, dict):
        return None
    return {name: normalize(attr) for name, attr in value.items()}


def _normalize_list(value: Any) -> Optional[List[Any]]:
    if not isinstance(value, (list, tuple)):
        return None
    return [normalize(element) for element in value]


def _normalize_set(value: Any) -> Optional[List[str]]:
    if not isinstance(value, (list, tuple, set, frozenset)):
        return None
    return [str(member) for member in value]


def _normalize_string(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _normalize_bool(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None


_TAG_HANDLERS: Dict[str, Callable[[Any], Any]] = {
    'S': _normalize_string,
    'N': _normalize_string,
    'BOOL': _normalize_bool,
    'SS': _normalize_set,
    'NS': _normalize_set,
    'M': _normalize_map,
    'L': _normalize_list,
}


def is_tagged(value: Any) -> bool:
    """Whether value looks like a DynamoDB attribute wrapper (one string key)."""
    return isinstance(value, dict) and len(value) == 1 and isinstance(next(iter(value)), str)


def normalize(value: Any) -> Any:
    """Convert a DynamoDB tagged attribute value to a plain value.

    Values that are not tagged wrappers (non-dicts, and dicts with zero or
    several entries such as an already-normalized record) are plain leaves
    and are returned unchanged, so normalizing a normalized value is a no-op.
    A single-entry dict is read as a wrapper; an unknown tag normalizes to
    None. A normalized map with exactly one entry is indistinguishable from
    such a wrapper.

    Args:
        value: Tagged attribute value from a low-level DynamoDB response

    Returns:
        Plain Python value (str, bool, list, dict or None)

    Examples:
        >>> normalize({'N': '12.50'})
        '12.50'
        >>> normalize({'M': {'glaze': {'S': 'chocolate'}, 'vegan': {'BOOL': False}}})
        {'glaze': 'chocolate', 'vegan': False}
        >>> normalize({'B': b'\\x00'}) is None
        True
    """
    if not is_tagged(value):
        return value

    tag, payload = next(iter(value.items()))
    handler = _TAG_HANDLERS.get(tag)
    if handler is None:
        return None
    return handler(payload)


def normalize_item(item: Optional[Dict[str, Any]]) -> Record:
    """Normalize every attribute of a raw DynamoDB item.

    Args:
        item: Mapping of attribute name to tagged value

    Returns:
        Record with plain values
    """
    if not item:
        return {}
    return {name: normalize(value) for name, value in item.items()}


def normalize_items(items: Optional[List[Dict[str, Any]]]) -> List[Record]:
    """Normalize a list of raw DynamoDB items."""
    return [normalize_item(item) for item in items or []]
