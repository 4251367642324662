"""
Query string builders.

Both builders skip None values and prefix the result with '?' only when at least one
pair was emitted, so an object without any non-null member yields an empty string.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import json as py_json

from typing import Any
from urllib.parse import quote

# Local ----------------------------------------------------------------------------------------------------------------
from .abc import iter_members
from .exceptions import SerializationError
from .json import deserialize, serialize
from .tools import fmt_type, fmt_value, to_text


# Methods --------------------------------------------------------------------------------------------------------------

def to_query_string(obj: Any, lowercase_keys: bool = True) -> str:
    """
    Build a URL query string from the public members of an object.

    Args:
        obj: Object to convert; a Mapping is converted from its items.
        lowercase_keys: Lower-case keys before percent-encoding them.

    Returns:
        "?key=value&key=value" in member declaration order, or "" when obj is None
        or has no non-null member.

    Examples:
        >>> @dataclass
        ... class Search:
        ...     Term: str
        ...     Page: int | None = None
        ...     Exact: bool = False
        >>> to_query_string(Search("a b"))
        '?term=a%20b&exact=false'
        >>> to_query_string(Search("x"), lowercase_keys=False)
        '?Term=x&Exact=false'
    """
    if obj is None:
        return ""
    if not isinstance(lowercase_keys, bool):
        raise TypeError(f"lowercase_keys must be a bool, but found {fmt_value(lowercase_keys)}")

    pairs = []
    for key, value in iter_members(obj):
        if value is None:
            continue
        if lowercase_keys:
            key = key.lower()
        pairs.append((key, to_text(value)))

    return _join_query(pairs)


def to_query_string_via_serialization(obj: Any) -> str:
    """
    Build a URL query string by round-tripping obj through JSON.

    Top level keys of the JSON object become query keys as-is (never lower-cased).
    Booleans render as "true"/"false", nested objects and arrays as compact JSON text.

    Raises:
        SerializationError: If obj cannot be serialized or does not serialize to a JSON object.

    Examples:
        >>> to_query_string_via_serialization({"IsActive": True, "Name": None})
        '?IsActive=true'
    """
    if obj is None:
        return ""

    data = deserialize(serialize(obj))
    if not isinstance(data, dict):
        raise SerializationError(f"Expected a JSON object at top level, but {fmt_type(obj)} "
                                 f"serialized to {fmt_type(data)}")

    pairs = []
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, (dict, list)):
            text = py_json.dumps(value, separators=(",", ":"), ensure_ascii=False)
        else:
            text = to_text(value)
        pairs.append((key, text))

    return _join_query(pairs)


# Private Methods ------------------------------------------------------------------------------------------------------

def _join_query(pairs: list[tuple[str, str]]) -> str:
    if not pairs:
        return ""
    return "?" + "&".join(f"{quote(k, safe='')}={quote(v, safe='')}" for k, v in pairs)
