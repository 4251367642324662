"""
JSON serialize / deserialize helpers used by the HTTP content builders and the
serialization based query string builder.

Objects that json cannot encode natively are converted through the descriptor cache,
so rename annotations apply to JSON output the same way they apply to query strings
and form bodies.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc
import datetime as dt
import json as py_json
import pathlib
import uuid

from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .abc import DescriptorPolicy, get_descriptors
from .exceptions import SerializationError
from .tools import fmt_type


# Methods --------------------------------------------------------------------------------------------------------------

def serialize(obj: Any, *, indent: int | None = None) -> str:
    """
    Serialize an object graph to JSON text.

    Args:
        obj: Any object; user objects are encoded as JSON objects of their public members.
        indent: Optional pretty-print indentation, compact output if None.

    Returns:
        JSON text.

    Raises:
        SerializationError: If the graph holds values json cannot encode, NaN or infinite
            floats, or a reference cycle.

    Examples:
        >>> serialize({"a": True, "b": None})
        '{"a": true, "b": null}'
    """
    try:
        return py_json.dumps(obj, default=_encode_default, indent=indent, allow_nan=False, ensure_ascii=False)
    except (TypeError, ValueError, RecursionError) as e:
        raise SerializationError(f"Cannot serialize {fmt_type(obj)} to JSON: {e}") from e


def serialize_to_bytes(obj: Any) -> bytes:
    """Serialize an object graph to UTF-8 encoded JSON."""
    return serialize(obj).encode("utf-8")


def deserialize(text: str | bytes | bytearray) -> Any:
    """
    Parse JSON text into Python dicts, lists and scalars.

    Raises:
        SerializationError: If text is not valid JSON.
    """
    try:
        return py_json.loads(text)
    except (py_json.JSONDecodeError, TypeError, UnicodeDecodeError) as e:
        raise SerializationError(f"Cannot deserialize JSON from {fmt_type(text)}: {e}") from e


# Private Methods ------------------------------------------------------------------------------------------------------

def _encode_default(obj: Any) -> Any:
    """json.dumps default hook for everything the json module does not encode natively."""
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (dt.datetime, dt.date, dt.time)):
        return obj.isoformat()
    if isinstance(obj, dt.timedelta):
        return obj.total_seconds()
    if isinstance(obj, Decimal):
        if obj.is_finite() and obj == obj.to_integral_value() and obj.as_tuple().exponent >= 0:
            return int(obj)
        return float(obj)
    if isinstance(obj, Fraction):
        return float(obj)
    if isinstance(obj, (uuid.UUID, pathlib.PurePath)):
        return str(obj)
    if isinstance(obj, (bytes, bytearray)):
        return obj.decode("utf-8", errors="replace")
    if isinstance(obj, abc.Mapping):
        return dict(obj)
    if isinstance(obj, (abc.Set, abc.Sequence, abc.Iterator)):
        return list(obj)

    # Builtin instances have no members; user objects without any encode as {}
    if type(obj).__module__ == "builtins":
        raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")
    return {d.name: d.get(obj) for d in get_descriptors(obj, DescriptorPolicy.ALL)}
