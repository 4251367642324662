"""
Objext Dictify Tools

Flat dictionary projection and indented human-readable dumps of objects.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc

from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .abc import DescriptorPolicy, get_descriptors, is_enumerable, is_leaf
from .tools import fmt_type, fmt_value, to_text
from .utils import class_name

INDENT = "  "


# Methods --------------------------------------------------------------------------------------------------------------

def to_dictionary(obj: Any) -> dict[str, Any]:
    """
    Map the members declared on the object's own class to their raw values.

    Members inherited from base classes are excluded. None values are kept, unlike
    in the query string and form builders.

    Args:
        obj: Object to convert; a Mapping is copied with stringified keys.

    Returns:
        dict of exposed name to value, {} for None.

    Examples:
        >>> @dataclass
        ... class Base:
        ...     id: int = 1
        >>> @dataclass
        ... class User(Base):
        ...     name: str | None = None
        >>> to_dictionary(User())
        {'name': None}
    """
    if obj is None:
        return {}
    if isinstance(obj, abc.Mapping):
        return {str(k): v for k, v in obj.items()}

    return {d.name: d.get(obj) for d in get_descriptors(obj, DescriptorPolicy.DECLARED_ONLY)}


def to_readable_string(obj: Any, indent: int = 0) -> str:
    """
    Render an object as an indented, newline-delimited "name: value" tree.

    Each nesting level adds two spaces. None renders as "null", nested objects and
    mappings render their name followed by their members one level deeper, and
    iterables (strings excluded) render one "- item" line per element. A getter that
    raises renders as "<error: ExceptionType>" and does not abort the dump.

    There is no cycle detection, self-referencing graphs do not terminate.

    Args:
        obj: Object to render.
        indent: Starting indentation level.

    Raises:
        TypeError: If indent is not an int.
        ValueError: If indent is negative.

    Examples:
        >>> print(to_readable_string(order))
        id: 7
        note: null
        customer:
          name: Ann
        tags:
          - new
          - vip
    """
    if isinstance(indent, bool) or not isinstance(indent, int):
        raise TypeError(f"indent must be an int, but found {fmt_type(indent)}")
    if indent < 0:
        raise ValueError(f"indent must be >= 0, but found {fmt_value(indent)}")

    if obj is None:
        return ""
    if is_leaf(obj):
        return INDENT * indent + to_text(obj)

    lines: list[str] = []
    if is_enumerable(obj):
        _render_items(obj, indent, lines)
    else:
        _render_members(obj, indent, lines)
    return "\n".join(lines)


# Private Methods ------------------------------------------------------------------------------------------------------

def _render_members(obj: Any, indent: int, lines: list[str]) -> None:
    pad = INDENT * indent
    if isinstance(obj, abc.Mapping):
        for key, value in obj.items():
            _render_value(str(key), value, indent, lines)
        return

    for descriptor in get_descriptors(obj, DescriptorPolicy.ALL):
        try:
            value = descriptor.get(obj)
        except Exception as e:
            lines.append(f"{pad}{descriptor.name}: <error: {type(e).__name__}>")
            continue
        _render_value(descriptor.name, value, indent, lines)


def _render_value(name: str, value: Any, indent: int, lines: list[str]) -> None:
    pad = INDENT * indent
    if value is None:
        lines.append(f"{pad}{name}: null")
    elif is_leaf(value):
        lines.append(f"{pad}{name}: {to_text(value)}")
    elif is_enumerable(value):
        lines.append(f"{pad}{name}:")
        _render_items(value, indent + 1, lines)
    else:
        lines.append(f"{pad}{name}:")
        _render_members(value, indent + 1, lines)


def _render_items(items: abc.Iterable, indent: int, lines: list[str]) -> None:
    pad = INDENT * indent
    for item in items:
        if item is None:
            lines.append(f"{pad}- null")
        elif is_leaf(item):
            lines.append(f"{pad}- {to_text(item)}")
        elif is_enumerable(item):
            lines.append(f"{pad}-")
            _render_items(item, indent + 1, lines)
        else:
            lines.append(f"{pad}- {class_name(item)}")
            _render_members(item, indent + 1, lines)
