"""
Null property discovery for object graphs.

find_null_properties() walks an object recursively and reports which members are None,
including members of nested objects and items of collections. The result is a tree:

    {
        "middle_name": None,                          # the member itself is None
        "address": {"line2": None},                   # nested object with None members
        "phones": [{}, None, {"extension": None}],    # per item: clean, None, nested
    }

Every top-level call keeps its own identity-keyed visited set, so self-referencing graphs
terminate. An object reached a second time reports an empty sub-tree, which under-reports
objects legitimately shared between several parents.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc
import logging

from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .abc import DescriptorPolicy, get_descriptors, is_enumerable, is_leaf, is_leaf_type
from .json import serialize
from .tools import fmt_type
from .utils import class_name

logger = logging.getLogger(__name__)


# Methods --------------------------------------------------------------------------------------------------------------

def find_null_properties(obj: Any, *, strict: bool = False) -> dict[str, Any]:
    """
    Recursively collect the None members of an object graph.

    Args:
        obj: Root object; None or leaf values yield an empty tree.
        strict: If False (default) members whose getter raises are skipped; if True
            the getter exception propagates.

    Returns:
        Tree mapping member names to None (member is None), a nested tree (nested object
        with None members) or a list of per-item results (collection member). Members
        without any None below them are omitted.

    Notes:
        - Strings and bytes are scalars, never collections
        - Leaf types (numbers, dates, UUID, paths, stdlib classes) are never entered
        - Mappings are walked by key

    Examples:
        >>> @dataclass
        ... class Node:
        ...     name: str | None = None
        ...     parent: "Node | None" = None
        >>> n = Node()
        >>> n.parent = n
        >>> find_null_properties(n)
        {'name': None}
    """
    if not isinstance(strict, bool):
        raise TypeError(f"strict must be a bool, but found {fmt_type(strict)}")
    if is_leaf(obj) or is_enumerable(obj):
        return {}
    return _walk_object(obj, visited={}, strict=strict)


def null_property_names(obj: Any) -> list[str]:
    """
    Names of the top-level members of obj that are None, in declaration order.

    Getters that raise are skipped.
    """
    if is_leaf(obj) or is_enumerable(obj):
        return []
    return [name for name, value in _iter_members(obj, strict=False) if value is None]


def log_null_properties(obj: Any,
                        logger: logging.Logger | None = None,
                        *,
                        recursive: bool = False,
                        level: int = logging.INFO,
                        ) -> list[str] | dict[str, Any]:
    """
    Log the None members of an object and return them.

    Args:
        obj: Object to inspect.
        logger: Logger receiving the report, the module logger if None.
        recursive: If False, report the comma-joined top-level names; if True report the
            full tree of find_null_properties() as JSON text.
        level: Logging level of the report. A clean object is always logged at DEBUG.

    Returns:
        The reported list of names or tree.

    Examples:
        >>> log_null_properties(user)
        ['middle_name', 'phone']
        # INFO objext.nulls: Null properties of User: middle_name, phone
    """
    log = logger if logger is not None else logging.getLogger(__name__)
    type_name = class_name(obj)

    if recursive:
        tree = find_null_properties(obj)
        if tree:
            log.log(level, "Null properties of %s: %s", type_name, serialize(tree, indent=2))
        else:
            log.debug("No null properties found on %s", type_name)
        return tree

    names = null_property_names(obj)
    if names:
        log.log(level, "Null properties of %s: %s", type_name, ", ".join(names))
    else:
        log.debug("No null properties found on %s", type_name)
    return names


# Private Methods ------------------------------------------------------------------------------------------------------

def _iter_members(obj: Any, strict: bool) -> abc.Iterator[tuple[str, Any]]:
    """Yield (name, value) of members whose declared type is not a leaf; skip failing getters unless strict."""
    if isinstance(obj, abc.Mapping):
        for key, value in obj.items():
            yield str(key), value
        return

    for descriptor in get_descriptors(obj, DescriptorPolicy.ALL):
        try:
            value = descriptor.get(obj)
        except Exception as e:
            if strict:
                raise
            logger.debug("Skipping %s.%s, getter raised %s", class_name(obj), descriptor.attr, fmt_type(e))
            continue
        if value is not None and is_leaf_type(descriptor.declared_type):
            continue
        yield descriptor.name, value


def _walk_object(obj: Any, visited: dict[int, Any], strict: bool) -> dict[str, Any]:
    if id(obj) in visited:
        return {}
    # Holding the object keeps its id from being reused by a temporary during the walk
    visited[id(obj)] = obj

    tree: dict[str, Any] = {}
    for name, value in _iter_members(obj, strict):
        if value is None:
            tree[name] = None
        elif is_leaf(value):
            continue
        elif is_enumerable(value):
            items = _walk_items(value, visited, strict)
            if items is not None:
                tree[name] = items
        else:
            sub_tree = _walk_object(value, visited, strict)
            if sub_tree:
                tree[name] = sub_tree
    return tree


def _walk_items(items: abc.Iterable, visited: dict[int, Any], strict: bool) -> list[Any] | None:
    """Per-item results of a collection, None when no item is None or holds a None member."""
    if id(items) in visited:
        return None
    visited[id(items)] = items

    results: list[Any] = []
    found = False
    for item in items:
        if item is None:
            results.append(None)
            found = True
        elif is_leaf(item):
            results.append({})
        elif is_enumerable(item):
            nested = _walk_items(item, visited, strict)
            results.append(nested if nested is not None else {})
            found = found or nested is not None
        else:
            sub_tree = _walk_object(item, visited, strict)
            results.append(sub_tree)
            found = found or bool(sub_tree)

    return results if found else None
