"""
Type introspection for objext: cached property descriptors, rename annotations and leaf type checks.

Every conversion function in the package resolves the public members of an object through
get_descriptors(). A type is scanned once per DescriptorPolicy; the resulting tuple of
PropertyDescriptor is published into a process-wide cache and reused by all later calls.

The cache has no eviction. Its key space is bounded by the number of distinct classes a
process ever converts, which is small and fixed for any real program.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc
import dataclasses
import datetime as dt
import functools
import inspect
import ipaddress
import logging
import numbers
import pathlib
import re
import threading
import types
import uuid

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum, unique
from fractions import Fraction
from typing import Annotated, Any, Callable, ClassVar, Union, get_args, get_origin

# Local ----------------------------------------------------------------------------------------------------------------
from .tools import fmt_type
from .utils import is_blank

logger = logging.getLogger(__name__)

JSON_NAME_KEY = "json_name"


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class DescriptorPolicy(str, Enum):
    """
    Member resolution policy:
        - "all": public instance members including the ones inherited from base classes
        - "declared_only": public instance members declared on the class itself
    """
    ALL = "all"
    DECLARED_ONLY = "declared_only"


@dataclass(frozen=True)
class JsonName:
    """
    Rename annotation overriding the externally exposed name of a member.

    Attach it through typing.Annotated to a field annotation or to a property
    return annotation. A blank name is ignored.

    Examples:
        >>> @dataclass
        ... class User:
        ...     first_name: Annotated[str | None, JsonName("firstName")] = None
        ...
        ...     @property
        ...     def full_name(self) -> Annotated[str, JsonName("fullName")]:
        ...         return self.first_name or ""
    """
    name: str


@dataclass(frozen=True)
class PropertyDescriptor:
    """
    One exposed member of a type.

    Attributes:
        name: Exposed name, the JsonName value if present, else the declared name.
        attr: Declared attribute name.
        read: Accessor returning the member value of an instance, bound once per type.
        declared_type: Member annotation with Annotated metadata stripped, None if unknown.
    """
    name: str
    attr: str
    read: Callable[[Any], Any] = field(repr=False, compare=False)
    declared_type: Any = field(default=None, repr=False, compare=False)

    def get(self, obj: Any) -> Any:
        """Read the member value from obj."""
        return self.read(obj)


class _DescriptorCache:
    """Get-or-compute store of descriptor tuples keyed by type, one instance per policy."""

    def __init__(self, policy: DescriptorPolicy) -> None:
        self.policy = policy
        self._entries: dict[type, tuple[PropertyDescriptor, ...]] = {}
        # Reentrant: annotation evaluation during a scan may describe other types
        self._lock = threading.RLock()

    def get(self, cls: type) -> tuple[PropertyDescriptor, ...]:
        entries = self._entries.get(cls)
        if entries is not None:
            return entries

        with self._lock:
            # Another thread may have published while we waited
            entries = self._entries.get(cls)
            if entries is None:
                entries = _scan_type(cls, declared_only=self.policy is DescriptorPolicy.DECLARED_ONLY)
                self._entries[cls] = entries
        return entries

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


_CACHES: dict[DescriptorPolicy, _DescriptorCache] = {
    policy: _DescriptorCache(policy) for policy in DescriptorPolicy
}

# Types never recursed into by diagnostic walkers
LEAF_TYPES: tuple[type, ...] = (
    str, bytes, bytearray, memoryview, bool, int, float, complex, Decimal, Fraction,
    dt.datetime, dt.date, dt.time, dt.timedelta, dt.tzinfo,
    uuid.UUID, Enum, pathlib.PurePath, re.Pattern, type,
    ipaddress.IPv4Address, ipaddress.IPv6Address, ipaddress.IPv4Network, ipaddress.IPv6Network,
)

LEAF_MODULES: frozenset[str] = frozenset({
    "builtins", "datetime", "decimal", "fractions", "uuid", "pathlib", "ipaddress", "re", "enum",
    "urllib.parse", "zoneinfo", "typing", "types", "collections.abc",
})


# Methods --------------------------------------------------------------------------------------------------------------

def get_descriptors(obj: Any, policy: DescriptorPolicy | str = DescriptorPolicy.ALL) -> tuple[PropertyDescriptor, ...]:
    """
    Return the cached public member descriptors of a type.

    The first call for a type scans it and publishes the result; concurrent first callers
    wait for that single scan and receive the same tuple. Later calls are a dict lookup.

    Args:
        obj: A class, or an instance whose type is described.
        policy: DescriptorPolicy.ALL includes inherited members, DescriptorPolicy.DECLARED_ONLY
            only the members declared on the class itself.

    Returns:
        Tuple of PropertyDescriptor in declaration order, base class members first.

    Raises:
        ValueError: If policy is not a valid DescriptorPolicy value.

    Member rules:
        - instance annotations (dataclass fields, NamedTuple fields, annotated attributes),
          then __slots__ entries, then property and cached_property members
        - private names (leading underscore) are skipped
        - ClassVar and InitVar annotations are skipped as static members
        - write-only properties and getters requiring extra arguments are skipped
        - declared but unassigned fields read as None

    Examples:
        >>> @dataclass
        ... class Point:
        ...     x: int
        ...     y: Annotated[int, JsonName("Y")] = 0
        >>> [d.name for d in get_descriptors(Point)]
        ['x', 'Y']
    """
    cls = obj if isinstance(obj, type) else type(obj)
    return _CACHES[DescriptorPolicy(policy)].get(cls)


def clear_descriptor_cache() -> None:
    """Drop all cached descriptors, for every policy."""
    for cache in _CACHES.values():
        cache.clear()


def descriptor_cache_info() -> dict[str, int]:
    """Return the number of cached types per policy."""
    return {policy.value: len(cache) for policy, cache in _CACHES.items()}


def iter_members(obj: Any) -> abc.Iterator[tuple[str, Any]]:
    """
    Yield (exposed name, value) pairs of an object's public members.

    Mappings yield their items with stringified keys, everything else goes through
    the descriptor cache with DescriptorPolicy.ALL. Getter exceptions propagate.
    """
    if isinstance(obj, abc.Mapping):
        for key, value in obj.items():
            yield str(key), value
        return

    for descriptor in get_descriptors(obj, DescriptorPolicy.ALL):
        yield descriptor.name, descriptor.get(obj)


def json_field(name: str, **kwargs) -> Any:
    """
    dataclasses.field() carrying a rename annotation in its metadata.

    Examples:
        >>> @dataclass
        ... class User:
        ...     first_name: str | None = json_field("firstName", default=None)
    """
    if not isinstance(name, str):
        raise TypeError(f"json_field name must be a str, but found {fmt_type(name)}")
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[JSON_NAME_KEY] = name
    return dataclasses.field(metadata=metadata, **kwargs)


def is_leaf_type(cls: Any) -> bool:
    """
    Check whether values of a type are opaque scalars for object graph walkers.

    Covers Python primitives, date/time, numeric, UUID, path and address types, plus
    any class defined in a standard library module listed in LEAF_MODULES. Containers
    (iterables and mappings) are never leaves, their items are walked instead. A union
    annotation such as `dt.date | None` is a leaf when all its non-None members are.
    `object` and `Any` say nothing about the value and are not leaves.
    """
    if get_origin(cls) in (Union, types.UnionType):
        members = [arg for arg in get_args(cls) if arg is not type(None)]
        return bool(members) and all(is_leaf_type(arg) for arg in members)
    if get_origin(cls) is not None or not isinstance(cls, type):
        return False
    if cls is object or cls is Any:
        return False  # Runtime value decides
    if issubclass(cls, LEAF_TYPES):
        return True
    if issubclass(cls, (abc.Iterable, abc.Mapping)):
        return False
    return getattr(cls, "__module__", None) in LEAF_MODULES


def is_leaf(value: Any) -> bool:
    """Check whether a value is None or an instance of a leaf type."""
    return value is None or is_leaf_type(type(value))


def is_enumerable(value: Any) -> bool:
    """
    Check whether a value is iterated item by item by the walkers.

    Strings and byte sequences are always scalars; mappings are walked by key
    and are therefore not enumerable here. Named tuples are objects with fields.
    """
    if isinstance(value, (str, bytes, bytearray, memoryview, abc.Mapping)):
        return False
    if isinstance(value, tuple) and hasattr(type(value), "_fields"):
        return False
    return isinstance(value, abc.Iterable)


def is_numeric(obj: Any) -> bool:
    """
    Check whether an object is a number.

    Examples:
        >>> is_numeric(3.5), is_numeric(Decimal("1")), is_numeric(True), is_numeric("1")
        (True, True, False, False)
    """
    if isinstance(obj, bool):
        return False
    return isinstance(obj, (numbers.Number, Decimal))


# Private Methods ------------------------------------------------------------------------------------------------------

def _scan_type(cls: type, declared_only: bool) -> tuple[PropertyDescriptor, ...]:
    """Reflective scan of a type, the expensive part cached by _DescriptorCache."""
    if declared_only:
        classes = [cls]
    else:
        classes = [klass for klass in reversed(cls.__mro__) if klass is not object]

    found: dict[str, PropertyDescriptor] = {}
    for klass in classes:
        if getattr(klass, "__module__", None) == "builtins":
            continue
        for descriptor in _scan_class(klass):
            # Redefinition keeps the base position and takes the subclass accessor
            found[descriptor.attr] = descriptor

    return tuple(found.values())


def _scan_class(klass: type) -> list[PropertyDescriptor]:
    """Descriptors for the members declared directly on klass."""
    descriptors = []
    members = klass.__dict__
    hints = _get_annotations(klass)
    dc_fields = getattr(klass, "__dataclass_fields__", {})

    # Annotated instance fields
    for attr, hint in hints.items():
        if attr.startswith("_") or _is_static_hint(hint):
            continue
        if isinstance(members.get(attr), (property, functools.cached_property)):
            continue
        dc_field = dc_fields.get(attr)
        metadata = dc_field.metadata if dc_field is not None else None
        descriptors.append(PropertyDescriptor(name=_exposed_name(attr, hint, metadata),
                                              attr=attr,
                                              read=_field_reader(attr),
                                              declared_type=_strip_annotated(hint)))

    # Slots without annotations
    slots = members.get("__slots__", ())
    if isinstance(slots, str):
        slots = (slots,)
    for attr in slots:
        if attr.startswith("_") or attr in hints:
            continue
        descriptors.append(PropertyDescriptor(name=attr, attr=attr, read=_field_reader(attr)))

    # Properties
    for attr, member in members.items():
        if attr.startswith("_"):
            continue
        if isinstance(member, property):
            if member.fget is None:
                continue  # Write-only
            getter = member.fget
            reader = getter
        elif isinstance(member, functools.cached_property):
            getter = member.func
            reader = _field_reader(attr, default=False)
        else:
            continue
        if _requires_arguments(getter):
            continue  # Indexer-like getter
        hint = _get_annotations(getter).get("return")
        descriptors.append(PropertyDescriptor(name=_exposed_name(attr, hint),
                                              attr=attr,
                                              read=reader,
                                              declared_type=_strip_annotated(hint)))

    return descriptors


def _get_annotations(obj: Any) -> dict[str, Any]:
    """Evaluated annotations of a class or function, raw ones if evaluation fails."""
    try:
        return inspect.get_annotations(obj, eval_str=True)
    except Exception as e:
        # Forward references that cannot be resolved at scan time
        logger.debug("Cannot resolve annotations of %s, renames in string annotations are ignored: %s",
                     getattr(obj, "__qualname__", obj), fmt_type(e))
        return inspect.get_annotations(obj)


def _is_static_hint(hint: Any) -> bool:
    if isinstance(hint, str):
        return hint.startswith(("ClassVar", "typing.ClassVar", "InitVar", "dataclasses.InitVar"))
    if hint is ClassVar or get_origin(hint) is ClassVar:
        return True
    return hint is dataclasses.InitVar or isinstance(hint, dataclasses.InitVar)


def _strip_annotated(hint: Any) -> Any:
    if get_origin(hint) is Annotated:
        return get_args(hint)[0]
    return hint


def _exposed_name(attr: str, hint: Any, metadata: abc.Mapping | None = None) -> str:
    """Resolve the exposed name: JsonName in Annotated, then dataclass field metadata, then attr."""
    if get_origin(hint) is Annotated:
        for meta in hint.__metadata__:
            if isinstance(meta, JsonName) and not is_blank(meta.name):
                return meta.name
    if metadata:
        name = metadata.get(JSON_NAME_KEY)
        if isinstance(name, str) and not is_blank(name):
            return name
    return attr


def _field_reader(attr: str, default: bool = True) -> Callable[[Any], Any]:
    """Accessor for a plain attribute; unassigned attributes read as None when default is set."""
    if default:
        def read(obj: Any) -> Any:
            return getattr(obj, attr, None)
    else:
        def read(obj: Any) -> Any:
            return getattr(obj, attr)
    read.__qualname__ = f"read_{attr}"
    return read


def _requires_arguments(fn: Callable) -> bool:
    """True if fn needs positional or keyword arguments beyond the instance."""
    try:
        params = list(inspect.signature(fn).parameters.values())[1:]
    except (TypeError, ValueError):
        return False
    required_kinds = (inspect.Parameter.POSITIONAL_ONLY,
                      inspect.Parameter.POSITIONAL_OR_KEYWORD,
                      inspect.Parameter.KEYWORD_ONLY)
    return any(p.default is inspect.Parameter.empty and p.kind in required_kinds for p in params)
