"""
Objext utilities shared across the package.

Contains functions used by multiple modules to avoid circular imports.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any


# Methods --------------------------------------------------------------------------------------------------------------


def class_name(obj: Any, fully_qualified: bool = False) -> str:
    """
    Get the class name of an object or a class.

    Returns class name whether given an instance or the class itself.
    For example, both `class_name(10)` and `class_name(int)` return 'int'.

    Parameters:
        obj (Any): An object or a class.
        fully_qualified (bool): If true, returns the module qualified name for non-builtin classes.

    Returns:
        str: The class name.

    Examples:
        >>> class_name(10)
        'int'
        >>> class C: ...
        >>> class_name(C())
        'C'
        >>> class_name(C, fully_qualified=True)
        'objext.utils.C'
    """
    cls = obj if isinstance(obj, type) else obj.__class__

    name = getattr(cls, "__name__", None) or str(cls)
    module = getattr(cls, "__module__", None)

    if fully_qualified and module and module != "builtins":
        return f"{module}.{name}"
    return name


def is_blank(s: str | None) -> bool:
    """Return True for None, empty or whitespace-only strings."""
    return s is None or not s.strip()
