#
# Objext Tools & Utilities
#

# Standard library -----------------------------------------------------------------------------------------------------
import datetime as dt
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .utils import class_name


# Methods --------------------------------------------------------------------------------------------------------------

def fmt_type(obj: Any, *, show_module: bool = False) -> str:
    """Format type information for exception messages.

    Args:
        obj: Any Python object or type to extract type information from.
        show_module: Whether to include module name (e.g., "decimal.Decimal" vs "Decimal").

    Returns:
        Formatted type string like "<type: int>".

    Examples:
        >>> fmt_type(42)
        '<type: int>'
        >>> fmt_type(int)
        '<type: int>'
    """
    try:
        type_name = class_name(obj, fully_qualified=show_module)
    except AttributeError:
        type_name = str(obj if isinstance(obj, type) else type(obj))
    return f"<type: {type_name}>"


def fmt_value(x: Any, *, max_repr: int = 120, ellipsis: str = "...") -> str:
    """
    Format a single value as a type-value pair for exception and log messages.

    Handles broken __repr__ and extremely long representations gracefully.

    Examples:
        >>> fmt_value(42)
        '<int: 42>'
        >>> fmt_value("hello world", max_repr=8)
        "<str: 'hell'...>"
    """
    t = type(x).__name__
    try:
        base_repr = repr(x)
    except Exception as e:
        base_repr = f"<{t} object (repr failed: {type(e).__name__})>"

    base_repr = base_repr.replace(">", "\\>")
    return f"<{t}: {_fmt_truncate(base_repr, max_repr, ellipsis=ellipsis)}>"


def to_text(value: Any) -> str:
    """
    Convert a non-null scalar value to its culture-invariant textual form.

    Used by the query string and form builders for every non-null property value.

    Rules:
        - str is returned unchanged
        - bool renders as the lowercase literal "true" / "false"
        - int, float, Decimal, Fraction render via str() which never depends on locale
        - datetime, date and time render as ISO 8601 text
        - Enum members render their value
        - everything else falls back to str()

    Raises:
        TypeError: If value is None.

    Examples:
        >>> to_text(True)
        'true'
        >>> to_text(Decimal("1234.50"))
        '1234.50'
        >>> to_text(dt.date(2024, 1, 31))
        '2024-01-31'
    """
    if value is None:
        raise TypeError("to_text() requires a non-null value, nulls must be filtered by the caller")

    if isinstance(value, Enum):
        return to_text(value.value)
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, Decimal, Fraction)):
        return str(value)
    if isinstance(value, (dt.datetime, dt.date, dt.time)):
        return value.isoformat()
    return str(value)


# Private Methods ------------------------------------------------------------------------------------------------------

def _fmt_truncate(s: str, max_len: int, ellipsis: str = "...") -> str:
    """
    Truncate s to at most max_len visible characters before appending the ellipsis.

    Quoted reprs keep their quotes, the ellipsis goes outside the closing quote.
    """
    if max_len <= 0:
        return ""
    if len(s) <= max_len:
        return s

    if len(s) >= 2 and s[0] in ("'", '"') and s[-1] == s[0]:
        inner = s[1:1 + max(1, max_len - 4)]
        return f"{s[0]}{inner}{s[0]}{ellipsis}"

    return s[:max(1, max_len)] + ellipsis
