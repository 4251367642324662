"""
Objext exceptions hierarchy.
"""


class ObjextError(Exception):
    """Base exception for all objext errors."""


class InvalidArgumentError(ObjextError, ValueError):
    """An operation that requires a value received None or an unusable argument."""


class SerializationError(ObjextError, ValueError):
    """
    JSON serialization or deserialization failed.

    Wraps the underlying TypeError, ValueError or RecursionError raised by the
    json module so callers can catch a single error class.
    """
