"""
HTTP request bodies built from objects: form-encoded and JSON content.

HttpContent is a small body + headers container that hands itself over to httpx
through HttpContent.to_request() or by passing content/headers to any httpx client call.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import logging

from dataclasses import dataclass, field
from typing import Any, Iterable
from urllib.parse import urlencode

# Third-party ----------------------------------------------------------------------------------------------------------
import httpx

# Local ----------------------------------------------------------------------------------------------------------------
from .abc import iter_members
from .exceptions import InvalidArgumentError, SerializationError
from .json import serialize
from .tools import fmt_type, to_text
from .utils import class_name

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"
MEDIA_TYPE_JSON = "application/json"
MEDIA_TYPE_FORM = "application/x-www-form-urlencoded"


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass
class HttpContent:
    """
    HTTP request body with its content headers.

    Attributes:
        content: Raw body bytes.
        headers: Content headers, always carrying Content-Type.

    Examples:
        >>> body = HttpContent.from_text('{"a": 1}', MEDIA_TYPE_JSON)
        >>> body.content_type
        'application/json; charset=utf-8'
        >>> request = body.to_request("POST", "https://api.example.com/items")
    """
    content: bytes = b""
    headers: httpx.Headers = field(default_factory=httpx.Headers)

    @classmethod
    def from_bytes(cls, data: bytes, media_type: str) -> "HttpContent":
        """Body from raw bytes, Content-Type without charset."""
        return cls(content=bytes(data), headers=httpx.Headers({"Content-Type": media_type}))

    @classmethod
    def from_text(cls, text: str, media_type: str, encoding: str = "utf-8") -> "HttpContent":
        """Body from text, Content-Type carrying the charset used for encoding."""
        return cls(content=text.encode(encoding),
                   headers=httpx.Headers({"Content-Type": f"{media_type}; charset={encoding}"}))

    @classmethod
    def from_form(cls, pairs: Iterable[tuple[str, str]]) -> "HttpContent":
        """
        application/x-www-form-urlencoded body from name/value pairs.

        Names and values are encoded here, spaces become '+'.
        """
        body = urlencode(list(pairs))
        return cls(content=body.encode("ascii"), headers=httpx.Headers({"Content-Type": MEDIA_TYPE_FORM}))

    @property
    def content_type(self) -> str | None:
        return self.headers.get("Content-Type")

    @property
    def charset(self) -> str | None:
        """Charset parameter of Content-Type, None if absent."""
        for param in (self.content_type or "").split(";")[1:]:
            key, _, value = param.strip().partition("=")
            if key.lower() == "charset" and value:
                return value.strip('"')
        return None

    @property
    def text(self) -> str:
        """Body decoded with the declared charset, UTF-8 by default."""
        return self.content.decode(self.charset or "utf-8")

    def with_header(self, name: str, value: str) -> "HttpContent":
        """Return a copy with one extra header, the original is left unchanged."""
        if not isinstance(name, str) or not isinstance(value, str):
            raise TypeError(f"header name and value must be str, but found {fmt_type(name)} and {fmt_type(value)}")
        headers = httpx.Headers(self.headers)
        headers[name] = value
        return HttpContent(content=self.content, headers=headers)

    def to_request(self, method: str, url: str | httpx.URL, **kwargs) -> httpx.Request:
        """
        Build an httpx.Request carrying this body and its headers.

        Extra keyword arguments go to httpx.Request (params, cookies, extensions).
        """
        headers = httpx.Headers(self.headers)
        headers.update(kwargs.pop("headers", None) or {})
        return httpx.Request(method, url, content=self.content, headers=headers, **kwargs)


# Methods --------------------------------------------------------------------------------------------------------------

def to_form_pairs(obj: Any) -> list[tuple[str, str]]:
    """
    Convert the public members of an object to form name/value pairs.

    Rename annotations apply to names, None values are skipped and values are
    stringified with to_text(). Nothing is percent-encoded here.

    Raises:
        InvalidArgumentError: If obj is None.

    Examples:
        >>> to_form_pairs({"Name": "Test", "Value": 123, "Note": None})
        [('Name', 'Test'), ('Value', '123')]
    """
    if obj is None:
        raise InvalidArgumentError("obj must not be None")

    return [(name, to_text(value)) for name, value in iter_members(obj) if value is not None]


def to_form_url_encoded_content(obj: Any) -> HttpContent:
    """
    Convert an object to an application/x-www-form-urlencoded HttpContent.

    Raises:
        InvalidArgumentError: If obj is None.

    Examples:
        >>> to_form_url_encoded_content({"IsActive": True, "IsDeleted": False}).text
        'IsActive=true&IsDeleted=false'
    """
    return HttpContent.from_form(to_form_pairs(obj))


def to_http_content(obj: Any) -> HttpContent:
    """
    Serialize an object to an application/json HttpContent.

    None produces an empty body that still carries the JSON Content-Type.

    Raises:
        SerializationError: If obj cannot be serialized.
    """
    if obj is None:
        return HttpContent.from_bytes(b"", MEDIA_TYPE_JSON)
    return HttpContent.from_bytes(serialize(obj).encode("utf-8"), MEDIA_TYPE_JSON)


def to_http_content_and_string(obj: Any) -> tuple[HttpContent, str]:
    """
    Serialize an object to JSON and return both the HttpContent and the JSON text.

    None produces empty content and an empty string.
    """
    text = serialize(obj) if obj is not None else ""
    return HttpContent.from_text(text, MEDIA_TYPE_JSON), text


def to_http_content_with_key(obj: Any, api_key: str) -> HttpContent:
    """to_http_content() plus the 'x-api-key' header."""
    if not isinstance(api_key, str):
        raise TypeError(f"api_key must be a str, but found {fmt_type(api_key)}")
    return to_http_content(obj).with_header(API_KEY_HEADER, api_key)


def try_to_http_content(obj: Any, logger: logging.Logger | None = None) -> HttpContent | None:
    """
    to_http_content() that logs any failure and returns None instead of raising.

    Args:
        obj: Object to serialize.
        logger: Logger receiving the error, the module logger if None.
    """
    try:
        return to_http_content(obj)
    except Exception as e:
        _log_failure(e, obj, logger)
    return None


def try_to_http_content_and_string(obj: Any,
                                   logger: logging.Logger | None = None,
                                   ) -> tuple[HttpContent | None, str | None]:
    """to_http_content_and_string() that logs any failure and returns (None, None)."""
    try:
        return to_http_content_and_string(obj)
    except Exception as e:
        _log_failure(e, obj, logger)
    return None, None


def try_to_http_content_with_key(obj: Any, api_key: str, logger: logging.Logger | None = None) -> HttpContent | None:
    """to_http_content_with_key() that logs any failure and returns None."""
    try:
        return to_http_content_with_key(obj, api_key)
    except Exception as e:
        _log_failure(e, obj, logger)
    return None


# Private Methods ------------------------------------------------------------------------------------------------------

def _log_failure(exc: Exception, obj: Any, log: logging.Logger | None) -> None:
    log = log or logger
    if isinstance(exc, SerializationError):
        log.error("Failed to serialize object to HttpContent for type (%s)", class_name(obj), exc_info=exc)
    else:
        log.error("An error occurred while converting object to HttpContent for type (%s): %s",
                  class_name(obj), exc, exc_info=exc)
