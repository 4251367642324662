#
# Objext - HTTP Content Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import logging
from dataclasses import dataclass

# Third-party ----------------------------------------------------------------------------------------------------------
import httpx
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from objext.exceptions import InvalidArgumentError
from objext.http import (API_KEY_HEADER, HttpContent, to_form_pairs, to_form_url_encoded_content,
                         to_http_content, to_http_content_and_string, to_http_content_with_key,
                         try_to_http_content, try_to_http_content_and_string, try_to_http_content_with_key)
from objext.json import deserialize, serialize


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass
class Scalars:
    Name: str = "x"
    Count: int = 3
    Ratio: float = 0.25
    Active: bool = True
    Missing: str | None = None


@dataclass
class Node:
    name: str = "loop"
    child: "Node | None" = None


@dataclass
class Blank:
    pass


class Exploding:
    @property
    def value(self) -> int:
        raise RuntimeError("getter exploded")


def _cyclic() -> Node:
    node = Node()
    node.child = node
    return node


# Tests ----------------------------------------------------------------------------------------------------------------

class TestFormPairs:

    def test_none_rejected(self):
        """Raise InvalidArgumentError, a ValueError, for None."""
        with pytest.raises(InvalidArgumentError):
            to_form_pairs(None)
        with pytest.raises(ValueError):
            to_form_url_encoded_content(None)

    def test_rename_and_nulls(self, user):
        """Use rename annotations and skip None values."""
        pairs = dict(to_form_pairs(user))
        assert pairs["firstName"] == "Ann"
        assert "FirstName" not in pairs

        user.FirstName = None
        assert "firstName" not in dict(to_form_pairs(user))

    def test_not_percent_encoded(self):
        """Leave encoding to the content container."""
        assert to_form_pairs({"q": "a b&c"}) == [("q", "a b&c")]

    def test_invariant_values(self, user):
        """Stringify values with the scalar rules."""
        pairs = dict(to_form_pairs(user))
        assert pairs["BirthDate"] == "1990-05-17T08:30:00"
        assert pairs["IsActive"] == "true"
        assert pairs["Salary"] == "1234.50"


class TestFormUrlEncodedContent:

    def test_name_value(self):
        """Encode simple name/value pairs."""
        content = to_form_url_encoded_content({"Name": "Test", "Value": 123})
        assert "Name=Test" in content.text
        assert "Value=123" in content.text
        assert content.content_type == "application/x-www-form-urlencoded"

    def test_empty(self):
        """Produce an empty body for an object without members."""
        assert to_form_url_encoded_content({}).content == b""

    def test_bools(self, flags):
        """Render booleans as lowercase literals in declaration order."""
        assert to_form_url_encoded_content(flags).text == "IsActive=true&IsDeleted=false&Count=3&Ratio=1.5"

    def test_container_encodes(self):
        """Encode reserved characters and spaces as '+'."""
        assert to_form_url_encoded_content({"q": "a b&c"}).text == "q=a+b%26c"


class TestJsonContent:

    def test_none(self):
        """Produce an empty JSON body for None."""
        content = to_http_content(None)
        assert content.content == b""
        assert content.content_type == "application/json"

    def test_object_without_members(self):
        """Produce an empty JSON object for an object without members."""
        content = to_http_content(Blank())
        assert content.content == b"{}"
        assert try_to_http_content(Blank()).content == b"{}"

    def test_round_trip(self):
        """Reproduce scalar values through deserialize()."""
        content = to_http_content(Scalars())
        assert content.content_type == "application/json"
        assert deserialize(content.text) == {"Name": "x", "Count": 3, "Ratio": 0.25, "Active": True, "Missing": None}

    def test_rename(self, user):
        """Serialize rename annotations as JSON keys."""
        data = deserialize(to_http_content(user).text)
        assert data["firstName"] == "Ann"
        assert data["Address"]["line2"] is None

    def test_content_and_string(self):
        """Return the content together with the JSON text."""
        content, text = to_http_content_and_string(Scalars())
        assert text == serialize(Scalars())
        assert content.text == text
        assert content.content_type == "application/json; charset=utf-8"

    def test_content_and_string_none(self):
        """Return empty content and an empty string for None."""
        content, text = to_http_content_and_string(None)
        assert text == ""
        assert content.content == b""

    def test_with_key(self):
        """Add the x-api-key header."""
        content = to_http_content_with_key(Scalars(), "secret")
        assert content.headers[API_KEY_HEADER] == "secret"
        assert content.content_type == "application/json"

    def test_with_key_type(self):
        """Reject non-str api keys."""
        with pytest.raises(TypeError, match=r"(?i)api_key must be a str"):
            to_http_content_with_key(Scalars(), 123)


class TestTryJsonContent:

    def test_success(self):
        """Return content when serialization succeeds."""
        assert try_to_http_content(Scalars()).content_type == "application/json"

    def test_serialization_failure_logged(self, caplog):
        """Log serialization failures with the type name and return None."""
        with caplog.at_level(logging.ERROR, logger="objext.http"):
            assert try_to_http_content(_cyclic()) is None
        assert "Failed to serialize object to HttpContent for type (Node)" in caplog.text

    def test_other_failure_logged(self, caplog):
        """Log any other failure with its message and return None."""
        with caplog.at_level(logging.ERROR, logger="objext.http"):
            assert try_to_http_content(Exploding()) is None
        assert "An error occurred while converting object to HttpContent for type (Exploding)" in caplog.text
        assert "getter exploded" in caplog.text

    def test_custom_logger(self, caplog):
        """Log through the given logger."""
        custom = logging.getLogger("objext.tests.custom")
        with caplog.at_level(logging.ERROR, logger="objext.tests.custom"):
            try_to_http_content(_cyclic(), logger=custom)
        assert [r.name for r in caplog.records] == ["objext.tests.custom"]

    def test_and_string_failure(self, caplog):
        """Return (None, None) on failure."""
        with caplog.at_level(logging.ERROR, logger="objext.http"):
            assert try_to_http_content_and_string(_cyclic()) == (None, None)
        assert caplog.records

    def test_with_key(self, caplog):
        """Return keyed content or None on failure."""
        content = try_to_http_content_with_key(Scalars(), "k")
        assert content.headers[API_KEY_HEADER] == "k"
        with caplog.at_level(logging.ERROR, logger="objext.http"):
            assert try_to_http_content_with_key(_cyclic(), "k") is None


class TestHttpContent:

    def test_from_text_charset(self):
        """Declare and decode with the charset."""
        content = HttpContent.from_text("é", "text/plain", encoding="latin-1")
        assert content.content == b"\xe9"
        assert content.charset == "latin-1"
        assert content.text == "é"

    def test_charset_absent(self):
        """Report no charset for raw bytes content."""
        assert HttpContent.from_bytes(b"{}", "application/json").charset is None

    def test_with_header_copies(self):
        """Leave the original headers untouched."""
        original = HttpContent.from_bytes(b"{}", "application/json")
        keyed = original.with_header("X-Trace", "1")
        assert keyed.headers["x-trace"] == "1"
        assert "x-trace" not in original.headers

    def test_to_request(self):
        """Build an httpx.Request carrying body and headers."""
        content = to_form_url_encoded_content({"a": 1})
        request = content.to_request("POST", "https://api.example.com/items", headers={"Accept": "text/plain"})
        assert isinstance(request, httpx.Request)
        assert request.method == "POST"
        assert request.content == b"a=1"
        assert request.headers["content-type"] == "application/x-www-form-urlencoded"
        assert request.headers["accept"] == "text/plain"
