from __future__ import annotations

import httpx
import pytest

from aexchange import HttpMethod, WireRequest

#################################
#     Tests for WireRequest     #
#################################


def test_wire_request_defaults() -> None:
    """Test the default values of a wire request."""
    request = WireRequest("https://api.example.com/dogs")
    assert request.method == HttpMethod.GET
    assert dict(request.headers) == {}
    assert request.body is None


def test_wire_request_coerces_method() -> None:
    """Test that a string method is converted into an HttpMethod."""
    assert WireRequest("https://api.example.com", "post").method == HttpMethod.POST


def test_wire_request_headers_read_only() -> None:
    """Test that the headers of a request cannot be mutated."""
    request = WireRequest("https://api.example.com", headers={"Accept": "text/plain"})
    with pytest.raises(TypeError):
        request.headers["Accept"] = "application/json"  # type: ignore[index]


def test_wire_request_headers_copied() -> None:
    """Test that mutating the original mapping does not change the
    request."""
    headers = {"Accept": "text/plain"}
    request = WireRequest("https://api.example.com", headers=headers)
    headers["Accept"] = "application/json"
    assert request.headers["Accept"] == "text/plain"


def test_wire_request_headers_case_sensitive() -> None:
    """Test that header names are stored as given."""
    request = WireRequest("https://api.example.com", headers={"accept": "a", "Accept": "b"})
    assert dict(request.headers) == {"accept": "a", "Accept": "b"}


def test_wire_request_equality() -> None:
    """Test that requests with the same fields are equal and hash the
    same."""
    first = WireRequest("https://api.example.com", "get", {"X-Id": "1"}, b"body")
    second = WireRequest("https://api.example.com", HttpMethod.GET, {"X-Id": "1"}, b"body")
    assert first == second
    assert hash(first) == hash(second)
    assert first != first.with_body(None)


def test_wire_request_with_url() -> None:
    """Test that with_url returns a new request."""
    request = WireRequest("https://api.example.com/dogs")
    assert request.with_url("https://api.example.com/cats").url == "https://api.example.com/cats"
    assert request.url == "https://api.example.com/dogs"


def test_wire_request_with_method() -> None:
    """Test that with_method returns a new request."""
    request = WireRequest("https://api.example.com")
    assert request.with_method("put").method == HttpMethod.PUT
    assert request.method == HttpMethod.GET


def test_wire_request_with_headers_last_write_wins() -> None:
    """Test that with_headers overwrites existing fields."""
    request = WireRequest("https://api.example.com", headers={"Accept": "text/plain", "X-Id": "1"})
    adapted = request.with_headers({"Accept": "application/json"})
    assert dict(adapted.headers) == {"Accept": "application/json", "X-Id": "1"}
    assert dict(request.headers) == {"Accept": "text/plain", "X-Id": "1"}


def test_wire_request_with_header() -> None:
    """Test that with_header sets a single field."""
    request = WireRequest("https://api.example.com").with_header("X-Id", "1")
    assert dict(request.headers) == {"X-Id": "1"}


def test_wire_request_without_header() -> None:
    """Test that without_header removes a single field."""
    request = WireRequest("https://api.example.com", headers={"X-Id": "1", "Accept": "*/*"})
    assert dict(request.without_header("X-Id").headers) == {"Accept": "*/*"}
    assert dict(request.without_header("Missing").headers) == {"X-Id": "1", "Accept": "*/*"}


def test_wire_request_with_body() -> None:
    """Test that with_body returns a new request."""
    request = WireRequest("https://api.example.com", HttpMethod.POST)
    assert request.with_body(b"{}").body == b"{}"
    assert request.body is None


def test_wire_request_to_httpx() -> None:
    """Test converting a wire request into an httpx request."""
    request = WireRequest(
        "https://api.example.com/dogs?page=1", HttpMethod.POST, {"X-Id": "1"}, b'{"name":"Rex"}'
    )
    client = httpx.AsyncClient()
    built = request.to_httpx(client)
    assert built.method == "POST"
    assert str(built.url) == "https://api.example.com/dogs?page=1"
    assert built.headers["X-Id"] == "1"
    assert built.content == b'{"name":"Rex"}'
