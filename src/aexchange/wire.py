r"""Immutable description of an outgoing HTTP request."""

from __future__ import annotations

__all__ = ["WireRequest"]

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING

from aexchange.method import HttpMethod

if TYPE_CHECKING:
    from collections.abc import Mapping

    import httpx


@dataclass(frozen=True)
class WireRequest:
    """The wire-level request handed to adaptors and transports.

    Instances are never mutated. Adaptors derive new requests with the
    ``with_*`` helpers, so the request seen by one adaptor is never
    changed behind its back by another.

    Header names are kept exactly as they were stored. Merging headers
    with ``with_headers`` is last-write-wins.

    Args:
        url: The absolute URL of the request.
        method: The HTTP method.
        headers: The header fields.
        body: The optional body bytes.

    Example:
        ```pycon
        >>> from aexchange import HttpMethod, WireRequest
        >>> request = WireRequest(url="https://api.example.com/dogs", method=HttpMethod.GET)
        >>> adapted = request.with_header("Accept", "application/json")
        >>> dict(request.headers)
        {}
        >>> dict(adapted.headers)
        {'Accept': 'application/json'}

        ```
    """

    url: str
    method: HttpMethod = HttpMethod.GET
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "url", str(self.url))
        object.__setattr__(self, "method", HttpMethod.coerce(self.method))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    def __hash__(self) -> int:
        return hash((self.url, self.method, tuple(self.headers.items()), self.body))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WireRequest):
            return NotImplemented
        return (
            self.url == other.url
            and self.method == other.method
            and dict(self.headers) == dict(other.headers)
            and self.body == other.body
        )

    def with_url(self, url: str) -> WireRequest:
        """Return a copy of the request sent to ``url``."""
        return replace(self, url=str(url))

    def with_method(self, method: HttpMethod | str) -> WireRequest:
        """Return a copy of the request using ``method``."""
        return replace(self, method=HttpMethod.coerce(method))

    def with_headers(self, headers: Mapping[str, str]) -> WireRequest:
        """Return a copy of the request with ``headers`` merged in.

        Existing fields are overwritten by the new values.
        """
        return replace(self, headers={**self.headers, **headers})

    def with_header(self, name: str, value: str) -> WireRequest:
        """Return a copy of the request with a single header set."""
        return self.with_headers({name: value})

    def without_header(self, name: str) -> WireRequest:
        """Return a copy of the request without the header ``name``."""
        return replace(self, headers={k: v for k, v in self.headers.items() if k != name})

    def with_body(self, body: bytes | None) -> WireRequest:
        """Return a copy of the request carrying ``body``."""
        return replace(self, body=body)

    def to_httpx(self, client: httpx.AsyncClient) -> httpx.Request:
        """Build the ``httpx.Request`` used by the live transport.

        Args:
            client: The client whose defaults (timeout, base headers)
                apply to the built request.

        Returns:
            The request ready to be sent with ``client.send``.
        """
        return client.build_request(
            method=self.method.value,
            url=self.url,
            headers=dict(self.headers),
            content=self.body,
        )
