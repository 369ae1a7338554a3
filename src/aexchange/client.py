r"""Client building requests with shared configuration.

A ``Client`` holds the encoder, decoder, transport, chains and
callbacks shared by the requests it builds. The requests copy the
client chains, so extending a request never changes the client.
"""

from __future__ import annotations

__all__ = ["Client"]

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from aexchange.coding import encode_body
from aexchange.core.config import ClientConfig
from aexchange.method import HttpMethod
from aexchange.request import Request
from aexchange.transport import HttpxTransport
from aexchange.wire import WireRequest

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType
    from typing import Self

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


class Client:
    r"""Factory of ``Request`` objects sharing one configuration.

    Args:
        config: Optional configuration. If ``None``, a default
            ``ClientConfig`` is used: JSON coding, an ``HttpxTransport``
            and empty chains.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aexchange import Client
        >>> from aexchange.core import ClientConfig
        >>> from aexchange.mock import MockResponse, MockTransport
        >>> from aexchange.retriers import RetryStrategy
        >>> from aexchange.validators import StatusCodeValidator
        >>> transport = MockTransport({"https://mock.example.com/pets": MockResponse.success({"id": 1})})
        >>> config = ClientConfig(
        ...     transport=transport,
        ...     validators=[StatusCodeValidator(range(200, 300))],
        ...     retriers=[RetryStrategy()],
        ... )
        >>> async def main():
        ...     async with Client(config) as client:
        ...         return await client.post(
        ...             "https://mock.example.com/pets", {"name": "Rex"}, expecting=dict
        ...         ).run()
        ...
        >>> asyncio.run(main())
        {'id': 1}

        ```
    """

    def __init__(self, config: ClientConfig | None = None) -> None:
        self.config = config if config is not None else ClientConfig()
        self.transport = (
            self.config.transport
            if self.config.transport is not None
            else HttpxTransport(timeout=self.config.timeout)
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(transport={self.transport!r})"

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the transport of the client."""
        await self.transport.aclose()

    def request(
        self,
        method: HttpMethod | str,
        url: str,
        body: Any = None,
        *,
        expecting: type[T] = bytes,  # type: ignore[assignment]
        headers: Mapping[str, str] | None = None,
    ) -> Request[T]:
        r"""Build a request.

        Args:
            method: The HTTP method.
            url: The absolute URL of the request.
            body: Optional body, encoded with the client encoder. The
                encoder content type is sent as ``Content-Type`` unless
                ``headers`` already sets one.
            expecting: The type the response body is decoded into.
            headers: Optional header fields of the original request.

        Returns:
            The request, with copies of the client chains and callbacks.

        Raises:
            TypeError: If the body cannot be encoded.
        """
        method = HttpMethod.coerce(method)
        assert body is None or method != HttpMethod.GET, "GET requests cannot carry a body"  # noqa: S101
        wire = WireRequest(url=url, method=method, headers=headers or {})
        if body is not None:
            encoder = self.config.encoder
            wire = wire.with_body(encode_body(encoder, body))
            has_content_type = any(name.lower() == "content-type" for name in wire.headers)
            if encoder.content_type is not None and not has_content_type:
                wire = wire.with_header("Content-Type", encoder.content_type)
        logger.debug(f"Built {method} request to {url} expecting {expecting!r}")
        return Request(
            wire,
            self.transport,
            expecting=expecting,
            decoder=self.config.decoder,
            adaptors=self.config.adaptors,
            validators=self.config.validators,
            retriers=self.config.retriers,
            **self.config.callbacks(),
        )

    def get(
        self, url: str, *, expecting: type[T] = bytes, headers: Mapping[str, str] | None = None  # type: ignore[assignment]
    ) -> Request[T]:
        return self.request(HttpMethod.GET, url, expecting=expecting, headers=headers)

    def head(
        self, url: str, *, expecting: type[T] = bytes, headers: Mapping[str, str] | None = None  # type: ignore[assignment]
    ) -> Request[T]:
        return self.request(HttpMethod.HEAD, url, expecting=expecting, headers=headers)

    def options(
        self, url: str, *, expecting: type[T] = bytes, headers: Mapping[str, str] | None = None  # type: ignore[assignment]
    ) -> Request[T]:
        return self.request(HttpMethod.OPTIONS, url, expecting=expecting, headers=headers)

    def delete(
        self,
        url: str,
        body: Any = None,
        *,
        expecting: type[T] = bytes,  # type: ignore[assignment]
        headers: Mapping[str, str] | None = None,
    ) -> Request[T]:
        return self.request(HttpMethod.DELETE, url, body, expecting=expecting, headers=headers)

    def post(
        self,
        url: str,
        body: Any = None,
        *,
        expecting: type[T] = bytes,  # type: ignore[assignment]
        headers: Mapping[str, str] | None = None,
    ) -> Request[T]:
        return self.request(HttpMethod.POST, url, body, expecting=expecting, headers=headers)

    def put(
        self,
        url: str,
        body: Any = None,
        *,
        expecting: type[T] = bytes,  # type: ignore[assignment]
        headers: Mapping[str, str] | None = None,
    ) -> Request[T]:
        return self.request(HttpMethod.PUT, url, body, expecting=expecting, headers=headers)

    def patch(
        self,
        url: str,
        body: Any = None,
        *,
        expecting: type[T] = bytes,  # type: ignore[assignment]
        headers: Mapping[str, str] | None = None,
    ) -> Request[T]:
        return self.request(HttpMethod.PATCH, url, body, expecting=expecting, headers=headers)
