r"""Transports sending wire requests and returning fully read responses.

The transport is the only component of the pipeline that talks to the
network. Every failure to produce a response is reported as a
``TransportError`` carrying a stable ``TransportErrorCode``.
"""

from __future__ import annotations

__all__ = ["BaseTransport", "HttpxTransport", "map_httpx_error"]

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import httpx

from aexchange.core.config import DEFAULT_TIMEOUT
from aexchange.core.validation import validate_timeout
from aexchange.exceptions import TransportError, TransportErrorCode

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self

    from aexchange.wire import WireRequest

logger: logging.Logger = logging.getLogger(__name__)

# Checked in order, the first matching type wins. Subclasses come before
# their bases (ConnectTimeout is both a TimeoutException and a
# TransportError, ProxyError is a TransportError).
_HTTPX_ERROR_CODES: tuple[tuple[type[Exception], TransportErrorCode], ...] = (
    (httpx.TimeoutException, TransportErrorCode.TIMED_OUT),
    (httpx.ProxyError, TransportErrorCode.PROXY_ERROR),
    (httpx.ConnectError, TransportErrorCode.CANNOT_CONNECT_TO_HOST),
    (httpx.ReadError, TransportErrorCode.NETWORK_CONNECTION_LOST),
    (httpx.WriteError, TransportErrorCode.NETWORK_CONNECTION_LOST),
    (httpx.CloseError, TransportErrorCode.NETWORK_CONNECTION_LOST),
    (httpx.RemoteProtocolError, TransportErrorCode.BAD_SERVER_RESPONSE),
    (httpx.UnsupportedProtocol, TransportErrorCode.UNSUPPORTED_URL),
    (httpx.DecodingError, TransportErrorCode.CANNOT_DECODE_CONTENT_DATA),
    (httpx.TooManyRedirects, TransportErrorCode.TOO_MANY_REDIRECTS),
    (httpx.InvalidURL, TransportErrorCode.BAD_URL),
)

_DNS_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "name resolution",
    "getaddrinfo failed",
)

_CERTIFICATE_MARKERS = ("certificate_verify_failed", "certificate verify failed")


def map_httpx_error(exc: Exception, url: str | None = None) -> TransportError:
    r"""Convert an httpx exception into a ``TransportError``.

    Args:
        exc: The exception raised by httpx.
        url: The URL that was requested.

    Returns:
        The equivalent ``TransportError``. Exceptions without a known
        equivalent are reported as ``UNKNOWN``.

    Example:
        ```pycon
        >>> import httpx
        >>> from aexchange.transport import map_httpx_error
        >>> map_httpx_error(httpx.ReadTimeout("slow")).code
        <TransportErrorCode.TIMED_OUT: 'timed_out'>

        ```
    """
    code = TransportErrorCode.UNKNOWN
    for exc_type, candidate in _HTTPX_ERROR_CODES:
        if isinstance(exc, exc_type):
            code = candidate
            break
    if code is TransportErrorCode.CANNOT_CONNECT_TO_HOST:
        message = str(exc).lower()
        if any(marker in message for marker in _DNS_MARKERS):
            code = TransportErrorCode.DNS_LOOKUP_FAILED
        elif any(marker in message for marker in _CERTIFICATE_MARKERS):
            code = TransportErrorCode.SERVER_CERTIFICATE_UNTRUSTED
    return TransportError(code, f"{type(exc).__name__}: {exc}", url=url, cause=exc)


class BaseTransport(ABC):
    """Sends a ``WireRequest`` and returns the response.

    Implementations return an ``httpx.Response`` whose body is fully
    read, and raise ``TransportError`` when no response was produced.
    """

    @abstractmethod
    async def send(self, request: WireRequest) -> httpx.Response:
        """Send ``request`` and return the fully read response.

        Raises:
            TransportError: If no response could be obtained.
        """

    async def aclose(self) -> None:
        """Release the resources held by the transport."""

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()


class HttpxTransport(BaseTransport):
    r"""Live transport backed by ``httpx.AsyncClient``.

    Args:
        client: Optional client to send requests with. The transport
            never closes a client it did not create.
        timeout: Timeout in seconds of the client created when
            ``client`` is ``None``. Must be > 0.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aexchange import HttpMethod, WireRequest
        >>> from aexchange.transport import HttpxTransport
        >>> async def main():  # doctest: +SKIP
        ...     async with HttpxTransport(timeout=30.0) as transport:
        ...         request = WireRequest("https://api.example.com/dogs", HttpMethod.GET)
        ...         return await transport.send(request)
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float | httpx.Timeout = DEFAULT_TIMEOUT,
    ) -> None:
        validate_timeout(timeout)
        self._owns_client = client is None
        self.client = client if client is not None else httpx.AsyncClient(timeout=timeout)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(owns_client={self._owns_client})"

    async def send(self, request: WireRequest) -> httpx.Response:
        logger.debug(f"Sending {request.method} request to {request.url}")
        try:
            response = await self.client.send(request.to_httpx(self.client))
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            error = map_httpx_error(exc, url=request.url)
            logger.debug(f"{request.method} request to {request.url} failed: {error.code.value}")
            raise error from exc
        logger.debug(
            f"{request.method} request to {request.url} returned status {response.status_code}"
        )
        return response

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
