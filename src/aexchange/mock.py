r"""In-memory transport replaying programmed responses.

Responses are registered per URL in a ``MockRegistry``. By default every
``MockTransport`` shares the process-wide registry, so tests running
concurrently must use distinct URLs.

Example:
    ```pycon
    >>> import asyncio
    >>> from aexchange import Client
    >>> from aexchange.core import ClientConfig
    >>> from aexchange.mock import MockResponse, MockTransport
    >>> transport = MockTransport({"https://mock.example.com/dogs": MockResponse.success(["a", "b"])})
    >>> client = Client(ClientConfig(transport=transport))
    >>> asyncio.run(client.get("https://mock.example.com/dogs", expecting=list[str]).run())
    ['a', 'b']

    ```
"""

from __future__ import annotations

__all__ = ["DEFAULT_REGISTRY", "MockRegistry", "MockResponse", "MockTransport"]

import asyncio
import logging
import threading
from typing import TYPE_CHECKING, Any

import httpx

from aexchange.coding import JsonEncoder
from aexchange.exceptions import TransportError, TransportErrorCode
from aexchange.transport import BaseTransport

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from aexchange.wire import WireRequest

logger: logging.Logger = logging.getLogger(__name__)


def _build_response(
    request: WireRequest,
    status_code: int,
    content: bytes,
    headers: Mapping[str, str] | None,
) -> httpx.Response:
    return httpx.Response(
        status_code,
        content=content,
        headers=headers,
        request=httpx.Request(
            request.method.value, request.url, headers=dict(request.headers), content=request.body
        ),
    )


class MockResponse:
    r"""A programmed reply to the requests sent to one URL.

    Args:
        result: Called with the received request. Returns the response
            or raises ``TransportError``.
        delay: Seconds to wait before replying.
        on_receive_request: Optional hook called with every received
            request before ``result``.

    Example:
        ```pycon
        >>> from aexchange.exceptions import TransportErrorCode
        >>> from aexchange.mock import MockResponse
        >>> ok = MockResponse.success({"name": "Rex"}, status_code=201)
        >>> down = MockResponse.failure(TransportErrorCode.CANNOT_CONNECT_TO_HOST)
        >>> flaky = MockResponse.sequence(MockResponse.success(None, status_code=500), ok)

        ```
    """

    def __init__(
        self,
        result: Callable[[WireRequest], httpx.Response],
        delay: float = 0.0,
        on_receive_request: Callable[[WireRequest], None] | None = None,
    ) -> None:
        if delay < 0:
            msg = f"delay must be non-negative, got {delay}"
            raise ValueError(msg)
        self.result = result
        self.delay = delay
        self.on_receive_request = on_receive_request

    async def respond(self, request: WireRequest) -> httpx.Response:
        """Reply to ``request``.

        Raises:
            TransportError: If the response is programmed as a failure.
        """
        if self.on_receive_request is not None:
            self.on_receive_request(request)
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        return self.result(request)

    @classmethod
    def success(
        cls,
        data: Any = b"",
        status_code: int = 200,
        headers: Mapping[str, str] | None = None,
        delay: float = 0.0,
        on_receive_request: Callable[[WireRequest], None] | None = None,
    ) -> MockResponse:
        """Create a response returning ``data`` with ``status_code``.

        ``bytes`` and ``str`` are sent as they are. Any other value is
        encoded as JSON and sent with a JSON content type.

        Note that "success" only means a response is produced: the
        status code is free and validators still decide whether the
        response is acceptable.
        """
        headers = dict(headers or {})
        if isinstance(data, str):
            content = data.encode("utf-8")
        elif isinstance(data, bytes):
            content = data
        else:
            encoder = JsonEncoder()
            content = encoder.encode(data)
            headers.setdefault("Content-Type", encoder.content_type)

        def result(request: WireRequest) -> httpx.Response:
            return _build_response(request, status_code, content, headers)

        return cls(result, delay=delay, on_receive_request=on_receive_request)

    @classmethod
    def failure(
        cls,
        code: TransportErrorCode,
        delay: float = 0.0,
        on_receive_request: Callable[[WireRequest], None] | None = None,
    ) -> MockResponse:
        """Create a response failing with a ``TransportError``."""

        def result(request: WireRequest) -> httpx.Response:
            raise TransportError(code, url=request.url)

        return cls(result, delay=delay, on_receive_request=on_receive_request)

    @classmethod
    def sequence(
        cls,
        *responses: MockResponse,
        on_receive_request: Callable[[WireRequest], None] | None = None,
    ) -> MockResponse:
        """Create a response replaying ``responses`` one after the other.

        Once the series is exhausted its last entry is repeated.
        """
        if not responses:
            msg = "sequence requires at least one response"
            raise ValueError(msg)
        return _MockSequence(responses, on_receive_request=on_receive_request)


class _MockSequence(MockResponse):
    def __init__(
        self,
        responses: tuple[MockResponse, ...],
        on_receive_request: Callable[[WireRequest], None] | None = None,
    ) -> None:
        super().__init__(self._unreachable, on_receive_request=on_receive_request)
        self.responses = responses
        self._index = 0
        self._lock = threading.Lock()

    @staticmethod
    def _unreachable(request: WireRequest) -> httpx.Response:
        msg = f"sequence for {request.url} has no direct result"
        raise RuntimeError(msg)

    async def respond(self, request: WireRequest) -> httpx.Response:
        if self.on_receive_request is not None:
            self.on_receive_request(request)
        with self._lock:
            response = self.responses[min(self._index, len(self.responses) - 1)]
            self._index += 1
        return await response.respond(request)


class MockRegistry:
    r"""Registry mapping URLs to programmed responses.

    A request is looked up by its full URL first, then by its URL
    without the query string.

    Example:
        ```pycon
        >>> from aexchange.mock import MockRegistry, MockResponse
        >>> registry = MockRegistry()
        >>> registry.register("https://mock.example.com/dogs", MockResponse.success([]))
        >>> "https://mock.example.com/dogs" in registry
        True
        >>> registry.lookup("https://mock.example.com/cats")
        Traceback (most recent call last):
        ...
        LookupError: no mock response registered for https://mock.example.com/cats

        ```
    """

    def __init__(self) -> None:
        self._responses: dict[str, MockResponse] = {}
        self._lock = threading.Lock()

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._responses

    def __len__(self) -> int:
        with self._lock:
            return len(self._responses)

    def register(self, url: str, response: MockResponse) -> None:
        """Register ``response`` for ``url``, replacing any previous one."""
        with self._lock:
            self._responses[str(url)] = response

    def unregister(self, url: str) -> None:
        """Remove the response registered for ``url``, if any."""
        with self._lock:
            self._responses.pop(str(url), None)

    def clear(self) -> None:
        with self._lock:
            self._responses.clear()

    def lookup(self, url: str) -> MockResponse:
        """Return the response registered for ``url``.

        Raises:
            LookupError: If no response is registered for ``url``.
        """
        with self._lock:
            response = self._responses.get(url)
            if response is None:
                response = self._responses.get(url.split("?", 1)[0])
        if response is None:
            msg = f"no mock response registered for {url}"
            raise LookupError(msg)
        return response


DEFAULT_REGISTRY = MockRegistry()


class MockTransport(BaseTransport):
    r"""Transport answering requests from a ``MockRegistry``.

    Args:
        responses: Optional responses to register, keyed by URL.
        registry: The registry to use. Defaults to the process-wide
            ``DEFAULT_REGISTRY``.

    Attributes:
        requests: The requests received by this transport, in order.
    """

    def __init__(
        self,
        responses: Mapping[str, MockResponse] | None = None,
        registry: MockRegistry | None = None,
    ) -> None:
        self.registry = registry if registry is not None else DEFAULT_REGISTRY
        self.requests: list[WireRequest] = []
        for url, response in (responses or {}).items():
            self.registry.register(url, response)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(registered={len(self.registry)})"

    def register(self, url: str, response: MockResponse) -> None:
        """Register ``response`` for ``url`` in the transport registry."""
        self.registry.register(url, response)

    async def send(self, request: WireRequest) -> httpx.Response:
        response = self.registry.lookup(request.url)
        self.requests.append(request)
        logger.debug(f"Mock received {request.method} request to {request.url}")
        return await response.respond(request)
