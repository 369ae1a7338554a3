r"""aexchange - Composable asynchronous HTTP request pipeline.

A request goes through a chain of adaptors that rewrite it, a transport
that sends it, a chain of validators that accept or reject the response,
a decoder that turns the body into a typed value, and a chain of
retriers consulted whenever any of these steps fails.

Key Features:
    - Adaptors for headers (with collision strategies) and query items
    - Status code validation
    - Exponential backoff retries with jitter, restricted to idempotent
      methods and transient failures
    - Cooperative cancellation checked before every chain member
    - Typed decoding of JSON bodies with pydantic
    - Pluggable transports: httpx for the network, a mock for tests
    - Callbacks and structured logging for observability

Example:
    ```pycon
    >>> from aexchange import Client
    >>> from aexchange.core import ClientConfig
    >>> from aexchange.retriers import RetryStrategy
    >>> async def list_dogs():  # doctest: +SKIP
    ...     async with Client(ClientConfig(retriers=[RetryStrategy()])) as client:
    ...         return await (
    ...             client.get("https://api.example.com/dogs", expecting=list[str])
    ...             .adapt_query_items([("breed", "corgi")])
    ...             .validate_status_code(range(200, 300))
    ...             .run()
    ...         )
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "CancellationError",
    "CancellationToken",
    "Client",
    "ClientConfig",
    "DecodeError",
    "ExchangeError",
    "HttpMethod",
    "Request",
    "RetryPolicyConfig",
    "StatusCodeValidationError",
    "TransportError",
    "TransportErrorCode",
    "ValidationError",
    "WireRequest",
    "__version__",
]

from importlib.metadata import PackageNotFoundError, version

from aexchange.cancellation import CancellationToken
from aexchange.client import Client
from aexchange.core.config import ClientConfig, RetryPolicyConfig
from aexchange.exceptions import (
    CancellationError,
    DecodeError,
    ExchangeError,
    StatusCodeValidationError,
    TransportError,
    TransportErrorCode,
    ValidationError,
)
from aexchange.method import HttpMethod
from aexchange.request import Request
from aexchange.wire import WireRequest

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
