r"""Exceptions raised by the request pipeline.

The pipeline raises exactly one terminal error per ``run()``:

- ``TransportError``: the transport failed to produce a response.
- ``ValidationError``: a validator rejected the response.
- ``DecodeError``: the body did not match the expected type.
- ``CancellationError``: the run was cancelled cooperatively.

Errors raised by user supplied adaptors and retriers are propagated
unchanged.
"""

from __future__ import annotations

__all__ = [
    "CancellationError",
    "DecodeError",
    "ExchangeError",
    "StatusCodeValidationError",
    "TransportError",
    "TransportErrorCode",
    "ValidationError",
]

from enum import Enum
from typing import Any


class TransportErrorCode(Enum):
    """Stable codes describing why a transport failed.

    The enumeration is closed. Failures that do not map onto a known
    code are reported as ``UNKNOWN``.
    """

    BAD_SERVER_RESPONSE = "bad_server_response"
    BAD_URL = "bad_url"
    CANCELLED = "cancelled"
    CANNOT_CONNECT_TO_HOST = "cannot_connect_to_host"
    CANNOT_DECODE_CONTENT_DATA = "cannot_decode_content_data"
    CANNOT_FIND_HOST = "cannot_find_host"
    CANNOT_LOAD_FROM_NETWORK = "cannot_load_from_network"
    CANNOT_PARSE_RESPONSE = "cannot_parse_response"
    CLIENT_CERTIFICATE_REJECTED = "client_certificate_rejected"
    CLIENT_CERTIFICATE_REQUIRED = "client_certificate_required"
    DATA_NOT_ALLOWED = "data_not_allowed"
    DNS_LOOKUP_FAILED = "dns_lookup_failed"
    NETWORK_CONNECTION_LOST = "network_connection_lost"
    NOT_CONNECTED_TO_INTERNET = "not_connected_to_internet"
    PROXY_ERROR = "proxy_error"
    SECURE_CONNECTION_FAILED = "secure_connection_failed"
    SERVER_CERTIFICATE_UNTRUSTED = "server_certificate_untrusted"
    TIMED_OUT = "timed_out"
    TOO_MANY_REDIRECTS = "too_many_redirects"
    UNSUPPORTED_URL = "unsupported_url"
    USER_AUTHENTICATION_REQUIRED = "user_authentication_required"
    ZERO_BYTE_RESOURCE = "zero_byte_resource"
    UNKNOWN = "unknown"


class ExchangeError(Exception):
    """Base class of all errors raised by aexchange."""


class TransportError(ExchangeError):
    """Raised when the transport fails to produce a response.

    Args:
        code: The stable code describing the failure.
        message: Human readable description.
        url: The URL that was requested, if known.
        cause: The underlying exception, if any.

    Example:
        ```pycon
        >>> from aexchange.exceptions import TransportError, TransportErrorCode
        >>> error = TransportError(TransportErrorCode.TIMED_OUT, url="https://api.example.com")
        >>> error.code
        <TransportErrorCode.TIMED_OUT: 'timed_out'>

        ```
    """

    def __init__(
        self,
        code: TransportErrorCode,
        message: str | None = None,
        *,
        url: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        if message is None:
            message = f"transport failed with {code.value}"
            if url is not None:
                message = f"request to {url} {message}"
        super().__init__(message)
        self.code = code
        self.message = message
        self.url = url
        self.cause = cause

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TransportError):
            return NotImplemented
        return self.code is other.code and self.url == other.url

    def __hash__(self) -> int:
        return hash((self.code, self.url))


class ValidationError(ExchangeError):
    """Raised when a validator rejects a response."""


class StatusCodeValidationError(ValidationError):
    """Raised when a response status code is not acceptable.

    Args:
        code: The offending status code.
    """

    def __init__(self, code: int) -> None:
        super().__init__(f"unacceptable status code {code}")
        self.code = code

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StatusCodeValidationError):
            return NotImplemented
        return self.code == other.code

    def __hash__(self) -> int:
        return hash(self.code)


class DecodeError(ExchangeError):
    """Raised when a response body cannot be decoded into the expected
    type.

    Args:
        expected: The type the body was decoded into.
        message: Description of the mismatch.
        data: The raw body, kept for debugging.
    """

    def __init__(self, expected: Any, message: str, data: bytes | None = None) -> None:
        super().__init__(f"cannot decode response body as {expected!r}: {message}")
        self.expected = expected
        self.data = data


class CancellationError(ExchangeError):
    """Raised when a run is cancelled through its ``CancellationToken``."""

    def __init__(self, message: str = "request was cancelled") -> None:
        super().__init__(message)
