r"""Configuration dataclasses and defaults.

This module provides the default constants of the request pipeline, the
immutable ``RetryPolicyConfig`` used by ``RetryStrategy`` and the
``ClientConfig`` used to build a ``Client``.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_ATTEMPTS",
    "DEFAULT_BACKOFF_BASE",
    "DEFAULT_JITTER",
    "DEFAULT_METHODS",
    "DEFAULT_RETRY_ERROR_CODES",
    "DEFAULT_RETRY_STATUS_CODES",
    "DEFAULT_TIMEOUT",
    "ClientConfig",
    "RetryPolicyConfig",
]

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from aexchange.backoff.jitter import JitterStrategy
from aexchange.coding import BaseDecoder, BaseEncoder, JsonDecoder, JsonEncoder
from aexchange.core.validation import validate_retry_policy_params, validate_timeout
from aexchange.exceptions import TransportErrorCode
from aexchange.method import HttpMethod

if TYPE_CHECKING:
    from collections.abc import Callable

    from aexchange.adaptors.base import BaseAdaptor
    from aexchange.callbacks import FailureInfo, RequestInfo, ResponseInfo, RetryInfo
    from aexchange.retriers.base import BaseRetrier
    from aexchange.transport import BaseTransport
    from aexchange.validators.base import BaseValidator


# Default timeout in seconds used by the live transport
DEFAULT_TIMEOUT = 10.0

# Default number of attempts before the retry strategy concedes
DEFAULT_ATTEMPTS = 3

# Idempotent methods, see RFC 9110 section 9.2.2
DEFAULT_METHODS = frozenset(
    {
        HttpMethod.GET,
        HttpMethod.HEAD,
        HttpMethod.PUT,
        HttpMethod.DELETE,
        HttpMethod.OPTIONS,
        HttpMethod.TRACE,
    }
)

# HTTP status codes that should trigger a retry
# 408: Request Timeout
# 500: Internal Server Error
# 502: Bad Gateway
# 503: Service Unavailable
# 504: Gateway Timeout
DEFAULT_RETRY_STATUS_CODES = frozenset({408, 500, 502, 503, 504})

# Delay of the first retry in seconds, doubled for every further retry
DEFAULT_BACKOFF_BASE = 2.0

DEFAULT_JITTER = JitterStrategy.FULL

# Connectivity and availability failures that may resolve on their own.
# Malformed URLs, certificate problems, undecodable content and unknown
# failures are left out since retrying will not change them.
DEFAULT_RETRY_ERROR_CODES = frozenset(
    {
        TransportErrorCode.BAD_SERVER_RESPONSE,
        TransportErrorCode.CANNOT_CONNECT_TO_HOST,
        TransportErrorCode.CANNOT_FIND_HOST,
        TransportErrorCode.CANNOT_LOAD_FROM_NETWORK,
        TransportErrorCode.DATA_NOT_ALLOWED,
        TransportErrorCode.DNS_LOOKUP_FAILED,
        TransportErrorCode.NETWORK_CONNECTION_LOST,
        TransportErrorCode.NOT_CONNECTED_TO_INTERNET,
        TransportErrorCode.PROXY_ERROR,
        TransportErrorCode.SECURE_CONNECTION_FAILED,
        TransportErrorCode.TIMED_OUT,
    }
)


@dataclass(frozen=True)
class RetryPolicyConfig:
    """Configuration of the exponential backoff retry strategy.

    Args:
        attempts: Number of attempts after which the strategy concedes.
            Must be >= 0.
        methods: Methods eligible for a retry. Strings are accepted and
            normalized.
        status_codes: Response status codes eligible for a retry.
        error_codes: Transport error codes eligible for a retry.
        backoff_base: Delay of the first retry in seconds. Must be >= 0.
        jitter: Jitter applied to every computed delay.
        max_delay: Optional cap on the computed delay, applied before
            jitter. Must be > 0 if provided.

    Example:
        ```pycon
        >>> from aexchange.core import RetryPolicyConfig
        >>> config = RetryPolicyConfig(attempts=5, methods=["get", "post"])
        >>> sorted(method.value for method in config.methods)
        ['GET', 'POST']
        >>> config.merge(attempts=1).attempts
        1

        ```
    """

    attempts: int = DEFAULT_ATTEMPTS
    methods: frozenset[HttpMethod] = DEFAULT_METHODS
    status_codes: frozenset[int] = DEFAULT_RETRY_STATUS_CODES
    error_codes: frozenset[TransportErrorCode] = DEFAULT_RETRY_ERROR_CODES
    backoff_base: float = DEFAULT_BACKOFF_BASE
    jitter: JitterStrategy = DEFAULT_JITTER
    max_delay: float | None = None

    def __post_init__(self) -> None:
        validate_retry_policy_params(
            attempts=self.attempts,
            backoff_base=self.backoff_base,
            max_delay=self.max_delay,
        )
        object.__setattr__(self, "methods", frozenset(map(HttpMethod.coerce, self.methods)))
        object.__setattr__(self, "status_codes", frozenset(self.status_codes))
        object.__setattr__(self, "error_codes", frozenset(self.error_codes))
        object.__setattr__(self, "jitter", JitterStrategy(self.jitter))

    def merge(self, **overrides: Any) -> RetryPolicyConfig:
        """Create a new config with the non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


@dataclass
class ClientConfig:
    """Configuration of a ``Client``.

    Every option is optional. The chains given here are copied into each
    request built by the client and always run before the chains added on
    the request itself.

    Args:
        encoder: Encoder of request bodies. Defaults to ``JsonEncoder``.
        decoder: Decoder of response bodies. Defaults to ``JsonDecoder``.
        transport: The transport sending requests. ``None`` lets the
            client create an ``HttpxTransport``.
        timeout: Timeout of the transport created by the client.
        adaptors: Adaptors run on every request.
        retriers: Retriers consulted on every failure.
        validators: Validators run on every response.
        on_request: Optional callback called before each dispatch.
        on_retry: Optional callback called before each retry.
        on_success: Optional callback called when a run succeeds.
        on_failure: Optional callback called when a run fails.

    Example:
        ```pycon
        >>> from aexchange.core import ClientConfig
        >>> config = ClientConfig()
        >>> config.adaptors
        []
        >>> merged = config.merge(timeout=30.0)
        >>> merged.timeout
        30.0
        >>> config.timeout  # Original unchanged
        10.0

        ```
    """

    encoder: BaseEncoder = field(default_factory=JsonEncoder)
    decoder: BaseDecoder = field(default_factory=JsonDecoder)
    transport: BaseTransport | None = None
    timeout: float | None = DEFAULT_TIMEOUT
    adaptors: list[BaseAdaptor] = field(default_factory=list)
    retriers: list[BaseRetrier] = field(default_factory=list)
    validators: list[BaseValidator] = field(default_factory=list)
    on_request: Callable[[RequestInfo], None] | None = None
    on_retry: Callable[[RetryInfo], None] | None = None
    on_success: Callable[[ResponseInfo], None] | None = None
    on_failure: Callable[[FailureInfo], None] | None = None

    def __post_init__(self) -> None:
        validate_timeout(self.timeout)
        self.adaptors = list(self.adaptors)
        self.retriers = list(self.retriers)
        self.validators = list(self.validators)

    def merge(self, **overrides: Any) -> ClientConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new ClientConfig instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)

    def callbacks(self) -> dict[str, Any]:
        """Return the lifecycle callbacks as keyword arguments."""
        return {
            "on_request": self.on_request,
            "on_retry": self.on_retry,
            "on_success": self.on_success,
            "on_failure": self.on_failure,
        }
