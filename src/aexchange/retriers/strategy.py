r"""Retrier implementing exponential backoff with jitter.

The delay before the retry following ``previous_attempts`` attempts is
``backoff_base * 2 ** (previous_attempts - 1)``, optionally capped by
``max_delay`` and then randomized once by the jitter strategy.
"""

from __future__ import annotations

__all__ = ["RetryStrategy"]

import logging
from typing import TYPE_CHECKING, Any

from aexchange.backoff.exponential import ExponentialBackoff
from aexchange.core.config import RetryPolicyConfig
from aexchange.exceptions import TransportError
from aexchange.retriers.base import BaseRetrier, RetryDecision

if TYPE_CHECKING:
    import httpx

    from aexchange.transport import BaseTransport
    from aexchange.wire import WireRequest

logger: logging.Logger = logging.getLogger(__name__)


class RetryStrategy(BaseRetrier):
    """Retries idempotent requests that failed for a transient reason.

    A failed attempt is eligible for a retry when all of the following
    hold:

    - fewer than ``attempts`` attempts have been made;
    - the request method is one of ``methods``;
    - the response status is one of ``status_codes``, or the error is a
      ``TransportError`` whose code is one of ``error_codes``.

    Args:
        config: The retry policy. Defaults to ``RetryPolicyConfig()``.
        **overrides: Policy fields overriding the ones of ``config``.
            ``None`` values are ignored.

    Example:
        ```pycon
        >>> from aexchange.backoff import JitterStrategy
        >>> from aexchange.retriers import RetryStrategy
        >>> strategy = RetryStrategy(attempts=5, jitter=JitterStrategy.NONE)
        >>> [strategy.delay(previous_attempts) for previous_attempts in range(1, 5)]
        [2.0, 4.0, 8.0, 16.0]

        ```
    """

    def __init__(self, config: RetryPolicyConfig | None = None, **overrides: Any) -> None:
        config = config if config is not None else RetryPolicyConfig()
        self.config = config.merge(**overrides)
        self.backoff = ExponentialBackoff(
            base_delay=self.config.backoff_base, max_delay=self.config.max_delay
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.config!r})"

    def should_retry(
        self,
        request: WireRequest,
        response: httpx.Response | None,
        error: Exception,
        previous_attempts: int,
    ) -> bool:
        """Indicate whether a failed attempt is eligible for a retry.

        Args:
            request: The request of the failed attempt.
            response: The response, if one was received.
            error: The error that made the attempt fail.
            previous_attempts: The number of attempts made so far.

        Returns:
            ``True`` if the attempt should be retried.
        """
        if previous_attempts >= self.config.attempts:
            logger.debug(
                f"{request.method} request to {request.url} exhausted "
                f"{self.config.attempts} attempts"
            )
            return False
        if request.method not in self.config.methods:
            logger.debug(f"{request.method} request to {request.url} is not retryable")
            return False
        if response is not None and response.status_code in self.config.status_codes:
            return True
        return isinstance(error, TransportError) and error.code in self.config.error_codes

    def delay(self, previous_attempts: int) -> float:
        """Compute the jittered delay before the next attempt.

        Args:
            previous_attempts: The number of attempts made so far.

        Returns:
            The delay in seconds.
        """
        delay = self.backoff.calculate(max(0, previous_attempts - 1))
        return self.config.jitter.apply(delay)

    async def retry(
        self,
        request: WireRequest,
        transport: BaseTransport,  # noqa: ARG002
        response: httpx.Response | None,
        error: Exception,
        previous_attempts: int,
    ) -> RetryDecision:
        if not self.should_retry(request, response, error, previous_attempts):
            return RetryDecision.concede()
        delay = self.delay(previous_attempts)
        logger.debug(
            f"{request.method} request to {request.url} will be retried in {delay:.2f}s "
            f"(attempt {previous_attempts}/{self.config.attempts})"
        )
        return RetryDecision.retry_after_delay(delay)
