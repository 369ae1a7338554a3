r"""Retry decision and abstract base class for retriers."""

from __future__ import annotations

__all__ = ["BaseRetrier", "RetryAction", "RetryDecision"]

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from aexchange.transport import BaseTransport
    from aexchange.wire import WireRequest


class RetryAction(Enum):
    """What a retrier wants the pipeline to do after a failure."""

    CONCEDE = "concede"
    RETRY = "retry"
    RETRY_AFTER_DELAY = "retry_after_delay"


@dataclass(frozen=True)
class RetryDecision:
    """Decision returned by a retrier.

    Args:
        action: The action to take.
        delay: Seconds to wait before retrying. Only meaningful for
            ``RETRY_AFTER_DELAY``.

    Example:
        ```pycon
        >>> from aexchange.retriers import RetryDecision
        >>> RetryDecision.concede().should_retry
        False
        >>> RetryDecision.retry_after_delay(1.5)
        RetryDecision(action=<RetryAction.RETRY_AFTER_DELAY: 'retry_after_delay'>, delay=1.5)

        ```
    """

    action: RetryAction
    delay: float = 0.0

    def __post_init__(self) -> None:
        if self.delay < 0:
            msg = f"delay must be non-negative, got {self.delay}"
            raise ValueError(msg)

    @classmethod
    def concede(cls) -> RetryDecision:
        return cls(RetryAction.CONCEDE)

    @classmethod
    def retry(cls) -> RetryDecision:
        return cls(RetryAction.RETRY)

    @classmethod
    def retry_after_delay(cls, delay: float) -> RetryDecision:
        return cls(RetryAction.RETRY_AFTER_DELAY, delay)

    @property
    def should_retry(self) -> bool:
        return self.action is not RetryAction.CONCEDE


class BaseRetrier(ABC):
    """Decides whether a failed attempt should be retried."""

    @abstractmethod
    async def retry(
        self,
        request: WireRequest,
        transport: BaseTransport,
        response: httpx.Response | None,
        error: Exception,
        previous_attempts: int,
    ) -> RetryDecision:
        """Decide what to do after a failed attempt.

        Args:
            request: The adapted request of the failed attempt, or the
                original request if adaptation itself failed.
            transport: The transport used by the run.
            response: The response, if one was received.
            error: The error that made the attempt fail.
            previous_attempts: The number of attempts made so far,
                including the failed one.

        Returns:
            The retry decision.
        """
