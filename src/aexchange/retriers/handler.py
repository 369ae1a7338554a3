r"""Retrier backed by a plain function."""

from __future__ import annotations

__all__ = ["Retrier", "RetryHandler"]

import inspect
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Optional, Union

from aexchange.retriers.base import BaseRetrier, RetryDecision

if TYPE_CHECKING:
    import httpx

    from aexchange.transport import BaseTransport
    from aexchange.wire import WireRequest

RetryHandler = Callable[
    ["WireRequest", "BaseTransport", Optional["httpx.Response"], Exception, int],
    Union[RetryDecision, Awaitable[RetryDecision]],
]


class Retrier(BaseRetrier):
    """Retrier delegating to ``handler``.

    Args:
        handler: Called with ``(request, transport, response, error,
            previous_attempts)``; returns a ``RetryDecision`` or an
            awaitable of one.

    Example:
        ```pycon
        >>> from aexchange.retriers import Retrier, RetryDecision
        >>> retrier = Retrier(
        ...     lambda request, transport, response, error, previous_attempts: (
        ...         RetryDecision.retry() if previous_attempts < 2 else RetryDecision.concede()
        ...     )
        ... )

        ```
    """

    def __init__(self, handler: RetryHandler) -> None:
        self.handler = handler

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.handler!r})"

    async def retry(
        self,
        request: WireRequest,
        transport: BaseTransport,
        response: httpx.Response | None,
        error: Exception,
        previous_attempts: int,
    ) -> RetryDecision:
        result = self.handler(request, transport, response, error, previous_attempts)
        if inspect.isawaitable(result):
            result = await result
        return result
