r"""Retrier composing several retriers into one."""

from __future__ import annotations

__all__ = ["ZipRetrier"]

import logging
from typing import TYPE_CHECKING

from aexchange.retriers.base import BaseRetrier, RetryDecision

if TYPE_CHECKING:
    from collections.abc import Iterable

    import httpx

    from aexchange.cancellation import CancellationToken
    from aexchange.transport import BaseTransport
    from aexchange.wire import WireRequest

logger: logging.Logger = logging.getLogger(__name__)


class ZipRetrier(BaseRetrier):
    """Asks retriers in order until one of them does not concede.

    The first decision other than ``concede`` is returned and the
    remaining members are not consulted. An empty chain, or a chain in
    which every member concedes, concedes. The cancellation token is
    checked before every member.

    Args:
        retriers: The retriers to ask, in order.
        token: Optional cancellation token of the current run.
    """

    def __init__(
        self,
        retriers: Iterable[BaseRetrier] = (),
        token: CancellationToken | None = None,
    ) -> None:
        self.retriers = list(retriers)
        self.token = token

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.retriers!r})"

    async def retry(
        self,
        request: WireRequest,
        transport: BaseTransport,
        response: httpx.Response | None,
        error: Exception,
        previous_attempts: int,
    ) -> RetryDecision:
        for retrier in self.retriers:
            if self.token is not None:
                self.token.raise_if_cancelled()
            decision = await retrier.retry(request, transport, response, error, previous_attempts)
            if decision.should_retry:
                logger.debug(f"{retrier!r} decided to {decision.action.value} after attempt {previous_attempts}")
                return decision
        return RetryDecision.concede()
