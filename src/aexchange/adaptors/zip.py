r"""Adaptor composing several adaptors into one."""

from __future__ import annotations

__all__ = ["ZipAdaptor"]

import logging
from typing import TYPE_CHECKING

from aexchange.adaptors.base import BaseAdaptor

if TYPE_CHECKING:
    from collections.abc import Iterable

    from aexchange.cancellation import CancellationToken
    from aexchange.transport import BaseTransport
    from aexchange.wire import WireRequest

logger: logging.Logger = logging.getLogger(__name__)


class ZipAdaptor(BaseAdaptor):
    """Runs adaptors in sequence, feeding each output to the next one.

    The cancellation token is checked before every member. Once it is
    cancelled the remaining members are skipped and
    ``CancellationError`` is raised.

    Args:
        adaptors: The adaptors to run, in order.
        token: Optional cancellation token of the current run.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aexchange import HttpMethod, WireRequest
        >>> from aexchange.adaptors import HeadersAdaptor, ParametersAdaptor, ZipAdaptor
        >>> adaptor = ZipAdaptor(
        ...     [HeadersAdaptor({"Accept": "application/json"}), ParametersAdaptor([("page", "2")])]
        ... )
        >>> request = WireRequest("https://api.example.com/dogs", HttpMethod.GET)
        >>> asyncio.run(adaptor.adapt(request, None)).url
        'https://api.example.com/dogs?page=2'

        ```
    """

    def __init__(
        self,
        adaptors: Iterable[BaseAdaptor] = (),
        token: CancellationToken | None = None,
    ) -> None:
        self.adaptors = list(adaptors)
        self.token = token

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.adaptors!r})"

    async def adapt(self, request: WireRequest, transport: BaseTransport) -> WireRequest:
        for adaptor in self.adaptors:
            if self.token is not None:
                self.token.raise_if_cancelled()
            request = await adaptor.adapt(request, transport)
        logger.debug(f"Adapted {request.method} request to {request.url} ({len(self.adaptors)} adaptors)")
        return request
