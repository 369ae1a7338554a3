r"""Adaptor backed by a plain function."""

from __future__ import annotations

__all__ = ["AdaptationHandler", "Adaptor"]

import inspect
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Union

from aexchange.adaptors.base import BaseAdaptor

if TYPE_CHECKING:
    from aexchange.transport import BaseTransport
    from aexchange.wire import WireRequest

AdaptationHandler = Callable[
    ["WireRequest", "BaseTransport"], Union["WireRequest", Awaitable["WireRequest"]]
]


class Adaptor(BaseAdaptor):
    """Adaptor delegating to ``handler``.

    The handler may be a regular function or a coroutine function.

    Args:
        handler: Called with ``(request, transport)``; returns the
            adapted request.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aexchange import HttpMethod, WireRequest
        >>> from aexchange.adaptors import Adaptor
        >>> adaptor = Adaptor(lambda request, transport: request.with_header("X-Id", "1"))
        >>> request = WireRequest("https://api.example.com", HttpMethod.GET)
        >>> dict(asyncio.run(adaptor.adapt(request, None)).headers)
        {'X-Id': '1'}

        ```
    """

    def __init__(self, handler: AdaptationHandler) -> None:
        self.handler = handler

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.handler!r})"

    async def adapt(self, request: WireRequest, transport: BaseTransport) -> WireRequest:
        result = self.handler(request, transport)
        if inspect.isawaitable(result):
            result = await result
        return result
