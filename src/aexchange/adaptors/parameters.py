r"""Adaptor appending query parameters to a request URL."""

from __future__ import annotations

__all__ = ["ParametersAdaptor", "QueryItem"]

from typing import TYPE_CHECKING
from urllib.parse import urlencode

from aexchange.adaptors.base import BaseAdaptor

if TYPE_CHECKING:
    from collections.abc import Iterable

    from aexchange.transport import BaseTransport
    from aexchange.wire import WireRequest

QueryItem = tuple[str, "str | None"]


class ParametersAdaptor(BaseAdaptor):
    """Appends query items to the request URL.

    The existing query text is kept as it is, new items are only
    appended to it. Adding a name that is already present adds a second
    occurrence. A ``None`` value produces an empty value.

    Args:
        items: ``(name, value)`` pairs, appended in order.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aexchange import HttpMethod, WireRequest
        >>> from aexchange.adaptors import ParametersAdaptor
        >>> request = WireRequest("https://api.example.com/dogs?page=1", HttpMethod.GET)
        >>> adaptor = ParametersAdaptor([("page", "2"), ("breed", "corgi")])
        >>> asyncio.run(adaptor.adapt(request, None)).url
        'https://api.example.com/dogs?page=1&page=2&breed=corgi'

        ```
    """

    def __init__(self, items: Iterable[QueryItem]) -> None:
        self.items = [(name, value) for name, value in items]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(items={self.items!r})"

    async def adapt(self, request: WireRequest, transport: BaseTransport) -> WireRequest:  # noqa: ARG002
        if not self.items:
            return request
        encoded = urlencode([(name, "" if value is None else value) for name, value in self.items])
        address, hash_mark, fragment = request.url.partition("#")
        if "?" not in address:
            address = f"{address}?{encoded}"
        elif address.endswith(("?", "&")):
            address = f"{address}{encoded}"
        else:
            address = f"{address}&{encoded}"
        return request.with_url(f"{address}{hash_mark}{fragment}")
