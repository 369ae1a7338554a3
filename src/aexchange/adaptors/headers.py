r"""Adaptor appending header fields to a request."""

from __future__ import annotations

__all__ = ["CollisionResolver", "CollisionStrategy", "HeadersAdaptor"]

from collections.abc import Callable, Mapping
from enum import Enum
from typing import TYPE_CHECKING

from aexchange.adaptors.base import BaseAdaptor

if TYPE_CHECKING:
    from aexchange.transport import BaseTransport
    from aexchange.wire import WireRequest

# Receives (field, old_value, new_value) and returns the value to keep.
CollisionResolver = Callable[[str, str, str], str]


class CollisionStrategy(Enum):
    """What happens when a header being added already exists.

    - ``USE_OLDER_VALUE``: the existing value is kept.
    - ``USE_NEWER_VALUE``: the new value replaces the existing one.
    - ``USE_BOTH_VALUES``: the new value is appended to the existing one,
      separated by a comma.

    A callable ``(field, old_value, new_value) -> str`` can be used in
    place of a member to decide the value.
    """

    USE_OLDER_VALUE = "use_older_value"
    USE_NEWER_VALUE = "use_newer_value"
    USE_BOTH_VALUES = "use_both_values"


class HeadersAdaptor(BaseAdaptor):
    """Adds header fields to every request.

    Args:
        headers: The fields to add.
        strategy: How to resolve a field that is already present.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aexchange import HttpMethod, WireRequest
        >>> from aexchange.adaptors import CollisionStrategy, HeadersAdaptor
        >>> request = WireRequest("https://api.example.com", HttpMethod.GET, {"Accept": "text/html"})
        >>> adaptor = HeadersAdaptor({"Accept": "application/json"}, CollisionStrategy.USE_BOTH_VALUES)
        >>> dict(asyncio.run(adaptor.adapt(request, None)).headers)
        {'Accept': 'text/html,application/json'}

        ```
    """

    def __init__(
        self,
        headers: Mapping[str, str],
        strategy: CollisionStrategy | CollisionResolver = CollisionStrategy.USE_NEWER_VALUE,
    ) -> None:
        self.headers = dict(headers)
        self.strategy = strategy

    def __repr__(self) -> str:
        return f"{type(self).__name__}(headers={self.headers!r}, strategy={self.strategy!r})"

    def resolve(self, field: str, old_value: str, new_value: str) -> str:
        """Return the value of ``field`` when both values are present."""
        if self.strategy is CollisionStrategy.USE_OLDER_VALUE:
            return old_value
        if self.strategy is CollisionStrategy.USE_NEWER_VALUE:
            return new_value
        if self.strategy is CollisionStrategy.USE_BOTH_VALUES:
            return f"{old_value},{new_value}"
        return self.strategy(field, old_value, new_value)

    async def adapt(self, request: WireRequest, transport: BaseTransport) -> WireRequest:  # noqa: ARG002
        headers = dict(request.headers)
        for field, new_value in self.headers.items():
            # Field names are case-insensitive, the stored spelling is kept.
            stored = next((name for name in headers if name.lower() == field.lower()), None)
            if stored is None:
                headers[field] = new_value
            else:
                headers[stored] = self.resolve(field, headers[stored], new_value)
        return request.with_headers(headers)
