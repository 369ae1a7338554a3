r"""Abstract base class for request adaptors."""

from __future__ import annotations

__all__ = ["BaseAdaptor"]

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aexchange.transport import BaseTransport
    from aexchange.wire import WireRequest


class BaseAdaptor(ABC):
    """Transforms an outgoing request before it is dispatched.

    Adaptors run on every attempt, starting from the original request.
    They must derive their output from the request they receive (for
    example by fetching a fresh token) rather than relying on what a
    previous attempt produced.
    """

    @abstractmethod
    async def adapt(self, request: WireRequest, transport: BaseTransport) -> WireRequest:
        """Return the adapted request.

        Args:
            request: The request produced by the previous adaptor.
            transport: The transport that will send the request.

        Returns:
            The request passed on to the next adaptor.
        """
