r"""Cooperative cancellation shared by every chain of a run."""

from __future__ import annotations

__all__ = ["CancellationToken"]

import asyncio
import logging

from aexchange.exceptions import CancellationError

logger: logging.Logger = logging.getLogger(__name__)


class CancellationToken:
    """A flag checked by the pipeline before every chain member.

    Cancelling a token never interrupts a member that is already running.
    The next check raises ``CancellationError``, and any delay awaited
    through ``sleep`` ends early with the same error.

    Example:
        ```pycon
        >>> from aexchange import CancellationToken
        >>> token = CancellationToken()
        >>> token.is_cancelled
        False
        >>> token.cancel()
        >>> token.is_cancelled
        True

        ```
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def is_cancelled(self) -> bool:
        """Whether ``cancel`` has been called."""
        return self._event.is_set()

    def cancel(self) -> None:
        """Request cancellation. Calling it more than once is harmless."""
        if not self._event.is_set():
            logger.debug("Cancellation requested")
        self._event.set()

    def raise_if_cancelled(self) -> None:
        """Raise ``CancellationError`` if the token was cancelled.

        Raises:
            CancellationError: If ``cancel`` has been called.
        """
        if self._event.is_set():
            raise CancellationError

    async def sleep(self, delay: float) -> None:
        """Wait ``delay`` seconds unless the token is cancelled first.

        Args:
            delay: The number of seconds to wait.

        Raises:
            CancellationError: If the token is cancelled before or while
                waiting.
        """
        self.raise_if_cancelled()
        if delay <= 0:
            return
        try:
            await asyncio.wait_for(self._event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return
        raise CancellationError
