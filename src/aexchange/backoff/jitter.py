r"""Jitter strategies applied to computed backoff delays.

Backing off alone only postpones the load of many clients failing at
the same time. Randomizing each delay spreads their retries out.
See https://aws.amazon.com/blogs/architecture/exponential-backoff-and-jitter/
"""

from __future__ import annotations

__all__ = ["JitterStrategy"]

import random
from enum import Enum


class JitterStrategy(Enum):
    """How a backoff delay is randomized.

    - ``NONE``: the delay is used unchanged.
    - ``EQUAL``: uniform random value in ``[delay / 2, delay]``.
    - ``FULL``: uniform random value in ``[0, delay]``.

    Example:
        ```pycon
        >>> from aexchange.backoff import JitterStrategy
        >>> JitterStrategy.NONE.apply(5.0)
        5.0
        >>> 2.5 <= JitterStrategy.EQUAL.apply(5.0) <= 5.0
        True
        >>> 0.0 <= JitterStrategy.FULL.apply(5.0) <= 5.0
        True

        ```
    """

    NONE = "none"
    EQUAL = "equal"
    FULL = "full"

    def apply(self, delay: float) -> float:
        """Return the jittered version of ``delay``.

        Args:
            delay: The delay in seconds computed by the backoff strategy.

        Returns:
            The delay to actually wait, in seconds.
        """
        if self is JitterStrategy.EQUAL:
            half = delay / 2
            return half + random.uniform(0, half)  # noqa: S311
        if self is JitterStrategy.FULL:
            return random.uniform(0, delay)  # noqa: S311
        return delay
