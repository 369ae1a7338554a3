r"""Delay schedule doubling after every retry."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

from aexchange.backoff.base import BaseBackoffStrategy
from aexchange.core.validation import validate_backoff_params

# Largest power of two representable as a float.
_MAX_EXPONENT = 1023


class ExponentialBackoff(BaseBackoffStrategy):
    """Doubling delay schedule, optionally capped.

    Retry ``i`` (0-indexed) waits ``base_delay * 2 ** i`` seconds, or
    ``max_delay`` if that is smaller. Negative indices are treated as
    the first retry. Indices past 1023 use the delay of index 1023, which
    is already beyond any practical cap.

    Args:
        base_delay: Seconds before the first retry. Must be >= 0.
        max_delay: Optional cap in seconds. Must be > 0 if set.

    Example:
        ```pycon
        >>> from aexchange.backoff import ExponentialBackoff
        >>> schedule = ExponentialBackoff(base_delay=2.0)
        >>> [schedule.calculate(i) for i in range(4)]
        [2.0, 4.0, 8.0, 16.0]
        >>> ExponentialBackoff(base_delay=1.0, max_delay=5.0).calculate(10)
        5.0

        ```
    """

    def __init__(self, base_delay: float = 2.0, max_delay: float | None = None) -> None:
        validate_backoff_params(base_delay=base_delay, max_delay=max_delay)
        self.base_delay = base_delay
        self.max_delay = max_delay

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_delay={self.base_delay}, max_delay={self.max_delay})"

    def calculate(self, attempt: int) -> float:
        delay = self.base_delay * 2 ** min(max(0, attempt), _MAX_EXPONENT)
        if self.max_delay is None:
            return delay
        return min(delay, self.max_delay)
