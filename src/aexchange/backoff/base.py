r"""Interface of the delay schedules used between retried attempts."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Maps the index of a retry onto the delay that precedes it.

    Delays returned here are the raw schedule. Randomization is applied
    afterwards by a ``JitterStrategy``.
    """

    @abstractmethod
    def calculate(self, attempt: int) -> float:
        """Return the delay in seconds preceding retry number ``attempt``.

        Args:
            attempt: Index of the retry, ``0`` for the first one.
        """
