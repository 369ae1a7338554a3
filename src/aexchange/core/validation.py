r"""Range checks shared by the configuration objects and the backoff.

Every check raises ``ValueError`` with a message naming the offending
parameter and its value.
"""

from __future__ import annotations

__all__ = ["validate_backoff_params", "validate_retry_policy_params", "validate_timeout"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


def _reject(condition: bool, message: str) -> None:
    if condition:
        raise ValueError(message)


def validate_timeout(timeout: float | httpx.Timeout | None) -> None:
    """Check a transport timeout.

    ``None`` and ``httpx.Timeout`` instances are accepted as they are,
    numbers must be strictly positive.

    Example:
        ```pycon
        >>> from aexchange.core.validation import validate_timeout
        >>> validate_timeout(5)
        >>> validate_timeout(-2.5)
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got -2.5

        ```
    """
    numeric = isinstance(timeout, (int, float))
    _reject(numeric and timeout <= 0, f"timeout must be > 0, got {timeout}")


def validate_backoff_params(base_delay: float, max_delay: float | None = None) -> None:
    """Check the parameters of a backoff schedule.

    Args:
        base_delay: Seconds before the first retry, zero or more.
        max_delay: Cap on any delay. Strictly positive when given.

    Raises:
        ValueError: If either value is out of range.
    """
    _reject(base_delay < 0, f"base_delay must be non-negative, got {base_delay}")
    _reject(
        max_delay is not None and max_delay <= 0,
        f"max_delay must be positive if specified, got {max_delay}",
    )


def validate_retry_policy_params(
    attempts: int,
    backoff_base: float,
    max_delay: float | None = None,
) -> None:
    """Check the numeric fields of a ``RetryPolicyConfig``.

    Args:
        attempts: Attempts after which the policy gives up, zero or more.
        backoff_base: Seconds before the first retry, zero or more.
        max_delay: Cap on any delay. Strictly positive when given.

    Raises:
        ValueError: If a value is out of range.

    Example:
        ```pycon
        >>> from aexchange.core.validation import validate_retry_policy_params
        >>> validate_retry_policy_params(attempts=0, backoff_base=0.0)
        >>> validate_retry_policy_params(attempts=-1, backoff_base=2.0)
        Traceback (most recent call last):
        ...
        ValueError: attempts must be >= 0, got -1

        ```
    """
    _reject(attempts < 0, f"attempts must be >= 0, got {attempts}")
    _reject(backoff_base < 0, f"backoff_base must be >= 0, got {backoff_base}")
    _reject(max_delay is not None and max_delay <= 0, f"max_delay must be > 0, got {max_delay}")
