r"""Validation result and abstract base class for response validators."""

from __future__ import annotations

__all__ = ["BaseValidator", "ValidationResult"]

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from aexchange.wire import WireRequest


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation: success, or failure carrying an error.

    Example:
        ```pycon
        >>> from aexchange.validators import ValidationResult
        >>> ValidationResult.success().is_success
        True
        >>> result = ValidationResult.failure(ValueError("nope"))
        >>> result.is_success
        False
        >>> result.get()
        Traceback (most recent call last):
        ...
        ValueError: nope

        ```
    """

    error: Exception | None = None

    @classmethod
    def success(cls) -> ValidationResult:
        return cls()

    @classmethod
    def failure(cls, error: Exception) -> ValidationResult:
        return cls(error=error)

    @property
    def is_success(self) -> bool:
        return self.error is None

    def get(self) -> None:
        """Raise the carried error if the validation failed."""
        if self.error is not None:
            raise self.error


class BaseValidator(ABC):
    """Decides whether a response is acceptable before it is decoded."""

    @abstractmethod
    async def validate(
        self, response: httpx.Response, request: WireRequest, body: bytes
    ) -> ValidationResult:
        """Validate a response.

        Args:
            response: The response envelope.
            request: The adapted request that produced the response.
            body: The response body.

        Returns:
            ``ValidationResult.success()`` to accept the response, or a
            failure carrying the error to raise.
        """
