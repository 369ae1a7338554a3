r"""Validator checking the status code of a response."""

from __future__ import annotations

__all__ = ["StatusCodeValidator"]

from collections.abc import Collection, Iterable
from typing import TYPE_CHECKING

from aexchange.exceptions import StatusCodeValidationError
from aexchange.validators.base import BaseValidator, ValidationResult

if TYPE_CHECKING:
    import httpx

    from aexchange.wire import WireRequest


class StatusCodeValidator(BaseValidator):
    """Accepts responses whose status code is acceptable.

    Args:
        status_codes: A single acceptable code, or any collection of
            acceptable codes such as ``range(200, 300)``.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from aexchange import HttpMethod, WireRequest
        >>> from aexchange.validators import StatusCodeValidator
        >>> validator = StatusCodeValidator(range(200, 300))
        >>> request = WireRequest("https://api.example.com", HttpMethod.GET)
        >>> asyncio.run(validator.validate(httpx.Response(204), request, b"")).is_success
        True
        >>> asyncio.run(validator.validate(httpx.Response(404), request, b"")).error.code
        404

        ```
    """

    def __init__(self, status_codes: int | Iterable[int]) -> None:
        if isinstance(status_codes, int):
            status_codes = (status_codes,)
        elif not isinstance(status_codes, Collection):
            status_codes = tuple(status_codes)
        self.status_codes: Collection[int] = status_codes

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.status_codes!r})"

    async def validate(
        self,
        response: httpx.Response,
        request: WireRequest,  # noqa: ARG002
        body: bytes,  # noqa: ARG002
    ) -> ValidationResult:
        if response.status_code in self.status_codes:
            return ValidationResult.success()
        return ValidationResult.failure(StatusCodeValidationError(response.status_code))
