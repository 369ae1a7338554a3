r"""Validator backed by a plain function."""

from __future__ import annotations

__all__ = ["ValidationHandler", "Validator"]

import inspect
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Union

from aexchange.validators.base import BaseValidator, ValidationResult

if TYPE_CHECKING:
    import httpx

    from aexchange.wire import WireRequest

ValidationHandler = Callable[
    ["httpx.Response", "WireRequest", bytes],
    Union[ValidationResult, Awaitable[ValidationResult]],
]


class Validator(BaseValidator):
    """Validator delegating to ``handler``.

    Args:
        handler: Called with ``(response, request, body)``; returns a
            ``ValidationResult`` or an awaitable of one.
    """

    def __init__(self, handler: ValidationHandler) -> None:
        self.handler = handler

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.handler!r})"

    async def validate(
        self, response: httpx.Response, request: WireRequest, body: bytes
    ) -> ValidationResult:
        result = self.handler(response, request, body)
        if inspect.isawaitable(result):
            result = await result
        return result
