r"""Validator composing several validators into one."""

from __future__ import annotations

__all__ = ["ZipValidator"]

import logging
from typing import TYPE_CHECKING

from aexchange.validators.base import BaseValidator, ValidationResult

if TYPE_CHECKING:
    from collections.abc import Iterable

    import httpx

    from aexchange.cancellation import CancellationToken
    from aexchange.wire import WireRequest

logger: logging.Logger = logging.getLogger(__name__)


class ZipValidator(BaseValidator):
    """Runs validators in sequence and stops at the first failure.

    Later validators are not run once one of them fails. The
    cancellation token is checked before every member.

    Args:
        validators: The validators to run, in order.
        token: Optional cancellation token of the current run.
    """

    def __init__(
        self,
        validators: Iterable[BaseValidator] = (),
        token: CancellationToken | None = None,
    ) -> None:
        self.validators = list(validators)
        self.token = token

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.validators!r})"

    async def validate(
        self, response: httpx.Response, request: WireRequest, body: bytes
    ) -> ValidationResult:
        for validator in self.validators:
            if self.token is not None:
                self.token.raise_if_cancelled()
            result = await validator.validate(response, request, body)
            if not result.is_success:
                logger.debug(f"{request.method} response from {request.url} rejected by {validator!r}")
                return result
        return ValidationResult.success()
