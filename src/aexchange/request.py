r"""Request orchestrating adaptation, dispatch, validation, decoding and
retries.

One ``run`` goes through the following states::

    Adapting -> Dispatching -> Validating -> Decoding -> Succeeded
        \            \              \            \
         +------------+--------------+------------+--> Retrying

``Retrying`` asks the retry chain what to do with the failure. Retrying
goes back to ``Adapting`` with the attempt counter increased by one,
conceding raises the failure. Each attempt adapts the original request
again, so adaptors must derive their output from their input only.
"""

from __future__ import annotations

__all__ = ["Request"]

import logging
import time
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from aexchange.adaptors import (
    Adaptor,
    BaseAdaptor,
    CollisionStrategy,
    HeadersAdaptor,
    ParametersAdaptor,
    ZipAdaptor,
)
from aexchange.callbacks import (
    invoke_on_failure,
    invoke_on_request,
    invoke_on_retry,
    invoke_on_success,
)
from aexchange.cancellation import CancellationToken
from aexchange.coding import JsonDecoder
from aexchange.retriers import BaseRetrier, Retrier, RetryAction, RetryStrategy, ZipRetrier
from aexchange.utils.structured_logging import log_structured
from aexchange.validators import BaseValidator, StatusCodeValidator, Validator, ZipValidator

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping
    from typing import Self

    import httpx

    from aexchange.adaptors import AdaptationHandler, CollisionResolver, QueryItem
    from aexchange.callbacks import FailureInfo, RequestInfo, ResponseInfo, RetryInfo
    from aexchange.coding import BaseDecoder
    from aexchange.core.config import RetryPolicyConfig
    from aexchange.retriers import RetryHandler
    from aexchange.transport import BaseTransport
    from aexchange.validators import ValidationHandler
    from aexchange.wire import WireRequest

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


class Request(Generic[T]):
    r"""A request decoding its response into ``expecting``.

    Requests are usually built by a ``Client``. The chains can be
    extended with the fluent methods, which return the request itself.
    Chains must not be changed while a run is in progress.

    Args:
        request: The original wire request.
        transport: The transport sending the request.
        expecting: The type the response body is decoded into.
        decoder: The decoder of the response body. Defaults to
            ``JsonDecoder``.
        adaptors: Initial adaptors.
        validators: Initial validators.
        retriers: Initial retriers.
        on_request: Optional callback called before each dispatch.
        on_retry: Optional callback called before each retry.
        on_success: Optional callback called when a run succeeds.
        on_failure: Optional callback called when a run fails.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aexchange import HttpMethod, Request, WireRequest
        >>> from aexchange.mock import MockResponse, MockTransport
        >>> transport = MockTransport(
        ...     {"https://mock.example.com/breeds": MockResponse.success(["corgi", "pug"])}
        ... )
        >>> request = (
        ...     Request(
        ...         WireRequest("https://mock.example.com/breeds", HttpMethod.GET),
        ...         transport,
        ...         expecting=list[str],
        ...     )
        ...     .adapt_headers({"Accept": "application/json"})
        ...     .validate_status_code(range(200, 300))
        ...     .retry_strategy(attempts=2)
        ... )
        >>> asyncio.run(request.run())
        ['corgi', 'pug']

        ```
    """

    def __init__(
        self,
        request: WireRequest,
        transport: BaseTransport,
        expecting: type[T] = bytes,  # type: ignore[assignment]
        decoder: BaseDecoder | None = None,
        adaptors: Iterable[BaseAdaptor] = (),
        validators: Iterable[BaseValidator] = (),
        retriers: Iterable[BaseRetrier] = (),
        on_request: Callable[[RequestInfo], None] | None = None,
        on_retry: Callable[[RetryInfo], None] | None = None,
        on_success: Callable[[ResponseInfo], None] | None = None,
        on_failure: Callable[[FailureInfo], None] | None = None,
    ) -> None:
        self.wire_request = request
        self.transport = transport
        self.expecting = expecting
        self.decoder = decoder if decoder is not None else JsonDecoder()
        self.adaptors: list[BaseAdaptor] = list(adaptors)
        self.validators: list[BaseValidator] = list(validators)
        self.retriers: list[BaseRetrier] = list(retriers)
        self.on_request = on_request
        self.on_retry = on_retry
        self.on_success = on_success
        self.on_failure = on_failure

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.wire_request.method} {self.wire_request.url}, "
            f"expecting={self.expecting!r}, adaptors={len(self.adaptors)}, "
            f"validators={len(self.validators)}, retriers={len(self.retriers)})"
        )

    def adapt(self, adaptor: BaseAdaptor | AdaptationHandler) -> Self:
        """Append an adaptor, or a function wrapped into one."""
        if not isinstance(adaptor, BaseAdaptor):
            adaptor = Adaptor(adaptor)
        self.adaptors.append(adaptor)
        return self

    def adapt_headers(
        self,
        headers: Mapping[str, str],
        strategy: CollisionStrategy | CollisionResolver = CollisionStrategy.USE_NEWER_VALUE,
    ) -> Self:
        """Append an adaptor adding ``headers`` to the request."""
        return self.adapt(HeadersAdaptor(headers, strategy))

    def adapt_query_items(self, items: Iterable[QueryItem]) -> Self:
        """Append an adaptor adding query items to the request URL."""
        return self.adapt(ParametersAdaptor(items))

    def validate(self, validator: BaseValidator | ValidationHandler) -> Self:
        """Append a validator, or a function wrapped into one."""
        if not isinstance(validator, BaseValidator):
            validator = Validator(validator)
        self.validators.append(validator)
        return self

    def validate_status_code(self, status_codes: int | Iterable[int]) -> Self:
        """Append a validator accepting only ``status_codes``."""
        return self.validate(StatusCodeValidator(status_codes))

    def retry(self, retrier: BaseRetrier | RetryHandler) -> Self:
        """Append a retrier, or a function wrapped into one."""
        if not isinstance(retrier, BaseRetrier):
            retrier = Retrier(retrier)
        self.retriers.append(retrier)
        return self

    def retry_strategy(self, config: RetryPolicyConfig | None = None, **overrides: Any) -> Self:
        """Append an exponential backoff ``RetryStrategy``.

        Args:
            config: The retry policy. Defaults to ``RetryPolicyConfig()``.
            **overrides: Policy fields overriding the ones of ``config``,
                e.g. ``attempts=5``.
        """
        return self.retry(RetryStrategy(config, **overrides))

    async def run(self, token: CancellationToken | None = None) -> T:
        """Execute the request until it succeeds or a retrier concedes.

        Args:
            token: Optional token to cancel the run cooperatively.

        Returns:
            The decoded response body.

        Raises:
            TransportError: If the last attempt produced no response.
            ValidationError: If a validator rejected the last response.
            DecodeError: If the last response body could not be decoded.
            CancellationError: If the run was cancelled through ``token``.
            Exception: Any error raised by an adaptor or a retrier.
        """
        token = token if token is not None else CancellationToken()
        adaptor = ZipAdaptor(self.adaptors, token)
        validator = ZipValidator(self.validators, token)
        retrier = ZipRetrier(self.retriers, token)
        start_time = time.time()
        previous_attempts = 0

        while True:
            adapted: WireRequest | None = None
            response: httpx.Response | None = None
            try:
                token.raise_if_cancelled()
                adapted = await adaptor.adapt(self.wire_request, self.transport)
                token.raise_if_cancelled()

                invoke_on_request(self.on_request, request=adapted, attempt=previous_attempts)
                log_structured(
                    logger,
                    logging.DEBUG,
                    f"Dispatching {adapted.method} request to {adapted.url}",
                    url=adapted.url,
                    method=adapted.method.value,
                    attempt=previous_attempts + 1,
                )
                response = await self.transport.send(adapted)
                token.raise_if_cancelled()

                body = response.content
                result = await validator.validate(response, adapted, body)
                result.get()
                token.raise_if_cancelled()

                value = self.decoder.decode(body, self.expecting)
            except Exception as exc:  # noqa: BLE001
                error = exc
            else:
                log_structured(
                    logger,
                    logging.DEBUG,
                    f"{adapted.method} request to {adapted.url} succeeded",
                    url=adapted.url,
                    method=adapted.method.value,
                    attempt=previous_attempts + 1,
                    status_code=response.status_code,
                )
                invoke_on_success(
                    self.on_success,
                    request=adapted,
                    attempt=previous_attempts,
                    response=response,
                    start_time=start_time,
                )
                return value

            previous_attempts += 1
            failed = adapted if adapted is not None else self.wire_request
            try:
                decision = await retrier.retry(
                    failed, self.transport, response, error, previous_attempts
                )
                if not decision.should_retry:
                    log_structured(
                        logger,
                        logging.DEBUG,
                        f"{failed.method} request to {failed.url} failed after "
                        f"{previous_attempts} attempt(s): {error!r}",
                        url=failed.url,
                        method=failed.method.value,
                        attempt=previous_attempts,
                        status_code=None if response is None else response.status_code,
                    )
                    raise error

                delay = decision.delay if decision.action is RetryAction.RETRY_AFTER_DELAY else 0.0
                log_structured(
                    logger,
                    logging.DEBUG,
                    f"{failed.method} request to {failed.url} failed ({error!r}), "
                    f"retrying in {delay:.2f}s",
                    url=failed.url,
                    method=failed.method.value,
                    attempt=previous_attempts,
                    delay=delay,
                    status_code=None if response is None else response.status_code,
                )
                invoke_on_retry(
                    self.on_retry,
                    request=failed,
                    previous_attempts=previous_attempts,
                    delay=delay,
                    error=error,
                    response=response,
                )
                await token.sleep(delay)
            except Exception as exc:
                invoke_on_failure(
                    self.on_failure,
                    request=failed,
                    attempt=previous_attempts,
                    error=exc,
                    response=response,
                    start_time=start_time,
                )
                raise
