r"""Payloads and helpers for the request lifecycle hooks.

``Request.run`` reports its progress through four optional hooks:

- on_request: before every dispatch, with the adapted request
- on_retry: once the retry chain chose to retry, before the wait
- on_success: when the decoded value is about to be returned
- on_failure: when the terminal error is about to be raised

Nothing else about intermediate attempts reaches the caller of
``Request.run``.

Example:
    ```pycon
    >>> from aexchange import Client
    >>> from aexchange.callbacks import RetryInfo
    >>> from aexchange.core import ClientConfig
    >>> def log_retry(info: RetryInfo) -> None:
    ...     print(f"Retry #{info.attempt} in {info.delay:.2f}s")
    ...
    >>> client = Client(config=ClientConfig(on_retry=log_retry))

    ```
"""

from __future__ import annotations

__all__ = [
    "FailureInfo",
    "RequestInfo",
    "ResponseInfo",
    "RetryInfo",
    "invoke_on_failure",
    "invoke_on_request",
    "invoke_on_retry",
    "invoke_on_success",
]

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from aexchange.wire import WireRequest


@dataclass
class RequestInfo:
    """Payload of ``on_request``.

    Attributes:
        request: The adapted request that is about to be sent.
        attempt: Which attempt this dispatch is, counting from 1.
    """

    request: WireRequest
    attempt: int


@dataclass
class RetryInfo:
    """Payload of ``on_retry``.

    Attributes:
        request: The request whose attempt failed.
        attempt: Which attempt comes next, counting from 1, so the
            first retry reports 2.
        delay: Seconds to wait before that attempt, ``0.0`` when the
            retry is immediate.
        error: The failure the retry chain reacted to.
        status_code: Status of the failed response, ``None`` when no
            response was received.
    """

    request: WireRequest
    attempt: int
    delay: float
    error: Exception
    status_code: int | None


@dataclass
class ResponseInfo:
    """Payload of ``on_success``.

    Attributes:
        request: The adapted request whose response was accepted.
        attempt: Which attempt succeeded, counting from 1.
        response: The accepted response.
        total_time: Seconds elapsed since the run started, waits
            included.
    """

    request: WireRequest
    attempt: int
    response: httpx.Response
    total_time: float


@dataclass
class FailureInfo:
    """Payload of ``on_failure``.

    Attributes:
        request: The request of the last attempt.
        attempt: How many attempts were made.
        error: The error the run is about to raise.
        status_code: Status of the last response, ``None`` when no
            response was received.
        total_time: Seconds elapsed since the run started, waits
            included.
    """

    request: WireRequest
    attempt: int
    error: Exception
    status_code: int | None
    total_time: float


def _status_code(response: httpx.Response | None) -> int | None:
    return None if response is None else response.status_code


def invoke_on_request(
    on_request: Callable[[RequestInfo], None] | None,
    *,
    request: WireRequest,
    attempt: int,
) -> None:
    """Call ``on_request``, unless it is ``None``.

    Args:
        on_request: The hook.
        request: The adapted request.
        attempt: How many attempts preceded this one. The hook sees
            ``attempt + 1``.
    """
    if on_request is None:
        return
    on_request(RequestInfo(request=request, attempt=attempt + 1))


def invoke_on_retry(
    on_retry: Callable[[RetryInfo], None] | None,
    *,
    request: WireRequest,
    previous_attempts: int,
    delay: float,
    error: Exception,
    response: httpx.Response | None,
) -> None:
    """Call ``on_retry``, unless it is ``None``.

    Args:
        on_retry: The hook.
        request: The request whose attempt failed.
        previous_attempts: How many attempts were made so far. The hook
            sees the number of the upcoming attempt.
        delay: Seconds to wait before the upcoming attempt.
        error: The failure that led to the retry.
        response: The failed response, if one was received.
    """
    if on_retry is None:
        return
    on_retry(
        RetryInfo(
            request=request,
            attempt=previous_attempts + 1,
            delay=delay,
            error=error,
            status_code=_status_code(response),
        )
    )


def invoke_on_success(
    on_success: Callable[[ResponseInfo], None] | None,
    *,
    request: WireRequest,
    attempt: int,
    response: httpx.Response,
    start_time: float,
) -> None:
    """Call ``on_success``, unless it is ``None``.

    Args:
        on_success: The hook.
        request: The adapted request of the successful attempt.
        attempt: How many attempts preceded the successful one.
        response: The accepted response.
        start_time: ``time.time()`` when the run started.
    """
    if on_success is None:
        return
    elapsed = time.time() - start_time
    on_success(
        ResponseInfo(request=request, attempt=attempt + 1, response=response, total_time=elapsed)
    )


def invoke_on_failure(
    on_failure: Callable[[FailureInfo], None] | None,
    *,
    request: WireRequest,
    attempt: int,
    error: Exception,
    response: httpx.Response | None,
    start_time: float,
) -> None:
    """Call ``on_failure``, unless it is ``None``.

    Args:
        on_failure: The hook.
        request: The request of the last attempt.
        attempt: How many attempts were made.
        error: The error about to be raised.
        response: The last response, if one was received.
        start_time: ``time.time()`` when the run started.
    """
    if on_failure is None:
        return
    elapsed = time.time() - start_time
    on_failure(
        FailureInfo(
            request=request,
            attempt=attempt,
            error=error,
            status_code=_status_code(response),
            total_time=elapsed,
        )
    )
