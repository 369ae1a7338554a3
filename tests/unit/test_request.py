from __future__ import annotations

import asyncio
import logging
from unittest.mock import AsyncMock, Mock

import pytest

from aexchange import (
    CancellationError,
    CancellationToken,
    DecodeError,
    HttpMethod,
    Request,
    StatusCodeValidationError,
    TransportError,
    TransportErrorCode,
    WireRequest,
)
from aexchange.adaptors import Adaptor, CollisionStrategy, HeadersAdaptor
from aexchange.callbacks import FailureInfo, RequestInfo
from aexchange.mock import MockRegistry, MockResponse, MockTransport
from aexchange.retriers import BaseRetrier, Retrier, RetryDecision, RetryStrategy
from aexchange.validators import ValidationResult

TEST_URL = "https://mock.example.com/dogs"


def make_request(
    registry: MockRegistry, *responses: MockResponse, expecting: object = list[str]
) -> tuple[Request, MockTransport]:
    transport = MockTransport({TEST_URL: MockResponse.sequence(*responses)}, registry=registry)
    request = Request(WireRequest(TEST_URL, HttpMethod.GET), transport, expecting=expecting)
    return request, transport


def server_error() -> MockResponse:
    return MockResponse.success(b"", status_code=500)


def ok(data: object = ("a", "b")) -> MockResponse:
    return MockResponse.success(list(data) if isinstance(data, tuple) else data)


#############################
#     Tests for Request     #
#############################


def test_request_fluent_methods_return_self(registry: MockRegistry) -> None:
    """Test that the fluent methods return the request itself."""
    request, _ = make_request(registry, ok())
    assert request.adapt(Adaptor(lambda r, t: r)) is request
    assert request.adapt(lambda r, t: r) is request
    assert request.adapt_headers({"Accept": "application/json"}) is request
    assert request.adapt_query_items([("page", "1")]) is request
    assert request.validate(lambda response, r, body: ValidationResult.success()) is request
    assert request.validate_status_code(200) is request
    assert request.retry(lambda r, t, response, error, n: RetryDecision.concede()) is request
    assert request.retry_strategy(attempts=1) is request
    assert len(request.adaptors) == 4
    assert len(request.validators) == 2
    assert len(request.retriers) == 2
    assert isinstance(request.retriers[1], RetryStrategy)
    assert request.retriers[1].config.attempts == 1


@pytest.mark.asyncio
async def test_request_run_success(registry: MockRegistry) -> None:
    """Test a run succeeding on the first attempt."""
    request, transport = make_request(registry, ok())
    assert await request.validate_status_code(range(200, 300)).run() == ["a", "b"]
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_request_run_bytes_by_default(registry: MockRegistry) -> None:
    """Test that the raw body is returned by default."""
    transport = MockTransport({TEST_URL: MockResponse.success(b"raw")}, registry=registry)
    assert await Request(WireRequest(TEST_URL), transport).run() == b"raw"


@pytest.mark.asyncio
async def test_request_run_retries_server_error(
    registry: MockRegistry, mock_token_sleep: AsyncMock
) -> None:
    """Test that a 500 followed by a 200 succeeds after two dispatches."""
    request, transport = make_request(registry, server_error(), ok())
    result = await request.validate_status_code(range(200, 300)).retry_strategy(attempts=3).run()
    assert result == ["a", "b"]
    assert len(transport.requests) == 2
    mock_token_sleep.assert_awaited_once()
    assert 0.0 <= mock_token_sleep.call_args.args[0] <= 2.0


@pytest.mark.asyncio
async def test_request_run_single_attempt(
    registry: MockRegistry, mock_token_sleep: AsyncMock
) -> None:
    """Test that one attempt against a permanent 500 dispatches once."""
    request, transport = make_request(registry, server_error())
    request.validate_status_code(range(200, 300)).retry_strategy(attempts=1)
    with pytest.raises(StatusCodeValidationError) as exc_info:
        await request.run()
    assert exc_info.value.code == 500
    assert len(transport.requests) == 1
    mock_token_sleep.assert_not_called()


@pytest.mark.asyncio
async def test_request_run_exhausts_attempts(
    registry: MockRegistry, mock_token_sleep: AsyncMock
) -> None:
    """Test that a permanent 500 dispatches once per attempt."""
    request, transport = make_request(registry, server_error())
    request.validate_status_code(range(200, 300)).retry_strategy(
        attempts=3, jitter="none", backoff_base=1.0
    )
    with pytest.raises(StatusCodeValidationError):
        await request.run()
    assert len(transport.requests) == 3
    assert [call.args[0] for call in mock_token_sleep.call_args_list] == [1.0, 2.0]


@pytest.mark.asyncio
async def test_request_run_without_validator_accepts_error_status(
    registry: MockRegistry,
) -> None:
    """Test that without validators any status code is decoded."""
    request, transport = make_request(
        registry, MockResponse.success(["oops"], status_code=500)
    )
    assert await request.retry_strategy().run() == ["oops"]
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_request_run_cancelled_in_adaptor(registry: MockRegistry) -> None:
    """Test that cancelling in the first adaptor skips the rest and the
    transport."""
    token = CancellationToken()
    request, transport = make_request(registry, ok())
    second = Mock(side_effect=lambda r, t: r)

    def cancel(r: WireRequest, t: object) -> WireRequest:
        token.cancel()
        return r

    request.adapt(cancel).adapt(second).retry_strategy()
    with pytest.raises(CancellationError):
        await request.run(token)
    second.assert_not_called()
    assert transport.requests == []


@pytest.mark.asyncio
async def test_request_run_cancelled_before_start(registry: MockRegistry) -> None:
    """Test that a cancelled token never reaches the transport."""
    token = CancellationToken()
    token.cancel()
    request, transport = make_request(registry, ok())
    with pytest.raises(CancellationError):
        await request.run(token)
    assert transport.requests == []


@pytest.mark.asyncio
async def test_request_run_cancelled_during_delay(registry: MockRegistry) -> None:
    """Test that cancelling the token ends the delay before a retry."""
    token = CancellationToken()
    request, transport = make_request(registry, server_error(), ok())
    request.validate_status_code(200).retry(
        lambda r, t, response, error, n: RetryDecision.retry_after_delay(30.0)
    )
    asyncio.get_running_loop().call_later(0.01, token.cancel)
    with pytest.raises(CancellationError):
        await request.run(token)
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_request_run_retrier_chain_short_circuit(
    registry: MockRegistry, mock_token_sleep: AsyncMock
) -> None:
    """Test that a conceding retrier defers to the next one."""
    request, transport = make_request(registry, server_error(), ok())
    first = Mock(return_value=RetryDecision.concede())
    second = Mock(return_value=RetryDecision.retry())
    request.validate_status_code(200).retry(first).retry(second)
    assert await request.run() == ["a", "b"]
    assert len(transport.requests) == 2
    first.assert_called_once()
    second.assert_called_once()
    mock_token_sleep.assert_awaited_once_with(0.0)


@pytest.mark.asyncio
async def test_request_run_previous_attempts(
    registry: MockRegistry, mock_token_sleep: AsyncMock
) -> None:
    """Test that the retry chain receives the number of attempts made."""
    request, _ = make_request(registry, server_error())
    handler = Mock(
        side_effect=lambda r, t, response, error, n: (
            RetryDecision.retry() if n < 3 else RetryDecision.concede()
        )
    )
    request.validate_status_code(200).retry(handler)
    with pytest.raises(StatusCodeValidationError):
        await request.run()
    assert [call.args[4] for call in handler.call_args_list] == [1, 2, 3]
    response = handler.call_args.args[2]
    assert response.status_code == 500


@pytest.mark.asyncio
async def test_request_run_adapts_original_request(
    registry: MockRegistry, mock_token_sleep: AsyncMock
) -> None:
    """Test that every attempt adapts the original request."""
    request, transport = make_request(registry, server_error(), ok())
    request.adapt_headers({"X-Trace": "t"}, CollisionStrategy.USE_BOTH_VALUES)
    request.validate_status_code(200).retry(lambda r, t, response, error, n: RetryDecision.retry())
    await request.run()
    assert [r.headers["X-Trace"] for r in transport.requests] == ["t", "t"]
    assert dict(request.wire_request.headers) == {}


@pytest.mark.asyncio
async def test_request_run_concede_reraises_same_error(registry: MockRegistry) -> None:
    """Test that conceding raises the triggering error itself."""
    error = TransportError(TransportErrorCode.BAD_URL)
    request, _ = make_request(registry, ok())
    request.adapt(Mock(side_effect=error)).retry_strategy()
    with pytest.raises(TransportError) as exc_info:
        await request.run()
    assert exc_info.value is error


@pytest.mark.asyncio
async def test_request_run_adaptor_error_reaches_retriers(
    registry: MockRegistry, mock_token_sleep: AsyncMock
) -> None:
    """Test that an adaptor error goes through the retry chain with the
    original request."""
    request, transport = make_request(registry, ok())
    adaptor = Mock(side_effect=[KeyError("token"), WireRequest(TEST_URL)])
    retrier = Mock(return_value=RetryDecision.retry())
    request.adapt(adaptor).retry(retrier)
    assert await request.run() == ["a", "b"]
    assert retrier.call_args.args[0] is request.wire_request
    assert retrier.call_args.args[2] is None
    assert isinstance(retrier.call_args.args[3], KeyError)
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_request_run_transport_error_retried(
    registry: MockRegistry, mock_token_sleep: AsyncMock
) -> None:
    """Test that a transient transport error is retried."""
    request, transport = make_request(
        registry, MockResponse.failure(TransportErrorCode.TIMED_OUT), ok()
    )
    assert await request.retry_strategy().run() == ["a", "b"]
    assert len(transport.requests) == 2


@pytest.mark.asyncio
async def test_request_run_transport_error_not_retried(
    registry: MockRegistry, mock_token_sleep: AsyncMock
) -> None:
    """Test that a permanent transport error is raised at once."""
    request, transport = make_request(
        registry, MockResponse.failure(TransportErrorCode.UNSUPPORTED_URL), ok()
    )
    with pytest.raises(TransportError) as exc_info:
        await request.retry_strategy().run()
    assert exc_info.value.code is TransportErrorCode.UNSUPPORTED_URL
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_request_run_decode_error(registry: MockRegistry) -> None:
    """Test that a body of the wrong type raises DecodeError."""
    request, _ = make_request(registry, ok({"name": "Rex"}))
    with pytest.raises(DecodeError):
        await request.retry_strategy().run()


@pytest.mark.asyncio
async def test_request_run_decode_error_reaches_retriers(
    registry: MockRegistry, mock_token_sleep: AsyncMock
) -> None:
    """Test that a decode error is handed to the retry chain."""
    request, transport = make_request(registry, ok({"name": "Rex"}), ok())
    retrier = Mock(return_value=RetryDecision.retry())
    assert await request.retry(retrier).run() == ["a", "b"]
    assert isinstance(retrier.call_args.args[3], DecodeError)
    assert len(transport.requests) == 2


@pytest.mark.asyncio
async def test_request_run_retrier_error_propagates(registry: MockRegistry) -> None:
    """Test that an error raised by a retrier propagates directly."""
    request, transport = make_request(registry, server_error())
    request.validate_status_code(200).retry(Mock(side_effect=RuntimeError("broken")))
    with pytest.raises(RuntimeError, match=r"broken"):
        await request.run()
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_request_run_task_cancellation_not_caught(registry: MockRegistry) -> None:
    """Test that asyncio task cancellation is not handed to the retry
    chain."""
    request, transport = make_request(registry, ok())
    retrier = Mock(spec=BaseRetrier, retry=AsyncMock(return_value=RetryDecision.retry()))
    request.adapt(Mock(side_effect=asyncio.CancelledError())).retry(retrier)
    with pytest.raises(asyncio.CancelledError):
        await request.run()
    retrier.retry.assert_not_called()


@pytest.mark.asyncio
async def test_request_run_repeatable(registry: MockRegistry) -> None:
    """Test that each run is an independent execution."""
    on_request = Mock()
    request, transport = make_request(registry, ok())
    request.on_request = on_request
    assert await request.run() == ["a", "b"]
    assert await request.run() == ["a", "b"]
    assert len(transport.requests) == 2
    assert [call.args[0].attempt for call in on_request.call_args_list] == [1, 1]


@pytest.mark.asyncio
async def test_request_run_callbacks_on_retry_and_success(
    registry: MockRegistry, mock_token_sleep: AsyncMock
) -> None:
    """Test the callbacks of a run succeeding on the second attempt."""
    on_request, on_retry, on_success, on_failure = Mock(), Mock(), Mock(), Mock()
    transport = MockTransport(
        {TEST_URL: MockResponse.sequence(server_error(), ok())}, registry=registry
    )
    request = Request(
        WireRequest(TEST_URL),
        transport,
        expecting=list[str],
        on_request=on_request,
        on_retry=on_retry,
        on_success=on_success,
        on_failure=on_failure,
    )
    await request.validate_status_code(200).retry_strategy(jitter="none").run()
    assert on_request.call_args_list[0].args[0] == RequestInfo(
        request=WireRequest(TEST_URL), attempt=1
    )
    assert on_request.call_args_list[1].args[0].attempt == 2
    retry_info = on_retry.call_args.args[0]
    assert retry_info.attempt == 2
    assert retry_info.delay == 2.0
    assert retry_info.status_code == 500
    assert retry_info.error == StatusCodeValidationError(500)
    success_info = on_success.call_args.args[0]
    assert success_info.attempt == 2
    assert success_info.response.status_code == 200
    on_failure.assert_not_called()


@pytest.mark.asyncio
async def test_request_run_callbacks_on_failure(registry: MockRegistry) -> None:
    """Test that on_failure receives the terminal error."""
    on_failure, on_success = Mock(), Mock()
    request, _ = make_request(registry, server_error())
    request.on_failure = on_failure
    request.on_success = on_success
    with pytest.raises(StatusCodeValidationError):
        await request.validate_status_code(200).run()
    info = on_failure.call_args.args[0]
    assert isinstance(info, FailureInfo)
    assert info.attempt == 1
    assert info.error == StatusCodeValidationError(500)
    assert info.status_code == 500
    on_success.assert_not_called()


@pytest.mark.asyncio
async def test_request_run_structured_logs(
    registry: MockRegistry, caplog: pytest.LogCaptureFixture
) -> None:
    """Test that each attempt is logged with structured fields."""
    request, _ = make_request(registry, ok())
    with caplog.at_level(logging.DEBUG, logger="aexchange.request"):
        await request.run()
    records = [record for record in caplog.records if record.name == "aexchange.request"]
    assert records[0].url == TEST_URL
    assert records[0].method == "GET"
    assert records[0].attempt == 1
    assert records[-1].status_code == 200


def test_request_repr(registry: MockRegistry) -> None:
    """Test the representation of a request."""
    request, _ = make_request(registry, ok())
    request.adapt(HeadersAdaptor({"Accept": "*/*"}))
    assert repr(request).startswith(f"Request(GET {TEST_URL}, expecting=list[str], adaptors=1")
