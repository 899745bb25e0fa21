"""
Unit tests for RetryEngine.

Tests the attempt loop, retry classification, terminal error construction
and cancellation with a mocked client and a recording sleep.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from code_reviewer.llm.base_client import BaseLLMClient
from code_reviewer.llm.exceptions import LLMConnectionError, LLMServiceError
from code_reviewer.models.llm_models import ModelInvocationParams, RetryPolicy
from code_reviewer.retry.engine import RetryEngine, resolve_message
from code_reviewer.retry.exceptions import (
    ExhaustedServiceError,
    FatalServiceError,
    ReviewCancelledError,
    ServiceError,
)

PARAMS = ModelInvocationParams(model="gemini-2.5-flash", prompt="Review this code")
POLICY = RetryPolicy(max_attempts=5, base_delay_ms=600, max_delay_ms=8000)


def overloaded() -> LLMServiceError:
    return LLMServiceError("The model is overloaded.", status_code=503)


# ============================================================================
# Attempt loop
# ============================================================================


@pytest.mark.asyncio
async def test_success_first_attempt(mock_llm_client, recording_sleep, candidate_response):
    engine = RetryEngine(mock_llm_client, sleep=recording_sleep)

    raw = await engine.invoke(PARAMS, POLICY)

    assert raw is candidate_response
    mock_llm_client.generate.assert_awaited_once_with(PARAMS)
    assert recording_sleep.calls == []


@pytest.mark.asyncio
async def test_two_overloads_then_success(mock_llm_client, recording_sleep, candidate_response):
    mock_llm_client.generate.side_effect = [overloaded(), overloaded(), candidate_response]
    engine = RetryEngine(mock_llm_client, sleep=recording_sleep)

    raw = await engine.invoke(PARAMS, POLICY)

    assert raw is candidate_response
    assert mock_llm_client.generate.await_count == 3
    assert len(recording_sleep.calls) == 2


@pytest.mark.asyncio
async def test_overloaded_until_exhausted(mock_llm_client, recording_sleep):
    mock_llm_client.generate.side_effect = [overloaded() for _ in range(5)]
    engine = RetryEngine(mock_llm_client, sleep=recording_sleep)

    with pytest.raises(ExhaustedServiceError) as exc_info:
        await engine.invoke(PARAMS, POLICY)

    error = exc_info.value
    assert error.status_code == 503
    assert mock_llm_client.generate.await_count == 5
    assert len(recording_sleep.calls) == 4
    assert error.attempts == 5
    assert error.metadata.waits_ms == recording_sleep.calls
    assert error.message == "AI service error: The model is overloaded."


@pytest.mark.asyncio
async def test_client_error_is_fatal_without_wait(mock_llm_client, recording_sleep):
    mock_llm_client.generate.side_effect = LLMServiceError("API key not valid", status_code=400)
    engine = RetryEngine(mock_llm_client, sleep=recording_sleep)

    with pytest.raises(FatalServiceError) as exc_info:
        await engine.invoke(PARAMS, POLICY)

    assert exc_info.value.status_code == 400
    assert mock_llm_client.generate.await_count == 1
    assert recording_sleep.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [401, 429, 500])
async def test_non_503_statuses_not_retried(mock_llm_client, recording_sleep, status):
    mock_llm_client.generate.side_effect = LLMServiceError("nope", status_code=status)
    engine = RetryEngine(mock_llm_client, sleep=recording_sleep)

    with pytest.raises(FatalServiceError) as exc_info:
        await engine.invoke(PARAMS, POLICY)

    assert exc_info.value.status_code == status
    assert mock_llm_client.generate.await_count == 1


@pytest.mark.asyncio
async def test_overload_then_fatal_stops(mock_llm_client, recording_sleep):
    mock_llm_client.generate.side_effect = [overloaded(), LLMServiceError("bad", status_code=400)]
    engine = RetryEngine(mock_llm_client, sleep=recording_sleep)

    with pytest.raises(FatalServiceError) as exc_info:
        await engine.invoke(PARAMS, POLICY)

    assert exc_info.value.status_code == 400
    assert mock_llm_client.generate.await_count == 2
    assert len(recording_sleep.calls) == 1


@pytest.mark.asyncio
async def test_unknown_status_defaults_to_500(mock_llm_client, recording_sleep):
    cause = LLMConnectionError("Network error: connection reset")
    mock_llm_client.generate.side_effect = cause
    engine = RetryEngine(mock_llm_client, sleep=recording_sleep)

    with pytest.raises(FatalServiceError) as exc_info:
        await engine.invoke(PARAMS, POLICY)

    error = exc_info.value
    assert error.status_code == 500
    assert error.cause is cause
    assert error.__cause__ is cause
    assert isinstance(error, ServiceError)
    assert mock_llm_client.generate.await_count == 1


@pytest.mark.asyncio
async def test_single_attempt_policy_never_waits(mock_llm_client, recording_sleep):
    mock_llm_client.generate.side_effect = overloaded()
    engine = RetryEngine(mock_llm_client, sleep=recording_sleep)

    with pytest.raises(ExhaustedServiceError):
        await engine.invoke(PARAMS, RetryPolicy(max_attempts=1))

    assert mock_llm_client.generate.await_count == 1
    assert recording_sleep.calls == []


@pytest.mark.asyncio
async def test_waits_respect_policy_cap(mock_llm_client, recording_sleep):
    mock_llm_client.generate.side_effect = [overloaded() for _ in range(8)]
    engine = RetryEngine(mock_llm_client, sleep=recording_sleep)

    with pytest.raises(ExhaustedServiceError):
        await engine.invoke(PARAMS, RetryPolicy(max_attempts=8, base_delay_ms=100, max_delay_ms=400))

    assert len(recording_sleep.calls) == 7
    assert all(50 <= delay <= 400 for delay in recording_sleep.calls)


@pytest.mark.asyncio
async def test_default_policy_used_when_none_given(mock_llm_client, recording_sleep):
    mock_llm_client.generate.side_effect = [overloaded() for _ in range(2)]
    engine = RetryEngine(mock_llm_client, default_policy=RetryPolicy(max_attempts=2), sleep=recording_sleep)

    with pytest.raises(ExhaustedServiceError):
        await engine.invoke(PARAMS)

    assert mock_llm_client.generate.await_count == 2


# ============================================================================
# Cancellation
# ============================================================================


@pytest.mark.asyncio
async def test_cancel_before_first_attempt(mock_llm_client, recording_sleep):
    event = asyncio.Event()
    event.set()
    engine = RetryEngine(mock_llm_client, sleep=recording_sleep)

    with pytest.raises(ReviewCancelledError):
        await engine.invoke(PARAMS, POLICY, cancel_event=event)

    mock_llm_client.generate.assert_not_awaited()


@pytest.mark.asyncio
async def test_cancel_during_backoff_stops_retrying(mock_llm_client):
    mock_llm_client.generate.side_effect = [overloaded() for _ in range(5)]
    event = asyncio.Event()

    async def sleep_then_cancel(delay_ms, cancel_event=None):
        cancel_event.set()
        raise ReviewCancelledError("cancelled during wait")

    engine = RetryEngine(mock_llm_client, sleep=sleep_then_cancel)

    with pytest.raises(ReviewCancelledError) as exc_info:
        await engine.invoke(PARAMS, POLICY, cancel_event=event)

    assert exc_info.value.status_code == 499
    assert mock_llm_client.generate.await_count == 1


@pytest.mark.asyncio
async def test_cancel_abandons_in_flight_call():
    started = asyncio.Event()
    abandoned = asyncio.Event()

    class HangingClient(BaseLLMClient):
        async def generate(self, params):
            started.set()
            try:
                await asyncio.sleep(60)
            except asyncio.CancelledError:
                abandoned.set()
                raise

        async def health_check(self):
            return True

    event = asyncio.Event()
    engine = RetryEngine(HangingClient(base_url="https://gemini.test"))
    invocation = asyncio.ensure_future(engine.invoke(PARAMS, POLICY, cancel_event=event))
    await started.wait()
    event.set()

    with pytest.raises(ReviewCancelledError):
        await asyncio.wait_for(invocation, timeout=5)
    await asyncio.wait_for(abandoned.wait(), timeout=5)


@pytest.mark.asyncio
async def test_real_cancellable_sleep_with_event(mock_llm_client, candidate_response):
    mock_llm_client.generate.side_effect = [overloaded(), candidate_response]
    engine = RetryEngine(mock_llm_client)

    raw = await engine.invoke(
        PARAMS,
        RetryPolicy(max_attempts=2, base_delay_ms=2, max_delay_ms=4),
        cancel_event=asyncio.Event(),
    )

    assert raw is candidate_response


@pytest.mark.asyncio
async def test_task_cancellation_is_not_wrapped(recording_sleep):
    client = AsyncMock(spec=BaseLLMClient)
    client.generate = AsyncMock(side_effect=asyncio.CancelledError())
    engine = RetryEngine(client, sleep=recording_sleep)

    with pytest.raises(asyncio.CancelledError):
        await engine.invoke(PARAMS, POLICY)


# ============================================================================
# Message resolution
# ============================================================================


class TestResolveMessage:

    def test_message_attribute(self):
        assert resolve_message(LLMServiceError("overloaded", status_code=503)) == "overloaded"

    def test_str_of_exception(self):
        assert resolve_message(RuntimeError("socket closed")) == "socket closed"

    def test_repr_when_str_empty(self):
        assert resolve_message(RuntimeError()) == "RuntimeError()"
