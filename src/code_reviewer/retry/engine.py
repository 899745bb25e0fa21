"""
Resilient invoker for remote generation calls.

The RetryEngine makes at most `max_attempts` calls. A call that fails with
a retryable status (503, model overloaded) is followed by a jittered
exponential backoff wait and another attempt; any other failure, or a
retryable one on the last attempt, ends the loop. This is also the single
place where remote failures become ServiceError.

State machine:
    Attempting(n) --ok--------------------------------> Succeeded
    Attempting(n) --503, n < max--> Waiting --> Attempting(n + 1)
    Attempting(n) --other / n == max----------------> ExhaustedOrFatal

Usage:
    engine = RetryEngine(client)
    raw = await engine.invoke(params, RetryPolicy(max_attempts=5))
"""

import asyncio
import random
import time
from typing import Any, Awaitable, Callable, Optional

import structlog

from code_reviewer.llm.base_client import BaseLLMClient
from code_reviewer.models.llm_models import ModelInvocationParams, RetryPolicy
from code_reviewer.monitoring.metrics import retries_total
from code_reviewer.retry.backoff import cancellable_sleep, schedule_for
from code_reviewer.retry.classifier import is_retryable, resolve_status_code
from code_reviewer.retry.exceptions import (
    ExhaustedServiceError,
    FatalServiceError,
    RemoteServiceError,
    ReviewCancelledError,
)
from code_reviewer.retry.metadata import (
    AttemptFailure,
    AttemptOutcome,
    AttemptSuccess,
    InvocationMetadata,
)

logger = structlog.get_logger(__name__)

SleepFunc = Callable[[int, Optional[asyncio.Event]], Awaitable[None]]

UNKNOWN_ERROR_MESSAGE = "Unknown AI service error"
DEFAULT_FAILURE_STATUS = 500


def resolve_message(failure: BaseException) -> str:
    """Human-readable message: `message` attribute, str(), repr(), placeholder."""
    message = getattr(failure, "message", None)
    if isinstance(message, str) and message.strip():
        return message
    text = str(failure)
    if text.strip():
        return text
    return repr(failure) or UNKNOWN_ERROR_MESSAGE


class RetryEngine:
    """
    Invoke a BaseLLMClient with bounded retries on transient overload.

    Attributes:
        client: Remote generation client
        default_policy: Policy used when invoke() gets none
    """

    def __init__(
        self,
        client: BaseLLMClient,
        default_policy: Optional[RetryPolicy] = None,
        sleep: SleepFunc = cancellable_sleep,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            client: Remote generation client
            default_policy: Fallback policy (5 attempts, 600ms base, 8000ms cap)
            sleep: Cancellable delay, injectable for tests
            rng: Random source for the backoff jitter
        """
        self.client = client
        self.default_policy = default_policy or RetryPolicy()
        self._sleep = sleep
        self._rng = rng

    async def invoke(
        self,
        params: ModelInvocationParams,
        policy: Optional[RetryPolicy] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Any:
        """
        Call the remote model until it succeeds or retrying stops making sense.

        Args:
            params: Model + prompt, identical for every attempt
            policy: Attempt bound and backoff tuning
            cancel_event: Set by the caller to abandon the call and any pending wait

        Returns:
            The raw provider response of the first successful attempt

        Raises:
            FatalServiceError: Non-retryable failure
            ExhaustedServiceError: Still failing with 503 after max_attempts calls
            ReviewCancelledError: cancel_event was set
        """
        policy = policy or self.default_policy
        start = time.perf_counter()
        waits_ms: list[int] = []
        attempt = 0

        for attempt in range(1, policy.max_attempts + 1):
            if cancel_event is not None and cancel_event.is_set():
                raise self._cancelled(attempt - 1, waits_ms, start)

            outcome = await self._attempt(params, cancel_event, attempt - 1, waits_ms, start)

            if isinstance(outcome, AttemptSuccess):
                logger.info(
                    "Remote call succeeded",
                    model=params.model,
                    attempt=attempt,
                    waits_ms=waits_ms,
                )
                return outcome.raw_response

            if not outcome.retryable:
                raise self._terminal(FatalServiceError, outcome, attempt, waits_ms, start)

            if attempt >= policy.max_attempts:
                break

            schedule = schedule_for(attempt, policy, self._rng)
            logger.warning(
                "AI model overloaded, backing off",
                status_code=outcome.status_code,
                attempt=attempt,
                max_attempts=policy.max_attempts,
                delay_ms=schedule.delay_ms,
            )
            retries_total.labels(status_code=str(outcome.status_code)).inc()
            try:
                await self._sleep(schedule.delay_ms, cancel_event)
            except ReviewCancelledError as e:
                raise self._cancelled(attempt, waits_ms, start) from e
            waits_ms.append(schedule.delay_ms)

        logger.error(
            "Retries exhausted",
            model=params.model,
            attempts=attempt,
            waits_ms=waits_ms,
        )
        raise self._terminal(ExhaustedServiceError, outcome, attempt, waits_ms, start)

    async def _attempt(
        self,
        params: ModelInvocationParams,
        cancel_event: Optional[asyncio.Event],
        attempts_done: int,
        waits_ms: list[int],
        start: float,
    ) -> AttemptOutcome:
        """Run one remote call, racing it against the cancel event."""
        try:
            if cancel_event is None:
                raw = await self.client.generate(params)
            else:
                raw = await self._generate_unless_cancelled(params, cancel_event, attempts_done, waits_ms, start)
        except ReviewCancelledError:
            raise
        except Exception as e:
            outcome = AttemptFailure(
                status_code=resolve_status_code(e),
                message=resolve_message(e),
                cause=e,
                retryable=is_retryable(e),
            )
            logger.info(
                "Remote call failed",
                attempt=attempts_done + 1,
                status_code=outcome.status_code,
                retryable=outcome.retryable,
                error_type=type(e).__name__,
            )
            return outcome
        return AttemptSuccess(raw_response=raw)

    async def _generate_unless_cancelled(
        self,
        params: ModelInvocationParams,
        cancel_event: asyncio.Event,
        attempts_done: int,
        waits_ms: list[int],
        start: float,
    ) -> Any:
        call = asyncio.ensure_future(self.client.generate(params))
        cancelled = asyncio.ensure_future(cancel_event.wait())
        try:
            await asyncio.wait({call, cancelled}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancelled.cancel()
            if not call.done():
                call.cancel()
        if not call.cancelled() and call.done():
            return call.result()
        raise self._cancelled(attempts_done + 1, waits_ms, start)

    def _terminal(
        self,
        error_class: type[RemoteServiceError],
        outcome: AttemptFailure,
        attempts: int,
        waits_ms: list[int],
        start: float,
    ) -> RemoteServiceError:
        status_code = outcome.status_code or DEFAULT_FAILURE_STATUS
        metadata = InvocationMetadata(
            attempts=attempts,
            waits_ms=list(waits_ms),
            total_latency_ms=_elapsed_ms(start),
            final_status_code=status_code,
        )
        error = error_class(
            f"AI service error: {outcome.message or UNKNOWN_ERROR_MESSAGE}",
            status_code=status_code,
            cause=outcome.cause,
            metadata=metadata,
        )
        error.__cause__ = outcome.cause
        logger.warning(
            "Remote call failed for good",
            error_type=error_class.__name__,
            status_code=status_code,
            attempts=attempts,
            total_latency_ms=metadata.total_latency_ms,
        )
        return error

    def _cancelled(self, attempts: int, waits_ms: list[int], start: float) -> ReviewCancelledError:
        logger.info(
            "Remote invocation cancelled by caller",
            attempts=attempts,
            waits_ms=waits_ms,
            total_latency_ms=_elapsed_ms(start),
        )
        return ReviewCancelledError("Review cancelled before the AI service answered")


def _elapsed_ms(start: float) -> int:
    return max(int((time.perf_counter() - start) * 1000), 0)
