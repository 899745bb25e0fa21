"""
Backoff policy and cancellable delay.

backoff_delay() is exponential with jitter: the ceiling doubles each attempt
up to max_delay, and the actual delay is drawn uniformly between half the
base delay and that ceiling, so concurrent callers that failed together do
not retry together.
"""

import asyncio
import random
from dataclasses import dataclass
from typing import Optional

from code_reviewer.models.llm_models import RetryPolicy
from code_reviewer.retry.exceptions import ReviewCancelledError


@dataclass(frozen=True)
class RetrySchedule:
    """Delay to wait after a failed attempt (1-based)."""

    attempt: int
    delay_ms: int


def backoff_delay(
    attempt: int,
    base_delay: int,
    max_delay: int,
    rng: Optional[random.Random] = None,
) -> int:
    """
    Delay in milliseconds before the attempt after `attempt`.

    Args:
        attempt: 1-based number of the attempt that just failed
        base_delay: Base delay in ms (> 0)
        max_delay: Cap in ms (>= base_delay)
        rng: Random source, module-level `random` when None

    Returns:
        A delay in [min(base_delay / 2, exp), exp] with
        exp = min(max_delay, base_delay * 2 ** (attempt - 1))
    """
    exp = min(max_delay, base_delay * 2 ** (attempt - 1))
    floor = base_delay / 2
    if exp < floor:
        return round(exp)
    draw = (rng or random).uniform(floor, exp)
    return round(draw)


def schedule_for(attempt: int, policy: RetryPolicy, rng: Optional[random.Random] = None) -> RetrySchedule:
    return RetrySchedule(
        attempt=attempt,
        delay_ms=backoff_delay(attempt, policy.base_delay_ms, policy.max_delay_ms, rng),
    )


async def cancellable_sleep(delay_ms: int, cancel_event: Optional[asyncio.Event] = None) -> None:
    """
    Suspend the current task for `delay_ms` without blocking the loop.

    Raises:
        ReviewCancelledError: `cancel_event` was set before or during the wait
    """
    if cancel_event is None:
        await asyncio.sleep(delay_ms / 1000)
        return
    if cancel_event.is_set():
        raise ReviewCancelledError("Review cancelled before backoff wait")
    try:
        await asyncio.wait_for(cancel_event.wait(), timeout=delay_ms / 1000)
    except asyncio.TimeoutError:
        return
    raise ReviewCancelledError("Review cancelled during backoff wait")
