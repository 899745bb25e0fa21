"""
Resilient request layer.

Retries remote generation calls that fail with "service overloaded" (503)
using exponential backoff with jitter, bounded by a maximum number of
attempts, and wraps every terminal failure into a ServiceError.

Main Components:
    - RetryEngine: Attempt loop (the resilient invoker)
    - backoff_delay / cancellable_sleep: Backoff policy and delay
    - is_retryable / resolve_status_code: Transient-error classifier
    - ServiceError and subclasses: Errors crossing the service boundary

Usage:
    >>> from code_reviewer.retry import RetryEngine
    >>> engine = RetryEngine(gemini_client)
    >>> raw = await engine.invoke(params, policy, cancel_event)
"""

from code_reviewer.retry.backoff import RetrySchedule, backoff_delay, cancellable_sleep, schedule_for
from code_reviewer.retry.classifier import SERVICE_OVERLOADED, is_retryable, resolve_status_code
from code_reviewer.retry.engine import RetryEngine
from code_reviewer.retry.exceptions import (
    ExhaustedServiceError,
    FatalServiceError,
    InputError,
    RemoteServiceError,
    ReviewCancelledError,
    ServiceError,
)
from code_reviewer.retry.metadata import (
    AttemptFailure,
    AttemptOutcome,
    AttemptSuccess,
    InvocationMetadata,
)

__all__ = [
    "RetryEngine",
    "RetrySchedule",
    "backoff_delay",
    "cancellable_sleep",
    "schedule_for",
    "SERVICE_OVERLOADED",
    "is_retryable",
    "resolve_status_code",
    "ServiceError",
    "InputError",
    "RemoteServiceError",
    "FatalServiceError",
    "ExhaustedServiceError",
    "ReviewCancelledError",
    "AttemptFailure",
    "AttemptOutcome",
    "AttemptSuccess",
    "InvocationMetadata",
]
