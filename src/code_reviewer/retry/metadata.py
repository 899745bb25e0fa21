"""
Per-attempt outcomes and invocation metadata.

AttemptOutcome is a tagged union: each attempt yields either an
AttemptSuccess or an AttemptFailure, and the engine folds it into the next
decision. InvocationMetadata summarizes a whole invoke() for logs and for
the terminal error.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union


@dataclass(frozen=True)
class AttemptSuccess:
    """Remote call returned; `raw_response` is still provider-shaped."""

    raw_response: Any


@dataclass(frozen=True)
class AttemptFailure:
    """
    Remote call raised.

    Attributes:
        status_code: Resolved status, None when the failure carried none
        message: Human-readable message resolved from the failure
        cause: The exception itself
        retryable: Classifier verdict
    """

    status_code: Optional[int]
    message: str
    cause: BaseException
    retryable: bool = False


AttemptOutcome = Union[AttemptSuccess, AttemptFailure]


@dataclass(frozen=True)
class InvocationMetadata:
    """
    Summary of one RetryEngine.invoke() call.

    Attributes:
        attempts: Remote calls made (1..max_attempts)
        waits_ms: Backoff delays actually waited, in order
        total_latency_ms: Wall time from first call to result
        final_status_code: Status of the last failure, None on success
    """

    attempts: int
    waits_ms: list[int] = field(default_factory=list)
    total_latency_ms: int = 0
    final_status_code: Optional[int] = None

    def __post_init__(self) -> None:
        if self.attempts < 0:
            raise ValueError("attempts must be >= 0")
        if len(self.waits_ms) > max(self.attempts - 1, 0):
            raise ValueError("cannot wait more often than attempts - 1")
        if self.total_latency_ms < 0:
            raise ValueError("total_latency_ms must be >= 0")
