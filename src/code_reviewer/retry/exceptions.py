"""
Errors that cross the review service boundary.

Every remote failure is wrapped into a ServiceError at a single point, the
RetryEngine, so callers only ever deal with `status_code` and `message`.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from code_reviewer.retry.metadata import InvocationMetadata


class ServiceError(Exception):
    """
    Terminal review failure.

    Attributes:
        status_code: HTTP status the API layer should answer with
        message: Human-readable message, safe to show to callers
        cause: Original failure, kept for logs only
    """

    default_status_code = 500
    error_code = "service_error"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code if status_code is not None else self.default_status_code
        self.cause = cause

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code}, message={self.message!r})"


class InputError(ServiceError):
    """Missing or empty code. Raised before any remote call, never retried."""

    default_status_code = 400
    error_code = "invalid_input"


class RemoteServiceError(ServiceError):
    """
    Remote call failed for good.

    Carries the invocation metadata (attempts, waits) for diagnostics.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
        metadata: Optional["InvocationMetadata"] = None,
    ) -> None:
        super().__init__(message, status_code, cause)
        self.metadata = metadata

    @property
    def attempts(self) -> int:
        return self.metadata.attempts if self.metadata else 0


class FatalServiceError(RemoteServiceError):
    """Non-retryable remote failure (anything but 503), surfaced at once."""

    error_code = "ai_service_error"


class ExhaustedServiceError(RemoteServiceError):
    """Failure was still retryable when max_attempts ran out."""

    error_code = "ai_service_unavailable"


class ReviewCancelledError(ServiceError):
    """Caller gave up (cancel signal or deadline) before a result was ready."""

    default_status_code = 499
    error_code = "review_cancelled"
