"""
Exceptions raised by the remote model clients.

They carry the HTTP status of the failed call (when there was one) in
`status_code`, which is what the transient-error classifier reads. They
never leave the retry engine: it wraps them into a ServiceError.
"""

from typing import Optional


class LLMClientError(Exception):
    """
    Base exception for all LLM client errors.

    All client-specific exceptions inherit from this to allow catching
    any remote-call failure with a single except clause.
    """
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: dict | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class LLMServiceError(LLMClientError):
    """
    Raised when the remote service answered with an error status.

    503 means the model is overloaded and is the only status the retry
    engine retries; 4xx and other 5xx are terminal.
    """
    pass


class LLMConnectionError(LLMClientError):
    """
    Raised when the remote service could not be reached.

    No status code: the retry engine treats it as terminal.
    """
    pass


class LLMTimeoutError(LLMConnectionError):
    """Raised when a single remote call exceeds the client timeout."""
    pass
