"""
Abstract base client for remote text generation.

Defines the interface the retry engine talks to. Implementations return the
provider's raw response unchanged; reading text out of it is the response
normalizer's job.
"""

from abc import ABC, abstractmethod
from typing import Any

import structlog

from code_reviewer.models.llm_models import ModelInvocationParams


logger = structlog.get_logger(__name__)


class BaseLLMClient(ABC):
    """
    Abstract base class for remote generation clients.

    Responsibilities:
    - Send one generation request per `generate` call
    - Raise an LLMClientError subclass carrying the HTTP status on failure

    Does NOT handle:
    - Retries (that's RetryEngine's job)
    - Prompt construction (that's PromptBuilder's job)
    - Text extraction (that's the response normalizer's job)
    """

    def __init__(self, base_url: str, timeout: int = 60):
        """
        Args:
            base_url: Base URL of the generation API
            timeout: Per-call timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        logger.info(
            "Initialized LLM client",
            client_class=self.__class__.__name__,
            base_url=self.base_url,
            timeout=timeout,
        )

    @abstractmethod
    async def generate(self, params: ModelInvocationParams) -> Any:
        """
        Run a single generation call.

        Returns:
            The provider's raw response (opaque to callers)

        Raises:
            LLMServiceError: Remote service answered with an error status
            LLMConnectionError: Network failure
            LLMTimeoutError: Call exceeded the timeout
        """

    @property
    def has_api_key(self) -> bool:
        """Whether credentials are configured. Clients without auth return True."""
        return True

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Whether the client is usable. Must not raise.
        """

    async def close(self):
        """Release connections. Default implementation does nothing."""
        logger.debug("Closing LLM client", client_class=self.__class__.__name__)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(base_url={self.base_url}, timeout={self.timeout}s)"
