"""
Gemini client implementation for remote generation.

Communicates with the Generative Language REST API using httpx AsyncClient.
One call per `generate`; retrying is left to the RetryEngine so that the
retry decision lives in a single place.
"""

import json
import time
from typing import Any, Optional

import httpx
import structlog

from code_reviewer.llm.base_client import BaseLLMClient
from code_reviewer.llm.exceptions import (
    LLMConnectionError,
    LLMServiceError,
    LLMTimeoutError,
)
from code_reviewer.models.llm_models import ModelInvocationParams
from code_reviewer.monitoring.metrics import llm_latency_seconds


logger = structlog.get_logger(__name__)


class GeminiClient(BaseLLMClient):
    """
    Gemini client using httpx for async HTTP communication.

    API Endpoints:
    - POST /v1beta/models/{model}:generateContent: Generate content
    - GET /v1beta/models: List models (used as health check)

    Features:
    - Connection pooling via persistent AsyncClient
    - Provider error payloads mapped to LLMServiceError with the HTTP status
    - Raw JSON response returned untouched
    """

    API_VERSION = "v1beta"

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://generativelanguage.googleapis.com",
        timeout: int = 60,
        connection_limits: Optional[httpx.Limits] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Gemini client.

        Args:
            api_key: Gemini API key (None: calls go out unauthenticated and fail remotely)
            base_url: API root URL
            timeout: Per-call timeout in seconds
            connection_limits: httpx connection pool limits (default: 10 max connections)
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        super().__init__(base_url, timeout)
        self._api_key = api_key
        self._transport = transport
        self._connection_limits = connection_limits or httpx.Limits(
            max_keepalive_connections=5,
            max_connections=10,
            keepalive_expiry=30.0,
        )
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def has_api_key(self) -> bool:
        return bool(self._api_key)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {"Content-Type": "application/json"}
            if self._api_key:
                headers["x-goog-api-key"] = self._api_key
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                limits=self._connection_limits,
                headers=headers,
                transport=self._transport,
            )
            logger.debug("Created new httpx AsyncClient")
        return self._client

    async def generate(self, params: ModelInvocationParams) -> Any:
        """
        Generate content using the Gemini API.

        POST /v1beta/models/{model}:generateContent with payload:
        {
            "contents": [{"role": "user", "parts": [{"text": "..."}]}]
        }

        Response (abridged):
        {
            "candidates": [
                {"content": {"parts": [{"text": "..."}], "role": "model"},
                 "finishReason": "STOP"}
            ],
            "usageMetadata": {...},
            "modelVersion": "gemini-2.5-flash"
        }

        Error payload:
        {"error": {"code": 503, "message": "The model is overloaded.", "status": "UNAVAILABLE"}}
        """
        payload = {"contents": [{"role": "user", "parts": [{"text": params.prompt}]}]}
        path = f"/{self.API_VERSION}/models/{params.model}:generateContent"

        logger.info(
            "Sending generation request to Gemini",
            model=params.model,
            prompt_length=len(params.prompt),
        )

        start_time = time.perf_counter()
        try:
            client = await self._get_client()
            response = await client.post(path, json=payload)
            response.raise_for_status()
            data = response.json()

        except httpx.TimeoutException as e:
            self._observe(params.model, start_time, success=False)
            logger.warning("Gemini request timeout", timeout=self.timeout, error=str(e))
            raise LLMTimeoutError(
                f"Request timeout after {self.timeout}s",
                details={"timeout": self.timeout},
            ) from e

        except httpx.HTTPStatusError as e:
            self._observe(params.model, start_time, success=False)
            status_code = e.response.status_code
            message = _provider_error_message(e.response)
            logger.warning(
                "Gemini HTTP error",
                status_code=status_code,
                error_message=message,
            )
            raise LLMServiceError(
                message,
                status_code=status_code,
                details={"status": status_code},
            ) from e

        except httpx.TransportError as e:
            self._observe(params.model, start_time, success=False)
            logger.warning("Gemini network error", error=str(e), error_type=type(e).__name__)
            raise LLMConnectionError(
                f"Network error: {e}",
                details={"error_type": type(e).__name__},
            ) from e

        except json.JSONDecodeError as e:
            self._observe(params.model, start_time, success=False)
            logger.error("Failed to parse Gemini response JSON", error=str(e))
            raise LLMServiceError(
                "Invalid JSON response from Gemini",
                details={"parse_error": str(e)},
            ) from e

        latency_ms = self._observe(params.model, start_time, success=True)
        logger.info(
            "Gemini generation successful",
            model=data.get("modelVersion", params.model) if isinstance(data, dict) else params.model,
            latency_ms=latency_ms,
        )
        return data

    async def health_check(self) -> bool:
        """
        Check Gemini reachability via GET /v1beta/models.

        Returns True if the API answers 200 for our key, False otherwise.
        """
        if not self._api_key:
            return False
        try:
            client = await self._get_client()
            response = await client.get(f"/{self.API_VERSION}/models", params={"pageSize": 1}, timeout=5.0)
            response.raise_for_status()
            return True
        except httpx.HTTPError as e:
            logger.warning("Gemini health check failed", error=str(e))
            return False

    async def close(self):
        """Close the HTTP client connection."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed Gemini client connection")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @staticmethod
    def _observe(model: str, start_time: float, success: bool) -> int:
        elapsed = time.perf_counter() - start_time
        llm_latency_seconds.labels(model=model, success=str(success).lower()).observe(elapsed)
        return int(elapsed * 1000)


def _provider_error_message(response: httpx.Response) -> str:
    """Pull `error.message` out of a Gemini error body, else the raw text."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        message = body["error"].get("message")
        if message:
            return str(message)
    text = response.text.strip()
    return text[:500] if text else f"HTTP {response.status_code}"
