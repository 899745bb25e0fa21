"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

from typing import Any, Dict

import pytest

from code_reviewer.config import Settings
from code_reviewer.models.review_models import ReviewRequest


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.REVIEW_MAX_ATTEMPTS = 2
    """
    return Settings(
        # === Application ===
        APP_NAME="Code Review Service (Test)",
        APP_VERSION="0.1.0",
        DEBUG=True,
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Gemini ===
        GEMINI_API_KEY="test-key",
        GEMINI_MODEL="gemini-2.5-flash",
        GEMINI_BASE_URL="https://gemini.test",
        GEMINI_TIMEOUT=5,

        # === Retry ===
        REVIEW_MAX_ATTEMPTS=5,
        REVIEW_BASE_DELAY_MS=1,
        REVIEW_MAX_DELAY_MS=4,
        REVIEW_TIMEOUT_SECONDS=30.0,

        PROMETHEUS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )


@pytest.fixture
def candidate_response() -> Dict[str, Any]:
    """Gemini generateContent response with a two-part candidate."""
    return {
        "candidates": [
            {
                "content": {
                    "parts": [
                        {"text": "## 1. Summary\nPrints the number 1."},
                        {"text": "## 9. Verdict\nShip it."},
                    ],
                    "role": "model",
                },
                "finishReason": "STOP",
                "index": 0,
            }
        ],
        "usageMetadata": {"promptTokenCount": 210, "candidatesTokenCount": 42},
        "modelVersion": "gemini-2.5-flash",
    }


@pytest.fixture
def overloaded_error_body() -> Dict[str, Any]:
    """Gemini error payload for model overload."""
    return {
        "error": {
            "code": 503,
            "message": "The model is overloaded. Please try again later.",
            "status": "UNAVAILABLE",
        }
    }


@pytest.fixture
def sample_review_request() -> ReviewRequest:
    return ReviewRequest(code="console.log(1)", language="javascript")
