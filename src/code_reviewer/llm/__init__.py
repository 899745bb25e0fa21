"""
Remote model client abstraction and helpers.

Components:
- BaseLLMClient: Abstract base class for generation clients
- GeminiClient: Implementation for the Gemini REST API
- PromptBuilder: Builds the review prompt from a ReviewRequest
- response_normalizer: Extracts text from any provider response shape
- exceptions: Client-level exceptions (carry the HTTP status)
"""

from code_reviewer.llm.base_client import BaseLLMClient
from code_reviewer.llm.gemini_client import GeminiClient
from code_reviewer.llm.prompt_builder import PromptBuilder
from code_reviewer.llm.response_normalizer import EXTRACTION_STRATEGIES, extract_text
from code_reviewer.llm.exceptions import (
    LLMClientError,
    LLMConnectionError,
    LLMServiceError,
    LLMTimeoutError,
)

__all__ = [
    "BaseLLMClient",
    "GeminiClient",
    "PromptBuilder",
    "EXTRACTION_STRATEGIES",
    "extract_text",
    "LLMClientError",
    "LLMConnectionError",
    "LLMServiceError",
    "LLMTimeoutError",
]
