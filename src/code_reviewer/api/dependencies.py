"""
FastAPI dependency injection for the Code Review Service.

Settings and the Gemini client are built once per process; everything that
depends on them is assembled per request from those singletons, so no
component reaches for a hidden global.
"""

from functools import lru_cache

from fastapi import Depends

from code_reviewer.config import Settings
from code_reviewer.llm.base_client import BaseLLMClient
from code_reviewer.llm.gemini_client import GeminiClient
from code_reviewer.llm.prompt_builder import PromptBuilder
from code_reviewer.models.llm_models import RetryPolicy
from code_reviewer.retry.engine import RetryEngine
from code_reviewer.review.service import ReviewService


@lru_cache()
def get_settings() -> Settings:
    """
    Get settings singleton.

    Returns:
        Settings instance
    """
    return Settings()


@lru_cache()
def get_llm_client() -> BaseLLMClient:
    """
    Get singleton Gemini client with connection pooling.

    Returns:
        GeminiClient instance
    """
    settings = get_settings()
    return GeminiClient(
        api_key=settings.GEMINI_API_KEY,
        base_url=settings.GEMINI_BASE_URL,
        timeout=settings.GEMINI_TIMEOUT,
    )


@lru_cache()
def get_prompt_builder() -> PromptBuilder:
    """Get singleton prompt builder (templates are rendered once)."""
    return PromptBuilder(model=get_settings().GEMINI_MODEL)


def get_retry_policy(settings: Settings = Depends(get_settings)) -> RetryPolicy:
    return RetryPolicy(
        max_attempts=settings.REVIEW_MAX_ATTEMPTS,
        base_delay_ms=settings.REVIEW_BASE_DELAY_MS,
        max_delay_ms=settings.REVIEW_MAX_DELAY_MS,
    )


def get_retry_engine(
    llm_client: BaseLLMClient = Depends(get_llm_client),
    policy: RetryPolicy = Depends(get_retry_policy),
) -> RetryEngine:
    """
    Create retry engine around the client singleton.

    Note: RetryEngine is NOT cached; it holds no per-request state but is
    cheap to build, and building it here keeps overrides simple in tests.
    """
    return RetryEngine(client=llm_client, default_policy=policy)


def get_review_service(
    engine: RetryEngine = Depends(get_retry_engine),
    prompt_builder: PromptBuilder = Depends(get_prompt_builder),
    policy: RetryPolicy = Depends(get_retry_policy),
) -> ReviewService:
    """
    Create the review service with injected dependencies.

    Args:
        engine: Retry engine (injected)
        prompt_builder: Prompt builder singleton (injected)
        policy: Retry policy from settings (injected)

    Returns:
        ReviewService instance
    """
    return ReviewService(engine=engine, prompt_builder=prompt_builder, policy=policy)
