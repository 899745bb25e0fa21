"""
Review orchestrator.

Validates the request, builds the prompt, runs it through the RetryEngine
and normalizes the raw response into a ReviewResult. Errors from the engine
are already ServiceErrors and propagate unchanged.
"""

import asyncio
from typing import Optional

import structlog

from code_reviewer.llm.prompt_builder import PromptBuilder
from code_reviewer.llm.response_normalizer import extract_text
from code_reviewer.models.llm_models import RetryPolicy
from code_reviewer.models.review_models import ReviewRequest, ReviewResult
from code_reviewer.monitoring.metrics import service_errors_total
from code_reviewer.retry.engine import RetryEngine
from code_reviewer.retry.exceptions import InputError, ServiceError

logger = structlog.get_logger(__name__)


class ReviewService:
    """
    Single entry point of the review core.

    Attributes:
        engine: Resilient invoker for the remote model
        prompt_builder: Builds the invocation params from a request
        policy: Retry policy applied to every review
    """

    def __init__(
        self,
        engine: RetryEngine,
        prompt_builder: PromptBuilder,
        policy: Optional[RetryPolicy] = None,
    ):
        self.engine = engine
        self.prompt_builder = prompt_builder
        self.policy = policy or RetryPolicy()

    async def review(
        self,
        request: ReviewRequest,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ReviewResult:
        """
        Review one code snippet.

        Args:
            request: Code and language
            cancel_event: Set by the caller to stop waiting/retrying

        Returns:
            ReviewResult with the Markdown review

        Raises:
            InputError: Code is missing or blank (no remote call is made)
            ServiceError: Remote failure, as raised by the RetryEngine
        """
        if not request.has_code:
            service_errors_total.labels(error_type=InputError.__name__).inc()
            raise InputError("Code input is required")

        params = self.prompt_builder.build_params(request)
        logger.info(
            "Review requested",
            language=request.language,
            code_length=len(request.code),
            model=params.model,
            max_attempts=self.policy.max_attempts,
        )

        try:
            raw = await self.engine.invoke(params, self.policy, cancel_event)
        except ServiceError as e:
            service_errors_total.labels(error_type=type(e).__name__).inc()
            raise

        text = extract_text(raw)
        logger.info("Review completed", review_length=len(text))
        return ReviewResult(text=text)
