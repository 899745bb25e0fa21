"""
Review API routes.

POST /ai/get-review is the only endpoint that reaches the remote model.
Each call gets its own cancel event, armed with the review deadline, so a
request that has timed out stops retrying instead of running on unseen.
"""

import asyncio
import time

import structlog
from fastapi import APIRouter, Depends, status

from code_reviewer.api.dependencies import get_llm_client, get_review_service, get_settings
from code_reviewer.api.models import ErrorResponse, HealthResponse, ReviewBody, ReviewResponse
from code_reviewer.config import Settings
from code_reviewer.llm.base_client import BaseLLMClient
from code_reviewer.monitoring.metrics import review_requests_total
from code_reviewer.review.service import ReviewService

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "/ai/get-review",
    response_model=ReviewResponse,
    status_code=status.HTTP_200_OK,
    summary="Review a code snippet",
    description="""
    Send a code snippet to the AI reviewer and return a Markdown review with
    nine sections (summary, key issues, reproduction, corrected code, patch,
    explanation, tests, edge cases, verdict).

    Transient model overload (503) is retried with exponential backoff.
    """,
    responses={
        200: {"description": "Review produced"},
        400: {"model": ErrorResponse, "description": "Missing code or malformed body"},
        499: {"model": ErrorResponse, "description": "Review deadline expired"},
        500: {"model": ErrorResponse, "description": "AI service error"},
        503: {"model": ErrorResponse, "description": "AI model overloaded, retries exhausted"},
    },
)
async def get_review(
    body: ReviewBody,
    service: ReviewService = Depends(get_review_service),
    settings: Settings = Depends(get_settings),
) -> ReviewResponse:
    start_time = time.perf_counter()
    request = body.to_request()

    cancel_event = asyncio.Event()
    deadline = asyncio.get_running_loop().call_later(settings.REVIEW_TIMEOUT_SECONDS, cancel_event.set)
    try:
        result = await service.review(request, cancel_event=cancel_event)
    finally:
        deadline.cancel()

    review_requests_total.labels(status=str(status.HTTP_200_OK)).inc()
    logger.info(
        "Review returned",
        language=request.language,
        duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
    )
    return ReviewResponse(review=result.text)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Liveness plus whether the Gemini API key is configured. Does not call the model.",
)
async def health_check(
    settings: Settings = Depends(get_settings),
    llm_client: BaseLLMClient = Depends(get_llm_client),
) -> HealthResponse:
    configured = llm_client.has_api_key
    services = {"gemini": "configured" if configured else "missing_api_key"}
    return HealthResponse(
        status="healthy" if configured else "degraded",
        version=settings.APP_VERSION,
        services=services,
    )
