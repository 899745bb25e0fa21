"""
API-specific request and response models for FastAPI endpoints.

The request body is intentionally lenient (code may be absent): an empty
or missing snippet is rejected by ReviewService with a 400, the same way
the core rejects it when called directly.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from code_reviewer.models.review_models import ReviewRequest


class ReviewBody(BaseModel):
    """Body of POST /ai/get-review."""

    code: Optional[str] = Field(
        default=None,
        description="Source code to review",
        examples=["console.log(1)"],
    )
    language: Optional[str] = Field(
        default=None,
        description="Language of the snippet (defaults to 'generic')",
        examples=["javascript"],
    )

    def to_request(self) -> ReviewRequest:
        return ReviewRequest(code=self.code, language=self.language)


class ReviewResponse(BaseModel):
    """Successful review."""

    review: str = Field(description="Markdown review produced by the model")


class ErrorResponse(BaseModel):
    """Error body shared by every failing endpoint."""

    error: str = Field(description="Machine-readable error kind", examples=["invalid_input"])
    message: str = Field(description="Human-readable message")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = Field(
        description="Overall health status",
        examples=["healthy", "degraded"]
    )
    version: str = Field(description="Service version")
    services: dict[str, str] = Field(
        default_factory=dict,
        description="Status of individual dependencies",
        examples=[{"gemini": "configured"}]
    )
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
