"""Review orchestration: request in, normalized review text out."""

from code_reviewer.review.service import ReviewService

__all__ = ["ReviewService"]
