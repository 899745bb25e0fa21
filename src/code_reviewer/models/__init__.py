"""
Pydantic data models for the Code Review Service.

Includes:
- Review models (ReviewRequest, ReviewResult)
- LLM models (ModelInvocationParams, RetryPolicy)
"""

from code_reviewer.models.llm_models import ModelInvocationParams, RetryPolicy
from code_reviewer.models.review_models import DEFAULT_LANGUAGE, ReviewRequest, ReviewResult

__all__ = [
    # Review models
    "DEFAULT_LANGUAGE",
    "ReviewRequest",
    "ReviewResult",
    # LLM models
    "ModelInvocationParams",
    "RetryPolicy",
]
