"""
Review request/result models.

ReviewRequest deliberately accepts an empty `code`: rejecting it is the
review service's job, so that the caller gets a 400 InputError rather than
a schema error.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_LANGUAGE = "generic"


class ReviewRequest(BaseModel):
    """Code snippet submitted for review."""
    model_config = ConfigDict(frozen=True)

    code: str = Field(default="", description="Source code to review")
    language: str = Field(
        default=DEFAULT_LANGUAGE,
        description="Language used for the code fence (e.g., 'python', 'javascript')",
    )

    @field_validator("code", mode="before")
    @classmethod
    def _none_code_is_empty(cls, value: Optional[str]) -> str:
        return "" if value is None else value

    @field_validator("language", mode="before")
    @classmethod
    def _default_language(cls, value: Optional[str]) -> str:
        if value is None or not str(value).strip():
            return DEFAULT_LANGUAGE
        return str(value).strip()

    @property
    def has_code(self) -> bool:
        return bool(self.code.strip())


class ReviewResult(BaseModel):
    """Normalized review text returned by the model."""
    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Markdown review")
