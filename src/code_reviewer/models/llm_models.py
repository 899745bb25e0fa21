"""
Models for the remote generation call.

These are internal to the request layer: what we send to the model
(ModelInvocationParams) and how hard we try (RetryPolicy). The raw
response itself stays opaque until the response normalizer reads it.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ModelInvocationParams(BaseModel):
    """
    One remote generation call.

    Built once per review and reused, unchanged, for every attempt.
    """
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model: str = Field(..., min_length=1, description="Model identifier (e.g., 'gemini-2.5-flash')")
    prompt: str = Field(..., description="Complete prompt (system instruction + user code)")


class RetryPolicy(BaseModel):
    """
    Bounds for the resilient invoker.

    max_attempts counts every call, the first one included.
    """
    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=5, ge=1, description="Total remote calls allowed")
    base_delay_ms: int = Field(default=600, gt=0, description="Backoff base delay in milliseconds")
    max_delay_ms: int = Field(default=8000, gt=0, description="Backoff cap in milliseconds")

    @model_validator(mode="after")
    def _cap_not_below_base(self) -> "RetryPolicy":
        if self.max_delay_ms < self.base_delay_ms:
            raise ValueError("max_delay_ms must be >= base_delay_ms")
        return self
