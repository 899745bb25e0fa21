"""Prometheus metrics for the Code Review Service."""

from code_reviewer.monitoring.metrics import (
    llm_latency_seconds,
    retries_total,
    review_requests_total,
    service_errors_total,
)

__all__ = [
    "llm_latency_seconds",
    "retries_total",
    "review_requests_total",
    "service_errors_total",
]
