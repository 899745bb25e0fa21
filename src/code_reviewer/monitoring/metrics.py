"""Custom Prometheus metrics for the Code Review Service.

These metrics are exposed at /metrics endpoint and should be scraped by Prometheus.
Alert rules should be configured for:
- retries_total (sustained 503 retries mean the model is overloaded)
- service_errors_total (terminal failures surfaced to callers)
- llm_latency_seconds (slow remote calls)
"""

from prometheus_client import Counter, Histogram

# === Retry Metrics ===

retries_total = Counter(
    "retries_total",
    "Retryable remote failures that led to a backoff wait",
    ["status_code"],
)
"""
Retry counter by the status code that triggered it.

Labels:
- status_code: always "503" today (the only retryable status)

Alert thresholds:
- WARN: retry rate > 10% of remote calls
"""

service_errors_total = Counter(
    "service_errors_total",
    "Terminal review failures by error type",
    ["error_type"],
)
"""
Labels:
- error_type: InputError, FatalServiceError, ExhaustedServiceError, ReviewCancelledError
"""

# === LLM Performance Metrics ===

llm_latency_seconds = Histogram(
    "llm_latency_seconds",
    "Remote generation latency in seconds",
    ["model", "success"],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0],
)

# === Request Metrics ===

review_requests_total = Counter(
    "review_requests_total",
    "Review requests handled by the API",
    ["status"],
)
