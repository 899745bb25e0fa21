"""
Transient-error classifier.

Only "service overloaded" (503) is worth retrying. Validation errors (400),
auth errors (401/403), rate limits (429), other server errors and failures
with no status at all are terminal.
"""

from typing import Any, Optional

from code_reviewer.llm.text_utils import get_field, get_path

SERVICE_OVERLOADED = 503

# Checked in order, first integer wins.
STATUS_FIELD_PATHS: tuple[tuple[str, ...], ...] = (
    ("status",),
    ("status_code",),
    ("response", "status"),
    ("response", "status_code"),
    ("error", "code"),
)


def _as_status(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value or None


def resolve_status_code(failure: Any) -> Optional[int]:
    """
    Status code carried by a failure, None when there is none.

    Direct status first, then the nested response status, then the
    nested error code.
    """
    for path in STATUS_FIELD_PATHS:
        try:
            status = _as_status(get_path(failure, *path))
        except Exception:
            # Properties on third-party error objects may raise when read
            status = None
        if status is not None:
            return status
    return None


def is_retryable(failure: Any) -> bool:
    return resolve_status_code(failure) == SERVICE_OVERLOADED
