"""
Response normalizer: one string out of any provider response shape.

Provider versions disagree on where the text lives. The strategies below are
tried in order and the first one that returns a value wins:

1. candidates[0].content.parts[*].text, joined with newlines
2. text
3. response.text
4. serialization of the whole response

Normalization never raises. A strategy that blows up on an unexpected shape
degrades to the serialized response.
"""

from typing import Any, Callable, Optional

import structlog

from code_reviewer.llm.text_utils import get_field, get_path, serialize_raw

logger = structlog.get_logger(__name__)

ExtractionStrategy = Callable[[Any], Optional[str]]


def from_candidates(raw: Any) -> Optional[str]:
    """Join the text of every part of the first candidate."""
    candidates = get_field(raw, "candidates")
    if not candidates:
        return None
    parts = get_path(candidates[0], "content", "parts")
    if not isinstance(parts, (list, tuple)):
        return None
    return "\n".join(
        "" if get_field(part, "text") is None else str(get_field(part, "text"))
        for part in parts
    )


def from_text(raw: Any) -> Optional[str]:
    """Flat `text` field (SDK convenience accessor, simple REST shapes)."""
    return get_field(raw, "text")


def from_response_wrapper(raw: Any) -> Optional[str]:
    """Legacy SDKs nest the result under `response.text`."""
    return get_path(raw, "response", "text")


EXTRACTION_STRATEGIES: tuple[ExtractionStrategy, ...] = (
    from_candidates,
    from_text,
    from_response_wrapper,
)


def extract_text(raw: Any) -> str:
    """
    Extract the review text from a raw provider response.

    Args:
        raw: Whatever the client returned (dict, SDK object, ...)

    Returns:
        The text, or the serialized response when no strategy matches
    """
    try:
        for strategy in EXTRACTION_STRATEGIES:
            text = strategy(raw)
            if text is not None:
                return str(text)
    except Exception as e:
        logger.error(
            "Error extracting text from AI response",
            error=str(e),
            error_type=type(e).__name__,
            strategy=getattr(strategy, "__name__", repr(strategy)),
        )
        return serialize_raw(raw)

    logger.warning("Unrecognized AI response shape, returning serialized response")
    return serialize_raw(raw)
