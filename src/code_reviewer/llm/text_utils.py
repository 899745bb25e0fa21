"""Helpers for reading loosely-shaped provider objects.

Provider SDKs return attribute-style objects, the REST API returns dicts.
Both the error classifier and the response normalizer read through these.
"""

import json
from typing import Any

_MISSING = object()


def get_field(obj: Any, name: str, default: Any = None) -> Any:
    """Read `name` from a mapping key or an attribute, whichever exists."""
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(name, default)
    value = getattr(obj, name, _MISSING)
    if value is _MISSING:
        return default
    return value


def get_path(obj: Any, *names: str) -> Any:
    """Follow a chain of fields, returning None as soon as one is missing.

    >>> get_path({"response": {"text": "hi"}}, "response", "text")
    'hi'
    """
    current = obj
    for name in names:
        current = get_field(current, name)
        if current is None:
            return None
    return current


def serialize_raw(obj: Any) -> str:
    """JSON representation of an arbitrary value; falls back to repr(). Never raises."""
    try:
        return json.dumps(obj, default=_to_jsonable, ensure_ascii=False)
    except Exception:
        pass
    try:
        return repr(obj)
    except Exception:
        return f"<{type(obj).__name__}>"


def _to_jsonable(value: Any) -> Any:
    if hasattr(value, "model_dump"):
        return value.model_dump()
    if hasattr(value, "__dict__"):
        return {k: v for k, v in vars(value).items() if not k.startswith("_")}
    return str(value)
